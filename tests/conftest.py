import pytest
from nacl.signing import SigningKey

from ledgerjson import create_mapper
from ledgerjson.types import Leaf, Node, NodeInfo, Party, PhysicalLocation, PublicKey


def new_key():
    return PublicKey(SigningKey.generate().verify_key.encode())


@pytest.fixture
def key_factory():
    return new_key


@pytest.fixture
def mapper():
    return create_mapper()


@pytest.fixture
def public_key():
    return new_key()


@pytest.fixture
def composite_key():
    alice, bob, charlie = new_key(), new_key(), new_key()
    return Node(2, [Leaf(alice), Node(1, [bob, charlie]), new_key()], weights=[1, 1, 2])


@pytest.fixture
def party(composite_key):
    return Party('O=Bank A, L=London, C=GB', composite_key)


@pytest.fixture
def node_info(party):
    return NodeInfo(
        'bank-a.example.com:10002',
        party,
        platform_version=3,
        advertised_services=['corda.notary.validating', 'corda.network_map'],
        physical_location=PhysicalLocation('London', 51.507222, -0.1275),
    )
