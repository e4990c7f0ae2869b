from __future__ import annotations

import threading
from datetime import date, datetime
from decimal import Decimal
from typing import Any

import msgspec
import pytest

from ledgerjson import (
    DecodeError,
    EncodeError,
    InvariantViolation,
    Mapper,
    MapperConfig,
    Module,
    core_module,
    create_mapper,
    errors,
    time_module,
)
from ledgerjson.codec.dates import DateCodec
from ledgerjson.mapper import DECODER_CACHE_SIZE
from ledgerjson.types import (
    SHA256,
    BusinessCalendar,
    CompositeKey,
    NodeInfo,
    Party,
    PublicKey,
    SecureHash,
)


class Trade(msgspec.Struct):
    trade_date: date
    notional: Decimal
    document: SHA256
    buyer_key: PublicKey
    seller_key: CompositeKey
    calendar: BusinessCalendar


class Advert(msgspec.Struct):
    node: NodeInfo
    hashes: list[SecureHash]


class Schedule(msgspec.Struct):
    calendar: BusinessCalendar


class Payment(msgspec.Struct):
    amount: Decimal


class Dated(msgspec.Struct):
    settled: date
    fixings: list[date] = []


class Keyed(msgspec.Struct):
    rates: dict[date, int]


class Amounts(msgspec.Struct):
    amounts: list[Decimal]


class Unregistered:
    pass


class Holder(msgspec.Struct):
    value: Unregistered


def test_encode_document(mapper, public_key, composite_key):
    h = SHA256.digest(b'contract')
    doc = {
        'date': date(2020, 1, 2),
        'hash': h,
        'key': public_key,
        'composite': composite_key,
        'amount': Decimal('1.50'),
    }
    decoded = msgspec.json.decode(mapper.encode(doc))
    assert decoded == {
        'date': '2020-01-02',
        'hash': str(h),
        'key': public_key.to_base58(),
        'composite': composite_key.to_base58(),
        'amount': '1.50',
    }


def test_encode_is_indented(mapper):
    assert mapper.encode({'a': [1, 2]}) == b'{\n  "a": [\n    1,\n    2\n  ]\n}'


def test_encode_compact():
    mapper = create_mapper(MapperConfig(indent=0))
    assert mapper.encode({'a': [1, 2]}) == b'{"a":[1,2]}'


def test_decode_struct(mapper, public_key, composite_key):
    h = SHA256.digest(b'contract')
    data = mapper.encode(
        {
            'trade_date': date(2021, 6, 30),
            'notional': Decimal('1000000.00'),
            'document': h,
            'buyer_key': public_key,
            'seller_key': composite_key,
            'calendar': 'UK',
        }
    )
    trade = mapper.decode(data, Trade)
    assert trade.trade_date == date(2021, 6, 30)
    assert trade.notional == Decimal('1000000.00')
    assert str(trade.notional) == '1000000.00'
    assert trade.document == h
    assert trade.buyer_key == public_key
    assert trade.seller_key == composite_key
    assert trade.calendar == BusinessCalendar.get_instance('UK')


def test_roundtrip_struct(mapper, node_info):
    advert = Advert(node_info, [SHA256.digest(b'a'), SHA256.digest(b'b')])
    assert mapper.decode(mapper.encode(advert), Advert) == advert


def test_calendar_array_in_struct(mapper):
    schedule = mapper.decode(b'{"calendar": ["UK", "US"]}', Schedule)
    assert schedule.calendar == BusinessCalendar.get_instance('UK', 'US')


def test_big_decimal_untyped(mapper):
    doc = mapper.decode(b'{"amount": 1234567890.1234567890}')
    assert isinstance(doc['amount'], Decimal)
    assert str(doc['amount']) == '1234567890.1234567890'


def test_big_decimal_typed(mapper):
    payment = mapper.decode(b'{"amount": 1234567890.1234567890}', Payment)
    assert str(payment.amount) == '1234567890.1234567890'


def test_big_decimal_top_level(mapper):
    value = mapper.decode(b'98765432109876543210.5', Decimal)
    assert value == Decimal('98765432109876543210.5')


def test_big_decimal_disabled():
    mapper = create_mapper(MapperConfig(big_decimal=False))
    assert isinstance(mapper.decode(b'1.5'), float)


@pytest.mark.parametrize(
    'data, type, error',
    [
        (b'"13/1/2020"', date, errors.InvalidDate),
        (b'"2021-02-30"', date, errors.InvalidDate),
        (b'"SHA256:ABCD"', SHA256, errors.InvalidHash),
        (b'"0OIl"', PublicKey, errors.InvalidPublicKey),
        (b'"0OIl"', CompositeKey, errors.InvalidCompositeKey),
        (b'"0OIl"', NodeInfo, errors.InvalidRecord),
        (b'["NoSuchCalendar"]', BusinessCalendar, errors.InvalidCalendar),
        (b'"abc"', Decimal, errors.InvalidDecimal),
    ],
)
def test_decode_top_level_errors(mapper, data, type, error):
    with pytest.raises(error):
        mapper.decode(data, type)


def test_decode_field_error_propagates(mapper):
    valid = str(SHA256.digest(b'a'))
    data = f'{{"hashes": ["{valid}", "nope"], "node": "x"}}'.encode()
    with pytest.raises(errors.InvalidHash) as info:
        mapper.decode(data, Advert)
    assert info.value.text == 'nope'


def test_decode_field_record_error(mapper):
    with pytest.raises(errors.InvalidRecord):
        mapper.decode(b'{"node": "0OIl", "hashes": []}', Advert)


def test_decode_invalid_date_field(mapper):
    with pytest.raises(errors.InvalidDate) as info:
        mapper.decode(b'{"settled": "2021-02-30"}', Dated)
    assert info.value.text == '2021-02-30'
    assert info.value.cause is not None


def test_decode_invalid_date_in_list(mapper):
    data = b'{"settled": "2021-01-04", "fixings": ["2021-01-05", "5/1/2021"]}'
    with pytest.raises(errors.InvalidDate) as info:
        mapper.decode(data, Dated)
    assert info.value.text == '5/1/2021'


def test_decode_non_string_date_field(mapper):
    with pytest.raises(errors.InvalidDate) as info:
        mapper.decode(b'{"settled": 20210104}', Dated)
    assert info.value.text == 20210104


def test_decode_date_keys(mapper):
    keyed = mapper.decode(b'{"rates": {"2021-01-04": 1, "2021-01-05": 2}}', Keyed)
    assert keyed.rates == {date(2021, 1, 4): 1, date(2021, 1, 5): 2}


def test_decode_invalid_date_key(mapper):
    with pytest.raises(errors.InvalidDate) as info:
        mapper.decode(b'{"rates": {"2021-01-04": 1, "2021-02-30": 2}}', Keyed)
    assert info.value.text == '2021-02-30'


@pytest.mark.parametrize('text', ['NaN', 'Infinity', '-Infinity'])
def test_decode_non_finite_decimal_field(mapper, text):
    with pytest.raises(errors.InvalidDecimal) as info:
        mapper.decode(f'{{"amount": "{text}"}}'.encode(), Payment)
    assert info.value.text == text


def test_decode_non_finite_decimal_in_list(mapper):
    with pytest.raises(errors.InvalidDecimal):
        mapper.decode(b'{"amounts": ["1.5", "NaN"]}', Amounts)
    assert mapper.decode(b'{"amounts": ["1.5", 2]}', Amounts) == Amounts(
        [Decimal('1.5'), Decimal(2)]
    )


def test_typed_decoders_are_cached(mapper):
    for _ in range(3):
        mapper.decode(b'{"amount": 1}', Payment)
    info = mapper._typed.cache_info()
    assert info.maxsize == DECODER_CACHE_SIZE
    assert info.hits == 2
    assert info.currsize == 1


def test_decode_malformed_document(mapper):
    with pytest.raises(DecodeError) as info:
        mapper.decode(b'{"a": ', Trade)
    assert not isinstance(info.value, errors.ParseError)


def test_decode_unregistered_type(mapper):
    with pytest.raises(DecodeError):
        mapper.decode(b'{"value": 1}', Holder)


def test_top_level_values(mapper, public_key, node_info):
    for value, type in [
        (date(1999, 12, 31), date),
        (public_key, PublicKey),
        (node_info, NodeInfo),
        (SHA256.digest(b'x'), SecureHash),
        (Decimal('1E+3'), Decimal),
    ]:
        assert mapper.decode(mapper.encode(value), type) == value


def test_encode_datetime(mapper):
    assert mapper.encode(datetime(2020, 1, 2, 3, 4, 5)) == b'"2020-01-02T03:04:05"'


def test_encode_party(mapper, party):
    assert mapper.encode({'party': party}) == b'{\n  "party": "O=Bank A, L=London, C=GB"\n}'


def test_encode_invariant_violation(mapper):
    key = PublicKey(b'\x02' * 33, scheme='ECDSA_SECP256K1_SHA256')
    with pytest.raises(InvariantViolation):
        mapper.encode({'key': key})


def test_encode_unsupported(mapper):
    with pytest.raises(EncodeError):
        mapper.encode({'calendar': BusinessCalendar.get_instance('UK')})
    with pytest.raises(EncodeError):
        mapper.encode(object())


def test_create_mapper_is_idempotent(node_info):
    first, second = create_mapper(), create_mapper()
    assert first is not second
    assert first.config == second.config
    assert first.encode(node_info) == second.encode(node_info)
    assert [m.name for m in first.modules] == ['time', 'core']
    for a, b in zip(first.modules, second.modules):
        assert a is not b
        assert set(a.encoders) == set(b.encoders)
        assert set(a.decoders) == set(b.decoders)


def test_modules_are_read_only():
    module = core_module()
    with pytest.raises(TypeError):
        module.decoders[date] = DateCodec()  # type: ignore[index]


def test_duplicate_type_across_modules():
    with pytest.raises(errors.RegistryError):
        Mapper([time_module(), Module('extra', [DateCodec()])])


def test_duplicate_type_in_module():
    with pytest.raises(errors.RegistryError):
        Module('dupes', ['date', DateCodec()])


def test_lookup_tables(mapper):
    assert mapper.decoder_for(SHA256).type is SHA256
    assert mapper.decoder_for(SecureHash).type is SecureHash
    assert mapper.encoder_for(SHA256).type is SHA256
    assert mapper.decoder_for(Party) is None
    assert mapper.encoder_for(BusinessCalendar) is None


def test_shared_mapper_threads(mapper, node_info):
    expected = mapper.encode(node_info)
    results: list[Any] = []

    def work():
        for _ in range(20):
            results.append(mapper.decode(mapper.encode(node_info), NodeInfo) == node_info)
            results.append(mapper.encode(node_info) == expected)

    threads = [threading.Thread(target=work) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(results) == 160
    assert all(results)
