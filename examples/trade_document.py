from datetime import date
from decimal import Decimal

import msgspec
from nacl.signing import SigningKey

from ledgerjson import create_mapper
from ledgerjson.types import SHA256, BusinessCalendar, Node, NodeInfo, Party, PublicKey


class Trade(msgspec.Struct):
    trade_date: date
    notional: Decimal
    document: SHA256
    calendar: BusinessCalendar
    counterparty: NodeInfo


def new_key():
    return PublicKey(SigningKey.generate().verify_key.encode())


def main():
    mapper = create_mapper()

    party = Party('O=Bank A, L=London, C=GB', Node(2, [new_key(), new_key(), new_key()]))
    info = NodeInfo('bank-a.example.com:10002', party, advertised_services=['corda.notary'])

    doc = {
        'trade_date': date(2021, 6, 30),
        'notional': Decimal('25000000.00'),
        'document': SHA256.digest(b'master agreement'),
        'calendar': ['UK', 'US'],
        'counterparty': info,
    }
    data = mapper.encode(doc)
    print(data.decode())

    trade = mapper.decode(data, Trade)
    print(f'{trade.notional=}')
    print(f'{trade.counterparty.legal_identity.name=}')
    print(f'{trade.calendar.is_working_day(date(2021, 7, 5))=}')


if __name__ == '__main__':
    try:
        main()
    except KeyboardInterrupt:
        pass
