import argparse
import sys

from ledgerjson import errors, logs
from ledgerjson.mapper import MapperConfig, create_mapper
from ledgerjson.types import SHA256, BusinessCalendar, NodeInfo
from ledgerjson.types.calendar import calendar_names
from ledgerjson.utils.format import format_exc

log = logs.get('ledgerjson')


def node_info_view(info: NodeInfo) -> dict:
    """Return the fields of `info` as a JSON friendly mapping."""
    location = info.physical_location
    return {
        'address': info.address,
        'legal_identity': info.legal_identity,
        'owning_key': info.legal_identity.owning_key,
        'platform_version': info.platform_version,
        'advertised_services': list(info.advertised_services),
        'physical_location': None
        if location is None
        else {
            'description': location.description,
            'latitude': location.latitude,
            'longitude': location.longitude,
        },
    }


def main(argv=None):
    parser = argparse.ArgumentParser('ledgerjson')
    parser.add_argument(
        '-v',
        '--verbose',
        action='count',
        default=0,
        help='increase logging verbosity (repeatable)',
    )
    parser.add_argument(
        '--indent',
        type=int,
        default=MapperConfig().indent,
        help='spaces to indent JSON output by, 0 for compact output',
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    cal_parser = subparsers.add_parser('calendar', help='print the holidays of merged calendars')
    cal_parser.add_argument(
        'names',
        nargs='+',
        metavar='NAME',
        help=f'one of: {", ".join(calendar_names())}',
    )

    info_parser = subparsers.add_parser('node-info', help='decode a base-58 node info')
    info_parser.add_argument('text', metavar='TEXT', help='the base-58 encoded node info')

    hash_parser = subparsers.add_parser('hash', help='print the SHA256 hash of a file')
    hash_parser.add_argument(
        'path',
        nargs='?',
        metavar='FILE',
        help='a file to hash. reads STDIN by default',
    )

    args = parser.parse_args(argv)
    logs.init(args.verbose)

    mapper = create_mapper(MapperConfig(indent=args.indent))

    try:
        if args.command == 'calendar':
            calendar = mapper.decoder_for(BusinessCalendar).decode(args.names)
            result = {'calendars': args.names, 'holidays': list(calendar.holiday_dates)}
        elif args.command == 'node-info':
            result = node_info_view(mapper.decoder_for(NodeInfo).decode(args.text))
        else:
            if args.path:
                with open(args.path, 'rb') as f:
                    data = f.read()
            else:
                data = sys.stdin.buffer.read()
            result = SHA256.digest(data)
    except (errors.LedgerJsonError, OSError) as exc:
        log.debug('command failed', exc_info=True)
        print(format_exc(exc), file=sys.stderr)
        return 1

    print(mapper.encode(result).decode())
    return 0


if __name__ == '__main__':
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        pass
