"""Command line front end: split, combine and check share lines.

    gfshamir split -k 3 -n 5 --secret 'my secret' > shares.txt
    head -3 shares.txt | gfshamir combine
"""

import argparse
import fileinput
import logging
import sys

from gfshamir.combine import load_session, validate_lines
from gfshamir.errors import ShamirError
from gfshamir.gf2 import FIELD_POLYNOMIALS
from gfshamir.shamir import split
from gfshamir.shares import format_line

logger = logging.getLogger('gfshamir')

LOG_LEVELS = ['debug', 'info', 'warning', 'error']


def get_arguments(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog='gfshamir', description="Shamir's secret sharing over GF(2^w)")
    parser.add_argument('--log-level', choices=LOG_LEVELS, default='warning',
                        help="Set log level (default '%(default)s')")
    sub = parser.add_subparsers(dest='cmd', required=True)

    p_split = sub.add_parser('split', help='split a secret into share lines')
    p_split.add_argument('-k', '--quorum', type=int, required=True, metavar='INT',
                         help='shares needed to recover the secret')
    p_split.add_argument('-n', '--shares', type=int, required=True, metavar='INT',
                         help='number of shares to produce')
    p_split.add_argument('-w', '--width', type=int, default=8,
                         choices=sorted(FIELD_POLYNOMIALS),
                         help="field width in bits (default '%(default)s')")
    p_split.add_argument('--index', type=int, action='append', metavar='INT',
                         help='share index to use, once per share (default 1..n)')
    source = p_split.add_mutually_exclusive_group()
    source.add_argument('-S', '--secret', metavar='STRING')
    source.add_argument('--secret-file', metavar='FILE',
                        help='file with the secret (default: read stdin)')

    p_combine = sub.add_parser('combine', help='recover a secret from share lines')
    p_combine.add_argument('files', nargs='*', metavar='FILE',
                           help='share files (default: read stdin)')
    output = p_combine.add_mutually_exclusive_group()
    output.add_argument('--raw', action='store_true',
                        help='write the secret bytes unchanged')
    output.add_argument('--hex', action='store_true',
                        help='print the secret as hex')

    p_check = sub.add_parser('check', help='report every problem in share lines')
    p_check.add_argument('files', nargs='*', metavar='FILE')

    return parser.parse_args(argv)


def _read_lines(files) -> list:
    # Undecodable bytes stay in the text so the parser reports them by line.
    with fileinput.input(files or ('-',), encoding='utf-8',
                         errors='surrogateescape') as lines:
        return list(lines)


def _read_secret(args) -> bytes:
    if args.secret is not None:
        return args.secret.encode('utf-8')
    if args.secret_file:
        with open(args.secret_file, 'rb') as f:
            return f.read()
    return sys.stdin.buffer.read()


def mode_split(args) -> int:
    records = split(_read_secret(args), args.shares, args.quorum,
                    width=args.width, indices=args.index)
    for record in records:
        print(format_line(record))
    return 0


def mode_combine(args) -> int:
    session = load_session(_read_lines(args.files))
    secret = session.reconstruct()
    if args.raw:
        sys.stdout.buffer.write(secret)
        sys.stdout.flush()
    elif args.hex:
        print(secret.hex())
    else:
        try:
            print(f"Answer: {secret.decode('utf-8')}")
        except UnicodeDecodeError as e:
            logger.warning('Secret is not valid UTF-8 (%s), showing raw bytes', e.reason)
            print(f"Answer: {secret!r}")
    return 0


def mode_check(args) -> int:
    errors = validate_lines(_read_lines(args.files))
    for e in errors:
        logger.error('%s: %s', e.kind, e)
    return 1 if errors else 0


def main(argv=None) -> int:
    args = get_arguments(argv)
    logging.basicConfig(format='%(levelname)s: %(message)s', stream=sys.stderr)
    logger.setLevel(args.log_level.upper())

    modes = {'split': mode_split, 'combine': mode_combine, 'check': mode_check}
    try:
        return modes[args.cmd](args)
    except ShamirError as e:
        logger.error('%s: %s', e.kind, e)
    except (ValueError, OSError) as e:
        logger.error('%s', e)
    return 1


if __name__ == '__main__':
    sys.exit(main())
