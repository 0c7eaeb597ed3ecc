import sys
import argparse
import logging

from typing import List, Optional

from .cli import cli


def parse_arguments() -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog='scenario-splitter')

    parser.add_argument(
        '--verbose',
        action='store_true',
        required=False,
        default=False,
        help='verbose output',
    )

    parser.add_argument(
        '--no-verbose',
        nargs='+',
        type=str,
        default=None,
        help='name of loggers to disable',
    )

    parser.add_argument(
        '--log-file',
        type=str,
        default=None,
        required=False,
        help='also write log messages to this file',
    )

    parser.add_argument(
        '--version',
        action='store_true',
        required=False,
        default=False,
        help='print version and exit',
    )

    parser.add_argument(
        '--include-tags',
        nargs='+',
        type=str,
        default=None,
        help='only generate scenarios that has at least one of these tags',
    )

    parser.add_argument(
        '--exclude-tags',
        nargs='+',
        type=str,
        default=None,
        help='do not generate scenarios that has any of these tags',
    )

    parser.add_argument(
        '--output-dir',
        type=str,
        default=None,
        required=False,
        help='directory where generated feature files are written, instead of stdout',
    )

    parser.add_argument(
        'files',
        nargs='*',
        type=str,
        help='feature files, or directories with feature files, optionally followed by :<line> to select scenarios',
    )

    args = parser.parse_args()

    if args.version:
        from scenario_splitter import __version__

        print(__version__, file=sys.stderr)

        raise SystemExit(0)

    if len(args.files) < 1:
        parser.error('at least one feature file or directory is required')

    return args


def setup_logging(args: argparse.Namespace) -> None:
    level = logging.INFO if not args.verbose else logging.DEBUG
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if args.log_file is not None:
        handlers.append(logging.FileHandler(args.log_file))

    logging.basicConfig(
        level=level,
        format='[%(asctime)s] %(levelname)s: %(message)s',
        handlers=handlers,
    )

    # always supress these loggers
    logging.getLogger('parse').setLevel(logging.ERROR)

    no_verbose: Optional[List[str]] = args.no_verbose

    if no_verbose is None:
        no_verbose = []

    for logger_name in no_verbose:
        if logger_name in logging.Logger.manager.loggerDict:
            logger = logging.getLogger(logger_name)
            logger.setLevel(logging.ERROR)
        else:
            print(f'!! logger "{logger_name}" does not exist', file=sys.stderr)


def main() -> None:
    args = parse_arguments()

    setup_logging(args)

    raise SystemExit(cli(args))


if __name__ == '__main__':  # pragma: no cover
    main()
