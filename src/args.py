"""Argument parsing functionality for cpanfast."""

import argparse


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="cpanfast",
        description=(
            "cpanfast - concurrent CPAN dependency installer"
        ),
        add_help=True,
    )

    parser.add_argument("--notest",
                        dest="NOTEST",
                        help="Do not run unit tests",
                        action="store_true")
    parser.add_argument("--verbose",
                        dest="VERBOSE",
                        help="be verbose",
                        action="store_true")
    parser.add_argument("--local-lib",
                        dest="LOCAL_LIB",
                        help="Specify the install base to install modules",
                        action="store", type=str,
                        default="")
    parser.add_argument("--local-lib-contained",
                        dest="LOCAL_LIB_CONTAINED",
                        help="Specify the install base to install all non-core modules",
                        action="store", type=str,
                        default="")

    parser.add_argument("--workdir",
                        dest="WORKDIR",
                        help="Directory for downloads and extracted distributions (default: a fresh temp dir)",
                        action="store", type=str)
    parser.add_argument("--mirror",
                        dest="MIRROR_URL",
                        help="CPAN mirror base URL",
                        action="store", type=str)
    parser.add_argument("--metadb",
                        dest="METADB_URL",
                        help="cpanmetadb package lookup URL",
                        action="store", type=str)
    parser.add_argument("--builder",
                        dest="BUILDER",
                        help="Builder executable invoked on each distribution",
                        action="store", type=str)

    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default='INFO')
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML or YML)",
                        action="store",
                        type=str)

    parser.add_argument("packages",
                        metavar="PACKAGE",
                        help="Package names to install, in order",
                        nargs="+")

    return parser.parse_args(argv)
