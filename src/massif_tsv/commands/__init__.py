import argparse
import logging
import sys
import textwrap
from typing import List
from typing import Optional

from massif_tsv._errors import MassifCommandError
from massif_tsv._errors import MassifError
from massif_tsv._version import __version__

from .protocol import Command
from .stats import StatsCommand
from .transform import TransformCommand

_COMMANDS: List[Command] = [
    TransformCommand(),
    StatsCommand(),
]

_EXAMPLES = [
    "$ valgrind --tool=massif --detailed-freq=1 --threshold=0.1 my_program",
    "$ massif-tsv transform tsv massif.out.12345 -o massif.tsv",
    "$ massif-tsv stats massif.out.12345",
]

_DESCRIPTION = (
    "Convert the snapshots of a Valgrind massif output file into a table\n"
    "with one row per snapshot and one column per allocating location.\n\n"
    "    Example:\n\n    " + "\n    ".join(_EXAMPLES)
)

_EPILOG = textwrap.dedent(
    """\
    The allocation trees are collapsed to at most 5 levels of call frames.
    """
)


def get_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=_DESCRIPTION,
        prog="massif-tsv",
        formatter_class=argparse.RawTextHelpFormatter,
        epilog=_EPILOG,
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity. Option is additive and can be specified up to 2 times",
    )
    verbosity.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=False,
        help="Only report errors",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=__version__,
        help="Displays the current version of massif-tsv",
    )

    subparsers = parser.add_subparsers(
        help="Mode of operation",
        dest="command",
        required=True,
    )

    for command in _COMMANDS:
        # Extract the CLI command name from the classes' names
        assert command.__class__.__name__.endswith("Command")
        name = command.__class__.__name__[: -len("Command")].lower()

        command_parser = subparsers.add_parser(
            name, help=command.__doc__, description=command.__doc__, epilog=_EPILOG
        )
        command_parser.set_defaults(entrypoint=command.run)
        command.prepare_parser(command_parser)

    return parser


def determine_logging_level_from_verbosity(
    verbose_level: int,
    quiet: bool = False,
) -> int:
    if quiet:
        return logging.ERROR
    if verbose_level == 0:
        return logging.WARNING
    elif verbose_level == 1:
        return logging.INFO
    else:
        return logging.DEBUG


def main(args: Optional[List[str]] = None) -> int:
    if args is None:
        args = sys.argv[1:]

    parser = get_argument_parser()
    arg_values = parser.parse_args(args=args)
    logging.basicConfig(
        level=determine_logging_level_from_verbosity(
            arg_values.verbose, arg_values.quiet
        ),
        format="%(levelname)s(%(funcName)s): %(message)s",
    )

    try:
        arg_values.entrypoint(arg_values, parser)
    except MassifCommandError as e:
        print(e, file=sys.stderr)
        return e.exit_code
    except MassifError as e:
        print(e, file=sys.stderr)
        return 1
    else:
        return 0
