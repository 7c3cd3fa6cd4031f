import argparse
import sys

from rich import print as pprint

from massif_tsv._aggregate import GroupKey
from massif_tsv._errors import MassifCommandError

from ..reporters import BaseReporter
from ..reporters.table import TableReporter
from ..reporters.transform import TransformReporter
from .common import add_collect_key_argument
from .common import read_snapshots
from .common import valid_regex
from .common import validate_output_file
from .common import validate_results_file


class TransformCommand:
    """Convert a massif output file into a table with one row per snapshot"""

    def prepare_parser(self, parser: argparse.ArgumentParser) -> None:
        formats = ", ".join(TransformReporter.SUFFIX_MAP)
        parser.add_argument(
            "format",
            help=f"Format to use for the report. Available formats: {formats}",
        )
        parser.add_argument("results", help="Output file of a massif run")
        parser.add_argument(
            "-o",
            "--output",
            help="Output file name (defaults to the standard output)",
            default=None,
        )
        parser.add_argument(
            "-f",
            "--force",
            help="If the output file already exists, overwrite it",
            action="store_true",
            default=False,
        )
        add_collect_key_argument(parser)
        parser.add_argument(
            "--filter",
            help="Only add columns for labels matching this regular expression",
            type=valid_regex,
            default=None,
        )

    def run(self, args: argparse.Namespace, parser: argparse.ArgumentParser) -> None:
        the_format = args.format.lower()
        if the_format not in TransformReporter.SUFFIX_MAP:
            raise MassifCommandError(
                f"Format not supported: {args.format}", exit_code=1
            )

        result_path = validate_results_file(args.results)
        output_file = validate_output_file(args.output, overwrite=args.force)

        table = TableReporter.from_snapshots(
            read_snapshots(result_path),
            group_key=GroupKey(args.collect_key),
            label_filter=args.filter,
        )
        reporter: BaseReporter = TransformReporter(
            table.columns, table.rows, format=the_format
        )

        if output_file is None:
            reporter.render(sys.stdout)
            return

        with open(output_file, "w", newline="") as f:
            reporter.render(f)
        pprint(f"Wrote {output_file}", file=sys.stderr)
