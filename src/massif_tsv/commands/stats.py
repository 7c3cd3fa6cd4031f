import argparse
from pathlib import Path
from typing import Optional

from massif_tsv._aggregate import GroupKey
from massif_tsv._errors import MassifCommandError
from massif_tsv.reporters.stats import StatsReporter

from .common import add_collect_key_argument
from .common import read_snapshots
from .common import validate_results_file


class StatsCommand:
    """Show the peak memory usage of a massif output file in the terminal"""

    def prepare_parser(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("results", help="Output file of a massif run")

        def valid_positive_int(value: str) -> int:
            try:
                ivalue = int(value)
                if ivalue <= 0:
                    raise ValueError
            except ValueError:
                raise argparse.ArgumentTypeError(
                    f"{value} is an invalid positive int value"
                )

            return ivalue

        parser.add_argument(
            "-n",
            "--num-largest",
            help="Displays the top 'n' largest allocating locations. Default is 5",
            type=valid_positive_int,
            default=5,
        )
        add_collect_key_argument(parser)
        parser.add_argument(
            "--json",
            help="Exports stats to a JSON file",
            action="store_true",
            default=False,
        )
        parser.add_argument(
            "-o",
            "--output",
            help="Output file name for JSON output",
            default=None,
        )
        parser.add_argument(
            "-f",
            "--force",
            help="If the JSON output file already exists, overwrite it",
            action="store_true",
            default=False,
        )

    def run(self, args: argparse.Namespace, parser: argparse.ArgumentParser) -> None:
        result_path = validate_results_file(args.results)

        json_output_file: Optional[Path] = None
        if args.json:
            if args.output:
                json_output_file = Path(args.output)
            else:
                json_output_file = result_path.with_name(
                    "massif-stats-" + result_path.name + ".json"
                )

            if not args.force and json_output_file.exists():
                raise MassifCommandError(
                    f"File already exists, will not overwrite: {json_output_file}",
                    exit_code=1,
                )

        snapshots = read_snapshots(result_path)
        reporter = StatsReporter(
            snapshots, args.num_largest, group_key=GroupKey(args.collect_key)
        )
        reporter.render(json_output_file=json_output_file)
        if json_output_file is not None:
            print(f"Wrote {json_output_file}")
