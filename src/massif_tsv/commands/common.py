import argparse
import re
from pathlib import Path
from typing import List
from typing import Optional
from typing import Pattern

from massif_tsv._aggregate import GroupKey
from massif_tsv._errors import MassifCommandError
from massif_tsv._snapshot import Snapshot
from massif_tsv._snapshot import parse_snapshots


def valid_regex(value: str) -> Pattern[str]:
    try:
        return re.compile(value)
    except re.error as e:
        raise argparse.ArgumentTypeError(f"{value!r} is an invalid regex: {e}")


def add_collect_key_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--collect-key",
        help="Aggregate allocations by function (default), file or call site (line)",
        choices=[key.value for key in GroupKey],
        default=GroupKey.FUNCTION.value,
    )


def validate_results_file(results: str) -> Path:
    result_path = Path(results)
    if not result_path.exists() or not result_path.is_file():
        raise MassifCommandError(f"No such file: {results}", exit_code=1)
    return result_path


def validate_output_file(
    output: Optional[str], overwrite: bool = False
) -> Optional[Path]:
    """Ensure that the output filename provided by the user is usable."""
    if output is None:
        return None
    output_file = Path(output)
    if not overwrite and output_file.exists():
        raise MassifCommandError(
            f"File already exists, will not overwrite: {output_file}",
            exit_code=1,
        )
    return output_file


def read_snapshots(result_path: Path) -> List[Snapshot]:
    try:
        with open(result_path, encoding="utf-8", errors="replace") as f:
            return parse_snapshots(f)
    except OSError as e:
        raise MassifCommandError(
            f"Failed to read massif output in {result_path}\nReason: {e}",
            exit_code=1,
        )
