import csv
import re
from typing import Any
from typing import List
from typing import Optional
from typing import Sequence
from typing import TextIO

RE_WHITESPACE = re.compile(r"\s+")


def format_header(label: str) -> str:
    return RE_WHITESPACE.sub("_", label)


def format_cell(value: Optional[Any]) -> str:
    return "" if value is None else str(value)


class TransformReporter:
    SUFFIX_MAP = {
        "tsv": ".tsv",
        "csv": ".csv",
    }

    def __init__(
        self,
        columns: Sequence[str],
        rows: Sequence[Sequence[Optional[int]]],
        *,
        format: str,
    ) -> None:
        super().__init__()
        self.columns = columns
        self.rows = rows
        self.format = format

    def render(self, outfile: TextIO) -> None:
        renderer = getattr(self, f"render_as_{self.format}")
        renderer(outfile)

    def _header(self) -> List[str]:
        return [format_header(column) for column in self.columns]

    def render_as_tsv(self, outfile: TextIO) -> None:
        print("\t".join(self._header()), file=outfile)
        for row in self.rows:
            print("\t".join(format_cell(value) for value in row), file=outfile)

    def render_as_csv(self, outfile: TextIO) -> None:
        writer = csv.writer(outfile)
        writer.writerow(self._header())
        for row in self.rows:
            writer.writerow([format_cell(value) for value in row])
