import logging
from typing import Dict
from typing import Iterable
from typing import List
from typing import Optional
from typing import Pattern
from typing import Tuple

from massif_tsv._aggregate import GroupKey
from massif_tsv._aggregate import aggregate
from massif_tsv._records import METRIC_NAMES
from massif_tsv._snapshot import Snapshot

logger = logging.getLogger(__name__)

Row = List[Optional[int]]

DEFAULT_COLUMNS = ("nth",) + METRIC_NAMES


class TableReporter:
    def __init__(self, columns: List[str], rows: List[Row]):
        super().__init__()
        self.columns = columns
        self.rows = rows

    @classmethod
    def from_snapshots(
        cls,
        snapshots: Iterable[Snapshot],
        *,
        group_key: GroupKey = GroupKey.FUNCTION,
        label_filter: Optional[Pattern[str]] = None,
    ) -> "TableReporter":
        """Build one row per snapshot with a column per discovered label.

        Labels get a column the first time a snapshot reports them, so rows
        of earlier snapshots are shorter than the final list of columns.
        """
        logger.info("Collecting allocations by %s", group_key.name.lower())
        extra_columns: List[str] = []
        rows: List[Row] = []
        for snapshot in snapshots:
            row: Row = [snapshot.index]
            row.extend(snapshot.metrics.get(name) for name in METRIC_NAMES)

            collected: Dict[str, int] = aggregate(snapshot, group_key)
            for label in extra_columns:
                row.append(collected.pop(label, 0))

            for label, size in collected.items():
                if label_filter is not None and not label_filter.search(label):
                    continue
                extra_columns.append(label)
                row.append(size)
            rows.append(row)

        return cls(list(DEFAULT_COLUMNS) + extra_columns, rows)


def assemble(
    snapshots: Iterable[Snapshot],
    group_key: GroupKey = GroupKey.FUNCTION,
    label_filter: Optional[Pattern[str]] = None,
) -> Tuple[List[str], List[Row]]:
    table = TableReporter.from_snapshots(
        snapshots, group_key=group_key, label_filter=label_filter
    )
    return table.columns, table.rows
