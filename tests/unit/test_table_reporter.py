import re

from massif_tsv._aggregate import GroupKey
from massif_tsv.reporters.table import TableReporter
from massif_tsv.reporters.table import assemble
from tests.utils import SAMPLE_MASSIF_OUTPUT
from tests.utils import make_snapshots
from tests.utils import single_snapshot

DEFAULT_COLUMNS = ["nth", "time", "mem_heap_B", "mem_heap_extra_B", "mem_stacks_B"]


class TestTableReporter:
    def test_empty_report(self):
        # GIVEN / WHEN
        table = TableReporter.from_snapshots([])

        # THEN
        assert table.columns == DEFAULT_COLUMNS
        assert table.rows == []

    def test_single_snapshot_by_function(self):
        # GIVEN
        snapshots = make_snapshots(
            single_snapshot(
                """\
                n0: 60 0x1: foo (a.c:10)
                n0: 40 0x1: bar (b.c:20)
                """
            )
        )

        # WHEN
        columns, rows = assemble(snapshots, GroupKey.FUNCTION)

        # THEN
        assert columns == DEFAULT_COLUMNS + ["foo@a.c", "bar@b.c"]
        assert rows == [[0, 0, 100, 0, 0, 60, 40]]

    def test_below_threshold_column(self):
        # GIVEN
        snapshots = make_snapshots(
            single_snapshot(
                """\
                n0: 15 in 1 place, below massif's threshold (0.10%)
                """,
                heap=15,
            )
        )

        # WHEN
        columns, rows = assemble(snapshots)

        # THEN
        assert columns == DEFAULT_COLUMNS + ["below_threshold"]
        assert rows == [[0, 0, 15, 0, 0, 15]]

    def test_rows_are_ragged_and_columns_stable(self):
        # GIVEN
        snapshots = make_snapshots(SAMPLE_MASSIF_OUTPUT)

        # WHEN
        table = TableReporter.from_snapshots(snapshots, group_key=GroupKey.FUNCTION)

        # THEN
        assert table.columns == DEFAULT_COLUMNS + [
            "foo@a.c",
            "bar@b.c",
            "baz@b.c",
            "below_threshold",
        ]
        assert table.rows == [
            [0, 0, 0, 0, 0],
            [1, 1000, 100, 8, 400, 60, 40],
            [2, 2000, 250, 16, 400, 35, 0, 200, 15],
        ]

    def test_one_row_per_snapshot(self):
        # GIVEN
        snapshots = make_snapshots(SAMPLE_MASSIF_OUTPUT)

        # WHEN
        _, rows = assemble(snapshots, GroupKey.CALL_SITE)

        # THEN
        assert len(rows) == SAMPLE_MASSIF_OUTPUT.count("snapshot=")
        assert [row[0] for row in rows] == [0, 1, 2]

    def test_group_by_file(self):
        # GIVEN
        snapshots = make_snapshots(SAMPLE_MASSIF_OUTPUT)

        # WHEN
        columns, rows = assemble(snapshots, GroupKey.FILE)

        # THEN
        assert columns == DEFAULT_COLUMNS + ["a.c", "b.c", "below_threshold"]
        assert rows[2] == [2, 2000, 250, 16, 400, 35, 200, 15]

    def test_filter_restricts_new_columns(self):
        # GIVEN
        snapshots = make_snapshots(SAMPLE_MASSIF_OUTPUT)

        # WHEN
        columns, rows = assemble(
            snapshots, GroupKey.FUNCTION, label_filter=re.compile(r"@b\.c$")
        )

        # THEN
        assert columns == DEFAULT_COLUMNS + ["bar@b.c", "baz@b.c"]
        assert rows == [
            [0, 0, 0, 0, 0],
            [1, 1000, 100, 8, 400, 40],
            [2, 2000, 250, 16, 400, 0, 200],
        ]

    def test_missing_metrics_are_none(self):
        # GIVEN
        snapshots = make_snapshots("snapshot=7\ntime=3\n")

        # WHEN
        _, rows = assemble(snapshots)

        # THEN
        assert rows == [[7, 3, None, None, None]]
