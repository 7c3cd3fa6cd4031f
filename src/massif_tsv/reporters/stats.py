import json
from pathlib import Path
from typing import Any
from typing import Dict
from typing import Iterator
from typing import List
from typing import Optional
from typing import Sequence
from typing import Tuple

import rich

from massif_tsv._aggregate import GroupKey
from massif_tsv._aggregate import aggregate
from massif_tsv._records import METRIC_NAMES
from massif_tsv._snapshot import Snapshot

DETAILED_TREE_KINDS = {"detailed", "peak"}


def size_fmt(num: float, suffix: str = "B") -> str:
    for unit in ["", "K", "M", "G", "T", "P", "E", "Z"]:
        if abs(num) < 1024.0:
            return f"{num:5.3f}{unit}{suffix}"
        num /= 1024.0
    return f"{num:.1f}Y{suffix}"


def total_memory(snapshot: Snapshot) -> int:
    return sum(
        snapshot.metrics.get(name, 0)
        for name in ("mem_heap_B", "mem_heap_extra_B", "mem_stacks_B")
    )


def find_peak_snapshot(snapshots: Sequence[Snapshot]) -> Optional[Snapshot]:
    """Return the snapshot massif marked as the peak, or the largest one."""
    if not snapshots:
        return None
    for snapshot in snapshots:
        if snapshot.tree_summary == "peak":
            return snapshot
    return max(snapshots, key=total_memory)


class StatsReporter:
    def __init__(
        self,
        snapshots: Sequence[Snapshot],
        num_largest: int,
        group_key: GroupKey = GroupKey.FUNCTION,
    ):
        self._snapshots = snapshots
        if num_largest < 1:
            raise ValueError(f"Invalid input num_largest={num_largest}, should be >=1")
        self.num_largest = num_largest
        self.group_key = group_key
        self._peak = find_peak_snapshot(snapshots)

    def render(self, json_output_file: Optional[Path] = None) -> None:
        if json_output_file:
            self._render_to_json(json_output_file)
        else:
            self._render_to_terminal()

    def _render_to_terminal(self) -> None:
        rich.print("📏 [bold]Total snapshots:[/]")
        print(f"\t{len(self._snapshots)} ({self._num_detailed()} detailed)")

        print()
        rich.print("📦 [bold]Peak memory usage:[/]")
        if self._peak is None:
            print("\t<no snapshots>")
            return
        print(f"\tsnapshot {self._peak.index} at time {self._peak.metrics.get('time')}")
        for name in METRIC_NAMES[1:]:
            print(f"\t{name}: {size_fmt(self._peak.metrics.get(name, 0))}")

        print()
        rich.print(
            f"🥇 [bold]Top {self.num_largest} largest allocating locations "
            f"at peak (by {self.group_key.name.lower()}):[/]"
        )
        for label, size in self._get_top_labels_by_size():
            print(f"\t- {label} -> {size_fmt(size)}")

    def _render_to_json(self, out_path: Path) -> None:
        data: Dict[str, Any] = {
            "total_snapshots": len(self._snapshots),
            "detailed_snapshots": self._num_detailed(),
            "group_key": self.group_key.value,
            "peak": None,
            "top_allocations_by_size": [
                {"location": label, "size": size}
                for label, size in self._get_top_labels_by_size()
            ],
        }
        if self._peak is not None:
            data["peak"] = {
                "nth": self._peak.index,
                **{name: self._peak.metrics.get(name) for name in METRIC_NAMES},
            }

        with open(out_path, "w") as f:
            json.dump(data, f, indent=2)

    def _num_detailed(self) -> int:
        return sum(
            1
            for snapshot in self._snapshots
            if snapshot.tree_summary in DETAILED_TREE_KINDS or snapshot.root.children
        )

    def _get_top_labels_by_size(self) -> Iterator[Tuple[str, int]]:
        if self._peak is None:
            return
        collected: List[Tuple[str, int]] = sorted(
            aggregate(self._peak, self.group_key).items(),
            key=lambda item: item[1],
            reverse=True,
        )
        yield from collected[: self.num_largest]
