"""Reconstruction of the per-snapshot allocation trees of a massif log.

Massif encodes the call tree of a detailed snapshot only through the
indentation of its lines. The builder keeps track of the most recently
created node (the cursor) and, for every new record, climbs the ancestors of
the cursor until it finds the node one level above the record.
"""
import logging
from dataclasses import dataclass
from dataclasses import field
from typing import Dict
from typing import Iterable
from typing import Iterator
from typing import List
from typing import Optional

from massif_tsv._descriptor import Descriptor
from massif_tsv._descriptor import parse_descriptor
from massif_tsv._errors import MassifFormatError
from massif_tsv._errors import TreeConsistencyError
from massif_tsv._records import AllocationRecord
from massif_tsv._records import Metric
from massif_tsv._records import Record
from massif_tsv._records import SnapshotStart
from massif_tsv._records import TreeSummary
from massif_tsv._records import classify_line

logger = logging.getLogger(__name__)

MAX_DEPTH = 5

ROOT_INDEX = 0


@dataclass
class AllocationNode:
    """A node of the allocation tree.

    ``parent`` and the values of ``children`` are indices into the
    ``nodes`` arena of the owning snapshot.
    """

    level: int
    byte_size: int = 0
    descriptor: Optional[str] = None
    frame: Descriptor = Descriptor()
    parent: Optional[int] = None
    children: Dict[str, int] = field(default_factory=dict)

    @property
    def address(self) -> Optional[str]:
        return self.frame.address

    @property
    def function_name(self) -> Optional[str]:
        return self.frame.function

    @property
    def file_name(self) -> Optional[str]:
        return self.frame.file

    @property
    def line_number(self) -> Optional[int]:
        return self.frame.line


@dataclass
class Snapshot:
    index: int
    metrics: Dict[str, int] = field(default_factory=dict)
    tree_summary: Optional[str] = None
    nodes: List[AllocationNode] = field(
        default_factory=lambda: [AllocationNode(level=0)]
    )
    cursor: int = ROOT_INDEX

    @property
    def root(self) -> AllocationNode:
        return self.nodes[ROOT_INDEX]

    def children_of(self, node: AllocationNode) -> Iterator[AllocationNode]:
        for child_index in node.children.values():
            yield self.nodes[child_index]

    def find_parent(self, level: int) -> int:
        """Return the index of the closest ancestor of the cursor at ``level``."""
        index: Optional[int] = self.cursor
        while index is not None:
            node = self.nodes[index]
            if node.level == level:
                return index
            index = node.parent
        raise TreeConsistencyError(
            f"Snapshot {self.index}: no ancestor at level {level} for the "
            f"record following {self.nodes[self.cursor].descriptor!r}"
        )

    def add(self, level: int, byte_size: int, descriptor: str) -> Optional[int]:
        """Attach a new node at ``level`` (1-based) and make it the cursor.

        Records deeper than ``MAX_DEPTH`` are dropped along with their bytes
        and leave the cursor where it was.
        """
        if level > MAX_DEPTH:
            logger.debug(
                "Snapshot %d: dropping %r at depth %d", self.index, descriptor, level
            )
            return None

        parent_index = self.find_parent(level - 1)
        node = AllocationNode(
            level=level,
            byte_size=byte_size,
            descriptor=descriptor,
            frame=parse_descriptor(descriptor),
            parent=parent_index,
        )
        node_index = len(self.nodes)
        self.nodes.append(node)
        self.nodes[parent_index].children[descriptor] = node_index
        self.cursor = node_index
        return node_index


class TreeBuilder:
    def __init__(self) -> None:
        self.snapshots: List[Snapshot] = []
        self.current: Optional[Snapshot] = None

    def _require_snapshot(self, line: str) -> Snapshot:
        if self.current is None:
            raise MassifFormatError("Found data before the first snapshot", line=line)
        return self.current

    def feed(self, record: Record, line: str = "") -> None:
        if isinstance(record, SnapshotStart):
            if self.current is not None:
                self.snapshots.append(self.current)
            logger.debug("Reading snapshot %d", record.index)
            self.current = Snapshot(record.index)
        elif isinstance(record, Metric):
            self._require_snapshot(line).metrics[record.name] = record.value
        elif isinstance(record, TreeSummary):
            self._require_snapshot(line).tree_summary = record.text
        elif isinstance(record, AllocationRecord):
            self._require_snapshot(line).add(
                record.indent_width + 1, record.byte_size, record.descriptor
            )

    def finish(self) -> List[Snapshot]:
        if self.current is not None:
            self.snapshots.append(self.current)
            self.current = None
        return self.snapshots


def parse_snapshots(lines: Iterable[str]) -> List[Snapshot]:
    """Read every line of a massif log and return its snapshots in order."""
    builder = TreeBuilder()
    for lineno, line in enumerate(lines, start=1):
        try:
            builder.feed(classify_line(line), line.rstrip("\r\n"))
        except MassifFormatError as e:
            raise MassifFormatError(e.reason, line=e.line, lineno=lineno) from None
    snapshots = builder.finish()
    logger.info("Read %d snapshots", len(snapshots))
    return snapshots
