"""Classification of the individual lines of a massif output file."""
import re
from dataclasses import dataclass
from typing import Union

from massif_tsv._errors import MassifFormatError

METRIC_NAMES = ("time", "mem_heap_B", "mem_heap_extra_B", "mem_stacks_B")

RE_SNAPSHOT = re.compile(r"^snapshot=(\d+)$")
RE_METRIC = re.compile(r"^(time|mem_heap_B|mem_heap_extra_B|mem_stacks_B)=(\d+)$")
RE_TREE_SUMMARY = re.compile(r"^(heap_tree)=(.+)$")
RE_SKIP = re.compile(r"^(?:desc:|cmd:|time_unit:|#)")
RE_ALLOCATION = re.compile(r"^( *)n(\d+): (\d+) (.+)$")


@dataclass(frozen=True)
class SnapshotStart:
    index: int


@dataclass(frozen=True)
class Metric:
    name: str
    value: int


@dataclass(frozen=True)
class TreeSummary:
    name: str
    text: str


@dataclass(frozen=True)
class Skip:
    pass


@dataclass(frozen=True)
class AllocationRecord:
    """One node of a detailed snapshot's allocation tree.

    The indentation of the line gives the depth of the node, ``sibling_count``
    is the number of children massif announces for it.
    """

    indent_width: int
    sibling_count: int
    byte_size: int
    descriptor: str


Record = Union[SnapshotStart, Metric, TreeSummary, Skip, AllocationRecord]


def classify_line(line: str) -> Record:
    line = line.rstrip("\r\n")
    if not line.strip():
        return Skip()

    match = RE_SNAPSHOT.match(line)
    if match:
        return SnapshotStart(int(match.group(1)))

    match = RE_METRIC.match(line)
    if match:
        return Metric(match.group(1), int(match.group(2)))

    match = RE_TREE_SUMMARY.match(line)
    if match:
        return TreeSummary(match.group(1), match.group(2))

    if RE_SKIP.match(line):
        return Skip()

    match = RE_ALLOCATION.match(line)
    if match:
        indent, siblings, size, descriptor = match.groups()
        return AllocationRecord(
            indent_width=len(indent),
            sibling_count=int(siblings),
            byte_size=int(size),
            descriptor=descriptor,
        )

    raise MassifFormatError("Unrecognized line", line=line)
