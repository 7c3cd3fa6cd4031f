"""Collapse the allocation tree of a snapshot into bytes per label."""
import enum
import re
from collections import Counter
from typing import Dict
from typing import Optional
from typing import Pattern
from typing import Tuple

from massif_tsv._errors import AggregationShapeError
from massif_tsv._snapshot import AllocationNode
from massif_tsv._snapshot import Snapshot

BELOW_THRESHOLD_LABEL = "below_threshold"


class GroupKey(enum.Enum):
    FUNCTION = "func"
    FILE = "file"
    CALL_SITE = "line"


class Action(enum.Enum):
    PASS_THROUGH = enum.auto()
    BELOW_THRESHOLD = enum.auto()
    COUNT = enum.auto()


# Evaluated in order, the first match wins.
COLLAPSE_RULES: Tuple[Tuple[Pattern[str], Action], ...] = (
    (re.compile(r"objspace_xmalloc"), Action.PASS_THROUGH),
    (re.compile(r"objspace_xrealloc"), Action.PASS_THROUGH),
    (re.compile(r"ruby_xmalloc"), Action.PASS_THROUGH),
    (re.compile(r"ruby_xcalloc"), Action.PASS_THROUGH),
    (re.compile(r"ruby_xrealloc2"), Action.PASS_THROUGH),
    (re.compile(r"malloc/new/new"), Action.PASS_THROUGH),
    (re.compile(r"below massif"), Action.BELOW_THRESHOLD),
)


def classify_descriptor(descriptor: Optional[str]) -> Action:
    if descriptor is None:
        return Action.PASS_THROUGH
    for pattern, action in COLLAPSE_RULES:
        if pattern.search(descriptor):
            return action
    return Action.COUNT


def node_label(node: AllocationNode, group_key: GroupKey) -> str:
    if group_key is GroupKey.FUNCTION:
        if node.function_name is None:
            raise AggregationShapeError(
                "Cannot determine the function of", descriptor=str(node.descriptor)
            )
        return f"{node.function_name}@{node.file_name}"
    if group_key is GroupKey.FILE:
        if node.file_name is None:
            raise AggregationShapeError(
                "Cannot determine the file of", descriptor=str(node.descriptor)
            )
        return node.file_name
    assert node.descriptor is not None
    return node.descriptor


def aggregate(snapshot: Snapshot, group_key: GroupKey) -> Dict[str, int]:
    """Sum the bytes of the interesting frames of ``snapshot`` by label.

    Allocator wrappers are transparent and only lead to the frames below
    them. A counted frame absorbs the bytes of its whole subtree, so its
    children are never visited.
    """
    result: Dict[str, int] = Counter()
    stack = [snapshot.root]
    while stack:
        node = stack.pop()
        action = classify_descriptor(node.descriptor)
        if action is Action.PASS_THROUGH:
            # Reversed so that labels are discovered in the order of the log.
            stack.extend(reversed(list(snapshot.children_of(node))))
        elif action is Action.BELOW_THRESHOLD:
            result[BELOW_THRESHOLD_LABEL] += node.byte_size
        else:
            result[node_label(node, group_key)] += node.byte_size
    return dict(result)
