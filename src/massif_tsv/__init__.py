from ._aggregate import BELOW_THRESHOLD_LABEL
from ._aggregate import GroupKey
from ._aggregate import aggregate
from ._descriptor import Descriptor
from ._descriptor import parse_descriptor
from ._errors import AggregationShapeError
from ._errors import MassifError
from ._errors import MassifFormatError
from ._errors import TreeConsistencyError
from ._records import classify_line
from ._snapshot import MAX_DEPTH
from ._snapshot import AllocationNode
from ._snapshot import Snapshot
from ._snapshot import TreeBuilder
from ._snapshot import parse_snapshots
from ._version import __version__

__all__ = [
    "AllocationNode",
    "AggregationShapeError",
    "BELOW_THRESHOLD_LABEL",
    "Descriptor",
    "GroupKey",
    "MAX_DEPTH",
    "MassifError",
    "MassifFormatError",
    "Snapshot",
    "TreeBuilder",
    "TreeConsistencyError",
    "aggregate",
    "classify_line",
    "parse_descriptor",
    "parse_snapshots",
    "__version__",
]
