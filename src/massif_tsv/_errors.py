from typing import Any
from typing import Optional


class MassifError(Exception):
    """Exceptions raised in this package."""


class MassifFormatError(MassifError):
    """A line of the massif log does not have a recognized shape."""

    def __init__(self, message: str, *, line: str, lineno: Optional[int] = None):
        self.reason = message
        self.line = line
        self.lineno = lineno
        location = f"line {lineno}: " if lineno is not None else ""
        super().__init__(f"{location}{message}: {line!r}")


class TreeConsistencyError(MassifError):
    """The allocation tree of a snapshot cannot be reconstructed."""


class AggregationShapeError(MassifError):
    """An allocation node lacks the fields needed by the grouping key."""

    def __init__(self, message: str, *, descriptor: str):
        self.descriptor = descriptor
        super().__init__(f"{message}: {descriptor!r}")


class MassifCommandError(MassifError):
    """Exceptions raised from this package's CLI commands."""

    def __init__(self, *args: Any, exit_code: int) -> None:
        super().__init__(*args)
        self.exit_code = exit_code
