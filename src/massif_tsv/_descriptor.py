"""Tools for extracting call frame information from massif descriptors."""
import functools
import re
from typing import NamedTuple
from typing import Optional

RE_DESCRIPTOR_WITH_LINE = re.compile(r"(0x[0-9A-F]+): (.+) \((.+):(\d+)\)")
RE_DESCRIPTOR = re.compile(r"(0x[0-9A-F]+): (.+) \((.+)\)")


class Descriptor(NamedTuple):
    address: Optional[str] = None
    function: Optional[str] = None
    file: Optional[str] = None
    line: Optional[int] = None


@functools.lru_cache(maxsize=4096)
def parse_descriptor(text: str) -> Descriptor:
    """Split ``0xADDR: FUNCTION (FILE:LINE)`` into its parts.

    The line number is optional. Descriptors of any other shape (the
    ``below massif's threshold`` summaries, unresolved frames, ...) produce
    a ``Descriptor`` whose fields are all ``None``.
    """
    match = RE_DESCRIPTOR_WITH_LINE.search(text)
    if match:
        address, function, file, line = match.groups()
        return Descriptor(address, function, file, int(line))

    match = RE_DESCRIPTOR.search(text)
    if match:
        address, function, file = match.groups()
        return Descriptor(address, function, file)

    return Descriptor()
