from typing import Protocol
from typing import TextIO


class BaseReporter(Protocol):
    def render(self, outfile: TextIO) -> None:
        ...
