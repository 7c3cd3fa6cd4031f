"""Utilities / Helpers for writing tests."""
from textwrap import dedent
from typing import List

from massif_tsv import Snapshot
from massif_tsv import parse_snapshots

MASSIF_HEADER = dedent(
    """\
    desc: --detailed-freq=1 --threshold=0.1
    cmd: ./my_program
    time_unit: i
    """
)

SAMPLE_MASSIF_OUTPUT = MASSIF_HEADER + dedent(
    """\
    #-----------
    snapshot=0
    #-----------
    time=0
    mem_heap_B=0
    mem_heap_extra_B=0
    mem_stacks_B=0
    heap_tree=empty
    #-----------
    snapshot=1
    #-----------
    time=1000
    mem_heap_B=100
    mem_heap_extra_B=8
    mem_stacks_B=400
    heap_tree=detailed
    n2: 100 (heap allocation functions) malloc/new/new[], --alloc-fns, etc.
     n1: 60 0x4005A1: foo (a.c:10)
      n0: 60 0x4005F0: main (main.c:5)
     n0: 40 0x4006B2: bar (b.c:20)
    #-----------
    snapshot=2
    #-----------
    time=2000
    mem_heap_B=250
    mem_heap_extra_B=16
    mem_stacks_B=400
    heap_tree=peak
    n3: 250 (heap allocation functions) malloc/new/new[], --alloc-fns, etc.
     n1: 200 0x4007C3: baz (b.c)
      n0: 200 0x4005F0: main (main.c:5)
     n0: 35 0x4005A1: foo (a.c:10)
     n0: 15 in 2 places, all below massif's threshold (0.10%)
    """
)


def make_snapshots(text: str) -> List[Snapshot]:
    return parse_snapshots(text.splitlines(keepends=True))


def single_snapshot(tree: str, *, heap: int = 100) -> str:
    """Wrap an allocation tree into a one snapshot massif output."""
    return (
        MASSIF_HEADER
        + dedent(
            f"""\
            snapshot=0
            time=0
            mem_heap_B={heap}
            mem_heap_extra_B=0
            mem_stacks_B=0
            heap_tree=detailed
            """
        )
        + dedent(tree)
    )
