from massif_tsv._descriptor import Descriptor
from massif_tsv._descriptor import parse_descriptor


def test_descriptor_with_line_number():
    assert parse_descriptor("0x4005A1: foo (a.c:10)") == Descriptor(
        address="0x4005A1", function="foo", file="a.c", line=10
    )


def test_descriptor_without_line_number():
    assert parse_descriptor("0x4C2DB8F: malloc (in /usr/lib/vgpreload.so)") == (
        Descriptor(
            address="0x4C2DB8F",
            function="malloc",
            file="in /usr/lib/vgpreload.so",
            line=None,
        )
    )


def test_function_names_with_parentheses():
    # WHEN
    descriptor = parse_descriptor(
        "0x10A2B3: std::vector<int>::push_back(int const&) (stl_vector.h:1198)"
    )

    # THEN
    assert descriptor.function == "std::vector<int>::push_back(int const&)"
    assert descriptor.file == "stl_vector.h"
    assert descriptor.line == 1198


def test_unstructured_descriptors_have_no_fields():
    assert parse_descriptor(
        "in 3 places, all below massif's threshold (0.10%)"
    ) == Descriptor(None, None, None, None)
    assert parse_descriptor(
        "(heap allocation functions) malloc/new/new[], --alloc-fns, etc."
    ) == Descriptor()


def test_lowercase_addresses_are_not_recognized():
    assert parse_descriptor("0xabc: foo (a.c:1)") == Descriptor()
