# tests/test_parsing.py
import argparse
import sys
import pytest

from tblfmt.utils import errors as E
from tblfmt.utils.parsing import (
    Alignment, ColumnLayout, Decoration, Index, InclusiveRange, InfiniteRange,
    ListMapping, Overflow, Range, SortKey, WidthSpecifier,
    parse_column_layout, parse_column_mapping, parse_decoration,
    parse_sort_key, parse_width_specifier, spec_list,
)

# ---------- COLUMN MAPPINGS ----------

def test_column_mapping_single_index():
    assert parse_column_mapping("3") == Index(3)
    assert parse_column_mapping("-1") == Index(-1)
    assert parse_column_mapping("+2") == Index(2)

def test_column_mapping_lists():
    assert parse_column_mapping("1;2;-1") == ListMapping((1, 2, -1), " ")
    assert parse_column_mapping("0;3>, ") == ListMapping((0, 3), ", ")
    assert parse_column_mapping("0;3>") == ListMapping((0, 3), "")
    with pytest.raises(E.InvalidListSyntax):
        parse_column_mapping("1;")
    with pytest.raises(E.InvalidListSyntax):
        parse_column_mapping("1;x>-")

def test_column_mapping_ranges():
    assert parse_column_mapping("2..5") == Range(2, 5, " ")
    assert parse_column_mapping("-3..-1>:") == Range(-3, -1, ":")
    assert parse_column_mapping("2..=5") == InclusiveRange(2, 5, " ")
    assert parse_column_mapping("2..") == InfiniteRange(2, " ")
    assert parse_column_mapping("3..>-") == InfiniteRange(3, "-")
    # the joiner may itself contain '>'
    assert parse_column_mapping("0..2>->") == Range(0, 2, "->")

def test_column_mapping_errors():
    with pytest.raises(E.MissingRangeEnd):
        parse_column_mapping("2..=")
    for bad in ("", "abc", "1>x", "1...3", "1..2..3", " 1", "1_0"):
        with pytest.raises(E.InvalidColumnSpecifier):
            parse_column_mapping(bad)
    # all parse errors are ValueErrors for callers that don't care which one
    with pytest.raises(ValueError):
        parse_column_mapping("..")

@pytest.mark.skipif(not hasattr(sys, "get_int_max_str_digits"), reason="no int digit limit")
def test_oversized_integers_raise_parse_errors():
    huge = "1" * 5000
    for bad in (huge, huge + "..", "0.." + huge, huge + "..=2"):
        with pytest.raises(E.InvalidColumnSpecifier):
            parse_column_mapping(bad)
    with pytest.raises(E.InvalidListSyntax):
        parse_column_mapping("0;" + huge)
    with pytest.raises(E.InvalidWidthSpecifier):
        parse_width_specifier(huge + "c")
    with pytest.raises(E.InvalidSortKey):
        parse_sort_key(huge + "n")
    with pytest.raises(argparse.ArgumentTypeError) as exc:
        spec_list(parse_sort_key)(huge + "N")
    assert "Failed to parse sort key" in str(exc.value)
    # long but convertible integers still parse
    assert parse_column_mapping("9" * 30) == Index(int("9" * 30))

def test_column_mapping_canonical_text_parses_back():
    for m in (Index(-4), ListMapping((1, 0, -2), ","), Range(2, -1, " "),
              InclusiveRange(0, 3, "|"), InfiniteRange(-3, "")):
        assert parse_column_mapping(str(m)) == m

# ---------- LAYOUT ----------

def test_layout_letters_and_delimiters():
    lay = parse_column_layout("l    c|| r")
    assert lay.alignment == (Alignment.LEFT, Alignment.CENTER, Alignment.RIGHT)
    assert lay.delimiters == ("", "    ", "|| ", "")
    assert len(lay.delimiters) == len(lay.alignment) + 1

def test_layout_edges():
    assert parse_column_layout("lll").delimiters == ("", "", "", "")
    assert parse_column_layout("| r |") == ColumnLayout((Alignment.RIGHT,), ("| ", " |"))
    assert parse_column_layout(" | ") == ColumnLayout((), (" | ",))

def test_layout_errors():
    with pytest.raises(E.InvalidCharacter) as exc:
        parse_column_layout("l|x|r")
    assert exc.value.char == "x"
    assert "Invalid character: x" in str(exc.value)
    with pytest.raises(E.InvalidCharacter):
        parse_column_layout("L")
    with pytest.raises(E.InvalidLayout):
        parse_column_layout("")

# ---------- WIDTHS ----------

def test_width_specifiers():
    assert parse_width_specifier("") is WidthSpecifier.INDETERMINATE
    assert parse_width_specifier("").indeterminate
    assert parse_width_specifier("10b") == WidthSpecifier(10, Overflow.BREAK)
    assert parse_width_specifier("10c") == WidthSpecifier(10, Overflow.CUT)
    assert parse_width_specifier("3e") == WidthSpecifier(3, Overflow.ELLIPSIS)

def test_width_specifier_errors():
    with pytest.raises(E.EllipsisWidthTooSmall):
        parse_width_specifier("2e")
    for bad in ("c", "0c", "5x", "5", "-5c", "+5c", "e5"):
        with pytest.raises(E.InvalidWidthSpecifier):
            parse_width_specifier(bad)

# ---------- SORT KEYS ----------

def test_sort_keys():
    assert parse_sort_key("2n") == SortKey(2, descending=False, numeric=True)
    assert parse_sort_key("2N") == SortKey(2, descending=True, numeric=True)
    assert parse_sort_key("0l") == SortKey(0, descending=False, numeric=False)
    assert parse_sort_key("-1L") == SortKey(-1, descending=True, numeric=False)
    for bad in ("", "n", "2", "2x", "an", "2nn"):
        with pytest.raises(E.InvalidSortKey):
            parse_sort_key(bad)

# ---------- DECORATION / ARGPARSE ADAPTERS ----------

def test_decoration_names_and_aliases():
    assert parse_decoration("f") is Decoration.FULL
    assert parse_decoration("full") is Decoration.FULL
    assert parse_decoration("n") is Decoration.NONE
    assert parse_decoration("underline-header") is Decoration.UNDERLINE_HEADER
    with pytest.raises(argparse.ArgumentTypeError):
        parse_decoration("fancy")

def test_spec_list_splits_and_reports_errors():
    widths = spec_list(parse_width_specifier)("10c,,5e")
    assert widths == [WidthSpecifier(10, Overflow.CUT), WidthSpecifier.INDETERMINATE,
                      WidthSpecifier(5, Overflow.ELLIPSIS)]
    with pytest.raises(argparse.ArgumentTypeError) as exc:
        spec_list(parse_sort_key)("1n,zz")
    assert "zz" in str(exc.value)
