from __future__ import annotations
import argparse
import enum
import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple, Union

from tblfmt.utils import errors as UERR

_INT_RE = re.compile(r"[+-]?[0-9]+")
_UINT_RE = re.compile(r"[0-9]+")
_RANGE_RE = re.compile(r"([+-]?[0-9]+)(\.\.=?)([+-]?[0-9]+)?")


def _to_int(s: str) -> Optional[int]:
    """Strict ASCII integer parse; returns None instead of raising."""
    if not _INT_RE.fullmatch(s):
        return None
    try:
        return int(s)
    except ValueError:
        # digit count above the interpreter's int conversion limit
        return None


# -- Column mappings --

@dataclass(frozen=True)
class Index:
    index: int

    def __str__(self) -> str:
        return str(self.index)


@dataclass(frozen=True)
class ListMapping:
    indices: Tuple[int, ...]
    joiner: str = " "

    def __str__(self) -> str:
        return ";".join(map(str, self.indices)) + ">" + self.joiner


@dataclass(frozen=True)
class Range:
    start: int
    end: int
    joiner: str = " "

    def __str__(self) -> str:
        return f"{self.start}..{self.end}>{self.joiner}"


@dataclass(frozen=True)
class InclusiveRange:
    start: int
    end: int
    joiner: str = " "

    def __str__(self) -> str:
        return f"{self.start}..={self.end}>{self.joiner}"


@dataclass(frozen=True)
class InfiniteRange:
    start: int
    joiner: str = " "

    def __str__(self) -> str:
        return f"{self.start}..>{self.joiner}"


ColumnMapping = Union[Index, ListMapping, Range, InclusiveRange, InfiniteRange]


def parse_column_mapping(s: str) -> ColumnMapping:
    """
    Parse one output-column mapping:
      - "3", "-1"            single input column (negatives count from the end)
      - "0;2;-1>,"           list of columns joined by the text after '>'
      - "1..4", "1..=4", "2.." exclusive, inclusive and open ranges
    The joiner defaults to a single space.
    """
    i = _to_int(s)
    if i is not None:
        return Index(i)
    body, sep, joiner = s.partition(">")
    if not sep:
        joiner = " "

    if ";" in body:
        indices = [_to_int(p) for p in body.split(";")]
        if any(x is None for x in indices):
            raise UERR.InvalidListSyntax(f"Failed to parse list: {s!r}")
        return ListMapping(tuple(indices), joiner)

    m = _RANGE_RE.fullmatch(body)
    if m is None:
        raise UERR.InvalidColumnSpecifier(f"Invalid column specifier: {s!r}")
    start, op, end_text = _to_int(m.group(1)), m.group(2), m.group(3)
    end = _to_int(end_text) if end_text is not None else None
    if start is None or (end_text is not None and end is None):
        raise UERR.InvalidColumnSpecifier(f"Invalid column specifier: {s!r}")
    inclusive = op == "..="
    if end is None:
        if inclusive:
            raise UERR.MissingRangeEnd(f"Missing end of inclusive range: {s!r}")
        return InfiniteRange(start, joiner)
    if inclusive:
        return InclusiveRange(start, end, joiner)
    return Range(start, end, joiner)


# -- Column layout --

class Alignment(enum.Enum):
    LEFT = "l"
    RIGHT = "r"
    CENTER = "c"


_LAYOUT_CHARS = frozenset("lrc |")


@dataclass(frozen=True)
class ColumnLayout:
    alignment: Tuple[Alignment, ...]
    delimiters: Tuple[str, ...]


def parse_column_layout(s: str) -> ColumnLayout:
    """
    'l', 'r', 'c' place a left/right/centered column; runs of ' ' and '|'
    between them are printed literally as column separators.
    e.g. "r | l" -> alignment (RIGHT, LEFT), delimiters ("", " | ", "").
    """
    if not s:
        raise UERR.InvalidLayout("Layout must not be empty")
    for ch in s:
        if ch not in _LAYOUT_CHARS:
            raise UERR.InvalidCharacter(ch)
    alignment = tuple(Alignment(ch) for ch in s if ch in "lrc")
    delimiters = tuple(re.split(r"[lrc]", s))
    return ColumnLayout(alignment, delimiters)


# -- Fixed widths --

class Overflow(enum.Enum):
    BREAK = "b"
    CUT = "c"
    ELLIPSIS = "e"


@dataclass(frozen=True)
class WidthSpecifier:
    width: Optional[int] = None
    overflow: Optional[Overflow] = None

    @property
    def indeterminate(self) -> bool:
        return self.width is None


WidthSpecifier.INDETERMINATE = WidthSpecifier()


def parse_width_specifier(s: str) -> WidthSpecifier:
    if s == "":
        return WidthSpecifier.INDETERMINATE
    body, suffix = s[:-1], s[-1:]
    n = _to_int(body) if _UINT_RE.fullmatch(body) else None
    if n is None:
        raise UERR.InvalidWidthSpecifier(f"Invalid width specifier: {s!r}")
    try:
        overflow = Overflow(suffix)
    except ValueError:
        raise UERR.InvalidWidthSpecifier(f"Invalid width specifier: {s!r}") from None
    if n == 0:
        raise UERR.InvalidWidthSpecifier(f"Invalid width specifier: {s!r}")
    if overflow is Overflow.ELLIPSIS and n < 3:
        raise UERR.EllipsisWidthTooSmall(f"Ellipsis requires minimum width 3: {s!r}")
    return WidthSpecifier(n, overflow)


# -- Sort keys --

@dataclass(frozen=True)
class SortKey:
    column: int
    descending: bool = False
    numeric: bool = False


# suffix -> (descending, numeric)
_SORT_SUFFIXES = {
    "l": (False, False),
    "L": (True, False),
    "n": (False, True),
    "N": (True, True),
}


def parse_sort_key(s: str) -> SortKey:
    column = _to_int(s[:-1]) if len(s) >= 2 else None
    flags = _SORT_SUFFIXES.get(s[-1:])
    if column is None or flags is None:
        raise UERR.InvalidSortKey(f"Failed to parse sort key: {s!r}")
    return SortKey(column, *flags)


# -- Decoration --

class Decoration(enum.Enum):
    NONE = "none"
    UNDERLINE_HEADER = "underline-header"
    FULL = "full"


_DECORATION_ALIASES = {"n": Decoration.NONE, "u": Decoration.UNDERLINE_HEADER, "f": Decoration.FULL}
DECORATION_CHOICES = [d.value for d in Decoration] + list(_DECORATION_ALIASES)


def parse_decoration(s: str) -> Decoration:
    if s in _DECORATION_ALIASES:
        return _DECORATION_ALIASES[s]
    try:
        return Decoration(s)
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"invalid decoration {s!r} (choose from {', '.join(DECORATION_CHOICES)})"
        ) from None


# -- argparse adapters --

def spec_list(parse: Callable[[str], object]) -> Callable[[str], List]:
    """
    Wrap a single-token parser into an argparse ``type=`` for a ','-separated
    list, reporting parse errors as argparse errors.
    """
    def _convert(value: str) -> List:
        try:
            return [parse(tok) for tok in value.split(",")]
        except UERR.SpecError as e:
            raise argparse.ArgumentTypeError(str(e)) from e
    _convert.__name__ = getattr(parse, "__name__", "spec").replace("parse_", "")
    return _convert


def spec_value(parse: Callable[[str], object]) -> Callable[[str], object]:
    def _convert(value: str) -> object:
        try:
            return parse(value)
        except UERR.SpecError as e:
            raise argparse.ArgumentTypeError(str(e)) from e
    _convert.__name__ = getattr(parse, "__name__", "spec").replace("parse_", "")
    return _convert


def comma_list(value: str) -> List[str]:
    return value.split(",")


def build_epilog(title: str, items: list[str]) -> str:
    if not items:
        return ""
    width = max(len(x.split("  ", 1)[0]) for x in items)
    lines = ["", title]
    for x in items:
        key, _, desc = x.partition("  ")
        pad = " " * (width - len(key))
        lines.append(f"  {key}{pad}  {desc.strip()}")
    return "\n".join(lines)


def add_common_io_args(ap: argparse.ArgumentParser) -> None:
    g = ap.add_argument_group("I/O")
    g.add_argument("file", nargs="?", help="Input file (default: stdin).")
    g.add_argument("-O", "--out-file", dest="out_file", help="Output file (default: stdout).")
    g.add_argument("-d", "--delimiter", default=",",
                   help="String separating input fields (default: ',').")
    g.add_argument("-D", "--collapse-delimiters", dest="collapse_delimiters", action="store_true",
                   help="Treat a run of delimiters as one instead of creating empty fields.")
    g.add_argument("--encoding", default="utf-8")
    g.add_argument("--quiet", action="store_true")
    g.add_argument("--debug", action="store_true")
    g.add_argument("--log-file", dest="log_file")
