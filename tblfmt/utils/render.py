from __future__ import annotations
from itertools import zip_longest
from typing import Iterable, List, Optional, Sequence

from tblfmt.utils.columns import fit_row
from tblfmt.utils.parsing import (
    Alignment, ColumnLayout, Decoration, Overflow, WidthSpecifier,
)

# Box-drawing glyphs; ascii mode collapses all of them to '|', '-' and '+'.
V, H, CROSS = "│", "─", "┼"
TEE_DOWN, TEE_UP = "┬", "┴"
TEE_RIGHT, TEE_LEFT = "├", "┤"
TOP_LEFT, TOP_RIGHT = "┌", "┐"
BOTTOM_LEFT, BOTTOM_RIGHT = "└", "┘"


def align_and_trim(cell: str, alignment: Alignment, width: int,
                   spec: WidthSpecifier = WidthSpecifier.INDETERMINATE) -> str:
    """
    Fit a cell into exactly `width` characters.
    Overflowing cells are cut according to the column's overflow policy;
    an auto-sized column never overflows since its width comes from its content.
    """
    if len(cell) > width:
        if spec.indeterminate:
            raise AssertionError(
                f"cell of length {len(cell)} overflows auto-sized column of width {width}"
            )
        if spec.overflow is Overflow.ELLIPSIS:
            cell = cell[:max(width - 3, 0)] + "..."
        else:
            # BREAK and CUT render the same text.
            cell = cell[:width]
    pad = width - len(cell)
    if alignment is Alignment.RIGHT:
        return " " * pad + cell
    if alignment is Alignment.CENTER:
        left = pad // 2
        return " " * left + cell + " " * (pad - left)
    return cell + " " * pad


def column_widths(header: Sequence[str], data: Iterable[Sequence[str]],
                  widths: Optional[Sequence[WidthSpecifier]] = None) -> List[int]:
    out = [len(h) for h in header]
    for row in data:
        if len(row) > len(out):
            out.extend([0] * (len(row) - len(out)))
        for i, cell in enumerate(row):
            out[i] = max(out[i], len(cell))
    for i, spec in enumerate(widths or ()):
        if i < len(out) and not spec.indeterminate:
            out[i] = spec.width
    return out


def _interleave_longest(a: Sequence[str], b: Sequence[str]) -> Iterable[str]:
    """a0, b0, a1, b1, ... then the remainder of the longer sequence."""
    sentinel = object()
    for pair in zip_longest(a, b, fillvalue=sentinel):
        for x in pair:
            if x is not sentinel:
                yield x


def format_row(row: Sequence[str], widths: Sequence[int], *,
               layout: Optional[ColumnLayout] = None,
               specs: Optional[Sequence[WidthSpecifier]] = None,
               ascii: bool = False) -> str:
    specs = specs or ()

    def spec_at(i: int) -> WidthSpecifier:
        return specs[i] if i < len(specs) else WidthSpecifier.INDETERMINATE

    if layout is None:
        cells = [align_and_trim(c, Alignment.LEFT, widths[i], spec_at(i)) for i, c in enumerate(row)]
        return ("|" if ascii else V).join(cells)

    cells = []
    for i, c in enumerate(row):
        align = layout.alignment[i] if i < len(layout.alignment) else Alignment.LEFT
        cells.append(align_and_trim(c, align, widths[i], spec_at(i)))
    delims = list(layout.delimiters) if ascii else [d.replace("|", V) for d in layout.delimiters]
    return "".join(_interleave_longest(delims, cells))


def _underline(header_text: str, ascii: bool) -> str:
    # A '|' typed inside a header cell is indistinguishable from a separator.
    if ascii:
        return "".join("+" if ch == "|" else "-" for ch in header_text)
    return "".join(CROSS if ch == V else H for ch in header_text)


def render(rows: Sequence[Sequence[str]], *,
           headers: Optional[Sequence[str]] = None,
           layout: Optional[ColumnLayout] = None,
           widths: Optional[Sequence[WidthSpecifier]] = None,
           ascii: bool = False,
           decoration: Decoration = Decoration.UNDERLINE_HEADER) -> List[str]:
    """
    Render an output matrix as aligned text lines.

    Without explicit `headers` the first row is the header. With `headers`
    every row is data and the header is fitted to the row width.
    An empty matrix renders to no lines at all.
    """
    if not rows:
        return []
    if headers is not None:
        header, data = fit_row(headers, len(rows[0])), list(rows)
    else:
        header, data = list(rows[0]), list(rows[1:])

    col_w = column_widths(header, data, widths)

    def fmt(r: Sequence[str]) -> str:
        return format_row(r, col_w, layout=layout, specs=widths, ascii=ascii)

    header_text = fmt(header)
    underline = _underline(header_text, ascii)
    if ascii:
        overline = footer = underline
        side, frame = ("|", "|"), {"top": ("+", "+"), "mid": ("+", "+"), "bottom": ("+", "+")}
    else:
        overline = underline.replace(CROSS, TEE_DOWN)
        footer = underline.replace(CROSS, TEE_UP)
        side = (V, V)
        frame = {
            "top": (TOP_LEFT, TOP_RIGHT),
            "mid": (TEE_RIGHT, TEE_LEFT),
            "bottom": (BOTTOM_LEFT, BOTTOM_RIGHT),
        }

    full = decoration is Decoration.FULL

    def line(text: str, ends=side) -> str:
        return f"{ends[0]}{text}{ends[1]}" if full else text

    out: List[str] = []
    if full:
        out.append(line(overline, frame["top"]))
    out.append(line(header_text))
    if decoration is not Decoration.NONE:
        out.append(line(underline, frame["mid"]))
    out.extend(line(fmt(r)) for r in data)
    if full:
        out.append(line(footer, frame["bottom"]))
    return out
