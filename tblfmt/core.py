from __future__ import annotations
import sys
import argparse
import re
import signal
import traceback
from typing import List, Optional, Sequence

import pandas as pd

from . import __version__
from .utils import io as UIO
from .utils import parsing as UP
from .utils import logging as ULOG
from .utils import columns as UCOL
from .utils import render as UREN
from .utils import formatters as UFMT

Row = List[str]

DEFAULT_SORT_KEYS = (UP.SortKey(column=0, descending=False, numeric=False),)

_NUM_RE = re.compile(r"[+-]?[0-9]+")
_I64_MIN, _I64_MAX = -(2 ** 63), 2 ** 63 - 1


#-- Row transformation --
def _numeric_value(field: str) -> int:
    """Base-10 signed integer for numeric sorting; anything unparsable is 0."""
    if not _NUM_RE.fullmatch(field):
        return 0
    # more than 19 significant digits can never fit in a signed 64-bit value
    if len(field.lstrip("+-").lstrip("0")) > 19:
        return 0
    v = int(field)
    return v if _I64_MIN <= v <= _I64_MAX else 0


def _sort_value(row: Sequence[str], key: UP.SortKey):
    field = UCOL.get_field(row, key.column)
    return _numeric_value(field) if key.numeric else field


def sort_rows(rows: Sequence[Sequence[str]], keys: Sequence[UP.SortKey] = DEFAULT_SORT_KEYS,
              *, ignore_first: bool = False) -> List[Row]:
    """
    Stable multi-key sort. Each key compares one field (resolved per row,
    missing fields are ''), numerically or lexicographically, and later keys
    only break ties of earlier ones. With `ignore_first` row 0 stays on top.
    """
    keys = list(keys) or list(DEFAULT_SORT_KEYS)
    head = [list(r) for r in rows[:1]] if ignore_first else []
    body = list(rows[1:]) if ignore_first else list(rows)
    if len(body) < 2:
        return head + [list(r) for r in body]

    key_frame = pd.DataFrame({
        f"k{j}": [_sort_value(r, key) for r in body] for j, key in enumerate(keys)
    })
    ordered = key_frame.sort_values(
        by=list(key_frame.columns),
        ascending=[not k.descending for k in keys],
        kind="stable",
    )
    return head + [list(body[i]) for i in ordered.index]


def dedupe_rows(rows: Sequence[Sequence[str]]) -> List[Row]:
    """Drop repeated rows (whole-row equality), keeping first occurrences in order."""
    if not rows:
        return []
    frame = pd.DataFrame([list(r) for r in rows])
    if frame.shape[1] == 0:
        return [list(rows[0])]
    keep = ~frame.duplicated(keep="first")
    return [list(r) for r, k in zip(rows, keep.tolist()) if k]


def number_of_columns(rows: Sequence[Sequence[str]], *,
                      headers: Optional[Sequence[str]] = None,
                      mappings: Optional[Sequence[UP.ColumnMapping]] = None,
                      layout: Optional[UP.ColumnLayout] = None,
                      widths: Optional[Sequence[UP.WidthSpecifier]] = None) -> int:
    """The tightest of: longest input row, header count, mapping count, layout columns, width count."""
    counts = [max((len(r) for r in rows), default=0)]
    if headers is not None:
        counts.append(len(headers))
    if mappings is not None:
        counts.append(len(mappings))
    if layout is not None:
        counts.append(len(layout.alignment))
    if widths is not None:
        counts.append(len(widths))
    return min(counts)


def transform(rows: Sequence[Sequence[str]], *,
              mappings: Optional[Sequence[UP.ColumnMapping]] = None,
              sort: bool = False,
              sort_keys: Optional[Sequence[UP.SortKey]] = None,
              sort_output: bool = False,
              sort_ignore_first: bool = False,
              unique: bool = False,
              n_columns: Optional[int] = None) -> List[Row]:
    """
    Input matrix -> rectangular output matrix.

    Order of steps: sort input (unless `sort_output`), map columns, dedupe,
    sort output (if `sort_output`), then fit every row to `n_columns`.
    The input rows are left untouched.
    """
    if not rows:
        return []
    if n_columns is None:
        n_columns = number_of_columns(rows, mappings=mappings)
    keys = tuple(sort_keys) if sort_keys else DEFAULT_SORT_KEYS

    matrix = [list(r) for r in rows]
    if sort and not sort_output:
        matrix = sort_rows(matrix, keys, ignore_first=sort_ignore_first)

    out = [UCOL.map_row(mappings, r) for r in matrix]
    if unique:
        out = dedupe_rows(out)

    if sort and sort_output:
        out = sort_rows(out, keys, ignore_first=sort_ignore_first)

    return [UCOL.fit_row(r, n_columns) for r in out]


#-- Handlers --
def _handle_transform(rows: Sequence[Sequence[str]], args: argparse.Namespace) -> List[Row]:
    n = number_of_columns(
        rows,
        headers=getattr(args, "headers", None),
        mappings=getattr(args, "columns", None),
        layout=getattr(args, "layout", None),
        widths=getattr(args, "fixed_width", None),
    )
    return transform(
        rows,
        mappings=getattr(args, "columns", None),
        sort=getattr(args, "sort", False),
        sort_keys=getattr(args, "sort_by", None),
        sort_output=getattr(args, "sort_by_output", False),
        sort_ignore_first=getattr(args, "sort_ignore_first", False),
        unique=getattr(args, "unique", False),
        n_columns=n,
    )


def _handle_render(rows: Sequence[Sequence[str]], args: argparse.Namespace) -> List[str]:
    return UREN.render(
        rows,
        headers=getattr(args, "headers", None),
        layout=getattr(args, "layout", None),
        widths=getattr(args, "fixed_width", None),
        ascii=getattr(args, "ascii", False),
        decoration=getattr(args, "decoration", UP.Decoration.UNDERLINE_HEADER),
    )


#-- CLI --
_EPILOG = "\n".join([
    UP.build_epilog("Column mappings (-c, ',' separated):", [
        "N  input column N (0-based, negatives count from the end)",
        "A;B;C>J  columns A, B, C joined by J (default ' ')",
        "A..B>J  columns A up to but excluding B",
        "A..=B>J  columns A through B",
        "A..>J  column A to the last column",
    ]),
    UP.build_epilog("Layout (-l):", [
        "l r c  left, right, centered column",
        "' ' |  printed literally between columns, e.g. 'r | l | c'",
    ]),
    UP.build_epilog("Fixed widths (-w, ',' separated, empty = auto):", [
        "Nb  width N, overflow breaks the layout",
        "Nc  width N, overflow is cut",
        "Ne  width N, overflow is cut and ends in '...' (N >= 3)",
    ]),
    UP.build_epilog("Sort keys (--sort-by, ',' separated):", [
        "Nl  column N, lexicographic, ascending",
        "NL  column N, lexicographic, descending",
        "Nn  column N, numeric, ascending",
        "NN  column N, numeric, descending",
    ]),
])


def build_parser() -> argparse.ArgumentParser:
    ap = UFMT.CustomArgumentParser(
        prog="tblfmt",
        description="Reformat delimited text into an aligned table.",
        epilog=_EPILOG,
    )
    UP.add_common_io_args(ap)

    g = ap.add_argument_group("Columns")
    g.add_argument("-t", "--headers", type=UP.comma_list, metavar="NAMES",
                   help="Column headers separated by ','. Default: the first row.")
    g.add_argument("-c", "--columns", type=UP.spec_list(UP.parse_column_mapping), metavar="MAP",
                   help="Map input columns to output columns.")
    g.add_argument("-u", "--unique", action="store_true",
                   help="Remove duplicate output rows.")

    g = ap.add_argument_group("Sorting")
    g.add_argument("-s", "--sort", action="store_true", help="Sort rows (see --sort-by).")
    g.add_argument("--sort-by", dest="sort_by", type=UP.spec_list(UP.parse_sort_key), metavar="KEYS",
                   help="Sort keys, primary first (default: 0l).")
    g.add_argument("--sort-by-output", dest="sort_by_output", action="store_true",
                   help="Apply sort keys to OUTPUT instead of INPUT columns.")
    g.add_argument("--sort-ignore-first", dest="sort_ignore_first", action="store_true",
                   help="Keep the first row in place when sorting.")

    g = ap.add_argument_group("Layout")
    g.add_argument("-l", "--layout", type=UP.spec_value(UP.parse_column_layout), metavar="LAYOUT",
                   help="Column alignment and separators, e.g. 'l|r'.")
    g.add_argument("-w", "--fixed-width", dest="fixed_width",
                   type=UP.spec_list(UP.parse_width_specifier), metavar="WIDTHS",
                   help="Fixed column widths.")
    g.add_argument("-a", "--ascii", action="store_true", help="Draw with ASCII characters only.")
    g.add_argument("--decoration", type=UP.parse_decoration, default=UP.Decoration.UNDERLINE_HEADER,
                   metavar="{" + ",".join(UP.DECORATION_CHOICES) + "}",
                   help="Table borders (default: underline-header).")
    ap.add_argument("--version", action="version", version=__version__)
    return ap


def run(rows: Sequence[Sequence[str]], args: argparse.Namespace) -> int:
    logger = ULOG.get_logger(__name__)
    if getattr(args, "sort_by", None) and not getattr(args, "sort", False):
        logger.warning("--sort-by has no effect without -s/--sort.")
    logger.debug("Read %d input rows.", len(rows))
    out = _handle_transform(rows, args)
    logger.debug("Transformed into %d rows of %d columns.", len(out), len(out[0]) if out else 0)
    UIO.write_lines(_handle_render(out, args),
                    getattr(args, "out_file", None),
                    encoding=getattr(args, "encoding", "utf-8"))
    return 0


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    parser = build_parser()
    if hasattr(signal, "SIGPIPE"):
        signal.signal(signal.SIGPIPE, signal.SIG_DFL)

    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        return 0 if e.code == 0 else 2

    ULOG.configure(quiet=getattr(args, "quiet", False),
                   debug=getattr(args, "debug", False),
                   log_file=getattr(args, "log_file", None))
    logger = ULOG.get_logger(__name__)
    try:
        rows = UIO.read_rows(
            args.file,
            delimiter=args.delimiter,
            collapse_delimiters=args.collapse_delimiters,
            encoding=args.encoding,
        )
        return run(rows, args)

    except ValueError as e:
        logger.error(str(e))
        if args.debug: traceback.print_exc()
        return 2
    except BrokenPipeError:
        return 0
    except OSError as e:
        logger.error(str(e))
        if args.debug: traceback.print_exc()
        return 3
    except Exception as e:
        logger.error("An unexpected error occurred: %s", e)
        if args.debug: traceback.print_exc()
        return 4


if __name__ == "__main__":
    raise SystemExit(main())
