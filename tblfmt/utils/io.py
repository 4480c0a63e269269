from __future__ import annotations
import io as _io
import re
import sys
from typing import Iterable, List, Optional


def split_fields(line: str, delimiter: str, *, collapse: bool = False) -> List[str]:
    """Split on a literal delimiter; with `collapse` a run of delimiters counts as one."""
    if collapse:
        return re.split(f"(?:{re.escape(delimiter)})+", line)
    return line.split(delimiter)


def read_rows(path: Optional[str],
              *,
              delimiter: str = ",",
              collapse_delimiters: bool = False,
              encoding: str = "utf-8") -> List[List[str]]:
    """
    Read the whole input (a file, or stdin for None/'-') into a matrix of fields.
    Lines end at '\\n' (a trailing '\\r' is dropped); empty input gives no rows.
    """
    if not delimiter:
        raise ValueError("Delimiter must not be empty.")
    if path in (None, "-"):
        raw = _io.TextIOWrapper(sys.stdin.buffer, encoding=encoding, newline="").read()
    else:
        with open(path, "r", encoding=encoding, newline="") as fh:
            raw = fh.read()

    lines = raw.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [
        split_fields(ln[:-1] if ln.endswith("\r") else ln, delimiter, collapse=collapse_delimiters)
        for ln in lines
    ]


def write_lines(lines: Iterable[str], path: Optional[str] = None, *,
                encoding: str = "utf-8") -> None:
    """Write lines to a file or stdout; remain quiet on BrokenPipe."""
    out = sys.stdout if path in (None, "-") else open(path, "w", encoding=encoding)
    close = (out is not sys.stdout)
    try:
        for ln in lines:
            out.write(ln + "\n")
        out.flush()
    except BrokenPipeError:
        return
    finally:
        if close:
            out.close()
