# Building blocks shared by the core pipeline and the command line.
from __future__ import annotations

from . import errors, parsing, columns, render, io, formatters
from . import logging as ULOG

__all__ = ["errors", "parsing", "columns", "render", "io", "formatters", "ULOG"]
