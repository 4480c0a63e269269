from __future__ import annotations
from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("tblfmt")
except PackageNotFoundError:  # local dev
    __version__ = "0.0.0.dev0"

from . import core, utils
from .core import transform
from .utils.render import render

__all__ = ["core", "utils", "transform", "render", "__version__"]
