# src/courtfinder_sdk/__init__.py
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version

from . import (
    bans,
    courts,
    moderation,
    suggestions,
)

__all__ = [
    "bans",
    "courts",
    "moderation",
    "suggestions",
]

try:
    __version__ = _pkg_version("courtfinder")
except PackageNotFoundError:
    __version__ = "0.0.0"
