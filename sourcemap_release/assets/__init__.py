"""Asset selection for release uploads.

Public API:
    select_sources(assets) -> list[SourceFile]
    select_sourcemaps(assets) -> list[SourceFile]
"""

from sourcemap_release.assets.selector import (
    JS_PATTERN,
    SOURCEMAP_PATTERN,
    select_sourcemaps,
    select_sources,
)
from sourcemap_release.assets.types import Compilation, EmittedAsset, SourceFile, Stats

__all__ = [
    "JS_PATTERN",
    "SOURCEMAP_PATTERN",
    "Compilation",
    "EmittedAsset",
    "SourceFile",
    "Stats",
    "select_sourcemaps",
    "select_sources",
]
