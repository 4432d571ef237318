"""Select uploadable outputs from a compilation's asset map.

Only compiled scripts (`.js`) and sourcemaps (`.map`) are uploaded;
every other output name is dropped silently. Selection is pure and
preserves the asset map's iteration order.
"""

import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from sourcemap_release.assets.types import SourceFile
from sourcemap_release.errors import AssetPathError

JS_PATTERN = re.compile(r"\.js$")
SOURCEMAP_PATTERN = re.compile(r"\.map$")


def _asset_path(name: str, asset: Any) -> Path:
    """Return the realized path of an asset.

    Accepts host objects (`existsAt` / `exists_at`) and plain mappings
    as loaded from JSON.
    """
    if isinstance(asset, Mapping):
        path = asset.get("existsAt") or asset.get("exists_at")
    else:
        path = getattr(asset, "existsAt", None) or getattr(asset, "exists_at", None)
    if not path:
        raise AssetPathError(name)
    return Path(path)


def is_source(name: str) -> bool:
    return bool(JS_PATTERN.search(name) or SOURCEMAP_PATTERN.search(name))


def is_sourcemap(name: str) -> bool:
    return bool(SOURCEMAP_PATTERN.search(name))


def select_sources(assets: Mapping[str, Any]) -> list[SourceFile]:
    """List every script and sourcemap output with its on-disk path."""
    return [
        SourceFile(name=name, path=_asset_path(name, asset))
        for name, asset in assets.items()
        if is_source(name)
    ]


def select_sourcemaps(assets: Mapping[str, Any]) -> list[SourceFile]:
    """List every sourcemap output with its on-disk path."""
    return [
        SourceFile(name=name, path=_asset_path(name, asset))
        for name, asset in assets.items()
        if is_sourcemap(name)
    ]
