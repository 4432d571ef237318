"""Create a Sentry release and upload emitted JavaScript and sourcemaps.

Public API:
    MinimalSentryPlugin(options).apply(compiler)
    dispatch(supply, concurrency) -> DispatchResult
    select_sources(assets) -> list[SourceFile]
"""

from sourcemap_release.assets import SourceFile, select_sourcemaps, select_sources
from sourcemap_release.core.config import PluginOptions
from sourcemap_release.dispatcher import BoundedDispatcher, DispatchResult, dispatch
from sourcemap_release.errors import (
    AssetPathError,
    CleanupError,
    ConfigurationError,
    DispatchError,
    FileUploadError,
    ReleaseCreationError,
    SourcemapReleaseError,
)
from sourcemap_release.plugin import MinimalSentryPlugin, delete_sourcemaps

__all__ = [
    "AssetPathError",
    "BoundedDispatcher",
    "CleanupError",
    "ConfigurationError",
    "DispatchError",
    "DispatchResult",
    "FileUploadError",
    "MinimalSentryPlugin",
    "PluginOptions",
    "ReleaseCreationError",
    "SourceFile",
    "SourcemapReleaseError",
    "delete_sourcemaps",
    "dispatch",
    "select_sourcemaps",
    "select_sources",
]
