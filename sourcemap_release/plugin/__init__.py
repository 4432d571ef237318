"""Host build-tool plugin.

Public API:
    MinimalSentryPlugin(options).apply(compiler)
    delete_sourcemaps(stats) -> list[SourceFile]
"""

from sourcemap_release.plugin.cleanup import delete_sourcemaps
from sourcemap_release.plugin.coordinator import PLUGIN_NAME, MinimalSentryPlugin

__all__ = ["PLUGIN_NAME", "MinimalSentryPlugin", "delete_sourcemaps"]
