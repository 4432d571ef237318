"""Configuration and logging shared by the plugin and the CLI."""

from sourcemap_release.core.config import PluginOptions, Settings, get_settings, load_options
from sourcemap_release.core.logging import bind_release, configure_structlog

__all__ = [
    "PluginOptions",
    "Settings",
    "bind_release",
    "configure_structlog",
    "get_settings",
    "load_options",
]
