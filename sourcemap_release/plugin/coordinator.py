"""Release coordinator: the plugin a host build tool applies.

Two hooks are tapped on the host compiler:

  after_emit : once per compilation: select sources, create the release,
               then upload every source through the bounded dispatcher.
  done       : once per full build: delete sourcemaps if configured.

Release creation always completes before the first upload starts;
Sentry rejects files for a release that does not exist yet. A failed
release creation aborts the cycle with no uploads attempted.

The Sentry client is created once in the constructor and owned by the
plugin instance; call `aclose()` (or use `async with`) to release its
connection pool.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Optional

import httpx

from sourcemap_release.assets.selector import select_sources
from sourcemap_release.assets.types import CompilationLike, SourceFile, StatsLike
from sourcemap_release.core.config import PluginOptions, load_options
from sourcemap_release.core.logging import bind_release
from sourcemap_release.dispatcher.pool import BoundedDispatcher
from sourcemap_release.dispatcher.types import DispatchResult
from sourcemap_release.errors import FileUploadError
from sourcemap_release.plugin.cleanup import delete_sourcemaps
from sourcemap_release.sentry.client import SentryClient

logger = logging.getLogger(__name__)

PLUGIN_NAME = "MinimalSentryPlugin"


class MinimalSentryPlugin:
    """Create a Sentry release and upload emitted sources after each build.

    Args:
        options: A `PluginOptions` or a mapping using either the
            camelCase aliases (`authToken`) or snake_case names.
        transport: Optional httpx transport for the owned client.

    Raises:
        ConfigurationError: If a required option is missing or invalid.
            Raised before the client is constructed.
    """

    def __init__(
        self,
        options: PluginOptions | Mapping[str, Any],
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.options = load_options(options)
        self.client = SentryClient(
            token=self.options.auth_token.get_secret_value(),
            url=self.options.url,
            timeout=self.options.timeout,
            transport=transport,
        )
        self.dispatcher = BoundedDispatcher(self.options.upload_concurrency)

    def apply(self, compiler: Any) -> None:
        """Tap the host compiler's `after_emit` and `done` hooks."""
        compiler.hooks.after_emit.tap_promise(PLUGIN_NAME, self.after_emit)
        compiler.hooks.done.tap_promise(PLUGIN_NAME, self.done)

    async def after_emit(self, compilation: CompilationLike) -> DispatchResult:
        sources = self.list_sources(compilation)

        await self.create_release()
        return await self.upload_sources(sources)

    run = after_emit

    async def done(self, stats: StatsLike) -> None:
        if self.options.delete_sourcemaps:
            delete_sourcemaps(stats)

    def list_sources(self, compilation: CompilationLike) -> list[SourceFile]:
        """List JS and sourcemap outputs of a compilation."""
        sources = select_sources(compilation.assets)
        logger.debug("Selected %d source file(s) for upload", len(sources))
        return sources

    async def create_release(self) -> dict:
        opts = self.options
        bind_release(opts.organization, opts.project, opts.version)
        return await self.client.create_release(opts.organization, opts.project, opts.version)

    async def upload_sources(self, sources: list[SourceFile]) -> DispatchResult:
        """Upload every source for the current release.

        Raises:
            DispatchError: Wrapping each `FileUploadError`, once all
                in-flight uploads have settled.
        """
        result = await self.dispatcher.map(sources, self.upload_source)
        logger.info(
            "Uploaded %d file(s) to release %s (peak concurrency %d)",
            result.completed, self.options.version, result.peak_in_flight,
        )
        return result

    async def upload_source(self, source: SourceFile) -> dict:
        """Stream one file to Sentry under its (transformed) remote name."""
        opts = self.options
        filename = opts.transform(source.name)
        try:
            file = source.path.open("rb")
        except OSError as exc:
            raise FileUploadError(filename, detail=str(exc)) from exc

        with file:
            return await self.client.create_release_file(
                opts.organization, opts.project, opts.version, filename, file
            )

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> "MinimalSentryPlugin":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
