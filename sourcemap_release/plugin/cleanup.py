"""Post-build sourcemap removal.

Runs from the host's "done" hook when `delete_sourcemaps` is set, so the
maps are available for upload but never shipped with the build output.

Deletion is synchronous and stops at the first failure. A missing file
counts as a failure: the host reported the asset as emitted, so its
absence means something else touched the output directory.
"""

import logging
from collections.abc import Iterable
from typing import Any

from sourcemap_release.assets.selector import select_sourcemaps
from sourcemap_release.assets.types import SourceFile
from sourcemap_release.errors import CleanupError

logger = logging.getLogger(__name__)


def _compilations(stats: Any) -> Iterable[Any]:
    """Yield every compilation reported by a stats object.

    Multi-compiler builds report a `stats` list of per-compiler stats;
    single builds expose `compilation` directly.
    """
    children = getattr(stats, "stats", None)
    if children is not None:
        for child in children:
            yield child.compilation
    else:
        yield stats.compilation


def delete_sourcemaps(stats: Any) -> list[SourceFile]:
    """Delete every sourcemap asset listed in `stats` from disk.

    Returns:
        The deleted sourcemaps, in asset order.

    Raises:
        CleanupError: On the first file that cannot be removed; the
            remaining deletions are abandoned.
    """
    deleted: list[SourceFile] = []
    for compilation in _compilations(stats):
        for sourcemap in select_sourcemaps(compilation.assets):
            try:
                sourcemap.path.unlink()
            except OSError as exc:
                logger.error(
                    "Failed to delete sourcemap %s at %s: %s",
                    sourcemap.name, sourcemap.path, exc,
                )
                raise CleanupError(sourcemap.name, sourcemap.path, detail=str(exc)) from exc
            logger.debug("Deleted sourcemap %s", sourcemap.path)
            deleted.append(sourcemap)

    logger.info("Deleted %d sourcemap(s)", len(deleted))
    return deleted
