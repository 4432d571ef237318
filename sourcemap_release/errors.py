"""Exception hierarchy for the release plugin.

Every failure is surfaced to the host build tool; nothing here is
retried. Underlying httpx / OS errors are chained via `__cause__`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class SourcemapReleaseError(Exception):
    """Base class for all plugin errors."""


class ConfigurationError(SourcemapReleaseError, ValueError):
    """Raised at construction time when plugin options are invalid."""


class AssetPathError(SourcemapReleaseError, ValueError):
    """Raised when a selected build output has no realized path on disk."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Asset '{name}' has no realized path (existsAt)")


class ReleaseCreationError(SourcemapReleaseError):
    """Raised when Sentry rejects or fails the release creation call.

    No uploads are attempted after this error.
    """

    def __init__(
        self,
        organization: str,
        project: str,
        version: str,
        status_code: Optional[int] = None,
        detail: str = "",
    ):
        self.organization = organization
        self.project = project
        self.version = version
        self.status_code = status_code
        status = f" (HTTP {status_code})" if status_code is not None else ""
        suffix = f": {detail}" if detail else ""
        super().__init__(
            f"Failed to create release '{version}' for {organization}/{project}{status}{suffix}"
        )


class FileUploadError(SourcemapReleaseError):
    """Raised when a single release file upload fails."""

    def __init__(
        self,
        name: str,
        status_code: Optional[int] = None,
        detail: str = "",
    ):
        self.name = name
        self.status_code = status_code
        status = f" (HTTP {status_code})" if status_code is not None else ""
        suffix = f": {detail}" if detail else ""
        super().__init__(f"Failed to upload '{name}'{status}{suffix}")


class DispatchError(SourcemapReleaseError):
    """Aggregate failure raised once every in-flight unit has settled.

    `errors` holds each unit failure in the order it was observed.
    """

    def __init__(self, errors: list[BaseException]):
        self.errors = list(errors)
        first = self.errors[0] if self.errors else None
        summary = f"{len(self.errors)} unit(s) failed"
        if first is not None:
            summary += f"; first: {first}"
        super().__init__(summary)


class CleanupError(SourcemapReleaseError):
    """Raised when a sourcemap cannot be deleted.

    The deletion pass stops at the first failure.
    """

    def __init__(self, name: str, path: Path | str, detail: str = ""):
        self.name = name
        self.path = Path(path)
        suffix = f": {detail}" if detail else ""
        super().__init__(f"Failed to delete sourcemap '{name}' at {self.path}{suffix}")
