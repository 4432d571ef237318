"""Sentry Releases API client.

Uses a single httpx.AsyncClient for the lifetime of a plugin instance.
Only the two calls needed to publish sourcemaps are implemented:

1. Create a release for a project
2. Upload a release file (multipart, streamed from disk)

Failures are not retried; they are mapped to `ReleaseCreationError`
and `FileUploadError` with the underlying httpx error chained.
"""

from __future__ import annotations

import logging
from typing import BinaryIO, Optional
from urllib.parse import quote

import httpx

from sourcemap_release.errors import FileUploadError, ReleaseCreationError

logger = logging.getLogger(__name__)

API_PREFIX = "api/0/"
USER_AGENT = "sourcemap-release/0.1"

# Upper bound on error text copied from a response body
_MAX_DETAIL_CHARS = 200


def _segment(value: str) -> str:
    """Quote a path segment; versions may contain '/' or '@'."""
    return quote(value, safe="")


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:_MAX_DETAIL_CHARS]
    if isinstance(body, dict) and "detail" in body:
        return str(body["detail"])[:_MAX_DETAIL_CHARS]
    return str(body)[:_MAX_DETAIL_CHARS]


class SentryClient:
    """Authenticated client for the release endpoints."""

    def __init__(
        self,
        token: str,
        url: str = "https://sentry.io/",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        base_url = url if url.endswith("/") else f"{url}/"
        self._client = httpx.AsyncClient(
            base_url=base_url + API_PREFIX,
            headers={
                "Authorization": f"Bearer {token}",
                "User-Agent": USER_AGENT,
            },
            timeout=timeout,
            transport=transport,
        )

    async def create_release(self, organization: str, project: str, version: str) -> dict:
        """POST /projects/{org}/{project}/releases/

        Returns the created release JSON.

        Raises:
            ReleaseCreationError: On transport failure or any 4xx/5xx,
                including 409/400 when the release already exists.
        """
        path = f"projects/{_segment(organization)}/{_segment(project)}/releases/"
        try:
            response = await self._client.post(path, json={"version": version})
        except httpx.HTTPError as exc:
            raise ReleaseCreationError(organization, project, version, detail=str(exc)) from exc

        if response.status_code >= 400:
            raise ReleaseCreationError(
                organization,
                project,
                version,
                status_code=response.status_code,
                detail=_error_detail(response),
            )

        logger.info("Created release %s for %s/%s", version, organization, project)
        return response.json() if response.content else {}

    async def create_release_file(
        self,
        organization: str,
        project: str,
        version: str,
        name: str,
        file: BinaryIO,
    ) -> dict:
        """POST /projects/{org}/{project}/releases/{version}/files/

        `file` is streamed as the multipart "file" part; `name` is the
        remote artifact name (e.g. "~/static/app.js").

        Raises:
            FileUploadError: On transport failure or any 4xx/5xx.
        """
        path = (
            f"projects/{_segment(organization)}/{_segment(project)}"
            f"/releases/{_segment(version)}/files/"
        )
        try:
            response = await self._client.post(
                path,
                data={"name": name},
                files={"file": (name.rsplit("/", 1)[-1], file)},
            )
        except httpx.HTTPError as exc:
            raise FileUploadError(name, detail=str(exc)) from exc

        if response.status_code >= 400:
            raise FileUploadError(
                name,
                status_code=response.status_code,
                detail=_error_detail(response),
            )

        logger.debug("Uploaded release file %s", name)
        return response.json() if response.content else {}

    async def aclose(self) -> None:
        await self._client.aclose()
