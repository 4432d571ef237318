"""Shared fixtures for the sourcemap-release test suite.

Sentry is never contacted: `SentryRecorder` is an httpx.MockTransport
handler that records every request, tracks how many uploads are in
flight at once, and can be told to fail specific calls.
"""

import asyncio
import re
from pathlib import Path
from types import SimpleNamespace

import httpx
import pytest

from sourcemap_release.assets.types import Compilation, EmittedAsset

_NAME_FIELD = re.compile(rb'name="name"\r\n\r\n(.*?)\r\n')


class SentryRecorder:
    """Async MockTransport handler standing in for the Sentry API."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str]] = []  # (kind, detail)
        self.requests: list[httpx.Request] = []
        self.release_status = 201
        self.failing_files: set[str] = set()
        self.upload_delay = 0.0
        self.in_flight = 0
        self.peak_in_flight = 0
        # (start, end) per upload, in event-loop time
        self.windows: list[tuple[float, float]] = []

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def uploaded_names(self) -> list[str]:
        return [detail for kind, detail in self.calls if kind == "file"]

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path.endswith("/files/"):
            body = await request.aread()
            match = _NAME_FIELD.search(body)
            name = match.group(1).decode() if match else ""
            return await self._upload(name)

        if path.endswith("/releases/"):
            self.calls.append(("release", path))
            if self.release_status >= 400:
                return httpx.Response(self.release_status, json={"detail": "Release already exists"})
            return httpx.Response(self.release_status, json={"version": "1.0.0"})

        return httpx.Response(404, json={"detail": "Not found"})

    async def _upload(self, name: str) -> httpx.Response:
        loop = asyncio.get_running_loop()
        start = loop.time()
        self.in_flight += 1
        self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        try:
            self.calls.append(("file", name))
            await asyncio.sleep(self.upload_delay)
        finally:
            self.in_flight -= 1
            self.windows.append((start, loop.time()))

        if name in self.failing_files:
            return httpx.Response(500, json={"detail": "Internal error"})
        return httpx.Response(201, json={"name": name})


class FakeHook:
    """Minimal async hook: records taps and calls them in order."""

    def __init__(self) -> None:
        self.taps: list = []

    def tap_promise(self, name, fn) -> None:
        self.taps.append((name, fn))

    async def call(self, arg) -> None:
        for _, fn in self.taps:
            await fn(arg)


def make_compiler() -> SimpleNamespace:
    return SimpleNamespace(hooks=SimpleNamespace(after_emit=FakeHook(), done=FakeHook()))


@pytest.fixture
def sentry() -> SentryRecorder:
    return SentryRecorder()


@pytest.fixture
def compiler() -> SimpleNamespace:
    return make_compiler()


@pytest.fixture
def plugin_options() -> dict:
    return {
        "authToken": "sntrys_test_token",
        "organization": "acme",
        "project": "web",
        "version": "1.0.0",
    }


@pytest.fixture
def build_dir(tmp_path: Path) -> Path:
    """An output directory holding app.js, app.js.map and vendor.css."""
    out = tmp_path / "dist"
    out.mkdir()
    (out / "app.js").write_text("console.log('app');\n")
    (out / "app.js.map").write_text('{"version":3,"sources":[],"mappings":""}')
    (out / "vendor.css").write_text("body{}\n")
    return out


@pytest.fixture
def compilation(build_dir: Path) -> Compilation:
    return Compilation(
        assets={
            "app.js": EmittedAsset(existsAt=build_dir / "app.js"),
            "app.js.map": EmittedAsset(existsAt=build_dir / "app.js.map"),
            "vendor.css": EmittedAsset(existsAt=build_dir / "vendor.css"),
        }
    )
