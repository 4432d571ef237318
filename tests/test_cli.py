"""Tests for the sourcemap-release CLI.

The plugin class is patched so its Sentry client uses the
SentryRecorder transport; everything else runs for real.
"""

import json
from functools import partial

import pytest
from click.testing import CliRunner

from sourcemap_release import cli as cli_module
from sourcemap_release.cli import cli, compilation_from_stats
from sourcemap_release.plugin.coordinator import MinimalSentryPlugin


@pytest.fixture
def stats_file(build_dir):
    path = build_dir.parent / "stats.json"
    path.write_text(json.dumps({
        "outputPath": str(build_dir),
        "assets": [{"name": "app.js"}, {"name": "app.js.map"}, {"name": "vendor.css"}],
    }))
    return path


@pytest.fixture
def patched_plugin(monkeypatch, sentry):
    monkeypatch.setattr(
        cli_module,
        "MinimalSentryPlugin",
        partial(MinimalSentryPlugin, transport=sentry.transport),
    )
    for var in ("SENTRY_AUTH_TOKEN", "SENTRY_ORG", "SENTRY_PROJECT", "SENTRY_RELEASE"):
        monkeypatch.delenv(var, raising=False)
    return sentry


def _args(stats_file, *extra):
    return [
        "upload",
        "--stats", str(stats_file),
        "--org", "acme",
        "--project", "web",
        "--release", "1.0.0",
        "--auth-token", "tok",
        *extra,
    ]


class TestUploadCommand:
    def test_uploads_sources_from_stats(self, stats_file, patched_plugin):
        result = CliRunner().invoke(cli, _args(stats_file))

        assert result.exit_code == 0, result.output
        assert "Uploaded 2 file(s) to release 1.0.0" in result.output
        assert sorted(patched_plugin.uploaded_names) == ["app.js", "app.js.map"]

    def test_url_prefix_and_delete(self, stats_file, build_dir, patched_plugin):
        result = CliRunner().invoke(
            cli, _args(stats_file, "--url-prefix", "~/static/", "--delete-sourcemaps")
        )

        assert result.exit_code == 0, result.output
        assert sorted(patched_plugin.uploaded_names) == ["~/static/app.js", "~/static/app.js.map"]
        assert not (build_dir / "app.js.map").exists()
        assert (build_dir / "app.js").exists()

    def test_env_fallback(self, stats_file, patched_plugin, monkeypatch):
        monkeypatch.setenv("SENTRY_AUTH_TOKEN", "env-tok")
        monkeypatch.setenv("SENTRY_ORG", "acme")
        monkeypatch.setenv("SENTRY_PROJECT", "web")
        monkeypatch.setenv("SENTRY_RELEASE", "2.0.0")

        result = CliRunner().invoke(cli, ["upload", "--stats", str(stats_file)])

        assert result.exit_code == 0, result.output
        assert "release 2.0.0" in result.output
        assert patched_plugin.requests[0].headers["Authorization"] == "Bearer env-tok"

    def test_missing_token_exits_non_zero(self, stats_file, patched_plugin):
        result = CliRunner().invoke(
            cli,
            ["upload", "--stats", str(stats_file), "--org", "a", "--project", "p", "--release", "1"],
        )

        assert result.exit_code != 0
        assert "<authToken> was not provided" in result.output
        assert patched_plugin.requests == []

    def test_release_failure_exits_non_zero(self, stats_file, patched_plugin):
        patched_plugin.release_status = 409

        result = CliRunner().invoke(cli, _args(stats_file))

        assert result.exit_code == 1
        assert "Failed to create release '1.0.0'" in result.output
        assert patched_plugin.uploaded_names == []


class TestCompilationFromStats:
    def test_uses_output_path_override(self, tmp_path):
        compilation = compilation_from_stats(
            {"outputPath": "/elsewhere", "assets": [{"name": "a.js"}]},
            output_path=tmp_path,
        )
        assert compilation.assets["a.js"].existsAt == tmp_path.resolve() / "a.js"

    def test_requires_output_path(self):
        with pytest.raises(Exception, match="outputPath"):
            compilation_from_stats({"assets": [{"name": "a.js"}]})
