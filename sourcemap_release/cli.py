"""
sourcemap-release CLI

Runs the plugin outside a bundler process, using the stats.json webpack
writes with `--json` (or `stats.toJson()`).

Usage:
    sourcemap-release [OPTIONS] upload --stats dist/stats.json [OPTIONS]

Options fall back to SENTRY_* environment variables (see core.config).
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Optional

import click

from sourcemap_release.assets.types import Compilation, Stats
from sourcemap_release.core.config import get_settings
from sourcemap_release.core.logging import configure_structlog
from sourcemap_release.dispatcher.types import DispatchResult
from sourcemap_release.errors import SourcemapReleaseError
from sourcemap_release.plugin.coordinator import MinimalSentryPlugin


def compilation_from_stats(stats: dict[str, Any], output_path: Optional[Path] = None) -> Compilation:
    """Build a Compilation from webpack stats JSON.

    Asset names are resolved against `output_path`, falling back to the
    stats' own `outputPath`.
    """
    root = output_path or stats.get("outputPath")
    if not root:
        raise click.UsageError("stats.json has no outputPath; pass --output-path")

    names = [asset["name"] for asset in stats.get("assets", []) if asset.get("name")]
    return Compilation.from_paths(root, names)


async def _run_build(plugin: MinimalSentryPlugin, compilation: Compilation) -> DispatchResult:
    async with plugin:
        result = await plugin.after_emit(compilation)
        await plugin.done(Stats(compilation=compilation))
    return result


@click.group()
@click.option('-v', '--verbose', is_flag=True, help='Console log output at DEBUG level')
@click.pass_context
def cli(ctx, verbose):
    """Create a Sentry release and upload emitted sources."""
    settings = get_settings()
    configure_structlog(debug=verbose or settings.debug)

    ctx.ensure_object(dict)
    ctx.obj['settings'] = settings


@cli.command()
@click.option('--stats', 'stats_path', required=True,
              type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help='webpack stats.json')
@click.option('--output-path', type=click.Path(file_okay=False, path_type=Path),
              help='Directory the assets were emitted to (default: stats outputPath)')
@click.option('--org', help='Organization slug [SENTRY_ORG]')
@click.option('--project', help='Project slug [SENTRY_PROJECT]')
@click.option('--release', help='Release version [SENTRY_RELEASE]')
@click.option('--auth-token', help='API token [SENTRY_AUTH_TOKEN]')
@click.option('--url', help='Sentry base URL [SENTRY_URL]')
@click.option('--concurrency', type=int, help='Max parallel uploads [SENTRY_UPLOAD_CONCURRENCY]')
@click.option('--delete-sourcemaps', is_flag=True, help='Remove .map files after upload')
@click.option('--url-prefix', default='', help='Prefix for remote names, e.g. "~/static/"')
@click.pass_context
def upload(ctx, stats_path, output_path, org, project, release, auth_token, url,
           concurrency, delete_sourcemaps, url_prefix):
    """Upload .js and .map assets listed in a stats file."""
    settings = ctx.obj['settings']

    options: dict[str, Any] = {
        'authToken': auth_token or settings.auth_token,
        'organization': org or settings.org,
        'project': project or settings.project,
        'version': release or settings.release,
        'url': url or settings.url,
        'deleteSourcemaps': delete_sourcemaps,
        'uploadConcurrency': concurrency if concurrency is not None else settings.upload_concurrency,
    }
    if url_prefix:
        options['filenameTransform'] = lambda name: url_prefix + name

    try:
        stats = json.loads(stats_path.read_text(encoding='utf-8'))
    except ValueError as exc:
        raise click.ClickException(f"Invalid stats file {stats_path}: {exc}") from exc
    compilation = compilation_from_stats(stats, output_path)

    try:
        plugin = MinimalSentryPlugin(options)
        result = asyncio.run(_run_build(plugin, compilation))
    except SourcemapReleaseError as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo(f"Uploaded {result.completed} file(s) to release {options['version']}")


if __name__ == '__main__':
    cli()
