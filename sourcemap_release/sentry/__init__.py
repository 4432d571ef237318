"""Sentry Releases API client."""

from sourcemap_release.sentry.client import SentryClient

__all__ = ["SentryClient"]
