"""Types describing the host build tool's emitted assets.

The plugin only needs a small slice of the host's model:

  Compilation.assets : mapping of output name → asset
  Asset.existsAt     : realized filesystem path (webpack naming)
  Stats.compilation  : the compilation a finished build reports on

`EmittedAsset`, `Compilation` and `Stats` are concrete stand-ins for
Python-side hosts (the CLI builds them from a webpack stats.json).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True)
class SourceFile:
    """One build output selected for upload.

    name is the logical output name (e.g. "static/app.js"); path is its
    absolute location on disk.
    """

    name: str
    path: Path

    def to_dict(self) -> dict:
        return {"name": self.name, "path": str(self.path)}


@runtime_checkable
class CompilationLike(Protocol):
    """Anything exposing an `assets` mapping of output name → asset."""

    @property
    def assets(self) -> Mapping[str, Any]: ...


@runtime_checkable
class StatsLike(Protocol):
    """A finished build's stats, exposing the last compilation."""

    @property
    def compilation(self) -> CompilationLike: ...


@dataclass
class EmittedAsset:
    """An asset that has been written to disk.

    `existsAt` mirrors the host attribute name so real and stand-in
    assets are read the same way.
    """

    existsAt: Path

    @property
    def exists_at(self) -> Path:
        return self.existsAt


@dataclass
class Compilation:
    assets: dict[str, EmittedAsset] = field(default_factory=dict)

    @classmethod
    def from_paths(cls, output_path: Path | str, names: list[str]) -> "Compilation":
        """Build a compilation from output names relative to `output_path`."""
        root = Path(output_path).resolve()
        return cls(assets={name: EmittedAsset(existsAt=root / name) for name in names})


@dataclass
class Stats:
    compilation: Compilation
