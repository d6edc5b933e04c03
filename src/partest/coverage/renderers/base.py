"""Renderer and sink abstractions for coverage output."""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Optional

import click

from partest.coverage.models import CoverageData


@dataclass(frozen=True)
class RenderOptions:
    """Presentation settings shared by every coverage renderer."""

    colors: bool = False
    name: str = "partest"
    timestamp: int = field(default_factory=lambda: int(time.time()))
    source_root: Optional[Path] = None


class CoverageRenderer:
    """Base interface for coverage renderers, one subclass per output format."""

    name: str = ""
    # Output paths without a suffix are treated as directories receiving this file.
    default_filename: str = ""

    def render(self, coverage: CoverageData, options: RenderOptions) -> bytes:
        raise NotImplementedError


class Sink:
    """Destination for rendered report bytes."""

    def write(self, data: bytes) -> None:
        raise NotImplementedError

    def describe(self) -> str:
        raise NotImplementedError


class FileSink(Sink):
    def __init__(self, path: Path | str, default_filename: str = "") -> None:
        target = Path(path)
        if default_filename and not target.suffix:
            target = target / default_filename
        self.path = target

    def write(self, data: bytes) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_bytes(data)

    def describe(self) -> str:
        return str(self.path)


class ConsoleSink(Sink):
    def write(self, data: bytes) -> None:
        click.echo(data.decode("utf-8"), nl=False)

    def describe(self) -> str:
        return "console"


def sink_for(destination: str, renderer: CoverageRenderer) -> Sink:
    """An empty destination prints to the console, anything else is a path."""

    if destination == "":
        return ConsoleSink()
    return FileSink(destination, renderer.default_filename)


class RendererRegistry:
    """Stores coverage renderers keyed by format name."""

    def __init__(self) -> None:
        self._renderers: Dict[str, CoverageRenderer] = {}

    def register(self, renderer: CoverageRenderer) -> CoverageRenderer:
        if renderer.name in self._renderers:
            raise ValueError(f"Coverage renderer '{renderer.name}' already registered")
        self._renderers[renderer.name] = renderer
        return renderer

    def update_or_register(self, renderer: CoverageRenderer) -> CoverageRenderer:
        self._renderers[renderer.name] = renderer
        return renderer

    def get(self, name: str) -> CoverageRenderer:
        try:
            return self._renderers[name]
        except KeyError as exc:
            raise KeyError(f"Coverage format '{name}' is not registered") from exc

    def __contains__(self, name: str) -> bool:
        return name in self._renderers

    def names(self) -> Iterable[str]:
        return tuple(self._renderers.keys())

    def copy(self) -> "RendererRegistry":
        clone = RendererRegistry()
        clone._renderers.update(self._renderers)
        return clone
