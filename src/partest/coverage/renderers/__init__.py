"""Coverage renderers, one per output format."""
from .base import ConsoleSink, CoverageRenderer, FileSink, RendererRegistry, RenderOptions, Sink, sink_for
from .clover import CloverRenderer
from .cobertura import CoberturaRenderer
from .html import HtmlRenderer
from .json_renderer import JsonRenderer
from .lcov import LcovRenderer
from .text import TextRenderer

BUILTIN_RENDERERS = (
    TextRenderer,
    JsonRenderer,
    CoberturaRenderer,
    CloverRenderer,
    LcovRenderer,
    HtmlRenderer,
)

renderer_registry = RendererRegistry()
for _cls in BUILTIN_RENDERERS:
    renderer_registry.register(_cls())

__all__ = [
    "BUILTIN_RENDERERS",
    "CloverRenderer",
    "CoberturaRenderer",
    "ConsoleSink",
    "CoverageRenderer",
    "FileSink",
    "HtmlRenderer",
    "JsonRenderer",
    "LcovRenderer",
    "RenderOptions",
    "RendererRegistry",
    "Sink",
    "TextRenderer",
    "renderer_registry",
    "sink_for",
]
