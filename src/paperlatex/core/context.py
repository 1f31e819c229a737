"""Rendering context primitives shared across the LaTeX pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from .config import RenderConfig
from .diagnostics import DiagnosticEmitter, NullEmitter


if TYPE_CHECKING:  # pragma: no cover - typing only
    from paperlatex.latex.formatter import LaTeXFormatter
    from paperlatex.latex.lists import ListNesting


@dataclass(frozen=True, slots=True)
class ImageReference:
    """Output filename assigned to an image and whether its bytes are available."""

    filename: str
    available: bool = False


class ImageHook(Protocol):
    """Callable invoked by the renderer for every image it encounters."""

    def __call__(self, url: str) -> ImageReference: ...


@dataclass
class RenderContext:
    """State threaded through a single render pass."""

    config: RenderConfig
    formatter: LaTeXFormatter
    lists: ListNesting
    images: ImageHook
    emitter: DiagnosticEmitter = field(default_factory=NullEmitter)
    code_lines: list[str] = field(default_factory=list)

    def figure_path(self, filename: str) -> str:
        """Return the path used by ``\\includegraphics`` for an output filename."""
        return f"{self.config.figures_dir}/{filename}"


__all__ = ["ImageHook", "ImageReference", "RenderContext"]
