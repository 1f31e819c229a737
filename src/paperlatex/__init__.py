"""Primary public API for paperlatex."""

from __future__ import annotations

from paperlatex.assets import ArchiveAssembler, ImageAssetPipeline, RenderSession, SettleOutcome
from paperlatex.conversion import Conversion, ConversionResult, Converter, MarkdownEngine
from paperlatex.core.config import AssetConfig, PaperConfig, RenderConfig, load_config
from paperlatex.core.document import (
    Document,
    Line,
    ListInfo,
    ListType,
    Table,
    load_document,
    load_document_file,
)
from paperlatex.core.exceptions import LatexRenderingError
from paperlatex.latex import DocumentRenderer, LaTeXFormatter, ListNesting
from paperlatex.version import get_version


__version__ = get_version()

__all__ = [
    "ArchiveAssembler",
    "AssetConfig",
    "Conversion",
    "ConversionResult",
    "Converter",
    "Document",
    "DocumentRenderer",
    "ImageAssetPipeline",
    "LaTeXFormatter",
    "LatexRenderingError",
    "Line",
    "ListInfo",
    "ListNesting",
    "ListType",
    "MarkdownEngine",
    "PaperConfig",
    "RenderConfig",
    "RenderSession",
    "SettleOutcome",
    "Table",
    "__version__",
    "get_version",
    "load_config",
    "load_document",
    "load_document_file",
]
