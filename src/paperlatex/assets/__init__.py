"""Image discovery, retrieval, and archiving for rendered documents."""

from __future__ import annotations

from .archive import ArchiveAssembler, AssembledArchive, build_archive
from .naming import FilenameRegistry, ImageName
from .pipeline import ImageAssetPipeline
from .session import CancellationToken, RenderSession, SettleOutcome
from .transformers import ImageFetcher, RasterNormaliser, SvgRasterizer


__all__ = [
    "ArchiveAssembler",
    "AssembledArchive",
    "CancellationToken",
    "FilenameRegistry",
    "ImageAssetPipeline",
    "ImageFetcher",
    "ImageName",
    "RasterNormaliser",
    "RenderSession",
    "SettleOutcome",
    "SvgRasterizer",
    "build_archive",
]
