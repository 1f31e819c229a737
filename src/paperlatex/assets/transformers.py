"""Collaborators that retrieve and convert image bytes.

Blocking work (HTTP downloads, Cairo rendering, Pillow decoding) runs in
worker threads through :func:`asyncio.to_thread` so the event loop driving
the conversion is never blocked.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from io import BytesIO
from pathlib import Path
from urllib.parse import unquote, urlparse

from PIL import Image, UnidentifiedImageError
import requests

from paperlatex.core.exceptions import AssetFetchError, TransformerExecutionError
from paperlatex.version import get_version


Fetcher = Callable[[str], Awaitable[bytes]]
ByteConverter = Callable[[bytes], Awaitable[bytes]]


def _cairo_dependency_hint() -> str:
    return "Install 'cairosvg' together with the Cairo system library to rasterize SVG images."


class ImageFetcher:
    """Fetch raw image bytes from HTTP(S) URLs, ``file://`` URLs, or local paths."""

    def __init__(self, timeout: float = 10.0, user_agent: str | None = None) -> None:
        self.timeout = timeout
        self.user_agent = user_agent or f"paperlatex/{get_version()}"

    async def __call__(self, url: str) -> bytes:
        return await asyncio.to_thread(self.fetch, url)

    def fetch(self, url: str) -> bytes:
        parsed = urlparse(url)
        if parsed.scheme in {"http", "https"}:
            return self._download(url)
        if parsed.scheme == "file":
            return self._read(Path(unquote(parsed.path)))
        if parsed.scheme == "":
            return self._read(Path(url))
        raise AssetFetchError(f"Unsupported URL scheme '{parsed.scheme}' for image '{url}'")

    def _download(self, url: str) -> bytes:
        try:
            response = requests.get(
                url, timeout=self.timeout, headers={"User-Agent": self.user_agent}
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as exc:
            raise AssetFetchError(f"Failed to download image '{url}': {exc}") from exc
        return response.content

    def _read(self, path: Path) -> bytes:
        try:
            return path.read_bytes()
        except OSError as exc:
            raise AssetFetchError(f"Failed to read image '{path}': {exc}") from exc


class SvgRasterizer:
    """Rasterize SVG payloads to PNG with CairoSVG."""

    def __init__(self, scale: float = 1.0) -> None:
        self.scale = scale

    async def __call__(self, data: bytes) -> bytes:
        return await asyncio.to_thread(self.rasterize, data)

    def rasterize(self, data: bytes) -> bytes:
        try:
            import cairosvg  # type: ignore[import]
        except (ImportError, OSError) as exc:
            raise TransformerExecutionError(
                f"cairosvg is unavailable. {_cairo_dependency_hint()}"
            ) from exc

        try:
            return cairosvg.svg2png(bytestring=data, scale=self.scale)
        except Exception as exc:
            raise TransformerExecutionError(f"Failed to rasterize SVG image: {exc}") from exc


class RasterNormaliser:
    """Re-encode raster formats LaTeX cannot include (GIF, WebP, BMP, ...) as PNG."""

    async def __call__(self, data: bytes) -> bytes:
        return await asyncio.to_thread(self.to_png, data)

    def to_png(self, data: bytes) -> bytes:
        try:
            with Image.open(BytesIO(data)) as image:
                image.load()
                if image.mode not in {"1", "L", "LA", "P", "RGB", "RGBA"}:
                    image = image.convert("RGBA")
                buffer = BytesIO()
                image.save(buffer, format="PNG")
        except (UnidentifiedImageError, OSError, ValueError) as exc:
            raise TransformerExecutionError(f"Failed to convert image to PNG: {exc}") from exc
        return buffer.getvalue()


__all__ = ["ByteConverter", "Fetcher", "ImageFetcher", "RasterNormaliser", "SvgRasterizer"]
