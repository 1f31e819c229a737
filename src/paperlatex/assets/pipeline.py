"""Asynchronous discovery, naming, and retrieval of embedded images."""

from __future__ import annotations

import asyncio

from paperlatex.core.config import AssetConfig
from paperlatex.core.context import ImageReference
from paperlatex.core.diagnostics import DiagnosticEmitter, ensure_emitter, record_event

from .naming import ImageName
from .session import RenderSession, SettleOutcome
from .transformers import ByteConverter, Fetcher, ImageFetcher, RasterNormaliser, SvgRasterizer


class ImageAssetPipeline:
    """Register images found during a render and resolve their bytes concurrently.

    The pipeline is itself an image hook: passing it to
    :meth:`~paperlatex.latex.renderer.DocumentRenderer.render` registers every
    image and starts its fetch on the running event loop. References returned
    here are never available, so the first pass always comments them out.
    """

    def __init__(
        self,
        session: RenderSession,
        *,
        config: AssetConfig | None = None,
        fetcher: Fetcher | None = None,
        rasterizer: ByteConverter | None = None,
        normaliser: ByteConverter | None = None,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        settings = config or AssetConfig()
        self.session = session
        self.fetcher = fetcher or ImageFetcher(
            timeout=settings.timeout, user_agent=settings.user_agent
        )
        self.rasterizer = rasterizer or SvgRasterizer(scale=settings.raster_scale)
        self.normaliser = normaliser or RasterNormaliser()
        self.emitter = ensure_emitter(emitter)

    def __call__(self, url: str) -> ImageReference:
        return self.register_image(url)

    def register_image(self, url: str) -> ImageReference:
        """Assign a filename to ``url`` and start fetching it, once per session."""
        session = self.session
        with session.lock:
            existing = session.names.lookup(url)
            if existing is not None:
                return ImageReference(existing.filename)
            name = session.names.assign(url)
            task = asyncio.create_task(self._resolve(url, name))
            session.pending[url] = task

        record_event(
            self.emitter,
            "asset_register",
            {"url": url, "filename": name.filename, "generation": session.generation},
        )
        return ImageReference(name.filename)

    async def all_settled(self, generation: int) -> SettleOutcome:
        """Wait until every fetch of ``generation`` settled or the generation is superseded."""
        session = self.session
        if generation != session.generation or not session.is_current:
            return SettleOutcome.SUPERSEDED

        with session.lock:
            tasks = list(session.pending.values())
        if tasks:
            gathered = asyncio.gather(*tasks, return_exceptions=True)
            superseded = asyncio.ensure_future(session.token.wait())
            try:
                await asyncio.wait({gathered, superseded}, return_when=asyncio.FIRST_COMPLETED)
            finally:
                superseded.cancel()

        return SettleOutcome.COMPLETED if session.is_current else SettleOutcome.SUPERSEDED

    async def _resolve(self, url: str, name: ImageName) -> None:
        session = self.session
        record_event(self.emitter, "asset_fetch", {"url": url, "filename": name.filename})
        try:
            data = await self.fetcher(url)
            if name.is_vector:
                data = await self.rasterizer(data)
            elif name.needs_normalising:
                data = await self.normaliser(data)
        except Exception as exc:
            if not session.is_current:
                record_event(
                    self.emitter,
                    "asset_discarded",
                    {"url": url, "generation": session.generation},
                )
                return
            session.mark_failed(url)
            self.emitter.warning(
                f"Image '{url}' could not be retrieved and is left commented out: {exc}", exc
            )
            record_event(self.emitter, "asset_failed", {"url": url, "reason": str(exc)})
            return

        if not session.store(url, data):
            record_event(
                self.emitter,
                "asset_discarded",
                {"url": url, "generation": session.generation},
            )
            return

        record_event(
            self.emitter,
            "asset_fetch_complete",
            {"url": url, "filename": name.filename, "size": len(data)},
        )


__all__ = ["ImageAssetPipeline"]
