"""Orchestrate two-pass conversions across superseding generations."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping
from dataclasses import dataclass
import threading
from typing import Protocol

from paperlatex.assets.archive import ArchiveAssembler, AssembledArchive
from paperlatex.assets.pipeline import ImageAssetPipeline
from paperlatex.assets.session import RenderSession, SettleOutcome
from paperlatex.assets.transformers import ByteConverter, Fetcher
from paperlatex.core.config import PaperConfig
from paperlatex.core.diagnostics import DiagnosticEmitter, ensure_emitter, record_event
from paperlatex.core.document import Document
from paperlatex.latex.renderer import DocumentRenderer


class MarkdownEngine(Protocol):
    """Delegate engine converting a Markdown dialect straight to LaTeX."""

    def render_markdown(self, text: str, on_image_url: Callable[[str], object]) -> str: ...

    def render_markdown_to_archive(
        self, text: str, images: Mapping[str, tuple[str, bytes]]
    ) -> bytes: ...


@dataclass
class Conversion:
    """Handle returned as soon as the first pass is rendered.

    ``latex`` holds the first-pass output with image references commented
    out. ``archive`` resolves to the archive bytes, or ``None`` when a newer
    conversion superseded this one. ``final_latex`` is filled in once the
    archive has been assembled.
    """

    generation: int
    latex: str
    session: RenderSession
    archive: asyncio.Task[bytes | None] | None = None
    final_latex: str | None = None


@dataclass(frozen=True, slots=True)
class ConversionResult:
    """Outcome of a complete synchronous conversion."""

    latex: str
    final_latex: str | None
    archive: bytes | None
    failed: tuple[str, ...] = ()


class Converter:
    """Entry point turning documents into LaTeX plus an asset archive.

    Every call to :meth:`convert` starts a new generation. The previous
    session is superseded: its late fetches are discarded and it never
    produces an archive.
    """

    def __init__(
        self,
        config: PaperConfig | None = None,
        *,
        fetcher: Fetcher | None = None,
        rasterizer: ByteConverter | None = None,
        normaliser: ByteConverter | None = None,
        emitter: DiagnosticEmitter | None = None,
        renderer: DocumentRenderer | None = None,
        assembler: ArchiveAssembler | None = None,
    ) -> None:
        self.config = config or PaperConfig()
        self.emitter = ensure_emitter(emitter)
        self.fetcher = fetcher
        self.rasterizer = rasterizer
        self.normaliser = normaliser
        self.renderer = renderer or DocumentRenderer(self.config.render, emitter=self.emitter)
        self.assembler = assembler or ArchiveAssembler(
            self.config.render, self.config.assets, emitter=self.emitter
        )
        self._generation = 0
        self._session: RenderSession | None = None
        self._lock = threading.Lock()

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def session(self) -> RenderSession | None:
        return self._session

    def begin_session(self) -> RenderSession:
        """Supersede the active session and return a fresh one."""
        with self._lock:
            previous = self._session
            self._generation += 1
            session = RenderSession(generation=self._generation)
            self._session = session
        if previous is not None and previous.is_current:
            previous.supersede()
            record_event(
                self.emitter,
                "session_superseded",
                {"generation": previous.generation, "by": session.generation},
            )
        return session

    def pipeline(self, session: RenderSession) -> ImageAssetPipeline:
        return ImageAssetPipeline(
            session,
            config=self.config.assets,
            fetcher=self.fetcher,
            rasterizer=self.rasterizer,
            normaliser=self.normaliser,
            emitter=self.emitter,
        )

    def convert(self, document: Document) -> Conversion:
        """Render ``document`` and schedule asset resolution and archiving.

        Must be called while an event loop is running. The returned handle
        carries the first-pass LaTeX immediately.
        """
        session = self.begin_session()
        pipeline = self.pipeline(session)
        latex = self.renderer.render(document, pipeline)

        conversion = Conversion(
            generation=session.generation,
            latex=latex,
            session=session,
        )
        conversion.archive = asyncio.create_task(
            self._finalise(document, pipeline, conversion)
        )
        return conversion

    def convert_markdown(self, text: str, engine: MarkdownEngine) -> Conversion:
        """Render Markdown with ``engine`` while feeding its images to the pipeline."""
        session = self.begin_session()
        pipeline = self.pipeline(session)
        latex = engine.render_markdown(text, pipeline.register_image)

        conversion = Conversion(
            generation=session.generation,
            latex=latex,
            session=session,
        )
        conversion.archive = asyncio.create_task(
            self._finalise_markdown(text, engine, pipeline, conversion)
        )
        return conversion

    def convert_sync(self, document: Document) -> ConversionResult:
        """Run a complete conversion on a private event loop."""

        async def _run() -> ConversionResult:
            conversion = self.convert(document)
            assert conversion.archive is not None
            payload = await conversion.archive
            return ConversionResult(
                latex=conversion.latex,
                final_latex=conversion.final_latex,
                archive=payload,
                failed=conversion.session.failed_urls(),
            )

        return asyncio.run(_run())

    async def _finalise(
        self, document: Document, pipeline: ImageAssetPipeline, conversion: Conversion
    ) -> bytes | None:
        session = pipeline.session
        latex = conversion.latex
        if len(session.names):
            outcome = await pipeline.all_settled(session.generation)
            if outcome is SettleOutcome.SUPERSEDED:
                record_event(
                    self.emitter, "conversion_superseded", {"generation": session.generation}
                )
                return None
            latex = self.renderer.render(document, session.reference)

        assembled = await asyncio.to_thread(self.assembler.assemble, latex, session)
        if assembled is not None and not session.is_current:
            record_event(
                self.emitter, "conversion_superseded", {"generation": session.generation}
            )
            return None
        return self._publish(assembled, conversion)

    async def _finalise_markdown(
        self,
        text: str,
        engine: MarkdownEngine,
        pipeline: ImageAssetPipeline,
        conversion: Conversion,
    ) -> bytes | None:
        session = pipeline.session
        outcome = await pipeline.all_settled(session.generation)
        if outcome is SettleOutcome.SUPERSEDED:
            record_event(
                self.emitter, "conversion_superseded", {"generation": session.generation}
            )
            return None

        payload = await asyncio.to_thread(
            engine.render_markdown_to_archive, text, session.resolved_by_url()
        )
        if not session.is_current:
            record_event(
                self.emitter, "conversion_superseded", {"generation": session.generation}
            )
            return None
        record_event(
            self.emitter,
            "archive_ready",
            {
                "generation": session.generation,
                "images": len(session.resolved_images()),
                "size": len(payload),
            },
        )
        return payload

    @staticmethod
    def _publish(assembled: AssembledArchive | None, conversion: Conversion) -> bytes | None:
        if assembled is None:
            return None
        conversion.final_latex = assembled.latex
        return assembled.payload


__all__ = ["Conversion", "ConversionResult", "Converter", "MarkdownEngine"]
