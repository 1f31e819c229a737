"""Bundle rendered LaTeX and its figures into a zip archive."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
import io
import zipfile

from paperlatex.core.config import AssetConfig, RenderConfig
from paperlatex.core.diagnostics import DiagnosticEmitter, ensure_emitter, record_event
from paperlatex.core.exceptions import ArchiveError

from .session import RenderSession


ArchiveBuilder = Callable[..., bytes]


def build_archive(
    text_entry: tuple[str, str],
    binary_entries: Mapping[str, bytes],
    *,
    figures_dir: str = "figures",
) -> bytes:
    """Return zip bytes holding ``figures_dir/`` with every image plus the text entry.

    Images are stored uncompressed since PNG and JPEG payloads are already
    compressed. The LaTeX source is deflated.
    """
    buffer = io.BytesIO()
    try:
        with zipfile.ZipFile(buffer, "w") as archive:
            archive.mkdir(figures_dir)
            for filename, payload in binary_entries.items():
                archive.writestr(
                    f"{figures_dir}/{filename}", payload, compress_type=zipfile.ZIP_STORED
                )
            name, text = text_entry
            archive.writestr(name, text.encode("utf-8"), compress_type=zipfile.ZIP_DEFLATED)
    except (OSError, ValueError, zipfile.BadZipFile) as exc:
        raise ArchiveError(f"Failed to build archive: {exc}") from exc
    return buffer.getvalue()


@dataclass(frozen=True, slots=True)
class AssembledArchive:
    """Archive produced for one generation together with the LaTeX it contains."""

    generation: int
    latex: str
    payload: bytes
    images: tuple[str, ...]


class ArchiveAssembler:
    """Turn a settled session and its final LaTeX into an archive."""

    def __init__(
        self,
        render_config: RenderConfig | None = None,
        asset_config: AssetConfig | None = None,
        *,
        builder: ArchiveBuilder = build_archive,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        self.render_config = render_config or RenderConfig()
        self.asset_config = asset_config or AssetConfig()
        self.builder = builder
        self.emitter = ensure_emitter(emitter)

    @property
    def tex_filename(self) -> str:
        return f"{self.asset_config.tex_name}.tex"

    def assemble(self, latex: str, session: RenderSession) -> AssembledArchive | None:
        """Build the archive, or return ``None`` when ``session`` was superseded."""
        if not session.is_current:
            record_event(
                self.emitter, "conversion_superseded", {"generation": session.generation}
            )
            return None

        images = session.resolved_images()
        payload = self.builder(
            (self.tex_filename, latex),
            images,
            figures_dir=self.render_config.figures_dir,
        )
        record_event(
            self.emitter,
            "archive_ready",
            {"generation": session.generation, "images": len(images), "size": len(payload)},
        )
        return AssembledArchive(
            generation=session.generation,
            latex=latex,
            payload=payload,
            images=tuple(images),
        )


__all__ = ["ArchiveAssembler", "AssembledArchive", "build_archive"]
