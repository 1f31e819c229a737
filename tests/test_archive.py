from __future__ import annotations

import io
import zipfile

from paperlatex.assets.archive import ArchiveAssembler, build_archive
from paperlatex.assets.session import RenderSession
from paperlatex.core.config import AssetConfig, RenderConfig

from conftest import RecordingEmitter


def test_build_archive_layout(png_bytes: bytes) -> None:
    payload = build_archive(("paper.tex", "\\section{É}"), {"a.png": png_bytes})

    with zipfile.ZipFile(io.BytesIO(payload)) as archive:
        infos = {info.filename: info for info in archive.infolist()}
        assert set(infos) == {"figures/", "figures/a.png", "paper.tex"}
        assert infos["figures/a.png"].compress_type == zipfile.ZIP_STORED
        assert archive.read("figures/a.png") == png_bytes
        assert archive.read("paper.tex").decode("utf-8") == "\\section{É}"


def test_assembler_uses_configured_names(png_bytes: bytes, emitter: RecordingEmitter) -> None:
    session = RenderSession(generation=3)
    session.names.assign("https://example.com/x_fig.png")
    session.store("https://example.com/x_fig.png", png_bytes)
    assembler = ArchiveAssembler(
        RenderConfig(figures_dir="img"), AssetConfig(tex_name="report"), emitter=emitter
    )

    assembled = assembler.assemble("latex", session)

    assert assembled is not None
    assert assembled.generation == 3
    assert assembled.images == ("fig.png",)
    with zipfile.ZipFile(io.BytesIO(assembled.payload)) as archive:
        assert sorted(archive.namelist()) == ["img/", "img/fig.png", "report.tex"]
    assert emitter.names() == ["archive_ready"]


def test_assembler_is_noop_for_superseded_session(emitter: RecordingEmitter) -> None:
    calls: list[object] = []

    def builder(*args: object, **kwargs: object) -> bytes:
        calls.append(args)
        return b""

    session = RenderSession(generation=1)
    session.supersede()

    assert ArchiveAssembler(builder=builder, emitter=emitter).assemble("x", session) is None
    assert calls == []
    assert emitter.names() == ["conversion_superseded"]


def test_store_after_supersede_is_dropped(png_bytes: bytes) -> None:
    session = RenderSession(generation=1)
    session.supersede()

    assert session.store("https://example.com/x_fig.png", png_bytes) is False
    assert session.resolved_images() == {}
