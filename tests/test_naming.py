from __future__ import annotations

import pytest

from paperlatex.assets.naming import FilenameRegistry, derive_basename, output_suffix, source_suffix


def test_colliding_basenames_get_numbered_suffixes() -> None:
    registry = FilenameRegistry()
    names = [
        registry.assign(url).filename
        for url in (
            "https://a.example/123_diagram.png",
            "https://b.example/456_diagram.png",
            "https://c.example/789_diagram.png",
        )
    ]

    assert names == ["diagram.png", "diagram-2.png", "diagram-3.png"]


def test_same_url_keeps_its_name() -> None:
    registry = FilenameRegistry()
    first = registry.assign("https://a.example/x_photo.jpg")
    second = registry.assign("https://a.example/x_photo.jpg")

    assert first is second
    assert len(registry) == 1
    assert "https://a.example/x_photo.jpg" in registry


def test_synthetic_names_use_registration_index() -> None:
    registry = FilenameRegistry()
    registry.assign("https://a.example/x_first.png")
    name = registry.assign("https://a.example/nounderscore.png")

    assert name.filename == "figure-2.png"
    assert registry.filenames() == ["first.png", "figure-2.png"]


def test_vector_images_become_png() -> None:
    name = FilenameRegistry().assign("https://a.example/x_chart.svg?rev=3")

    assert name.filename == "chart.png"
    assert name.is_vector
    assert not name.needs_normalising


def test_unknown_raster_formats_are_normalised() -> None:
    name = FilenameRegistry().assign("https://a.example/x_anim.gif")

    assert name.filename == "anim.png"
    assert name.needs_normalising


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("https://a.example/abc_My Plot.png", "My-Plot"),
        ("https://a.example/dir_name/file.png", None),
        ("https://a.example/a_b_c.pdf", "c"),
        ("relative/path_fig.jpeg", "fig"),
    ],
)
def test_derive_basename(url: str, expected: str | None) -> None:
    assert derive_basename(url) == expected


def test_suffix_helpers() -> None:
    assert source_suffix("https://a.example/x.JPG#frag") == "jpg"
    assert source_suffix("https://a.example/raw") == ""
    assert output_suffix("pdf") == "pdf"
    assert output_suffix("webp") == "png"
    assert output_suffix("") == "png"
