from __future__ import annotations

import pytest

from paperlatex.latex.escape import escape_latex_chars, escape_url


@pytest.mark.parametrize(
    ("payload", "expected"),
    [
        ("50% & $5", r"50\% \& \$5"),
        ("#1 a_b {c}", r"\#1 a\_b \{c\}"),
        ("~", r"\textasciitilde{}"),
        ("^", r"\textasciicircum{}"),
        ("C:\\path", r"C:\textbackslash{}path"),
        ("Wait... done…", r"Wait\ldots{} done\ldots{}"),
        ("1–2 — 3", "1--2 --- 3"),
        ("a\u00a0b", "a~b"),
        ("a    b", "a b"),
    ],
)
def test_escape_latex_chars(payload: str, expected: str) -> None:
    assert escape_latex_chars(payload) == expected


def test_other_unicode_passes_through() -> None:
    assert escape_latex_chars("café 東京 ∑") == "café 東京 ∑"


def test_empty_text() -> None:
    assert escape_latex_chars("") == ""


def test_legacy_accents_use_macros() -> None:
    escaped = escape_latex_chars("café 50%", legacy_accents=True)

    assert "\\'{e}" in escaped
    assert "\\%" in escaped


def test_escape_url_quotes_and_escapes() -> None:
    escaped = escape_url("https://example.com/a b?x=1&y=2#top")

    assert escaped == r"https://example.com/a\%20b?x=1\&y=2\#top"
