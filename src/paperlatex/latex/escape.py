"""Utility helpers specific to LaTeX escaping."""

from __future__ import annotations

import re

from pylatexenc.latexencode import unicode_to_latex
from requests.utils import requote_uri


_BASIC_LATEX_ESCAPE_MAP = {
    "&": r"\&",
    "%": r"\%",
    "#": r"\#",
    "$": r"\$",
    "_": r"\_",
    "{": r"\{",
    "}": r"\}",
    "~": r"\textasciitilde{}",
    "^": r"\textasciicircum{}",
    "\\": r"\textbackslash{}",
    "\u00a0": "~",
    "–": "--",
    "—": "---",
    "…": r"\ldots{}",
    "...": r"\ldots{}",
}

_TOKEN_PATTERN = re.compile(r"\.\.\.| {2,}|[&%#$_{}~^\\\u00a0–—…]")

_ACCENT_NEEDS_BRACES_PATTERN = re.compile(
    r"\\([" + re.escape("`'^\"~=\\.Hrvuck") + r"])\s*([A-Za-z])(?!\{)"
)


def _replace_token(match: re.Match[str]) -> str:
    token = match.group(0)
    if token.startswith(" "):
        return " "
    return _BASIC_LATEX_ESCAPE_MAP[token]


def _wrap_latex_output(payload: str) -> str:
    """Ensure accent macros wrap their payload in braces."""

    def _repl(match: re.Match[str]) -> str:
        command, char = match.groups()
        return f"\\{command}{{{char}}}"

    return _ACCENT_NEEDS_BRACES_PATTERN.sub(_repl, payload)


def escape_latex_chars(text: str, *, legacy_accents: bool = False) -> str:
    """Escape LaTeX special characters and normalise typographic punctuation.

    Every input character has a defined output: the ten LaTeX specials are
    replaced by their text-mode forms, ellipses and dashes become their LaTeX
    ligatures, runs of spaces collapse to one, and everything else passes
    through unchanged (or is encoded with legacy accent macros when
    ``legacy_accents`` is set).
    """
    if not text:
        return text
    escaped = _TOKEN_PATTERN.sub(_replace_token, text)
    if legacy_accents:
        encoded = unicode_to_latex(escaped, non_ascii_only=True, unknown_char_warning=False)
        return _wrap_latex_output(encoded)
    return escaped


def escape_url(url: str, *, legacy_accents: bool = False) -> str:
    """Escape a URL for safe use in LaTeX commands."""
    return escape_latex_chars(requote_uri(url), legacy_accents=legacy_accents)


__all__ = ["escape_latex_chars", "escape_url"]
