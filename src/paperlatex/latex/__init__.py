"""LaTeX output primitives: escaping, formatting, list nesting, and rendering."""

from __future__ import annotations

from .escape import escape_latex_chars, escape_url
from .formatter import DOCUMENT_CLOSER, LaTeXFormatter
from .lists import ListNesting
from .renderer import DocumentRenderer


__all__ = [
    "DOCUMENT_CLOSER",
    "DocumentRenderer",
    "LaTeXFormatter",
    "ListNesting",
    "escape_latex_chars",
    "escape_url",
]
