"""Whitespace-aware output sink used while rendering LaTeX."""

from __future__ import annotations

from .escape import escape_latex_chars


DOCUMENT_CLOSER = "\\end{document}\n"


class LaTeXFormatter:
    """Accumulate LaTeX text while fusing newline requests and tracking indentation.

    Newlines are never written eagerly. Callers record an intent with
    :meth:`add_newlines` ("at least *n* newlines here") and may tighten it with
    :meth:`limit_newlines` ("but no more than *m*"). The pending budget is
    flushed right before the next non-whitespace write, followed by the
    current indentation. Consecutive blocks thereby share their spacing
    instead of stacking it: a paragraph asking for two trailing newlines
    followed by a heading asking for three leading ones yields exactly three.

    Whitespace-only writes at the start of a line are dropped so that empty
    inline content never produces stray spaces or blank lines.
    """

    def __init__(
        self,
        *,
        indent_width: int = 2,
        max_newlines: int | None = None,
        legacy_accents: bool = False,
    ) -> None:
        self.indent_width = indent_width
        self.max_newlines = max_newlines
        self.legacy_accents = legacy_accents
        self.indentation_depth = 0
        self.pending_newlines = 0
        self.newline_cap: int | None = None
        self._parts: list[str] = []
        self._at_line_start = True

    def write_raw(self, text: str) -> None:
        """Write ``text`` verbatim, flushing pending newlines first."""
        if not text:
            return
        if text.isspace():
            if self._at_line_start or self._flushable_newlines():
                return
            self._append(text)
            return
        self._flush()
        self._append(text)

    def write_escaped(self, text: str) -> None:
        """Write ``text`` after escaping every LaTeX special character."""
        self.write_raw(escape_latex_chars(text, legacy_accents=self.legacy_accents))

    def write_on_single_line(self, text: str) -> None:
        """Write ``text`` with at least one newline above and below it."""
        self.add_newlines(1)
        self.write_raw(text)
        self.add_newlines(1)

    def add_newlines(self, count: int) -> None:
        """Request at least ``count`` newlines before the next write."""
        self.pending_newlines = max(self.pending_newlines, count)

    def limit_newlines(self, count: int) -> None:
        """Cap the newlines written by the next flush to ``count``."""
        if self.newline_cap is None:
            self.newline_cap = count
        else:
            self.newline_cap = min(self.newline_cap, count)

    def indent(self) -> None:
        self.indentation_depth += 1

    def unindent(self) -> None:
        if self.indentation_depth > 0:
            self.indentation_depth -= 1

    def finish(self, closer: str | None = DOCUMENT_CLOSER) -> str:
        """Append the document closer and return the accumulated text."""
        if closer:
            self.add_newlines(3)
            self.limit_newlines(3)
            self.write_raw(closer)
        return self.getvalue()

    def getvalue(self) -> str:
        """Return the text written so far, ignoring pending newlines."""
        return "".join(self._parts)

    def _flushable_newlines(self) -> int:
        if not self._parts:
            return 0
        count = self.pending_newlines
        for cap in (self.newline_cap, self.max_newlines):
            if cap is not None:
                count = min(count, cap)
        return count

    def _flush(self) -> None:
        newlines = self._flushable_newlines()
        if newlines:
            self._parts.append("\n" * newlines + " " * (self.indent_width * self.indentation_depth))
        self.pending_newlines = 0
        self.newline_cap = None

    def _append(self, text: str) -> None:
        self._parts.append(text)
        self._at_line_start = text.endswith("\n")


__all__ = ["DOCUMENT_CLOSER", "LaTeXFormatter"]
