"""State machine opening and closing list environments across lines."""

from __future__ import annotations

from dataclasses import dataclass

from paperlatex.core.document import ListInfo, ListType

from .formatter import LaTeXFormatter


ENVIRONMENTS: dict[ListType, str] = {
    ListType.BULLET: "itemize",
    ListType.TASK: "itemize",
    ListType.TASK_DONE: "itemize",
    ListType.NUMBER: "enumerate",
    ListType.QUOTE: "quote",
}

MARKERS: dict[ListType, str] = {
    ListType.BULLET: "\\item ",
    ListType.NUMBER: "\\item ",
    ListType.TASK: "\\item[\\uncheckedbox] ",
    ListType.TASK_DONE: "\\item[\\checkedbox] ",
}


@dataclass(frozen=True, slots=True)
class ListFrame:
    """One open environment identified by its nesting level and list type."""

    level: int
    type: ListType

    @property
    def environment(self) -> str:
        return ENVIRONMENTS[self.type]

    @property
    def indent_steps(self) -> int:
        return 1 if self.type is ListType.QUOTE else 2


class ListNesting:
    """Track open list/quote environments and emit their open/close sequence.

    Lines are fed in document order through :meth:`advance`. Every environment
    opened along the way is closed again once a non-list line arrives or
    :meth:`close_all` is called, so the frame stack is empty before and after
    a complete line sequence.
    """

    def __init__(self) -> None:
        self.frames: list[ListFrame] = []
        self.opened = 0
        self.closed = 0

    @property
    def depth(self) -> int:
        return len(self.frames)

    @property
    def top(self) -> ListFrame | None:
        return self.frames[-1] if self.frames else None

    def advance(self, formatter: LaTeXFormatter, info: ListInfo | None) -> None:
        """Reconcile the open environments with the next line and write its marker."""
        if info is None or not info.is_item:
            self.close_all(formatter)
            return

        level, list_type = info.level, info.type
        while self.frames and self._must_close(level, list_type):
            self._close_top(formatter)

        top_level = self.top.level if self.frames else 0
        if list_type is not ListType.INDENT and level > top_level:
            self._open(formatter, ListFrame(level, list_type))

        self._write_marker(formatter, list_type)

    def close_all(self, formatter: LaTeXFormatter) -> None:
        """Close every open environment, innermost first."""
        while self.frames:
            self._close_top(formatter)

    def _must_close(self, level: int, list_type: ListType) -> bool:
        top = self.frames[-1]
        if level < top.level:
            return True
        return level == top.level and list_type is not top.type and list_type is not ListType.INDENT

    def _open(self, formatter: LaTeXFormatter, frame: ListFrame) -> None:
        formatter.write_on_single_line(f"\\begin{{{frame.environment}}}")
        for _ in range(frame.indent_steps):
            formatter.indent()
        self.frames.append(frame)
        self.opened += 1

    def _close_top(self, formatter: LaTeXFormatter) -> None:
        frame = self.frames.pop()
        for _ in range(frame.indent_steps):
            formatter.unindent()
        formatter.add_newlines(1)
        formatter.limit_newlines(1)
        formatter.write_raw(f"\\end{{{frame.environment}}}")
        formatter.add_newlines(2)
        self.closed += 1

    def _write_marker(self, formatter: LaTeXFormatter, list_type: ListType) -> None:
        if list_type is ListType.QUOTE:
            formatter.add_newlines(1)
            return
        if list_type is ListType.INDENT:
            formatter.add_newlines(2)
            return
        formatter.add_newlines(1)
        formatter.unindent()
        formatter.write_raw(MARKERS[list_type])
        formatter.indent()
        formatter.limit_newlines(0)


__all__ = ["ENVIRONMENTS", "MARKERS", "ListFrame", "ListNesting"]
