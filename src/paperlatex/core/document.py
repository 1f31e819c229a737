"""Typed document tree consumed by the LaTeX renderer.

The tree is produced by an external parser. Every node is an immutable value
carrying a ``kind`` discriminator so that serialised trees can be validated
back into the same shape with :func:`load_document`.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from functools import cache
from pathlib import Path
from typing import Annotated, Literal, Union

from pydantic import Field, TypeAdapter, ValidationError

from .exceptions import DocumentLoadError


class ListType(str, Enum):
    """Kinds of list-like structure a line may belong to."""

    NONE = "none"
    BULLET = "bullet"
    NUMBER = "number"
    QUOTE = "quote"
    TASK = "task"
    TASK_DONE = "task_done"
    INDENT = "indent"


@dataclass(frozen=True, slots=True)
class ListInfo:
    """Nesting level and list type attached to a line."""

    level: int
    type: ListType = ListType.BULLET

    def __post_init__(self) -> None:
        if self.level < 0:
            raise ValueError(f"List level must be non-negative, got {self.level}")

    @property
    def is_item(self) -> bool:
        return self.level > 0 and self.type is not ListType.NONE


@dataclass(frozen=True, slots=True)
class Text:
    text: str
    kind: Literal["text"] = "text"


@dataclass(frozen=True, slots=True)
class Bold:
    children: Sequence[InlineNode] = ()
    kind: Literal["bold"] = "bold"


@dataclass(frozen=True, slots=True)
class Italic:
    children: Sequence[InlineNode] = ()
    kind: Literal["italic"] = "italic"


@dataclass(frozen=True, slots=True)
class Strikethrough:
    children: Sequence[InlineNode] = ()
    kind: Literal["strikethrough"] = "strikethrough"


@dataclass(frozen=True, slots=True)
class Hyperlink:
    url: str
    children: Sequence[InlineNode] = ()
    kind: Literal["hyperlink"] = "hyperlink"


@dataclass(frozen=True, slots=True)
class InlineCode:
    text: str
    kind: Literal["inline_code"] = "inline_code"


@dataclass(frozen=True, slots=True)
class InlineMath:
    """Literal LaTeX math source, emitted verbatim between dollar signs."""

    latex: str
    kind: Literal["inline_math"] = "inline_math"


@dataclass(frozen=True, slots=True)
class Image:
    url: str
    kind: Literal["image"] = "image"


@dataclass(frozen=True, slots=True)
class Group:
    """Structural wrapper without any rendering effect."""

    children: Sequence[InlineNode] = ()
    kind: Literal["group"] = "group"


@dataclass(frozen=True, slots=True)
class Heading:
    """Heading span; levels past three render as run-in paragraph headings."""

    level: int
    children: Sequence[InlineNode] = ()
    kind: Literal["heading"] = "heading"


@dataclass(frozen=True, slots=True)
class HorizontalRule:
    kind: Literal["horizontal_rule"] = "horizontal_rule"


InlineNode = Annotated[
    Union[
        Text,
        Bold,
        Italic,
        Strikethrough,
        Hyperlink,
        InlineCode,
        InlineMath,
        Image,
        Group,
        Heading,
        HorizontalRule,
    ],
    Field(discriminator="kind"),
]


@dataclass(frozen=True, slots=True)
class Line:
    """One top-level block of the document."""

    content: Sequence[InlineNode] = ()
    list_info: ListInfo | None = None
    is_code: bool = False
    kind: Literal["line"] = "line"

    @property
    def is_list_item(self) -> bool:
        return self.list_info is not None and self.list_info.is_item


Cell = Sequence[InlineNode]


@dataclass(frozen=True, slots=True)
class Table:
    """Rows of cells; the first row fixes the column count."""

    rows: Sequence[Sequence[Cell]] = ()
    kind: Literal["table"] = "table"

    @property
    def column_count(self) -> int:
        return len(self.rows[0]) if self.rows else 0


Block = Annotated[Union[Line, Table], Field(discriminator="kind")]


@dataclass(frozen=True, slots=True)
class Document:
    blocks: Sequence[Block] = ()
    title: str | None = None


def iter_inline(nodes: Iterable[object]) -> Iterable[object]:
    """Yield every inline node of a subtree in document order."""
    for node in nodes:
        yield node
        children = getattr(node, "children", None)
        if children:
            yield from iter_inline(children)


def plain_text(nodes: Iterable[object]) -> str:
    """Concatenate the textual payload of an inline subtree."""
    parts: list[str] = []
    for node in iter_inline(nodes):
        if isinstance(node, (Text, InlineCode)):
            parts.append(node.text)
        elif isinstance(node, InlineMath):
            parts.append(node.latex)
    return "".join(parts)


@cache
def _document_adapter() -> TypeAdapter[Document]:
    return TypeAdapter(Document)


def load_document(payload: str | bytes) -> Document:
    """Validate a JSON payload into a :class:`Document`."""
    try:
        return _document_adapter().validate_json(payload)
    except ValidationError as exc:
        raise DocumentLoadError(f"Invalid document tree: {exc}") from exc


def load_document_file(path: Path | str) -> Document:
    """Read and validate a JSON document tree from disk."""
    source = Path(path)
    try:
        payload = source.read_bytes()
    except OSError as exc:
        raise DocumentLoadError(f"Unable to read document '{source}': {exc}") from exc
    return load_document(payload)


__all__ = [
    "Block",
    "Bold",
    "Cell",
    "Document",
    "Group",
    "Heading",
    "HorizontalRule",
    "Hyperlink",
    "Image",
    "InlineCode",
    "InlineMath",
    "InlineNode",
    "Italic",
    "Line",
    "ListInfo",
    "ListType",
    "Strikethrough",
    "Table",
    "Text",
    "iter_inline",
    "load_document",
    "load_document_file",
    "plain_text",
]
