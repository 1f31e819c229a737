"""Walk a document tree and emit LaTeX through the whitespace formatter."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from pathlib import Path
from typing import Any, TypeVar

from jinja2 import Environment, FileSystemLoader

from paperlatex.assets.naming import FilenameRegistry
from paperlatex.core.config import RenderConfig
from paperlatex.core.context import ImageHook, ImageReference, RenderContext
from paperlatex.core.diagnostics import DiagnosticEmitter, NullEmitter
from paperlatex.core.document import (
    Bold,
    Document,
    Group,
    Heading,
    HorizontalRule,
    Hyperlink,
    Image,
    InlineCode,
    InlineMath,
    Italic,
    Line,
    Strikethrough,
    Table,
    Text,
    plain_text,
)

from .escape import escape_latex_chars, escape_url
from .formatter import DOCUMENT_CLOSER, LaTeXFormatter
from .lists import ListNesting


TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"

# (command, newlines before, newlines after)
HEADINGS: dict[int, tuple[str, int, int]] = {
    1: ("\\section{", 3, 2),
    2: ("\\subsection{", 3, 2),
    3: ("\\subsubsection{", 3, 2),
}
PARAGRAPH_HEADING: tuple[str, int, int] = ("\\paragraph{", 2, 1)

HORIZONTAL_RULE = "\\medbreak\\hrule\\medbreak"

_BLOCK_LIKE = (Heading, HorizontalRule, Image)

F = TypeVar("F", bound=Callable[..., Any])


def handles(*node_types: type) -> Callable[[F], F]:
    """Mark a renderer method as the handler for the given inline node types."""

    def decorator(func: F) -> F:
        func.__render_nodes__ = node_types  # type: ignore[attr-defined]
        return func

    return decorator


class LocalImageNames:
    """Image hook used when no asset pipeline is attached: names only, never available."""

    def __init__(self) -> None:
        self.registry = FilenameRegistry()

    def __call__(self, url: str) -> ImageReference:
        return ImageReference(self.registry.assign(url).filename, available=False)


class DocumentRenderer:
    """Convert a :class:`Document` into LaTeX source."""

    def __init__(
        self,
        config: RenderConfig | None = None,
        *,
        emitter: DiagnosticEmitter | None = None,
        template_dir: Path = TEMPLATE_DIR,
    ) -> None:
        self.config = config or RenderConfig()
        self.emitter = emitter or NullEmitter()
        self.env = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            block_start_string=r"\BLOCK{",
            block_end_string="}",
            variable_start_string=r"\VAR{",
            variable_end_string="}",
            comment_start_string=r"\#{",
            comment_end_string="}",
        )
        self.env.filters.setdefault("latex_escape", self._escape)

        self._handlers: dict[type, Callable[[Any, RenderContext], None]] = {}
        for name in dir(type(self)):
            member = getattr(type(self), name, None)
            for node_type in getattr(member, "__render_nodes__", ()):
                self._handlers[node_type] = getattr(self, name)

    def render(
        self,
        document: Document,
        images: ImageHook | None = None,
        *,
        full_document: bool | None = None,
    ) -> str:
        """Render ``document`` and return the LaTeX source.

        ``images`` is called once per image occurrence; references it reports
        as unavailable are written commented out.
        """
        full = self.config.full_document if full_document is None else full_document
        formatter = LaTeXFormatter(
            indent_width=self.config.indent_width,
            max_newlines=self.config.max_newlines,
            legacy_accents=self.config.legacy_latex_accents,
        )
        context = RenderContext(
            config=self.config,
            formatter=formatter,
            lists=ListNesting(),
            images=images or LocalImageNames(),
            emitter=self.emitter,
        )

        if full:
            formatter.write_raw(self.preamble(document))
            formatter.add_newlines(2)
            formatter.limit_newlines(2)

        for block in document.blocks:
            self.render_block(block, context)

        self._flush_code(context)
        context.lists.close_all(formatter)
        return formatter.finish(DOCUMENT_CLOSER if full else None)

    def preamble(self, document: Document) -> str:
        template = self.env.get_template("preamble.tex")
        return template.render(
            title=document.title or self.config.title,
            author=self.config.author,
        ).rstrip()

    def render_block(self, block: object, context: RenderContext) -> None:
        if isinstance(block, Line):
            self.render_line(block, context)
            return

        self._flush_code(context)
        context.lists.close_all(context.formatter)
        if isinstance(block, Table):
            self.render_table(block, context)
        else:
            self.render_inline(getattr(block, "content", ()), context)

    def render_line(self, line: Line, context: RenderContext) -> None:
        formatter = context.formatter
        if line.is_code:
            context.lists.close_all(formatter)
            context.code_lines.append(plain_text(line.content))
            return

        self._flush_code(context)

        if line.is_list_item:
            context.lists.advance(formatter, line.list_info)
            self.render_inline(line.content, context)
            formatter.add_newlines(1)
            return

        context.lists.close_all(formatter)
        if _is_blank(line.content):
            formatter.add_newlines(2)
            return
        if all(isinstance(node, _BLOCK_LIKE) for node in line.content):
            self.render_inline(line.content, context)
            return

        formatter.add_newlines(2)
        self.render_inline(line.content, context)
        formatter.add_newlines(2)

    def render_table(self, table: Table, context: RenderContext) -> None:
        formatter = context.formatter
        columns = table.column_count
        if not columns:
            return

        formatter.add_newlines(2)
        formatter.write_raw(f"\\begin{{tabular}}{{{'l' * columns}}}")
        formatter.indent()
        last = len(table.rows) - 1
        for index, row in enumerate(table.rows):
            formatter.add_newlines(1)
            for column in range(columns):
                if column:
                    formatter.write_raw(" ")
                    formatter.write_raw("& ")
                cell = row[column] if column < len(row) else ()
                self.render_inline(cell, context)
            if index == 0:
                formatter.write_raw(" \\\\\\hline")
            elif index != last:
                formatter.write_raw(" \\\\")
        formatter.unindent()
        formatter.add_newlines(1)
        formatter.write_raw("\\end{tabular}")
        formatter.add_newlines(2)

    def render_inline(self, nodes: Iterable[object], context: RenderContext) -> None:
        for node in nodes:
            handler = self._handlers.get(type(node))
            if handler is not None:
                handler(node, context)
                continue
            # Unknown node kinds degrade to their children.
            self.render_inline(getattr(node, "children", ()), context)

    @handles(Text)
    def _text(self, node: Text, context: RenderContext) -> None:
        context.formatter.write_escaped(node.text)

    @handles(Group)
    def _group(self, node: Group, context: RenderContext) -> None:
        self.render_inline(node.children, context)

    @handles(Bold)
    def _bold(self, node: Bold, context: RenderContext) -> None:
        self._wrap("\\textbf{", node.children, context)

    @handles(Italic)
    def _italic(self, node: Italic, context: RenderContext) -> None:
        self._wrap("\\emph{", node.children, context)

    @handles(Strikethrough)
    def _strikethrough(self, node: Strikethrough, context: RenderContext) -> None:
        self._wrap("\\sout{", node.children, context)

    @handles(Hyperlink)
    def _hyperlink(self, node: Hyperlink, context: RenderContext) -> None:
        url = escape_url(node.url, legacy_accents=self.config.legacy_latex_accents)
        self._wrap(f"\\href{{{url}}}{{", node.children, context)

    @handles(InlineCode)
    def _inline_code(self, node: InlineCode, context: RenderContext) -> None:
        context.formatter.write_raw(f"\\texttt{{{self._escape(node.text)}}}")

    @handles(InlineMath)
    def _inline_math(self, node: InlineMath, context: RenderContext) -> None:
        context.formatter.write_raw(f"${node.latex}$")

    @handles(Heading)
    def _heading(self, node: Heading, context: RenderContext) -> None:
        command, before, after = HEADINGS.get(node.level, PARAGRAPH_HEADING)
        formatter = context.formatter
        formatter.add_newlines(before)
        self._wrap(command, node.children, context)
        formatter.add_newlines(after)
        formatter.limit_newlines(2)

    @handles(HorizontalRule)
    def _horizontal_rule(self, node: HorizontalRule, context: RenderContext) -> None:
        formatter = context.formatter
        formatter.add_newlines(2)
        formatter.write_raw(HORIZONTAL_RULE)
        formatter.add_newlines(2)

    @handles(Image)
    def _image(self, node: Image, context: RenderContext) -> None:
        reference = context.images(node.url)
        formatter = context.formatter
        prefix = "" if reference.available else "%"
        formatter.add_newlines(2)
        formatter.write_raw(
            f"{prefix}\\includegraphics[width={self.config.image_width}]"
            f"{{{context.figure_path(reference.filename)}}}"
        )
        formatter.add_newlines(2)

    def _wrap(self, opening: str, children: Sequence[object], context: RenderContext) -> None:
        context.formatter.write_raw(opening)
        self.render_inline(children, context)
        context.formatter.write_raw("}")

    def _flush_code(self, context: RenderContext) -> None:
        if not context.code_lines:
            return
        lines, context.code_lines = context.code_lines, []
        formatter = context.formatter
        formatter.add_newlines(2)
        formatter.write_raw("\\begin{verbatim}")
        formatter.add_newlines(1)
        formatter.write_raw("\n".join(self._escape(line) for line in lines))
        formatter.add_newlines(1)
        formatter.limit_newlines(1)
        formatter.write_raw("\\end{verbatim}")
        formatter.add_newlines(2)

    def _escape(self, text: str) -> str:
        return escape_latex_chars(text, legacy_accents=self.config.legacy_latex_accents)


def _is_blank(nodes: Sequence[object]) -> bool:
    if not nodes:
        return True
    return all(isinstance(node, Text) and not node.text.strip() for node in nodes)


__all__ = [
    "HEADINGS",
    "HORIZONTAL_RULE",
    "PARAGRAPH_HEADING",
    "DocumentRenderer",
    "LocalImageNames",
    "handles",
]
