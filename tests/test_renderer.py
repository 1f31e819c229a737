from __future__ import annotations

from dataclasses import dataclass

import pytest

from paperlatex.core.config import RenderConfig
from paperlatex.core.context import ImageReference
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
    ListInfo,
    ListType,
    Strikethrough,
    Table,
    Text,
)
from paperlatex.latex.renderer import DocumentRenderer


@pytest.fixture
def renderer() -> DocumentRenderer:
    return DocumentRenderer(RenderConfig(full_document=False))


def _para(*nodes: object) -> Line:
    return Line(content=tuple(nodes))


def _render(renderer: DocumentRenderer, *blocks: object) -> str:
    return renderer.render(Document(blocks=tuple(blocks)))


def test_paragraphs_are_separated_by_blank_line(renderer: DocumentRenderer) -> None:
    output = _render(renderer, _para(Text("Hello")), _para(Text("World")))

    assert output == "Hello\n\nWorld"


@pytest.mark.parametrize(
    ("node", "expected"),
    [
        (Bold((Text("b"),)), "\\textbf{b}"),
        (Italic((Text("i"),)), "\\emph{i}"),
        (Strikethrough((Text("s"),)), "\\sout{s}"),
        (InlineCode("a_b"), "\\texttt{a\\_b}"),
        (InlineMath("x_1^2"), "$x_1^2$"),
        (Group((Text("g"),)), "g"),
        (
            Hyperlink("https://example.com/?q=1&r=2", (Text("link"),)),
            "\\href{https://example.com/?q=1\\&r=2}{link}",
        ),
    ],
)
def test_inline_nodes(renderer: DocumentRenderer, node: object, expected: str) -> None:
    assert _render(renderer, _para(node)) == expected


def test_nested_inline_styles(renderer: DocumentRenderer) -> None:
    line = _para(Text("a "), Bold((Italic((Text("b & c"),)),)), Text(" d"))

    assert _render(renderer, line) == "a \\textbf{\\emph{b \\& c}} d"


def test_unknown_node_renders_children(renderer: DocumentRenderer) -> None:
    @dataclass(frozen=True)
    class Highlight:
        children: tuple[object, ...]
        kind: str = "highlight"

    assert _render(renderer, _para(Highlight((Text("kept"),)))) == "kept"


def test_headings(renderer: DocumentRenderer) -> None:
    output = _render(
        renderer,
        _para(Text("Intro")),
        _para(Heading(1, (Text("Section"),))),
        _para(Text("Body")),
        _para(Heading(2, (Text("Sub"),))),
        _para(Heading(3, (Text("Subsub"),))),
        _para(Heading(4, (Text("Para"),))),
        _para(Text("Tail")),
    )

    assert output == (
        "Intro\n\n\n\\section{Section}\n\nBody\n\n\n\\subsection{Sub}\n\n"
        "\\subsubsection{Subsub}\n\n\\paragraph{Para}\n\nTail"
    )


def test_horizontal_rule(renderer: DocumentRenderer) -> None:
    output = _render(renderer, _para(Text("a")), _para(HorizontalRule()), _para(Text("b")))

    assert output == "a\n\n\\medbreak\\hrule\\medbreak\n\nb"


def test_blank_line_is_a_paragraph_break(renderer: DocumentRenderer) -> None:
    output = _render(renderer, _para(Text("a")), Line(), _para(Text("   ")), _para(Text("b")))

    assert output == "a\n\nb"


def test_code_lines_share_one_verbatim_block(renderer: DocumentRenderer) -> None:
    output = _render(
        renderer,
        _para(Text("before")),
        Line(content=(Text("x = 1"),), is_code=True),
        Line(content=(Text("y = 2"),), is_code=True),
        _para(Text("after")),
    )

    assert output == "before\n\n\\begin{verbatim}\nx = 1\ny = 2\n\\end{verbatim}\n\nafter"


def test_code_block_at_end_is_flushed(renderer: DocumentRenderer) -> None:
    output = _render(renderer, Line(content=(Text("print()"),), is_code=True))

    assert output == "\\begin{verbatim}\nprint()\n\\end{verbatim}"


def test_list_lines(renderer: DocumentRenderer) -> None:
    output = _render(
        renderer,
        _para(Text("Items:")),
        Line(content=(Text("one"),), list_info=ListInfo(1, ListType.BULLET)),
        Line(content=(Text("two"),), list_info=ListInfo(1, ListType.BULLET)),
        _para(Text("Done")),
    )

    assert output == (
        "Items:\n\n\\begin{itemize}\n  \\item one\n  \\item two\n\\end{itemize}\n\nDone"
    )


def test_lists_are_closed_at_end_of_document(renderer: DocumentRenderer) -> None:
    output = _render(
        renderer,
        Line(content=(Text("first"),), list_info=ListInfo(1, ListType.NUMBER)),
        Line(content=(Text("nested"),), list_info=ListInfo(2, ListType.QUOTE)),
    )

    assert output.endswith("\\end{quote}\n\\end{enumerate}")


def test_code_line_closes_open_list(renderer: DocumentRenderer) -> None:
    output = _render(
        renderer,
        Line(content=(Text("item"),), list_info=ListInfo(1, ListType.BULLET)),
        Line(content=(Text("code"),), is_code=True),
    )

    assert output.index("\\end{itemize}") < output.index("\\begin{verbatim}")


def test_table(renderer: DocumentRenderer) -> None:
    table = Table(
        rows=(
            ((Text("A"),), (Text("B"),)),
            ((Text("1"),), (Text("2"),)),
        )
    )

    assert _render(renderer, table) == (
        "\\begin{tabular}{ll}\n  A & B \\\\\\hline\n  1 & 2\n\\end{tabular}"
    )


def test_table_rows_use_first_row_column_count(renderer: DocumentRenderer) -> None:
    table = Table(
        rows=(
            ((Text("A"),), (Text("B"),), (Text("C"),)),
            ((Text("1"),),),
            ((Text("x"),), (Text("y"),), (Text("z"),), (Text("dropped"),)),
        )
    )
    output = _render(renderer, table)

    assert output.startswith("\\begin{tabular}{lll}")
    assert "  1 &  &  \\\\\n" in output
    assert "  x & y & z\n" in output
    assert "dropped" not in output


def test_images_are_commented_without_assets(renderer: DocumentRenderer) -> None:
    output = _render(renderer, _para(Image("https://cdn.example.com/abc_plot.png")))

    assert output == "%\\includegraphics[width=\\textwidth]{figures/plot.png}"


def test_image_hook_controls_filename_and_comment(renderer: DocumentRenderer) -> None:
    seen: list[str] = []

    def hook(url: str) -> ImageReference:
        seen.append(url)
        return ImageReference("chart.png", available=True)

    document = Document(blocks=(_para(Text("See"), Image("https://x/y.svg")),))
    output = renderer.render(document, hook)

    assert seen == ["https://x/y.svg"]
    assert output == "See\n\n\\includegraphics[width=\\textwidth]{figures/chart.png}"


def test_image_width_and_figures_dir_from_config() -> None:
    renderer = DocumentRenderer(
        RenderConfig(full_document=False, figures_dir="img", image_width="0.5\\linewidth")
    )
    output = renderer.render(Document(blocks=(_para(Image("https://x/a_b.jpg")),)))

    assert output == "%\\includegraphics[width=0.5\\linewidth]{img/b.jpg}"


def test_full_document_wraps_body() -> None:
    renderer = DocumentRenderer(RenderConfig(author="Ada & Co"))
    output = renderer.render(Document(blocks=(_para(Text("Hello")),), title="On 100% Things"))

    assert output.startswith("\\documentclass{article}")
    assert "\\newcommand{\\checkedbox}" in output
    assert "\\title{On 100\\% Things}" in output
    assert "\\author{Ada \\& Co}" in output
    assert "\\maketitle\n\nHello\n\n\n\\end{document}\n" in output
    assert output.endswith("\\end{document}\n")


def test_full_document_without_title() -> None:
    renderer = DocumentRenderer()
    output = renderer.render(Document(blocks=(_para(Text("Hello")),)))

    assert "\\maketitle" not in output
    assert "\\begin{document}\n\nHello" in output


def test_render_is_repeatable(renderer: DocumentRenderer) -> None:
    document = Document(
        blocks=(
            Line(content=(Text("a"),), list_info=ListInfo(1, ListType.BULLET)),
            _para(Image("https://x/a_fig.png")),
        )
    )

    assert renderer.render(document) == renderer.render(document)
