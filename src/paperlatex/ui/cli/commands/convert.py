"""Implementation of the ``paperlatex`` conversion command."""

from __future__ import annotations

from pathlib import Path
import re
import sys

import typer

from paperlatex.conversion import Converter
from paperlatex.core.config import PaperConfig, load_config
from paperlatex.core.document import Document, load_document, load_document_file
from paperlatex.core.exceptions import LatexRenderingError, exception_messages

from .._options import (
    ArchiveOption,
    ConfigOption,
    DebugOption,
    FragmentOption,
    InputArgument,
    OutputOption,
    QuietOption,
    VerboseOption,
)
from ..diagnostics import CliEmitter
from ..state import emit_error, emit_warning, render_message, reset_cli_state, set_cli_state


DEFAULT_BASENAME = "paper"

_TITLE_SEPARATORS = re.compile(r"[\s\-_]+")


def output_basename(title: str | None) -> str:
    """Build a file stem from the first two words of ``title``."""
    words = [
        "".join(char for char in word if char.isalnum()).lower()
        for word in _TITLE_SEPARATORS.split(title or "")
        if word
    ][:2]
    base = "_".join(words)
    if len(base) < 4:
        return DEFAULT_BASENAME
    return base


def unique_output_path(base: str, directory: Path, suffix: str = ".tex") -> Path:
    """Return ``base.tex``, or ``base2.tex``, ``base3.tex``, ... when taken."""
    candidate = directory / f"{base}{suffix}"
    counter = 2
    while candidate.exists():
        candidate = directory / f"{base}{counter}{suffix}"
        counter += 1
    return candidate


def _read_document(source: str) -> Document:
    if source == "-":
        return load_document(sys.stdin.read())
    return load_document_file(Path(source))


def convert(
    source: InputArgument,
    output: OutputOption = None,
    archive: ArchiveOption = None,
    config_path: ConfigOption = None,
    fragment: FragmentOption = False,
    verbose: VerboseOption = 0,
    debug: DebugOption = False,
    quiet: QuietOption = False,
) -> None:
    """Convert a JSON document tree into LaTeX and optionally a zip archive."""
    reset_cli_state()
    state = set_cli_state(verbosity=verbose, quiet=quiet, debug=debug)

    try:
        config = load_config(config_path) if config_path else PaperConfig()
        if fragment:
            config.render.full_document = False
        document = _read_document(source)
        converter = Converter(config, emitter=CliEmitter(state))
        result = converter.convert_sync(document)
    except LatexRenderingError as exc:
        emit_error(" - ".join(exception_messages(exc)), exception=exc)
        raise typer.Exit(code=1) from exc

    latex = result.final_latex or result.latex
    if result.failed:
        noun = "image" if len(result.failed) == 1 else "images"
        emit_warning(
            f"{len(result.failed)} {noun} left commented out: " + ", ".join(result.failed)
        )

    if output == "-":
        typer.echo(latex, nl=False)
    else:
        target = (
            Path(output)
            if output is not None
            else unique_output_path(output_basename(document.title), Path.cwd())
        )
        try:
            target.write_text(latex, encoding="utf-8")
        except OSError as exc:
            emit_error(f"Unable to write LaTeX output '{target}': {exc}", exception=exc)
            raise typer.Exit(code=1) from exc
        render_message("info", f"LaTeX written to {target}")

    if archive is not None:
        if result.archive is None:
            emit_error("No archive was produced for this conversion.")
            raise typer.Exit(code=1)
        try:
            archive.write_bytes(result.archive)
        except OSError as exc:
            emit_error(f"Unable to write archive '{archive}': {exc}", exception=exc)
            raise typer.Exit(code=1) from exc
        render_message("info", f"Archive written to {archive}")


__all__ = ["DEFAULT_BASENAME", "convert", "output_basename", "unique_output_path"]
