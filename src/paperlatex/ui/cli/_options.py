"""Shared Typer option definitions for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer


INPUTS_PANEL = "Input Handling"
RENDERING_PANEL = "Rendering"
OUTPUT_PANEL = "Output"
DIAGNOSTICS_PANEL = "Diagnostics"

InputArgument = Annotated[
    str,
    typer.Argument(
        metavar="INPUT",
        help="JSON document tree to convert. Use '-' to read from stdin.",
        show_default=False,
        rich_help_panel=INPUTS_PANEL,
    ),
]

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="YAML configuration file with 'render' and 'assets' sections.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        show_default=False,
        rich_help_panel=INPUTS_PANEL,
    ),
]

FragmentOption = Annotated[
    bool,
    typer.Option(
        "--fragment",
        help="Emit the document body only, without preamble or \\end{document}.",
        rich_help_panel=RENDERING_PANEL,
    ),
]

OutputOption = Annotated[
    str | None,
    typer.Option(
        "--output",
        "-o",
        help=(
            "LaTeX output file. Use '-' for stdout. Defaults to a new file named "
            "after the document title; existing files are never overwritten."
        ),
        show_default=False,
        rich_help_panel=OUTPUT_PANEL,
    ),
]

ArchiveOption = Annotated[
    Path | None,
    typer.Option(
        "--archive",
        "-a",
        help="Write a zip archive with the LaTeX source and its figures.",
        dir_okay=False,
        show_default=False,
        rich_help_panel=OUTPUT_PANEL,
    ),
]

VerboseOption = Annotated[
    int,
    typer.Option(
        "--verbose",
        "-v",
        count=True,
        help="Increase CLI verbosity. Combine multiple times for additional diagnostics.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]

DebugOption = Annotated[
    bool,
    typer.Option(
        "--debug",
        help="Show full tracebacks when an unexpected error occurs.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]

QuietOption = Annotated[
    bool,
    typer.Option(
        "--quiet",
        "-q",
        help="Silence progress messages and warnings.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]
