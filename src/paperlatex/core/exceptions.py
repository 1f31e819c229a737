"""Custom exception hierarchy for the LaTeX rendering pipeline."""

from __future__ import annotations


class LatexRenderingError(RuntimeError):
    """Base exception for LaTeX rendering failures."""


class DocumentLoadError(LatexRenderingError):
    """Raised when a serialised document tree cannot be loaded."""


class ConfigError(LatexRenderingError):
    """Raised when a configuration file cannot be read or validated."""


class AssetFetchError(LatexRenderingError):
    """Raised when the raw bytes of an image cannot be retrieved."""


class TransformerExecutionError(LatexRenderingError):
    """Raised when an image converter fails to execute properly."""


class ArchiveError(LatexRenderingError):
    """Raised when the output archive cannot be assembled."""


def exception_messages(exc: BaseException) -> list[str]:
    """Return the collected message chain for an exception and its causes."""
    messages: list[str] = []
    visited: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        text = str(current).strip()
        if text:
            first_line = text.splitlines()[0].strip()
            if first_line:
                messages.append(first_line)
        current = current.__cause__ or current.__context__
    return messages


__all__ = [
    "ArchiveError",
    "AssetFetchError",
    "ConfigError",
    "DocumentLoadError",
    "LatexRenderingError",
    "TransformerExecutionError",
    "exception_messages",
]
