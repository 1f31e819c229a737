"""Derive deduplicated output filenames for embedded images."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePosixPath
import re
from urllib.parse import unquote, urlparse

from slugify import slugify


VECTOR_SUFFIXES: frozenset[str] = frozenset({"svg"})
NATIVE_SUFFIXES: frozenset[str] = frozenset({"png", "jpg", "jpeg", "pdf"})

_BASENAME_PATTERN = re.compile(r"_([^_/]+?)\.([A-Za-z0-9]+)$")


@dataclass(frozen=True, slots=True)
class ImageName:
    """Naming decision for one source image."""

    stem: str
    source_suffix: str
    output_suffix: str

    @property
    def filename(self) -> str:
        return f"{self.stem}.{self.output_suffix}"

    @property
    def is_vector(self) -> bool:
        return self.source_suffix in VECTOR_SUFFIXES

    @property
    def needs_normalising(self) -> bool:
        return not self.is_vector and self.source_suffix not in NATIVE_SUFFIXES


def source_suffix(url: str) -> str:
    """Return the lowercase extension of the URL path, without the dot."""
    path = unquote(urlparse(url).path or url)
    return PurePosixPath(path).suffix.lstrip(".").lower()


def output_suffix(suffix: str) -> str:
    """Map a source extension to the extension stored in the archive."""
    if suffix in NATIVE_SUFFIXES:
        return suffix
    return "png"


def derive_basename(url: str) -> str | None:
    """Return the URL component between the last underscore and the extension."""
    path = unquote(urlparse(url).path or url)
    match = _BASENAME_PATTERN.search(path)
    if match is None:
        return None
    stem = slugify(match.group(1), lowercase=False)
    return stem or None


@dataclass
class FilenameRegistry:
    """Assign unique output filenames to image URLs in first-seen order."""

    prefix: str = "figure"
    assigned: dict[str, ImageName] = field(default_factory=dict)
    _taken: set[str] = field(default_factory=set, init=False, repr=False)

    def __contains__(self, url: object) -> bool:
        return url in self.assigned

    def __len__(self) -> int:
        return len(self.assigned)

    def lookup(self, url: str) -> ImageName | None:
        return self.assigned.get(url)

    def assign(self, url: str) -> ImageName:
        """Return the name for ``url``, assigning a fresh one on first sight."""
        existing = self.assigned.get(url)
        if existing is not None:
            return existing

        suffix = source_suffix(url)
        stem = derive_basename(url) or f"{self.prefix}-{len(self.assigned) + 1}"
        target_suffix = output_suffix(suffix)

        candidate = stem
        counter = 1
        while f"{candidate}.{target_suffix}" in self._taken:
            counter += 1
            candidate = f"{stem}-{counter}"

        name = ImageName(stem=candidate, source_suffix=suffix, output_suffix=target_suffix)
        self._taken.add(name.filename)
        self.assigned[url] = name
        return name

    def filenames(self) -> list[str]:
        return [name.filename for name in self.assigned.values()]


__all__ = [
    "NATIVE_SUFFIXES",
    "VECTOR_SUFFIXES",
    "FilenameRegistry",
    "ImageName",
    "derive_basename",
    "output_suffix",
    "source_suffix",
]
