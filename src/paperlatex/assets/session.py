"""Per-conversion ownership of generation, filenames, and in-flight fetches."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import Enum
import threading

from paperlatex.core.context import ImageReference

from .naming import FilenameRegistry, ImageName


class SettleOutcome(Enum):
    """Result of waiting for the assets of one generation."""

    COMPLETED = "completed"
    SUPERSEDED = "superseded"


class CancellationToken:
    """Cooperative cancellation flag that can also be awaited."""

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    async def wait(self) -> None:
        await self._event.wait()


@dataclass
class RenderSession:
    """State owned by a single conversion request.

    A session is superseded as soon as a newer conversion starts. Fetches that
    complete afterwards are dropped by :meth:`store`, so a stale session never
    gains new images.
    """

    generation: int
    token: CancellationToken = field(default_factory=CancellationToken)
    names: FilenameRegistry = field(default_factory=FilenameRegistry)
    pending: dict[str, asyncio.Task[None]] = field(default_factory=dict)
    images: dict[str, bytes] = field(default_factory=dict)
    failed: set[str] = field(default_factory=set)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @property
    def is_current(self) -> bool:
        return not self.token.cancelled

    def supersede(self) -> None:
        self.token.cancel()

    def name_for(self, url: str) -> ImageName:
        with self.lock:
            return self.names.assign(url)

    def store(self, url: str, data: bytes) -> bool:
        """Record resolved bytes for ``url`` unless the session was superseded."""
        with self.lock:
            if self.token.cancelled:
                return False
            name = self.names.assign(url)
            self.images[name.filename] = data
            return True

    def mark_failed(self, url: str) -> None:
        with self.lock:
            self.failed.add(url)

    def reference(self, url: str) -> ImageReference:
        """Image hook for the final pass: uncomment references whose bytes resolved."""
        name = self.name_for(url)
        return ImageReference(name.filename, available=name.filename in self.images)

    def failed_urls(self) -> tuple[str, ...]:
        """Return the URLs whose retrieval failed, in registration order."""
        with self.lock:
            return tuple(url for url in self.names.assigned if url in self.failed)

    def resolved_images(self) -> dict[str, bytes]:
        """Return resolved image bytes keyed by output filename, in registration order."""
        with self.lock:
            return {
                name.filename: self.images[name.filename]
                for name in self.names.assigned.values()
                if name.filename in self.images
            }

    def resolved_by_url(self) -> dict[str, tuple[str, bytes]]:
        with self.lock:
            return {
                url: (name.filename, self.images[name.filename])
                for url, name in self.names.assigned.items()
                if name.filename in self.images
            }


__all__ = ["CancellationToken", "RenderSession", "SettleOutcome"]
