"""Progress events and their synchronous fan-out."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from migration_converter.types import Phase

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProgressEvent:
    """Notification about the current pipeline phase.

    ``progress`` is a percentage in the 0-100 range.
    """

    phase: Phase
    progress: float
    message: str
    current_file: str | None = None
    operation: str | None = None


type ProgressCallback = Callable[[ProgressEvent], None]


class ProgressEmitter:
    """Ordered list of progress listeners.

    Listeners are called synchronously in registration order and receive the
    same event object. With ``isolate_errors`` (the default) a failing
    listener is logged and the remaining listeners still run; otherwise the
    exception propagates to the caller of ``emit_progress``.
    """

    def __init__(self, *, isolate_errors: bool = True) -> None:
        self.isolate_errors = isolate_errors
        self._listeners: list[ProgressCallback] = []

    def on_progress(self, listener: ProgressCallback) -> None:
        """Register ``listener``. The same callable may be added twice."""
        self._listeners.append(listener)

    def off_progress(self, listener: ProgressCallback) -> None:
        """Remove the first registration equal to ``listener``; no-op if absent."""
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def listeners(self) -> tuple[ProgressCallback, ...]:
        """Return registered listeners in call order."""
        return tuple(self._listeners)

    def emit_progress(self, event: ProgressEvent) -> None:
        """Deliver ``event`` to every registered listener."""
        # Snapshot so listeners may unregister themselves while handling.
        for listener in tuple(self._listeners):
            if not self.isolate_errors:
                listener(event)
                continue
            try:
                listener(event)
            except Exception:
                logger.exception(
                    "progress listener %r failed on %s event", listener, event.phase
                )
