from __future__ import annotations

"""Error recorder that writes to the application log and remembers entries.

Plays the part of the application event log for tree builds: the builder
hands over errors it has absorbed (vanished albums) and moves on.
"""

from dataclasses import dataclass, field
from datetime import datetime
import logging
import threading
from typing import Any, Dict, List, Optional

__all__ = ["RecordedError", "LoggingErrorRecorder"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecordedError:
    error: BaseException
    scope_id: Optional[int] = None
    timestamp: datetime = field(default_factory=datetime.now)
    data: Dict[str, Any] = field(default_factory=dict)


class LoggingErrorRecorder:
    """:class:`~gallery_tree.core.interfaces.ErrorRecorder` writing to ``logging``.

    Entries are kept in memory (bounded by ``max_entries``) so callers and
    tests can inspect what a build swallowed.
    """

    def __init__(self, max_entries: int = 500, log: Optional[logging.Logger] = None) -> None:
        self._max_entries = max_entries
        self._entries: List[RecordedError] = []
        self._lock = threading.Lock()
        self._logger = log or logger

    @property
    def entries(self) -> List[RecordedError]:
        with self._lock:
            return list(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def record_error(self, error: BaseException, scope_id: Optional[int] = None) -> None:
        try:
            data = dict(getattr(error, "data", None) or {})
            entry = RecordedError(error=error, scope_id=scope_id, data=data)
            with self._lock:
                self._entries.append(entry)
                if len(self._entries) > self._max_entries:
                    del self._entries[: len(self._entries) - self._max_entries]
            self._logger.warning(
                "%s (scope=%s): %s %s",
                type(error).__name__,
                scope_id if scope_id is not None else "-",
                error,
                data or "",
            )
        except Exception as exc:  # never propagate from the diagnostic sink
            self._logger.error("Could not record error %r: %s", error, exc)
