"""In-process append-only message log.

Purpose of this abstraction:
    Record every relayed exchange (user message, assistant reply) for debugging.
    The log is injected into `chat_relay.core.relay.ChatRelay` rather than held as a
    module global, so each app instance and each test owns its own log.

Persistence boundary:
    None. Entries live in process memory only and are lost on restart. No HTTP read
    API is exposed.

Bounding:
    Unbounded by default. When `max_entries` is set, the oldest entries are dropped
    once the bound is reached.

Concurrency:
    Appends run from worker threads (`asyncio.to_thread` in the HTTP layer) and are
    serialized with `threading.Lock`.
"""

import threading
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class LogEntry:
    """One logged message; ordering is given by position in the log."""

    role: Role
    content: str
    provider_name: str


class MessageLog:
    """Ordered append-only sequence of `LogEntry` records."""

    def __init__(self, max_entries: Optional[int] = None):
        if max_entries is not None and max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self._entries = deque(maxlen=max_entries)
        self._lock = threading.Lock()

    @property
    def max_entries(self) -> Optional[int]:
        return self._entries.maxlen

    def append(self, role: Role, content: str, provider_name: str) -> LogEntry:
        entry = LogEntry(role=Role(role), content=content, provider_name=provider_name)
        with self._lock:
            self._entries.append(entry)
        return entry

    def entries(self) -> list:
        """Return a snapshot copy of the current entries, oldest first."""
        with self._lock:
            return list(self._entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
