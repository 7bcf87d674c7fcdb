"""
Registro operativo visible para el administrador: últimas 50 entradas,
la más reciente primero. Es sólo diagnóstico, nunca se reproduce.
"""
from __future__ import annotations

import logging
import secrets
import string
from collections import deque
from datetime import datetime
from typing import Callable, Deque, List, Optional

from guidari.schemas import LogEntry
from guidari.schemas.enums import LogStatus

logger = logging.getLogger(__name__)

MAX_ENTRIES = 50
_ALPHABET = string.ascii_lowercase + string.digits


def _short_id() -> str:
    return "".join(secrets.choice(_ALPHABET) for _ in range(9))


class OperationLog:
    def __init__(self, capacity: int = MAX_ENTRIES, clock: Optional[Callable[[], datetime]] = None):
        self._entries: Deque[LogEntry] = deque(maxlen=capacity)
        self._clock = clock or datetime.now

    def add(self, action: str, status: LogStatus, message: str) -> LogEntry:
        entry = LogEntry(
            id=_short_id(),
            timestamp=self._clock().strftime("%H:%M:%S"),
            action=action,
            status=status,
            message=message,
        )
        # appendleft con maxlen descarta la entrada más vieja (derecha)
        self._entries.appendleft(entry)
        if status == "error":
            logger.warning("%s: %s", action, message, extra={"action": action, "status": status})
        else:
            logger.info("%s: %s", action, message, extra={"action": action, "status": status})
        return entry

    def entries(self) -> List[LogEntry]:
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
