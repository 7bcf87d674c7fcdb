# =====================================================================
# ESQUEMAS DE SINCRONIZACIÓN Y REGISTRO OPERATIVO
# =====================================================================

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel

from .base import CamelModel
from .enums import LoadState, LogStatus


class LogEntry(CamelModel):
    """
    Entrada del registro operativo (sólo diagnóstico, nunca se reproduce).

    Attributes:
        id (str): Identificador corto aleatorio
        timestamp (str): Hora legible (HH:MM:SS)
        action (str): Etiqueta de la acción
        status (LogStatus): success o error
        message (str): Mensaje para el usuario
    """
    id: str
    timestamp: str
    action: str
    status: LogStatus
    message: str


class SyncResultOut(CamelModel):
    action: str
    ok: bool
    sent: int = 0
    dropped: int = 0
    reason: Optional[str] = None
    message: Optional[str] = None


class SyncStatusOut(CamelModel):
    """Estado de carga por colección y resultado de la última operación."""
    states: Dict[str, LoadState]
    results: List[SyncResultOut] = []
    refresh_running: bool = False


class RemoteConfigUpdate(BaseModel):
    url: str = ""
    key: str = ""


class RemoteConfigOut(BaseModel):
    url: str
    has_key: bool
