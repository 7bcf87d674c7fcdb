# =====================================================================
# CLIENTE DEL ALMACÉN REMOTO
# =====================================================================

"""
Acceso por tabla al almacén remoto (select-all, upsert por id, delete por id).
El backend se elige por el esquema de la URL configurada:
  - https://...                     -> PostgREST (Supabase) con la clave de acceso
  - postgres://, postgresql+...://  -> conexión directa a Postgres
  - sqlite+aiosqlite://             -> base local (pruebas y demos)
"""

from __future__ import annotations

import logging
from typing import Optional

from .base import RemoteStore, RemoteStoreError, Row
from .rest import RestRemoteStore
from .sql import SqlRemoteStore, normalize_database_url

logger = logging.getLogger(__name__)


def create_remote_store(url: str, key: str, timeout: float = 30.0) -> Optional[RemoteStore]:
    """Devuelve el cliente adecuado o None si faltan credenciales."""
    url = (url or "").strip()
    if not url:
        return None
    scheme = url.split("://", 1)[0].lower()
    if scheme.startswith(("postgres", "sqlite")):
        return SqlRemoteStore(url)
    if scheme in ("http", "https"):
        if not key:
            logger.warning("Remote store key missing, sync disabled")
            return None
        return RestRemoteStore(url, key, timeout=timeout)
    logger.warning("Unsupported remote store URL scheme: %s", scheme)
    return None


__all__ = [
    "RemoteStore",
    "RemoteStoreError",
    "Row",
    "RestRemoteStore",
    "SqlRemoteStore",
    "normalize_database_url",
    "create_remote_store",
]
