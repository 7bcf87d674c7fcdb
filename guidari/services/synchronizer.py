"""
Sincronización entre las colecciones en memoria y el almacén remoto.

- Lectura: las tres colecciones se piden en paralelo; cada una se aplica
  o falla por separado.
- Escritura: la colección local se reemplaza en el acto (optimista) y la
  colección completa se envía después. Las escrituras de una misma
  colección salen en el orden en que se emitieron.
- Ningún fallo remoto se propaga como excepción: cada operación devuelve
  un SyncResult y deja una entrada en el registro operativo.
"""
from __future__ import annotations

import asyncio
import contextlib
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Literal, Optional, Sequence, Set, Tuple

from guidari.remote import RemoteStore, RemoteStoreError
from guidari.schemas import Appointment, Patient, User
from guidari.schemas.enums import COLLECTIONS
from guidari.security import is_canonical_uuid
from guidari.services.mapper import (
    appointment_from_remote, appointment_to_remote, map_many,
    patient_from_remote, patient_to_remote, user_from_remote, user_to_remote,
)
from guidari.services.state import AppState

logger = logging.getLogger(__name__)

FailureReason = Literal["not_configured", "network", "rejected", "unexpected"]

LABELS = {"users": "Staff", "patients": "Pacientes", "appointments": "Sesiones"}

# =====================================================================
# RESULTADOS
# =====================================================================

@dataclass(frozen=True)
class SyncFailure:
    reason: FailureReason
    message: str


@dataclass(frozen=True)
class SyncResult:
    """
    Resultado explícito de una operación de sincronización.

    `sent` cuenta las entidades enviadas (o cargadas) y `dropped` las que se
    omitieron por tener identificadores no canónicos, de modo que "no había
    nada que enviar" y "todo fue filtrado" se distinguen.
    """
    action: str
    collection: str
    ok: bool
    sent: int = 0
    dropped: int = 0
    failure: Optional[SyncFailure] = None


def extract_error_message(exc: BaseException) -> str:
    """Mensaje legible; entiende la convención {message} / {error: {message}}."""
    if isinstance(exc, RemoteStoreError):
        return exc.message
    candidates = [getattr(exc, "message", None)] + list(exc.args[:1])
    for candidate in candidates:
        if isinstance(candidate, dict):
            nested = candidate.get("error", candidate)
            if isinstance(nested, dict) and nested.get("message"):
                return str(nested["message"])
        elif candidate:
            return str(candidate)
    return exc.__class__.__name__


def _failure_from(exc: BaseException) -> SyncFailure:
    if isinstance(exc, RemoteStoreError):
        return SyncFailure("network" if exc.is_network else "rejected", extract_error_message(exc))
    return SyncFailure("unexpected", extract_error_message(exc))

# =====================================================================
# FILTROS Y FUSIÓN
# =====================================================================

def filter_writable_patients(patients: Iterable[Patient]) -> Tuple[List[Patient], int]:
    """Sólo pacientes con ID UUID canónico. Devuelve (aptos, omitidos)."""
    patients = list(patients)
    kept = [p for p in patients if is_canonical_uuid(p.id)]
    return kept, len(patients) - len(kept)


def filter_writable_appointments(appointments: Iterable[Appointment]) -> Tuple[List[Appointment], int]:
    """Sólo sesiones con ID y paciente UUID canónicos. Devuelve (aptas, omitidas)."""
    appointments = list(appointments)
    kept = [a for a in appointments if is_canonical_uuid(a.id) and is_canonical_uuid(a.patient_id)]
    return kept, len(appointments) - len(kept)


def merge_staff(seed: Sequence[User], remote: Sequence[User]) -> List[User]:
    """
    Fusiona el staff remoto sobre la lista semilla por ID: las entradas
    remotas pisan a las semilla con el mismo ID, las nuevas se agregan al
    final y las semilla sin contraparte remota se conservan.
    """
    merged: Dict[str, User] = {user.id: user for user in seed}
    for user in remote:
        merged[user.id] = user
    return list(merged.values())

# =====================================================================
# SINCRONIZADOR
# =====================================================================

class Synchronizer:
    def __init__(self, state: AppState, remote: Optional[RemoteStore] = None, seed_users: Iterable[User] = ()):
        self.state = state
        self.remote = remote
        self.seed_users = tuple(seed_users)
        self.last_results: Dict[str, SyncResult] = {}
        self._write_locks = {name: asyncio.Lock() for name in COLLECTIONS}
        self._pending: Set[asyncio.Task] = set()

    def set_remote(self, remote: Optional[RemoteStore]) -> None:
        self.remote = remote

    # -------------------- Resultados y registro --------------------

    def _ok(self, action: str, collection: str, message: str, sent: int = 0, dropped: int = 0) -> SyncResult:
        self.state.log.add(action, "success", message)
        result = SyncResult(action, collection, True, sent=sent, dropped=dropped)
        self.last_results[collection] = result
        return result

    def _fail(self, action: str, collection: str, failure: SyncFailure, dropped: int = 0) -> SyncResult:
        label = LABELS[collection]
        message = failure.message if label in action else f"{label}: {failure.message}"
        self.state.log.add(action, "error", message)
        result = SyncResult(action, collection, False, dropped=dropped, failure=failure)
        self.last_results[collection] = result
        return result

    def _not_configured(self) -> SyncFailure:
        return SyncFailure("not_configured", "almacén remoto no configurado")

    # -------------------- Lectura --------------------

    async def refresh(self) -> Dict[str, SyncResult]:
        """Carga completa de las tres colecciones en paralelo."""
        results = await asyncio.gather(
            self._load("users", user_from_remote),
            self._load("patients", patient_from_remote),
            self._load("appointments", appointment_from_remote),
        )
        return {result.collection: result for result in results}

    async def _load(self, collection: str, from_remote: Callable[[dict], Any]) -> SyncResult:
        store = self.state.store(collection)
        action = "Sincronización"
        if self.remote is None:
            store.state = "load_failed"
            return self._fail(action, collection, self._not_configured())

        store.state = "loading"
        try:
            rows = await self.remote.select_all(collection)
        except Exception as exc:
            # La colección en memoria queda como estaba
            store.state = "load_failed"
            if not isinstance(exc, RemoteStoreError):
                logger.exception("Unexpected error loading %s", collection)
            return self._fail(action, collection, _failure_from(exc))

        entities = map_many(rows, from_remote)
        if collection == "users":
            entities = merge_staff(self.seed_users, entities)
        store.replace(entities)
        store.state = "loaded"
        return self._ok(action, collection, f"{LABELS[collection]}: {len(rows)} registros cargados", sent=len(rows))

    # -------------------- Escritura optimista --------------------

    def update_users(self, users: Iterable[User]) -> "asyncio.Task[SyncResult]":
        return self._update("users", users, user_to_remote, None)

    def update_patients(self, patients: Iterable[Patient]) -> "asyncio.Task[SyncResult]":
        return self._update("patients", patients, patient_to_remote, filter_writable_patients)

    def update_appointments(self, appointments: Iterable[Appointment]) -> "asyncio.Task[SyncResult]":
        return self._update("appointments", appointments, appointment_to_remote, filter_writable_appointments)

    def _update(self, collection: str, items: Iterable[Any], to_remote, writable) -> "asyncio.Task[SyncResult]":
        snapshot = [item.model_copy(deep=True) for item in items]
        # Visible para la API antes de cualquier ida y vuelta de red
        self.state.store(collection).replace(snapshot)
        return self._spawn(self._write(collection, snapshot, to_remote, writable))

    def _spawn(self, coro: Awaitable[SyncResult]) -> "asyncio.Task[SyncResult]":
        task = asyncio.get_running_loop().create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _write(self, collection: str, items: List[Any], to_remote, writable) -> SyncResult:
        action = f"Guardado {LABELS[collection]}"
        # El lock de asyncio despierta a los que esperan en orden FIFO
        async with self._write_locks[collection]:
            kept, dropped = writable(items) if writable else (items, 0)
            if self.remote is None:
                return self._fail(action, collection, self._not_configured(), dropped=dropped)
            try:
                rows = [to_remote(item) for item in kept]
                await self.remote.upsert(collection, rows)
            except Exception as exc:
                # No se revierte el cambio local
                if not isinstance(exc, RemoteStoreError):
                    logger.exception("Unexpected error saving %s", collection)
                return self._fail(action, collection, _failure_from(exc), dropped=dropped)

        message = f"{len(kept)} registros guardados"
        if dropped:
            message += f" ({dropped} omitidos por ID no válido)"
        return self._ok(action, collection, message, sent=len(kept), dropped=dropped)

    # -------------------- Eliminación --------------------

    async def delete(self, collection: str, entity_id: str) -> SyncResult:
        """Borra en remoto y sólo con confirmación quita la entidad local."""
        action = f"Eliminación {LABELS[collection]}"
        if self.remote is None:
            return self._fail(action, collection, self._not_configured())
        async with self._write_locks[collection]:
            try:
                await self.remote.delete(collection, entity_id)
            except Exception as exc:
                if not isinstance(exc, RemoteStoreError):
                    logger.exception("Unexpected error deleting %s %s", collection, entity_id)
                return self._fail(action, collection, _failure_from(exc))
        self.state.store(collection).remove(entity_id)
        return self._ok(action, collection, f"Registro {entity_id} eliminado", sent=1)

    # -------------------- Tareas pendientes --------------------

    @property
    def pending_writes(self) -> int:
        return len(self._pending)

    async def drain(self) -> None:
        """Espera todas las escrituras en curso."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

# =====================================================================
# REFRESCO PERIÓDICO
# =====================================================================

class RefreshScheduler:
    """Temporizador que repite la carga completa mientras haya sesión activa."""

    def __init__(self, refresh: Callable[[], Awaitable[Any]], interval_seconds: float):
        self._refresh = refresh
        self.interval_seconds = interval_seconds
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run(), name="guidari-refresh")
        logger.info("Periodic refresh started", extra={"interval_seconds": self.interval_seconds})

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                await self._refresh()
            except Exception:
                logger.exception("Periodic refresh failed")

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        logger.info("Periodic refresh stopped")
