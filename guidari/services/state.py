"""
Estado de la aplicación: las tres colecciones en memoria y el registro
operativo, agrupados en un único AppState que pertenece al controlador.
Las lecturas devuelven copias; sólo el sincronizador reemplaza contenido.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, Iterable, Optional, Tuple, TypeVar

from pydantic import BaseModel

from guidari.schemas import Appointment, Patient, User
from guidari.schemas.enums import LoadState
from guidari.services.oplog import OperationLog

T = TypeVar("T", bound=BaseModel)


class EntityStore(Generic[T]):
    """Una colección en memoria con su estado de carga."""

    def __init__(self, name: str, items: Iterable[T] = ()):
        self.name = name
        self._items: Tuple[T, ...] = tuple(items)
        self.state: LoadState = "idle"
        self.version = 0

    # -------------------- Proyecciones de sólo lectura --------------------

    def snapshot(self) -> Tuple[T, ...]:
        return tuple(item.model_copy(deep=True) for item in self._items)

    def get(self, entity_id: str) -> Optional[T]:
        for item in self._items:
            if item.id == entity_id:
                return item.model_copy(deep=True)
        return None

    def ids(self) -> Tuple[str, ...]:
        return tuple(item.id for item in self._items)

    def __len__(self) -> int:
        return len(self._items)

    # -------------------- Mutaciones (sólo Synchronizer) --------------------

    def replace(self, items: Iterable[T]) -> None:
        self._items = tuple(item.model_copy(deep=True) for item in items)
        self.version += 1

    def remove(self, entity_id: str) -> bool:
        remaining = tuple(item for item in self._items if item.id != entity_id)
        if len(remaining) == len(self._items):
            return False
        self._items = remaining
        self.version += 1
        return True


@dataclass
class AppState:
    users: EntityStore[User]
    patients: EntityStore[Patient] = field(default_factory=lambda: EntityStore("patients"))
    appointments: EntityStore[Appointment] = field(default_factory=lambda: EntityStore("appointments"))
    log: OperationLog = field(default_factory=OperationLog)

    def store(self, collection: str) -> EntityStore:
        return getattr(self, collection)

    def load_states(self) -> dict:
        return {name: self.store(name).state for name in ("users", "patients", "appointments")}
