from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

Row = Dict[str, Any]


class RemoteStoreError(Exception):
    """
    Fallo de una operación contra el almacén remoto.

    Attributes:
        message (str): Mensaje legible extraído de la respuesta
        code (Optional[str]): Código del motor/servicio ('network' para fallos de transporte)
        status (Optional[int]): Código HTTP cuando aplica
    """

    def __init__(self, message: str, code: Optional[str] = None, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status = status

    @property
    def is_network(self) -> bool:
        return self.code == "network"


class RemoteStore(ABC):
    """Operaciones por tabla que necesita el sincronizador."""

    @abstractmethod
    async def select_all(self, table: str) -> List[Row]:
        ...

    @abstractmethod
    async def upsert(self, table: str, rows: List[Row]) -> None:
        ...

    @abstractmethod
    async def delete(self, table: str, row_id: str) -> None:
        ...

    async def close(self) -> None:
        return None
