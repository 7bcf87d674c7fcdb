"""
Exportación e importación de la instantánea completa (JSON).
La importación no escribe directo: cada colección presente pasa por la
misma ruta de actualización optimista que cualquier edición.
"""
from __future__ import annotations

import asyncio
import datetime as dt
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from guidari.exceptions import ValidationFailure
from guidari.schemas import EXPORT_VERSION, ExportDocument, ImportDocument
from guidari.services.state import AppState
from guidari.services.synchronizer import SyncResult, Synchronizer


def build_export(state: AppState, now: Optional[dt.datetime] = None) -> ExportDocument:
    now = now or dt.datetime.now(dt.timezone.utc)
    return ExportDocument(
        version=EXPORT_VERSION,
        export_date=now.isoformat(),
        users=list(state.users.snapshot()),
        patients=list(state.patients.snapshot()),
        appointments=list(state.appointments.snapshot()),
    )


def parse_import(payload: Any) -> ImportDocument:
    if not isinstance(payload, dict):
        raise ValidationFailure("El archivo de importación debe ser un objeto JSON.")
    try:
        return ImportDocument.model_validate(payload)
    except ValidationError as exc:
        raise ValidationFailure(f"Archivo de importación inválido: {exc.error_count()} errores") from exc


def apply_import(sync: Synchronizer, document: ImportDocument) -> Dict[str, "asyncio.Task[SyncResult]"]:
    """Aplica las colecciones presentes; devuelve la escritura pendiente de cada una."""
    tasks: Dict[str, asyncio.Task] = {}
    if document.users is not None:
        tasks["users"] = sync.update_users(document.users)
    if document.patients is not None:
        tasks["patients"] = sync.update_patients(document.patients)
    if document.appointments is not None:
        tasks["appointments"] = sync.update_appointments(document.appointments)
    return tasks


def imported_collections(document: ImportDocument) -> List[str]:
    return [name for name in ("users", "patients", "appointments") if getattr(document, name) is not None]
