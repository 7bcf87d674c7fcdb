"""
Traducción entre entidades en memoria y filas del almacén remoto.

Las funciones `*_from_remote` nunca fallan: los datos mal formados se
degradan a valores por defecto para no perder el lote completo.
Las funciones `*_to_remote` devuelven diccionarios serializables a JSON,
con claves snake_case y fechas vacías convertidas a None.
"""
from __future__ import annotations

import json
import logging
import math
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from guidari.schemas import (
    Appointment, ClinicalNote, ContactPerson, Document, Patient, ResponsiblePerson, User,
)
from guidari.schemas.enums import DOC_TYPES

logger = logging.getLogger(__name__)

# -------------------- Coerciones --------------------

def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _number(value: Any, default: float = 0.0) -> float:
    if value is None or value == "":
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


def _optional_number(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    number = _number(value, default=math.nan)
    return None if math.isnan(number) else number


def _date_text(value: Any) -> str:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return _text(value)


def _wall_time(value: Any) -> str:
    """
    Hora de pared sin zona. Postgres devuelve `timestamptz` en UTC con
    desplazamiento (`+00:00`); se normaliza a UTC sin zona, que es como
    se escribió.
    """
    if isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return value
        if parsed.tzinfo is None:
            return value
        value = parsed
    if isinstance(value, datetime) and value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return _date_text(value)


def _date_or_none(value: Optional[str]) -> Optional[str]:
    # Las columnas de fecha rechazan cadenas vacías
    if value is None:
        return None
    value = value.strip()
    return value or None


def _json(value: Any, fallback):
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            return fallback
    return value if isinstance(value, type(fallback)) else fallback


def _pick(data: Dict[str, Any], *keys: str) -> Any:
    """Primer valor presente entre varias claves (snake_case o camelCase)."""
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None

# -------------------- Objetos anidados --------------------

def _contact_from_remote(value: Any) -> ContactPerson:
    data = _json(value, {})
    return ContactPerson(name=_text(data.get("name")), phone=_text(data.get("phone")), email=_text(data.get("email")))


def _responsible_from_remote(value: Any) -> ResponsiblePerson:
    data = _json(value, {})
    return ResponsiblePerson(
        name=_text(data.get("name")),
        address=_text(data.get("address")),
        phone=_text(data.get("phone")),
        email=_text(data.get("email")),
    )


def _note_from_remote(item: Dict[str, Any]) -> Optional[ClinicalNote]:
    note_id = _text(item.get("id"))
    if not note_id:
        return None
    return ClinicalNote(
        id=note_id,
        date=_date_text(item.get("date")),
        professional_id=_text(_pick(item, "professional_id", "professionalId")),
        content=_text(item.get("content")),
    )


def _document_from_remote(item: Dict[str, Any]) -> Optional[Document]:
    doc_id = _text(item.get("id"))
    if not doc_id:
        return None
    doc_type = item.get("type")
    status = item.get("status")
    receipt = _pick(item, "receipt_number", "receiptNumber")
    professional_id = _pick(item, "professional_id", "professionalId")
    return Document(
        id=doc_id,
        patient_id=_text(_pick(item, "patient_id", "patientId")),
        type=doc_type if doc_type in DOC_TYPES else "Otro",
        name=_text(item.get("name")),
        date=_date_text(item.get("date")),
        url=_text(item.get("url")),
        amount=_optional_number(item.get("amount")),
        receipt_number=None if receipt is None else _text(receipt),
        status=status if status in ("pendiente", "pagada") else None,
        professional_id=None if professional_id is None else _text(professional_id),
    )


def _list_from_remote(value: Any, builder) -> list:
    items = []
    for item in _json(value, []):
        if not isinstance(item, dict):
            logger.warning("Skipping malformed nested item: %r", item)
            continue
        built = builder(item)
        if built is not None:
            items.append(built)
    return items

# -------------------- Staff --------------------

def user_from_remote(row: Dict[str, Any]) -> User:
    first_name = _text(row.get("first_name"))
    last_name = _text(row.get("last_name"))
    role = _text(row.get("role")).upper()
    return User(
        id=_text(row.get("id")),
        email=_text(row.get("email")),
        password=_text(row.get("password")),
        pin=_text(row.get("pin")),
        first_name=first_name,
        last_name=last_name,
        name=_text(row.get("name")) or f"{first_name} {last_name}".strip(),
        dob=_date_text(row.get("dob")),
        role="ADMIN" if role == "ADMIN" else "PROFESSIONAL",
        avatar=_text(row.get("avatar")),
        specialty=_text(row.get("specialty")),
        session_value=_number(row.get("session_value")),
        commission_rate=_number(row.get("commission_rate")),
    )


def user_to_remote(user: User) -> Dict[str, Any]:
    return {
        "id": user.id,
        "email": user.email,
        "password": user.password,
        "pin": user.pin,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "name": user.name,
        "dob": _date_or_none(user.dob),
        "role": user.role,
        "avatar": user.avatar,
        "specialty": user.specialty,
        "session_value": user.session_value,
        "commission_rate": user.commission_rate,
    }

# -------------------- Pacientes --------------------

def patient_from_remote(row: Dict[str, Any]) -> Patient:
    assigned = [_text(pid) for pid in _json(row.get("assigned_professionals"), []) if pid]
    history = _list_from_remote(row.get("clinical_history"), _note_from_remote)
    return Patient(
        id=_text(row.get("id")),
        first_name=_text(row.get("first_name")),
        last_name=_text(row.get("last_name")),
        date_of_birth=_date_text(row.get("date_of_birth")),
        diagnosis=_text(row.get("diagnosis")),
        insurance=_text(row.get("insurance")),
        avatar=_text(row.get("avatar")),
        affiliate_number=_text(row.get("affiliate_number")),
        school=_text(row.get("school")),
        support_teacher=_contact_from_remote(row.get("support_teacher")),
        therapeutic_companion=_contact_from_remote(row.get("therapeutic_companion")),
        responsible=_responsible_from_remote(row.get("responsible")),
        assigned_professionals=assigned,
        clinical_history=history,
        documents=_list_from_remote(row.get("documents"), _document_from_remote),
    )


def patient_to_remote(patient: Patient) -> Dict[str, Any]:
    return {
        "id": patient.id,
        "first_name": patient.first_name,
        "last_name": patient.last_name,
        "date_of_birth": _date_or_none(patient.date_of_birth),
        "diagnosis": patient.diagnosis,
        "insurance": patient.insurance,
        "avatar": patient.avatar,
        "affiliate_number": patient.affiliate_number,
        "school": patient.school,
        "support_teacher": patient.support_teacher.model_dump(),
        "therapeutic_companion": patient.therapeutic_companion.model_dump(),
        "responsible": patient.responsible.model_dump(),
        "assigned_professionals": list(patient.assigned_professionals),
        "clinical_history": [note.model_dump() for note in patient.clinical_history],
        "documents": [doc.model_dump() for doc in patient.documents],
    }

# -------------------- Sesiones --------------------

def appointment_from_remote(row: Dict[str, Any]) -> Appointment:
    particular = _number(row.get("particular_value"))
    insurance = _number(row.get("insurance_value"))
    base = row.get("base_value")
    return Appointment(
        id=_text(row.get("id")),
        patient_id=_text(row.get("patient_id")),
        professional_id=_text(row.get("professional_id")),
        start=_wall_time(row.get("start_time")),
        end=_wall_time(row.get("end_time")),
        particular_value=particular,
        insurance_value=insurance,
        base_value=particular + insurance if base is None else _number(base),
    )


def appointment_to_remote(appointment: Appointment) -> Dict[str, Any]:
    return {
        "id": appointment.id,
        "patient_id": appointment.patient_id,
        "professional_id": appointment.professional_id,
        "start_time": _date_or_none(appointment.start),
        "end_time": _date_or_none(appointment.end),
        "particular_value": appointment.particular_value,
        "insurance_value": appointment.insurance_value,
        "base_value": appointment.base_value,
    }


def map_many(rows: List[Dict[str, Any]], mapper) -> list:
    return [mapper(row) for row in rows if isinstance(row, dict)]
