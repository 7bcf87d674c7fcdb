# =====================================================================
# ESQUEMAS DE DASHBOARD
# =====================================================================

from __future__ import annotations

from typing import List, Literal
from pydantic import Field

from .base import CamelModel
from .appointment import Appointment


class Birthday(CamelModel):
    """Cumpleaños del día (paciente o colega)."""
    name: str
    type: Literal["Paciente", "Colega"]
    avatar: str = ""


class MissingDocuments(CamelModel):
    """Paciente al que le falta documentación del mes en curso."""
    patient_id: str
    patient_name: str
    missing: List[str]


class DashboardData(CamelModel):
    """
    Resumen de la pantalla de inicio.

    Attributes:
        today_appointments (List[Appointment]): Sesiones visibles de hoy
        month_sessions (int): Cantidad de sesiones visibles en el mes
        birthdays (List[Birthday]): Cumpleaños de hoy
        missing_documents (List[MissingDocuments]): Alertas administrativas (sólo admin)
        patient_count (int): Pacientes visibles
    """
    today_appointments: List[Appointment] = Field(default_factory=list)
    month_sessions: int = 0
    birthdays: List[Birthday] = Field(default_factory=list)
    missing_documents: List[MissingDocuments] = Field(default_factory=list)
    patient_count: int = 0


class WeekDay(CamelModel):
    date: str
    appointments: List[Appointment] = Field(default_factory=list)
