# =====================================================================
# ESQUEMAS DE SESIONES (TURNOS)
# =====================================================================

from __future__ import annotations

from typing import Any

from .base import CamelModel


class Appointment(CamelModel):
    """
    Sesión de una hora entre un paciente y un profesional.

    Attributes:
        id (str): Identificador (UUID canónico)
        patient_id (str): Paciente
        professional_id (str): Profesional
        start (str): Inicio ISO
        end (str): Fin ISO (inicio + 1 hora)
        particular_value (float): Importe a cargo del paciente
        insurance_value (float): Importe a cargo de la obra social
        base_value (float): particular_value + insurance_value, base de la comisión
    """
    id: str
    patient_id: str = ""
    professional_id: str = ""
    start: str = ""
    end: str = ""
    particular_value: float = 0
    insurance_value: float = 0
    base_value: float = 0


class AppointmentCreate(CamelModel):
    """
    Alta de sesión. Los importes llegan como los tipeó el usuario;
    lo que no sea numérico cuenta como 0.
    """
    patient_id: str = ""
    professional_id: str = ""
    date: str = ""   # YYYY-MM-DD
    time: str = "09:00"
    particular_value: Any = None
    insurance_value: Any = None
