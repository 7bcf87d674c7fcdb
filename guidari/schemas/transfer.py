# =====================================================================
# ESQUEMAS DE EXPORTACIÓN / IMPORTACIÓN
# =====================================================================

from __future__ import annotations

from typing import List, Optional

from .base import CamelModel
from .user import User
from .patient import Patient
from .appointment import Appointment

EXPORT_VERSION = "1.0"


class ExportDocument(CamelModel):
    """
    Instantánea completa de las tres colecciones.

    Attributes:
        version (str): Versión del formato
        export_date (str): Momento de la exportación (ISO)
        users (List[User]): Staff
        patients (List[Patient]): Pacientes
        appointments (List[Appointment]): Sesiones
    """
    version: str = EXPORT_VERSION
    export_date: str
    users: List[User]
    patients: List[Patient]
    appointments: List[Appointment]


class ImportDocument(CamelModel):
    """Cualquier subconjunto de las tres colecciones."""
    version: Optional[str] = None
    export_date: Optional[str] = None
    users: Optional[List[User]] = None
    patients: Optional[List[Patient]] = None
    appointments: Optional[List[Appointment]] = None
