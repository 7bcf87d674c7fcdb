# =====================================================================
# MÓDULO DE TABLAS DEL ALMACÉN REMOTO
# =====================================================================

"""
Definición de las tres tablas remotas (forma de fila snake_case).
Cada tabla está separada en su propio archivo por entidad.
"""

from .base import Base, IdType, JsonType, Money

from .user import UserRow
from .patient import PatientRow
from .appointment import AppointmentRow

# Tabla remota por colección
TABLES = {
    "users": UserRow.__table__,
    "patients": PatientRow.__table__,
    "appointments": AppointmentRow.__table__,
}

__all__ = [
    "Base",
    "IdType",
    "JsonType",
    "Money",
    "UserRow",
    "PatientRow",
    "AppointmentRow",
    "TABLES",
]
