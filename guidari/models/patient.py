# =====================================================================
# TABLA REMOTA DE PACIENTES
# =====================================================================

from __future__ import annotations

from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Text, Date
from datetime import date
from typing import Any, Optional

from .base import Base, IdType, JsonType

class PatientRow(Base):
    """
    Fila de la tabla `patients`.
    Contactos, profesionales asignados, historia clínica y documentos
    viajan como columnas JSON.
    """
    __tablename__ = "patients"

    # ---------- Identificación ----------
    id: Mapped[str] = mapped_column(IdType, primary_key=True)

    # ---------- Datos personales ----------
    first_name: Mapped[str] = mapped_column(Text, nullable=False)
    last_name: Mapped[str] = mapped_column(Text, nullable=False)
    date_of_birth: Mapped[Optional[date]] = mapped_column(Date)
    diagnosis: Mapped[Optional[str]] = mapped_column(Text)
    avatar: Mapped[Optional[str]] = mapped_column(Text)

    # ---------- Cobertura ----------
    insurance: Mapped[Optional[str]] = mapped_column(Text)
    affiliate_number: Mapped[Optional[str]] = mapped_column(Text)

    # ---------- Escuela y contactos ----------
    school: Mapped[Optional[str]] = mapped_column(Text)
    support_teacher: Mapped[Optional[Any]] = mapped_column(JsonType)
    therapeutic_companion: Mapped[Optional[Any]] = mapped_column(JsonType)
    responsible: Mapped[Optional[Any]] = mapped_column(JsonType)

    # ---------- Relaciones (sin integridad referencial) ----------
    assigned_professionals: Mapped[Optional[Any]] = mapped_column(JsonType)
    clinical_history: Mapped[Optional[Any]] = mapped_column(JsonType)
    documents: Mapped[Optional[Any]] = mapped_column(JsonType)

    def __repr__(self) -> str:
        return f"<PatientRow(id={self.id[:8]}..., name={self.first_name} {self.last_name})>"
