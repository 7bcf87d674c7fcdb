# =====================================================================
# TABLA REMOTA DE SESIONES
# =====================================================================

from __future__ import annotations

from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import DateTime
from datetime import datetime
from typing import Optional

from .base import Base, IdType, Money

class AppointmentRow(Base):
    """
    Fila de la tabla `appointments`.
    `start`/`end` de la entidad se guardan como start_time/end_time.
    """
    __tablename__ = "appointments"

    # ---------- Identificación ----------
    id: Mapped[str] = mapped_column(IdType, primary_key=True)
    patient_id: Mapped[str] = mapped_column(IdType, nullable=False)
    professional_id: Mapped[str] = mapped_column(IdType, nullable=False)

    # ---------- Horario ----------
    start_time: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    end_time: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    # ---------- Importes ----------
    particular_value: Mapped[Optional[float]] = mapped_column(Money)
    insurance_value: Mapped[Optional[float]] = mapped_column(Money)
    base_value: Mapped[Optional[float]] = mapped_column(Money)

    def __repr__(self) -> str:
        return f"<AppointmentRow(id={self.id[:8]}..., start={self.start_time})>"
