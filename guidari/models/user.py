# =====================================================================
# TABLA REMOTA DE STAFF
# =====================================================================

from __future__ import annotations

from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Text, Date, Numeric
from datetime import date
from typing import Optional

from .base import Base, IdType, Money

class UserRow(Base):
    """
    Fila de la tabla `users`: administradores y profesionales.
    Claves snake_case; el nombre completo se guarda redundante.
    """
    __tablename__ = "users"

    # ---------- Identificación ----------
    id: Mapped[str] = mapped_column(IdType, primary_key=True)
    email: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    role: Mapped[str] = mapped_column(Text, nullable=False, server_default="PROFESSIONAL")

    # ---------- Credenciales ----------
    password: Mapped[Optional[str]] = mapped_column(Text)
    pin: Mapped[Optional[str]] = mapped_column(Text)

    # ---------- Datos personales ----------
    first_name: Mapped[Optional[str]] = mapped_column(Text)
    last_name: Mapped[Optional[str]] = mapped_column(Text)
    name: Mapped[Optional[str]] = mapped_column(Text)
    dob: Mapped[Optional[date]] = mapped_column(Date)
    avatar: Mapped[Optional[str]] = mapped_column(Text)

    # ---------- Datos profesionales ----------
    specialty: Mapped[Optional[str]] = mapped_column(Text)
    session_value: Mapped[Optional[float]] = mapped_column(Money)
    commission_rate: Mapped[Optional[float]] = mapped_column(Numeric(5, 2, asdecimal=False))

    def __repr__(self) -> str:
        return f"<UserRow(id={self.id[:8]}..., role={self.role})>"
