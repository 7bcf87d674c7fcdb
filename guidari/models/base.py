# =====================================================================
# MODELO BASE Y TIPOS DE COLUMNA DEL ALMACÉN REMOTO
# =====================================================================

from __future__ import annotations

from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy import JSON, Numeric, Text

# ---------- Clase Base para todas las tablas ----------
class Base(DeclarativeBase):
    """
    Clase base declarativa para las tablas remotas.
    Sólo se usa su metadata: las lecturas y escrituras van por SQLAlchemy Core.
    """
    pass

# ---------- Tipos portables ----------
# En Postgres (Supabase) se usan los tipos nativos; en otros motores
# (SQLite en pruebas) se degradan a texto / JSON genérico.

IdType = Text().with_variant(UUID(as_uuid=False), "postgresql")

JsonType = JSON().with_variant(JSONB(), "postgresql")

Money = Numeric(12, 2, asdecimal=False)
