# =====================================================================
# ESQUEMAS DE STAFF (USUARIOS Y PROFESIONALES)
# =====================================================================

from __future__ import annotations

from typing import Any, Optional

from .base import CamelModel
from .enums import UserRole

# =========================================================
# ENTIDAD
# =========================================================

class User(CamelModel):
    """
    Miembro del staff: administrador o profesional.

    Attributes:
        id (str): Identificador (UUID canónico para registros nuevos)
        email (str): Correo de acceso
        password (str): Contraseña (hash bcrypt o texto plano heredado)
        pin (str): PIN numérico de 4 a 6 dígitos (hash bcrypt o texto plano heredado)
        first_name (str): Nombre
        last_name (str): Apellido
        name (str): Nombre completo, redundante con first_name + last_name
        dob (str): Fecha de nacimiento ISO o cadena vacía
        role (UserRole): ADMIN o PROFESSIONAL
        avatar (str): URL o data-URL de la foto
        specialty (str): Especialidad
        session_value (float): Honorario por sesión
        commission_rate (float): Porcentaje (0-100) del valor que retiene el profesional
    """
    id: str
    email: str = ""
    password: str = ""
    pin: str = ""
    first_name: str = ""
    last_name: str = ""
    name: str = ""
    dob: str = ""
    role: UserRole = "PROFESSIONAL"
    avatar: str = ""
    specialty: str = ""
    session_value: float = 0
    commission_rate: float = 60

    @property
    def is_admin(self) -> bool:
        return self.role == "ADMIN"


class StaffOut(CamelModel):
    """Proyección pública del staff (sin secretos)."""
    id: str
    email: str
    first_name: str
    last_name: str
    name: str
    dob: str
    role: UserRole
    avatar: str
    specialty: str
    session_value: float
    commission_rate: float
    has_pin: bool = False

    @classmethod
    def from_user(cls, user: User) -> "StaffOut":
        data = user.model_dump(exclude={"password", "pin"})
        return cls(**data, has_pin=bool(user.pin))

# =========================================================
# ENTRADAS
# =========================================================

class ProfessionalCreate(CamelModel):
    """Alta de profesional por un administrador."""
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    password: str = ""
    pin: str = ""
    dob: str = ""
    specialty: str = ""
    session_value: float = 0
    commission_rate: float = 60
    role: UserRole = "PROFESSIONAL"
    avatar: str = "https://picsum.photos/seed/default/200"


class ProfileUpdate(CamelModel):
    """Edición del propio perfil. Los campos omitidos no se modifican."""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    specialty: Optional[str] = None
    avatar: Optional[str] = None
    dob: Optional[str] = None
    pin: Optional[str] = None
    password: Optional[str] = None


class CommissionRateUpdate(CamelModel):
    """El valor llega tal cual lo tipeó el administrador (número o texto)."""
    commission_rate: Any = None
