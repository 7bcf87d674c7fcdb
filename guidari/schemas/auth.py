# =====================================================================
# ESQUEMAS DE AUTENTICACIÓN
# =====================================================================

from __future__ import annotations

from typing import Literal, Optional
from pydantic import BaseModel

from .base import CamelModel
from .user import StaffOut

# =========================================================
# ESQUEMAS DE AUTENTICACIÓN
# =========================================================

class LoginRequest(BaseModel):
    """
    Solicitud de inicio de sesión: por email y contraseña o sólo por PIN.

    Attributes:
        email (Optional[str]): Correo del usuario
        password (Optional[str]): Contraseña en texto plano
        pin (Optional[str]): PIN de seguridad (si se envía, se ignoran email y contraseña)
    """
    email: Optional[str] = None
    password: Optional[str] = None
    pin: Optional[str] = None


class RegisterRequest(CamelModel):
    """Auto-registro de un profesional. Todos los campos son obligatorios."""
    email: str = ""
    password: str = ""
    first_name: str = ""
    last_name: str = ""
    pin: str = ""


class SetupRequest(CamelModel):
    """
    Configuración inicial del administrador semilla con el token de un solo uso.

    Attributes:
        token (str): Token de configuración (variable SETUP_TOKEN)
        password (str): Contraseña a asignar
        pin (str): PIN a asignar (4 a 6 dígitos)
    """
    token: str
    password: str
    pin: str = ""


class TokenResponse(BaseModel):
    """
    Respuesta con el token de acceso y el usuario autenticado.

    Attributes:
        access_token (str): Token JWT de acceso
        token_type (Literal["bearer"]): Tipo de token (siempre 'bearer')
        user (StaffOut): Usuario autenticado
    """
    access_token: str
    token_type: Literal["bearer"] = "bearer"
    user: StaffOut
