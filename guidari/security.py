import datetime
import hmac
import re
import uuid

import bcrypt
import jwt

from guidari.config import settings

_UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)


def new_uuid() -> str:
    """UUID v4 como string (compatible con columnas UUID-as-text)."""
    return str(uuid.uuid4())


def is_canonical_uuid(value) -> bool:
    """True si el valor tiene la forma canónica 8-4-4-4-12 en hexadecimal."""
    return isinstance(value, str) and bool(_UUID_RE.match(value))


def hash_secret(plain: str) -> str:
    """Hash bcrypt para contraseñas y PINs."""
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(plain.encode("utf-8"), salt).decode("utf-8")


def is_hashed(value: str) -> bool:
    return value.startswith(("$2a$", "$2b$", "$2y$"))


def verify_secret(plain: str, stored: str) -> bool:
    """
    Compara un secreto contra lo almacenado. Acepta hashes bcrypt y, para
    filas heredadas del almacén remoto, valores en texto plano.
    """
    if not plain or not stored:
        return False
    if is_hashed(stored):
        try:
            return bcrypt.checkpw(plain.encode("utf-8"), stored.encode("utf-8"))
        except ValueError:
            return False
    return hmac.compare_digest(plain.encode("utf-8"), stored.encode("utf-8"))


def create_access_token(sub: str, role: str, session_id: str, expires_minutes: int | None = None) -> str:
    now = datetime.datetime.now(datetime.timezone.utc)
    minutes = expires_minutes or settings.jwt_expire_minutes
    payload = {
        "sub": sub,
        "role": role,
        "jti": session_id,
        "iat": now,
        "exp": now + datetime.timedelta(minutes=minutes),
        "typ": "access",
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_alg)


def decode_token(token: str) -> dict:
    return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_alg])
