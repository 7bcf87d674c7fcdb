from __future__ import annotations

from dataclasses import dataclass

import jwt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from guidari.schemas import User
from guidari.security import decode_token
from guidari.services.controller import ClinicController

bearer = HTTPBearer(auto_error=False)


@dataclass
class CurrentUser:
    """Usuario autenticado y el id de su sesión (jti del token)."""
    user: User
    session_id: str


def get_controller(request: Request) -> ClinicController:
    return request.app.state.controller


async def get_current(
    creds: HTTPAuthorizationCredentials = Depends(bearer),
    controller: ClinicController = Depends(get_controller),
) -> CurrentUser:
    if not creds:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    try:
        payload = decode_token(creds.credentials)
    except jwt.PyJWTError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    session_id = payload.get("jti", "")
    if not controller.is_session_active(session_id):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Session closed")
    # El usuario pudo haber sido eliminado después de emitir el token
    user = controller.state.users.get(payload.get("sub", ""))
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unknown user")
    return CurrentUser(user=user, session_id=session_id)


async def get_current_user(current: CurrentUser = Depends(get_current)) -> User:
    return current.user
