# guidari/routers/auth.py
from __future__ import annotations

from fastapi import APIRouter, Depends

from guidari.deps import CurrentUser, get_controller, get_current
from guidari.schemas import LoginRequest, RegisterRequest, SetupRequest, StaffOut, TokenResponse
from guidari.services.controller import ClinicController

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
async def login(data: LoginRequest, controller: ClinicController = Depends(get_controller)):
    """Login por email y contraseña, o sólo por PIN si se envía `pin`."""
    return controller.login(data.email, data.password, data.pin)


@router.post("/register", response_model=TokenResponse, status_code=201)
async def register(data: RegisterRequest, controller: ClinicController = Depends(get_controller)):
    return controller.register(data)


@router.post("/setup", response_model=TokenResponse)
async def setup(data: SetupRequest, controller: ClinicController = Depends(get_controller)):
    """Asigna credenciales al administrador inicial (token de un solo uso)."""
    return controller.setup_admin(data)


@router.post("/logout", status_code=204)
async def logout(
    current: CurrentUser = Depends(get_current),
    controller: ClinicController = Depends(get_controller),
):
    await controller.logout(current.session_id)


@router.get("/me", response_model=StaffOut)
async def me(current: CurrentUser = Depends(get_current)):
    return StaffOut.from_user(current.user)
