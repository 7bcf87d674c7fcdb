# guidari/routers/professionals.py
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends

from guidari.deps import get_controller, get_current_user
from guidari.schemas import CommissionRateUpdate, ProfessionalCreate, ProfileUpdate, StaffOut, User
from guidari.services.controller import ClinicController

router = APIRouter(prefix="/professionals", tags=["professionals"])


@router.get("", response_model=List[StaffOut])
async def list_professionals(
    current: User = Depends(get_current_user),
    controller: ClinicController = Depends(get_controller),
):
    return controller.list_staff()


@router.post("", response_model=StaffOut, status_code=201)
async def create_professional(
    data: ProfessionalCreate,
    current: User = Depends(get_current_user),
    controller: ClinicController = Depends(get_controller),
):
    return StaffOut.from_user(controller.add_professional(current, data))


@router.patch("/me", response_model=StaffOut)
async def update_my_profile(
    data: ProfileUpdate,
    current: User = Depends(get_current_user),
    controller: ClinicController = Depends(get_controller),
):
    return StaffOut.from_user(controller.update_profile(current, data))


@router.patch("/{user_id}/commission", response_model=StaffOut)
async def update_commission(
    user_id: str,
    data: CommissionRateUpdate,
    current: User = Depends(get_current_user),
    controller: ClinicController = Depends(get_controller),
):
    """El valor no numérico se guarda como 0."""
    return StaffOut.from_user(controller.update_commission_rate(current, user_id, data.commission_rate))


@router.delete("/{user_id}", status_code=204)
async def delete_professional(
    user_id: str,
    current: User = Depends(get_current_user),
    controller: ClinicController = Depends(get_controller),
):
    await controller.delete_professional(current, user_id)
