# guidari/routers/appointments.py
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from guidari.deps import get_controller, get_current_user
from guidari.schemas import Appointment, AppointmentCreate, User
from guidari.services.controller import ClinicController

router = APIRouter(prefix="/appointments", tags=["appointments"])


@router.get("", response_model=List[Appointment])
async def list_appointments(
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    current: User = Depends(get_current_user),
    controller: ClinicController = Depends(get_controller),
):
    return controller.list_appointments(current, start_date, end_date)


@router.post("", response_model=Appointment, status_code=201)
async def create_appointment(
    data: AppointmentCreate,
    current: User = Depends(get_current_user),
    controller: ClinicController = Depends(get_controller),
):
    return controller.create_appointment(current, data)


@router.delete("/{appointment_id}", status_code=204)
async def delete_appointment(
    appointment_id: str,
    current: User = Depends(get_current_user),
    controller: ClinicController = Depends(get_controller),
):
    await controller.delete_appointment(current, appointment_id)
