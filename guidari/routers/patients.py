# guidari/routers/patients.py
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from guidari.deps import get_controller, get_current_user
from guidari.schemas import NoteCreate, Patient, PatientForm, User
from guidari.services.controller import ClinicController

router = APIRouter(prefix="/patients", tags=["patients"])


@router.get("", response_model=List[Patient])
async def list_patients(
    search: str = Query("", description="Busca en nombre y apellido"),
    assigned_to: Optional[str] = Query(None, alias="assignedTo", description="Sólo pacientes asignados a este profesional"),
    current: User = Depends(get_current_user),
    controller: ClinicController = Depends(get_controller),
):
    return controller.list_patients(current, search=search, assigned_to=assigned_to)


@router.get("/{patient_id}", response_model=Patient)
async def get_patient(
    patient_id: str,
    current: User = Depends(get_current_user),
    controller: ClinicController = Depends(get_controller),
):
    return controller.get_patient(current, patient_id)


@router.post("", response_model=Patient, status_code=201)
async def create_patient(
    data: PatientForm,
    current: User = Depends(get_current_user),
    controller: ClinicController = Depends(get_controller),
):
    return controller.create_patient(current, data)


@router.patch("/{patient_id}", response_model=Patient)
async def update_patient(
    patient_id: str,
    data: PatientForm,
    current: User = Depends(get_current_user),
    controller: ClinicController = Depends(get_controller),
):
    return controller.update_patient(current, patient_id, data)


@router.delete("/{patient_id}", status_code=204)
async def delete_patient(
    patient_id: str,
    current: User = Depends(get_current_user),
    controller: ClinicController = Depends(get_controller),
):
    await controller.delete_patient(current, patient_id)


@router.post("/{patient_id}/notes", response_model=Patient, status_code=201)
async def add_note(
    patient_id: str,
    data: NoteCreate,
    current: User = Depends(get_current_user),
    controller: ClinicController = Depends(get_controller),
):
    return controller.add_clinical_note(current, patient_id, data)
