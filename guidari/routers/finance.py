# guidari/routers/finance.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from guidari.deps import get_controller, get_current_user
from guidari.schemas import CommissionBasis, DocType, FinanceFilters, FinanceReport, User
from guidari.services.controller import ClinicController

router = APIRouter(prefix="/finance", tags=["finance"])


@router.get("", response_model=FinanceReport)
async def get_finance_report(
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    patient_id: Optional[str] = Query(None, alias="patientId"),
    professional_id: Optional[str] = Query(None, alias="professionalId"),
    doc_type: Optional[DocType] = Query(None, alias="docType"),
    basis: Optional[CommissionBasis] = Query(None),
    current: User = Depends(get_current_user),
    controller: ClinicController = Depends(get_controller),
):
    filters = FinanceFilters(
        start_date=start_date,
        end_date=end_date,
        patient_id=patient_id,
        professional_id=professional_id,
        doc_type=doc_type,
    )
    return controller.finance_report(current, filters, basis)
