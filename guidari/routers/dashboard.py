# guidari/routers/dashboard.py
from __future__ import annotations

import datetime as dt
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from guidari.deps import get_controller, get_current_user
from guidari.schemas import DashboardData, User, WeekDay
from guidari.services.controller import ClinicController

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardData)
async def get_dashboard(
    current: User = Depends(get_current_user),
    controller: ClinicController = Depends(get_controller),
):
    return controller.dashboard(current)


@router.get("/week", response_model=List[WeekDay])
async def get_week(
    date: Optional[dt.date] = Query(None, description="Cualquier día de la semana (por defecto hoy)"),
    current: User = Depends(get_current_user),
    controller: ClinicController = Depends(get_controller),
):
    return controller.week(current, date)
