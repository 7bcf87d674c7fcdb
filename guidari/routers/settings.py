# guidari/routers/settings.py
from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from guidari.deps import get_controller, get_current_user
from guidari.schemas import (
    LogEntry, RemoteConfigOut, RemoteConfigUpdate, SyncResultOut, SyncStatusOut, User,
)
from guidari.services import transfer
from guidari.services.controller import ClinicController
from guidari.services.synchronizer import SyncResult

router = APIRouter(prefix="/settings", tags=["settings"])

# -------------------- Helper Functions --------------------

def _result_out(result: SyncResult) -> SyncResultOut:
    return SyncResultOut(
        action=f"{result.action} ({result.collection})",
        ok=result.ok,
        sent=result.sent,
        dropped=result.dropped,
        reason=result.failure.reason if result.failure else None,
        message=result.failure.message if result.failure else None,
    )


def _status(controller: ClinicController, results: Dict[str, SyncResult]) -> SyncStatusOut:
    return SyncStatusOut(
        states=controller.state.load_states(),
        results=[_result_out(r) for r in results.values()],
        refresh_running=controller.scheduler.running,
    )

# -------------------- Sincronización --------------------

@router.get("/sync", response_model=SyncStatusOut)
async def sync_status(
    current: User = Depends(get_current_user),
    controller: ClinicController = Depends(get_controller),
):
    return _status(controller, controller.sync.last_results)


@router.post("/sync", response_model=SyncStatusOut)
async def sync_now(
    current: User = Depends(get_current_user),
    controller: ClinicController = Depends(get_controller),
):
    return _status(controller, await controller.sync_now(current))


@router.get("/remote", response_model=RemoteConfigOut)
async def get_remote_config(
    current: User = Depends(get_current_user),
    controller: ClinicController = Depends(get_controller),
):
    return controller.remote_config(current)


@router.put("/remote", response_model=SyncStatusOut)
async def update_remote_config(
    data: RemoteConfigUpdate,
    current: User = Depends(get_current_user),
    controller: ClinicController = Depends(get_controller),
):
    """Guarda las credenciales y recarga el cliente remoto y los datos."""
    return _status(controller, await controller.update_remote_config(current, data))


@router.get("/logs", response_model=List[LogEntry])
async def get_logs(
    current: User = Depends(get_current_user),
    controller: ClinicController = Depends(get_controller),
):
    return controller.logs(current)

# -------------------- Exportación / Importación --------------------

@router.get("/export")
async def export_data(
    current: User = Depends(get_current_user),
    controller: ClinicController = Depends(get_controller),
):
    document = controller.export_data(current)
    filename = f"guidari_backup_{document.export_date[:10]}.json"
    return JSONResponse(
        content=document.model_dump(mode="json", by_alias=True),
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/import")
async def import_data(
    payload: Any = Body(...),
    current: User = Depends(get_current_user),
    controller: ClinicController = Depends(get_controller),
):
    document = transfer.parse_import(payload)
    return {"imported": controller.import_data(current, document)}
