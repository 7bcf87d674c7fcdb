# guidari/routers/documents.py
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from guidari.deps import get_controller, get_current_user
from guidari.schemas import Document, DocumentCreate, DocType, User
from guidari.services.controller import ClinicController

router = APIRouter(prefix="/documents", tags=["documents"])


@router.get("", response_model=List[Document])
async def list_documents(
    search: str = Query(""),
    doc_type: Optional[DocType] = Query(None, alias="type"),
    current: User = Depends(get_current_user),
    controller: ClinicController = Depends(get_controller),
):
    return controller.list_documents(current, search=search, doc_type=doc_type)


@router.post("", response_model=Document, status_code=201)
async def upload_document(
    data: DocumentCreate,
    current: User = Depends(get_current_user),
    controller: ClinicController = Depends(get_controller),
):
    """Sólo metadatos: `url` es una referencia opaca provista por el cliente."""
    return controller.upload_document(current, data)


@router.post("/{patient_id}/{document_id}/toggle-status", response_model=Document)
async def toggle_status(
    patient_id: str,
    document_id: str,
    current: User = Depends(get_current_user),
    controller: ClinicController = Depends(get_controller),
):
    return controller.toggle_invoice_status(current, patient_id, document_id)
