"""
Cálculo de facturación y comisiones.

Todas las cifras se recalculan a pedido sobre el contenido actual de las
colecciones en memoria; no hay estado intermedio persistido.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence

from guidari.schemas import (
    Appointment, Document, FinanceFilters, FinanceReport, FinanceSummary,
    Patient, ProfessionalEarnings, User,
)
from guidari.schemas.enums import CommissionBasis

FALLBACK_RATE = 0.6


@dataclass(frozen=True)
class CommissionRecord:
    """Un registro con monto y profesional dueño (factura pagada o sesión)."""
    amount: float
    professional_id: Optional[str]

# =====================================================================
# FILTROS
# =====================================================================

def _in_range(day: str, filters: FinanceFilters) -> bool:
    if filters.start_date and day < filters.start_date:
        return False
    if filters.end_date and day > filters.end_date:
        return False
    return True


def filter_documents(patients: Iterable[Patient], filters: Optional[FinanceFilters] = None) -> List[Document]:
    """
    Documentos de todos los pacientes que pasan los filtros. Con filtro de
    profesional sólo cuentan los pacientes que tiene asignados.
    """
    filters = filters or FinanceFilters()
    docs: List[Document] = []
    for patient in patients:
        if filters.patient_id and patient.id != filters.patient_id:
            continue
        if filters.professional_id and filters.professional_id not in patient.assigned_professionals:
            continue
        for doc in patient.documents:
            if not _in_range(doc.date, filters):
                continue
            if filters.doc_type and doc.type != filters.doc_type:
                continue
            docs.append(doc)
    return docs


def filter_appointments(appointments: Iterable[Appointment], filters: Optional[FinanceFilters] = None) -> List[Appointment]:
    filters = filters or FinanceFilters()
    result = []
    for appt in appointments:
        if not _in_range(appt.start.split("T")[0], filters):
            continue
        if filters.professional_id and appt.professional_id != filters.professional_id:
            continue
        if filters.patient_id and appt.patient_id != filters.patient_id:
            continue
        result.append(appt)
    return result

# =====================================================================
# AGREGADOS
# =====================================================================

def _invoice_total(documents: Iterable[Document], status: str) -> float:
    return sum(d.amount or 0 for d in documents if d.is_invoice and d.status == status)


def collected_revenue(documents: Iterable[Document]) -> float:
    """Suma de facturas pagadas."""
    return _invoice_total(documents, "pagada")


def outstanding_receivables(documents: Iterable[Document]) -> float:
    """Suma de facturas pendientes de cobro."""
    return _invoice_total(documents, "pendiente")


def resolve_rate(professional_id: Optional[str], professionals: Sequence[User]) -> float:
    """Tasa como fracción; 0.6 si el profesional no se encuentra."""
    for pro in professionals:
        if pro.id == professional_id:
            return pro.commission_rate / 100
    return FALLBACK_RATE


def commission_records(
    basis: CommissionBasis,
    documents: Iterable[Document],
    appointments: Iterable[Appointment],
) -> List[CommissionRecord]:
    if basis == "sessions":
        return [CommissionRecord(a.base_value or 0, a.professional_id) for a in appointments]
    return [
        CommissionRecord(d.amount or 0, d.professional_id)
        for d in documents
        if d.is_invoice and d.status == "pagada"
    ]


def commission_liability(records: Iterable[CommissionRecord], professionals: Sequence[User]) -> float:
    return sum(r.amount * resolve_rate(r.professional_id, professionals) for r in records)


def summarize(
    patients: Sequence[Patient],
    appointments: Sequence[Appointment],
    professionals: Sequence[User],
    basis: CommissionBasis = "paid_invoices",
    filters: Optional[FinanceFilters] = None,
) -> FinanceSummary:
    """
    Las cuatro cifras del panel. El neto del centro es lo cobrado menos la
    comisión del staff (base caja: lo pendiente no suma).
    """
    docs = filter_documents(patients, filters)
    appts = filter_appointments(appointments, filters)
    collected = collected_revenue(docs)
    liability = commission_liability(commission_records(basis, docs, appts), professionals)
    return FinanceSummary(
        collected_revenue=collected,
        outstanding_receivables=outstanding_receivables(docs),
        staff_commission=liability,
        center_net=collected - liability,
        basis=basis,
    )


def professional_breakdown(
    appointments: Sequence[Appointment],
    professionals: Sequence[User],
    filters: Optional[FinanceFilters] = None,
) -> List[ProfessionalEarnings]:
    """Total de sesiones y monto a pagar por cada miembro del staff."""
    appts = filter_appointments(appointments, filters)
    by_pro: Dict[str, List[Appointment]] = {}
    for appt in appts:
        by_pro.setdefault(appt.professional_id, []).append(appt)

    rows = []
    for pro in professionals:
        own = by_pro.get(pro.id, [])
        total = sum(a.base_value or 0 for a in own)
        rows.append(ProfessionalEarnings(
            professional_id=pro.id,
            name=pro.name or f"{pro.first_name} {pro.last_name}".strip(),
            commission_rate=pro.commission_rate,
            sessions=len(own),
            total=total,
            payable=math.floor(total * (pro.commission_rate / 100)),
        ))
    return rows


def finance_report(
    patients: Sequence[Patient],
    appointments: Sequence[Appointment],
    professionals: Sequence[User],
    basis: CommissionBasis = "paid_invoices",
    filters: Optional[FinanceFilters] = None,
) -> FinanceReport:
    return FinanceReport(
        summary=summarize(patients, appointments, professionals, basis, filters),
        professionals=professional_breakdown(appointments, professionals, filters),
    )


def parse_commission_rate(raw) -> float:
    """Sin validación de rango: el valor se guarda tal como se parsea."""
    return parse_number(raw)


def parse_number(raw) -> float:
    """Lo no numérico (o no finito) cuenta como 0."""
    if isinstance(raw, bool):
        return 0.0
    try:
        value = float(str(raw).strip()) if raw is not None else 0.0
    except ValueError:
        return 0.0
    return value if math.isfinite(value) else 0.0
