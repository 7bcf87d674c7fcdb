# =====================================================================
# ESQUEMAS DE FINANZAS
# =====================================================================

from __future__ import annotations

from typing import List, Optional
from pydantic import Field

from .base import CamelModel
from .enums import CommissionBasis, DocType

# =========================================================
# FILTROS
# =========================================================

class FinanceFilters(CamelModel):
    """
    Filtros del panel de finanzas. Todos opcionales; las fechas son
    YYYY-MM-DD y se comparan como texto contra la fecha del documento o
    el día de inicio de la sesión.

    Attributes:
        start_date (Optional[str]): Desde (inclusive)
        end_date (Optional[str]): Hasta (inclusive)
        patient_id (Optional[str]): Sólo este paciente
        professional_id (Optional[str]): Sólo sesiones de este profesional y
            documentos de pacientes que tiene asignados
        doc_type (Optional[DocType]): Sólo documentos de este tipo
    """
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    patient_id: Optional[str] = None
    professional_id: Optional[str] = None
    doc_type: Optional[DocType] = None

# =========================================================
# RESULTADOS
# =========================================================

class FinanceSummary(CamelModel):
    """
    Cuatro cifras agregadas del centro.

    Attributes:
        collected_revenue (float): Facturas pagadas
        outstanding_receivables (float): Facturas pendientes
        staff_commission (float): Lo que corresponde pagar a profesionales
        center_net (float): collected_revenue - staff_commission
        basis (CommissionBasis): Base usada para la comisión
    """
    collected_revenue: float
    outstanding_receivables: float
    staff_commission: float
    center_net: float
    basis: CommissionBasis


class ProfessionalEarnings(CamelModel):
    """Fila del gráfico por profesional: total de sesiones y monto a pagar."""
    professional_id: str
    name: str
    commission_rate: float
    sessions: int
    total: float
    payable: float


class FinanceReport(CamelModel):
    summary: FinanceSummary
    professionals: List[ProfessionalEarnings] = Field(default_factory=list)
