# =====================================================================
# ENUMERACIONES DEL SISTEMA
# =====================================================================

from __future__ import annotations

from typing import Literal

# =========================================================
# ENUMERACIONES PRINCIPALES
# =========================================================

"""
Enumeraciones principales que definen los tipos y estados del sistema.
Los valores deben coincidir con los guardados en el almacén remoto.
"""

# Roles del staff
UserRole = Literal["ADMIN", "PROFESSIONAL"]
ADMIN: UserRole = "ADMIN"
PROFESSIONAL: UserRole = "PROFESSIONAL"

# Tipos de documento de un paciente
DocType = Literal["Factura", "Informe", "Planilla", "Otro"]
INVOICE: DocType = "Factura"
REPORT: DocType = "Informe"
FORM: DocType = "Planilla"
OTHER: DocType = "Otro"
DOC_TYPES = ("Factura", "Informe", "Planilla", "Otro")

# Estado de cobro de una factura
PaymentStatus = Literal["pendiente", "pagada"]
PENDING: PaymentStatus = "pendiente"
PAID: PaymentStatus = "pagada"

# Estado de una entrada del registro operativo
LogStatus = Literal["success", "error"]

# Estado de carga de cada colección
LoadState = Literal["idle", "loading", "loaded", "load_failed"]

# Base de cálculo de comisiones
CommissionBasis = Literal["paid_invoices", "sessions"]

# Colecciones sincronizadas (coinciden con los nombres de tabla remotos)
Collection = Literal["users", "patients", "appointments"]
COLLECTIONS = ("users", "patients", "appointments")
