# =====================================================================
# MÓDULO DE ESQUEMAS DE PYDANTIC
# =====================================================================

"""
Entidades en memoria y esquemas de la API de Guidari.
Cada grupo está separado en su propio archivo.
"""

from .enums import (
    UserRole,
    DocType,
    PaymentStatus,
    LogStatus,
    LoadState,
    CommissionBasis,
    Collection,
)

from .base import CamelModel
from .user import User, StaffOut, ProfessionalCreate, ProfileUpdate, CommissionRateUpdate
from .patient import (
    ContactPerson, ResponsiblePerson, ClinicalNote, Document, Patient,
    PatientForm, NoteCreate, DocumentCreate,
)
from .appointment import Appointment, AppointmentCreate
from .auth import LoginRequest, RegisterRequest, SetupRequest, TokenResponse
from .operations import LogEntry, SyncResultOut, SyncStatusOut, RemoteConfigUpdate, RemoteConfigOut
from .finance import FinanceFilters, FinanceSummary, ProfessionalEarnings, FinanceReport
from .dashboard import Birthday, MissingDocuments, DashboardData, WeekDay
from .transfer import EXPORT_VERSION, ExportDocument, ImportDocument

__all__ = [
    "UserRole", "DocType", "PaymentStatus", "LogStatus", "LoadState", "CommissionBasis", "Collection",
    "CamelModel",
    "User", "StaffOut", "ProfessionalCreate", "ProfileUpdate", "CommissionRateUpdate",
    "ContactPerson", "ResponsiblePerson", "ClinicalNote", "Document", "Patient",
    "PatientForm", "NoteCreate", "DocumentCreate",
    "Appointment", "AppointmentCreate",
    "LoginRequest", "RegisterRequest", "SetupRequest", "TokenResponse",
    "LogEntry", "SyncResultOut", "SyncStatusOut", "RemoteConfigUpdate", "RemoteConfigOut",
    "FinanceFilters", "FinanceSummary", "ProfessionalEarnings", "FinanceReport",
    "Birthday", "MissingDocuments", "DashboardData", "WeekDay",
    "EXPORT_VERSION", "ExportDocument", "ImportDocument",
]
