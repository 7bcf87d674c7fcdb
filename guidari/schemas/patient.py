# =====================================================================
# ESQUEMAS DE PACIENTES, NOTAS CLÍNICAS Y DOCUMENTOS
# =====================================================================

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import Field

from .base import CamelModel
from .enums import DocType, PaymentStatus

# =========================================================
# ENTIDADES ANIDADAS
# =========================================================

class ContactPerson(CamelModel):
    name: str = ""
    phone: str = ""
    email: str = ""


class ResponsiblePerson(CamelModel):
    name: str = ""
    address: str = ""
    phone: str = ""
    email: str = ""


class ClinicalNote(CamelModel):
    """
    Nota de historia clínica. Sólo se agregan, nunca se editan.

    Attributes:
        id (str): Identificador de la nota
        date (str): Fecha ISO de la nota
        professional_id (str): Profesional que la escribió
        content (str): Texto libre
    """
    id: str
    date: str
    professional_id: str = ""
    content: str = ""


class Document(CamelModel):
    """
    Documento de un paciente. Los campos de cobro sólo aplican a facturas.

    Attributes:
        id (str): Identificador del documento
        patient_id (str): Paciente dueño
        type (DocType): Factura, Informe, Planilla u Otro
        name (str): Nombre visible
        date (str): Fecha ISO (YYYY-MM-DD)
        url (str): Referencia opaca al contenido (no se persiste el archivo)
        amount (Optional[float]): Importe (sólo facturas)
        receipt_number (Optional[str]): Número de comprobante (sólo facturas)
        status (Optional[PaymentStatus]): pendiente o pagada (sólo facturas)
        professional_id (Optional[str]): Profesional al que se atribuye la factura
    """
    id: str
    patient_id: str = ""
    type: DocType = "Otro"
    name: str = ""
    date: str = ""
    url: str = "#"
    amount: Optional[float] = None
    receipt_number: Optional[str] = None
    status: Optional[PaymentStatus] = None
    professional_id: Optional[str] = None

    @property
    def is_invoice(self) -> bool:
        return self.type == "Factura"

# =========================================================
# ENTIDAD PRINCIPAL
# =========================================================

class Patient(CamelModel):
    """
    Paciente del centro.

    Attributes:
        id (str): Identificador (UUID canónico para registros nuevos)
        first_name (str): Nombre
        last_name (str): Apellido
        date_of_birth (str): Fecha de nacimiento ISO o cadena vacía
        diagnosis (str): Diagnóstico
        insurance (str): Obra social / cobertura
        avatar (str): Foto
        affiliate_number (str): Número de afiliado
        school (str): Escuela
        support_teacher (ContactPerson): Maestra integradora
        therapeutic_companion (ContactPerson): Acompañante terapéutico
        responsible (ResponsiblePerson): Responsable a cargo
        assigned_professionals (List[str]): IDs de staff asignados
        clinical_history (List[ClinicalNote]): Notas, de la más nueva a la más vieja
        documents (List[Document]): Documentos en orden de carga
    """
    id: str
    first_name: str = ""
    last_name: str = ""
    date_of_birth: str = ""
    diagnosis: str = ""
    insurance: str = "Particular"
    avatar: str = ""
    affiliate_number: str = ""
    school: str = ""
    support_teacher: ContactPerson = Field(default_factory=ContactPerson)
    therapeutic_companion: ContactPerson = Field(default_factory=ContactPerson)
    responsible: ResponsiblePerson = Field(default_factory=ResponsiblePerson)
    assigned_professionals: List[str] = Field(default_factory=list)
    clinical_history: List[ClinicalNote] = Field(default_factory=list)
    documents: List[Document] = Field(default_factory=list)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

# =========================================================
# ENTRADAS
# =========================================================

class PatientForm(CamelModel):
    """
    Formulario de alta/edición de paciente (sólo administradores).
    En la edición sólo se aplican los campos enviados.
    """
    first_name: str = ""
    last_name: str = ""
    date_of_birth: str = ""
    diagnosis: str = ""
    insurance: str = "Particular"
    avatar: str = ""
    affiliate_number: str = ""
    school: str = ""
    support_teacher: ContactPerson = Field(default_factory=ContactPerson)
    therapeutic_companion: ContactPerson = Field(default_factory=ContactPerson)
    responsible: ResponsiblePerson = Field(default_factory=ResponsiblePerson)
    assigned_professionals: List[str] = Field(default_factory=list)


class NoteCreate(CamelModel):
    content: str = ""
    date: Optional[str] = None  # YYYY-MM-DD, por defecto hoy


class DocumentCreate(CamelModel):
    patient_id: str = ""
    type: DocType = "Factura"
    name: str = ""
    url: str = "#"
    amount: Any = None
    receipt_number: str = ""
    is_paid: bool = False
    professional_id: Optional[str] = None
