"""
ClinicController: dueño único del AppState.

Las rutas sólo leen proyecciones y ejecutan comandos con nombre. Los
errores de validación se lanzan antes de tocar el estado o la red; las
escrituras se aplican localmente en el acto y se sincronizan en segundo
plano a través del Synchronizer.
"""
from __future__ import annotations

import datetime as dt
import hmac
import logging
from typing import Dict, List, Optional, Set

from guidari.config import SETUP_USED_KEY, LocalConfigStore, Settings, settings
from guidari.exceptions import (
    AuthenticationFailed, NotFound, PermissionDenied, SyncFailed, ValidationFailure,
)
from guidari.remote import RemoteStore, create_remote_store
from guidari.schemas import (
    Appointment, AppointmentCreate, ClinicalNote, Document, DocumentCreate,
    ExportDocument, FinanceFilters, FinanceReport, ImportDocument, LogEntry,
    NoteCreate, Patient, PatientForm, ProfessionalCreate, ProfileUpdate,
    RegisterRequest, RemoteConfigOut, RemoteConfigUpdate, SetupRequest,
    StaffOut, TokenResponse, User, DashboardData, WeekDay,
)
from guidari.schemas.enums import CommissionBasis
from guidari.security import create_access_token, hash_secret, new_uuid, verify_secret
from guidari.services import billing, dashboard, transfer
from guidari.services.permission_service import PermissionService
from guidari.services.state import AppState, EntityStore
from guidari.services.synchronizer import RefreshScheduler, SyncResult, Synchronizer

logger = logging.getLogger(__name__)

SEED_ADMIN_ID = "00000000-0000-0000-0000-000000000001"
DEFAULT_AVATAR = "https://picsum.photos/seed/{seed}/200"


def seed_staff(config: Settings) -> List[User]:
    """
    Lista semilla del staff: un administrador sin credenciales. La
    contraseña y el PIN se asignan con el token de configuración inicial.
    """
    return [
        User(
            id=SEED_ADMIN_ID,
            email=config.admin_email,
            first_name="Administración",
            last_name="Guidari",
            name="Administración Guidari",
            role="ADMIN",
            avatar=DEFAULT_AVATAR.format(seed="admin"),
            specialty="Dirección",
            commission_rate=100,
        )
    ]


def validate_pin(pin: str, message: str = "El PIN debe tener entre 4 y 6 dígitos.") -> None:
    if not pin.isdigit():
        raise ValidationFailure("El PIN debe contener solo números.")
    if not 4 <= len(pin) <= 6:
        raise ValidationFailure(message)


def validate_date(value: Optional[str], message: str = "La fecha debe tener el formato AAAA-MM-DD.") -> None:
    # Vacío es válido: se guarda como NULL
    if not (value or "").strip():
        return
    try:
        dt.date.fromisoformat(value.strip())
    except ValueError:
        raise ValidationFailure(message)


def _require(*values: Optional[str], message: str) -> None:
    if any(not (v or "").strip() for v in values):
        raise ValidationFailure(message)


def _replace(items: List, entity) -> List:
    return [entity if item.id == entity.id else item for item in items]


class ClinicController:
    def __init__(
        self,
        config: Settings = settings,
        local_store: Optional[LocalConfigStore] = None,
        remote: Optional[RemoteStore] = None,
    ):
        self.settings = config
        self.local = local_store or LocalConfigStore(config.local_config_path)
        if remote is None:
            url, key = self.local.remote_credentials(config)
            remote = create_remote_store(url, key, timeout=config.remote_timeout_seconds)
        seed = seed_staff(config)
        self.state = AppState(users=EntityStore("users", seed))
        self.sync = Synchronizer(self.state, remote, seed_users=seed)
        self.scheduler = RefreshScheduler(self._scheduled_refresh, config.refresh_interval_minutes * 60)
        self._sessions: Set[str] = set()

    # =====================================================================
    # CICLO DE VIDA
    # =====================================================================

    async def startup(self) -> Dict[str, SyncResult]:
        logger.info("Initial load", extra={"remote": type(self.sync.remote).__name__})
        return await self.sync.refresh()

    async def shutdown(self) -> None:
        await self.scheduler.stop()
        await self.sync.drain()
        if self.sync.remote is not None:
            await self.sync.remote.close()

    async def _scheduled_refresh(self) -> None:
        results = await self.sync.refresh()
        minutes = int(self.settings.refresh_interval_minutes)
        if all(r.ok for r in results.values()):
            self.state.log.add("Auto-Sync", "success", f"Sincronización programada de {minutes} min completada.")
        else:
            self.state.log.add("Auto-Sync", "error", "Sincronización programada con errores.")

    # -------------------- Proyecciones --------------------

    def users(self) -> List[User]:
        return list(self.state.users.snapshot())

    def patients(self) -> List[Patient]:
        return list(self.state.patients.snapshot())

    def appointments(self) -> List[Appointment]:
        return list(self.state.appointments.snapshot())

    def get_user(self, user_id: str) -> User:
        user = self.state.users.get(user_id)
        if user is None:
            raise NotFound("Profesional no encontrado")
        return user

    def _find_by_email(self, email: str) -> Optional[User]:
        email = email.strip().lower()
        return next((u for u in self.users() if u.email.strip().lower() == email), None)

    # =====================================================================
    # AUTENTICACIÓN Y SESIONES
    # =====================================================================

    def _open_session(self, user: User) -> TokenResponse:
        session_id = new_uuid()
        self._sessions.add(session_id)
        # El refresco periódico sólo corre con alguna sesión activa
        self.scheduler.start()
        token = create_access_token(user.id, user.role, session_id)
        logger.info("Session opened", extra={"user_id": user.id, "role": user.role})
        return TokenResponse(access_token=token, user=StaffOut.from_user(user))

    def is_session_active(self, session_id: str) -> bool:
        return session_id in self._sessions

    async def logout(self, session_id: str) -> None:
        self._sessions.discard(session_id)
        if not self._sessions:
            await self.scheduler.stop()

    def login(self, email: Optional[str], password: Optional[str], pin: Optional[str] = None) -> TokenResponse:
        if pin is not None:
            if not pin.strip():
                raise ValidationFailure("Ingrese su PIN de seguridad.")
            user = next((u for u in self.users() if u.pin and verify_secret(pin.strip(), u.pin)), None)
            if user is None:
                raise AuthenticationFailed("PIN incorrecto o no configurado.")
            return self._open_session(user)

        _require(email, password, message="Por favor complete todos los campos obligatorios.")
        user = self._find_by_email(email)
        if user is None or not verify_secret(password, user.password):
            raise AuthenticationFailed("Email o contraseña incorrectos.")
        return self._open_session(user)

    def register(self, data: RegisterRequest) -> TokenResponse:
        _require(
            data.email, data.password, data.first_name, data.last_name, data.pin,
            message="Por favor complete todos los campos obligatorios.",
        )
        validate_pin(data.pin)
        if self._find_by_email(data.email):
            raise ValidationFailure("Este correo electrónico ya está registrado.")

        email = data.email.strip()
        user = User(
            id=new_uuid(),
            email=email,
            password=hash_secret(data.password),
            pin=hash_secret(data.pin),
            first_name=data.first_name,
            last_name=data.last_name,
            name=f"{data.first_name} {data.last_name}",
            role="PROFESSIONAL",
            avatar=DEFAULT_AVATAR.format(seed=email),
            session_value=0,
            commission_rate=60,
            specialty="Pendiente asignar",
        )
        self.sync.update_users([*self.users(), user])
        return self._open_session(user)

    def setup_admin(self, data: SetupRequest) -> TokenResponse:
        """Asigna credenciales al administrador semilla con el token de un solo uso."""
        expected = self.settings.setup_token
        if not expected:
            raise PermissionDenied("La configuración inicial no está habilitada.")
        if self.local.get(SETUP_USED_KEY):
            raise PermissionDenied("El token de configuración ya fue utilizado.")
        if not hmac.compare_digest(data.token.encode("utf-8"), expected.encode("utf-8")):
            raise AuthenticationFailed("Token de configuración inválido.")
        _require(data.password, message="Por favor complete todos los campos obligatorios.")
        if data.pin:
            validate_pin(data.pin)

        admin = self.state.users.get(SEED_ADMIN_ID) or seed_staff(self.settings)[0]
        admin.password = hash_secret(data.password)
        admin.pin = hash_secret(data.pin) if data.pin else ""
        users = self.users()
        users = _replace(users, admin) if any(u.id == admin.id for u in users) else [*users, admin]
        self.sync.update_users(users)
        self.local.set_many({SETUP_USED_KEY: True})
        self.state.log.add("Configuración inicial", "success", "Credenciales del administrador asignadas.")
        return self._open_session(admin)

    # =====================================================================
    # STAFF
    # =====================================================================

    def list_staff(self) -> List[StaffOut]:
        return [StaffOut.from_user(u) for u in self.users()]

    def add_professional(self, actor: User, data: ProfessionalCreate) -> User:
        PermissionService.require_admin(actor)
        _require(
            data.first_name, data.last_name, data.email, data.password, data.pin,
            message="Por favor, complete los campos obligatorios.",
        )
        validate_pin(data.pin)
        validate_date(data.dob)
        if self._find_by_email(data.email):
            raise ValidationFailure("Este correo electrónico ya está registrado.")

        user = User(
            id=new_uuid(),
            email=data.email.strip(),
            password=hash_secret(data.password),
            pin=hash_secret(data.pin),
            first_name=data.first_name,
            last_name=data.last_name,
            name=f"{data.first_name} {data.last_name}",
            dob=data.dob,
            role=data.role,
            avatar=data.avatar,
            specialty=data.specialty,
            session_value=data.session_value,
            commission_rate=data.commission_rate,
        )
        self.sync.update_users([*self.users(), user])
        return user

    async def delete_professional(self, actor: User, user_id: str) -> SyncResult:
        PermissionService.require_admin(actor)
        if user_id == actor.id:
            raise ValidationFailure("No puede eliminar su propia cuenta.")
        self.get_user(user_id)
        return self._confirmed(await self.sync.delete("users", user_id))

    def update_commission_rate(self, actor: User, user_id: str, raw) -> User:
        PermissionService.require_admin(actor)
        user = self.get_user(user_id)
        user.commission_rate = billing.parse_commission_rate(raw)
        self.sync.update_users(_replace(self.users(), user))
        return user

    def update_profile(self, actor: User, data: ProfileUpdate) -> User:
        user = self.get_user(actor.id)
        if data.pin:
            validate_pin(data.pin, "El PIN debe tener entre 4 y 6 números.")
        validate_date(data.dob)

        if data.pin:
            user.pin = hash_secret(data.pin)
        if data.password:
            user.password = hash_secret(data.password)
        for field in ("first_name", "last_name", "specialty", "avatar", "dob"):
            value = getattr(data, field)
            if value is not None:
                setattr(user, field, value)
        user.name = f"{user.first_name} {user.last_name}"
        self.sync.update_users(_replace(self.users(), user))
        self.state.log.add("Perfil", "success", "Información de perfil actualizada correctamente.")
        return user

    # =====================================================================
    # PACIENTES
    # =====================================================================

    def list_patients(self, actor: User, search: str = "", assigned_to: Optional[str] = None) -> List[Patient]:
        patients = PermissionService.visible_patients(actor, self.patients())
        if search:
            needle = search.strip().lower()
            patients = [p for p in patients if needle in p.full_name.lower()]
        if assigned_to:
            patients = [p for p in patients if assigned_to in p.assigned_professionals]
        return patients

    def get_patient(self, actor: User, patient_id: str) -> Patient:
        patient = self.state.patients.get(patient_id)
        if patient is None:
            raise NotFound("Paciente no encontrado")
        PermissionService.validate_patient_access(actor, patient)
        return patient

    def create_patient(self, actor: User, form: PatientForm) -> Patient:
        PermissionService.require_admin(actor)
        _require(form.first_name, form.last_name,
                 message="Por favor ingrese al menos el nombre y apellido del paciente.")
        validate_date(form.date_of_birth)
        patient = Patient(id=new_uuid(), **form.model_dump())
        self.sync.update_patients([*self.patients(), patient])
        return patient

    def update_patient(self, actor: User, patient_id: str, form: PatientForm) -> Patient:
        PermissionService.require_admin(actor)
        patient = self.get_patient(actor, patient_id)
        changes = form.model_dump(exclude_unset=True)
        updated = patient.model_copy(update={k: getattr(form, k) for k in changes})
        _require(updated.first_name, updated.last_name,
                 message="Por favor ingrese al menos el nombre y apellido del paciente.")
        validate_date(updated.date_of_birth)
        self.sync.update_patients(_replace(self.patients(), updated))
        return updated

    async def delete_patient(self, actor: User, patient_id: str) -> SyncResult:
        PermissionService.require_admin(actor)
        self.get_patient(actor, patient_id)
        return self._confirmed(await self.sync.delete("patients", patient_id))

    def add_clinical_note(self, actor: User, patient_id: str, data: NoteCreate) -> Patient:
        patient = self.get_patient(actor, patient_id)
        if not data.content.strip():
            raise ValidationFailure("La nota no puede estar vacía.")
        day = data.date or dt.date.today().isoformat()
        try:
            noon = dt.datetime.fromisoformat(f"{day}T12:00:00")
        except ValueError:
            raise ValidationFailure("Fecha de nota inválida.")

        note = ClinicalNote(id=new_uuid(), date=noon.isoformat(), professional_id=actor.id, content=data.content)
        history = [note, *patient.clinical_history]
        # Orden estable: a igual fecha la nota nueva queda primero
        patient.clinical_history = sorted(history, key=lambda n: n.date, reverse=True)
        self.sync.update_patients(_replace(self.patients(), patient))
        return patient

    # =====================================================================
    # DOCUMENTOS
    # =====================================================================

    def list_documents(self, actor: User, search: str = "", doc_type: Optional[str] = None) -> List[Document]:
        needle = search.strip().lower()
        docs = []
        for patient in PermissionService.visible_patients(actor, self.patients()):
            for doc in patient.documents:
                if doc_type and doc.type != doc_type:
                    continue
                if needle and needle not in doc.name.lower() and needle not in patient.full_name.lower():
                    continue
                docs.append(doc)
        return docs

    def upload_document(self, actor: User, data: DocumentCreate) -> Document:
        _require(data.patient_id, data.name,
                 message="Seleccione un paciente e ingrese el nombre del documento.")
        patient = self.get_patient(actor, data.patient_id)
        is_invoice = data.type == "Factura"
        doc = Document(
            id=new_uuid(),
            patient_id=patient.id,
            type=data.type,
            name=data.name,
            date=dt.date.today().isoformat(),
            url=data.url or "#",
            amount=billing.parse_number(data.amount) if is_invoice else None,
            receipt_number=data.receipt_number if is_invoice else None,
            status=("pagada" if data.is_paid else "pendiente") if is_invoice else None,
            professional_id=(data.professional_id or actor.id) if is_invoice else None,
        )
        patient.documents = [*patient.documents, doc]
        self.sync.update_patients(_replace(self.patients(), patient))
        return doc

    def toggle_invoice_status(self, actor: User, patient_id: str, document_id: str) -> Document:
        PermissionService.require_admin(actor)
        patient = self.get_patient(actor, patient_id)
        doc = next((d for d in patient.documents if d.id == document_id), None)
        if doc is None:
            raise NotFound("Documento no encontrado")
        if not doc.is_invoice:
            raise ValidationFailure("Sólo las facturas tienen estado de cobro.")
        doc.status = "pendiente" if doc.status == "pagada" else "pagada"
        self.sync.update_patients(_replace(self.patients(), patient))
        return doc

    # =====================================================================
    # SESIONES
    # =====================================================================

    def list_appointments(
        self, actor: User, start_date: Optional[str] = None, end_date: Optional[str] = None,
    ) -> List[Appointment]:
        visible = PermissionService.visible_appointments(actor, self.appointments())
        filters = FinanceFilters(start_date=start_date, end_date=end_date)
        return sorted(billing.filter_appointments(visible, filters), key=lambda a: a.start)

    def create_appointment(self, actor: User, data: AppointmentCreate) -> Appointment:
        # Los profesionales sólo agendan para sí mismos
        professional_id = data.professional_id if actor.is_admin else actor.id
        _require(data.patient_id, professional_id, message="Seleccione paciente y profesional.")
        if self.state.patients.get(data.patient_id) is None:
            raise NotFound("Paciente no encontrado")
        self.get_user(professional_id)

        day = data.date or dt.date.today().isoformat()
        try:
            start = dt.datetime.fromisoformat(f"{day}T{data.time}:00")
        except ValueError:
            raise ValidationFailure("Fecha u hora inválida.")
        particular = billing.parse_number(data.particular_value)
        insurance = billing.parse_number(data.insurance_value)
        appointment = Appointment(
            id=new_uuid(),
            patient_id=data.patient_id,
            professional_id=professional_id,
            start=start.isoformat(),
            end=(start + dt.timedelta(hours=1)).isoformat(),
            particular_value=particular,
            insurance_value=insurance,
            base_value=particular + insurance,
        )
        self.sync.update_appointments([*self.appointments(), appointment])
        return appointment

    async def delete_appointment(self, actor: User, appointment_id: str) -> SyncResult:
        appointment = self.state.appointments.get(appointment_id)
        if appointment is None:
            raise NotFound("Sesión no encontrada")
        if not PermissionService.can_manage_appointment(actor, appointment):
            raise PermissionDenied("No tiene permiso para eliminar esta sesión")
        return self._confirmed(await self.sync.delete("appointments", appointment_id))

    # =====================================================================
    # DASHBOARD Y FINANZAS
    # =====================================================================

    def dashboard(self, actor: User, today: Optional[dt.date] = None) -> DashboardData:
        return dashboard.build_dashboard(actor, self.patients(), self.appointments(), self.users(), today)

    def week(self, actor: User, anchor: Optional[dt.date] = None) -> List[WeekDay]:
        return dashboard.week_days(actor, self.appointments(), anchor)

    def finance_report(
        self, actor: User, filters: Optional[FinanceFilters] = None, basis: Optional[CommissionBasis] = None,
    ) -> FinanceReport:
        PermissionService.require_admin(actor)
        return billing.finance_report(
            self.patients(), self.appointments(), self.users(),
            basis=basis or self.settings.commission_basis,
            filters=filters,
        )

    # =====================================================================
    # CONFIGURACIÓN Y SINCRONIZACIÓN
    # =====================================================================

    def _confirmed(self, result: SyncResult) -> SyncResult:
        if not result.ok:
            raise SyncFailed(result.failure.message, reason=result.failure.reason)
        return result

    async def sync_now(self, actor: User) -> Dict[str, SyncResult]:
        PermissionService.require_admin(actor)
        self.state.log.add("Nube", "success", "Sincronización manual iniciada por administrador.")
        return await self.sync.refresh()

    def remote_config(self, actor: User) -> RemoteConfigOut:
        PermissionService.require_admin(actor)
        url, key = self.local.remote_credentials(self.settings)
        return RemoteConfigOut(url=url, has_key=bool(key))

    async def update_remote_config(self, actor: User, data: RemoteConfigUpdate) -> Dict[str, SyncResult]:
        """Guarda las credenciales, reconstruye el cliente remoto y recarga todo."""
        PermissionService.require_admin(actor)
        _require(data.url, data.key, message="Debe completar ambos campos de credenciales.")
        self.local.save_remote_credentials(data.url, data.key)
        await self.sync.drain()
        previous = self.sync.remote
        self.sync.set_remote(create_remote_store(data.url.strip(), data.key.strip(), self.settings.remote_timeout_seconds))
        if previous is not None:
            await previous.close()
        self.state.log.add("Nube", "success", "Credenciales del almacén remoto actualizadas.")
        return await self.sync.refresh()

    def logs(self, actor: User) -> List[LogEntry]:
        PermissionService.require_admin(actor)
        return self.state.log.entries()

    def export_data(self, actor: User, now: Optional[dt.datetime] = None) -> ExportDocument:
        PermissionService.require_admin(actor)
        return transfer.build_export(self.state, now)

    def import_data(self, actor: User, document: ImportDocument) -> List[str]:
        PermissionService.require_admin(actor)
        for user in document.users or []:
            validate_date(user.dob, f"Fecha de nacimiento inválida para {user.name or user.id}.")
        for patient in document.patients or []:
            validate_date(patient.date_of_birth, f"Fecha de nacimiento inválida para {patient.full_name or patient.id}.")
        transfer.apply_import(self.sync, document)
        collections = transfer.imported_collections(document)
        self.state.log.add("Importación", "success", f"Colecciones importadas: {', '.join(collections) or 'ninguna'}")
        return collections
