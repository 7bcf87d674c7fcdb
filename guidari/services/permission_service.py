"""
Servicio centralizado para validación de permisos basado en roles
"""
from typing import Iterable, List

from guidari.exceptions import PermissionDenied
from guidari.schemas import Appointment, Patient, User


class PermissionService:
    """Servicio para gestionar permisos y visibilidad basados en roles"""

    @staticmethod
    def is_admin(user: User) -> bool:
        return user.role == "ADMIN"

    @staticmethod
    def require_admin(user: User) -> None:
        """Validar que el usuario es administrador y lanzar excepción si no lo es"""
        if not PermissionService.is_admin(user):
            raise PermissionDenied("Acción reservada a administradores")

    @staticmethod
    def can_view_patient(user: User, patient: Patient) -> bool:
        """Administradores ven todos; profesionales sólo a sus pacientes asignados"""
        if PermissionService.is_admin(user):
            return True
        return user.id in patient.assigned_professionals

    @staticmethod
    def validate_patient_access(user: User, patient: Patient) -> None:
        if not PermissionService.can_view_patient(user, patient):
            raise PermissionDenied("No tiene permiso para acceder a este paciente")

    @staticmethod
    def visible_patients(user: User, patients: Iterable[Patient]) -> List[Patient]:
        return [p for p in patients if PermissionService.can_view_patient(user, p)]

    @staticmethod
    def visible_appointments(user: User, appointments: Iterable[Appointment]) -> List[Appointment]:
        """Administradores ven todas las sesiones; profesionales sólo las propias"""
        if PermissionService.is_admin(user):
            return list(appointments)
        return [a for a in appointments if a.professional_id == user.id]

    @staticmethod
    def can_manage_appointment(user: User, appointment: Appointment) -> bool:
        return PermissionService.is_admin(user) or appointment.professional_id == user.id
