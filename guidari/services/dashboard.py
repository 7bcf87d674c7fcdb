"""
Resumen de la pantalla de inicio y semana del calendario.
Todas las funciones reciben la fecha de referencia para poder fijarla en pruebas.
"""
from __future__ import annotations

import datetime as dt
from typing import List, Optional, Sequence

from guidari.schemas import (
    Appointment, Birthday, DashboardData, MissingDocuments, Patient, User, WeekDay,
)
from guidari.services.permission_service import PermissionService


def _same_day_of_year(iso_date: str, today: dt.date) -> bool:
    try:
        born = dt.date.fromisoformat(iso_date[:10])
    except ValueError:
        return False
    return (born.month, born.day) == (today.month, today.day)


def birthdays_today(patients: Sequence[Patient], staff: Sequence[User], today: dt.date) -> List[Birthday]:
    """Pacientes primero, después colegas."""
    result = [
        Birthday(name=f"{p.first_name} {p.last_name}", type="Paciente", avatar=p.avatar)
        for p in patients
        if p.date_of_birth and _same_day_of_year(p.date_of_birth, today)
    ]
    result.extend(
        Birthday(name=u.name, type="Colega", avatar=u.avatar)
        for u in staff
        if u.dob and _same_day_of_year(u.dob, today)
    )
    return result


def todays_appointments(appointments: Sequence[Appointment], today: dt.date) -> List[Appointment]:
    day = today.isoformat()
    return sorted((a for a in appointments if a.start.split("T")[0] == day), key=lambda a: a.start)


def month_session_count(appointments: Sequence[Appointment], today: dt.date) -> int:
    month = today.strftime("%Y-%m")
    return sum(1 for a in appointments if a.start[:7] == month)


def missing_documents(patients: Sequence[Patient], today: dt.date) -> List[MissingDocuments]:
    """
    Pacientes sin factura o sin planilla/informe cargados en el mes en curso.
    """
    month = today.strftime("%Y-%m")
    result = []
    for patient in patients:
        monthly = [d for d in patient.documents if d.date[:7] == month]
        missing = []
        if not any(d.type == "Factura" for d in monthly):
            missing.append("Factura")
        if not any(d.type in ("Planilla", "Informe") for d in monthly):
            missing.append("Planilla")
        if missing:
            result.append(MissingDocuments(
                patient_id=patient.id,
                patient_name=patient.full_name,
                missing=missing,
            ))
    return result


def build_dashboard(
    user: User,
    patients: Sequence[Patient],
    appointments: Sequence[Appointment],
    staff: Sequence[User],
    today: Optional[dt.date] = None,
) -> DashboardData:
    today = today or dt.date.today()
    visible = PermissionService.visible_appointments(user, appointments)
    is_admin = PermissionService.is_admin(user)
    return DashboardData(
        today_appointments=todays_appointments(visible, today),
        month_sessions=month_session_count(visible, today),
        birthdays=birthdays_today(patients, staff, today),
        # Los profesionales no ven alertas administrativas
        missing_documents=missing_documents(patients, today) if is_admin else [],
        patient_count=len(PermissionService.visible_patients(user, patients)),
    )


def start_of_week(day: dt.date) -> dt.date:
    """Lunes de la semana del día dado."""
    return day - dt.timedelta(days=day.weekday())


def week_days(user: User, appointments: Sequence[Appointment], anchor: Optional[dt.date] = None) -> List[WeekDay]:
    anchor = anchor or dt.date.today()
    visible = PermissionService.visible_appointments(user, appointments)
    monday = start_of_week(anchor)
    days = []
    for offset in range(7):
        day = monday + dt.timedelta(days=offset)
        days.append(WeekDay(date=day.isoformat(), appointments=todays_appointments(visible, day)))
    return days
