import json
from datetime import datetime, timezone

from guidari.schemas import ClinicalNote, ContactPerson, ResponsiblePerson
from guidari.services.mapper import (
    appointment_from_remote, appointment_to_remote, map_many,
    patient_from_remote, patient_to_remote, user_from_remote, user_to_remote,
)

from conftest import make_appointment, make_invoice, make_patient, make_user


def test_user_round_trip():
    user = make_user(dob="1990-05-01", password="hash", pin="1234", session_value=4500)
    assert user_from_remote(user_to_remote(user)) == user


def test_patient_round_trip_with_nested_objects():
    patient = make_patient(
        diagnosis="TEA",
        insurance="OSDE",
        support_teacher=ContactPerson(name="Ana", phone="111", email="ana@x.com"),
        responsible=ResponsiblePerson(name="Marta", address="Calle 1", phone="222", email="m@x.com"),
        assigned_professionals=["11111111-1111-4111-8111-111111111111"],
        clinical_history=[ClinicalNote(id="n1", date="2024-01-10T12:00:00", professional_id="p", content="Bien")],
        documents=[make_invoice(), make_invoice(id="d2", type="Informe", amount=None, status=None,
                                receipt_number=None, professional_id=None, url="")],
    )
    assert patient_from_remote(patient_to_remote(patient)) == patient


def test_appointment_round_trip():
    appt = make_appointment()
    row = appointment_to_remote(appt)
    assert row["start_time"] == appt.start
    assert appointment_from_remote(row) == appt


def test_appointment_times_with_utc_offset_come_back_as_sent():
    appt = make_appointment()
    row = appointment_to_remote(appt)
    # timestamptz de Postgres: REST devuelve texto, asyncpg devuelve datetime con zona
    as_text = {**row, "start_time": "2024-03-04T09:00:00+00:00", "end_time": "2024-03-04T07:00:00-03:00"}
    as_datetime = {
        **row,
        "start_time": datetime(2024, 3, 4, 9, tzinfo=timezone.utc),
        "end_time": datetime(2024, 3, 4, 10, tzinfo=timezone.utc),
    }

    assert appointment_from_remote(as_text) == appt
    assert appointment_from_remote(as_datetime) == appt


def test_empty_dates_go_out_as_null_and_come_back_empty():
    user = make_user(dob="")
    row = user_to_remote(user)
    assert row["dob"] is None
    assert user_from_remote(row).dob == ""

    patient = make_patient(date_of_birth="")
    row = patient_to_remote(patient)
    assert row["date_of_birth"] is None
    assert patient_from_remote(row).date_of_birth == ""


def test_malformed_rows_degrade_to_defaults():
    user = user_from_remote({
        "id": "u9", "first_name": "Ana", "last_name": "Ruiz", "name": None,
        "role": "superuser", "commission_rate": "abc", "session_value": "1500",
    })
    assert user.name == "Ana Ruiz"
    assert user.role == "PROFESSIONAL"
    assert user.commission_rate == 0
    assert user.session_value == 1500

    patient = patient_from_remote({
        "id": "p9",
        "documents": json.dumps([{"id": "d1", "type": "Recibo", "status": "x"}, "basura", {"name": "sin id"}]),
        "clinical_history": "no es json",
        "assigned_professionals": None,
    })
    assert [d.id for d in patient.documents] == ["d1"]
    assert patient.documents[0].type == "Otro"
    assert patient.documents[0].status is None
    assert patient.clinical_history == []
    assert patient.assigned_professionals == []


def test_appointment_base_value_derived_when_missing():
    appt = appointment_from_remote({
        "id": "a1", "particular_value": "1000", "insurance_value": 500, "base_value": None,
    })
    assert appt.base_value == 1500


def test_map_many_skips_non_objects():
    rows = [{"id": "a"}, None, "x", {"id": "b"}]
    assert [u.id for u in map_many(rows, user_from_remote)] == ["a", "b"]
