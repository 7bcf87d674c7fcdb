import datetime as dt

from guidari.services import dashboard

from conftest import PRO_ID, make_appointment, make_invoice, make_patient, make_user

TODAY = dt.date(2024, 3, 12)
ADMIN = make_user(id="admin", role="ADMIN")
PRO = make_user()


def test_birthdays_patients_first_then_staff():
    patients = [make_patient(date_of_birth="2016-03-12"), make_patient(id="p2", date_of_birth="2016-03-13")]
    staff = [make_user(dob="1985-03-12"), make_user(id="x", dob="")]

    result = dashboard.birthdays_today(patients, staff, TODAY)

    assert [(b.name, b.type) for b in result] == [("Tomás Pérez", "Paciente"), ("Laura Gómez", "Colega")]


def test_professionals_only_see_their_sessions():
    appts = [
        make_appointment(start="2024-03-12T10:00:00"),
        make_appointment(id="a2", start="2024-03-12T09:00:00", professional_id="otro"),
        make_appointment(id="a3", start="2024-03-01T09:00:00"),
    ]
    pro_view = dashboard.build_dashboard(PRO, [make_patient(assigned_professionals=[PRO_ID])], appts, [PRO], TODAY)
    admin_view = dashboard.build_dashboard(ADMIN, [make_patient()], appts, [PRO], TODAY)

    assert [a.id for a in pro_view.today_appointments] == [appts[0].id]
    assert pro_view.month_sessions == 2
    assert pro_view.missing_documents == []
    assert pro_view.patient_count == 1
    assert [a.id for a in admin_view.today_appointments] == ["a2", appts[0].id]
    assert admin_view.month_sessions == 3


def test_missing_monthly_documents():
    complete = make_patient(documents=[
        make_invoice(date="2024-03-02"),
        make_invoice(id="d2", type="Informe", date="2024-03-05"),
    ])
    old_docs = make_patient(id="p2", first_name="Sofía", documents=[make_invoice(date="2024-02-02")])
    only_form = make_patient(id="p3", documents=[make_invoice(id="d3", type="Planilla", date="2024-03-01")])

    result = dashboard.missing_documents([complete, old_docs, only_form], TODAY)

    assert [(m.patient_id, m.missing) for m in result] == [
        ("p2", ["Factura", "Planilla"]),
        ("p3", ["Factura"]),
    ]


def test_week_starts_on_monday():
    days = dashboard.week_days(ADMIN, [make_appointment(start="2024-03-17T11:00:00")], TODAY)

    assert [d.date for d in days] == [f"2024-03-{n:02d}" for n in range(11, 18)]
    assert len(days[-1].appointments) == 1
    assert dashboard.start_of_week(dt.date(2024, 3, 17)) == dt.date(2024, 3, 11)
