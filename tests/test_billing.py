import pytest

from guidari.schemas import FinanceFilters
from guidari.services import billing

from conftest import PATIENT_ID, PRO_ID, make_appointment, make_invoice, make_patient, make_user


def test_commission_uses_professional_rate():
    pro = make_user(commission_rate=40)
    records = [billing.CommissionRecord(1200, PRO_ID), billing.CommissionRecord(800, PRO_ID)]
    assert billing.commission_liability(records, [pro]) == pytest.approx(2000 * 40 / 100)


def test_commission_falls_back_to_sixty_percent():
    assert billing.resolve_rate("desconocido", [make_user()]) == 0.6
    assert billing.resolve_rate(None, []) == 0.6
    records = [billing.CommissionRecord(1000, "desconocido")]
    assert billing.commission_liability(records, []) == pytest.approx(600)


def test_invoice_toggle_moves_amount_between_aggregates():
    pro = make_user(commission_rate=70)
    pending = make_patient(documents=[make_invoice(amount=1000, status="pendiente")])
    paid = make_patient(documents=[make_invoice(amount=1000, status="pagada")])

    before = billing.summarize([pending], [], [pro])
    after = billing.summarize([paid], [], [pro])

    assert before.outstanding_receivables - after.outstanding_receivables == 1000
    assert after.collected_revenue - before.collected_revenue == 1000
    assert after.center_net - before.center_net == pytest.approx(1000 * (1 - 70 / 100))


def test_only_invoices_count_as_revenue():
    docs = [
        make_invoice(id="d1", amount=500, status="pagada"),
        make_invoice(id="d2", type="Informe", amount=900, status="pagada"),
        make_invoice(id="d3", amount=300, status="pendiente"),
        make_invoice(id="d4", amount=None, status="pagada"),
    ]
    assert billing.collected_revenue(docs) == 500
    assert billing.outstanding_receivables(docs) == 300


def test_sessions_basis_uses_all_appointments():
    pro = make_user(commission_rate=50)
    appts = [make_appointment(base_value=5000), make_appointment(id="a2", base_value=3000, professional_id="otro")]
    patient = make_patient(documents=[make_invoice(amount=10000, status="pagada")])

    summary = billing.summarize([patient], appts, [pro], basis="sessions")

    assert summary.staff_commission == pytest.approx(5000 * 0.5 + 3000 * 0.6)
    assert summary.center_net == pytest.approx(10000 - summary.staff_commission)
    assert summary.basis == "sessions"


def test_filters_apply_to_documents_and_appointments():
    patient = make_patient(
        assigned_professionals=[PRO_ID],
        documents=[
            make_invoice(id="d1", date="2024-03-01", status="pagada"),
            make_invoice(id="d2", date="2024-04-01", status="pagada"),
        ],
    )
    other = make_patient(id="otro", documents=[make_invoice(id="d3", date="2024-03-02", status="pagada")])
    filters = FinanceFilters(start_date="2024-03-01", end_date="2024-03-31", professional_id=PRO_ID)

    docs = billing.filter_documents([patient, other], filters)
    assert [d.id for d in docs] == ["d1"]

    appts = [make_appointment(), make_appointment(id="a2", start="2024-04-02T10:00:00")]
    assert [a.id for a in billing.filter_appointments(appts, filters)] == [make_appointment().id]


def test_professional_breakdown_lists_every_staff_member():
    pros = [make_user(commission_rate=60), make_user(id="p2", name="Sin sesiones", commission_rate=50)]
    appts = [make_appointment(base_value=1005), make_appointment(id="a2", base_value=1000)]

    rows = billing.professional_breakdown(appts, pros)

    assert [(r.professional_id, r.sessions, r.total, r.payable) for r in rows] == [
        (PRO_ID, 2, 2005, 1203),
        ("p2", 0, 0, 0),
    ]


@pytest.mark.parametrize("raw, expected", [
    ("45", 45.0), (30, 30.0), ("12.5", 12.5), ("abc", 0.0), ("", 0.0), (None, 0.0), ("150", 150.0),
])
def test_parse_commission_rate(raw, expected):
    assert billing.parse_commission_rate(raw) == expected
