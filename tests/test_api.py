import pytest
from fastapi.testclient import TestClient

from guidari.config import LocalConfigStore
from guidari.services.controller import ClinicController
from main import create_app

from conftest import make_patient


@pytest.fixture
def client(config, remote):
    controller = ClinicController(config, LocalConfigStore(config.local_config_path), remote=remote)
    with TestClient(create_app(controller)) as c:
        c.controller = controller
        yield c


def auth(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_token(client):
    r = client.post("/auth/setup", json={"token": "setup-token-123", "password": "clave-admin", "pin": "9876"})
    assert r.status_code == 200, r.text
    return r.json()["access_token"]


@pytest.fixture
def pro_token(client):
    r = client.post("/auth/register", json={
        "email": "laura@guidari.test", "password": "secreta",
        "firstName": "Laura", "lastName": "Gómez", "pin": "4321",
    })
    assert r.status_code == 201, r.text
    return r.json()["access_token"]


def test_root(client):
    assert client.get("/").json() == {"ok": True, "docs": "/docs"}


def test_requires_token(client):
    r = client.get("/patients")
    assert r.status_code == 401
    assert r.json()["error"] is True
    assert r.json()["type"] == "http_error"


def test_setup_then_login_by_email_and_pin(client, admin_token):
    me = client.get("/auth/me", headers=auth(admin_token)).json()
    assert me["role"] == "ADMIN"
    assert me["hasPin"] is True
    assert "password" not in me and "pin" not in me

    r = client.post("/auth/login", json={"email": "admin@guidari.local", "password": "clave-admin"})
    assert r.status_code == 200
    r = client.post("/auth/login", json={"pin": "9876"})
    assert r.json()["user"]["id"] == me["id"]


def test_domain_errors_use_error_envelope(client):
    r = client.post("/auth/register", json={
        "email": "x@y.z", "password": "p", "firstName": "A", "lastName": "B", "pin": "12",
    })
    assert r.status_code == 400
    assert r.json() == {"error": True, "message": "El PIN debe tener entre 4 y 6 dígitos.", "type": "validation_error"}

    r = client.post("/auth/login", json={"email": "nadie@x.com", "password": "x"})
    assert r.status_code == 401
    assert r.json()["message"] == "Email o contraseña incorrectos."


def test_logout_closes_session(client, admin_token):
    assert client.post("/auth/logout", headers=auth(admin_token)).status_code == 204
    assert client.get("/auth/me", headers=auth(admin_token)).status_code == 401
    assert not client.controller.scheduler.running


def test_patient_flow_with_notes(client, admin_token):
    r = client.post("/patients", headers=auth(admin_token), json={"firstName": "Tomás", "lastName": "Pérez"})
    assert r.status_code == 201
    patient_id = r.json()["id"]

    for content, date in (("N1", "2024-01-05"), ("N2", "2024-01-10")):
        r = client.post(f"/patients/{patient_id}/notes", headers=auth(admin_token),
                        json={"content": content, "date": date})
        assert r.status_code == 201

    history = client.get(f"/patients/{patient_id}", headers=auth(admin_token)).json()["clinicalHistory"]
    assert [n["content"] for n in history] == ["N2", "N1"]


def test_professional_permissions(client, admin_token, pro_token):
    r = client.post("/patients", headers=auth(pro_token), json={"firstName": "A", "lastName": "B"})
    assert r.status_code == 403
    assert client.get("/finance", headers=auth(pro_token)).status_code == 403
    assert client.get("/patients", headers=auth(pro_token)).json() == []


def test_invoice_toggle_changes_finance(client, admin_token):
    patient_id = client.post("/patients", headers=auth(admin_token),
                             json={"firstName": "Tomás", "lastName": "Pérez"}).json()["id"]
    doc = client.post("/documents", headers=auth(admin_token), json={
        "patientId": patient_id, "type": "Factura", "name": "Factura marzo", "amount": 1000,
    }).json()

    summary = client.get("/finance", headers=auth(admin_token)).json()["summary"]
    assert (summary["collectedRevenue"], summary["outstandingReceivables"]) == (0, 1000)

    r = client.post(f"/documents/{patient_id}/{doc['id']}/toggle-status", headers=auth(admin_token))
    assert r.json()["status"] == "pagada"
    summary = client.get("/finance", headers=auth(admin_token)).json()["summary"]
    assert (summary["collectedRevenue"], summary["outstandingReceivables"]) == (1000, 0)


def test_appointments_and_dashboard(client, admin_token, pro_token):
    pro_id = client.get("/auth/me", headers=auth(pro_token)).json()["id"]
    patient_id = client.post("/patients", headers=auth(admin_token), json={
        "firstName": "Tomás", "lastName": "Pérez", "assignedProfessionals": [pro_id],
    }).json()["id"]

    r = client.post("/appointments", headers=auth(pro_token), json={
        "patientId": patient_id, "date": "2024-03-04", "time": "10:00", "particularValue": "1500",
    })
    assert r.status_code == 201
    appt = r.json()
    assert (appt["professionalId"], appt["end"], appt["baseValue"]) == (pro_id, "2024-03-04T11:00:00", 1500)

    week = client.get("/dashboard/week", params={"date": "2024-03-06"}, headers=auth(pro_token)).json()
    assert week[0]["date"] == "2024-03-04"
    assert [a["id"] for a in week[0]["appointments"]] == [appt["id"]]

    assert client.delete(f"/appointments/{appt['id']}", headers=auth(pro_token)).status_code == 204
    assert client.get("/appointments", headers=auth(admin_token)).json() == []
    assert client.get("/dashboard", headers=auth(pro_token)).json()["patientCount"] == 1


def test_failed_delete_reports_sync_error(client, admin_token, remote):
    patient_id = client.post("/patients", headers=auth(admin_token),
                             json={"firstName": "Tomás", "lastName": "Pérez"}).json()["id"]
    remote.fail("delete", "patients")

    r = client.delete(f"/patients/{patient_id}", headers=auth(admin_token))

    assert r.status_code == 502
    assert r.json()["type"] == "sync_error"
    assert client.get(f"/patients/{patient_id}", headers=auth(admin_token)).status_code == 200


def test_settings_sync_logs_export_import(client, admin_token):
    status = client.post("/settings/sync", headers=auth(admin_token)).json()
    assert status["states"] == {"users": "loaded", "patients": "loaded", "appointments": "loaded"}
    assert status["refreshRunning"] is True

    logs = client.get("/settings/logs", headers=auth(admin_token)).json()
    assert any(entry["action"] == "Nube" for entry in logs)

    r = client.post("/settings/import", headers=auth(admin_token),
                    json={"patients": [make_patient().model_dump(by_alias=True)]})
    assert r.json() == {"imported": ["patients"]}

    r = client.get("/settings/export", headers=auth(admin_token))
    assert "attachment" in r.headers["content-disposition"]
    body = r.json()
    assert body["version"] == "1.0"
    assert "exportDate" in body
    assert [p["id"] for p in body["patients"]] == [make_patient().id]

    r = client.post("/settings/import", headers=auth(admin_token), json=["no", "es", "objeto"])
    assert r.status_code == 400


def test_remote_config_view_hides_key(client, admin_token):
    r = client.get("/settings/remote", headers=auth(admin_token))
    assert r.status_code == 200
    assert set(r.json()) == {"url", "has_key"}
