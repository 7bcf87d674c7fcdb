import asyncio
from typing import Dict, List, Optional

import pytest

from guidari.config import LocalConfigStore, settings
from guidari.remote import RemoteStore, RemoteStoreError
from guidari.schemas import Appointment, Document, Patient, User
from guidari.schemas.enums import COLLECTIONS
from guidari.services.controller import SEED_ADMIN_ID, ClinicController


class FakeRemoteStore(RemoteStore):
    """
    Almacén remoto en memoria. Permite inyectar fallos por (operación, tabla)
    y demoras por llamada de upsert, en el orden en que se emiten.
    """

    def __init__(self):
        self.tables: Dict[str, Dict[str, dict]] = {name: {} for name in COLLECTIONS}
        self.calls: List[tuple] = []
        self.failures: Dict[tuple, Exception] = {}
        self.upsert_delays: List[float] = []
        self.closed = False

    def seed(self, table: str, rows: List[dict]) -> None:
        for row in rows:
            self.tables[table][row["id"]] = dict(row)

    def fail(self, op: str, table: str, exc: Optional[Exception] = None) -> None:
        self.failures[(op, table)] = exc or RemoteStoreError("connection refused", code="network")

    def _check(self, op: str, table: str) -> None:
        exc = self.failures.get((op, table))
        if exc is not None:
            raise exc

    async def select_all(self, table: str):
        self.calls.append(("select", table, None))
        await asyncio.sleep(0)
        self._check("select", table)
        return [dict(row) for row in self.tables[table].values()]

    async def upsert(self, table: str, rows):
        self.calls.append(("upsert", table, [r["id"] for r in rows]))
        delay = self.upsert_delays.pop(0) if self.upsert_delays else 0
        await asyncio.sleep(delay)
        self._check("upsert", table)
        for row in rows:
            self.tables[table][row["id"]] = dict(row)

    async def delete(self, table: str, row_id: str):
        self.calls.append(("delete", table, row_id))
        await asyncio.sleep(0)
        self._check("delete", table)
        self.tables[table].pop(row_id, None)

    async def close(self):
        self.closed = True


# -------------------- Fábricas --------------------

PRO_ID = "11111111-1111-4111-8111-111111111111"
PATIENT_ID = "22222222-2222-4222-8222-222222222222"


def make_user(**kw) -> User:
    data = dict(
        id=PRO_ID, email="laura@guidari.test", first_name="Laura", last_name="Gómez",
        name="Laura Gómez", role="PROFESSIONAL", commission_rate=60, specialty="Fonoaudiología",
    )
    data.update(kw)
    return User(**data)


def make_patient(**kw) -> Patient:
    data = dict(id=PATIENT_ID, first_name="Tomás", last_name="Pérez", date_of_birth="2016-03-12")
    data.update(kw)
    return Patient(**data)


def make_invoice(**kw) -> Document:
    data = dict(
        id="33333333-3333-4333-8333-333333333333", patient_id=PATIENT_ID, type="Factura",
        name="Factura marzo", date="2024-03-01", amount=1000, receipt_number="0001-00000001",
        status="pendiente", professional_id=PRO_ID,
    )
    data.update(kw)
    return Document(**data)


def make_appointment(**kw) -> Appointment:
    data = dict(
        id="44444444-4444-4444-8444-444444444444", patient_id=PATIENT_ID, professional_id=PRO_ID,
        start="2024-03-04T09:00:00", end="2024-03-04T10:00:00",
        particular_value=2000, insurance_value=3000, base_value=5000,
    )
    data.update(kw)
    return Appointment(**data)


# -------------------- Fixtures --------------------

@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    monkeypatch.setattr(settings, "bcrypt_rounds", 4)
    monkeypatch.setattr(settings, "login_attempts_per_minute", 0)


@pytest.fixture
def config(tmp_path):
    return settings.model_copy(update={
        "local_config_path": str(tmp_path / "config.json"),
        "setup_token": "setup-token-123",
        "commission_basis": "paid_invoices",
        "refresh_interval_minutes": 30,
    })


@pytest.fixture
def remote():
    return FakeRemoteStore()


@pytest.fixture
async def controller(config, remote):
    ctrl = ClinicController(config, LocalConfigStore(config.local_config_path), remote=remote)
    yield ctrl
    await ctrl.shutdown()


@pytest.fixture
def admin(controller) -> User:
    return controller.get_user(SEED_ADMIN_ID)
