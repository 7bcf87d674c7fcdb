import pytest

from guidari.remote import RemoteStoreError, SqlRemoteStore, create_remote_store, normalize_database_url
from guidari.services.mapper import (
    appointment_from_remote, appointment_to_remote, patient_from_remote, patient_to_remote,
    user_from_remote, user_to_remote,
)

from conftest import make_appointment, make_invoice, make_patient, make_user


@pytest.fixture
async def store(tmp_path):
    s = SqlRemoteStore(f"sqlite:///{tmp_path / 'remote.db'}")
    await s.create_schema()
    yield s
    await s.close()


def test_normalize_database_url():
    assert normalize_database_url("postgres://u:p@h/db") == "postgresql+asyncpg://u:p@h/db"
    assert normalize_database_url("postgresql://u:p@h/db") == "postgresql+asyncpg://u:p@h/db"
    assert normalize_database_url("sqlite:///x.db") == "sqlite+aiosqlite:///x.db"
    assert normalize_database_url("postgresql+asyncpg://h/db") == "postgresql+asyncpg://h/db"


async def test_upsert_inserts_then_updates(store):
    await store.upsert("users", [user_to_remote(make_user(dob="1990-05-01"))])
    await store.upsert("users", [user_to_remote(make_user(dob="1990-05-01", commission_rate=45))])

    rows = await store.select_all("users")
    assert len(rows) == 1
    user = user_from_remote(rows[0])
    assert user == make_user(dob="1990-05-01", commission_rate=45)


async def test_patient_json_columns_survive(store):
    patient = make_patient(assigned_professionals=["a", "b"], documents=[make_invoice()])
    await store.upsert("patients", [patient_to_remote(patient)])

    rows = await store.select_all("patients")
    assert patient_from_remote(rows[0]) == patient


async def test_appointment_times(store):
    appt = make_appointment()
    await store.upsert("appointments", [appointment_to_remote(appt)])

    rows = await store.select_all("appointments")
    assert appointment_from_remote(rows[0]) == appt


async def test_delete(store):
    await store.upsert("patients", [patient_to_remote(make_patient())])
    await store.delete("patients", make_patient().id)
    assert await store.select_all("patients") == []


async def test_invalid_values_and_tables_raise_store_errors(store):
    with pytest.raises(RemoteStoreError) as err:
        await store.upsert("users", [user_to_remote(make_user(dob="ayer"))])
    assert err.value.code == "invalid_input"
    with pytest.raises(RemoteStoreError):
        await store.select_all("facturas")


async def test_unreachable_database_is_network_error(tmp_path):
    s = SqlRemoteStore(f"sqlite:///{tmp_path / 'no-existe' / 'remote.db'}")
    with pytest.raises(RemoteStoreError) as err:
        await s.select_all("users")
    assert err.value.is_network
    await s.close()


def test_factory_picks_backend():
    assert create_remote_store("", "k") is None
    assert create_remote_store("https://x.supabase.co", "") is None
    assert create_remote_store("ftp://x", "k") is None
    assert isinstance(create_remote_store("sqlite:///x.db", ""), SqlRemoteStore)
