from datetime import datetime

from guidari.services.oplog import MAX_ENTRIES, OperationLog


def test_log_keeps_fifty_most_recent_newest_first():
    log = OperationLog()
    for i in range(51):
        log.add("Prueba", "success", f"entrada {i}")

    entries = log.entries()
    assert len(entries) == MAX_ENTRIES == 50
    assert [e.message for e in entries] == [f"entrada {i}" for i in range(50, 0, -1)]


def test_entry_fields():
    log = OperationLog(clock=lambda: datetime(2024, 3, 4, 9, 5, 7))
    entry = log.add("Nube", "error", "sin conexión")

    assert entry.timestamp == "09:05:07"
    assert entry.status == "error"
    assert len(entry.id) == 9
    assert log.entries()[0] == entry


def test_clear():
    log = OperationLog()
    log.add("Nube", "success", "ok")
    log.clear()
    assert len(log) == 0
