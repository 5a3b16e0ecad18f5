"""Tests for AuditRecordWriter (queueing, localization, failure isolation, shutdown)."""

import asyncio
from datetime import UTC, datetime
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from app.application.dtos.audit_log import AuditLogEntryCreate
from app.application.services.timezone_localizer import TimezoneResolver
from app.infrastructure.services.audit_record_writer import AuditRecordWriter

CHANGED_AT = datetime(2025, 3, 1, 17, 4, 5, tzinfo=UTC)


class FakeStore:
    """In-memory IAuditLogStore; fails for entity ids listed in fail_ids."""

    def __init__(self, fail_ids: tuple[str, ...] = ()) -> None:
        self.records: list[tuple[AuditLogEntryCreate, str]] = []
        self.fail_ids = fail_ids

    async def append(self, entry: AuditLogEntryCreate, timezone: str) -> None:
        if entry.entity_id in self.fail_ids:
            raise RuntimeError("insert failed")
        self.records.append((entry, timezone))


class SlowLookup:
    async def get_timezone_value(self, company_id: str) -> str | None:
        await asyncio.sleep(1)
        return "Europe/Madrid"


def _entry(entity_id: str = "t1", company_id: str | None = "c1") -> AuditLogEntryCreate:
    return AuditLogEntryCreate(
        entity_name="Tax",
        entity_id=entity_id,
        company_id=company_id,
        action="UPDATE",
        performed_by="u1",
        old_values={"percentage": Decimal("12.00")},
        new_values={"percentage": Decimal("15.00"), "updated_on": CHANGED_AT},
    )


def _writer(store: FakeStore, lookup=None, **kwargs) -> AuditRecordWriter:
    if lookup is None:
        lookup = AsyncMock()
        lookup.get_timezone_value.return_value = None
    resolver = TimezoneResolver(lookup, "America/Guayaquil", timeout_seconds=0.05)
    return AuditRecordWriter(store, resolver, **kwargs)


async def test_submit_before_start_is_dropped() -> None:
    store = FakeStore()
    writer = _writer(store)
    assert writer.submit(_entry()) is False
    assert writer.stats.dropped == 1
    assert store.records == []


async def test_entries_are_localized_and_persisted() -> None:
    store = FakeStore()
    writer = _writer(store)
    writer.start()
    assert writer.submit(_entry()) is True
    await writer.drain()
    await writer.stop()

    [(record, timezone)] = store.records
    assert timezone == "America/Guayaquil"
    assert record.new_values == {"percentage": "15.00", "updated_on": "2025-03-01 12:04:05"}
    assert record.old_values == {"percentage": "12.00"}
    assert record.performed_by == "u1"
    assert writer.stats.as_dict() == {"submitted": 1, "written": 1, "failed": 0, "dropped": 0}


async def test_company_timezone_is_used() -> None:
    store = FakeStore()
    lookup = AsyncMock()
    lookup.get_timezone_value.return_value = "Europe/Madrid"
    writer = _writer(store, lookup)

    assert await writer.write(_entry()) is True

    [(record, timezone)] = store.records
    assert timezone == "Europe/Madrid"
    assert record.new_values["updated_on"] == "2025-03-01 18:04:05"
    lookup.get_timezone_value.assert_awaited_once_with("c1")


@pytest.mark.parametrize("setting", ["America", "Etc"])
async def test_zone_directory_setting_still_writes_with_default(setting: str) -> None:
    store = FakeStore()
    lookup = AsyncMock()
    lookup.get_timezone_value.return_value = setting
    writer = _writer(store, lookup)

    assert await writer.write(_entry()) is True

    [(record, timezone)] = store.records
    assert timezone == "America/Guayaquil"
    assert record.new_values["updated_on"] == "2025-03-01 12:04:05"
    assert writer.stats.failed == 0


async def test_slow_timezone_lookup_falls_back_to_default() -> None:
    store = FakeStore()
    writer = _writer(store, SlowLookup())

    assert await writer.write(_entry()) is True

    [(record, timezone)] = store.records
    assert timezone == "America/Guayaquil"
    assert record.new_values["updated_on"] == "2025-03-01 12:04:05"


async def test_entry_without_company_uses_default() -> None:
    store = FakeStore()
    lookup = AsyncMock()
    writer = _writer(store, lookup)
    assert await writer.write(_entry(company_id=None)) is True
    lookup.get_timezone_value.assert_not_called()
    assert store.records[0][1] == "America/Guayaquil"


async def test_failed_write_is_counted_and_workers_keep_going(
    caplog: pytest.LogCaptureFixture,
) -> None:
    store = FakeStore(fail_ids=("bad",))
    writer = _writer(store)
    writer.start()
    writer.submit(_entry("bad"))
    writer.submit(_entry("good"))
    await writer.drain()
    await writer.stop()

    assert [r.entity_id for r, _ in store.records] == ["good"]
    assert writer.stats.failed == 1
    assert writer.stats.written == 1
    assert "Failed to write UPDATE audit log for Tax bad" in caplog.text


async def test_full_queue_drops_entries() -> None:
    store = FakeStore()
    writer = _writer(store, max_queue_size=1)
    writer.start()
    # Workers have not run yet, so the second entry finds the queue full.
    assert writer.submit(_entry("a")) is True
    assert writer.submit(_entry("b")) is False
    assert writer.stats.dropped == 1
    await writer.stop()
    assert [r.entity_id for r, _ in store.records] == ["a"]


async def test_stop_drains_pending_entries() -> None:
    store = FakeStore()
    writer = _writer(store, workers=2)
    writer.start()
    for i in range(5):
        writer.submit(_entry(f"t{i}"))
    await writer.stop()

    assert not writer.running
    assert sorted(r.entity_id for r, _ in store.records) == [f"t{i}" for i in range(5)]
    assert writer.submit(_entry("late")) is False


async def test_submit_from_another_thread() -> None:
    store = FakeStore()
    writer = _writer(store)
    writer.start()
    assert await asyncio.to_thread(writer.submit, _entry("threaded")) is True
    await asyncio.sleep(0.05)
    await writer.drain()
    await writer.stop()
    assert [r.entity_id for r, _ in store.records] == ["threaded"]


async def test_start_and_stop_are_idempotent() -> None:
    writer = _writer(FakeStore())
    writer.start()
    writer.start()
    assert writer.running
    await writer.stop()
    await writer.stop()
    assert not writer.running
    assert writer.pending == 0
