"""Background audit record writer (fire-and-forget persistence).

Entries are queued synchronously by the change interceptor and written by
worker tasks owned by the application lifespan. A failed write is logged,
counted and traced; it never propagates to the code that made the change.
"""

from __future__ import annotations

import asyncio
from dataclasses import asdict, dataclass, replace

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.application.dtos.audit_log import AuditLogEntryCreate
from app.application.interfaces.repositories import IAuditLogStore
from app.application.services.audit_diff import to_jsonable
from app.application.services.timezone_localizer import TimezoneResolver, localize
from app.infrastructure.persistence.database import set_session_timezone
from app.infrastructure.persistence.repositories.audit_log_repo import (
    AuditLogRepository,
)
from app.infrastructure.persistence.repositories.system_setting_repo import (
    SystemSettingRepository,
)
from app.shared.telemetry.logging import get_logger
from app.shared.telemetry.tracing import TracedOperation, add_span_event, set_span_error

logger = get_logger(__name__)


@dataclass
class AuditWriterStats:
    """Counters for the audit write path."""

    submitted: int = 0
    written: int = 0
    failed: int = 0
    dropped: int = 0

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


class SqlAuditLogStore:
    """IAuditLogStore backed by the audit_logs table.

    Each record gets its own session and transaction, separate from the
    business transaction that produced it.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        default_timezone: str,
    ) -> None:
        self._session_factory = session_factory
        self._default_timezone = default_timezone

    async def append(self, entry: AuditLogEntryCreate, timezone: str) -> None:
        async with self._session_factory() as session:
            async with session.begin():
                await set_session_timezone(session, timezone, self._default_timezone)
                await AuditLogRepository(session).create(entry)


class SqlTenantTimezoneLookup:
    """ITenantTimezoneLookup reading system_settings with a short-lived session."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_timezone_value(self, company_id: str) -> str | None:
        async with self._session_factory() as session:
            return await SystemSettingRepository(session).get_timezone_value(company_id)


class AuditRecordWriter:
    """Bounded queue plus worker tasks that persist audit entries.

    submit() never blocks and never raises. Workers resolve the company's
    timezone, render datetimes in it, and append through the store.
    """

    def __init__(
        self,
        store: IAuditLogStore,
        timezone_resolver: TimezoneResolver,
        *,
        max_queue_size: int = 1000,
        workers: int = 1,
        drain_timeout_seconds: float = 5.0,
    ) -> None:
        self._store = store
        self._timezones = timezone_resolver
        self._max_queue_size = max_queue_size
        self._worker_count = max(1, workers)
        self._drain_timeout = drain_timeout_seconds
        self._queue: asyncio.Queue[AuditLogEntryCreate] | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._tasks: list[asyncio.Task[None]] = []
        self._running = False
        self.stats = AuditWriterStats()

    @property
    def running(self) -> bool:
        return self._running

    @property
    def pending(self) -> int:
        """Entries queued but not yet taken by a worker."""
        return self._queue.qsize() if self._queue is not None else 0

    def start(self) -> None:
        """Create the queue and spawn workers on the running event loop."""
        if self._running:
            return
        self._loop = asyncio.get_running_loop()
        self._queue = asyncio.Queue(maxsize=self._max_queue_size)
        self._tasks = [
            asyncio.create_task(self._work(self._queue), name=f"audit-writer-{i}")
            for i in range(self._worker_count)
        ]
        self._running = True
        logger.info(
            "Audit writer started (workers=%d, queue=%d)",
            self._worker_count,
            self._max_queue_size,
        )

    def submit(self, entry: AuditLogEntryCreate) -> bool:
        """Queue entry for persistence without waiting.

        Safe to call from the event loop thread (ORM events under AsyncSession)
        or from another thread (sync sessions), which is handed to the loop.

        Returns:
            False when the writer is stopped or the queue is full.
        """
        if not self._running or self._queue is None or self._loop is None:
            self._drop(entry, "writer not running")
            return False
        try:
            current = asyncio.get_running_loop()
        except RuntimeError:
            current = None
        if current is not self._loop:
            self._loop.call_soon_threadsafe(self._enqueue, entry)
            return True
        return self._enqueue(entry)

    def _enqueue(self, entry: AuditLogEntryCreate) -> bool:
        if self._queue is None:
            self._drop(entry, "writer not running")
            return False
        try:
            self._queue.put_nowait(entry)
        except asyncio.QueueFull:
            self._drop(entry, "queue full")
            return False
        self.stats.submitted += 1
        return True

    def _drop(self, entry: AuditLogEntryCreate, reason: str) -> None:
        self.stats.dropped += 1
        logger.warning(
            "Dropped %s audit entry for %s %s: %s",
            entry.action,
            entry.entity_name,
            entry.entity_id,
            reason,
        )

    async def _work(self, queue: asyncio.Queue[AuditLogEntryCreate]) -> None:
        while True:
            entry = await queue.get()
            try:
                await self.write(entry)
            finally:
                queue.task_done()

    async def write(self, entry: AuditLogEntryCreate) -> bool:
        """Localize and persist one entry. Returns False on failure (logged)."""
        async with TracedOperation(
            "audit.write",
            {
                "audit.entity_name": entry.entity_name,
                "audit.entity_id": entry.entity_id,
                "audit.action": entry.action,
                "audit.company_id": entry.company_id,
            },
        ):
            try:
                timezone = await self._timezones.get_timezone(entry.company_id)
                add_span_event("audit.timezone_resolved", {"timezone": timezone})
                record = replace(
                    entry,
                    old_values=to_jsonable(localize(entry.old_values, timezone)),
                    new_values=to_jsonable(localize(entry.new_values, timezone)),
                )
                await self._store.append(record, timezone)
            except Exception as e:
                self.stats.failed += 1
                set_span_error(e)
                logger.error(
                    "Failed to write %s audit log for %s %s: %s",
                    entry.action,
                    entry.entity_name,
                    entry.entity_id,
                    e,
                    exc_info=True,
                )
                return False
        self.stats.written += 1
        return True

    async def drain(self) -> None:
        """Wait until every queued entry has been processed."""
        if self._queue is not None:
            await self._queue.join()

    async def stop(self) -> None:
        """Stop accepting entries, drain with a timeout, then cancel workers."""
        if not self._running:
            return
        self._running = False
        try:
            await asyncio.wait_for(self.drain(), timeout=self._drain_timeout)
        except TimeoutError:
            logger.warning(
                "Audit writer drain timed out after %.1fs; %d entries not written",
                self._drain_timeout,
                self.pending,
            )
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks = []
        self._queue = None
        logger.info("Audit writer stopped: %s", self.stats.as_dict())
