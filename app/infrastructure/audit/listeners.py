"""SQLAlchemy mapper events bridged to the change interceptor."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from sqlalchemy import Connection, event
from sqlalchemy.orm import Mapper

from app.infrastructure.audit.interceptor import ChangeInterceptor
from app.infrastructure.audit.kinds import AUDITED_MODELS
from app.infrastructure.audit.snapshot import (
    instance_state,
    previous_fields,
    read_persisted_previous,
)
from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

# InstanceState.info key for stored values read in before_update
_PERSISTED_KEY = "audit_persisted_before"


class AuditEventBridge:
    """Registers insert, update and delete mapper events on audited models only.

    before_update reads the stored values of columns assigned while expired,
    so after_update can still report what they held.

    The same bound handlers are kept for detach(), since event.remove needs
    the exact callables that were registered.
    """

    def __init__(
        self,
        interceptor: ChangeInterceptor,
        models: Iterable[type] | None = None,
    ) -> None:
        self._interceptor = interceptor
        self._models = tuple(models if models is not None else AUDITED_MODELS)
        self._handlers = {
            "after_insert": self._after_insert,
            "before_update": self._before_update,
            "after_update": self._after_update,
            "before_delete": self._before_delete,
        }
        self._attached = False

    @property
    def attached(self) -> bool:
        return self._attached

    def attach(self) -> None:
        """Start intercepting changes on the audited models."""
        if self._attached:
            return
        for model in self._models:
            for identifier, handler in self._handlers.items():
                event.listen(model, identifier, handler)
        self._attached = True
        logger.info(
            "Audit listeners attached to %s",
            ", ".join(m.__name__ for m in self._models),
        )

    def detach(self) -> None:
        """Stop intercepting changes."""
        if not self._attached:
            return
        for model in self._models:
            for identifier, handler in self._handlers.items():
                if event.contains(model, identifier, handler):
                    event.remove(model, identifier, handler)
        self._attached = False
        logger.info("Audit listeners detached")

    def _after_insert(
        self, _mapper: Mapper[Any], _connection: Connection, target: Any
    ) -> None:
        self._interceptor.created(target)

    def _before_update(
        self, _mapper: Mapper[Any], connection: Connection, target: Any
    ) -> None:
        try:
            persisted = read_persisted_previous(target, connection)
        except Exception as e:
            logger.error("Could not read stored state of %r: %s", target, e, exc_info=True)
            return
        if persisted:
            instance_state(target).info[_PERSISTED_KEY] = persisted

    def _after_update(
        self, _mapper: Mapper[Any], _connection: Connection, target: Any
    ) -> None:
        state = instance_state(target)
        persisted = state.info.pop(_PERSISTED_KEY, None) if state is not None else None
        try:
            before = previous_fields(target, persisted)
        except Exception as e:
            logger.error("Could not read previous state of %r: %s", target, e, exc_info=True)
            return
        self._interceptor.updated(before, target)

    def _before_delete(
        self, _mapper: Mapper[Any], _connection: Connection, target: Any
    ) -> None:
        self._interceptor.deleting(target)
