from __future__ import annotations

import logging
from typing import Protocol

from .contracts import AuditEvent


class AuditBackend(Protocol):
    def write(self, event: AuditEvent) -> None:
        ...


class AccountsAuditBackend:
    """
    Primary backend.
    Writes to accounts.AuditLog.
    """

    def write(self, event: AuditEvent) -> None:
        from accounts.models import AuditLog

        AuditLog.log(
            action=event.action,
            user=event.actor,
            object_type=event.object_type,
            object_id=event.object_id,
            level=event.level,
            category=event.category,
            ip_address=event.ip_address,
            metadata=event.metadata,
        )


class LoggingAuditBackend:
    """
    Secondary backend.
    Emits every event on the ``daily_reports.audit`` logger.
    """

    LEVELS = {
        "info": logging.INFO,
        "warning": logging.WARNING,
        "error": logging.ERROR,
        "critical": logging.CRITICAL,
    }

    def __init__(self) -> None:
        self.logger = logging.getLogger("daily_reports.audit")

    def write(self, event: AuditEvent) -> None:
        self.logger.log(
            self.LEVELS.get(event.level, logging.INFO),
            "%s actor=%s object=%s:%s",
            event.action,
            event.actor_id,
            event.object_type,
            event.object_id,
            extra={"audit": event.as_log_fields()},
        )


class NoopAuditBackend:
    def write(self, event: AuditEvent) -> None:  # pragma: no cover
        return None
