from __future__ import annotations

import logging
from typing import Optional

from django.conf import settings

from .backends import (
    AccountsAuditBackend,
    AuditBackend,
    LoggingAuditBackend,
    NoopAuditBackend,
)
from .contracts import AuditEvent


logger = logging.getLogger(__name__)

BACKENDS = {
    "accounts": AccountsAuditBackend,
    "logging": LoggingAuditBackend,
    "noop": NoopAuditBackend,
}

WRITE_MODES = ("primary_only", "dual_write", "legacy_only")


class AuditService:
    """
    Unified entrypoint for the audit trail of reports, customers and accounts.

    Modes (``AUDIT_WRITE_MODE``):
    - primary_only (default): primary backend only
    - dual_write: primary, then legacy
    - legacy_only: legacy backend only

    Each backend write is isolated; a failing backend is logged and never
    propagates into the request that produced the event.
    """

    def __init__(self) -> None:
        self.primary_backend = self._build_backend(getattr(settings, "AUDIT_PRIMARY_BACKEND", "accounts"))
        self.legacy_backend = self._build_backend(getattr(settings, "AUDIT_LEGACY_BACKEND", "logging"))
        self.mode = getattr(settings, "AUDIT_WRITE_MODE", "primary_only")
        if self.mode not in WRITE_MODES:
            logger.warning("Unknown AUDIT_WRITE_MODE %r, falling back to primary_only", self.mode)
            self.mode = "primary_only"

    @staticmethod
    def _build_backend(name: str) -> AuditBackend:
        backend_class = BACKENDS.get(name)
        if backend_class is None:
            logger.warning("Unknown audit backend %r, events will be dropped", name)
            backend_class = NoopAuditBackend
        return backend_class()

    def _targets(self) -> list[AuditBackend]:
        if self.mode == "legacy_only":
            return [self.legacy_backend]
        if self.mode == "dual_write":
            return [self.primary_backend, self.legacy_backend]
        return [self.primary_backend]

    def log(self, event: AuditEvent) -> None:
        for backend in self._targets():
            try:
                backend.write(event)
            except Exception:
                logger.exception(
                    "Audit write failed for action %s via %s",
                    event.action,
                    type(backend).__name__,
                )


def log_event(
    *,
    action: str,
    actor=None,
    object_type: str = "",
    object_id: str = "",
    level: str = "info",
    category: str = "system",
    ip_address: Optional[str] = None,
    metadata: Optional[dict] = None,
) -> None:
    event = AuditEvent(
        action=action,
        actor=actor,
        object_type=object_type,
        object_id=object_id,
        level=level,
        category=category,
        ip_address=ip_address,
        metadata=metadata,
    )
    AuditService().log(event)
