"""Audit trail facade shared by accounts, customers and reports."""

from .contracts import AuditEvent
from .events import AuditEvents
from .services import AuditService, log_event

__all__ = ["AuditEvent", "AuditEvents", "AuditService", "log_event"]
