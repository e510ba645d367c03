from __future__ import annotations

from apps.audit import AuditEvents, log_event
from common.utils import client_ip


class CustomersAuditService:
    @staticmethod
    def _log(request, action: str, customer, level: str = "info", **metadata) -> None:
        log_event(
            action=action,
            actor=request.user,
            object_type="customer",
            object_id=str(customer.id),
            level=level,
            category="customer",
            ip_address=client_ip(request),
            metadata={"actor_id": request.user.id, "customer_id": customer.id, **metadata},
        )

    @classmethod
    def log_customer_created(cls, request, customer) -> None:
        cls._log(request, AuditEvents.CUSTOMER_CREATED, customer, name=customer.name)

    @classmethod
    def log_customer_updated(cls, request, customer, changed_fields) -> None:
        cls._log(request, AuditEvents.CUSTOMER_UPDATED, customer, changed_fields=sorted(changed_fields))

    @classmethod
    def log_customer_deactivated(cls, request, customer) -> None:
        cls._log(request, AuditEvents.CUSTOMER_DEACTIVATED, customer, level="warning")
