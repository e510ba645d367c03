from __future__ import annotations

from apps.audit import AuditEvents, log_event
from common.utils import client_ip


class AccountsAuditService:
    @staticmethod
    def _log(request, action: str, *, actor, target=None, level: str = "info", category: str = "auth", **metadata) -> None:
        log_event(
            action=action,
            actor=actor,
            object_type="user",
            object_id=str(target.id) if target is not None else "",
            level=level,
            category=category,
            ip_address=client_ip(request),
            metadata=metadata,
        )

    @classmethod
    def log_login_success(cls, request, user) -> None:
        cls._log(request, AuditEvents.LOGIN_SUCCESS, actor=user, target=user)

    @classmethod
    def log_login_failed(cls, request, login: str, user=None) -> None:
        cls._log(request, AuditEvents.LOGIN_FAILED, actor=user, target=user, level="warning", login=login)

    @classmethod
    def log_login_blocked(cls, request, user) -> None:
        cls._log(request, AuditEvents.LOGIN_BLOCKED, actor=user, target=user, level="warning")

    @classmethod
    def log_password_changed(cls, request) -> None:
        cls._log(request, AuditEvents.PASSWORD_CHANGED, actor=request.user, target=request.user)

    @classmethod
    def log_salesperson_created(cls, request, user) -> None:
        cls._log(
            request,
            AuditEvents.SALESPERSON_CREATED,
            actor=request.user,
            target=user,
            category="user",
            actor_id=request.user.id,
            email=user.email,
            position_id=user.position_id,
        )

    @classmethod
    def log_salesperson_updated(cls, request, user, changed_fields) -> None:
        cls._log(
            request,
            AuditEvents.SALESPERSON_UPDATED,
            actor=request.user,
            target=user,
            category="user",
            actor_id=request.user.id,
            changed_fields=sorted(changed_fields),
        )

    @classmethod
    def log_salesperson_deactivated(cls, request, user) -> None:
        cls._log(
            request,
            AuditEvents.SALESPERSON_DEACTIVATED,
            actor=request.user,
            target=user,
            level="warning",
            category="user",
            actor_id=request.user.id,
        )
