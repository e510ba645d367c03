"""
Daily report status transitions.

Pure rules only: callers pass a ``ReportSnapshot`` built from the current row
and get back either nothing (validators) or a field patch to persist.
Nothing here touches the database.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from django.db import models
from django.utils import timezone


class ReportStatus(models.TextChoices):
    DRAFT = "draft", "下書き"
    SUBMITTED = "submitted", "提出済"
    MANAGER_APPROVED = "manager_approved", "課長承認済"
    APPROVED = "approved", "承認済"
    REJECTED = "rejected", "差戻し"


class ApprovalLevel(models.TextChoices):
    MANAGER = "manager", "課長"
    DIRECTOR = "director", "部長"


class StatusErrorCode:
    NOT_FOUND = "NOT_FOUND"
    INVALID_STATUS = "INVALID_STATUS"
    NO_VISITS = "NO_VISITS"
    ALREADY_APPROVED = "ALREADY_APPROVED"
    FORBIDDEN = "FORBIDDEN"


class StatusTransitionError(Exception):
    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def __repr__(self) -> str:
        return f"StatusTransitionError(code={self.code!r}, message={self.message!r})"


@dataclass(frozen=True)
class ReportSnapshot:
    id: Any
    owner_id: Any
    status: str
    submitted_at: Optional[datetime] = None
    visit_record_count: int = 0


ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    ReportStatus.DRAFT: frozenset({ReportStatus.SUBMITTED}),
    ReportStatus.SUBMITTED: frozenset(
        {
            ReportStatus.DRAFT,
            ReportStatus.MANAGER_APPROVED,
            ReportStatus.REJECTED,
        }
    ),
    ReportStatus.MANAGER_APPROVED: frozenset(
        {ReportStatus.APPROVED, ReportStatus.REJECTED}
    ),
    ReportStatus.APPROVED: frozenset(),
    ReportStatus.REJECTED: frozenset({ReportStatus.SUBMITTED}),
}

SUBMITTABLE_STATUSES = frozenset({ReportStatus.DRAFT, ReportStatus.REJECTED})
EDITABLE_STATUSES = SUBMITTABLE_STATUSES
APPROVED_STATUSES = frozenset({ReportStatus.MANAGER_APPROVED, ReportStatus.APPROVED})

REJECTABLE_FROM = {
    ApprovalLevel.MANAGER: frozenset({ReportStatus.SUBMITTED}),
    ApprovalLevel.DIRECTOR: frozenset({ReportStatus.MANAGER_APPROVED}),
}


def is_valid_transition(current_status, target_status) -> bool:
    return target_status in ALLOWED_TRANSITIONS.get(current_status, frozenset())


# ---------------- validators ----------------

def validate_submit(report: ReportSnapshot, actor_id) -> None:
    if report.owner_id != actor_id:
        raise StatusTransitionError(
            StatusErrorCode.FORBIDDEN,
            "You cannot submit another user's report.",
        )

    if report.status not in SUBMITTABLE_STATUSES:
        raise StatusTransitionError(
            StatusErrorCode.INVALID_STATUS,
            f"Report cannot be submitted in status '{report.status}'.",
        )

    if report.visit_record_count < 1:
        raise StatusTransitionError(
            StatusErrorCode.NO_VISITS,
            "At least one visit record is required.",
        )


def validate_withdraw(report: ReportSnapshot, actor_id) -> None:
    if report.owner_id != actor_id:
        raise StatusTransitionError(
            StatusErrorCode.FORBIDDEN,
            "You cannot withdraw another user's report.",
        )

    if report.status != ReportStatus.SUBMITTED:
        if report.status in APPROVED_STATUSES:
            raise StatusTransitionError(
                StatusErrorCode.ALREADY_APPROVED,
                "An already approved report cannot be withdrawn.",
            )
        raise StatusTransitionError(
            StatusErrorCode.INVALID_STATUS,
            f"Report cannot be withdrawn in status '{report.status}'.",
        )


def validate_manager_approve(report: ReportSnapshot, actor_id) -> None:
    # role gating (manager of the owner) is checked by the caller
    if report.status != ReportStatus.SUBMITTED:
        raise StatusTransitionError(
            StatusErrorCode.INVALID_STATUS,
            f"Report cannot be approved by a manager in status '{report.status}'.",
        )


def validate_director_approve(report: ReportSnapshot, actor_id) -> None:
    if report.status != ReportStatus.MANAGER_APPROVED:
        raise StatusTransitionError(
            StatusErrorCode.INVALID_STATUS,
            f"Report cannot be approved by a director in status '{report.status}'.",
        )


def validate_reject(report: ReportSnapshot, actor_id, approval_level: Optional[str] = None) -> None:
    if approval_level is None:
        allowed = REJECTABLE_FROM[ApprovalLevel.MANAGER] | REJECTABLE_FROM[ApprovalLevel.DIRECTOR]
    else:
        allowed = REJECTABLE_FROM.get(approval_level, frozenset())

    if report.status not in allowed:
        raise StatusTransitionError(
            StatusErrorCode.INVALID_STATUS,
            f"Report cannot be rejected in status '{report.status}'.",
        )


# ---------------- patch builders ----------------

def create_submit_patch(now: Optional[datetime] = None) -> dict:
    return {
        "status": ReportStatus.SUBMITTED,
        "submitted_at": now or timezone.now(),
    }


def create_withdraw_patch() -> dict:
    return {
        "status": ReportStatus.DRAFT,
        "submitted_at": None,
    }


def create_manager_approve_patch(now: Optional[datetime] = None) -> dict:
    return {
        "status": ReportStatus.MANAGER_APPROVED,
        "manager_approved_at": now or timezone.now(),
    }


def create_director_approve_patch(now: Optional[datetime] = None) -> dict:
    return {
        "status": ReportStatus.APPROVED,
        "director_approved_at": now or timezone.now(),
    }


def create_reject_patch(now: Optional[datetime] = None) -> dict:
    return {
        "status": ReportStatus.REJECTED,
        "rejected_at": now or timezone.now(),
    }
