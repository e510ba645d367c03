from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from django.db import transaction
from django.utils import timezone

from accounts.access_policy import AccessPolicy

from .models import ApprovalHistory, DailyReport
from .status import (
    ApprovalLevel,
    ReportSnapshot,
    StatusErrorCode,
    StatusTransitionError,
    create_director_approve_patch,
    create_manager_approve_patch,
    create_reject_patch,
    create_submit_patch,
    create_withdraw_patch,
    is_valid_transition,
    validate_director_approve,
    validate_manager_approve,
    validate_reject,
    validate_submit,
    validate_withdraw,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransitionOutcome:
    report: DailyReport
    from_status: str
    to_status: str
    patch: dict = field(default_factory=dict)
    approval_level: Optional[str] = None
    history: Optional[ApprovalHistory] = None


class ReportWorkflowService:
    """
    Applies status transitions to persisted reports.

    Every action re-reads the row under a lock inside one transaction, builds
    a fresh snapshot with the live visit count, runs the matching validator
    and writes the patch with a conditional update on the status it was
    validated against.
    """

    @staticmethod
    def _lock(report_id) -> DailyReport:
        report = DailyReport.objects.select_for_update().filter(pk=report_id).first()
        if report is None:
            raise StatusTransitionError(StatusErrorCode.NOT_FOUND, "Report not found.")
        return report

    @staticmethod
    def _apply(report: DailyReport, snapshot: ReportSnapshot, patch: dict) -> DailyReport:
        target = patch["status"]
        if not is_valid_transition(snapshot.status, target):
            raise StatusTransitionError(
                StatusErrorCode.INVALID_STATUS,
                f"Cannot change status from '{snapshot.status}' to '{target}'.",
            )

        now = timezone.now()
        updated = DailyReport.objects.filter(pk=report.pk, status=snapshot.status).update(
            updated_at=now,
            **patch,
        )
        if updated != 1:
            raise StatusTransitionError(
                StatusErrorCode.INVALID_STATUS,
                "Report status was changed by another request. Reload and try again.",
            )

        for name, value in patch.items():
            setattr(report, name, value)
        report.updated_at = now
        return report

    @staticmethod
    def resolve_approval_level(actor, report: DailyReport) -> str:
        if AccessPolicy.is_director(actor):
            return ApprovalLevel.DIRECTOR
        if AccessPolicy.is_manager(actor):
            if not AccessPolicy.is_manager_of(actor, report.salesperson):
                raise StatusTransitionError(
                    StatusErrorCode.FORBIDDEN,
                    "You can only review reports of your own subordinates.",
                )
            return ApprovalLevel.MANAGER
        raise StatusTransitionError(
            StatusErrorCode.FORBIDDEN,
            "Only managers and directors can review reports.",
        )

    @classmethod
    @transaction.atomic
    def submit(cls, *, report_id, actor) -> TransitionOutcome:
        report = cls._lock(report_id)
        snapshot = report.to_snapshot()
        validate_submit(snapshot, actor.id)

        patch = create_submit_patch()
        cls._apply(report, snapshot, patch)
        logger.info("Report %s submitted by user %s", report.pk, actor.id)
        return TransitionOutcome(
            report=report,
            from_status=snapshot.status,
            to_status=report.status,
            patch=patch,
        )

    @classmethod
    @transaction.atomic
    def withdraw(cls, *, report_id, actor) -> TransitionOutcome:
        report = cls._lock(report_id)
        snapshot = report.to_snapshot()
        validate_withdraw(snapshot, actor.id)

        patch = create_withdraw_patch()
        cls._apply(report, snapshot, patch)
        logger.info("Report %s withdrawn by user %s", report.pk, actor.id)
        return TransitionOutcome(
            report=report,
            from_status=snapshot.status,
            to_status=report.status,
            patch=patch,
        )

    @classmethod
    @transaction.atomic
    def approve(cls, *, report_id, actor, comment: str = "") -> TransitionOutcome:
        report = cls._lock(report_id)
        level = cls.resolve_approval_level(actor, report)
        snapshot = report.to_snapshot()

        if level == ApprovalLevel.MANAGER:
            validate_manager_approve(snapshot, actor.id)
            patch = create_manager_approve_patch()
        else:
            validate_director_approve(snapshot, actor.id)
            patch = create_director_approve_patch()

        cls._apply(report, snapshot, patch)
        history = ApprovalHistory.objects.create(
            daily_report=report,
            approver=actor,
            action=ApprovalHistory.Action.APPROVED,
            approval_level=level,
            comment=(comment or "").strip(),
        )
        logger.info("Report %s approved (%s) by user %s", report.pk, level, actor.id)
        return TransitionOutcome(
            report=report,
            from_status=snapshot.status,
            to_status=report.status,
            patch=patch,
            approval_level=level,
            history=history,
        )

    @classmethod
    @transaction.atomic
    def reject(cls, *, report_id, actor, comment: str) -> TransitionOutcome:
        report = cls._lock(report_id)
        level = cls.resolve_approval_level(actor, report)
        snapshot = report.to_snapshot()
        validate_reject(snapshot, actor.id, approval_level=level)

        patch = create_reject_patch()
        cls._apply(report, snapshot, patch)
        history = ApprovalHistory.objects.create(
            daily_report=report,
            approver=actor,
            action=ApprovalHistory.Action.REJECTED,
            approval_level=level,
            comment=comment.strip(),
        )
        logger.info("Report %s rejected (%s) by user %s", report.pk, level, actor.id)
        return TransitionOutcome(
            report=report,
            from_status=snapshot.status,
            to_status=report.status,
            patch=patch,
            approval_level=level,
            history=history,
        )


def pending_approvals_for(actor):
    """Reports waiting for this actor's sign-off, oldest submission first."""
    qs = DailyReport.objects.select_related("salesperson")
    if AccessPolicy.is_director(actor):
        qs = qs.filter(status=DailyReport.Status.MANAGER_APPROVED)
    elif AccessPolicy.is_manager(actor):
        qs = qs.filter(status=DailyReport.Status.SUBMITTED, salesperson__manager_id=actor.id)
    else:
        qs = qs.none()
    return qs.order_by("submitted_at", "id")
