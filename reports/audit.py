from __future__ import annotations

from apps.audit import AuditEvents, log_event
from common.utils import client_ip


class ReportsAuditService:
    @staticmethod
    def _report_event(request, action: str, report, *, level: str = "info", category: str = "report", **extra) -> None:
        log_event(
            action=action,
            actor=request.user,
            object_type="daily_report",
            object_id=str(report.id),
            level=level,
            category=category,
            ip_address=client_ip(request),
            metadata={
                "actor_id": request.user.id,
                "report_id": report.id,
                "report_date": str(report.report_date),
                "status": report.status,
                **extra,
            },
        )

    @classmethod
    def log_report_created(cls, request, report) -> None:
        cls._report_event(request, AuditEvents.REPORT_CREATED, report, visit_count=report.visits.count())

    @classmethod
    def log_report_updated(cls, request, report, from_status: str) -> None:
        cls._report_event(request, AuditEvents.REPORT_UPDATED, report, from_status=from_status)

    @classmethod
    def log_report_deleted(cls, request, report) -> None:
        cls._report_event(request, AuditEvents.REPORT_DELETED, report, level="warning")

    @classmethod
    def log_status_changed(cls, request, outcome) -> None:
        action = {
            "submitted": AuditEvents.REPORT_SUBMITTED,
            "draft": AuditEvents.REPORT_WITHDRAWN,
            "manager_approved": AuditEvents.REPORT_APPROVED,
            "approved": AuditEvents.REPORT_APPROVED,
            "rejected": AuditEvents.REPORT_REJECTED,
        }[outcome.to_status]
        category = "approval" if outcome.approval_level else "report"
        cls._report_event(
            request,
            action,
            outcome.report,
            category=category,
            from_status=outcome.from_status,
            to_status=outcome.to_status,
            approval_level=outcome.approval_level,
        )

    @classmethod
    def log_transition_denied(cls, request, report_id, action: str, error) -> None:
        log_event(
            action=AuditEvents.REPORT_TRANSITION_DENIED,
            actor=request.user,
            object_type="daily_report",
            object_id=str(report_id),
            level="warning",
            category="report",
            ip_address=client_ip(request),
            metadata={
                "actor_id": request.user.id,
                "report_id": report_id,
                "requested_action": action,
                "code": error.code,
            },
        )

    @classmethod
    def log_visit_event(cls, request, action: str, visit) -> None:
        log_event(
            action=action,
            actor=request.user,
            object_type="visit_record",
            object_id=str(visit.id),
            level="info",
            category="report",
            ip_address=client_ip(request),
            metadata={
                "actor_id": request.user.id,
                "report_id": visit.daily_report_id,
                "customer_id": visit.customer_id,
            },
        )

    @classmethod
    def log_attachment_event(cls, request, action: str, attachment) -> None:
        log_event(
            action=action,
            actor=request.user,
            object_type="attachment",
            object_id=str(attachment.id),
            level="info",
            category="report",
            ip_address=client_ip(request),
            metadata={
                "actor_id": request.user.id,
                "visit_id": attachment.visit_record_id,
                "file_name": attachment.file_name,
                "file_size": attachment.file_size,
            },
        )

    @classmethod
    def log_comment_event(cls, request, action: str, comment) -> None:
        log_event(
            action=action,
            actor=request.user,
            object_type="comment",
            object_id=str(comment.id),
            level="info",
            category="report",
            ip_address=client_ip(request),
            metadata={
                "actor_id": request.user.id,
                "report_id": comment.daily_report_id,
            },
        )
