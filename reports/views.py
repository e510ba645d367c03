import logging

from django.db import IntegrityError, transaction
from django.db.models import Count
from django.http import FileResponse
from django.shortcuts import get_object_or_404
from rest_framework import status as drf_status
from rest_framework.exceptions import PermissionDenied
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.access_policy import AccessPolicy
from accounts.permissions import IsApprover
from apps.audit import AuditEvents
from common.pagination import StandardPagination

from .audit import ReportsAuditService
from .models import ApprovalHistory, Attachment, Comment, DailyReport, VisitRecord
from .serializers import (
    ApprovalHistorySerializer,
    ApproveRequestSerializer,
    AttachmentSerializer,
    CommentSerializer,
    DailyReportCreateSerializer,
    DailyReportDetailSerializer,
    DailyReportListSerializer,
    DailyReportUpdateSerializer,
    RejectRequestSerializer,
    ReportSearchQuerySerializer,
    VisitRecordSerializer,
    VisitRecordWriteSerializer,
    is_allowed_file_size,
    is_allowed_file_type,
)
from .services import ReportWorkflowService, pending_approvals_for
from .status import EDITABLE_STATUSES, ReportStatus, StatusErrorCode, StatusTransitionError


logger = logging.getLogger(__name__)

TRANSITION_HTTP_STATUS = {
    StatusErrorCode.FORBIDDEN: drf_status.HTTP_403_FORBIDDEN,
    StatusErrorCode.NOT_FOUND: drf_status.HTTP_404_NOT_FOUND,
    StatusErrorCode.INVALID_STATUS: drf_status.HTTP_409_CONFLICT,
    StatusErrorCode.ALREADY_APPROVED: drf_status.HTTP_409_CONFLICT,
    StatusErrorCode.NO_VISITS: drf_status.HTTP_422_UNPROCESSABLE_ENTITY,
}


def error_response(code: str, detail: str, http_status: int) -> Response:
    return Response({"code": code, "detail": detail}, status=http_status)


def transition_error_response(error: StatusTransitionError) -> Response:
    http_status = TRANSITION_HTTP_STATUS.get(error.code, drf_status.HTTP_400_BAD_REQUEST)
    return error_response(error.code, error.message, http_status)


def _reports_with_counts():
    return DailyReport.objects.select_related("salesperson").annotate(
        visit_count=Count("visits", distinct=True),
    )


def _get_visible_report(request, report_id) -> DailyReport:
    report = get_object_or_404(
        DailyReport.objects.select_related("salesperson", "salesperson__position"),
        pk=report_id,
    )
    if not AccessPolicy.can_view_report(request.user, report):
        raise PermissionDenied("You do not have permission to view this report.")
    return report


def _owner_edit_denied(request, report, *, allowed=EDITABLE_STATUSES, message=None):
    """Error response when the actor may not modify the report contents, else None."""
    if report.salesperson_id != request.user.id:
        return error_response(
            StatusErrorCode.FORBIDDEN,
            "You can only modify your own reports.",
            drf_status.HTTP_403_FORBIDDEN,
        )
    if report.status not in allowed:
        return error_response(
            StatusErrorCode.INVALID_STATUS,
            message or "Only draft or rejected reports can be modified.",
            drf_status.HTTP_409_CONFLICT,
        )
    return None


# =====================================================
# REPORTS
# =====================================================

class ReportListCreateAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        query = ReportSearchQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data

        qs = AccessPolicy.visible_reports(request.user, _reports_with_counts())

        if params.get("date_from"):
            qs = qs.filter(report_date__gte=params["date_from"])
        if params.get("date_to"):
            qs = qs.filter(report_date__lte=params["date_to"])
        if params.get("salesperson_id") and AccessPolicy.can_approve(request.user):
            qs = qs.filter(salesperson_id=params["salesperson_id"])
        if params.get("status"):
            qs = qs.filter(status=params["status"])

        prefix = "-" if params["order"] == "desc" else ""
        qs = qs.order_by(f"{prefix}{params['sort']}", f"{prefix}id")

        paginator = StandardPagination()
        page = paginator.paginate_queryset(qs, request, view=self)
        return paginator.get_paginated_response(DailyReportListSerializer(page, many=True).data)

    def post(self, request):
        serializer = DailyReportCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        if DailyReport.objects.filter(salesperson=request.user, report_date=data["report_date"]).exists():
            return error_response(
                "DUPLICATE_REPORT",
                "A report for this date already exists.",
                drf_status.HTTP_409_CONFLICT,
            )

        try:
            with transaction.atomic():
                report = DailyReport.objects.create(
                    salesperson=request.user,
                    report_date=data["report_date"],
                    problem=data.get("problem", ""),
                    plan=data.get("plan", ""),
                    status=ReportStatus.DRAFT,
                )
                VisitRecord.objects.bulk_create(
                    [VisitRecord(daily_report=report, **visit) for visit in data.get("visits", [])]
                )
        except IntegrityError:
            return error_response(
                "DUPLICATE_REPORT",
                "A report for this date already exists.",
                drf_status.HTTP_409_CONFLICT,
            )

        ReportsAuditService.log_report_created(request, report)
        report = _get_visible_report(request, report.pk)
        return Response(DailyReportDetailSerializer(report).data, status=drf_status.HTTP_201_CREATED)


class ReportDetailAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, report_id: int):
        report = _get_visible_report(request, report_id)
        return Response(DailyReportDetailSerializer(report).data)

    def put(self, request, report_id: int):
        report = get_object_or_404(DailyReport, pk=report_id)
        denied = _owner_edit_denied(request, report)
        if denied:
            return denied

        serializer = DailyReportUpdateSerializer(data=request.data, partial=request.method == "PATCH")
        serializer.is_valid(raise_exception=True)

        changed = []
        for field, value in serializer.validated_data.items():
            setattr(report, field, value)
            changed.append(field)
        if changed:
            report.save(update_fields=[*changed, "updated_at"])
            ReportsAuditService.log_report_updated(request, report, from_status=report.status)

        report = _get_visible_report(request, report.pk)
        return Response(DailyReportDetailSerializer(report).data)

    def patch(self, request, report_id: int):
        return self.put(request, report_id)

    def delete(self, request, report_id: int):
        report = get_object_or_404(DailyReport, pk=report_id)
        denied = _owner_edit_denied(
            request,
            report,
            allowed={ReportStatus.DRAFT},
            message="Only draft reports can be deleted.",
        )
        if denied:
            return denied

        ReportsAuditService.log_report_deleted(request, report)
        for attachment in Attachment.objects.filter(visit_record__daily_report=report):
            attachment.file.delete(save=False)
        report.delete()
        return Response(status=drf_status.HTTP_204_NO_CONTENT)


# =====================================================
# STATUS TRANSITIONS
# =====================================================

class _ReportTransitionView(APIView):
    permission_classes = [IsAuthenticated]
    action_name = ""
    request_serializer_class = None

    def run(self, request, report_id, data):
        raise NotImplementedError

    def post(self, request, report_id: int):
        data = {}
        if self.request_serializer_class is not None:
            serializer = self.request_serializer_class(data=request.data)
            serializer.is_valid(raise_exception=True)
            data = serializer.validated_data

        try:
            outcome = self.run(request, report_id, data)
        except StatusTransitionError as exc:
            ReportsAuditService.log_transition_denied(request, report_id, self.action_name, exc)
            return transition_error_response(exc)

        ReportsAuditService.log_status_changed(request, outcome)
        report = outcome.report
        return Response(
            {
                "id": report.id,
                "status": report.status,
                "submitted_at": report.submitted_at,
                "manager_approved_at": report.manager_approved_at,
                "director_approved_at": report.director_approved_at,
                "rejected_at": report.rejected_at,
            }
        )


class SubmitReportView(_ReportTransitionView):
    action_name = "submit"

    def run(self, request, report_id, data):
        return ReportWorkflowService.submit(report_id=report_id, actor=request.user)


class WithdrawReportView(_ReportTransitionView):
    action_name = "withdraw"

    def run(self, request, report_id, data):
        return ReportWorkflowService.withdraw(report_id=report_id, actor=request.user)


class ApproveReportView(_ReportTransitionView):
    action_name = "approve"
    request_serializer_class = ApproveRequestSerializer

    def run(self, request, report_id, data):
        return ReportWorkflowService.approve(
            report_id=report_id,
            actor=request.user,
            comment=data.get("comment", ""),
        )


class RejectReportView(_ReportTransitionView):
    action_name = "reject"
    request_serializer_class = RejectRequestSerializer

    def run(self, request, report_id, data):
        return ReportWorkflowService.reject(
            report_id=report_id,
            actor=request.user,
            comment=data["comment"],
        )


# =====================================================
# APPROVALS
# =====================================================

class ApprovalQueueAPIView(APIView):
    permission_classes = [IsAuthenticated, IsApprover]

    def get(self, request):
        qs = pending_approvals_for(request.user).annotate(visit_count=Count("visits", distinct=True))
        paginator = StandardPagination()
        page = paginator.paginate_queryset(qs, request, view=self)
        return paginator.get_paginated_response(DailyReportListSerializer(page, many=True).data)


class ReportApprovalHistoryAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, report_id: int):
        report = _get_visible_report(request, report_id)
        qs = ApprovalHistory.objects.filter(daily_report=report).select_related("approver")
        return Response(ApprovalHistorySerializer(qs, many=True).data)


# =====================================================
# VISITS
# =====================================================

class ReportVisitListCreateAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, report_id: int):
        report = _get_visible_report(request, report_id)
        qs = report.visits.select_related("customer").prefetch_related("attachments")
        return Response(VisitRecordSerializer(qs, many=True).data)

    def post(self, request, report_id: int):
        report = get_object_or_404(DailyReport, pk=report_id)
        denied = _owner_edit_denied(request, report)
        if denied:
            return denied

        serializer = VisitRecordWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        visit = serializer.save(daily_report=report)
        ReportsAuditService.log_visit_event(request, AuditEvents.VISIT_CREATED, visit)
        return Response(VisitRecordSerializer(visit).data, status=drf_status.HTTP_201_CREATED)


class VisitDetailAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def _get_visit(self, visit_id):
        return get_object_or_404(
            VisitRecord.objects.select_related("daily_report", "customer"),
            pk=visit_id,
        )

    def put(self, request, visit_id: int):
        visit = self._get_visit(visit_id)
        denied = _owner_edit_denied(request, visit.daily_report)
        if denied:
            return denied

        serializer = VisitRecordWriteSerializer(
            visit,
            data=request.data,
            partial=request.method == "PATCH",
        )
        serializer.is_valid(raise_exception=True)
        visit = serializer.save()
        ReportsAuditService.log_visit_event(request, AuditEvents.VISIT_UPDATED, visit)
        return Response(VisitRecordSerializer(visit).data)

    def patch(self, request, visit_id: int):
        return self.put(request, visit_id)

    def delete(self, request, visit_id: int):
        visit = self._get_visit(visit_id)
        denied = _owner_edit_denied(request, visit.daily_report)
        if denied:
            return denied

        ReportsAuditService.log_visit_event(request, AuditEvents.VISIT_DELETED, visit)
        for attachment in visit.attachments.all():
            attachment.file.delete(save=False)
        visit.delete()
        return Response(status=drf_status.HTTP_204_NO_CONTENT)


# =====================================================
# ATTACHMENTS
# =====================================================

class VisitAttachmentUploadAPIView(APIView):
    permission_classes = [IsAuthenticated]
    parser_classes = [MultiPartParser, FormParser]

    def post(self, request, visit_id: int):
        visit = get_object_or_404(VisitRecord.objects.select_related("daily_report"), pk=visit_id)
        denied = _owner_edit_denied(
            request,
            visit.daily_report,
            message="Files can only be attached to draft or rejected reports.",
        )
        if denied:
            return denied

        upload = request.FILES.get("file")
        if upload is None:
            return error_response("VALIDATION_ERROR", "No file was uploaded.", drf_status.HTTP_400_BAD_REQUEST)
        if not is_allowed_file_size(upload.size):
            return error_response(
                "FILE_TOO_LARGE",
                "Files must be 10MB or smaller.",
                drf_status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            )
        if not is_allowed_file_type(upload.content_type, upload.name):
            return error_response(
                "UNSUPPORTED_FILE_TYPE",
                "This file type is not supported.",
                drf_status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            )

        attachment = Attachment.objects.create(
            visit_record=visit,
            file=upload,
            file_name=upload.name,
            content_type=upload.content_type,
            file_size=upload.size,
        )
        ReportsAuditService.log_attachment_event(request, AuditEvents.ATTACHMENT_UPLOADED, attachment)
        return Response(AttachmentSerializer(attachment).data, status=drf_status.HTTP_201_CREATED)


class AttachmentDetailAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def _get_attachment(self, attachment_id):
        return get_object_or_404(
            Attachment.objects.select_related(
                "visit_record__daily_report__salesperson",
            ),
            pk=attachment_id,
        )

    def get(self, request, attachment_id: int):
        attachment = self._get_attachment(attachment_id)
        report = attachment.visit_record.daily_report
        if not AccessPolicy.can_view_report(request.user, report):
            raise PermissionDenied("You do not have permission to download this file.")

        storage = attachment.file.storage
        if not attachment.file.name or not storage.exists(attachment.file.name):
            logger.warning("Attachment %s is missing from storage (%s)", attachment.id, attachment.file.name)
            return error_response("NOT_FOUND", "File not found.", drf_status.HTTP_404_NOT_FOUND)

        return FileResponse(
            attachment.file.open("rb"),
            as_attachment=True,
            filename=attachment.file_name,
            content_type=attachment.content_type,
        )

    def delete(self, request, attachment_id: int):
        attachment = self._get_attachment(attachment_id)
        denied = _owner_edit_denied(request, attachment.visit_record.daily_report)
        if denied:
            return denied

        ReportsAuditService.log_attachment_event(request, AuditEvents.ATTACHMENT_DELETED, attachment)
        attachment.file.delete(save=False)
        attachment.delete()
        return Response(status=drf_status.HTTP_204_NO_CONTENT)


# =====================================================
# COMMENTS
# =====================================================

class ReportCommentListCreateAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, report_id: int):
        report = _get_visible_report(request, report_id)
        qs = report.comments.select_related("commenter", "commenter__position")
        return Response(CommentSerializer(qs, many=True).data)

    def post(self, request, report_id: int):
        report = _get_visible_report(request, report_id)
        serializer = CommentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        comment = serializer.save(daily_report=report, commenter=request.user)
        ReportsAuditService.log_comment_event(request, AuditEvents.COMMENT_CREATED, comment)
        return Response(CommentSerializer(comment).data, status=drf_status.HTTP_201_CREATED)


class CommentDetailAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def delete(self, request, comment_id: int):
        comment = get_object_or_404(Comment, pk=comment_id)
        if comment.commenter_id != request.user.id:
            return error_response(
                StatusErrorCode.FORBIDDEN,
                "You can only delete your own comments.",
                drf_status.HTTP_403_FORBIDDEN,
            )
        ReportsAuditService.log_comment_event(request, AuditEvents.COMMENT_DELETED, comment)
        comment.delete()
        return Response(status=drf_status.HTTP_204_NO_CONTENT)


# =====================================================
# DASHBOARD
# =====================================================

class DashboardSummaryAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        counts = {value: 0 for value in ReportStatus.values}
        rows = (
            DailyReport.objects.filter(salesperson=request.user)
            .values("status")
            .annotate(total=Count("id"))
        )
        for row in rows:
            counts[row["status"]] = row["total"]

        recent = _reports_with_counts().filter(salesperson=request.user).order_by("-report_date", "-id")[:5]

        payload = {
            "my_reports": counts,
            "recent_reports": DailyReportListSerializer(recent, many=True).data,
            "pending_approvals": None,
        }
        if AccessPolicy.can_approve(request.user):
            payload["pending_approvals"] = pending_approvals_for(request.user).count()
        return Response(payload)
