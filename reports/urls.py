from django.urls import path

from .views import (
    ApprovalQueueAPIView,
    ApproveReportView,
    AttachmentDetailAPIView,
    CommentDetailAPIView,
    DashboardSummaryAPIView,
    RejectReportView,
    ReportApprovalHistoryAPIView,
    ReportCommentListCreateAPIView,
    ReportDetailAPIView,
    ReportListCreateAPIView,
    ReportVisitListCreateAPIView,
    SubmitReportView,
    VisitAttachmentUploadAPIView,
    VisitDetailAPIView,
    WithdrawReportView,
)

urlpatterns = [
    # ======================
    # REPORTS
    # ======================
    path("reports/", ReportListCreateAPIView.as_view(), name="report-list"),
    path("reports/<int:report_id>/", ReportDetailAPIView.as_view(), name="report-detail"),
    path("reports/<int:report_id>/submit/", SubmitReportView.as_view(), name="report-submit"),
    path("reports/<int:report_id>/withdraw/", WithdrawReportView.as_view(), name="report-withdraw"),
    path("reports/<int:report_id>/approve/", ApproveReportView.as_view(), name="report-approve"),
    path("reports/<int:report_id>/reject/", RejectReportView.as_view(), name="report-reject"),
    path(
        "reports/<int:report_id>/approval-history/",
        ReportApprovalHistoryAPIView.as_view(),
        name="report-approval-history",
    ),

    # ======================
    # VISITS / ATTACHMENTS
    # ======================
    path("reports/<int:report_id>/visits/", ReportVisitListCreateAPIView.as_view(), name="report-visits"),
    path("visits/<int:visit_id>/", VisitDetailAPIView.as_view(), name="visit-detail"),
    path(
        "visits/<int:visit_id>/attachments/",
        VisitAttachmentUploadAPIView.as_view(),
        name="visit-attachments",
    ),
    path("attachments/<int:attachment_id>/", AttachmentDetailAPIView.as_view(), name="attachment-detail"),

    # ======================
    # COMMENTS
    # ======================
    path("reports/<int:report_id>/comments/", ReportCommentListCreateAPIView.as_view(), name="report-comments"),
    path("comments/<int:comment_id>/", CommentDetailAPIView.as_view(), name="comment-detail"),

    # ======================
    # APPROVALS / DASHBOARD
    # ======================
    path("approvals/", ApprovalQueueAPIView.as_view(), name="approval-queue"),
    path("dashboard/summary/", DashboardSummaryAPIView.as_view(), name="dashboard-summary"),
]
