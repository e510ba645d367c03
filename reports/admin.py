from django.contrib import admin, messages

from .models import ApprovalHistory, Attachment, Comment, DailyReport, VisitRecord
from .services import ReportWorkflowService
from .status import StatusTransitionError


# ============================
# INLINE: 訪問記録
# ============================
class VisitRecordInline(admin.TabularInline):
    model = VisitRecord
    extra = 0
    fields = ("visit_time", "customer", "content", "result")
    readonly_fields = fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


# ============================
# INLINE: 承認履歴
# ============================
class ApprovalHistoryInline(admin.TabularInline):
    model = ApprovalHistory
    extra = 0
    readonly_fields = ("approver", "action", "approval_level", "comment", "created_at")
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


class CommentInline(admin.TabularInline):
    model = Comment
    extra = 0
    readonly_fields = ("commenter", "content", "created_at")
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.action(description="Approve selected reports")
def approve_reports(modeladmin, request, queryset):
    approved, skipped = 0, 0
    for report_id in queryset.values_list("id", flat=True):
        try:
            ReportWorkflowService.approve(report_id=report_id, actor=request.user)
        except StatusTransitionError:
            skipped += 1
            continue
        approved += 1

    messages.success(request, f"Approved {approved} reports")
    if skipped:
        messages.warning(request, f"Skipped {skipped} reports that you cannot approve in their current status")


# ============================
# REPORT ADMIN
# ============================
@admin.register(DailyReport)
class DailyReportAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "salesperson",
        "report_date",
        "status",
        "submitted_at",
        "updated_at",
    )
    list_filter = ("status", "report_date")
    search_fields = (
        "salesperson__email",
        "salesperson__username",
        "salesperson__last_name",
    )
    ordering = ("-report_date", "-id")

    # status only moves through the workflow actions
    readonly_fields = (
        "status",
        "submitted_at",
        "manager_approved_at",
        "director_approved_at",
        "rejected_at",
        "created_at",
        "updated_at",
    )

    fieldsets = (
        ("基本情報", {"fields": ("salesperson", "report_date", "status")}),
        ("内容", {"fields": ("problem", "plan")}),
        (
            "日時",
            {
                "fields": (
                    "submitted_at",
                    "manager_approved_at",
                    "director_approved_at",
                    "rejected_at",
                    "created_at",
                    "updated_at",
                )
            },
        ),
    )

    inlines = [VisitRecordInline, ApprovalHistoryInline, CommentInline]
    actions = [approve_reports]

    def has_add_permission(self, request):
        return False


@admin.register(Attachment)
class AttachmentAdmin(admin.ModelAdmin):
    list_display = ("id", "file_name", "content_type", "file_size", "visit_record", "created_at")
    search_fields = ("file_name",)
    readonly_fields = ("file", "file_name", "content_type", "file_size", "created_at")
