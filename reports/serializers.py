from pathlib import Path

from django.conf import settings
from rest_framework import serializers

from customers.models import Customer
from customers.serializers import CustomerShortSerializer

from .models import ApprovalHistory, Attachment, Comment, DailyReport, VisitRecord
from .status import ReportStatus


ALLOWED_ATTACHMENT_TYPES = {
    ".pdf": {"application/pdf"},
    ".doc": {"application/msword"},
    ".docx": {"application/vnd.openxmlformats-officedocument.wordprocessingml.document"},
    ".xls": {"application/vnd.ms-excel"},
    ".xlsx": {"application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"},
    ".ppt": {"application/vnd.ms-powerpoint"},
    ".pptx": {"application/vnd.openxmlformats-officedocument.presentationml.presentation"},
    ".jpg": {"image/jpeg"},
    ".jpeg": {"image/jpeg"},
    ".png": {"image/png"},
}

MAX_TEXT_LENGTH = 2000


def is_allowed_file_type(content_type: str, filename: str) -> bool:
    ext = Path(filename or "").suffix.lower()
    return content_type in ALLOWED_ATTACHMENT_TYPES.get(ext, set())


def is_allowed_file_size(size: int) -> bool:
    return size <= getattr(settings, "ATTACHMENT_MAX_SIZE", 10 * 1024 * 1024)


# =====================================================
# SHORT / NESTED
# =====================================================

class PersonShortSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    name = serializers.CharField(source="full_name", read_only=True)


class PersonWithPositionSerializer(PersonShortSerializer):
    position = serializers.CharField(source="position.name", read_only=True, default=None)
    position_level = serializers.IntegerField(read_only=True)


class AttachmentSerializer(serializers.ModelSerializer):
    download_url = serializers.SerializerMethodField()

    class Meta:
        model = Attachment
        fields = ("id", "file_name", "file_size", "content_type", "download_url", "created_at")

    def get_download_url(self, obj):
        return f"/api/v1/attachments/{obj.id}/"


# =====================================================
# VISITS
# =====================================================

class VisitRecordSerializer(serializers.ModelSerializer):
    customer = CustomerShortSerializer(read_only=True)
    visit_time = serializers.TimeField(format="%H:%M", read_only=True)
    attachments = AttachmentSerializer(many=True, read_only=True)

    class Meta:
        model = VisitRecord
        fields = (
            "id",
            "daily_report_id",
            "customer",
            "visit_time",
            "content",
            "result",
            "attachments",
            "created_at",
            "updated_at",
        )


class VisitRecordWriteSerializer(serializers.ModelSerializer):
    customer_id = serializers.PrimaryKeyRelatedField(
        source="customer",
        queryset=Customer.objects.all(),
        error_messages={"does_not_exist": "Select a valid customer."},
    )
    visit_time = serializers.TimeField(
        required=False,
        allow_null=True,
        input_formats=["%H:%M"],
        format="%H:%M",
    )
    content = serializers.CharField(max_length=MAX_TEXT_LENGTH)
    result = serializers.ChoiceField(
        choices=VisitRecord.Result.choices,
        required=False,
        allow_null=True,
    )

    class Meta:
        model = VisitRecord
        fields = ("customer_id", "visit_time", "content", "result")

    def validate_customer_id(self, customer):
        if not customer.is_active:
            raise serializers.ValidationError("Select a valid customer.")
        return customer

    def validate_content(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Visit content is required.")
        return value


# =====================================================
# REPORTS
# =====================================================

class DailyReportListSerializer(serializers.ModelSerializer):
    salesperson = PersonShortSerializer(read_only=True)
    visit_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = DailyReport
        fields = (
            "id",
            "report_date",
            "status",
            "submitted_at",
            "salesperson",
            "visit_count",
            "created_at",
            "updated_at",
        )


class ApprovalHistorySerializer(serializers.ModelSerializer):
    approver = PersonShortSerializer(read_only=True)

    class Meta:
        model = ApprovalHistory
        fields = ("id", "approver", "action", "approval_level", "comment", "created_at")


class CommentSerializer(serializers.ModelSerializer):
    commenter = PersonWithPositionSerializer(read_only=True)
    content = serializers.CharField(max_length=MAX_TEXT_LENGTH)

    class Meta:
        model = Comment
        fields = ("id", "daily_report_id", "commenter", "content", "created_at", "updated_at")

    def validate_content(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Comment is required.")
        return value


class DailyReportDetailSerializer(serializers.ModelSerializer):
    salesperson = PersonWithPositionSerializer(read_only=True)
    visits = VisitRecordSerializer(many=True, read_only=True)
    approval_histories = ApprovalHistorySerializer(many=True, read_only=True)
    comments = CommentSerializer(many=True, read_only=True)

    class Meta:
        model = DailyReport
        fields = (
            "id",
            "report_date",
            "problem",
            "plan",
            "status",
            "submitted_at",
            "manager_approved_at",
            "director_approved_at",
            "rejected_at",
            "salesperson",
            "visits",
            "approval_histories",
            "comments",
            "created_at",
            "updated_at",
        )


class DailyReportCreateSerializer(serializers.Serializer):
    report_date = serializers.DateField()
    problem = serializers.CharField(max_length=MAX_TEXT_LENGTH, required=False, allow_blank=True, default="")
    plan = serializers.CharField(max_length=MAX_TEXT_LENGTH, required=False, allow_blank=True, default="")
    visits = VisitRecordWriteSerializer(many=True, required=False)


class DailyReportUpdateSerializer(serializers.Serializer):
    problem = serializers.CharField(max_length=MAX_TEXT_LENGTH, required=False, allow_blank=True)
    plan = serializers.CharField(max_length=MAX_TEXT_LENGTH, required=False, allow_blank=True)


class ReportSearchQuerySerializer(serializers.Serializer):
    SORT_FIELDS = ("report_date", "created_at", "updated_at")

    date_from = serializers.DateField(required=False)
    date_to = serializers.DateField(required=False)
    salesperson_id = serializers.IntegerField(required=False, min_value=1)
    status = serializers.ChoiceField(choices=ReportStatus.choices, required=False)
    sort = serializers.ChoiceField(choices=SORT_FIELDS, required=False, default="report_date")
    order = serializers.ChoiceField(choices=("asc", "desc"), required=False, default="desc")

    def validate(self, attrs):
        date_from = attrs.get("date_from")
        date_to = attrs.get("date_to")
        if date_from and date_to and date_from > date_to:
            raise serializers.ValidationError({"date_to": "date_to must be on or after date_from."})
        return attrs


# =====================================================
# APPROVALS
# =====================================================

class ApproveRequestSerializer(serializers.Serializer):
    comment = serializers.CharField(max_length=MAX_TEXT_LENGTH, required=False, allow_blank=True, default="")


class RejectRequestSerializer(serializers.Serializer):
    comment = serializers.CharField(
        max_length=MAX_TEXT_LENGTH,
        error_messages={
            "required": "A reason for rejection is required.",
            "blank": "A reason for rejection is required.",
            "max_length": "Rejection reason must be at most 2000 characters.",
        },
    )
