import uuid
from pathlib import Path

from django.conf import settings
from django.db import models

from customers.models import Customer

from .status import EDITABLE_STATUSES, ApprovalLevel, ReportSnapshot, ReportStatus


class DailyReport(models.Model):
    Status = ReportStatus

    salesperson = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="daily_reports",
        verbose_name="営業担当者",
    )
    report_date = models.DateField("報告日")
    problem = models.TextField("課題・相談", blank=True, default="")
    plan = models.TextField("明日の予定", blank=True, default="")

    status = models.CharField(
        "ステータス",
        max_length=20,
        choices=ReportStatus.choices,
        default=ReportStatus.DRAFT,
    )

    submitted_at = models.DateTimeField("提出日時", null=True, blank=True)
    manager_approved_at = models.DateTimeField("課長承認日時", null=True, blank=True)
    director_approved_at = models.DateTimeField("部長承認日時", null=True, blank=True)
    rejected_at = models.DateTimeField("差戻し日時", null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-report_date", "-id"]
        verbose_name = "日報"
        verbose_name_plural = "日報"
        constraints = [
            models.UniqueConstraint(
                fields=["salesperson", "report_date"],
                name="reports_unique_salesperson_report_date",
            ),
        ]
        indexes = [
            models.Index(fields=["status"], name="reports_status_idx"),
            models.Index(fields=["report_date"], name="reports_report_date_idx"),
        ]

    def __str__(self):
        return f"{self.salesperson} — {self.report_date}"

    @property
    def is_editable(self) -> bool:
        return self.status in EDITABLE_STATUSES

    def to_snapshot(self, visit_record_count=None) -> ReportSnapshot:
        if visit_record_count is None:
            visit_record_count = self.visits.count()
        return ReportSnapshot(
            id=self.pk,
            owner_id=self.salesperson_id,
            status=self.status,
            submitted_at=self.submitted_at,
            visit_record_count=visit_record_count,
        )


class VisitRecord(models.Model):
    class Result(models.TextChoices):
        NEGOTIATING = "negotiating", "商談中"
        CLOSED_WON = "closed_won", "成約"
        CLOSED_LOST = "closed_lost", "失注"
        INFORMATION_GATHERING = "information_gathering", "情報収集"
        OTHER = "other", "その他"

    daily_report = models.ForeignKey(
        DailyReport,
        on_delete=models.CASCADE,
        related_name="visits",
        verbose_name="日報",
    )
    customer = models.ForeignKey(
        Customer,
        on_delete=models.PROTECT,
        related_name="visit_records",
        verbose_name="顧客",
    )
    visit_time = models.TimeField("訪問時刻", null=True, blank=True)
    content = models.TextField("訪問内容")
    result = models.CharField(
        "結果",
        max_length=30,
        choices=Result.choices,
        null=True,
        blank=True,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["id"]
        verbose_name = "訪問記録"
        verbose_name_plural = "訪問記録"

    def __str__(self):
        return f"{self.customer} ({self.daily_report_id})"


def attachment_upload_to(instance, filename):
    return f"attachments/{uuid.uuid4()}{Path(filename).suffix.lower()}"


class Attachment(models.Model):
    visit_record = models.ForeignKey(
        VisitRecord,
        on_delete=models.CASCADE,
        related_name="attachments",
        verbose_name="訪問記録",
    )
    file = models.FileField("ファイル", upload_to=attachment_upload_to)
    file_name = models.CharField("ファイル名", max_length=255)
    content_type = models.CharField("MIMEタイプ", max_length=100)
    file_size = models.PositiveIntegerField("サイズ")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["id"]
        verbose_name = "添付ファイル"
        verbose_name_plural = "添付ファイル"

    def __str__(self):
        return self.file_name


class ApprovalHistory(models.Model):
    class Action(models.TextChoices):
        APPROVED = "approved", "承認"
        REJECTED = "rejected", "差戻し"

    Level = ApprovalLevel

    daily_report = models.ForeignKey(
        DailyReport,
        on_delete=models.CASCADE,
        related_name="approval_histories",
    )
    approver = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="approval_histories",
    )
    action = models.CharField(max_length=20, choices=Action.choices)
    approval_level = models.CharField(max_length=20, choices=ApprovalLevel.choices)
    comment = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]
        verbose_name = "承認履歴"
        verbose_name_plural = "承認履歴"


class Comment(models.Model):
    daily_report = models.ForeignKey(
        DailyReport,
        on_delete=models.CASCADE,
        related_name="comments",
    )
    commenter = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="report_comments",
    )
    content = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["created_at", "id"]
        verbose_name = "コメント"
        verbose_name_plural = "コメント"

    def __str__(self):
        return f"{self.commenter} — {self.daily_report_id}"
