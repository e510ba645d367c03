import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models

import reports.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("customers", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="DailyReport",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("report_date", models.DateField(verbose_name="報告日")),
                ("problem", models.TextField(blank=True, default="", verbose_name="課題・相談")),
                ("plan", models.TextField(blank=True, default="", verbose_name="明日の予定")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("draft", "下書き"),
                            ("submitted", "提出済"),
                            ("manager_approved", "課長承認済"),
                            ("approved", "承認済"),
                            ("rejected", "差戻し"),
                        ],
                        default="draft",
                        max_length=20,
                        verbose_name="ステータス",
                    ),
                ),
                ("submitted_at", models.DateTimeField(blank=True, null=True, verbose_name="提出日時")),
                ("manager_approved_at", models.DateTimeField(blank=True, null=True, verbose_name="課長承認日時")),
                ("director_approved_at", models.DateTimeField(blank=True, null=True, verbose_name="部長承認日時")),
                ("rejected_at", models.DateTimeField(blank=True, null=True, verbose_name="差戻し日時")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "salesperson",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="daily_reports",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="営業担当者",
                    ),
                ),
            ],
            options={
                "verbose_name": "日報",
                "verbose_name_plural": "日報",
                "ordering": ["-report_date", "-id"],
                "indexes": [
                    models.Index(fields=["status"], name="reports_status_idx"),
                    models.Index(fields=["report_date"], name="reports_report_date_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("salesperson", "report_date"),
                        name="reports_unique_salesperson_report_date",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="VisitRecord",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("visit_time", models.TimeField(blank=True, null=True, verbose_name="訪問時刻")),
                ("content", models.TextField(verbose_name="訪問内容")),
                (
                    "result",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("negotiating", "商談中"),
                            ("closed_won", "成約"),
                            ("closed_lost", "失注"),
                            ("information_gathering", "情報収集"),
                            ("other", "その他"),
                        ],
                        max_length=30,
                        null=True,
                        verbose_name="結果",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "customer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="visit_records",
                        to="customers.customer",
                        verbose_name="顧客",
                    ),
                ),
                (
                    "daily_report",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="visits",
                        to="reports.dailyreport",
                        verbose_name="日報",
                    ),
                ),
            ],
            options={
                "verbose_name": "訪問記録",
                "verbose_name_plural": "訪問記録",
                "ordering": ["id"],
            },
        ),
        migrations.CreateModel(
            name="Attachment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("file", models.FileField(upload_to=reports.models.attachment_upload_to, verbose_name="ファイル")),
                ("file_name", models.CharField(max_length=255, verbose_name="ファイル名")),
                ("content_type", models.CharField(max_length=100, verbose_name="MIMEタイプ")),
                ("file_size", models.PositiveIntegerField(verbose_name="サイズ")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "visit_record",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="attachments",
                        to="reports.visitrecord",
                        verbose_name="訪問記録",
                    ),
                ),
            ],
            options={
                "verbose_name": "添付ファイル",
                "verbose_name_plural": "添付ファイル",
                "ordering": ["id"],
            },
        ),
        migrations.CreateModel(
            name="ApprovalHistory",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "action",
                    models.CharField(
                        choices=[("approved", "承認"), ("rejected", "差戻し")],
                        max_length=20,
                    ),
                ),
                (
                    "approval_level",
                    models.CharField(
                        choices=[("manager", "課長"), ("director", "部長")],
                        max_length=20,
                    ),
                ),
                ("comment", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "approver",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="approval_histories",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "daily_report",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="approval_histories",
                        to="reports.dailyreport",
                    ),
                ),
            ],
            options={
                "verbose_name": "承認履歴",
                "verbose_name_plural": "承認履歴",
                "ordering": ["created_at", "id"],
            },
        ),
        migrations.CreateModel(
            name="Comment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("content", models.TextField()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "commenter",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="report_comments",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "daily_report",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="comments",
                        to="reports.dailyreport",
                    ),
                ),
            ],
            options={
                "verbose_name": "コメント",
                "verbose_name_plural": "コメント",
                "ordering": ["created_at", "id"],
            },
        ),
    ]
