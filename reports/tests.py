import shutil
import tempfile
from datetime import date, time
from unittest.mock import patch

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase, override_settings
from rest_framework.test import APIClient

from accounts.models import AuditLog, Position, User
from customers.models import Customer

from .models import ApprovalHistory, Attachment, Comment, DailyReport, VisitRecord
from .services import ReportWorkflowService
from .status import ReportStatus, StatusErrorCode, StatusTransitionError


TEMP_MEDIA_ROOT = tempfile.mkdtemp(prefix="daily-reports-tests-")


class ReportApiTestCase(TestCase):
    @classmethod
    def tearDownClass(cls):
        super().tearDownClass()
        shutil.rmtree(TEMP_MEDIA_ROOT, ignore_errors=True)

    def setUp(self):
        self.client = APIClient()
        self.staff_position = Position.objects.create(name="担当", level=Position.Level.STAFF)
        self.manager_position = Position.objects.create(name="課長", level=Position.Level.MANAGER)
        self.director_position = Position.objects.create(name="部長", level=Position.Level.DIRECTOR)

        self.director = User.objects.create_user(
            username="director",
            email="director@example.com",
            password="StrongPass123!",
            position=self.director_position,
        )
        self.manager = User.objects.create_user(
            username="manager",
            email="manager@example.com",
            password="StrongPass123!",
            position=self.manager_position,
            director=self.director,
        )
        self.other_manager = User.objects.create_user(
            username="other_manager",
            email="other_manager@example.com",
            password="StrongPass123!",
            position=self.manager_position,
        )
        self.staff = User.objects.create_user(
            username="yamada",
            email="yamada@example.com",
            password="StrongPass123!",
            last_name="山田",
            first_name="太郎",
            position=self.staff_position,
            manager=self.manager,
            director=self.director,
        )
        self.other_staff = User.objects.create_user(
            username="sato",
            email="sato@example.com",
            password="StrongPass123!",
            position=self.staff_position,
            manager=self.other_manager,
        )
        self.customer = Customer.objects.create(name="株式会社ABC", industry="製造業")

    def make_report(self, owner=None, status=ReportStatus.DRAFT, visits=1, report_date=date(2026, 1, 15)):
        report = DailyReport.objects.create(
            salesperson=owner or self.staff,
            report_date=report_date,
            problem="価格交渉が難航",
            plan="見積の再提出",
            status=status,
        )
        for _ in range(visits):
            VisitRecord.objects.create(daily_report=report, customer=self.customer, content="定期訪問")
        return report


@override_settings(MEDIA_ROOT=TEMP_MEDIA_ROOT)
class ReportCrudApiTests(ReportApiTestCase):
    def test_create_report_with_visits(self):
        self.client.force_authenticate(self.staff)
        response = self.client.post(
            "/api/v1/reports/",
            {
                "report_date": "2026-01-15",
                "problem": "価格交渉が難航",
                "plan": "見積の再提出",
                "visits": [
                    {
                        "customer_id": self.customer.id,
                        "visit_time": "10:00",
                        "content": "新製品の紹介",
                        "result": "negotiating",
                    },
                    {"customer_id": self.customer.id, "content": "アフターフォロー"},
                ],
            },
            format="json",
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["status"], ReportStatus.DRAFT)
        self.assertEqual(len(response.data["visits"]), 2)
        self.assertEqual(response.data["visits"][0]["visit_time"], "10:00")
        self.assertEqual(response.data["salesperson"]["name"], "山田 太郎")
        self.assertTrue(AuditLog.objects.filter(action="report_created", user=self.staff).exists())

    def test_visits_are_listed_in_insertion_order(self):
        report = self.make_report(visits=0)
        untimed = VisitRecord.objects.create(daily_report=report, customer=self.customer, content="飛び込み")
        early = VisitRecord.objects.create(
            daily_report=report,
            customer=self.customer,
            visit_time=time(9, 0),
            content="朝一訪問",
        )
        self.client.force_authenticate(self.staff)

        response = self.client.get(f"/api/v1/reports/{report.id}/visits/")
        self.assertEqual([item["id"] for item in response.data], [untimed.id, early.id])

        response = self.client.get(f"/api/v1/reports/{report.id}/")
        self.assertEqual([item["id"] for item in response.data["visits"]], [untimed.id, early.id])

    def test_duplicate_report_date_returns_conflict(self):
        self.make_report()
        self.client.force_authenticate(self.staff)
        response = self.client.post("/api/v1/reports/", {"report_date": "2026-01-15"}, format="json")
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data["code"], "DUPLICATE_REPORT")

    def test_create_rejects_inactive_customer(self):
        self.customer.is_active = False
        self.customer.save(update_fields=["is_active"])
        self.client.force_authenticate(self.staff)
        response = self.client.post(
            "/api/v1/reports/",
            {"report_date": "2026-01-16", "visits": [{"customer_id": self.customer.id, "content": "訪問"}]},
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertFalse(DailyReport.objects.filter(report_date=date(2026, 1, 16)).exists())

    def test_list_is_scoped_by_position(self):
        own = self.make_report()
        foreign = self.make_report(owner=self.other_staff)

        self.client.force_authenticate(self.staff)
        ids = [item["id"] for item in self.client.get("/api/v1/reports/").data["items"]]
        self.assertEqual(ids, [own.id])

        self.client.force_authenticate(self.manager)
        ids = [item["id"] for item in self.client.get("/api/v1/reports/").data["items"]]
        self.assertEqual(ids, [own.id])

        self.client.force_authenticate(self.director)
        response = self.client.get("/api/v1/reports/")
        self.assertEqual({item["id"] for item in response.data["items"]}, {own.id, foreign.id})
        self.assertEqual(response.data["pagination"]["total_count"], 2)

    def test_list_filters_and_visit_count(self):
        self.make_report(report_date=date(2026, 1, 10), visits=2)
        self.make_report(report_date=date(2026, 1, 20), status=ReportStatus.SUBMITTED, visits=1)
        self.client.force_authenticate(self.staff)

        response = self.client.get("/api/v1/reports/", {"date_from": "2026-01-15"})
        self.assertEqual([item["report_date"] for item in response.data["items"]], ["2026-01-20"])

        response = self.client.get("/api/v1/reports/", {"status": "draft"})
        self.assertEqual(len(response.data["items"]), 1)
        self.assertEqual(response.data["items"][0]["visit_count"], 2)

        response = self.client.get("/api/v1/reports/", {"order": "asc"})
        self.assertEqual(
            [item["report_date"] for item in response.data["items"]],
            ["2026-01-10", "2026-01-20"],
        )

    def test_list_rejects_inverted_date_range(self):
        self.client.force_authenticate(self.staff)
        response = self.client.get("/api/v1/reports/", {"date_from": "2026-02-01", "date_to": "2026-01-01"})
        self.assertEqual(response.status_code, 400)

    def test_detail_visibility(self):
        report = self.make_report()

        self.client.force_authenticate(self.other_staff)
        self.assertEqual(self.client.get(f"/api/v1/reports/{report.id}/").status_code, 403)

        self.client.force_authenticate(self.other_manager)
        self.assertEqual(self.client.get(f"/api/v1/reports/{report.id}/").status_code, 403)

        self.client.force_authenticate(self.manager)
        response = self.client.get(f"/api/v1/reports/{report.id}/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data["visits"]), 1)

    def test_update_only_by_owner_while_editable(self):
        report = self.make_report()

        self.client.force_authenticate(self.other_staff)
        response = self.client.patch(f"/api/v1/reports/{report.id}/", {"plan": "x"}, format="json")
        self.assertEqual(response.status_code, 403)

        self.client.force_authenticate(self.staff)
        response = self.client.patch(f"/api/v1/reports/{report.id}/", {"plan": "訪問先の追加"}, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["plan"], "訪問先の追加")

        DailyReport.objects.filter(pk=report.pk).update(status=ReportStatus.SUBMITTED)
        response = self.client.patch(f"/api/v1/reports/{report.id}/", {"plan": "y"}, format="json")
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data["code"], StatusErrorCode.INVALID_STATUS)

    def test_editing_rejected_report_keeps_status(self):
        report = self.make_report(status=ReportStatus.REJECTED)
        self.client.force_authenticate(self.staff)
        response = self.client.put(f"/api/v1/reports/{report.id}/", {"problem": "修正済み"}, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["status"], ReportStatus.REJECTED)

    def test_delete_only_drafts(self):
        submitted = self.make_report(status=ReportStatus.SUBMITTED)
        draft = self.make_report(report_date=date(2026, 1, 16))
        self.client.force_authenticate(self.staff)

        response = self.client.delete(f"/api/v1/reports/{submitted.id}/")
        self.assertEqual(response.status_code, 409)

        response = self.client.delete(f"/api/v1/reports/{draft.id}/")
        self.assertEqual(response.status_code, 204)
        self.assertFalse(DailyReport.objects.filter(pk=draft.pk).exists())
        self.assertFalse(VisitRecord.objects.filter(daily_report_id=draft.pk).exists())


class ReportWorkflowApiTests(ReportApiTestCase):
    def test_submit_report(self):
        report = self.make_report()
        self.client.force_authenticate(self.staff)
        with patch("reports.views.ReportsAuditService.log_status_changed") as log_changed:
            response = self.client.post(f"/api/v1/reports/{report.id}/submit/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["status"], ReportStatus.SUBMITTED)
        self.assertIsNotNone(response.data["submitted_at"])
        log_changed.assert_called_once()
        report.refresh_from_db()
        self.assertEqual(report.status, ReportStatus.SUBMITTED)

    def test_submit_without_visits_is_unprocessable(self):
        report = self.make_report(visits=0)
        self.client.force_authenticate(self.staff)
        response = self.client.post(f"/api/v1/reports/{report.id}/submit/")
        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.data["code"], StatusErrorCode.NO_VISITS)

    def test_submit_foreign_report_is_forbidden_and_audited(self):
        report = self.make_report()
        self.client.force_authenticate(self.other_staff)
        with patch("reports.views.ReportsAuditService.log_transition_denied") as log_denied:
            response = self.client.post(f"/api/v1/reports/{report.id}/submit/")

        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.data["code"], StatusErrorCode.FORBIDDEN)
        log_denied.assert_called_once()
        self.assertEqual(log_denied.call_args.args[2], "submit")

    def test_submit_missing_report_is_not_found(self):
        self.client.force_authenticate(self.staff)
        response = self.client.post("/api/v1/reports/999999/submit/")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data["code"], StatusErrorCode.NOT_FOUND)

    def test_withdraw_submitted_report(self):
        report = self.make_report(status=ReportStatus.SUBMITTED)
        self.client.force_authenticate(self.staff)
        response = self.client.post(f"/api/v1/reports/{report.id}/withdraw/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["status"], ReportStatus.DRAFT)
        self.assertIsNone(response.data["submitted_at"])

    def test_withdraw_approved_report_conflicts(self):
        report = self.make_report(status=ReportStatus.MANAGER_APPROVED)
        self.client.force_authenticate(self.staff)
        response = self.client.post(f"/api/v1/reports/{report.id}/withdraw/")
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data["code"], StatusErrorCode.ALREADY_APPROVED)

    def test_two_stage_approval(self):
        report = self.make_report(status=ReportStatus.SUBMITTED)

        self.client.force_authenticate(self.manager)
        response = self.client.post(f"/api/v1/reports/{report.id}/approve/", {"comment": "OK"}, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["status"], ReportStatus.MANAGER_APPROVED)

        self.client.force_authenticate(self.director)
        response = self.client.post(f"/api/v1/reports/{report.id}/approve/", {}, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["status"], ReportStatus.APPROVED)
        self.assertIsNotNone(response.data["director_approved_at"])

        levels = list(
            ApprovalHistory.objects.filter(daily_report=report).values_list("approval_level", "action")
        )
        self.assertEqual(levels, [("manager", "approved"), ("director", "approved")])

        response = self.client.get(f"/api/v1/reports/{report.id}/approval-history/")
        self.assertEqual(len(response.data), 2)
        self.assertEqual(response.data[0]["comment"], "OK")

    def test_manager_cannot_approve_other_team(self):
        report = self.make_report(status=ReportStatus.SUBMITTED)
        self.client.force_authenticate(self.other_manager)
        response = self.client.post(f"/api/v1/reports/{report.id}/approve/", {}, format="json")
        self.assertEqual(response.status_code, 403)
        self.assertFalse(ApprovalHistory.objects.exists())

    def test_staff_cannot_approve(self):
        report = self.make_report(status=ReportStatus.SUBMITTED)
        self.client.force_authenticate(self.other_staff)
        response = self.client.post(f"/api/v1/reports/{report.id}/approve/", {}, format="json")
        self.assertEqual(response.status_code, 403)

    def test_director_cannot_skip_manager_stage(self):
        report = self.make_report(status=ReportStatus.SUBMITTED)
        self.client.force_authenticate(self.director)
        response = self.client.post(f"/api/v1/reports/{report.id}/approve/", {}, format="json")
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data["code"], StatusErrorCode.INVALID_STATUS)

    def test_reject_requires_comment(self):
        report = self.make_report(status=ReportStatus.SUBMITTED)
        self.client.force_authenticate(self.manager)
        response = self.client.post(f"/api/v1/reports/{report.id}/reject/", {"comment": ""}, format="json")
        self.assertEqual(response.status_code, 400)
        report.refresh_from_db()
        self.assertEqual(report.status, ReportStatus.SUBMITTED)

    def test_reject_then_resubmit(self):
        report = self.make_report(status=ReportStatus.SUBMITTED)
        self.client.force_authenticate(self.manager)
        response = self.client.post(
            f"/api/v1/reports/{report.id}/reject/",
            {"comment": "訪問内容を具体的に"},
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["status"], ReportStatus.REJECTED)
        self.assertIsNotNone(response.data["rejected_at"])

        history = ApprovalHistory.objects.get(daily_report=report)
        self.assertEqual(history.action, ApprovalHistory.Action.REJECTED)
        self.assertEqual(history.comment, "訪問内容を具体的に")

        self.client.force_authenticate(self.staff)
        response = self.client.post(f"/api/v1/reports/{report.id}/submit/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["status"], ReportStatus.SUBMITTED)

    def test_director_rejects_manager_approved_report(self):
        report = self.make_report(status=ReportStatus.MANAGER_APPROVED)
        self.client.force_authenticate(self.director)
        response = self.client.post(f"/api/v1/reports/{report.id}/reject/", {"comment": "再確認"}, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            ApprovalHistory.objects.get(daily_report=report).approval_level,
            ApprovalHistory.Level.DIRECTOR,
        )

    def test_approval_queue(self):
        waiting = self.make_report(status=ReportStatus.SUBMITTED)
        self.make_report(owner=self.other_staff, status=ReportStatus.SUBMITTED)
        escalated = self.make_report(status=ReportStatus.MANAGER_APPROVED, report_date=date(2026, 1, 16))

        self.client.force_authenticate(self.staff)
        self.assertEqual(self.client.get("/api/v1/approvals/").status_code, 403)

        self.client.force_authenticate(self.manager)
        response = self.client.get("/api/v1/approvals/")
        self.assertEqual([item["id"] for item in response.data["items"]], [waiting.id])

        self.client.force_authenticate(self.director)
        response = self.client.get("/api/v1/approvals/")
        self.assertEqual([item["id"] for item in response.data["items"]], [escalated.id])


class ReportWorkflowServiceTests(ReportApiTestCase):
    def test_stale_status_is_rejected_by_conditional_update(self):
        report = self.make_report(status=ReportStatus.SUBMITTED)
        snapshot = report.to_snapshot()
        DailyReport.objects.filter(pk=report.pk).update(status=ReportStatus.DRAFT)

        with self.assertRaises(StatusTransitionError) as ctx:
            ReportWorkflowService._apply(
                report,
                snapshot,
                {"status": ReportStatus.MANAGER_APPROVED},
            )
        self.assertEqual(ctx.exception.code, StatusErrorCode.INVALID_STATUS)
        report.refresh_from_db()
        self.assertEqual(report.status, ReportStatus.DRAFT)

    def test_apply_refuses_edges_outside_the_table(self):
        report = self.make_report(status=ReportStatus.APPROVED)
        with self.assertRaises(StatusTransitionError):
            ReportWorkflowService._apply(report, report.to_snapshot(), {"status": ReportStatus.DRAFT})

    def test_denied_submit_leaves_report_untouched(self):
        report = self.make_report(visits=0)
        before = report.to_snapshot()

        with self.assertRaises(StatusTransitionError) as ctx:
            ReportWorkflowService.submit(report_id=report.id, actor=self.staff)
        self.assertEqual(ctx.exception.code, StatusErrorCode.NO_VISITS)

        report.refresh_from_db()
        self.assertEqual(report.to_snapshot(), before)
        self.assertFalse(report.approval_histories.exists())

    def test_submit_uses_live_visit_count(self):
        report = self.make_report(visits=0)
        with self.assertRaises(StatusTransitionError) as ctx:
            ReportWorkflowService.submit(report_id=report.id, actor=self.staff)
        self.assertEqual(ctx.exception.code, StatusErrorCode.NO_VISITS)

        VisitRecord.objects.create(daily_report=report, customer=self.customer, content="訪問")
        outcome = ReportWorkflowService.submit(report_id=report.id, actor=self.staff)
        self.assertEqual(outcome.from_status, ReportStatus.DRAFT)
        self.assertEqual(outcome.to_status, ReportStatus.SUBMITTED)


@override_settings(MEDIA_ROOT=TEMP_MEDIA_ROOT)
class VisitAndAttachmentApiTests(ReportApiTestCase):
    def pdf(self, name="quote.pdf"):
        return SimpleUploadedFile(name, b"%PDF-1.4 quote", content_type="application/pdf")

    def test_add_update_and_delete_visit(self):
        report = self.make_report(visits=0)
        self.client.force_authenticate(self.staff)

        response = self.client.post(
            f"/api/v1/reports/{report.id}/visits/",
            {"customer_id": self.customer.id, "visit_time": "14:30", "content": "デモ実施", "result": "closed_won"},
            format="json",
        )
        self.assertEqual(response.status_code, 201)
        visit_id = response.data["id"]

        response = self.client.patch(f"/api/v1/visits/{visit_id}/", {"content": "デモ実施・受注"}, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["content"], "デモ実施・受注")

        response = self.client.delete(f"/api/v1/visits/{visit_id}/")
        self.assertEqual(response.status_code, 204)
        self.assertFalse(VisitRecord.objects.filter(pk=visit_id).exists())

    def test_visit_changes_blocked_once_submitted(self):
        report = self.make_report(status=ReportStatus.SUBMITTED)
        self.client.force_authenticate(self.staff)
        response = self.client.post(
            f"/api/v1/reports/{report.id}/visits/",
            {"customer_id": self.customer.id, "content": "追加訪問"},
            format="json",
        )
        self.assertEqual(response.status_code, 409)

    def test_visit_rejects_bad_time_format(self):
        report = self.make_report(visits=0)
        self.client.force_authenticate(self.staff)
        response = self.client.post(
            f"/api/v1/reports/{report.id}/visits/",
            {"customer_id": self.customer.id, "visit_time": "2pm", "content": "訪問"},
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("visit_time", response.data)

    def test_upload_download_and_delete_attachment(self):
        report = self.make_report()
        visit = report.visits.first()
        self.client.force_authenticate(self.staff)

        response = self.client.post(
            f"/api/v1/visits/{visit.id}/attachments/",
            {"file": self.pdf()},
            format="multipart",
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["file_name"], "quote.pdf")
        attachment_id = response.data["id"]
        self.assertEqual(response.data["download_url"], f"/api/v1/attachments/{attachment_id}/")

        self.client.force_authenticate(self.manager)
        response = self.client.get(f"/api/v1/attachments/{attachment_id}/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(b"".join(response.streaming_content), b"%PDF-1.4 quote")
        response.close()

        self.client.force_authenticate(self.other_staff)
        self.assertEqual(self.client.get(f"/api/v1/attachments/{attachment_id}/").status_code, 403)

        self.client.force_authenticate(self.staff)
        response = self.client.delete(f"/api/v1/attachments/{attachment_id}/")
        self.assertEqual(response.status_code, 204)
        self.assertFalse(Attachment.objects.filter(pk=attachment_id).exists())

    def test_upload_rejects_unsupported_type(self):
        visit = self.make_report().visits.first()
        self.client.force_authenticate(self.staff)
        upload = SimpleUploadedFile("run.exe", b"MZ", content_type="application/octet-stream")
        response = self.client.post(f"/api/v1/visits/{visit.id}/attachments/", {"file": upload}, format="multipart")
        self.assertEqual(response.status_code, 415)
        self.assertEqual(response.data["code"], "UNSUPPORTED_FILE_TYPE")

    @override_settings(ATTACHMENT_MAX_SIZE=4)
    def test_upload_rejects_large_file(self):
        visit = self.make_report().visits.first()
        self.client.force_authenticate(self.staff)
        response = self.client.post(
            f"/api/v1/visits/{visit.id}/attachments/",
            {"file": self.pdf()},
            format="multipart",
        )
        self.assertEqual(response.status_code, 413)
        self.assertEqual(response.data["code"], "FILE_TOO_LARGE")
        self.assertFalse(Attachment.objects.exists())

    def test_upload_requires_file(self):
        visit = self.make_report().visits.first()
        self.client.force_authenticate(self.staff)
        response = self.client.post(f"/api/v1/visits/{visit.id}/attachments/", {}, format="multipart")
        self.assertEqual(response.status_code, 400)


class CommentAndDashboardApiTests(ReportApiTestCase):
    def test_manager_comments_on_subordinate_report(self):
        report = self.make_report(status=ReportStatus.SUBMITTED)
        self.client.force_authenticate(self.manager)
        response = self.client.post(
            f"/api/v1/reports/{report.id}/comments/",
            {"content": "  明日の訪問に同行します  "},
            format="json",
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["content"], "明日の訪問に同行します")
        self.assertEqual(response.data["commenter"]["position_level"], Position.Level.MANAGER)

        self.client.force_authenticate(self.staff)
        response = self.client.get(f"/api/v1/reports/{report.id}/comments/")
        self.assertEqual(len(response.data), 1)

    def test_blank_comment_is_rejected(self):
        report = self.make_report()
        self.client.force_authenticate(self.staff)
        response = self.client.post(f"/api/v1/reports/{report.id}/comments/", {"content": "   "}, format="json")
        self.assertEqual(response.status_code, 400)

    def test_only_commenter_can_delete(self):
        report = self.make_report()
        comment = Comment.objects.create(daily_report=report, commenter=self.manager, content="確認しました")

        self.client.force_authenticate(self.staff)
        self.assertEqual(self.client.delete(f"/api/v1/comments/{comment.id}/").status_code, 403)

        self.client.force_authenticate(self.manager)
        self.assertEqual(self.client.delete(f"/api/v1/comments/{comment.id}/").status_code, 204)
        self.assertFalse(Comment.objects.filter(pk=comment.pk).exists())

    def test_dashboard_summary(self):
        self.make_report(report_date=date(2026, 1, 14))
        self.make_report(status=ReportStatus.SUBMITTED, report_date=date(2026, 1, 15))

        self.client.force_authenticate(self.staff)
        response = self.client.get("/api/v1/dashboard/summary/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["my_reports"]["draft"], 1)
        self.assertEqual(response.data["my_reports"]["submitted"], 1)
        self.assertEqual(response.data["my_reports"]["approved"], 0)
        self.assertIsNone(response.data["pending_approvals"])
        self.assertEqual(len(response.data["recent_reports"]), 2)

        self.client.force_authenticate(self.manager)
        response = self.client.get("/api/v1/dashboard/summary/")
        self.assertEqual(response.data["pending_approvals"], 1)
