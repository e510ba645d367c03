from django.conf import settings
from django.contrib.auth.models import AbstractUser
from django.core.exceptions import ValidationError
from django.db import models

from .managers import UserManager


# ================= Reference Tables =================
class Position(models.Model):
    class Level(models.IntegerChoices):
        STAFF = 1, "担当"
        MANAGER = 2, "課長"
        DIRECTOR = 3, "部長"

    name = models.CharField("名称", max_length=50, unique=True)
    level = models.PositiveSmallIntegerField(
        "レベル",
        choices=Level.choices,
        default=Level.STAFF,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["level", "id"]
        verbose_name = "役職"
        verbose_name_plural = "役職"

    def __str__(self):
        return self.name


# ================= User =================
class User(AbstractUser):
    email = models.EmailField("メールアドレス", unique=True)
    position = models.ForeignKey(
        Position,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="users",
        verbose_name="役職",
    )
    manager = models.ForeignKey(
        "self",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="subordinates",
        verbose_name="上長（課長）",
    )
    director = models.ForeignKey(
        "self",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="division_members",
        verbose_name="部長",
    )
    is_blocked = models.BooleanField("ロック", default=False)

    objects = UserManager()

    class Meta:
        verbose_name = "営業担当者"
        verbose_name_plural = "営業担当者"

    def clean(self):
        super().clean()
        if self.manager_id and self.manager_id == self.id:
            raise ValidationError("A salesperson cannot be their own manager.")
        if self.director_id and self.director_id == self.id:
            raise ValidationError("A salesperson cannot be their own director.")

    @property
    def position_level(self) -> int:
        if not self.position_id:
            return 0
        return int(self.position.level)

    @property
    def full_name(self) -> str:
        return f"{self.last_name} {self.first_name}".strip() or self.username


# ================= Security =================
class AuditLog(models.Model):
    """
    Primary audit storage backend.
    Use apps.audit.log_event as unified entrypoint for new writes.
    """

    class Level(models.TextChoices):
        INFO = "info", "Info"
        WARNING = "warning", "Warning"
        ERROR = "error", "Error"
        CRITICAL = "critical", "Critical"

    class Category(models.TextChoices):
        AUTH = "auth", "Authentication"
        USER = "user", "User management"
        REPORT = "report", "Daily reports"
        APPROVAL = "approval", "Approvals"
        CUSTOMER = "customer", "Customers"
        SYSTEM = "system", "System"

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        verbose_name="ユーザー",
    )

    action = models.CharField("操作", max_length=255)
    object_type = models.CharField("対象種別", max_length=100, blank=True)
    object_id = models.CharField("対象ID", max_length=100, blank=True)

    level = models.CharField(
        "レベル",
        max_length=20,
        choices=Level.choices,
        default=Level.INFO,
    )

    category = models.CharField(
        "カテゴリ",
        max_length=50,
        choices=Category.choices,
        default=Category.SYSTEM,
    )

    ip_address = models.GenericIPAddressField("IPアドレス", null=True, blank=True)
    metadata = models.JSONField("詳細", default=dict, blank=True)
    created_at = models.DateTimeField("作成日時", auto_now_add=True)

    class Meta:
        verbose_name = "監査ログ"
        verbose_name_plural = "監査ログ"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["level"], name="auditlog_level_idx"),
            models.Index(fields=["category"], name="auditlog_category_idx"),
            models.Index(fields=["created_at"], name="auditlog_created_at_idx"),
            models.Index(fields=["user"], name="auditlog_user_idx"),
        ]

    @classmethod
    def log(
        cls,
        action,
        user=None,
        object_type="",
        object_id="",
        level=Level.INFO,
        category=Category.SYSTEM,
        ip_address=None,
        metadata=None,
    ):
        return cls.objects.create(
            user=user,
            action=action,
            object_type=object_type,
            object_id=object_id,
            level=level,
            category=category,
            ip_address=ip_address,
            metadata=metadata or {},
        )

    def __str__(self):
        return f"[{self.level.upper()}] {self.action}"
