from django.contrib import admin, messages
from django.contrib.admin.sites import NotRegistered
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin
from django.contrib.auth.models import Group
from django.utils.html import format_html

from .access_policy import AccessPolicy
from .models import AuditLog, Position, User


LEVEL_BADGE_COLORS = {
    Position.Level.STAFF: "#059669",
    Position.Level.MANAGER: "#2563eb",
    Position.Level.DIRECTOR: "#d97706",
}


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    list_display = (
        "username",
        "full_name_display",
        "position_badge",
        "manager",
        "director",
        "status_badge",
    )
    list_filter = ("position", "is_active", "is_blocked", "is_staff")
    search_fields = ("username", "first_name", "last_name", "email")
    ordering = ("id",)
    list_select_related = ("position", "manager", "director")
    autocomplete_fields = ("manager", "director")
    readonly_fields = ("last_login", "date_joined")
    filter_horizontal = ()

    fieldsets = (
        ("アカウント", {"fields": ("username", "password")}),
        ("氏名・連絡先", {"fields": ("last_name", "first_name", "email")}),
        ("組織", {"fields": ("position", "manager", "director")}),
        ("アクセス", {"fields": ("is_active", "is_staff", "is_blocked")}),
        ("システム", {"fields": ("last_login", "date_joined"), "classes": ("collapse",)}),
    )

    add_fieldsets = (
        (
            "営業担当者の作成",
            {
                "classes": ("wide",),
                "fields": (
                    "username",
                    "password1",
                    "password2",
                    "last_name",
                    "first_name",
                    "email",
                    "position",
                    "manager",
                    "director",
                    "is_active",
                    "is_staff",
                ),
            },
        ),
    )

    exclude = ("groups", "user_permissions", "is_superuser")
    actions = ("block_users", "unblock_users")

    @admin.display(description="氏名")
    def full_name_display(self, obj):
        return obj.full_name

    @admin.display(description="役職")
    def position_badge(self, obj):
        if not obj.position_id:
            return "-"
        color = LEVEL_BADGE_COLORS.get(obj.position.level, "#64748b")
        return format_html(
            '<span style="padding:4px 10px;border-radius:999px;background:{}22;color:{};font-weight:600;">{}</span>',
            color,
            color,
            obj.position.name,
        )

    @admin.display(description="状態")
    def status_badge(self, obj):
        if obj.is_blocked:
            return format_html('<span style="color:#dc2626;font-weight:600;">● ロック中</span>')
        if obj.is_active:
            return format_html('<span style="color:#16a34a;font-weight:600;">● 有効</span>')
        return format_html('<span style="color:#64748b;font-weight:600;">● 無効</span>')

    @admin.action(description="ロックする")
    def block_users(self, request, queryset):
        updated = queryset.update(is_blocked=True)
        self.message_user(request, f"Blocked users: {updated}", level=messages.WARNING)

    @admin.action(description="ロックを解除する")
    def unblock_users(self, request, queryset):
        updated = queryset.update(is_blocked=False)
        self.message_user(request, f"Unblocked users: {updated}")

    def has_module_permission(self, request):
        return AccessPolicy.can_manage_salespersons(request.user)

    def has_view_permission(self, request, obj=None):
        return AccessPolicy.can_manage_salespersons(request.user)

    def has_add_permission(self, request):
        return AccessPolicy.can_manage_salespersons(request.user)

    def has_change_permission(self, request, obj=None):
        return AccessPolicy.can_manage_salespersons(request.user)

    def has_delete_permission(self, request, obj=None):
        return bool(request.user.is_authenticated and request.user.is_superuser)


@admin.register(Position)
class PositionAdmin(admin.ModelAdmin):
    list_display = ("name", "level", "users_count")
    list_filter = ("level",)
    search_fields = ("name",)

    @admin.display(description="人数")
    def users_count(self, obj):
        return obj.users.count()


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ("created_at", "user", "action", "category", "level", "object_type", "object_id")
    list_filter = ("level", "category", "created_at")
    search_fields = ("action", "object_type", "object_id", "user__username")
    readonly_fields = (
        "user",
        "action",
        "category",
        "level",
        "object_type",
        "object_id",
        "ip_address",
        "metadata",
        "created_at",
    )

    def has_module_permission(self, request):
        return AccessPolicy.can_manage_salespersons(request.user)

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False


try:
    admin.site.unregister(Group)
except NotRegistered:
    pass
