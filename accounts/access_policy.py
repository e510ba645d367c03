from __future__ import annotations

from django.db.models import Q

from .models import Position


class AccessPolicy:
    """Centralized access checks for position/ownership rules."""

    @staticmethod
    def _has_position(user) -> bool:
        return bool(user and user.is_authenticated and getattr(user, "position_id", None))

    @classmethod
    def position_level(cls, user) -> int:
        if not cls._has_position(user):
            return 0
        return int(user.position.level)

    @classmethod
    def is_staff_member(cls, user) -> bool:
        return cls.position_level(user) == Position.Level.STAFF

    @classmethod
    def is_manager(cls, user) -> bool:
        return cls.position_level(user) == Position.Level.MANAGER

    @classmethod
    def is_director(cls, user) -> bool:
        return cls.position_level(user) >= Position.Level.DIRECTOR

    @classmethod
    def can_approve(cls, user) -> bool:
        return cls.position_level(user) >= Position.Level.MANAGER

    @classmethod
    def can_manage_salespersons(cls, user) -> bool:
        if not (user and user.is_authenticated):
            return False
        return bool(user.is_superuser) or cls.is_director(user)

    @classmethod
    def can_manage_customers(cls, user) -> bool:
        if not (user and user.is_authenticated):
            return False
        return bool(user.is_superuser) or cls.can_approve(user)

    @classmethod
    def is_manager_of(cls, actor, owner) -> bool:
        return cls.is_manager(actor) and owner.manager_id == actor.id

    @classmethod
    def can_view_report(cls, actor, report) -> bool:
        if not (actor and actor.is_authenticated):
            return False
        if report.salesperson_id == actor.id:
            return True
        if cls.is_director(actor):
            return True
        return cls.is_manager_of(actor, report.salesperson)

    @classmethod
    def visible_reports(cls, actor, queryset):
        if cls.is_director(actor):
            return queryset
        if cls.is_manager(actor):
            return queryset.filter(Q(salesperson__manager_id=actor.id) | Q(salesperson_id=actor.id))
        return queryset.filter(salesperson_id=actor.id)
