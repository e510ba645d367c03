from rest_framework.permissions import BasePermission

from .access_policy import AccessPolicy


class IsApprover(BasePermission):
    """
    Managers (課長) and directors (部長) only.
    """
    message = "Only managers and directors can perform this action."

    def has_permission(self, request, view):
        return AccessPolicy.can_approve(request.user)


class IsSalespersonAdmin(BasePermission):
    """
    Salesperson administration: directors and superusers.
    """
    message = "Only directors can manage salespersons."

    def has_permission(self, request, view):
        return AccessPolicy.can_manage_salespersons(request.user)


class IsCustomerEditorOrReadOnly(BasePermission):
    message = "Only managers and directors can edit customers."

    def has_permission(self, request, view):
        if not (request.user and request.user.is_authenticated):
            return False
        if request.method in ("GET", "HEAD", "OPTIONS"):
            return True
        return AccessPolicy.can_manage_customers(request.user)
