from rest_framework.permissions import BasePermission

from .models import RoleChoices


def is_admin_user(user):
    return bool(user and user.is_authenticated and getattr(user, 'is_admin', False))


class IsPlatformAdmin(BasePermission):
    """
    Permission class for platform admins who review supplier ESG data.
    """
    message = "Only admins can perform this action."

    def has_permission(self, request, view):
        return is_admin_user(request.user)


class IsSupplier(BasePermission):
    """
    Permission class for accounts that report ESG data (suppliers and
    companies). Platform admins review data and do not author it.
    """
    def has_permission(self, request, view):
        user = request.user
        if not (user and user.is_authenticated):
            return False
        return user.role in (RoleChoices.SUPPLIER, RoleChoices.COMPANY) and not user.is_superuser


class IsSupplierOwnerOrAdmin(BasePermission):
    """
    Suppliers may only act on their own account; admins on any.
    The view passes the target supplier user as ``obj``.
    """
    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated)

    def has_object_permission(self, request, view, obj):
        if is_admin_user(request.user):
            return True
        return obj.pk == request.user.pk
