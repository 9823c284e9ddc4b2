"""
Gaushala-level access scoping.

Admins (superusers, staff, or members of the Admin group) see every gaushala.
Everyone else only sees gaushalas they have been granted through
UserGaushalaAccess.
"""
from rest_framework.permissions import BasePermission

ADMIN_GROUPS = ['Admin']


def is_gaushala_admin(user):
    if not user or not user.is_authenticated:
        return False
    if user.is_superuser or user.is_staff:
        return True
    return user.groups.filter(name__in=ADMIN_GROUPS).exists()


def get_accessible_gaushala_ids(user):
    """
    Return the gaushala ids a user may see, or None for unrestricted access.
    """
    if is_gaushala_admin(user):
        return None
    from .models import UserGaushalaAccess
    return list(
        UserGaushalaAccess.objects.filter(user=user).values_list('gaushala_id', flat=True)
    )


def filter_by_gaushala_access(queryset, user, field='gaushala_id'):
    """Restrict a queryset to the gaushalas the user can access"""
    gaushala_ids = get_accessible_gaushala_ids(user)
    if gaushala_ids is None:
        return queryset
    return queryset.filter(**{f'{field}__in': gaushala_ids})


def has_gaushala_access(user, gaushala_id):
    gaushala_ids = get_accessible_gaushala_ids(user)
    if gaushala_ids is None:
        return True
    try:
        return int(gaushala_id) in gaushala_ids
    except (TypeError, ValueError):
        return False


class IsGaushalaAdmin(BasePermission):
    """Allows access only to gaushala administrators"""

    def has_permission(self, request, view):
        return is_gaushala_admin(request.user)
