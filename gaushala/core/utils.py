"""Utility functions for audit logging, pagination and query parsing"""
import logging
from datetime import datetime

from django.conf import settings
from django.core.paginator import Paginator

from .models import AuditLog, Setting

logger = logging.getLogger(__name__)


def get_client_ip(request):
    """Extract client IP address from request"""
    if not request or not hasattr(request, 'META'):
        return None
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        ip = x_forwarded_for.split(',')[0].strip()
    else:
        ip = request.META.get('REMOTE_ADDR')
    return ip or None


def create_audit_log(request=None, action=None, model_name=None, object_id=None,
                     changes=None, user=None, object_name=None, object_reference=None):
    """
    Create an audit log entry

    Args:
        request: Django request object (for user and IP) - optional if user is provided
        action: Action type (create, update, delete, stock_in, access_grant, etc.)
        model_name: Name of the model being acted upon
        object_id: ID of the object (as string)
        changes: Dictionary of changes made
        user: Optional user override (defaults to request.user if request provided)
        object_name: Human-readable name of the object (e.g., cattle name)
        object_reference: Reference identifier (e.g., unique animal id, RFID tag)
    """
    try:
        audit_user = None
        if user:
            audit_user = user
        elif request and hasattr(request, 'user'):
            audit_user = request.user

        ip_address = get_client_ip(request) if request else None

        if not action or not model_name or not object_id:
            logger.warning(f"Audit log creation skipped: missing required fields (action={action}, model_name={model_name}, object_id={object_id})")
            return None

        return AuditLog.objects.create(
            user=audit_user if audit_user and audit_user.is_authenticated else None,
            action=action,
            model_name=model_name,
            object_id=str(object_id),
            object_name=object_name,
            object_reference=object_reference,
            changes=changes or {},
            ip_address=ip_address
        )
    except Exception as e:
        # Don't fail the main operation if audit logging fails
        logger.error(f"Failed to create audit log: {str(e)}")
        return None


def get_setting(key, default=None):
    """Read a runtime setting from the settings table"""
    setting = Setting.objects.filter(key=key).first()
    if setting is None:
        return default
    return setting.value


def get_page_params(request):
    """Read page/limit query params, clamped to the configured bounds"""
    try:
        page = int(request.query_params.get('page', 1))
    except (TypeError, ValueError):
        page = 1
    default_limit = get_setting('default_page_size', settings.DEFAULT_PAGE_SIZE)
    try:
        limit = int(request.query_params.get('limit', default_limit))
    except (TypeError, ValueError):
        limit = settings.DEFAULT_PAGE_SIZE
    limit = max(1, min(limit, settings.MAX_PAGE_SIZE))
    return max(page, 1), limit


def paginate(request, items, serializer_class, context=None, extra=None):
    """
    Paginate a queryset or list and build the standard list payload

    Returns a dict with results, count, next, previous, page, page_size and
    total_pages; ``extra`` keys are merged in.
    """
    page, limit = get_page_params(request)
    paginator = Paginator(items, limit)
    page_obj = paginator.get_page(page)

    serializer = serializer_class(page_obj, many=True, context=context or {'request': request})
    data = {
        'results': serializer.data,
        'count': paginator.count,
        'next': page_obj.next_page_number() if page_obj.has_next() else None,
        'previous': page_obj.previous_page_number() if page_obj.has_previous() else None,
        'page': page_obj.number,
        'page_size': limit,
        'total_pages': paginator.num_pages,
    }
    if extra:
        data.update(extra)
    return data, page_obj


def parse_date(value):
    """Parse a YYYY-MM-DD query param; None for blank or malformed input"""
    if not value:
        return None
    try:
        return datetime.strptime(value[:10], '%Y-%m-%d').date()
    except ValueError:
        return None


def parse_bool(value):
    """Handle string 'true'/'false' query params"""
    if value is None or value == '':
        return None
    if isinstance(value, str):
        return value.lower() in ('true', '1', 'yes')
    return bool(value)
