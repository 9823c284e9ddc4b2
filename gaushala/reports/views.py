"""
Dashboard and analytics views

Figures are computed per set of accessible gaushalas and cached; the caches
are invalidated through generation bumps whenever herd, production or stock
data changes (see gaushala.core.cache_signals).
"""
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db.models import Sum, Count, Avg, Q, F
from django.db.models.functions import TruncDate
from django.utils import timezone
from datetime import timedelta
from decimal import Decimal
import logging

from gaushala.access.permissions import get_accessible_gaushala_ids
from gaushala.core.cache_utils import cached_query, DASHBOARD_CACHE_TTL, REPORTS_CACHE_TTL
from gaushala.core.utils import parse_date
from gaushala.herd.models import Cattle, HealthRecord
from gaushala.inventory.models import InventoryItem
from gaushala.medicine.models import Medicine
from gaushala.production.models import MilkRecord
from gaushala.rfid.models import RFIDScan
from gaushala.sheds.models import Shed

logger = logging.getLogger(__name__)

DEFAULT_ANALYTICS_DAYS = 30
MEDICINE_LOW_STOCK_THRESHOLD = Decimal('10')


def _scope(queryset, gaushala_ids):
    if gaushala_ids is None:
        return queryset
    return queryset.filter(gaushala_id__in=gaushala_ids)


def _gaushala_scope(request):
    """
    Sorted tuple of gaushala ids for the request (None = all), narrowed by an
    optional ``gaushala`` param. Returns False when the param is not accessible.
    """
    accessible = get_accessible_gaushala_ids(request.user)
    requested = request.query_params.get('gaushala')
    if requested:
        try:
            requested = int(requested)
        except ValueError:
            return False
        if accessible is not None and requested not in accessible:
            return False
        return (requested,)
    if accessible is None:
        return None
    return tuple(sorted(accessible))


def _date_window(request):
    today = timezone.localdate()
    end_date = parse_date(request.query_params.get('end_date')) or today
    start_date = parse_date(request.query_params.get('start_date')) or end_date - timedelta(days=DEFAULT_ANALYTICS_DAYS - 1)
    return start_date, end_date


@cached_query(cache_ttl=DASHBOARD_CACHE_TTL, key_prefix="dashboard")
def get_dashboard_data(gaushala_ids, today):
    """Headline figures for the dashboard"""
    now = timezone.now()

    cattle = _scope(Cattle.objects.all(), gaushala_ids).aggregate(
        total=Count('id'),
        active=Count('id', filter=Q(is_active=True)),
        milking=Count('id', filter=Q(is_active=True, milking_status='MILKING')),
        pregnant=Count('id', filter=Q(is_active=True, pregnancy_status='PREGNANT')),
    )

    sheds = list(
        _scope(Shed.objects.all(), gaushala_ids).annotate(
            occupancy=Count('cattle', filter=Q(cattle__is_active=True))
        )
    )
    active_sheds = [shed for shed in sheds if shed.status == 'ACTIVE']
    total_capacity = sum(shed.capacity for shed in active_sheds)
    total_occupancy = sum(shed.current_occupancy for shed in active_sheds)

    milk = _scope(MilkRecord.objects.all(), gaushala_ids)
    milk_today = milk.filter(record_date=today).aggregate(total=Sum('milk_quantity'))['total']
    milk_30_days = milk.filter(
        record_date__gt=today - timedelta(days=DEFAULT_ANALYTICS_DAYS), record_date__lte=today
    ).aggregate(total=Sum('milk_quantity'))['total']

    medicines = _scope(Medicine.objects.all(), gaushala_ids)

    return {
        'date': today.isoformat(),
        'cattle': cattle,
        'sheds': {
            'total': len(sheds),
            'active': len(active_sheds),
            'total_capacity': total_capacity,
            'total_occupancy': total_occupancy,
            'available_space': max(total_capacity - total_occupancy, 0),
            'occupancy_percentage': round(total_occupancy * 100.0 / total_capacity, 1) if total_capacity else 0.0,
        },
        'milk': {
            'today': milk_today or Decimal('0'),
            'last_30_days': milk_30_days or Decimal('0'),
        },
        'medicines': {
            'total': medicines.count(),
            'expired': medicines.filter(expiry_date__lt=now).count(),
            'low_stock': medicines.filter(quantity__lt=MEDICINE_LOW_STOCK_THRESHOLD).count(),
        },
        'inventory': {
            'low_stock': _scope(InventoryItem.objects.all(), gaushala_ids).filter(
                quantity__lte=F('minimum_stock_level')
            ).count(),
        },
        'health': {
            'pending_vaccinations': _scope(HealthRecord.objects.all(), gaushala_ids).filter(
                next_vaccination_date__lte=today, cattle__is_active=True
            ).count(),
        },
        'rfid': {
            'scans_today': _scope(RFIDScan.objects.all(), gaushala_ids).filter(scan_timestamp__date=today).count(),
        },
    }


@cached_query(cache_ttl=REPORTS_CACHE_TTL, key_prefix="reports")
def get_milk_analytics(gaushala_ids, start_date, end_date):
    records = _scope(MilkRecord.objects.all(), gaushala_ids).filter(
        record_date__range=(start_date, end_date)
    ).order_by()

    summary = records.aggregate(
        total_quantity=Sum('milk_quantity'),
        average_fat=Avg('fat_percentage'),
        average_snf=Avg('snf'),
        record_count=Count('id'),
    )
    daily = records.values('record_date').annotate(
        total_quantity=Sum('milk_quantity'), record_count=Count('id')
    ).order_by('record_date')
    by_shed = records.values('shed_number').annotate(
        total_quantity=Sum('milk_quantity'), record_count=Count('id')
    ).order_by('-total_quantity', 'shed_number')
    quality = records.values('status').annotate(record_count=Count('id')).order_by('status')

    return {
        'start_date': start_date.isoformat(),
        'end_date': end_date.isoformat(),
        'summary': {
            'total_quantity': summary['total_quantity'] or Decimal('0'),
            'average_fat': round(summary['average_fat'], 2) if summary['average_fat'] is not None else None,
            'average_snf': round(summary['average_snf'], 2) if summary['average_snf'] is not None else None,
            'record_count': summary['record_count'],
        },
        'daily': [
            {'date': row['record_date'].isoformat(), 'total_quantity': row['total_quantity'], 'record_count': row['record_count']}
            for row in daily
        ],
        'by_shed': list(by_shed),
        'quality': [
            {'status': row['status'] or 'UNGRADED', 'record_count': row['record_count']}
            for row in quality
        ],
    }


@cached_query(cache_ttl=REPORTS_CACHE_TTL, key_prefix="reports")
def get_rfid_analytics(gaushala_ids, start_date, end_date):
    scans = _scope(RFIDScan.objects.all(), gaushala_ids).filter(
        scan_timestamp__date__gte=start_date, scan_timestamp__date__lte=end_date
    ).order_by()

    daily = scans.annotate(day=TruncDate('scan_timestamp')).values('day').annotate(
        scan_count=Count('id'), unique_tags=Count('tag_id_hex', distinct=True)
    ).order_by('day')
    top_tags = scans.values('tag_id_hex').annotate(scan_count=Count('id')).order_by('-scan_count', 'tag_id_hex')[:10]

    return {
        'start_date': start_date.isoformat(),
        'end_date': end_date.isoformat(),
        'total_scans': scans.count(),
        'unknown_tag_scans': scans.filter(cattle__isnull=True).count(),
        'daily': [
            {'date': row['day'].isoformat(), 'scan_count': row['scan_count'], 'unique_tags': row['unique_tags']}
            for row in daily
        ],
        'top_tags': list(top_tags),
    }


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard_summary(request):
    """Dashboard figures across the caller's gaushalas (or ``?gaushala=``)"""
    gaushala_ids = _gaushala_scope(request)
    if gaushala_ids is False:
        return Response({'error': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)
    return Response(get_dashboard_data(gaushala_ids, timezone.localdate()))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def milk_analytics(request):
    """Daily, per-shed and quality breakdown of milk production (default: last 30 days)"""
    gaushala_ids = _gaushala_scope(request)
    if gaushala_ids is False:
        return Response({'error': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)
    start_date, end_date = _date_window(request)
    if start_date > end_date:
        return Response({'error': 'start_date must not be after end_date'}, status=status.HTTP_400_BAD_REQUEST)
    return Response(get_milk_analytics(gaushala_ids, start_date, end_date))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def rfid_analytics(request):
    """Daily RFID scan counts (default: last 30 days)"""
    gaushala_ids = _gaushala_scope(request)
    if gaushala_ids is False:
        return Response({'error': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)
    start_date, end_date = _date_window(request)
    if start_date > end_date:
        return Response({'error': 'start_date must not be after end_date'}, status=status.HTTP_400_BAD_REQUEST)
    return Response(get_rfid_analytics(gaushala_ids, start_date, end_date))
