import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
from django.db.models import Count, Max, Min
from django.utils import timezone
from gaushala.access.permissions import filter_by_gaushala_access, has_gaushala_access
from gaushala.core.utils import create_audit_log, paginate, parse_date
from gaushala.herd.models import Cattle
from .models import RFIDScan
from .serializers import RFIDScanSerializer

logger = logging.getLogger('gaushala.rfid')


def get_scan_queryset(request):
    queryset = RFIDScan.objects.select_related('cattle', 'gaushala')
    queryset = filter_by_gaushala_access(queryset, request.user)
    gaushala_id = request.query_params.get('gaushala')
    if gaushala_id:
        queryset = queryset.filter(gaushala_id=gaushala_id)
    return queryset


def filter_scan_dates(queryset, start_date, end_date):
    if start_date:
        queryset = queryset.filter(scan_timestamp__date__gte=start_date)
    if end_date:
        queryset = queryset.filter(scan_timestamp__date__lte=end_date)
    return queryset


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def rfid_scan_list_create(request):
    """List scans (newest first) or record a scan from a reader"""
    if request.method == 'GET':
        data, _ = paginate(request, get_scan_queryset(request), RFIDScanSerializer)
        return Response(data)

    serializer = RFIDScanSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    tag = serializer.validated_data['tag_id_hex']
    cattle = Cattle.objects.filter(rfid_tag_no=tag).select_related('gaushala').first()
    gaushala = serializer.validated_data.get('gaushala') or (cattle.gaushala if cattle else None)
    if gaushala is None:
        return Response({'gaushala': ['Gaushala is required for tags not linked to any cattle']},
                        status=status.HTTP_400_BAD_REQUEST)
    if not has_gaushala_access(request.user, gaushala.id):
        return Response({'error': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)

    scan = serializer.save(
        cattle=cattle,
        gaushala=gaushala,
        scan_timestamp=serializer.validated_data.get('scan_timestamp') or timezone.now(),
    )
    if cattle is None:
        logger.info(f"RFID tag {tag} scanned with no matching cattle")
    create_audit_log(
        request=request,
        action='rfid_scan',
        model_name='RFIDScan',
        object_id=scan.id,
        object_name=cattle.name if cattle else None,
        object_reference=tag,
    )
    return Response(RFIDScanSerializer(scan).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def rfid_scan_detail(request, pk):
    """Retrieve one scan"""
    scan = get_object_or_404(get_scan_queryset(request), pk=pk)
    return Response(RFIDScanSerializer(scan).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def rfid_scans_by_tag(request, tag):
    """All scans of a tag, newest first"""
    scans = get_scan_queryset(request).filter(tag_id_hex=tag.strip().upper())
    data, _ = paginate(request, scans, RFIDScanSerializer)
    return Response(data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def rfid_latest_scan(request, tag):
    """Most recent scan of a tag"""
    scan = get_scan_queryset(request).filter(tag_id_hex=tag.strip().upper()).order_by('-scan_timestamp', '-id').first()
    if scan is None:
        return Response({'error': f'No scans found for tag {tag.upper()}'}, status=status.HTTP_404_NOT_FOUND)
    return Response(RFIDScanSerializer(scan).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def rfid_scan_count(request, tag):
    """Number of scans recorded for a tag"""
    tag = tag.strip().upper()
    count = get_scan_queryset(request).filter(tag_id_hex=tag).count()
    return Response({'tag_id_hex': tag, 'count': count})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def rfid_scans_by_date_range(request):
    """Scans between start_date and end_date (inclusive, local dates)"""
    start_date = parse_date(request.query_params.get('start_date'))
    end_date = parse_date(request.query_params.get('end_date'))
    if not start_date or not end_date:
        return Response({'error': 'start_date and end_date are required (YYYY-MM-DD)'},
                        status=status.HTTP_400_BAD_REQUEST)
    scans = filter_scan_dates(get_scan_queryset(request), start_date, end_date)
    data, _ = paginate(request, scans, RFIDScanSerializer)
    return Response(data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def rfid_scan_stats(request):
    """
    Scan statistics, optionally limited to start_date/end_date

    The per-day average divides by the days in the requested range, or by the
    days spanned from the first to the last scan when no range is given.
    """
    start_date = parse_date(request.query_params.get('start_date'))
    end_date = parse_date(request.query_params.get('end_date'))
    scans = filter_scan_dates(get_scan_queryset(request), start_date, end_date)

    stats = scans.aggregate(
        total_scans=Count('id'),
        unique_tags=Count('tag_id_hex', distinct=True),
        first_scan_time=Min('scan_timestamp'),
        last_scan_time=Max('scan_timestamp'),
    )
    total = stats['total_scans']
    if start_date and end_date:
        days = (end_date - start_date).days + 1
    elif total:
        first_day = timezone.localtime(stats['first_scan_time']).date()
        last_day = timezone.localtime(stats['last_scan_time']).date()
        days = (last_day - first_day).days + 1
    else:
        days = 0

    return Response({
        'total_scans': total,
        'unique_tags': stats['unique_tags'],
        'last_scan_time': stats['last_scan_time'],
        'average_scans_per_day': round(total / days, 2) if days > 0 else 0.0,
    })
