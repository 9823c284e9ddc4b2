import logging
from decimal import Decimal
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
from django.db.models import Sum, Avg, Count
from gaushala.access.permissions import filter_by_gaushala_access, has_gaushala_access
from gaushala.core.utils import create_audit_log, paginate, parse_date
from .filters import MilkRecordFilter
from .models import MilkRecord
from .serializers import (
    MilkRecordSerializer, TableLayoutSerializer, ColumnKeySerializer,
    ColumnReorderSerializer, SortToggleSerializer,
)
from .table import (
    InvalidColumnError, InvalidSortError, ColumnLayout, ColumnDrag,
    build_table, parse_sort_param, render_row, sort_indicators, toggle_sort,
)
from .utils import load_table_layout, save_table_layout, layout_payload

logger = logging.getLogger('gaushala.production')


def get_milk_queryset(request):
    queryset = MilkRecord.objects.select_related('gaushala', 'cattle', 'created_by', 'updated_by')
    return filter_by_gaushala_access(queryset, request.user)


def _decimal(value):
    return value if value is not None else Decimal('0')


# Milk record views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def milk_record_list_create(request):
    """
    List milk records as a table or create a new record

    GET params: django-filter fields (gaushala, shed_number, status, session,
    start_date, end_date), ``q`` search query and ``sort`` (e.g.
    ``shed_number,-quantity``). Without ``sort`` the user's saved sort applies.
    """
    if request.method == 'GET':
        filterset = MilkRecordFilter(request.query_params, queryset=get_milk_queryset(request))
        if not filterset.is_valid():
            return Response(filterset.errors, status=status.HTTP_400_BAD_REQUEST)
        queryset = filterset.qs

        row, layout, sort_spec = load_table_layout(request.user)
        sort_param = request.query_params.get('sort')
        if sort_param is not None:
            try:
                sort_spec = parse_sort_param(sort_param)
            except (InvalidColumnError, InvalidSortError) as e:
                return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        query = request.query_params.get('q', '').strip()
        if query or sort_spec:
            records = build_table(queryset, query, sort_spec)
        else:
            records = queryset

        visible_keys = layout.visible_keys()
        data, page_obj = paginate(request, records, MilkRecordSerializer, extra={
            'columns': layout.visible_columns(),
            'sort': sort_spec,
            'sort_indicators': sort_indicators(sort_spec),
            'query': query,
        })
        for item, record in zip(data['results'], page_obj.object_list):
            item['cells'] = render_row(record, visible_keys)
        return Response(data)

    serializer = MilkRecordSerializer(data=request.data)
    if serializer.is_valid():
        gaushala = serializer.validated_data['gaushala']
        if not has_gaushala_access(request.user, gaushala.id):
            return Response({'error': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)
        record = serializer.save(created_by=request.user, updated_by=request.user)
        create_audit_log(
            request=request,
            action='create',
            model_name='MilkRecord',
            object_id=record.id,
            object_name=f"Shed {record.shed_number}",
            object_reference=str(record.record_date),
            changes={'milk_quantity': str(record.milk_quantity), 'session': record.session},
        )
        logger.info(f"Milk record created: {record.milk_quantity}L for shed {record.shed_number} on {record.record_date}")
        return Response(MilkRecordSerializer(record).data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def milk_record_detail(request, pk):
    """Retrieve, update or delete a milk record"""
    record = get_object_or_404(get_milk_queryset(request), pk=pk)

    if request.method == 'GET':
        return Response(MilkRecordSerializer(record).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = MilkRecordSerializer(record, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            gaushala = serializer.validated_data.get('gaushala', record.gaushala)
            if not has_gaushala_access(request.user, gaushala.id):
                return Response({'error': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)
            changes = {
                field: str(value) for field, value in serializer.validated_data.items()
                if getattr(record, field) != value
            }
            record = serializer.save(updated_by=request.user)
            if changes:
                create_audit_log(
                    request=request,
                    action='update',
                    model_name='MilkRecord',
                    object_id=record.id,
                    object_name=f"Shed {record.shed_number}",
                    object_reference=str(record.record_date),
                    changes=changes,
                )
            return Response(MilkRecordSerializer(record).data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        create_audit_log(
            request=request,
            action='delete',
            model_name='MilkRecord',
            object_id=record.id,
            object_name=f"Shed {record.shed_number}",
            object_reference=str(record.record_date),
        )
        record.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def milk_records_by_shed(request, shed_number):
    """Milk records of one shed, newest first"""
    queryset = get_milk_queryset(request).filter(shed_number__iexact=shed_number)
    gaushala_id = request.query_params.get('gaushala')
    if gaushala_id:
        queryset = queryset.filter(gaushala_id=gaushala_id)
    data, _ = paginate(request, queryset, MilkRecordSerializer)
    return Response(data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def milk_records_by_date_range(request):
    """Milk records between start_date and end_date (inclusive)"""
    start_date = parse_date(request.query_params.get('start_date'))
    end_date = parse_date(request.query_params.get('end_date'))
    if not start_date or not end_date:
        return Response({'error': 'start_date and end_date are required (YYYY-MM-DD)'},
                        status=status.HTTP_400_BAD_REQUEST)
    if start_date > end_date:
        return Response({'error': 'start_date must not be after end_date'}, status=status.HTTP_400_BAD_REQUEST)

    queryset = get_milk_queryset(request).filter(record_date__range=(start_date, end_date))
    gaushala_id = request.query_params.get('gaushala')
    if gaushala_id:
        queryset = queryset.filter(gaushala_id=gaushala_id)
    data, _ = paginate(request, queryset, MilkRecordSerializer)
    return Response(data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def milk_total_quantity(request):
    """
    Total milk collected, overall and per shed

    Optional params: start_date, end_date, gaushala, shed_number.
    """
    queryset = get_milk_queryset(request)
    start_date = parse_date(request.query_params.get('start_date'))
    end_date = parse_date(request.query_params.get('end_date'))
    if start_date:
        queryset = queryset.filter(record_date__gte=start_date)
    if end_date:
        queryset = queryset.filter(record_date__lte=end_date)
    gaushala_id = request.query_params.get('gaushala')
    if gaushala_id:
        queryset = queryset.filter(gaushala_id=gaushala_id)
    shed_number = request.query_params.get('shed_number')
    if shed_number:
        queryset = queryset.filter(shed_number__iexact=shed_number)

    total = queryset.aggregate(total=Sum('milk_quantity'))['total']
    by_shed = (
        queryset.order_by()
        .values('shed_number')
        .annotate(total_quantity=Sum('milk_quantity'), record_count=Count('id'))
        .order_by('shed_number')
    )
    return Response({
        'start_date': start_date,
        'end_date': end_date,
        'total_quantity': _decimal(total),
        'by_shed': list(by_shed),
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def milk_stats(request):
    """Total quantity, average fat and SNF and record count for the filtered records"""
    filterset = MilkRecordFilter(request.query_params, queryset=get_milk_queryset(request))
    if not filterset.is_valid():
        return Response(filterset.errors, status=status.HTTP_400_BAD_REQUEST)
    stats = filterset.qs.aggregate(
        total_quantity=Sum('milk_quantity'),
        average_fat=Avg('fat_percentage'),
        average_snf=Avg('snf'),
        record_count=Count('id'),
    )
    return Response({
        'total_quantity': _decimal(stats['total_quantity']),
        'average_fat': round(stats['average_fat'], 2) if stats['average_fat'] is not None else None,
        'average_snf': round(stats['average_snf'], 2) if stats['average_snf'] is not None else None,
        'record_count': stats['record_count'],
    })


# Table layout views
def _log_layout_change(request, row, change):
    create_audit_log(
        request=request,
        action='layout_change',
        model_name='TableLayout',
        object_id=row.id,
        object_name=row.table_key,
        object_reference=row.version,
        changes=change,
    )


@api_view(['GET', 'PUT'])
@permission_classes([IsAuthenticated])
def milk_table_layout(request):
    """Get or replace the current user's milk table layout"""
    row, layout, sort_spec = load_table_layout(request.user)
    if request.method == 'GET':
        return Response(layout_payload(layout, sort_spec))

    serializer = TableLayoutSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    layout = ColumnLayout(serializer.validated_data['columns'])
    if 'sort' in serializer.validated_data:
        sort_spec = serializer.validated_data['sort']
    save_table_layout(row, layout, sort_spec)
    _log_layout_change(request, row, {'replace': layout.visible_keys()})
    return Response(layout_payload(layout, sort_spec))


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def milk_table_toggle_column(request):
    """Show or hide one column"""
    serializer = ColumnKeySerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    key = serializer.validated_data['key']
    row, layout, sort_spec = load_table_layout(request.user)
    visible = layout.toggle_visibility(key)
    save_table_layout(row, layout)
    _log_layout_change(request, row, {'column': key, 'visible': visible})
    return Response(layout_payload(layout, sort_spec))


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def milk_table_reset(request):
    """Restore the default column visibility and order"""
    row, layout, sort_spec = load_table_layout(request.user)
    layout.reset()
    save_table_layout(row, layout)
    _log_layout_change(request, row, {'reset': True})
    return Response(layout_payload(layout, sort_spec))


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def milk_table_reorder(request):
    """Drop the dragged ``source`` column onto ``target``, swapping their positions"""
    serializer = ColumnReorderSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    source = serializer.validated_data['source']
    target = serializer.validated_data['target']

    row, layout, sort_spec = load_table_layout(request.user)
    drag = ColumnDrag(layout)
    drag.start(source)
    drag.drag_over(target)
    if drag.drop(target):
        save_table_layout(row, layout)
        _log_layout_change(request, row, {'source': source, 'target': target})
    return Response(layout_payload(layout, sort_spec))


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def milk_table_toggle_sort(request):
    """Header click on a column; ``multi`` adds it to the existing sort keys"""
    serializer = SortToggleSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    row, layout, sort_spec = load_table_layout(request.user)
    sort_spec = toggle_sort(
        sort_spec, serializer.validated_data['column'], multi=serializer.validated_data['multi']
    )
    save_table_layout(row, sort_spec=sort_spec)
    return Response(layout_payload(layout, sort_spec))


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def milk_table_clear_sort(request):
    """Drop every sort key"""
    row, layout, _ = load_table_layout(request.user)
    save_table_layout(row, sort_spec=[])
    return Response(layout_payload(layout, []))
