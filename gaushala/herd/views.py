import logging
from datetime import timedelta
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
from django.db.models import ProtectedError
from django.utils import timezone
from gaushala.access.permissions import filter_by_gaushala_access, has_gaushala_access, is_gaushala_admin
from gaushala.core.model_cache import get_cached_master_list
from gaushala.core.utils import create_audit_log, paginate, parse_date
from .filters import CattleFilter, HealthRecordFilter
from .models import Breed, Species, Gender, Color, Cattle, HealthRecord
from .serializers import (
    BreedSerializer, SpeciesSerializer, GenderSerializer, ColorSerializer,
    CattleSerializer, CattleBriefSerializer, HealthRecordSerializer,
)

logger = logging.getLogger('gaushala.herd')

UPCOMING_CHECKUP_DAYS = 30


# Master data views
def _master_list_create(request, name, model, serializer_class):
    if request.method == 'GET':
        data = get_cached_master_list(name, model.objects.all(), serializer_class,
                                      force_refresh=request.query_params.get('refresh') == 'true')
        return Response(data)

    if not is_gaushala_admin(request.user):
        return Response({'error': 'Only administrators can change master data'}, status=status.HTTP_403_FORBIDDEN)
    serializer = serializer_class(data=request.data)
    if serializer.is_valid():
        serializer.save()
        logger.info(f"Master data created in {name}: {serializer.data.get('name')}")
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


def _master_detail(request, pk, model, serializer_class):
    obj = get_object_or_404(model, pk=pk)
    if request.method == 'GET':
        return Response(serializer_class(obj).data)

    if not is_gaushala_admin(request.user):
        return Response({'error': 'Only administrators can change master data'}, status=status.HTTP_403_FORBIDDEN)
    if request.method in ('PUT', 'PATCH'):
        serializer = serializer_class(obj, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        try:
            obj.delete()
        except ProtectedError:
            return Response({'error': f'{obj} is still referenced by cattle and cannot be deleted'},
                            status=status.HTTP_400_BAD_REQUEST)
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def breed_list_create(request):
    """List all breeds or create a new breed"""
    return _master_list_create(request, 'breeds', Breed, BreedSerializer)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def breed_detail(request, pk):
    return _master_detail(request, pk, Breed, BreedSerializer)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def species_list_create(request):
    """List all species or create a new species"""
    return _master_list_create(request, 'species', Species, SpeciesSerializer)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def species_detail(request, pk):
    return _master_detail(request, pk, Species, SpeciesSerializer)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def gender_list_create(request):
    """List all genders or create a new gender"""
    return _master_list_create(request, 'genders', Gender, GenderSerializer)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def gender_detail(request, pk):
    return _master_detail(request, pk, Gender, GenderSerializer)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def color_list_create(request):
    """List all colours or create a new colour"""
    return _master_list_create(request, 'colors', Color, ColorSerializer)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def color_detail(request, pk):
    return _master_detail(request, pk, Color, ColorSerializer)


# Cattle views
def get_cattle_queryset(request):
    queryset = Cattle.objects.select_related('gaushala', 'breed', 'species', 'gender', 'color', 'source', 'shed')
    return filter_by_gaushala_access(queryset, request.user)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def cattle_list_create(request):
    """List cattle (paged, filterable) or register a new animal"""
    if request.method == 'GET':
        filterset = CattleFilter(request.query_params, queryset=get_cattle_queryset(request))
        if not filterset.is_valid():
            return Response(filterset.errors, status=status.HTTP_400_BAD_REQUEST)
        data, _ = paginate(request, filterset.qs, CattleSerializer)
        return Response(data)

    serializer = CattleSerializer(data=request.data)
    if serializer.is_valid():
        gaushala = serializer.validated_data['gaushala']
        if not has_gaushala_access(request.user, gaushala.id):
            return Response({'error': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)
        cattle = serializer.save()
        create_audit_log(
            request=request,
            action='create',
            model_name='Cattle',
            object_id=cattle.id,
            object_name=cattle.name,
            object_reference=cattle.unique_animal_id,
        )
        logger.info(f"Cattle registered: {cattle.unique_animal_id} ({cattle.name}) in gaushala {gaushala.id}")
        return Response(CattleSerializer(cattle).data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def cattle_detail(request, pk):
    """Retrieve, update or delete a cattle record"""
    cattle = get_object_or_404(get_cattle_queryset(request), pk=pk)

    if request.method == 'GET':
        return Response(CattleSerializer(cattle).data)
    elif request.method in ('PUT', 'PATCH'):
        old_shed = cattle.shed.shed_number if cattle.shed else None
        serializer = CattleSerializer(cattle, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            gaushala = serializer.validated_data.get('gaushala', cattle.gaushala)
            if not has_gaushala_access(request.user, gaushala.id):
                return Response({'error': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)
            cattle = serializer.save()
            changes = {'fields': sorted(serializer.validated_data.keys())}
            new_shed = cattle.shed.shed_number if cattle.shed else None
            if old_shed != new_shed:
                changes['shed'] = {'from': old_shed, 'to': new_shed}
                logger.info(f"Cattle {cattle.unique_animal_id} moved from shed {old_shed} to {new_shed}")
            create_audit_log(
                request=request,
                action='update',
                model_name='Cattle',
                object_id=cattle.id,
                object_name=cattle.name,
                object_reference=cattle.unique_animal_id,
                changes=changes,
            )
            return Response(CattleSerializer(cattle).data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        create_audit_log(
            request=request,
            action='delete',
            model_name='Cattle',
            object_id=cattle.id,
            object_name=cattle.name,
            object_reference=cattle.unique_animal_id,
        )
        cattle.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def cattle_by_rfid(request, tag):
    """Look up an animal by its RFID tag number (case-insensitive)"""
    cattle = get_object_or_404(get_cattle_queryset(request), rfid_tag_no=tag.strip().upper())
    return Response(CattleSerializer(cattle).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def cattle_by_shed(request, shed_number):
    """Cattle housed in a shed; ``include_inactive=true`` lists departed animals too"""
    queryset = get_cattle_queryset(request).filter(shed__shed_number__iexact=shed_number)
    gaushala_id = request.query_params.get('gaushala')
    if gaushala_id:
        queryset = queryset.filter(gaushala_id=gaushala_id)
    if request.query_params.get('include_inactive') != 'true':
        queryset = queryset.filter(is_active=True)
    return Response(CattleBriefSerializer(queryset, many=True).data)


# Health record views
def get_health_queryset(request):
    queryset = HealthRecord.objects.select_related('cattle', 'created_by')
    return filter_by_gaushala_access(queryset, request.user)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def health_record_list_create(request):
    """List health records or add one"""
    if request.method == 'GET':
        filterset = HealthRecordFilter(request.query_params, queryset=get_health_queryset(request))
        if not filterset.is_valid():
            return Response(filterset.errors, status=status.HTTP_400_BAD_REQUEST)
        data, _ = paginate(request, filterset.qs, HealthRecordSerializer)
        return Response(data)

    serializer = HealthRecordSerializer(data=request.data)
    if serializer.is_valid():
        cattle = serializer.validated_data['cattle']
        if not has_gaushala_access(request.user, cattle.gaushala_id):
            return Response({'error': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)
        record = serializer.save(created_by=request.user)
        create_audit_log(
            request=request,
            action='create',
            model_name='HealthRecord',
            object_id=record.id,
            object_name=cattle.name,
            object_reference=cattle.unique_animal_id,
            changes={'record_type': record.record_type, 'record_date': str(record.record_date)},
        )
        return Response(HealthRecordSerializer(record).data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def health_record_detail(request, pk):
    """Retrieve, update or delete a health record"""
    record = get_object_or_404(get_health_queryset(request), pk=pk)

    if request.method == 'GET':
        return Response(HealthRecordSerializer(record).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = HealthRecordSerializer(record, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            cattle = serializer.validated_data.get('cattle', record.cattle)
            if not has_gaushala_access(request.user, cattle.gaushala_id):
                return Response({'error': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        create_audit_log(
            request=request,
            action='delete',
            model_name='HealthRecord',
            object_id=record.id,
            object_name=record.cattle.name,
            object_reference=record.cattle.unique_animal_id,
        )
        record.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def health_records_by_cattle(request, cattle_id):
    """Full health history of one animal, newest first"""
    cattle = get_object_or_404(get_cattle_queryset(request), pk=cattle_id)
    records = get_health_queryset(request).filter(cattle=cattle)
    return Response(HealthRecordSerializer(records, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def pending_vaccinations(request):
    """Vaccinations due on or before today"""
    today = timezone.localdate()
    records = get_health_queryset(request).filter(
        next_vaccination_date__isnull=False,
        next_vaccination_date__lte=today,
        cattle__is_active=True,
    ).order_by('next_vaccination_date')
    gaushala_id = request.query_params.get('gaushala')
    if gaushala_id:
        records = records.filter(gaushala_id=gaushala_id)
    return Response(HealthRecordSerializer(records, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def upcoming_checkups(request):
    """Checkups scheduled from today through the next ``days`` days (default 30)"""
    try:
        days = int(request.query_params.get('days', UPCOMING_CHECKUP_DAYS))
    except (TypeError, ValueError):
        return Response({'error': 'days must be an integer'}, status=status.HTTP_400_BAD_REQUEST)
    today = timezone.localdate()
    records = get_health_queryset(request).filter(
        next_checkup_date__range=(today, today + timedelta(days=max(days, 0))),
        cattle__is_active=True,
    ).order_by('next_checkup_date')
    gaushala_id = request.query_params.get('gaushala')
    if gaushala_id:
        records = records.filter(gaushala_id=gaushala_id)
    return Response(HealthRecordSerializer(records, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def health_records_by_date_range(request):
    """Health records between start_date and end_date (inclusive)"""
    start_date = parse_date(request.query_params.get('start_date'))
    end_date = parse_date(request.query_params.get('end_date'))
    if not start_date or not end_date:
        return Response({'error': 'start_date and end_date are required (YYYY-MM-DD)'},
                        status=status.HTTP_400_BAD_REQUEST)
    records = get_health_queryset(request).filter(record_date__range=(start_date, end_date))
    data, _ = paginate(request, records, HealthRecordSerializer)
    return Response(data)
