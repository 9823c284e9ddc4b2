import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
from django.db.models import Count, Q, F
from gaushala.access.permissions import filter_by_gaushala_access, has_gaushala_access
from gaushala.core.utils import create_audit_log, paginate
from gaushala.locations.models import Gaushala
from .models import Shed, OVERCROWDED_PERCENTAGE, WARNING_PERCENTAGE
from .serializers import ShedSerializer, ShedCapacitySerializer

logger = logging.getLogger('gaushala.sheds')


def get_shed_queryset(request):
    """Accessible sheds annotated with their active cattle count"""
    queryset = Shed.objects.select_related('gaushala').annotate(
        occupancy=Count('cattle', filter=Q(cattle__is_active=True))
    )
    return filter_by_gaushala_access(queryset, request.user)


def capacity_level(percentage):
    if percentage >= OVERCROWDED_PERCENTAGE:
        return 'OVERCROWDED'
    if percentage >= WARNING_PERCENTAGE:
        return 'WARNING'
    return 'NORMAL'


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def shed_list_create(request):
    """List sheds or create a new one"""
    if request.method == 'GET':
        sheds = get_shed_queryset(request)
        gaushala_id = request.query_params.get('gaushala')
        if gaushala_id:
            sheds = sheds.filter(gaushala_id=gaushala_id)
        shed_status = request.query_params.get('status')
        if shed_status:
            sheds = sheds.filter(status=shed_status.upper())
        shed_type = request.query_params.get('shed_type')
        if shed_type:
            sheds = sheds.filter(shed_type=shed_type.upper())
        search = request.query_params.get('search', '').strip()
        if search:
            sheds = sheds.filter(Q(shed_name__icontains=search) | Q(shed_number__icontains=search))
        data, _ = paginate(request, sheds, ShedSerializer)
        return Response(data)

    serializer = ShedSerializer(data=request.data)
    if serializer.is_valid():
        gaushala = serializer.validated_data['gaushala']
        if not has_gaushala_access(request.user, gaushala.id):
            return Response({'error': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)
        shed = serializer.save()
        create_audit_log(
            request=request,
            action='create',
            model_name='Shed',
            object_id=shed.id,
            object_name=shed.shed_name,
            object_reference=shed.shed_number,
        )
        logger.info(f"Shed created: {shed.shed_number} in gaushala {gaushala.id} (capacity {shed.capacity})")
        return Response(ShedSerializer(shed).data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def shed_detail(request, pk):
    """Retrieve, update or delete a shed"""
    shed = get_object_or_404(get_shed_queryset(request), pk=pk)

    if request.method == 'GET':
        return Response(ShedSerializer(shed).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = ShedSerializer(shed, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            gaushala = serializer.validated_data.get('gaushala', shed.gaushala)
            if not has_gaushala_access(request.user, gaushala.id):
                return Response({'error': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)
            serializer.save()
            create_audit_log(
                request=request,
                action='update',
                model_name='Shed',
                object_id=shed.id,
                object_name=shed.shed_name,
                object_reference=shed.shed_number,
                changes={'fields': sorted(serializer.validated_data.keys())},
            )
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        if shed.current_occupancy:
            return Response(
                {'error': f'Shed {shed.shed_number} still houses {shed.current_occupancy} active cattle'},
                status=status.HTTP_400_BAD_REQUEST,
            )
        create_audit_log(
            request=request,
            action='delete',
            model_name='Shed',
            object_id=shed.id,
            object_name=shed.shed_name,
            object_reference=shed.shed_number,
        )
        shed.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def sheds_by_gaushala(request, gaushala_id):
    """All sheds of one gaushala"""
    if not has_gaushala_access(request.user, gaushala_id):
        return Response({'error': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)
    sheds = get_shed_queryset(request).filter(gaushala_id=gaushala_id)
    return Response(ShedSerializer(sheds, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def sheds_by_status(request, shed_status):
    """Sheds in one status (ACTIVE, MAINTENANCE, INACTIVE)"""
    shed_status = shed_status.upper()
    if shed_status not in dict(Shed.STATUS_CHOICES):
        return Response({'error': f'Invalid shed status: {shed_status}'}, status=status.HTTP_400_BAD_REQUEST)
    sheds = get_shed_queryset(request).filter(status=shed_status)
    return Response(ShedSerializer(sheds, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def gaushala_available_capacity(request, gaushala_id):
    """Free places across the active sheds of a gaushala"""
    gaushala = get_object_or_404(Gaushala, pk=gaushala_id)
    if not has_gaushala_access(request.user, gaushala.id):
        return Response({'error': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)

    sheds = list(get_shed_queryset(request).filter(gaushala=gaushala, status='ACTIVE'))
    total_capacity = sum(shed.capacity for shed in sheds)
    total_occupancy = sum(shed.current_occupancy for shed in sheds)
    return Response({
        'gaushala_id': gaushala.id,
        'gaushala_name': gaushala.name,
        'active_sheds': len(sheds),
        'total_capacity': total_capacity,
        'total_occupancy': total_occupancy,
        'available_capacity': sum(shed.available_space for shed in sheds),
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def sheds_available_for_cattle(request):
    """Active sheds with at least one free place, most room first"""
    sheds = get_shed_queryset(request).filter(status='ACTIVE', occupancy__lt=F('capacity'))
    gaushala_id = request.query_params.get('gaushala')
    if gaushala_id:
        sheds = sheds.filter(gaushala_id=gaushala_id)
    shed_type = request.query_params.get('shed_type')
    if shed_type:
        sheds = sheds.filter(shed_type=shed_type.upper())
    sheds = sorted(sheds, key=lambda shed: (-shed.available_space, shed.shed_number))
    return Response(ShedCapacitySerializer(sheds, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def shed_capacity_dashboard(request):
    """
    Capacity utilisation per shed

    Sheds at or above OVERCROWDED_PERCENTAGE are flagged overcrowded, at or
    above WARNING_PERCENTAGE as warning.
    """
    sheds = get_shed_queryset(request)
    gaushala_id = request.query_params.get('gaushala')
    if gaushala_id:
        sheds = sheds.filter(gaushala_id=gaushala_id)

    rows = []
    overcrowded = 0
    warning = 0
    total_capacity = 0
    total_occupancy = 0
    for shed in sheds:
        row = ShedCapacitySerializer(shed).data
        level = capacity_level(shed.occupancy_ratio)
        row['capacity_level'] = level
        if level == 'OVERCROWDED':
            overcrowded += 1
        elif level == 'WARNING':
            warning += 1
        total_capacity += shed.capacity
        total_occupancy += shed.current_occupancy
        rows.append(row)

    return Response({
        'summary': {
            'total_sheds': len(rows),
            'total_capacity': total_capacity,
            'total_occupancy': total_occupancy,
            'available_space': max(total_capacity - total_occupancy, 0),
            'occupancy_percentage': round(total_occupancy * 100.0 / total_capacity, 1) if total_capacity else 0.0,
            'overcrowded_sheds': overcrowded,
            'warning_sheds': warning,
        },
        'thresholds': {'overcrowded': OVERCROWDED_PERCENTAGE, 'warning': WARNING_PERCENTAGE},
        'sheds': rows,
    })
