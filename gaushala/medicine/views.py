import logging
from decimal import Decimal, InvalidOperation
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
from django.utils import timezone
from gaushala.access.permissions import filter_by_gaushala_access, has_gaushala_access
from gaushala.core.utils import create_audit_log, paginate
from .models import Medicine
from .serializers import MedicineSerializer

logger = logging.getLogger('gaushala.medicine')

DEFAULT_LOW_STOCK_THRESHOLD = Decimal('10')


def get_medicine_queryset(request):
    queryset = Medicine.objects.select_related('gaushala')
    queryset = filter_by_gaushala_access(queryset, request.user)
    gaushala_id = request.query_params.get('gaushala')
    if gaushala_id:
        queryset = queryset.filter(gaushala_id=gaushala_id)
    return queryset


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def medicine_list_create(request):
    """List medicines or add a new one"""
    if request.method == 'GET':
        data, _ = paginate(request, get_medicine_queryset(request), MedicineSerializer)
        return Response(data)

    serializer = MedicineSerializer(data=request.data)
    if serializer.is_valid():
        gaushala = serializer.validated_data['gaushala']
        if not has_gaushala_access(request.user, gaushala.id):
            return Response({'error': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)
        medicine = serializer.save()
        create_audit_log(
            request=request,
            action='create',
            model_name='Medicine',
            object_id=medicine.id,
            object_name=medicine.name,
            object_reference=medicine.batch_number or None,
            changes={'quantity': str(medicine.quantity)},
        )
        return Response(MedicineSerializer(medicine).data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def medicine_detail(request, pk):
    """Retrieve, update or delete a medicine"""
    medicine = get_object_or_404(get_medicine_queryset(request), pk=pk)

    if request.method == 'GET':
        return Response(MedicineSerializer(medicine).data)
    elif request.method in ('PUT', 'PATCH'):
        old_quantity = medicine.quantity
        serializer = MedicineSerializer(medicine, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            gaushala = serializer.validated_data.get('gaushala', medicine.gaushala)
            if not has_gaushala_access(request.user, gaushala.id):
                return Response({'error': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)
            medicine = serializer.save()
            if medicine.quantity != old_quantity:
                create_audit_log(
                    request=request,
                    action='update',
                    model_name='Medicine',
                    object_id=medicine.id,
                    object_name=medicine.name,
                    object_reference=medicine.batch_number or None,
                    changes={'quantity': {'from': str(old_quantity), 'to': str(medicine.quantity)}},
                )
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        create_audit_log(
            request=request,
            action='delete',
            model_name='Medicine',
            object_id=medicine.id,
            object_name=medicine.name,
            object_reference=medicine.batch_number or None,
        )
        medicine.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def medicine_search(request):
    """Medicines whose name contains ``name``"""
    name = request.query_params.get('name', '').strip()
    if not name:
        return Response({'error': 'name parameter is required'}, status=status.HTTP_400_BAD_REQUEST)
    medicines = get_medicine_queryset(request).filter(name__icontains=name)
    return Response(MedicineSerializer(medicines, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def medicine_expired(request):
    """Medicines past their expiry date"""
    medicines = get_medicine_queryset(request).filter(expiry_date__lt=timezone.now()).order_by('expiry_date')
    return Response(MedicineSerializer(medicines, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def medicine_low_stock(request):
    """Medicines with quantity below ``threshold`` (default 10)"""
    try:
        threshold = Decimal(request.query_params.get('threshold', DEFAULT_LOW_STOCK_THRESHOLD))
    except InvalidOperation:
        return Response({'error': 'threshold must be a number'}, status=status.HTTP_400_BAD_REQUEST)
    medicines = get_medicine_queryset(request).filter(quantity__lt=threshold).order_by('quantity', 'name')
    return Response(MedicineSerializer(medicines, many=True).data)
