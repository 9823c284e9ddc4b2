import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
from django.db.models import Q, F, ProtectedError
from gaushala.access.permissions import filter_by_gaushala_access, has_gaushala_access, is_gaushala_admin
from gaushala.core.model_cache import get_cached_master_list
from gaushala.core.utils import create_audit_log, paginate
from .models import InventoryType, InventoryUnit, InventoryItem, StockTransaction
from .serializers import (
    InventoryTypeSerializer, InventoryUnitSerializer, InventoryItemSerializer, StockTransactionSerializer
)
from .utils import InsufficientStockError, apply_stock_transaction

logger = logging.getLogger('gaushala.inventory')


# Inventory type / unit views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def inventory_type_list_create(request):
    """List all inventory types or create a new one"""
    if request.method == 'GET':
        data = get_cached_master_list('inventory_types', InventoryType.objects.all(), InventoryTypeSerializer,
                                      force_refresh=request.query_params.get('refresh') == 'true')
        return Response(data)

    if not is_gaushala_admin(request.user):
        return Response({'error': 'Only administrators can change master data'}, status=status.HTTP_403_FORBIDDEN)
    serializer = InventoryTypeSerializer(data=request.data)
    if serializer.is_valid():
        serializer.save()
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def inventory_unit_list_create(request):
    """List all inventory units or create a new one"""
    if request.method == 'GET':
        data = get_cached_master_list('inventory_units', InventoryUnit.objects.all(), InventoryUnitSerializer,
                                      force_refresh=request.query_params.get('refresh') == 'true')
        return Response(data)

    if not is_gaushala_admin(request.user):
        return Response({'error': 'Only administrators can change master data'}, status=status.HTTP_403_FORBIDDEN)
    serializer = InventoryUnitSerializer(data=request.data)
    if serializer.is_valid():
        serializer.save()
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


# Inventory item views
def get_item_queryset(request):
    queryset = InventoryItem.objects.select_related('gaushala', 'inventory_type', 'inventory_unit')
    return filter_by_gaushala_access(queryset, request.user)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def inventory_item_list_create(request):
    """List inventory items or add a new one"""
    if request.method == 'GET':
        items = get_item_queryset(request)
        gaushala_id = request.query_params.get('gaushala')
        if gaushala_id:
            items = items.filter(gaushala_id=gaushala_id)
        inventory_type = request.query_params.get('inventory_type')
        if inventory_type:
            items = items.filter(inventory_type_id=inventory_type)
        item_status = request.query_params.get('status')
        if item_status:
            items = items.filter(status=item_status.upper())
        search = request.query_params.get('search', '').strip()
        if search:
            items = items.filter(
                Q(item_name__icontains=search) | Q(supplier__icontains=search) | Q(location__icontains=search)
            )
        data, _ = paginate(request, items, InventoryItemSerializer)
        return Response(data)

    serializer = InventoryItemSerializer(data=request.data)
    if serializer.is_valid():
        gaushala = serializer.validated_data['gaushala']
        if not has_gaushala_access(request.user, gaushala.id):
            return Response({'error': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)
        item = serializer.save()
        create_audit_log(
            request=request,
            action='create',
            model_name='InventoryItem',
            object_id=item.id,
            object_name=item.item_name,
            changes={'quantity': str(item.quantity)},
        )
        return Response(InventoryItemSerializer(item).data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def inventory_item_detail(request, pk):
    """Retrieve, update or delete an inventory item"""
    item = get_object_or_404(get_item_queryset(request), pk=pk)

    if request.method == 'GET':
        return Response(InventoryItemSerializer(item).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = InventoryItemSerializer(item, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            gaushala = serializer.validated_data.get('gaushala', item.gaushala)
            if not has_gaushala_access(request.user, gaushala.id):
                return Response({'error': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        create_audit_log(
            request=request,
            action='delete',
            model_name='InventoryItem',
            object_id=item.id,
            object_name=item.item_name,
        )
        try:
            item.delete()
        except ProtectedError:
            return Response({'error': 'Item is referenced elsewhere and cannot be deleted'},
                            status=status.HTTP_400_BAD_REQUEST)
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def inventory_low_stock(request):
    """Items at or below their minimum stock level, out-of-stock included"""
    items = get_item_queryset(request).filter(quantity__lte=F('minimum_stock_level'))
    gaushala_id = request.query_params.get('gaushala')
    if gaushala_id:
        items = items.filter(gaushala_id=gaushala_id)
    items = items.order_by('quantity', 'item_name')
    return Response(InventoryItemSerializer(items, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def inventory_search(request):
    """Search items by name"""
    query = request.query_params.get('q', '').strip()
    if not query:
        return Response([])
    items = get_item_queryset(request).filter(item_name__icontains=query)[:50]
    return Response(InventoryItemSerializer(items, many=True).data)


# Stock transaction views
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def stock_history(request, item_id):
    """Stock movements of one item, newest first"""
    item = get_object_or_404(get_item_queryset(request), pk=item_id)
    movements = StockTransaction.objects.filter(item=item).select_related('item', 'performed_by')
    data, _ = paginate(request, movements, StockTransactionSerializer, extra={
        'item': InventoryItemSerializer(item).data,
    })
    return Response(data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def stock_transaction_create(request):
    """Record a stock IN or OUT against an item"""
    serializer = StockTransactionSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    item = serializer.validated_data['item']
    if not has_gaushala_access(request.user, item.gaushala_id):
        return Response({'error': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)

    transaction_type = serializer.validated_data['transaction_type']
    quantity = serializer.validated_data['quantity']
    try:
        movement = apply_stock_transaction(
            item.id,
            transaction_type,
            quantity,
            user=request.user,
            notes=serializer.validated_data.get('notes', ''),
            transaction_date=serializer.validated_data.get('transaction_date'),
        )
    except InsufficientStockError as e:
        logger.warning(str(e))
        return Response({'error': str(e), 'available': e.item.quantity}, status=status.HTTP_400_BAD_REQUEST)

    create_audit_log(
        request=request,
        action='stock_in' if transaction_type == 'IN' else 'stock_out',
        model_name='StockTransaction',
        object_id=movement.id,
        object_name=item.item_name,
        object_reference=str(item.id),
        changes={
            'transaction_type': transaction_type,
            'quantity': str(quantity),
            'balance_after': str(movement.balance_after),
        },
    )
    return Response(StockTransactionSerializer(movement).data, status=status.HTTP_201_CREATED)
