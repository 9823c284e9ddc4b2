import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
from django.db import IntegrityError
from gaushala.access.permissions import (
    filter_by_gaushala_access, has_gaushala_access, is_gaushala_admin
)
from gaushala.core.model_cache import get_cached_master_list
from gaushala.core.utils import create_audit_log
from .models import Gaushala, Location
from .serializers import GaushalaSerializer, LocationSerializer

logger = logging.getLogger('gaushala.locations')


# Gaushala views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def gaushala_list_create(request):
    """List accessible gaushalas or create a new one (create requires admin)"""
    if request.method == 'GET':
        gaushalas = filter_by_gaushala_access(Gaushala.objects.all(), request.user, field='id')
        active = request.query_params.get('is_active')
        if active is not None:
            gaushalas = gaushalas.filter(is_active=active.lower() == 'true')
        serializer = GaushalaSerializer(gaushalas, many=True)
        return Response(serializer.data)

    if not is_gaushala_admin(request.user):
        logger.warning(f"User {request.user.username} attempted to create a gaushala without admin rights")
        return Response({'error': 'Only administrators can create gaushalas'}, status=status.HTTP_403_FORBIDDEN)

    serializer = GaushalaSerializer(data=request.data)
    if serializer.is_valid():
        try:
            gaushala = serializer.save()
        except IntegrityError:
            return Response({'registration_number': ['A gaushala with this registration number already exists']},
                            status=status.HTTP_400_BAD_REQUEST)
        create_audit_log(
            request=request,
            action='create',
            model_name='Gaushala',
            object_id=gaushala.id,
            object_name=gaushala.name,
            object_reference=gaushala.registration_number,
        )
        logger.info(f"Gaushala created: {gaushala.name} (ID: {gaushala.id})")
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def gaushala_detail(request, pk):
    """Retrieve, update or delete a gaushala"""
    gaushala = get_object_or_404(Gaushala, pk=pk)
    if not has_gaushala_access(request.user, gaushala.id):
        return Response({'error': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)

    if request.method == 'GET':
        serializer = GaushalaSerializer(gaushala)
        return Response(serializer.data)

    if not is_gaushala_admin(request.user):
        return Response({'error': 'Only administrators can modify gaushalas'}, status=status.HTTP_403_FORBIDDEN)

    if request.method in ('PUT', 'PATCH'):
        serializer = GaushalaSerializer(gaushala, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        create_audit_log(
            request=request,
            action='delete',
            model_name='Gaushala',
            object_id=gaushala.id,
            object_name=gaushala.name,
            object_reference=gaushala.registration_number,
        )
        gaushala.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


# Location views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def location_list_create(request):
    """List all acquisition locations or create a new one"""
    if request.method == 'GET':
        data = get_cached_master_list('locations', Location.objects.all(), LocationSerializer,
                                      force_refresh=request.query_params.get('refresh') == 'true')
        return Response(data)

    serializer = LocationSerializer(data=request.data)
    if serializer.is_valid():
        serializer.save()
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def location_detail(request, pk):
    """Retrieve, update or delete an acquisition location"""
    location = get_object_or_404(Location, pk=pk)

    if request.method == 'GET':
        return Response(LocationSerializer(location).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = LocationSerializer(location, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        location.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)
