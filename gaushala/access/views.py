import logging
from django.contrib.auth import get_user_model
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
from gaushala.core.utils import create_audit_log
from .models import UserGaushalaAccess
from .permissions import IsGaushalaAdmin, is_gaushala_admin, has_gaushala_access
from .serializers import UserGaushalaAccessSerializer, AccessUserSerializer, AccessChangeSerializer

logger = logging.getLogger('gaushala.access')
User = get_user_model()


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsGaushalaAdmin])
def access_list(request):
    """Every access grant, with gaushala name and location"""
    grants = UserGaushalaAccess.objects.select_related('user', 'gaushala', 'granted_by')
    user_id = request.query_params.get('user')
    if user_id:
        grants = grants.filter(user_id=user_id)
    gaushala_id = request.query_params.get('gaushala')
    if gaushala_id:
        grants = grants.filter(gaushala_id=gaushala_id)
    return Response(UserGaushalaAccessSerializer(grants, many=True).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsGaushalaAdmin])
def access_grant(request):
    """Grant a user access to a gaushala; granting twice is a no-op"""
    serializer = AccessChangeSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    user = serializer.validated_data['user']
    gaushala = serializer.validated_data['gaushala']

    grant, created = UserGaushalaAccess.objects.get_or_create(
        user=user, gaushala=gaushala, defaults={'granted_by': request.user}
    )
    if created:
        create_audit_log(
            request=request,
            action='access_grant',
            model_name='UserGaushalaAccess',
            object_id=grant.id,
            object_name=user.username,
            object_reference=gaushala.name,
            changes={'user_id': user.id, 'gaushala_id': gaushala.id},
        )
        logger.info(f"Access granted: {user.username} -> {gaushala.name} by {request.user.username}")
    return Response(UserGaushalaAccessSerializer(grant).data,
                    status=status.HTTP_201_CREATED if created else status.HTTP_200_OK)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsGaushalaAdmin])
def access_revoke(request):
    """Revoke a user's access to a gaushala"""
    serializer = AccessChangeSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    grant = get_object_or_404(
        UserGaushalaAccess.objects.select_related('user', 'gaushala'),
        user=serializer.validated_data['user'],
        gaushala=serializer.validated_data['gaushala'],
    )
    create_audit_log(
        request=request,
        action='access_revoke',
        model_name='UserGaushalaAccess',
        object_id=grant.id,
        object_name=grant.user.username,
        object_reference=grant.gaushala.name,
        changes={'user_id': grant.user_id, 'gaushala_id': grant.gaushala_id},
    )
    logger.info(f"Access revoked: {grant.user.username} -> {grant.gaushala.name} by {request.user.username}")
    grant.delete()
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def access_check(request):
    """
    Whether a user can see a gaushala

    Non-admins may only check themselves; ``user`` defaults to the caller.
    """
    gaushala_id = request.query_params.get('gaushala')
    if not gaushala_id:
        return Response({'error': 'gaushala parameter is required'}, status=status.HTTP_400_BAD_REQUEST)
    user_id = request.query_params.get('user')
    if user_id and str(user_id) != str(request.user.id):
        if not is_gaushala_admin(request.user):
            return Response({'error': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)
        user = get_object_or_404(User, pk=user_id)
    else:
        user = request.user
    return Response({
        'user': user.id,
        'gaushala': int(gaushala_id) if str(gaushala_id).isdigit() else gaushala_id,
        'has_access': has_gaushala_access(user, gaushala_id),
        'is_admin': is_gaushala_admin(user),
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsGaushalaAdmin])
def access_users(request):
    """Users listed on the access control screen"""
    users = User.objects.filter(is_active=True).prefetch_related('groups', 'gaushala_access').order_by('username')
    return Response(AccessUserSerializer(users, many=True).data)
