import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer, TokenRefreshSerializer
from rest_framework_simplejwt.exceptions import AuthenticationFailed, InvalidToken, TokenError
from django.contrib.auth import get_user_model
from django.core.exceptions import ObjectDoesNotExist
from django.shortcuts import get_object_or_404
from django.db.models import Q
from gaushala.access.permissions import IsGaushalaAdmin, is_gaushala_admin, filter_by_gaushala_access
from .models import Setting, AuditLog
from .serializers import (
    UserSerializer, UserCreateSerializer,
    SettingSerializer, AuditLogSerializer
)
from .utils import paginate, parse_date

logger = logging.getLogger('gaushala.core')
User = get_user_model()

SEARCH_RESULT_LIMIT = 20


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    def validate(self, attrs):
        data = super().validate(attrs)
        if not self.user.is_active:
            raise AuthenticationFailed('User account is disabled.')
        logger.info(f"User logged in: {self.user.username}")
        return data

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['username'] = user.username
        token['groups'] = list(user.groups.values_list('name', flat=True))
        return token


class CustomTokenObtainPairView(TokenObtainPairView):
    serializer_class = CustomTokenObtainPairSerializer


class CustomTokenRefreshSerializer(TokenRefreshSerializer):
    """Token refresh that reports deleted users as an invalid token"""
    def validate(self, attrs):
        try:
            return super().validate(attrs)
        except (InvalidToken, TokenError):
            raise InvalidToken('Token is invalid or expired.')
        except ObjectDoesNotExist:
            raise InvalidToken('Token is invalid. User no longer exists.')


class CustomTokenRefreshView(TokenRefreshView):
    serializer_class = CustomTokenRefreshSerializer


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def user_me(request):
    """Current user with groups, admin flag and accessible gaushalas"""
    return Response(UserSerializer(request.user).data)


# User views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsGaushalaAdmin])
def user_list_create(request):
    """List all users or create a new user"""
    if request.method == 'GET':
        users = User.objects.all().order_by('username')
        search = request.query_params.get('search', '').strip()
        if search:
            users = users.filter(
                Q(username__icontains=search) | Q(email__icontains=search) |
                Q(first_name__icontains=search) | Q(last_name__icontains=search)
            )
        return Response(UserSerializer(users, many=True).data)

    serializer = UserCreateSerializer(data=request.data)
    if serializer.is_valid():
        user = serializer.save()
        logger.info(f"User created: {user.username} by {request.user.username}")
        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsGaushalaAdmin])
def user_detail(request, pk):
    """Retrieve, update or delete a user"""
    user = get_object_or_404(User, pk=pk)

    if request.method == 'GET':
        return Response(UserSerializer(user).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = UserSerializer(user, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        if user.pk == request.user.pk:
            return Response({'error': 'You cannot delete your own account'}, status=status.HTTP_400_BAD_REQUEST)
        logger.info(f"User deleted: {user.username} by {request.user.username}")
        user.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


# Setting views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsGaushalaAdmin])
def setting_list_create(request):
    """List all settings or create a new setting"""
    if request.method == 'GET':
        return Response(SettingSerializer(Setting.objects.all().order_by('key'), many=True).data)

    serializer = SettingSerializer(data=request.data)
    if serializer.is_valid():
        serializer.save()
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsGaushalaAdmin])
def setting_detail(request, pk):
    """Retrieve, update or delete a setting"""
    setting = get_object_or_404(Setting, pk=pk)

    if request.method == 'GET':
        return Response(SettingSerializer(setting).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = SettingSerializer(setting, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        setting.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


# AuditLog views (read-only)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def audit_log_list(request):
    """Paged audit logs; non-admins only see their own entries"""
    queryset = AuditLog.objects.select_related('user')

    if not is_gaushala_admin(request.user):
        queryset = queryset.filter(user=request.user)

    action_filter = request.query_params.get('action')
    if action_filter:
        queryset = queryset.filter(action=action_filter)
    model_filter = request.query_params.get('model')
    if model_filter:
        queryset = queryset.filter(model_name=model_filter)
    reference = request.query_params.get('reference')
    if reference:
        queryset = queryset.filter(object_reference__icontains=reference)
    date_from = parse_date(request.query_params.get('date_from'))
    if date_from:
        queryset = queryset.filter(created_at__date__gte=date_from)
    date_to = parse_date(request.query_params.get('date_to'))
    if date_to:
        queryset = queryset.filter(created_at__date__lte=date_to)

    data, _ = paginate(request, queryset.order_by('-created_at'), AuditLogSerializer)
    return Response(data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def audit_log_detail(request, pk):
    """Retrieve an audit log"""
    audit_log = get_object_or_404(AuditLog, pk=pk)
    if not is_gaushala_admin(request.user) and audit_log.user_id != request.user.id:
        return Response({'error': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)
    return Response(AuditLogSerializer(audit_log).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def global_search(request):
    """Search cattle, sheds, medicines, inventory items and milk records at once"""
    query = request.query_params.get('q', '').strip()
    empty = {'cattle': [], 'sheds': [], 'medicines': [], 'inventory_items': [], 'milk_records': []}
    if not query:
        return Response(empty)

    from gaushala.herd.models import Cattle
    from gaushala.herd.filters import CattleFilter
    from gaushala.herd.serializers import CattleBriefSerializer
    from gaushala.sheds.models import Shed
    from gaushala.sheds.serializers import ShedSerializer
    from gaushala.medicine.models import Medicine
    from gaushala.medicine.serializers import MedicineSerializer
    from gaushala.inventory.models import InventoryItem
    from gaushala.inventory.serializers import InventoryItemSerializer
    from gaushala.production.models import MilkRecord
    from gaushala.production.serializers import MilkRecordSerializer

    user = request.user
    results = {}

    cattle = filter_by_gaushala_access(Cattle.objects.select_related('shed'), user)
    cattle = CattleFilter({'search': query}, queryset=cattle).qs[:SEARCH_RESULT_LIMIT]
    results['cattle'] = CattleBriefSerializer(cattle, many=True).data

    sheds = filter_by_gaushala_access(Shed.objects.select_related('gaushala'), user).filter(
        Q(shed_name__icontains=query) | Q(shed_number__icontains=query)
    )[:SEARCH_RESULT_LIMIT]
    results['sheds'] = ShedSerializer(sheds, many=True).data

    medicines = filter_by_gaushala_access(Medicine.objects.select_related('gaushala'), user).filter(
        Q(name__icontains=query) | Q(batch_number__icontains=query) | Q(manufacturer__icontains=query)
    )[:SEARCH_RESULT_LIMIT]
    results['medicines'] = MedicineSerializer(medicines, many=True).data

    items = filter_by_gaushala_access(
        InventoryItem.objects.select_related('gaushala', 'inventory_type', 'inventory_unit'), user
    ).filter(Q(item_name__icontains=query) | Q(supplier__icontains=query))[:SEARCH_RESULT_LIMIT]
    results['inventory_items'] = InventoryItemSerializer(items, many=True).data

    milk_records = filter_by_gaushala_access(
        MilkRecord.objects.select_related('gaushala', 'cattle', 'created_by', 'updated_by'), user
    ).filter(Q(shed_number__icontains=query) | Q(notes__icontains=query))[:SEARCH_RESULT_LIMIT]
    results['milk_records'] = MilkRecordSerializer(milk_records, many=True).data

    return Response(results)
