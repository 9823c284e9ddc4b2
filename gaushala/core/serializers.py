from django.contrib.auth.models import Group
from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers
from gaushala.access.permissions import is_gaushala_admin
from .models import User, Setting, AuditLog


class UserSerializer(serializers.ModelSerializer):
    """User with role groups, admin flag and the gaushalas the user may see (None = all)"""
    groups = serializers.SerializerMethodField()
    is_admin = serializers.SerializerMethodField()
    gaushala_ids = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ['id', 'username', 'email', 'first_name', 'last_name', 'phone', 'is_active', 'is_staff', 'is_superuser',
                  'groups', 'is_admin', 'gaushala_ids', 'created_at', 'updated_at']
        read_only_fields = ['is_superuser', 'created_at', 'updated_at']

    def get_groups(self, obj):
        return list(obj.groups.values_list('name', flat=True))

    def get_is_admin(self, obj):
        return is_gaushala_admin(obj)

    def get_gaushala_ids(self, obj):
        if is_gaushala_admin(obj):
            return None
        return list(obj.gaushala_access.order_by('gaushala_id').values_list('gaushala_id', flat=True))


class UserBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['id', 'username', 'first_name', 'last_name']


class UserCreateSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, validators=[validate_password])
    password_confirm = serializers.CharField(write_only=True)
    groups = serializers.ListField(child=serializers.CharField(), write_only=True, required=False)

    class Meta:
        model = User
        fields = ['username', 'email', 'password', 'password_confirm', 'first_name', 'last_name', 'phone', 'groups']

    def validate_groups(self, value):
        known = set(Group.objects.filter(name__in=value).values_list('name', flat=True))
        unknown = sorted(set(value) - known)
        if unknown:
            raise serializers.ValidationError(f"Unknown role group(s): {', '.join(unknown)}")
        return value

    def validate(self, attrs):
        if attrs['password'] != attrs['password_confirm']:
            raise serializers.ValidationError({"password": "Passwords don't match"})
        return attrs

    def create(self, validated_data):
        validated_data.pop('password_confirm')
        password = validated_data.pop('password')
        group_names = validated_data.pop('groups', [])
        user = User(**validated_data, is_active=True)
        user.set_password(password)
        user.save()
        if group_names:
            user.groups.set(Group.objects.filter(name__in=group_names))
        return user


class SettingSerializer(serializers.ModelSerializer):
    class Meta:
        model = Setting
        fields = ['id', 'key', 'value', 'description', 'updated_at']


class AuditLogSerializer(serializers.ModelSerializer):
    user = UserBriefSerializer(read_only=True)

    class Meta:
        model = AuditLog
        fields = ['id', 'user', 'action', 'model_name', 'object_id', 'object_name',
                  'object_reference', 'changes', 'ip_address', 'created_at']
