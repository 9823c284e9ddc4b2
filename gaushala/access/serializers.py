from django.contrib.auth import get_user_model
from rest_framework import serializers
from gaushala.locations.models import Gaushala
from .models import UserGaushalaAccess

User = get_user_model()


class UserGaushalaAccessSerializer(serializers.ModelSerializer):
    username = serializers.CharField(source='user.username', read_only=True)
    gaushala_name = serializers.CharField(source='gaushala.name', read_only=True)
    gaushala_location = serializers.SerializerMethodField()
    granted_by_name = serializers.CharField(source='granted_by.username', read_only=True, default=None)

    class Meta:
        model = UserGaushalaAccess
        fields = ['id', 'user', 'username', 'gaushala', 'gaushala_name', 'gaushala_location',
                  'granted_by', 'granted_by_name', 'granted_at']
        read_only_fields = ['granted_by', 'granted_at']

    def get_gaushala_location(self, obj):
        parts = [obj.gaushala.city, obj.gaushala.state]
        return ', '.join(part for part in parts if part)


class AccessUserSerializer(serializers.ModelSerializer):
    """User row of the access control screen"""
    groups = serializers.SlugRelatedField(many=True, read_only=True, slug_field='name')
    gaushala_ids = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ['id', 'username', 'email', 'first_name', 'last_name', 'is_active', 'is_staff', 'groups', 'gaushala_ids']

    def get_gaushala_ids(self, obj):
        return [access.gaushala_id for access in obj.gaushala_access.all()]


class AccessChangeSerializer(serializers.Serializer):
    """Body of grant/revoke requests"""
    user = serializers.PrimaryKeyRelatedField(queryset=User.objects.all())
    gaushala = serializers.PrimaryKeyRelatedField(queryset=Gaushala.objects.all())
