from rest_framework import serializers
from .models import Gaushala, Location


class GaushalaSerializer(serializers.ModelSerializer):
    class Meta:
        model = Gaushala
        fields = ['id', 'name', 'registration_number', 'address', 'city', 'state', 'phone', 'email', 'is_active', 'created_at', 'updated_at']


class LocationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Location
        fields = ['id', 'name', 'address', 'city', 'state', 'pincode', 'contact_person', 'contact_phone', 'created_at', 'updated_at']
