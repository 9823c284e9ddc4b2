from rest_framework import serializers
from .models import Shed


class ShedSerializer(serializers.ModelSerializer):
    gaushala_name = serializers.CharField(source='gaushala.name', read_only=True)
    current_occupancy = serializers.IntegerField(read_only=True)
    available_space = serializers.IntegerField(read_only=True)
    occupancy_percentage = serializers.FloatField(read_only=True)

    class Meta:
        model = Shed
        fields = [
            'id', 'gaushala', 'gaushala_name', 'shed_name', 'shed_number', 'capacity', 'shed_type',
            'area_sq_ft', 'ventilation_type', 'flooring_type', 'water_facility', 'feeding_facility',
            'status', 'notes', 'current_occupancy', 'available_space', 'occupancy_percentage',
            'created_at', 'updated_at',
        ]

    def validate_shed_number(self, value):
        return value.strip().upper()

    def validate_capacity(self, value):
        if value <= 0:
            raise serializers.ValidationError("Capacity must be greater than zero")
        if self.instance is not None and value < self.instance.current_occupancy:
            raise serializers.ValidationError(
                f"Capacity cannot be below current occupancy ({self.instance.current_occupancy})"
            )
        return value


class ShedCapacitySerializer(serializers.ModelSerializer):
    """Per-shed row of the capacity dashboard"""
    current_occupancy = serializers.IntegerField(read_only=True)
    available_space = serializers.IntegerField(read_only=True)
    occupancy_percentage = serializers.FloatField(read_only=True)

    class Meta:
        model = Shed
        fields = ['id', 'gaushala', 'shed_name', 'shed_number', 'shed_type', 'status',
                  'capacity', 'current_occupancy', 'available_space', 'occupancy_percentage']
