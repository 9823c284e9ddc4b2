from django.utils import timezone
from rest_framework import serializers
from .models import Medicine


class MedicineSerializer(serializers.ModelSerializer):
    gaushala_name = serializers.CharField(source='gaushala.name', read_only=True)
    is_expired = serializers.SerializerMethodField()

    class Meta:
        model = Medicine
        fields = ['id', 'gaushala', 'gaushala_name', 'name', 'description', 'dosage', 'unit', 'quantity',
                  'expiry_date', 'is_expired', 'manufacturer', 'batch_number', 'purpose', 'created_at', 'updated_at']

    def get_is_expired(self, obj):
        return obj.expiry_date is not None and obj.expiry_date < timezone.now()

    def validate_quantity(self, value):
        if value < 0:
            raise serializers.ValidationError("Quantity cannot be negative")
        return value
