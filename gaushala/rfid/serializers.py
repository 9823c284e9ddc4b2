import re
from rest_framework import serializers
from .models import RFIDScan

HEX_TAG_RE = re.compile(r'^[0-9A-F]+$')


class RFIDScanSerializer(serializers.ModelSerializer):
    cattle_name = serializers.CharField(source='cattle.name', read_only=True, default=None)
    cattle_animal_id = serializers.CharField(source='cattle.unique_animal_id', read_only=True, default=None)
    gaushala_name = serializers.CharField(source='gaushala.name', read_only=True)
    scan_timestamp = serializers.DateTimeField(required=False)

    class Meta:
        model = RFIDScan
        fields = ['id', 'tag_id_hex', 'cattle', 'cattle_name', 'cattle_animal_id', 'gaushala', 'gaushala_name',
                  'scan_location', 'scan_timestamp', 'scanner_device_id', 'signal_strength', 'notes', 'created_at']
        read_only_fields = ['cattle', 'created_at']
        extra_kwargs = {'gaushala': {'required': False}}

    def validate_tag_id_hex(self, value):
        value = value.strip().upper()
        if not value:
            raise serializers.ValidationError("Tag id is required")
        if not HEX_TAG_RE.match(value):
            raise serializers.ValidationError("Tag id must be hexadecimal")
        return value
