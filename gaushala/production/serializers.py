from decimal import Decimal
from rest_framework import serializers
from .models import MilkRecord
from .table import SORTABLE_COLUMNS, ColumnLayout


class MilkRecordSerializer(serializers.ModelSerializer):
    gaushala_name = serializers.CharField(source='gaushala.name', read_only=True)
    cattle_name = serializers.CharField(source='cattle.name', read_only=True, default=None)
    cattle_animal_id = serializers.CharField(source='cattle.unique_animal_id', read_only=True, default=None)
    created_by_name = serializers.CharField(source='created_by.username', read_only=True, default=None)
    updated_by_name = serializers.CharField(source='updated_by.username', read_only=True, default=None)
    shed_number = serializers.CharField(max_length=50, required=False, allow_blank=True)

    class Meta:
        model = MilkRecord
        fields = [
            'id', 'gaushala', 'gaushala_name', 'entry_type', 'cattle', 'cattle_name', 'cattle_animal_id',
            'shed_number', 'record_date', 'session', 'milk_quantity', 'fat_percentage', 'snf', 'status',
            'notes', 'created_by', 'created_by_name', 'updated_by', 'updated_by_name', 'created_at', 'updated_at',
        ]
        read_only_fields = ['created_by', 'updated_by', 'created_at', 'updated_at']

    def validate_milk_quantity(self, value):
        if value <= 0:
            raise serializers.ValidationError("Milk quantity must be greater than zero")
        return value

    def validate_fat_percentage(self, value):
        if value is not None and not (Decimal('0') <= value <= Decimal('100')):
            raise serializers.ValidationError("Fat percentage must be between 0 and 100")
        return value

    def validate_snf(self, value):
        if value is not None and not (Decimal('0') <= value <= Decimal('100')):
            raise serializers.ValidationError("SNF must be between 0 and 100")
        return value

    def validate(self, attrs):
        instance = self.instance
        entry_type = attrs.get('entry_type', instance.entry_type if instance else 'SHED')
        cattle = attrs.get('cattle', instance.cattle if instance else None)
        gaushala = attrs.get('gaushala', instance.gaushala if instance else None)
        shed_number = attrs.get('shed_number', instance.shed_number if instance else '')

        if entry_type == 'CATTLE' and cattle is None:
            raise serializers.ValidationError({"cattle": "Cattle is required for cattle-wise entries"})
        if cattle is not None and gaushala is not None and cattle.gaushala_id != gaushala.id:
            raise serializers.ValidationError({"cattle": "Cattle does not belong to this gaushala"})

        if not shed_number and cattle is not None and cattle.shed_id:
            # Cattle-wise entries default to the animal's shed
            attrs['shed_number'] = cattle.shed.shed_number
            shed_number = attrs['shed_number']
        if not shed_number:
            raise serializers.ValidationError({"shed_number": "Shed number is required"})
        return attrs


class ColumnSerializer(serializers.Serializer):
    key = serializers.ChoiceField(choices=SORTABLE_COLUMNS)
    label = serializers.CharField(max_length=100)
    visible = serializers.BooleanField()
    order = serializers.IntegerField(min_value=0)


class SortEntrySerializer(serializers.Serializer):
    column = serializers.ChoiceField(choices=SORTABLE_COLUMNS)
    direction = serializers.ChoiceField(choices=['asc', 'desc'])


class TableLayoutSerializer(serializers.Serializer):
    """Full layout replacement: columns and, optionally, the sort spec"""
    columns = ColumnSerializer(many=True)
    sort = SortEntrySerializer(many=True, required=False)

    def validate_columns(self, value):
        columns = [dict(column) for column in value]
        if not ColumnLayout.is_valid(columns):
            raise serializers.ValidationError(
                "Columns must list every table column once with orders forming 0..n-1"
            )
        return columns

    def validate_sort(self, value):
        seen = set()
        for entry in value:
            if entry['column'] in seen:
                raise serializers.ValidationError(f"Column {entry['column']} appears more than once")
            seen.add(entry['column'])
        return [dict(entry) for entry in value]


class ColumnKeySerializer(serializers.Serializer):
    key = serializers.ChoiceField(choices=SORTABLE_COLUMNS)


class ColumnReorderSerializer(serializers.Serializer):
    source = serializers.ChoiceField(choices=SORTABLE_COLUMNS)
    target = serializers.ChoiceField(choices=SORTABLE_COLUMNS)


class SortToggleSerializer(serializers.Serializer):
    column = serializers.ChoiceField(choices=SORTABLE_COLUMNS)
    multi = serializers.BooleanField(required=False, default=False)
