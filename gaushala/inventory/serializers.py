from rest_framework import serializers
from .models import InventoryType, InventoryUnit, InventoryItem, StockTransaction


class InventoryTypeSerializer(serializers.ModelSerializer):
    class Meta:
        model = InventoryType
        fields = ['id', 'name', 'description']


class InventoryUnitSerializer(serializers.ModelSerializer):
    class Meta:
        model = InventoryUnit
        fields = ['id', 'unit_name', 'abbreviation']


class InventoryItemSerializer(serializers.ModelSerializer):
    gaushala_name = serializers.CharField(source='gaushala.name', read_only=True)
    inventory_type_name = serializers.CharField(source='inventory_type.name', read_only=True)
    inventory_unit_name = serializers.CharField(source='inventory_unit.unit_name', read_only=True)
    unit_abbreviation = serializers.CharField(source='inventory_unit.abbreviation', read_only=True)

    class Meta:
        model = InventoryItem
        fields = [
            'id', 'gaushala', 'gaushala_name', 'item_name', 'inventory_type', 'inventory_type_name',
            'inventory_unit', 'inventory_unit_name', 'unit_abbreviation', 'quantity',
            'minimum_stock_level', 'maximum_stock_level', 'unit_price', 'location', 'supplier',
            'description', 'status', 'created_at', 'updated_at',
        ]
        read_only_fields = ['status', 'created_at', 'updated_at']

    def validate_quantity(self, value):
        if value < 0:
            raise serializers.ValidationError("Quantity cannot be negative")
        if self.instance is not None and value != self.instance.quantity:
            raise serializers.ValidationError("Stock changes must be recorded as stock transactions")
        return value

    def validate_minimum_stock_level(self, value):
        if value < 0:
            raise serializers.ValidationError("Minimum stock level cannot be negative")
        return value

    def validate(self, attrs):
        minimum = attrs.get('minimum_stock_level', self.instance.minimum_stock_level if self.instance else 0)
        maximum = attrs.get('maximum_stock_level', self.instance.maximum_stock_level if self.instance else None)
        if maximum is not None and maximum < minimum:
            raise serializers.ValidationError({"maximum_stock_level": "Must not be below the minimum stock level"})
        return attrs


class StockTransactionSerializer(serializers.ModelSerializer):
    item_name = serializers.CharField(source='item.item_name', read_only=True)
    performed_by_name = serializers.CharField(source='performed_by.username', read_only=True, default=None)
    transaction_date = serializers.DateTimeField(required=False)

    class Meta:
        model = StockTransaction
        fields = ['id', 'item', 'item_name', 'transaction_type', 'quantity', 'transaction_date',
                  'performed_by', 'performed_by_name', 'notes', 'balance_after', 'created_at']
        read_only_fields = ['performed_by', 'balance_after', 'created_at']

    def validate_quantity(self, value):
        if value <= 0:
            raise serializers.ValidationError("Quantity must be greater than zero")
        return value
