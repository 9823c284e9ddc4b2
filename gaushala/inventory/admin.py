from django.contrib import admin
from .models import InventoryType, InventoryUnit, InventoryItem, StockTransaction


@admin.register(InventoryType)
class InventoryTypeAdmin(admin.ModelAdmin):
    list_display = ['name', 'description']
    search_fields = ['name']


@admin.register(InventoryUnit)
class InventoryUnitAdmin(admin.ModelAdmin):
    list_display = ['unit_name', 'abbreviation']


@admin.register(InventoryItem)
class InventoryItemAdmin(admin.ModelAdmin):
    list_display = ['item_name', 'gaushala', 'inventory_type', 'quantity', 'inventory_unit', 'minimum_stock_level', 'status']
    list_filter = ['status', 'inventory_type', 'gaushala']
    search_fields = ['item_name', 'supplier', 'location']
    readonly_fields = ['status', 'created_at', 'updated_at']


@admin.register(StockTransaction)
class StockTransactionAdmin(admin.ModelAdmin):
    list_display = ['item', 'transaction_type', 'quantity', 'balance_after', 'transaction_date', 'performed_by']
    list_filter = ['transaction_type', 'transaction_date']
    search_fields = ['item__item_name', 'notes']
    readonly_fields = ['balance_after', 'created_at']
