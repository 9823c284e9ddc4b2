from django.urls import path
from .views import (
    inventory_type_list_create, inventory_unit_list_create,
    inventory_item_list_create, inventory_item_detail, inventory_low_stock, inventory_search,
    stock_history, stock_transaction_create,
)

urlpatterns = [
    path('inventory/types/', inventory_type_list_create, name='inventory-type-list-create'),
    path('inventory/units/', inventory_unit_list_create, name='inventory-unit-list-create'),
    path('inventory/items/', inventory_item_list_create, name='inventory-item-list-create'),
    path('inventory/items/<int:pk>/', inventory_item_detail, name='inventory-item-detail'),
    path('inventory/items/low-stock/', inventory_low_stock, name='inventory-low-stock'),
    path('inventory/items/search/', inventory_search, name='inventory-search'),
    path('inventory/items/<int:item_id>/history/', stock_history, name='stock-history'),
    path('inventory/transactions/', stock_transaction_create, name='stock-transaction-create'),
]
