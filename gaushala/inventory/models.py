from django.db import models
from decimal import Decimal
from gaushala.locations.models import Gaushala


class InventoryType(models.Model):
    """Feed, supplies, equipment, ..."""
    name = models.CharField(max_length=100, unique=True)
    description = models.TextField(blank=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'inventory_types'
        ordering = ['name']


class InventoryUnit(models.Model):
    unit_name = models.CharField(max_length=50, unique=True)
    abbreviation = models.CharField(max_length=10, blank=True)

    def __str__(self):
        return self.abbreviation or self.unit_name

    class Meta:
        db_table = 'inventory_units'
        ordering = ['unit_name']


class InventoryItem(models.Model):
    """Stocked item (fodder, concentrate, bedding, ...) per gaushala"""
    STATUS_CHOICES = [
        ('IN_STOCK', 'In Stock'),
        ('LOW_STOCK', 'Low Stock'),
        ('OUT_OF_STOCK', 'Out of Stock'),
    ]

    gaushala = models.ForeignKey(Gaushala, on_delete=models.CASCADE, related_name='inventory_items')
    item_name = models.CharField(max_length=200)
    inventory_type = models.ForeignKey(InventoryType, on_delete=models.PROTECT, related_name='items')
    inventory_unit = models.ForeignKey(InventoryUnit, on_delete=models.PROTECT, related_name='items')
    quantity = models.DecimalField(max_digits=12, decimal_places=3, default=Decimal('0.000'))
    minimum_stock_level = models.DecimalField(max_digits=12, decimal_places=3, default=Decimal('0.000'))
    maximum_stock_level = models.DecimalField(max_digits=12, decimal_places=3, null=True, blank=True)
    unit_price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    location = models.CharField(max_length=200, blank=True)
    supplier = models.CharField(max_length=200, blank=True)
    description = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='OUT_OF_STOCK', editable=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.item_name

    def compute_status(self):
        if self.quantity <= 0:
            return 'OUT_OF_STOCK'
        if self.quantity <= self.minimum_stock_level:
            return 'LOW_STOCK'
        return 'IN_STOCK'

    def save(self, *args, **kwargs):
        self.status = self.compute_status()
        super().save(*args, **kwargs)

    class Meta:
        db_table = 'inventory_items'
        ordering = ['item_name']
        indexes = [
            models.Index(fields=['gaushala', 'status'], name='idx_inventory_gaushala_status'),
        ]


class StockTransaction(models.Model):
    """Stock movements (in/out) for an inventory item"""
    TRANSACTION_TYPE_CHOICES = [
        ('IN', 'Stock In'),
        ('OUT', 'Stock Out'),
    ]

    item = models.ForeignKey(InventoryItem, on_delete=models.CASCADE, related_name='transactions')
    transaction_type = models.CharField(max_length=3, choices=TRANSACTION_TYPE_CHOICES)
    quantity = models.DecimalField(max_digits=12, decimal_places=3)
    transaction_date = models.DateTimeField()
    performed_by = models.ForeignKey('core.User', on_delete=models.SET_NULL, null=True, blank=True, related_name='stock_transactions')
    notes = models.TextField(blank=True)
    balance_after = models.DecimalField(max_digits=12, decimal_places=3, default=Decimal('0.000'))
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'stock_transactions'
        ordering = ['-transaction_date', '-id']
