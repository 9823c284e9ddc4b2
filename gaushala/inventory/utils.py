"""Stock movement helpers for inventory items"""
import logging
from django.db import transaction
from django.utils import timezone
from .models import InventoryItem, StockTransaction

logger = logging.getLogger(__name__)


class InsufficientStockError(ValueError):
    """Raised when a stock-out exceeds the quantity on hand"""

    def __init__(self, item, requested):
        self.item = item
        self.requested = requested
        super().__init__(
            f"Insufficient stock for {item.item_name}: requested {requested}, available {item.quantity}"
        )


def apply_stock_transaction(item_id, transaction_type, quantity, user=None, notes='', transaction_date=None):
    """
    Record a stock movement and update the item quantity atomically

    The item row is locked for the duration so concurrent movements see each
    other's balance. Raises InsufficientStockError for an OUT larger than the
    quantity on hand.
    """
    with transaction.atomic():
        item = InventoryItem.objects.select_for_update().get(pk=item_id)
        if transaction_type == 'OUT':
            if quantity > item.quantity:
                raise InsufficientStockError(item, quantity)
            item.quantity -= quantity
        else:
            item.quantity += quantity
        item.save()

        movement = StockTransaction.objects.create(
            item=item,
            transaction_type=transaction_type,
            quantity=quantity,
            transaction_date=transaction_date or timezone.now(),
            performed_by=user,
            notes=notes or '',
            balance_after=item.quantity,
        )
    logger.info(f"Stock {transaction_type} {quantity} for {item.item_name} (balance {item.quantity}, status {item.status})")
    return movement
