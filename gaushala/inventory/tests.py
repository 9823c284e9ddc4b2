"""
Test suite for the inventory module
Tests: types/units, items, stock status, stock transactions, low stock and search
"""
from decimal import Decimal

from django.core.cache import cache
from django.test import TestCase
from rest_framework import status

from gaushala.core.models import AuditLog
from gaushala.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from .models import InventoryType, InventoryUnit, InventoryItem, StockTransaction
from .utils import InsufficientStockError, apply_stock_transaction


class InventoryMasterDataTests(TestCase):
    """Test inventory type and unit endpoints"""

    def setUp(self):
        cache.clear()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_admin())

    def test_create_and_list_types(self):
        response = self.client.post('/api/v1/inventory/types/', {'name': 'Concentrate'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        response = self.client.get('/api/v1/inventory/types/')
        self.assertIn('Concentrate', [row['name'] for row in response.data])

    def test_create_and_list_units(self):
        response = self.client.post('/api/v1/inventory/units/', {'unit_name': 'Litre', 'abbreviation': 'L'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        response = self.client.get('/api/v1/inventory/units/')
        self.assertIn('Litre', [row['unit_name'] for row in response.data])

    def test_non_admin_cannot_create_types(self):
        self.client.authenticate_user(TestDataFactory.create_user())
        response = self.client.post('/api/v1/inventory/types/', {'name': 'Bedding'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class InventoryItemTests(TestCase):
    """Test inventory item endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_admin()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.gaushala = TestDataFactory.create_gaushala()
        self.inventory_type = InventoryType.objects.create(name='Green Fodder')
        self.inventory_unit = InventoryUnit.objects.create(unit_name='Quintal', abbreviation='q')

    def test_create_item_sets_status(self):
        response = self.client.post('/api/v1/inventory/items/', {
            'gaushala': self.gaushala.id,
            'item_name': 'Napier Grass',
            'inventory_type': self.inventory_type.id,
            'inventory_unit': self.inventory_unit.id,
            'quantity': '15.000',
            'minimum_stock_level': '20.000',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'LOW_STOCK')
        self.assertEqual(response.data['unit_abbreviation'], 'q')

    def test_item_status(self):
        item = TestDataFactory.create_inventory_item(gaushala=self.gaushala, quantity=Decimal('0'))
        self.assertEqual(item.status, 'OUT_OF_STOCK')
        item = TestDataFactory.create_inventory_item(gaushala=self.gaushala, quantity=Decimal('20'))
        self.assertEqual(item.status, 'LOW_STOCK')
        item = TestDataFactory.create_inventory_item(gaushala=self.gaushala, quantity=Decimal('20.001'))
        self.assertEqual(item.status, 'IN_STOCK')

    def test_quantity_cannot_be_edited_directly(self):
        item = TestDataFactory.create_inventory_item(gaushala=self.gaushala)
        response = self.client.patch(f'/api/v1/inventory/items/{item.id}/', {'quantity': '5'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.patch(f'/api/v1/inventory/items/{item.id}/', {'supplier': 'Local Farm'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_maximum_below_minimum_rejected(self):
        item = TestDataFactory.create_inventory_item(gaushala=self.gaushala)
        response = self.client.patch(f'/api/v1/inventory/items/{item.id}/', {'maximum_stock_level': '5'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_low_stock(self):
        TestDataFactory.create_inventory_item(gaushala=self.gaushala, item_name='Bran', quantity=Decimal('5'))
        TestDataFactory.create_inventory_item(gaushala=self.gaushala, item_name='Salt', quantity=Decimal('0'))
        TestDataFactory.create_inventory_item(gaushala=self.gaushala, item_name='Hay', quantity=Decimal('500'))
        response = self.client.get('/api/v1/inventory/items/low-stock/')
        self.assertEqual([row['item_name'] for row in response.data], ['Salt', 'Bran'])

    def test_search(self):
        TestDataFactory.create_inventory_item(gaushala=self.gaushala, item_name='Wheat Straw')
        TestDataFactory.create_inventory_item(gaushala=self.gaushala, item_name='Mustard Cake')
        response = self.client.get('/api/v1/inventory/items/search/?q=straw')
        self.assertEqual(len(response.data), 1)
        response = self.client.get('/api/v1/inventory/items/search/')
        self.assertEqual(response.data, [])

    def test_list_filters(self):
        TestDataFactory.create_inventory_item(gaushala=self.gaushala, quantity=Decimal('0'))
        TestDataFactory.create_inventory_item(gaushala=self.gaushala)
        TestDataFactory.create_inventory_item()
        response = self.client.get(f'/api/v1/inventory/items/?gaushala={self.gaushala.id}')
        self.assertEqual(response.data['count'], 2)
        response = self.client.get('/api/v1/inventory/items/?status=out_of_stock')
        self.assertEqual(response.data['count'], 1)


class StockTransactionTests(TestCase):
    """Test stock movements"""

    def setUp(self):
        self.user = TestDataFactory.create_admin()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.item = TestDataFactory.create_inventory_item(quantity=Decimal('100.000'))

    def test_stock_in(self):
        response = self.client.post('/api/v1/inventory/transactions/', {
            'item': self.item.id, 'transaction_type': 'IN', 'quantity': '25.5',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.item.refresh_from_db()
        self.assertEqual(self.item.quantity, Decimal('125.500'))
        self.assertEqual(Decimal(str(response.data['balance_after'])), Decimal('125.5'))
        self.assertEqual(response.data['performed_by'], self.user.id)
        self.assertTrue(AuditLog.objects.filter(action='stock_in').exists())

    def test_stock_out_updates_status(self):
        response = self.client.post('/api/v1/inventory/transactions/', {
            'item': self.item.id, 'transaction_type': 'OUT', 'quantity': '90',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.item.refresh_from_db()
        self.assertEqual(self.item.quantity, Decimal('10.000'))
        self.assertEqual(self.item.status, 'LOW_STOCK')
        self.assertTrue(AuditLog.objects.filter(action='stock_out').exists())

    def test_stock_out_exceeding_quantity_rejected(self):
        response = self.client.post('/api/v1/inventory/transactions/', {
            'item': self.item.id, 'transaction_type': 'OUT', 'quantity': '100.001',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(Decimal(str(response.data['available'])), Decimal('100'))
        self.item.refresh_from_db()
        self.assertEqual(self.item.quantity, Decimal('100.000'))
        self.assertFalse(StockTransaction.objects.filter(item=self.item).exists())

    def test_stock_out_to_zero(self):
        movement = apply_stock_transaction(self.item.id, 'OUT', Decimal('100'), user=self.user)
        self.assertEqual(movement.balance_after, Decimal('0'))
        self.item.refresh_from_db()
        self.assertEqual(self.item.status, 'OUT_OF_STOCK')

    def test_insufficient_stock_error(self):
        with self.assertRaises(InsufficientStockError) as ctx:
            apply_stock_transaction(self.item.id, 'OUT', Decimal('150'))
        self.assertEqual(ctx.exception.requested, Decimal('150'))

    def test_non_positive_quantity_rejected(self):
        response = self.client.post('/api/v1/inventory/transactions/', {
            'item': self.item.id, 'transaction_type': 'IN', 'quantity': '0',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_history(self):
        apply_stock_transaction(self.item.id, 'IN', Decimal('10'))
        apply_stock_transaction(self.item.id, 'OUT', Decimal('30'))
        response = self.client.get(f'/api/v1/inventory/items/{self.item.id}/history/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 2)
        self.assertEqual(response.data['results'][0]['transaction_type'], 'OUT')
        self.assertEqual(Decimal(str(response.data['item']['quantity'])), Decimal('80'))

    def test_transaction_without_access(self):
        self.client.authenticate_user(TestDataFactory.create_user())
        response = self.client.post('/api/v1/inventory/transactions/', {
            'item': self.item.id, 'transaction_type': 'IN', 'quantity': '1',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(InventoryItem.objects.get(pk=self.item.id).quantity, Decimal('100.000'))
