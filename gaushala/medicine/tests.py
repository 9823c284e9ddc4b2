"""
Test suite for the medicine module
Tests: medicine CRUD, search, expiry and low stock
"""
from datetime import timedelta
from decimal import Decimal

from django.test import TestCase
from django.utils import timezone
from rest_framework import status

from gaushala.core.models import AuditLog
from gaushala.core.test_utils import TestDataFactory, AuthenticatedAPIClient


class MedicineTests(TestCase):
    """Test medicine endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_admin()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.gaushala = TestDataFactory.create_gaushala()

    def test_create_medicine(self):
        response = self.client.post('/api/v1/medicines/', {
            'gaushala': self.gaushala.id,
            'name': 'Ivermectin',
            'dosage': '1ml/50kg',
            'unit': 'ml',
            'quantity': '250.00',
            'expiry_date': (timezone.now() + timedelta(days=200)).isoformat(),
            'batch_number': 'IVM-0425',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertFalse(response.data['is_expired'])
        self.assertTrue(AuditLog.objects.filter(model_name='Medicine', object_reference='IVM-0425').exists())

    def test_negative_quantity_rejected(self):
        response = self.client.post('/api/v1/medicines/', {
            'gaushala': self.gaushala.id,
            'name': 'Oxytetracycline',
            'dosage': '5ml',
            'unit': 'ml',
            'quantity': '-1',
            'expiry_date': (timezone.now() + timedelta(days=200)).isoformat(),
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_quantity_change_is_audited(self):
        medicine = TestDataFactory.create_medicine(gaushala=self.gaushala)
        response = self.client.patch(f'/api/v1/medicines/{medicine.id}/', {'quantity': '80.00'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        log = AuditLog.objects.get(model_name='Medicine', action='update')
        self.assertEqual(log.changes['quantity'], {'from': '100.00', 'to': '80.00'})

    def test_search_requires_name(self):
        TestDataFactory.create_medicine(gaushala=self.gaushala, name='Calcium Gel')
        TestDataFactory.create_medicine(gaushala=self.gaushala, name='Liver Tonic')
        response = self.client.get('/api/v1/medicines/search/?name=calcium')
        self.assertEqual(len(response.data), 1)
        response = self.client.get('/api/v1/medicines/search/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_expired(self):
        expired = TestDataFactory.create_medicine(
            gaushala=self.gaushala, expiry_date=timezone.now() - timedelta(days=1)
        )
        TestDataFactory.create_medicine(gaushala=self.gaushala)
        response = self.client.get('/api/v1/medicines/expired/')
        self.assertEqual([row['id'] for row in response.data], [expired.id])
        self.assertTrue(response.data[0]['is_expired'])

    def test_low_stock_threshold(self):
        TestDataFactory.create_medicine(gaushala=self.gaushala, name='A', quantity=Decimal('5'))
        TestDataFactory.create_medicine(gaushala=self.gaushala, name='B', quantity=Decimal('10'))
        TestDataFactory.create_medicine(gaushala=self.gaushala, name='C', quantity=Decimal('30'))
        response = self.client.get('/api/v1/medicines/low-stock/')
        self.assertEqual([row['name'] for row in response.data], ['A'])
        response = self.client.get('/api/v1/medicines/low-stock/?threshold=50')
        self.assertEqual([row['name'] for row in response.data], ['A', 'B', 'C'])
        response = self.client.get('/api/v1/medicines/low-stock/?threshold=few')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_scoped_to_gaushala_access(self):
        TestDataFactory.create_medicine(gaushala=self.gaushala)
        other = TestDataFactory.create_medicine()
        staff = TestDataFactory.create_user()
        TestDataFactory.grant_access(staff, self.gaushala)
        self.client.authenticate_user(staff)
        response = self.client.get('/api/v1/medicines/')
        self.assertEqual(response.data['count'], 1)
        response = self.client.get(f'/api/v1/medicines/{other.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_delete(self):
        medicine = TestDataFactory.create_medicine(gaushala=self.gaushala)
        response = self.client.delete(f'/api/v1/medicines/{medicine.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
