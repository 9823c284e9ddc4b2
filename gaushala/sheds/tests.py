"""
Test suite for the sheds module
Tests: shed CRUD, occupancy, capacity rules, availability and the capacity dashboard
"""
from django.test import TestCase
from rest_framework import status

from gaushala.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from .models import Shed
from .views import capacity_level


class ShedTests(TestCase):
    """Test shed endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_admin()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.gaushala = TestDataFactory.create_gaushala()

    def test_create_shed(self):
        response = self.client.post('/api/v1/sheds/', {
            'gaushala': self.gaushala.id,
            'shed_name': 'Milking Shed',
            'shed_number': ' m1 ',
            'capacity': 25,
            'shed_type': 'MILKING',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['shed_number'], 'M1')
        self.assertEqual(response.data['current_occupancy'], 0)
        self.assertEqual(response.data['available_space'], 25)

    def test_zero_capacity_rejected(self):
        response = self.client.post('/api/v1/sheds/', {
            'gaushala': self.gaushala.id,
            'shed_name': 'Empty',
            'shed_number': 'E1',
            'capacity': 0,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_duplicate_shed_number_in_gaushala_rejected(self):
        TestDataFactory.create_shed(gaushala=self.gaushala, shed_number='A1')
        response = self.client.post('/api/v1/sheds/', {
            'gaushala': self.gaushala.id,
            'shed_name': 'Another',
            'shed_number': 'A1',
            'capacity': 5,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_occupancy_counts_active_cattle_only(self):
        shed = TestDataFactory.create_shed(gaushala=self.gaushala, capacity=4)
        TestDataFactory.create_cattle(shed=shed)
        TestDataFactory.create_cattle(shed=shed)
        TestDataFactory.create_cattle(shed=shed, is_active=False)
        response = self.client.get(f'/api/v1/sheds/{shed.id}/')
        self.assertEqual(response.data['current_occupancy'], 2)
        self.assertEqual(response.data['available_space'], 2)
        self.assertEqual(response.data['occupancy_percentage'], 50.0)

    def test_capacity_below_occupancy_rejected(self):
        shed = TestDataFactory.create_shed(gaushala=self.gaushala, capacity=4)
        TestDataFactory.create_cattle(shed=shed)
        TestDataFactory.create_cattle(shed=shed)
        response = self.client.patch(f'/api/v1/sheds/{shed.id}/', {'capacity': 1}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.patch(f'/api/v1/sheds/{shed.id}/', {'capacity': 2}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_occupied_shed_cannot_be_deleted(self):
        shed = TestDataFactory.create_shed(gaushala=self.gaushala)
        TestDataFactory.create_cattle(shed=shed)
        response = self.client.delete(f'/api/v1/sheds/{shed.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(Shed.objects.filter(pk=shed.id).exists())

    def test_delete_empty_shed(self):
        shed = TestDataFactory.create_shed(gaushala=self.gaushala)
        response = self.client.delete(f'/api/v1/sheds/{shed.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)

    def test_sheds_by_gaushala_and_status(self):
        TestDataFactory.create_shed(gaushala=self.gaushala)
        TestDataFactory.create_shed(gaushala=self.gaushala, status='MAINTENANCE')
        TestDataFactory.create_shed()
        response = self.client.get(f'/api/v1/sheds/gaushala/{self.gaushala.id}/')
        self.assertEqual(len(response.data), 2)
        response = self.client.get('/api/v1/sheds/status/maintenance/')
        self.assertEqual(len(response.data), 1)
        response = self.client.get('/api/v1/sheds/status/closed/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_available_capacity(self):
        shed = TestDataFactory.create_shed(gaushala=self.gaushala, capacity=10)
        TestDataFactory.create_shed(gaushala=self.gaushala, capacity=5)
        TestDataFactory.create_shed(gaushala=self.gaushala, capacity=50, status='INACTIVE')
        TestDataFactory.create_cattle(shed=shed)
        response = self.client.get(f'/api/v1/sheds/gaushala/{self.gaushala.id}/available-capacity/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['active_sheds'], 2)
        self.assertEqual(response.data['total_capacity'], 15)
        self.assertEqual(response.data['available_capacity'], 14)

    def test_available_for_cattle_skips_full_and_inactive(self):
        full = TestDataFactory.create_shed(gaushala=self.gaushala, capacity=1)
        TestDataFactory.create_cattle(shed=full)
        roomy = TestDataFactory.create_shed(gaushala=self.gaushala, capacity=20)
        TestDataFactory.create_shed(gaushala=self.gaushala, status='MAINTENANCE')
        response = self.client.get(f'/api/v1/sheds/available/?gaushala={self.gaushala.id}')
        self.assertEqual([row['id'] for row in response.data], [roomy.id])

    def test_capacity_dashboard(self):
        crowded = TestDataFactory.create_shed(gaushala=self.gaushala, capacity=2)
        TestDataFactory.create_cattle(shed=crowded)
        TestDataFactory.create_cattle(shed=crowded)
        TestDataFactory.create_shed(gaushala=self.gaushala, capacity=10)
        response = self.client.get(f'/api/v1/sheds/capacity-dashboard/?gaushala={self.gaushala.id}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        summary = response.data['summary']
        self.assertEqual(summary['total_sheds'], 2)
        self.assertEqual(summary['total_occupancy'], 2)
        self.assertEqual(summary['overcrowded_sheds'], 1)
        levels = {row['id']: row['capacity_level'] for row in response.data['sheds']}
        self.assertEqual(levels[crowded.id], 'OVERCROWDED')

    def test_capacity_level(self):
        self.assertEqual(capacity_level(95.0), 'OVERCROWDED')
        self.assertEqual(capacity_level(70.0), 'WARNING')
        self.assertEqual(capacity_level(10.0), 'NORMAL')

    def test_capacity_level_uses_unrounded_occupancy(self):
        shed = Shed(capacity=10000)
        shed.occupancy = 8996
        self.assertEqual(shed.occupancy_percentage, 90.0)
        self.assertEqual(capacity_level(shed.occupancy_ratio), 'WARNING')
        shed.occupancy = 9000
        self.assertEqual(capacity_level(shed.occupancy_ratio), 'OVERCROWDED')

    def test_non_admin_without_access(self):
        shed = TestDataFactory.create_shed(gaushala=self.gaushala)
        self.client.authenticate_user(TestDataFactory.create_user())
        response = self.client.get(f'/api/v1/sheds/{shed.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        response = self.client.get(f'/api/v1/sheds/gaushala/{self.gaushala.id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
