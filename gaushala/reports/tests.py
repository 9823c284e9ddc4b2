"""
Test suite for the reports module
Tests: dashboard figures, milk and RFID analytics, scoping and cache invalidation
"""
from datetime import timedelta
from decimal import Decimal

from django.core.cache import cache
from django.test import TestCase
from django.utils import timezone
from rest_framework import status

from gaushala.core.cache_utils import invalidate_dashboard_cache
from gaushala.core.test_utils import TestDataFactory, AuthenticatedAPIClient


class DashboardTests(TestCase):
    """Test the dashboard summary endpoint"""

    def setUp(self):
        cache.clear()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_admin())
        self.gaushala = TestDataFactory.create_gaushala()
        self.today = timezone.localdate()

    def test_dashboard_figures(self):
        shed = TestDataFactory.create_shed(gaushala=self.gaushala, capacity=4)
        TestDataFactory.create_shed(gaushala=self.gaushala, capacity=10, status='MAINTENANCE')
        cow = TestDataFactory.create_cattle(shed=shed, milking_status='MILKING')
        TestDataFactory.create_cattle(shed=shed, pregnancy_status='PREGNANT')
        TestDataFactory.create_cattle(gaushala=self.gaushala, is_active=False)
        TestDataFactory.create_milk_record(gaushala=self.gaushala, milk_quantity=Decimal('40.00'))
        TestDataFactory.create_milk_record(
            gaushala=self.gaushala, milk_quantity=Decimal('25.00'), record_date=self.today - timedelta(days=3)
        )
        TestDataFactory.create_medicine(gaushala=self.gaushala, quantity=Decimal('2'))
        TestDataFactory.create_medicine(
            gaushala=self.gaushala, expiry_date=timezone.now() - timedelta(days=1)
        )
        TestDataFactory.create_inventory_item(gaushala=self.gaushala, quantity=Decimal('0'))
        TestDataFactory.create_health_record(
            cow, record_type='VACCINATION', next_vaccination_date=self.today - timedelta(days=1)
        )
        TestDataFactory.create_rfid_scan(gaushala=self.gaushala)

        response = self.client.get('/api/v1/reports/dashboard/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data
        self.assertEqual(data['date'], self.today.isoformat())
        self.assertEqual(data['cattle'], {'total': 3, 'active': 2, 'milking': 1, 'pregnant': 1})
        self.assertEqual(data['sheds']['total'], 2)
        self.assertEqual(data['sheds']['active'], 1)
        self.assertEqual(data['sheds']['total_capacity'], 4)
        self.assertEqual(data['sheds']['total_occupancy'], 2)
        self.assertEqual(data['sheds']['occupancy_percentage'], 50.0)
        self.assertEqual(Decimal(str(data['milk']['today'])), Decimal('40'))
        self.assertEqual(Decimal(str(data['milk']['last_30_days'])), Decimal('65'))
        self.assertEqual(data['medicines'], {'total': 2, 'expired': 1, 'low_stock': 1})
        self.assertEqual(data['inventory']['low_stock'], 1)
        self.assertEqual(data['health']['pending_vaccinations'], 1)
        self.assertEqual(data['rfid']['scans_today'], 1)

    def test_empty_dashboard(self):
        response = self.client.get(f'/api/v1/reports/dashboard/?gaushala={self.gaushala.id}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['cattle']['total'], 0)
        self.assertEqual(response.data['sheds']['occupancy_percentage'], 0.0)
        self.assertEqual(Decimal(str(response.data['milk']['today'])), Decimal('0'))

    def test_scoped_to_accessible_gaushalas(self):
        TestDataFactory.create_cattle(gaushala=self.gaushala)
        other = TestDataFactory.create_gaushala()
        TestDataFactory.create_cattle(gaushala=other)
        staff = TestDataFactory.create_user()
        TestDataFactory.grant_access(staff, self.gaushala)
        self.client.authenticate_user(staff)

        response = self.client.get('/api/v1/reports/dashboard/')
        self.assertEqual(response.data['cattle']['total'], 1)
        response = self.client.get(f'/api/v1/reports/dashboard/?gaushala={other.id}')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        response = self.client.get('/api/v1/reports/dashboard/?gaushala=abc')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_cache_refreshes_after_commit(self):
        TestDataFactory.create_cattle(gaushala=self.gaushala)
        response = self.client.get('/api/v1/reports/dashboard/')
        self.assertEqual(response.data['cattle']['total'], 1)

        with self.captureOnCommitCallbacks(execute=True):
            TestDataFactory.create_cattle(gaushala=self.gaushala)
        response = self.client.get('/api/v1/reports/dashboard/')
        self.assertEqual(response.data['cattle']['total'], 2)

    def test_cached_until_invalidated(self):
        self.client.get('/api/v1/reports/dashboard/')
        # Without the commit callback running the cached figures stay
        TestDataFactory.create_cattle(gaushala=self.gaushala)
        response = self.client.get('/api/v1/reports/dashboard/')
        self.assertEqual(response.data['cattle']['total'], 0)

        invalidate_dashboard_cache()
        response = self.client.get('/api/v1/reports/dashboard/')
        self.assertEqual(response.data['cattle']['total'], 1)


class MilkAnalyticsTests(TestCase):
    """Test the milk analytics endpoint"""

    def setUp(self):
        cache.clear()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_admin())
        self.gaushala = TestDataFactory.create_gaushala()
        self.today = timezone.localdate()

    def test_breakdowns(self):
        yesterday = self.today - timedelta(days=1)
        TestDataFactory.create_milk_record(
            gaushala=self.gaushala, shed_number='A1', milk_quantity=Decimal('30.00'),
            fat_percentage=Decimal('4.00'), record_date=yesterday,
        )
        TestDataFactory.create_milk_record(
            gaushala=self.gaushala, shed_number='B2', milk_quantity=Decimal('50.00'),
            fat_percentage=Decimal('5.00'), status='EXCELLENT',
        )
        TestDataFactory.create_milk_record(
            gaushala=self.gaushala, shed_number='A1', milk_quantity=Decimal('10.00'),
            record_date=self.today - timedelta(days=60),
        )

        response = self.client.get('/api/v1/reports/milk-analytics/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        summary = response.data['summary']
        self.assertEqual(summary['record_count'], 2)
        self.assertEqual(Decimal(str(summary['total_quantity'])), Decimal('80'))
        self.assertEqual(Decimal(str(summary['average_fat'])), Decimal('4.5'))
        self.assertEqual([row['date'] for row in response.data['daily']], [yesterday.isoformat(), self.today.isoformat()])
        self.assertEqual([row['shed_number'] for row in response.data['by_shed']], ['B2', 'A1'])
        self.assertEqual(
            {row['status']: row['record_count'] for row in response.data['quality']},
            {'EXCELLENT': 1, 'GOOD': 1},
        )

    def test_explicit_range(self):
        TestDataFactory.create_milk_record(
            gaushala=self.gaushala, record_date=self.today - timedelta(days=60)
        )
        start = (self.today - timedelta(days=90)).isoformat()
        response = self.client.get(f'/api/v1/reports/milk-analytics/?start_date={start}')
        self.assertEqual(response.data['summary']['record_count'], 1)
        self.assertEqual(response.data['start_date'], start)

    def test_start_after_end(self):
        response = self.client.get(
            '/api/v1/reports/milk-analytics/?start_date=2024-05-10&end_date=2024-05-01'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class RFIDAnalyticsTests(TestCase):
    """Test the RFID analytics endpoint"""

    def setUp(self):
        cache.clear()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_admin())
        self.gaushala = TestDataFactory.create_gaushala()

    def test_counts_and_top_tags(self):
        cow = TestDataFactory.create_cattle(gaushala=self.gaushala, rfid_tag_no='AB12')
        TestDataFactory.create_rfid_scan('AB12', cattle=cow)
        TestDataFactory.create_rfid_scan('AB12', cattle=cow)
        TestDataFactory.create_rfid_scan('FFFF', gaushala=self.gaushala)

        response = self.client.get('/api/v1/reports/rfid-analytics/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_scans'], 3)
        self.assertEqual(response.data['unknown_tag_scans'], 1)
        self.assertEqual(response.data['top_tags'][0], {'tag_id_hex': 'AB12', 'scan_count': 2})
        self.assertEqual(len(response.data['daily']), 1)
        self.assertEqual(response.data['daily'][0]['unique_tags'], 2)

    def test_start_after_end(self):
        response = self.client.get(
            '/api/v1/reports/rfid-analytics/?start_date=2024-05-10&end_date=2024-05-01'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_forbidden_gaushala(self):
        other = TestDataFactory.create_gaushala()
        staff = TestDataFactory.create_user()
        TestDataFactory.grant_access(staff, self.gaushala)
        self.client.authenticate_user(staff)
        response = self.client.get(f'/api/v1/reports/rfid-analytics/?gaushala={other.id}')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
