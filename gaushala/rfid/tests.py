"""
Test suite for the RFID module
Tests: scan recording, cattle resolution, tag lookups, date ranges and statistics
"""
from datetime import datetime, time, timedelta

from django.test import TestCase
from django.utils import timezone
from rest_framework import status

from gaushala.core.models import AuditLog
from gaushala.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from .models import RFIDScan


def local_noon(days_ago=0):
    day = timezone.localdate() - timedelta(days=days_ago)
    return timezone.make_aware(datetime.combine(day, time(12, 0)))


class RFIDScanTests(TestCase):
    """Test RFID scan endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_admin()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.gaushala = TestDataFactory.create_gaushala()
        self.cattle = TestDataFactory.create_cattle(gaushala=self.gaushala, rfid_tag_no='E2801160')

    def test_scan_resolves_cattle_and_gaushala(self):
        response = self.client.post('/api/v1/rfid-scans/', {
            'tag_id_hex': 'e2801160',
            'scan_location': 'Gate 1',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['tag_id_hex'], 'E2801160')
        self.assertEqual(response.data['cattle'], self.cattle.id)
        self.assertEqual(response.data['gaushala'], self.gaushala.id)
        self.assertIsNotNone(response.data['scan_timestamp'])
        self.assertTrue(AuditLog.objects.filter(action='rfid_scan', object_reference='E2801160').exists())

    def test_unknown_tag_needs_gaushala(self):
        response = self.client.post('/api/v1/rfid-scans/', {'tag_id_hex': 'ABCDEF'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('gaushala', response.data)

        response = self.client.post('/api/v1/rfid-scans/', {
            'tag_id_hex': 'ABCDEF', 'gaushala': self.gaushala.id,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIsNone(response.data['cattle'])

    def test_non_hex_tag_rejected(self):
        for tag in ('XYZ123', '0x1F', '-1F'):
            response = self.client.post('/api/v1/rfid-scans/', {
                'tag_id_hex': tag, 'gaushala': self.gaushala.id,
            }, format='json')
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_scan_without_access(self):
        self.client.authenticate_user(TestDataFactory.create_user())
        response = self.client.post('/api/v1/rfid-scans/', {'tag_id_hex': 'E2801160'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(RFIDScan.objects.exists())

    def test_scans_by_tag_latest_and_count(self):
        TestDataFactory.create_rfid_scan('E2801160', cattle=self.cattle, scan_timestamp=local_noon(2))
        latest = TestDataFactory.create_rfid_scan('E2801160', cattle=self.cattle, scan_timestamp=local_noon(0))
        TestDataFactory.create_rfid_scan('AAAA', gaushala=self.gaushala)

        response = self.client.get('/api/v1/rfid-scans/tag/e2801160/')
        self.assertEqual(response.data['count'], 2)
        self.assertEqual(response.data['results'][0]['id'], latest.id)

        response = self.client.get('/api/v1/rfid-scans/tag/E2801160/latest/')
        self.assertEqual(response.data['id'], latest.id)

        response = self.client.get('/api/v1/rfid-scans/tag/e2801160/count/')
        self.assertEqual(response.data, {'tag_id_hex': 'E2801160', 'count': 2})

    def test_latest_for_unseen_tag(self):
        response = self.client.get('/api/v1/rfid-scans/tag/BEEF/latest/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_date_range(self):
        TestDataFactory.create_rfid_scan(gaushala=self.gaushala, scan_timestamp=local_noon(10))
        TestDataFactory.create_rfid_scan(gaushala=self.gaushala, scan_timestamp=local_noon(1))
        start = (timezone.localdate() - timedelta(days=3)).isoformat()
        end = timezone.localdate().isoformat()
        response = self.client.get(f'/api/v1/rfid-scans/range/?start_date={start}&end_date={end}')
        self.assertEqual(response.data['count'], 1)
        response = self.client.get('/api/v1/rfid-scans/range/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_stats_over_scan_span(self):
        TestDataFactory.create_rfid_scan('AA01', gaushala=self.gaushala, scan_timestamp=local_noon(2))
        TestDataFactory.create_rfid_scan('AA01', gaushala=self.gaushala, scan_timestamp=local_noon(1))
        TestDataFactory.create_rfid_scan('BB02', gaushala=self.gaushala, scan_timestamp=local_noon(0))
        response = self.client.get('/api/v1/rfid-scans/stats/')
        self.assertEqual(response.data['total_scans'], 3)
        self.assertEqual(response.data['unique_tags'], 2)
        self.assertEqual(response.data['last_scan_time'], local_noon(0))
        self.assertEqual(response.data['average_scans_per_day'], 1.0)

    def test_stats_over_requested_range(self):
        TestDataFactory.create_rfid_scan('AA01', gaushala=self.gaushala, scan_timestamp=local_noon(0))
        start = (timezone.localdate() - timedelta(days=3)).isoformat()
        end = timezone.localdate().isoformat()
        response = self.client.get(f'/api/v1/rfid-scans/stats/?start_date={start}&end_date={end}')
        self.assertEqual(response.data['average_scans_per_day'], 0.25)

    def test_stats_without_scans(self):
        response = self.client.get('/api/v1/rfid-scans/stats/')
        self.assertEqual(response.data['total_scans'], 0)
        self.assertIsNone(response.data['last_scan_time'])
        self.assertEqual(response.data['average_scans_per_day'], 0.0)
