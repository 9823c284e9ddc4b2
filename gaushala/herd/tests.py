"""
Test suite for the herd module
Tests: master data, cattle registry, shed placement rules, RFID lookup, health records
"""
from datetime import date, timedelta

from django.core.cache import cache
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from rest_framework.exceptions import ValidationError

from gaushala.core.models import AuditLog
from gaushala.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from .models import Breed, Cattle
from .serializers import CattleSerializer


class MasterDataTests(TestCase):
    """Test breed/species/gender/colour endpoints"""

    def setUp(self):
        cache.clear()
        self.admin = TestDataFactory.create_admin()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def test_create_and_list_breeds(self):
        response = self.client.post('/api/v1/breeds/', {'name': 'Gir'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        response = self.client.get('/api/v1/breeds/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('Gir', [row['name'] for row in response.data])

    def test_breed_list_cache_invalidated_on_save(self):
        self.client.get('/api/v1/breeds/')
        Breed.objects.create(name='Sahiwal')
        response = self.client.get('/api/v1/breeds/')
        self.assertIn('Sahiwal', [row['name'] for row in response.data])

    def test_non_admin_cannot_create_master_data(self):
        self.client.authenticate_user(TestDataFactory.create_user())
        response = self.client.post('/api/v1/species/', {'name': 'Buffalo'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_color_hex_code(self):
        response = self.client.post('/api/v1/colors/', {'name': 'Red', 'hex_code': '#ff0000'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['hex_code'], '#FF0000')
        response = self.client.post('/api/v1/colors/', {'name': 'Blue', 'hex_code': 'blue'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_referenced_breed_cannot_be_deleted(self):
        breed = TestDataFactory.create_breed()
        TestDataFactory.create_cattle(breed=breed)
        response = self.client.delete(f'/api/v1/breeds/{breed.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(Breed.objects.filter(pk=breed.id).exists())


class CattleTests(TestCase):
    """Test cattle registry endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_admin()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.gaushala = TestDataFactory.create_gaushala()
        self.shed = TestDataFactory.create_shed(gaushala=self.gaushala, shed_number='A1', capacity=2)

    def cattle_payload(self, **overrides):
        payload = {
            'unique_animal_id': f'GS-{TestDataFactory.random_string(6).upper()}',
            'name': 'Kamdhenu',
            'gaushala': self.gaushala.id,
            'shed': self.shed.id,
        }
        payload.update(overrides)
        return payload

    def test_register_cattle(self):
        response = self.client.post('/api/v1/cattle/', self.cattle_payload(rfid_tag_no=' e200a1b2 '), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['rfid_tag_no'], 'E200A1B2')
        self.assertEqual(response.data['shed_number'], 'A1')
        self.assertTrue(AuditLog.objects.filter(model_name='Cattle', action='create').exists())

    def test_duplicate_rfid_tag_rejected(self):
        TestDataFactory.create_cattle(gaushala=self.gaushala, rfid_tag_no='E200A1B2')
        response = self.client.post('/api/v1/cattle/', self.cattle_payload(rfid_tag_no='e200a1b2'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('rfid_tag_no', response.data)

    def test_blank_rfid_tags_do_not_collide(self):
        first = self.client.post('/api/v1/cattle/', self.cattle_payload(rfid_tag_no=''), format='json')
        second = self.client.post('/api/v1/cattle/', self.cattle_payload(rfid_tag_no=''), format='json')
        self.assertEqual(first.status_code, status.HTTP_201_CREATED)
        self.assertEqual(second.status_code, status.HTTP_201_CREATED)
        self.assertIsNone(second.data['rfid_tag_no'])

    def test_full_shed_rejected(self):
        TestDataFactory.create_cattle(shed=self.shed)
        TestDataFactory.create_cattle(shed=self.shed)
        response = self.client.post('/api/v1/cattle/', self.cattle_payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('shed', response.data)

    def test_last_place_taken_between_validation_and_save(self):
        TestDataFactory.create_cattle(shed=self.shed)
        first = CattleSerializer(data=self.cattle_payload())
        second = CattleSerializer(data=self.cattle_payload())
        self.assertTrue(first.is_valid(), first.errors)
        self.assertTrue(second.is_valid(), second.errors)

        first.save()
        with self.assertRaises(ValidationError) as ctx:
            second.save()
        self.assertIn('shed', ctx.exception.detail)
        self.assertEqual(Cattle.objects.filter(shed=self.shed, is_active=True).count(), 2)

    def test_inactive_cattle_do_not_occupy_shed(self):
        TestDataFactory.create_cattle(shed=self.shed)
        TestDataFactory.create_cattle(shed=self.shed, is_active=False)
        response = self.client.post('/api/v1/cattle/', self.cattle_payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_shed_under_maintenance_rejected(self):
        shed = TestDataFactory.create_shed(gaushala=self.gaushala, status='MAINTENANCE')
        response = self.client.post('/api/v1/cattle/', self.cattle_payload(shed=shed.id), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_shed_from_other_gaushala_rejected(self):
        shed = TestDataFactory.create_shed()
        response = self.client.post('/api/v1/cattle/', self.cattle_payload(shed=shed.id), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_in_full_shed_allowed(self):
        cattle = TestDataFactory.create_cattle(shed=self.shed)
        TestDataFactory.create_cattle(shed=self.shed)
        response = self.client.patch(f'/api/v1/cattle/{cattle.id}/', {'name': 'Gauri'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['name'], 'Gauri')

    def test_move_between_sheds_is_logged(self):
        cattle = TestDataFactory.create_cattle(shed=self.shed)
        other = TestDataFactory.create_shed(gaushala=self.gaushala, shed_number='B2')
        response = self.client.patch(f'/api/v1/cattle/{cattle.id}/', {'shed': other.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        log = AuditLog.objects.filter(model_name='Cattle', action='update').latest('created_at')
        self.assertEqual(log.changes['shed'], {'from': 'A1', 'to': 'B2'})

    def test_list_filters(self):
        TestDataFactory.create_cattle(shed=self.shed, name='Nandini', milking_status='MILKING')
        TestDataFactory.create_cattle(gaushala=self.gaushala, name='Surabhi')
        response = self.client.get('/api/v1/cattle/?search=nand')
        self.assertEqual(response.data['count'], 1)
        response = self.client.get('/api/v1/cattle/?milking_status=milking')
        self.assertEqual(response.data['count'], 1)
        response = self.client.get(f'/api/v1/cattle/?gaushala={self.gaushala.id}')
        self.assertEqual(response.data['count'], 2)

    def test_non_admin_scoping(self):
        TestDataFactory.create_cattle(gaushala=self.gaushala)
        TestDataFactory.create_cattle()
        staff = TestDataFactory.create_user()
        TestDataFactory.grant_access(staff, self.gaushala)
        self.client.authenticate_user(staff)
        response = self.client.get('/api/v1/cattle/')
        self.assertEqual(response.data['count'], 1)

    def test_lookup_by_rfid(self):
        cattle = TestDataFactory.create_cattle(gaushala=self.gaushala, rfid_tag_no='ABC123')
        response = self.client.get('/api/v1/cattle/rfid/abc123/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['id'], cattle.id)
        response = self.client.get('/api/v1/cattle/rfid/FFFF/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_cattle_by_shed(self):
        TestDataFactory.create_cattle(shed=self.shed)
        TestDataFactory.create_cattle(shed=self.shed, is_active=False)
        response = self.client.get('/api/v1/cattle/shed/a1/')
        self.assertEqual(len(response.data), 1)
        response = self.client.get('/api/v1/cattle/shed/a1/?include_inactive=true')
        self.assertEqual(len(response.data), 2)

    def test_delete_cattle(self):
        cattle = TestDataFactory.create_cattle(gaushala=self.gaushala)
        response = self.client.delete(f'/api/v1/cattle/{cattle.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Cattle.objects.filter(pk=cattle.id).exists())

    def test_age_years(self):
        cattle = TestDataFactory.create_cattle(gaushala=self.gaushala)
        self.assertIsNone(cattle.age_years)
        today = date.today()
        cattle.dob = date(today.year - 3, 1, 1)
        self.assertEqual(cattle.age_years, 3)


class HealthRecordTests(TestCase):
    """Test health record endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_admin()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.cattle = TestDataFactory.create_cattle()
        self.today = timezone.localdate()

    def test_create_health_record(self):
        response = self.client.post('/api/v1/health-records/', {
            'cattle': self.cattle.id,
            'record_type': 'VACCINATION',
            'record_date': self.today.isoformat(),
            'vaccination_type': 'FMD',
            'next_vaccination_date': (self.today + timedelta(days=180)).isoformat(),
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['gaushala'], self.cattle.gaushala_id)
        self.assertEqual(response.data['created_by'], self.user.id)

    def test_next_date_before_record_date_rejected(self):
        response = self.client.post('/api/v1/health-records/', {
            'cattle': self.cattle.id,
            'record_type': 'CHECKUP',
            'record_date': self.today.isoformat(),
            'next_checkup_date': (self.today - timedelta(days=1)).isoformat(),
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('next_checkup_date', response.data)

    def test_negative_cost_rejected(self):
        response = self.client.post('/api/v1/health-records/', {
            'cattle': self.cattle.id,
            'record_type': 'TREATMENT',
            'record_date': self.today.isoformat(),
            'cost': '-5.00',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_history_for_cattle(self):
        TestDataFactory.create_health_record(self.cattle, record_date=self.today - timedelta(days=5))
        TestDataFactory.create_health_record(self.cattle)
        TestDataFactory.create_health_record(TestDataFactory.create_cattle())
        response = self.client.get(f'/api/v1/cattle/{self.cattle.id}/health-records/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 2)
        self.assertEqual(response.data[0]['record_date'], self.today.isoformat())

    def test_pending_vaccinations(self):
        TestDataFactory.create_health_record(
            self.cattle, record_type='VACCINATION', record_date=self.today - timedelta(days=200),
            next_vaccination_date=self.today,
        )
        TestDataFactory.create_health_record(
            self.cattle, record_type='VACCINATION', next_vaccination_date=self.today + timedelta(days=1),
        )
        inactive = TestDataFactory.create_cattle(is_active=False)
        TestDataFactory.create_health_record(
            inactive, record_type='VACCINATION', record_date=self.today - timedelta(days=200),
            next_vaccination_date=self.today - timedelta(days=3),
        )
        response = self.client.get('/api/v1/health-records/pending-vaccinations/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)

    def test_upcoming_checkups(self):
        TestDataFactory.create_health_record(self.cattle, next_checkup_date=self.today + timedelta(days=10))
        TestDataFactory.create_health_record(self.cattle, next_checkup_date=self.today + timedelta(days=45))
        response = self.client.get('/api/v1/health-records/upcoming-checkups/')
        self.assertEqual(len(response.data), 1)
        response = self.client.get('/api/v1/health-records/upcoming-checkups/?days=60')
        self.assertEqual(len(response.data), 2)
        response = self.client.get('/api/v1/health-records/upcoming-checkups/?days=soon')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_date_range(self):
        TestDataFactory.create_health_record(self.cattle, record_date=self.today - timedelta(days=40))
        TestDataFactory.create_health_record(self.cattle)
        start = (self.today - timedelta(days=7)).isoformat()
        response = self.client.get(f'/api/v1/health-records/range/?start_date={start}&end_date={self.today.isoformat()}')
        self.assertEqual(response.data['count'], 1)
        response = self.client.get('/api/v1/health-records/range/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
