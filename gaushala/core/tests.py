"""
Test suite for the core module
Tests: authentication, users, settings, audit logs, global search, caching, management commands
"""
from io import StringIO

from django.contrib.auth.models import Group
from django.core.cache import cache
from django.core.management import call_command
from django.test import TestCase
from rest_framework import status

from gaushala.herd.models import Breed
from gaushala.inventory.models import InventoryUnit
from .cache_signals import suspend_cache_signals
from .cache_utils import cached_query, get_cache_generation, invalidate_dashboard_cache
from .models import AuditLog, Setting
from .test_utils import TestDataFactory, AuthenticatedAPIClient
from .utils import create_audit_log, parse_bool, parse_date


class AuthTests(TestCase):
    """Test login, refresh and current user endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user(username='gopal', password='Cows-and-calves-42')
        self.client = AuthenticatedAPIClient()

    def test_login_returns_tokens(self):
        response = self.client.post('/api/v1/auth/login/', {
            'username': 'gopal', 'password': 'Cows-and-calves-42',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)
        self.assertIn('refresh', response.data)

        response = self.client.post('/api/v1/auth/refresh/', {'refresh': response.data['refresh']}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)

    def test_login_with_wrong_password(self):
        response = self.client.post('/api/v1/auth/login/', {'username': 'gopal', 'password': 'nope'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_refresh_with_garbage_token(self):
        response = self.client.post('/api/v1/auth/refresh/', {'refresh': 'not-a-token'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me(self):
        gaushala = TestDataFactory.create_gaushala()
        TestDataFactory.grant_access(self.user, gaushala)
        self.client.authenticate_user(self.user)
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['username'], 'gopal')
        self.assertFalse(response.data['is_admin'])
        self.assertEqual(response.data['gaushala_ids'], [gaushala.id])

    def test_me_for_admin(self):
        self.client.authenticate_user(TestDataFactory.create_admin())
        response = self.client.get('/api/v1/auth/me/')
        self.assertTrue(response.data['is_admin'])
        self.assertIsNone(response.data['gaushala_ids'])
        self.assertEqual(response.data['groups'], ['Admin'])


class UserManagementTests(TestCase):
    """Test user and setting endpoints (admin only)"""

    def setUp(self):
        self.admin = TestDataFactory.create_admin()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def test_create_user_with_groups(self):
        Group.objects.get_or_create(name='Veterinarian')
        response = self.client.post('/api/v1/users/', {
            'username': 'dr_sharma',
            'email': 'sharma@example.com',
            'password': 'Healthy-herd-2024',
            'password_confirm': 'Healthy-herd-2024',
            'groups': ['Veterinarian'],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['username'], 'dr_sharma')
        self.assertNotIn('password', response.data)

    def test_unknown_group_rejected(self):
        response = self.client.post('/api/v1/users/', {
            'username': 'ghost',
            'password': 'Healthy-herd-2024',
            'password_confirm': 'Healthy-herd-2024',
            'groups': ['Cowherd'],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('groups', response.data)

    def test_user_list_shows_gaushala_access(self):
        gaushala = TestDataFactory.create_gaushala()
        staff = TestDataFactory.create_user(username='ramesh', groups=['Staff'])
        TestDataFactory.grant_access(staff, gaushala)
        response = self.client.get('/api/v1/users/')
        rows = {row['username']: row for row in response.data}
        self.assertEqual(rows['ramesh']['groups'], ['Staff'])
        self.assertFalse(rows['ramesh']['is_admin'])
        self.assertEqual(rows['ramesh']['gaushala_ids'], [gaushala.id])
        self.assertIsNone(rows[self.admin.username]['gaushala_ids'])

    def test_password_mismatch(self):
        response = self.client.post('/api/v1/users/', {
            'username': 'mismatch',
            'password': 'Healthy-herd-2024',
            'password_confirm': 'Healthy-herd-2025',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_cannot_delete_self(self):
        response = self.client.delete(f'/api/v1/users/{self.admin.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_non_admin_forbidden(self):
        self.client.authenticate_user(TestDataFactory.create_user())
        self.assertEqual(self.client.get('/api/v1/users/').status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(self.client.get('/api/v1/settings/').status_code, status.HTTP_403_FORBIDDEN)

    def test_settings_crud(self):
        response = self.client.post('/api/v1/settings/', {'key': 'default_page_size', 'value': '5'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        setting_id = response.data['id']
        response = self.client.patch(f'/api/v1/settings/{setting_id}/', {'value': '10'}, format='json')
        self.assertEqual(response.data['value'], '10')
        response = self.client.delete(f'/api/v1/settings/{setting_id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)

    def test_page_size_setting_applies_to_lists(self):
        Setting.objects.create(key='default_page_size', value='2')
        gaushala = TestDataFactory.create_gaushala()
        for _ in range(3):
            TestDataFactory.create_cattle(gaushala=gaushala)
        response = self.client.get('/api/v1/cattle/')
        self.assertEqual(len(response.data['results']), 2)
        self.assertEqual(response.data['total_pages'], 2)
        response = self.client.get('/api/v1/cattle/?page=2')
        self.assertEqual(len(response.data['results']), 1)
        self.assertIsNone(response.data['next'])


class AuditLogTests(TestCase):
    """Test audit log helpers and endpoints"""

    def setUp(self):
        self.admin = TestDataFactory.create_admin()
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()

    def test_create_audit_log_requires_fields(self):
        self.assertIsNone(create_audit_log(user=self.user, action='create', model_name='Cattle'))
        log = create_audit_log(user=self.user, action='create', model_name='Cattle', object_id=5)
        self.assertEqual(log.object_id, '5')

    def test_non_admin_sees_own_entries(self):
        create_audit_log(user=self.user, action='create', model_name='Shed', object_id=1)
        create_audit_log(user=self.admin, action='delete', model_name='Shed', object_id=2)
        self.client.authenticate_user(self.user)
        response = self.client.get('/api/v1/audit-logs/')
        self.assertEqual(response.data['count'], 1)

        other = AuditLog.objects.get(user=self.admin)
        response = self.client.get(f'/api/v1/audit-logs/{other.id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_filters(self):
        create_audit_log(user=self.user, action='create', model_name='Shed', object_id=1, object_reference='A1')
        create_audit_log(user=self.user, action='stock_in', model_name='StockTransaction', object_id=2)
        self.client.authenticate_user(self.admin)
        response = self.client.get('/api/v1/audit-logs/?action=stock_in')
        self.assertEqual(response.data['count'], 1)
        response = self.client.get('/api/v1/audit-logs/?reference=a1')
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['user']['id'], self.user.id)


class GlobalSearchTests(TestCase):
    """Test the cross-module search endpoint"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_admin())

    def test_empty_query(self):
        response = self.client.get('/api/v1/search/')
        self.assertEqual(response.data['cattle'], [])
        self.assertEqual(response.data['milk_records'], [])

    def test_search_across_modules(self):
        gaushala = TestDataFactory.create_gaushala()
        TestDataFactory.create_cattle(gaushala=gaushala, name='Kapila')
        TestDataFactory.create_medicine(gaushala=gaushala, name='Kapila Tonic')
        TestDataFactory.create_milk_record(gaushala=gaushala, notes='Kapila calved yesterday')
        response = self.client.get('/api/v1/search/?q=kapila')
        self.assertEqual(len(response.data['cattle']), 1)
        self.assertEqual(len(response.data['medicines']), 1)
        self.assertEqual(len(response.data['milk_records']), 1)
        self.assertEqual(response.data['sheds'], [])


class CacheTests(TestCase):
    """Test generation-based report caching and its invalidation"""

    def setUp(self):
        cache.clear()

    def test_cached_query_until_invalidated(self):
        calls = []

        @cached_query(cache_ttl=60, key_prefix='dashboard')
        def expensive(value):
            calls.append(value)
            return {'value': value}

        self.assertEqual(expensive(1), {'value': 1})
        self.assertEqual(expensive(1), {'value': 1})
        self.assertEqual(len(calls), 1)
        expensive(2)
        self.assertEqual(len(calls), 2)

        invalidate_dashboard_cache()
        expensive(1)
        self.assertEqual(len(calls), 3)

    def test_herd_change_bumps_generation_after_commit(self):
        before = get_cache_generation('dashboard')
        with self.captureOnCommitCallbacks(execute=True):
            TestDataFactory.create_shed()
        self.assertGreater(get_cache_generation('dashboard'), before)
        self.assertGreater(get_cache_generation('reports'), 0)

    def test_suspended_signals_do_not_invalidate(self):
        before = get_cache_generation('dashboard')
        with self.captureOnCommitCallbacks(execute=True):
            with suspend_cache_signals():
                TestDataFactory.create_gaushala()
                TestDataFactory.create_breed()
        self.assertEqual(get_cache_generation('dashboard'), before)


class ManagementCommandTests(TestCase):
    """Test the setup management commands"""

    def test_create_user_groups(self):
        call_command('create_user_groups', stdout=StringIO())
        self.assertEqual(
            set(Group.objects.values_list('name', flat=True)),
            {'Admin', 'Manager', 'Staff', 'Veterinarian'},
        )
        manager = Group.objects.get(name='Manager')
        self.assertFalse(manager.permissions.filter(codename='add_usergaushalaaccess').exists())
        self.assertTrue(manager.permissions.filter(codename='add_milkrecord').exists())

    def test_seed_master_data_is_idempotent(self):
        out = StringIO()
        call_command('seed_master_data', stdout=out)
        breeds = Breed.objects.count()
        self.assertGreater(breeds, 0)
        self.assertTrue(InventoryUnit.objects.filter(unit_name='Kilogram', abbreviation='kg').exists())
        call_command('seed_master_data', stdout=StringIO())
        self.assertEqual(Breed.objects.count(), breeds)


class ParsingTests(TestCase):
    def test_parse_date(self):
        self.assertEqual(parse_date('2024-03-09').isoformat(), '2024-03-09')
        self.assertEqual(parse_date('2024-03-09T10:00:00Z').isoformat(), '2024-03-09')
        self.assertIsNone(parse_date('09/03/2024'))
        self.assertIsNone(parse_date(''))

    def test_parse_bool(self):
        self.assertTrue(parse_bool('true'))
        self.assertFalse(parse_bool('no'))
        self.assertIsNone(parse_bool(''))
