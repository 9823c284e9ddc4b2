"""
Test suite for gaushala access control
Tests: admin detection, grant/revoke, access checks, queryset scoping
"""
from django.test import TestCase
from rest_framework import status

from gaushala.core.models import AuditLog
from gaushala.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from gaushala.herd.models import Cattle
from .models import UserGaushalaAccess
from .permissions import (
    is_gaushala_admin, get_accessible_gaushala_ids, filter_by_gaushala_access, has_gaushala_access
)


class AccessHelperTests(TestCase):
    """Test the access scoping helpers"""

    def setUp(self):
        self.gaushala = TestDataFactory.create_gaushala()
        self.other = TestDataFactory.create_gaushala()

    def test_admin_detection(self):
        self.assertTrue(is_gaushala_admin(TestDataFactory.create_admin()))
        self.assertTrue(is_gaushala_admin(TestDataFactory.create_user(is_staff=True)))
        self.assertTrue(is_gaushala_admin(TestDataFactory.create_user(is_superuser=True)))
        self.assertFalse(is_gaushala_admin(TestDataFactory.create_user(groups=['Staff'])))

    def test_admin_sees_everything(self):
        admin = TestDataFactory.create_admin()
        self.assertIsNone(get_accessible_gaushala_ids(admin))
        self.assertTrue(has_gaushala_access(admin, self.other.id))

    def test_user_limited_to_grants(self):
        user = TestDataFactory.create_user()
        self.assertEqual(get_accessible_gaushala_ids(user), [])
        TestDataFactory.grant_access(user, self.gaushala)
        self.assertEqual(get_accessible_gaushala_ids(user), [self.gaushala.id])
        self.assertTrue(has_gaushala_access(user, str(self.gaushala.id)))
        self.assertFalse(has_gaushala_access(user, self.other.id))
        self.assertFalse(has_gaushala_access(user, 'abc'))

    def test_filter_by_gaushala_access(self):
        user = TestDataFactory.create_user()
        TestDataFactory.grant_access(user, self.gaushala)
        TestDataFactory.create_cattle(gaushala=self.gaushala)
        TestDataFactory.create_cattle(gaushala=self.other)
        self.assertEqual(filter_by_gaushala_access(Cattle.objects.all(), user).count(), 1)


class AccessEndpointTests(TestCase):
    """Test the access management endpoints"""

    def setUp(self):
        self.admin = TestDataFactory.create_admin()
        self.user = TestDataFactory.create_user()
        self.gaushala = TestDataFactory.create_gaushala(city='Mathura', state='Uttar Pradesh')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def test_grant_access(self):
        response = self.client.post('/api/v1/access/grant/', {
            'user': self.user.id, 'gaushala': self.gaushala.id,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['gaushala_location'], 'Mathura, Uttar Pradesh')
        self.assertEqual(response.data['granted_by'], self.admin.id)
        self.assertTrue(AuditLog.objects.filter(action='access_grant').exists())

        response = self.client.post('/api/v1/access/grant/', {
            'user': self.user.id, 'gaushala': self.gaushala.id,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(UserGaushalaAccess.objects.filter(user=self.user).count(), 1)

    def test_grant_unknown_ids(self):
        response = self.client.post('/api/v1/access/grant/', {'user': 99999, 'gaushala': self.gaushala.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('user', response.data)

    def test_revoke_access(self):
        TestDataFactory.grant_access(self.user, self.gaushala, granted_by=self.admin)
        response = self.client.post('/api/v1/access/revoke/', {
            'user': self.user.id, 'gaushala': self.gaushala.id,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(UserGaushalaAccess.objects.filter(user=self.user).exists())
        self.assertTrue(AuditLog.objects.filter(action='access_revoke').exists())

        response = self.client.post('/api/v1/access/revoke/', {
            'user': self.user.id, 'gaushala': self.gaushala.id,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_non_admin_cannot_manage_access(self):
        self.client.authenticate_user(self.user)
        response = self.client.post('/api/v1/access/grant/', {
            'user': self.user.id, 'gaushala': self.gaushala.id,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        response = self.client.get('/api/v1/access/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_access_list_and_users(self):
        TestDataFactory.grant_access(self.user, self.gaushala)
        response = self.client.get(f'/api/v1/access/?user={self.user.id}')
        self.assertEqual(len(response.data), 1)
        response = self.client.get('/api/v1/access/users/')
        rows = {row['id']: row for row in response.data}
        self.assertEqual(rows[self.user.id]['gaushala_ids'], [self.gaushala.id])
        self.assertEqual(rows[self.admin.id]['groups'], ['Admin'])

    def test_check_access(self):
        TestDataFactory.grant_access(self.user, self.gaushala)
        response = self.client.get(f'/api/v1/access/check/?gaushala={self.gaushala.id}&user={self.user.id}')
        self.assertTrue(response.data['has_access'])
        self.assertFalse(response.data['is_admin'])

        other = TestDataFactory.create_gaushala()
        self.client.authenticate_user(self.user)
        response = self.client.get(f'/api/v1/access/check/?gaushala={other.id}')
        self.assertFalse(response.data['has_access'])
        response = self.client.get(f'/api/v1/access/check/?gaushala={other.id}&user={self.admin.id}')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        response = self.client.get('/api/v1/access/check/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
