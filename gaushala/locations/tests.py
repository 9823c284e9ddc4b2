"""
Test suite for gaushalas and acquisition locations
"""
from django.core.cache import cache
from django.test import TestCase
from rest_framework import status

from gaushala.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from .models import Gaushala


class GaushalaTests(TestCase):
    """Test gaushala endpoints"""

    def setUp(self):
        self.admin = TestDataFactory.create_admin()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def test_create_gaushala(self):
        response = self.client.post('/api/v1/gaushalas/', {
            'name': 'Shri Krishna Gaushala',
            'registration_number': 'RJ-2019-0042',
            'city': 'Jaipur',
            'state': 'Rajasthan',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(Gaushala.objects.filter(registration_number='RJ-2019-0042').exists())

    def test_duplicate_registration_number(self):
        TestDataFactory.create_gaushala(registration_number='RJ-1')
        response = self.client.post('/api/v1/gaushalas/', {
            'name': 'Copy', 'registration_number': 'RJ-1',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_non_admin_sees_only_granted(self):
        granted = TestDataFactory.create_gaushala()
        TestDataFactory.create_gaushala()
        user = TestDataFactory.create_user()
        TestDataFactory.grant_access(user, granted)
        self.client.authenticate_user(user)

        response = self.client.get('/api/v1/gaushalas/')
        self.assertEqual([row['id'] for row in response.data], [granted.id])
        response = self.client.patch(f'/api/v1/gaushalas/{granted.id}/', {'city': 'Ajmer'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        response = self.client.post('/api/v1/gaushalas/', {'name': 'New', 'registration_number': 'X-1'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_requires_authentication(self):
        self.client.logout()
        response = self.client.get('/api/v1/gaushalas/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class LocationTests(TestCase):
    """Test acquisition location endpoints"""

    def setUp(self):
        cache.clear()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user())

    def test_create_and_list(self):
        response = self.client.post('/api/v1/locations/', {'name': 'Pushkar Cattle Fair', 'city': 'Pushkar'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        response = self.client.get('/api/v1/locations/')
        self.assertEqual([row['name'] for row in response.data], ['Pushkar Cattle Fair'])
