"""
Test utilities and factories for creating test data
"""
from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from gaushala.access.models import UserGaushalaAccess
from gaushala.herd.models import Breed, Cattle, HealthRecord
from gaushala.inventory.models import InventoryType, InventoryUnit, InventoryItem
from gaushala.locations.models import Gaushala
from gaushala.medicine.models import Medicine
from gaushala.production.models import MilkRecord
from gaushala.rfid.models import RFIDScan
from gaushala.sheds.models import Shed
from decimal import Decimal
from datetime import timedelta
import random
import string

User = get_user_model()


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def create_user(username=None, email=None, password='testpass123', is_staff=False, is_superuser=False, groups=None):
        """Create a test user"""
        if not username:
            username = f'testuser_{TestDataFactory.random_string(6)}'
        if not email:
            email = f'{username}@test.com'
        user = User.objects.create_user(
            username=username,
            email=email,
            password=password,
            is_staff=is_staff,
            is_superuser=is_superuser
        )
        for name in groups or []:
            group, _ = Group.objects.get_or_create(name=name)
            user.groups.add(group)
        return user

    @staticmethod
    def create_admin(username=None):
        """Create a user in the Admin group"""
        return TestDataFactory.create_user(username=username, groups=['Admin'])

    @staticmethod
    def create_gaushala(name=None, registration_number=None, city='Jaipur', state='Rajasthan'):
        """Create a test gaushala"""
        if not name:
            name = f'Gaushala_{TestDataFactory.random_string(6)}'
        if not registration_number:
            registration_number = f'REG-{TestDataFactory.random_string(8).upper()}'
        return Gaushala.objects.create(
            name=name,
            registration_number=registration_number,
            address=f'Test Address {name}',
            city=city,
            state=state,
            phone='9876543210'
        )

    @staticmethod
    def grant_access(user, gaushala, granted_by=None):
        """Give a non-admin user access to a gaushala"""
        return UserGaushalaAccess.objects.create(user=user, gaushala=gaushala, granted_by=granted_by)

    @staticmethod
    def create_shed(gaushala=None, shed_number=None, capacity=10, status='ACTIVE', shed_type='GENERAL'):
        """Create a test shed"""
        if not gaushala:
            gaushala = TestDataFactory.create_gaushala()
        if not shed_number:
            shed_number = f'S{TestDataFactory.random_string(4).upper()}'
        return Shed.objects.create(
            gaushala=gaushala,
            shed_name=f'Shed {shed_number}',
            shed_number=shed_number,
            capacity=capacity,
            status=status,
            shed_type=shed_type
        )

    @staticmethod
    def create_breed(name=None):
        """Create a test breed"""
        if not name:
            name = f'Breed_{TestDataFactory.random_string(6)}'
        return Breed.objects.create(name=name)

    @staticmethod
    def create_cattle(gaushala=None, shed=None, name=None, unique_animal_id=None, rfid_tag_no=None, is_active=True, **extra):
        """Create a test cattle record"""
        if not gaushala:
            gaushala = shed.gaushala if shed else TestDataFactory.create_gaushala()
        if not name:
            name = f'Cow_{TestDataFactory.random_string(5)}'
        if not unique_animal_id:
            unique_animal_id = f'GS-{TestDataFactory.random_string(8).upper()}'
        return Cattle.objects.create(
            gaushala=gaushala,
            shed=shed,
            name=name,
            unique_animal_id=unique_animal_id,
            rfid_tag_no=rfid_tag_no,
            is_active=is_active,
            **extra
        )

    @staticmethod
    def create_health_record(cattle, record_type='CHECKUP', record_date=None, **extra):
        """Create a test health record"""
        return HealthRecord.objects.create(
            cattle=cattle,
            gaushala=cattle.gaushala,
            record_type=record_type,
            record_date=record_date or timezone.localdate(),
            **extra
        )

    @staticmethod
    def create_milk_record(gaushala=None, shed_number='A1', milk_quantity=None, record_date=None,
                           fat_percentage=None, snf=None, status='GOOD', notes='', user=None, **extra):
        """Create a test milk record"""
        if not gaushala:
            gaushala = TestDataFactory.create_gaushala()
        if milk_quantity is None:
            milk_quantity = Decimal('50.00')
        return MilkRecord.objects.create(
            gaushala=gaushala,
            shed_number=shed_number,
            milk_quantity=milk_quantity,
            record_date=record_date or timezone.localdate(),
            fat_percentage=fat_percentage,
            snf=snf,
            status=status,
            notes=notes,
            created_by=user,
            updated_by=user,
            **extra
        )

    @staticmethod
    def create_medicine(gaushala=None, name=None, quantity=None, expiry_date=None):
        """Create a test medicine"""
        if not gaushala:
            gaushala = TestDataFactory.create_gaushala()
        if not name:
            name = f'Medicine_{TestDataFactory.random_string(6)}'
        if quantity is None:
            quantity = Decimal('100.00')
        return Medicine.objects.create(
            gaushala=gaushala,
            name=name,
            dosage='10ml',
            unit='ml',
            quantity=quantity,
            expiry_date=expiry_date or timezone.now() + timedelta(days=365)
        )

    @staticmethod
    def create_inventory_item(gaushala=None, item_name=None, quantity=None, minimum_stock_level=None):
        """Create a test inventory item with its type and unit"""
        if not gaushala:
            gaushala = TestDataFactory.create_gaushala()
        if not item_name:
            item_name = f'Item_{TestDataFactory.random_string(6)}'
        inventory_type, _ = InventoryType.objects.get_or_create(name='Dry Fodder')
        inventory_unit, _ = InventoryUnit.objects.get_or_create(unit_name='Kilogram', defaults={'abbreviation': 'kg'})
        return InventoryItem.objects.create(
            gaushala=gaushala,
            item_name=item_name,
            inventory_type=inventory_type,
            inventory_unit=inventory_unit,
            quantity=quantity if quantity is not None else Decimal('100.000'),
            minimum_stock_level=minimum_stock_level if minimum_stock_level is not None else Decimal('20.000')
        )

    @staticmethod
    def create_rfid_scan(tag_id_hex=None, gaushala=None, cattle=None, scan_timestamp=None):
        """Create a test RFID scan"""
        if not gaushala:
            gaushala = cattle.gaushala if cattle else TestDataFactory.create_gaushala()
        if not tag_id_hex:
            tag_id_hex = ''.join(random.choices('0123456789ABCDEF', k=12))
        return RFIDScan.objects.create(
            tag_id_hex=tag_id_hex,
            gaushala=gaushala,
            cattle=cattle,
            scan_timestamp=scan_timestamp or timezone.now()
        )


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helper"""

    def authenticate_user(self, user):
        """Authenticate the client with a user"""
        refresh = RefreshToken.for_user(user)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return self

    def logout(self):
        """Remove authentication"""
        self.credentials()
