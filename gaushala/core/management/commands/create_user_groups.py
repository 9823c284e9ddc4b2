from django.core.management.base import BaseCommand
from django.contrib.auth.models import Group, Permission

GAUSHALA_APPS = ['core', 'locations', 'herd', 'sheds', 'inventory', 'medicine', 'production', 'rfid', 'access']


class Command(BaseCommand):
    help = 'Create Django user groups for RBAC: Admin, Manager, Staff, Veterinarian'

    def handle(self, *args, **options):
        groups_config = [
            {
                'name': 'Admin',
                'description': 'Full system access including user and gaushala access management',
            },
            {
                'name': 'Manager',
                'description': 'Runs a gaushala: every module except users and access grants',
            },
            {
                'name': 'Staff',
                'description': 'Daily operations: milk records, RFID scans, stock movements',
            },
            {
                'name': 'Veterinarian',
                'description': 'Cattle health records and medicine inventory',
            },
        ]

        created_count = 0
        existing_count = 0

        for group_config in groups_config:
            name = group_config['name']
            group, created = Group.objects.get_or_create(name=name)
            if created:
                self.stdout.write(self.style.SUCCESS(f'✓ Created group: {name}'))
                created_count += 1
            else:
                self.stdout.write(f'  Group already exists: {name}')
                existing_count += 1

            group.permissions.set(self.permissions_for(name))
            self.stdout.write(f'  {group.permissions.count()} permissions set for {name} group')

        self.stdout.write(self.style.SUCCESS(
            f'\nCompleted: {created_count} groups created, {existing_count} groups already existed'
        ))

    def permissions_for(self, name):
        if name == 'Admin':
            return Permission.objects.all()
        app_permissions = Permission.objects.filter(content_type__app_label__in=GAUSHALA_APPS)
        if name == 'Manager':
            return app_permissions.exclude(content_type__model__in=['user', 'usergaushalaaccess'])
        if name == 'Staff':
            return app_permissions.filter(
                content_type__model__in=['milkrecord', 'rfidscan', 'stocktransaction', 'tablelayout']
            ) | app_permissions.filter(codename__startswith='view_')
        # Veterinarian
        return app_permissions.filter(
            content_type__model__in=['healthrecord', 'medicine']
        ) | app_permissions.filter(content_type__model='cattle', codename__in=['view_cattle', 'change_cattle'])
