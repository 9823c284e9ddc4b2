"""
Management command to load the standard master data lists
Usage: python manage.py seed_master_data
"""
from django.core.management.base import BaseCommand
from django.db import transaction
from gaushala.core.cache_signals import suspend_cache_signals
from gaushala.core.model_cache import MASTER_MODELS, invalidate_master_list
from gaushala.herd.models import Breed, Species, Gender, Color
from gaushala.inventory.models import InventoryType, InventoryUnit

BREEDS = [
    'Gir', 'Sahiwal', 'Red Sindhi', 'Tharparkar', 'Rathi', 'Kankrej', 'Ongole', 'Hariana',
    'Deoni', 'Hallikar', 'Amritmahal', 'Khillari', 'Vechur', 'Punganur', 'Crossbreed', 'Other',
]
SPECIES = ['Cow', 'Bull', 'Ox', 'Calf', 'Heifer', 'Buffalo']
GENDERS = ['Female', 'Male']
COLORS = [
    ('White', '#FFFFFF'), ('Black', '#000000'), ('Brown', '#8B4513'), ('Red', '#A52A2A'),
    ('Grey', '#808080'), ('Spotted', ''), ('Mixed', ''),
]
INVENTORY_TYPES = [
    ('Green Fodder', 'Fresh grass, maize and other green feed'),
    ('Dry Fodder', 'Straw, hay and stover'),
    ('Concentrate', 'Cattle feed, oil cakes and grains'),
    ('Mineral Mixture', 'Mineral and vitamin supplements'),
    ('Bedding', 'Bedding and flooring material'),
    ('Equipment', 'Milking and shed equipment'),
    ('Cleaning Supplies', 'Disinfectants and cleaning material'),
]
INVENTORY_UNITS = [
    ('Kilogram', 'kg'), ('Quintal', 'qtl'), ('Tonne', 't'), ('Litre', 'L'),
    ('Bag', 'bag'), ('Bundle', 'bdl'), ('Piece', 'pc'),
]


class Command(BaseCommand):
    help = 'Seed breeds, species, genders, colours and inventory types/units'

    def handle(self, *args, **options):
        created = {}
        with suspend_cache_signals(), transaction.atomic():
            created['breeds'] = self.seed(Breed, [{'name': name} for name in BREEDS])
            created['species'] = self.seed(Species, [{'name': name} for name in SPECIES])
            created['genders'] = self.seed(Gender, [{'name': name} for name in GENDERS])
            created['colors'] = self.seed(
                Color, [{'name': name, 'defaults': {'hex_code': hex_code}} for name, hex_code in COLORS]
            )
            created['inventory_types'] = self.seed(
                InventoryType,
                [{'name': name, 'defaults': {'description': description}} for name, description in INVENTORY_TYPES],
            )
            created['inventory_units'] = self.seed(
                InventoryUnit,
                [{'unit_name': name, 'defaults': {'abbreviation': abbreviation}} for name, abbreviation in INVENTORY_UNITS],
            )

        # Signals were suspended, so drop the cached lists by hand
        for name in MASTER_MODELS.values():
            invalidate_master_list(name)

        for name, count in created.items():
            self.stdout.write(f'  {name}: {count} created')
        self.stdout.write(self.style.SUCCESS(f'✓ Master data seeded ({sum(created.values())} rows created)'))

    def seed(self, model, rows):
        count = 0
        for row in rows:
            _, was_created = model.objects.get_or_create(**row)
            count += int(was_created)
        return count
