# Generated manually
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('locations', '0001_initial'),
        ('sheds', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Breed',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100, unique=True)),
                ('description', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'breeds',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Species',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100, unique=True)),
                ('description', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'species',
                'ordering': ['name'],
                'verbose_name_plural': 'species',
            },
        ),
        migrations.CreateModel(
            name='Gender',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=50, unique=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'genders',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Color',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=50, unique=True)),
                ('hex_code', models.CharField(blank=True, max_length=7)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'colors',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Cattle',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('unique_animal_id', models.CharField(max_length=50, unique=True)),
                ('name', models.CharField(max_length=200)),
                ('dob', models.DateField(blank=True, null=True)),
                ('weight', models.DecimalField(blank=True, decimal_places=2, max_digits=7, null=True)),
                ('height', models.DecimalField(blank=True, decimal_places=2, max_digits=6, null=True)),
                ('horn_status', models.CharField(blank=True, max_length=50)),
                ('disability', models.CharField(blank=True, max_length=255)),
                ('ear_tag_no', models.CharField(blank=True, max_length=50)),
                ('rfid_tag_no', models.CharField(blank=True, max_length=64, null=True, unique=True)),
                ('microchip_no', models.CharField(blank=True, max_length=64)),
                ('vaccination_status', models.CharField(blank=True, max_length=50)),
                ('deworming_schedule', models.CharField(blank=True, max_length=255)),
                ('medical_history', models.TextField(blank=True)),
                ('last_health_checkup_date', models.DateField(blank=True, null=True)),
                ('vet_name', models.CharField(blank=True, max_length=200)),
                ('vet_contact', models.CharField(blank=True, max_length=20)),
                ('milking_status', models.CharField(choices=[('MILKING', 'Milking'), ('DRY', 'Dry'), ('NOT_APPLICABLE', 'Not Applicable')], default='NOT_APPLICABLE', max_length=20)),
                ('lactation_number', models.PositiveIntegerField(blank=True, null=True)),
                ('milk_yield_per_day', models.DecimalField(blank=True, decimal_places=2, max_digits=6, null=True)),
                ('last_calving_date', models.DateField(blank=True, null=True)),
                ('calves_count', models.PositiveIntegerField(default=0)),
                ('pregnancy_status', models.CharField(choices=[('PREGNANT', 'Pregnant'), ('NOT_PREGNANT', 'Not Pregnant'), ('UNKNOWN', 'Unknown')], default='UNKNOWN', max_length=20)),
                ('date_of_acquisition', models.DateField(blank=True, null=True)),
                ('previous_owner', models.CharField(blank=True, max_length=200)),
                ('date_of_entry', models.DateField(blank=True, null=True)),
                ('feeding_schedule', models.CharField(blank=True, max_length=255)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('gaushala', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='cattle', to='locations.gaushala')),
                ('breed', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='cattle', to='herd.breed')),
                ('species', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='cattle', to='herd.species')),
                ('gender', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='cattle', to='herd.gender')),
                ('color', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='cattle', to='herd.color')),
                ('source', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='cattle', to='locations.location')),
                ('shed', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='cattle', to='sheds.shed')),
            ],
            options={
                'db_table': 'cattle',
                'ordering': ['-created_at'],
                'verbose_name_plural': 'cattle',
                'indexes': [
                    models.Index(fields=['gaushala', 'is_active'], name='idx_cattle_gaushala_active'),
                    models.Index(fields=['ear_tag_no'], name='idx_cattle_ear_tag'),
                ],
            },
        ),
        migrations.CreateModel(
            name='HealthRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('record_type', models.CharField(choices=[('VACCINATION', 'Vaccination'), ('TREATMENT', 'Treatment'), ('CHECKUP', 'Checkup'), ('SURGERY', 'Surgery')], max_length=20)),
                ('record_date', models.DateField()),
                ('veterinarian_name', models.CharField(blank=True, max_length=200)),
                ('veterinarian_license', models.CharField(blank=True, max_length=100)),
                ('veterinarian_contact', models.CharField(blank=True, max_length=20)),
                ('diagnosis', models.TextField(blank=True)),
                ('treatment', models.TextField(blank=True)),
                ('medications', models.TextField(blank=True)),
                ('dosage_instructions', models.TextField(blank=True)),
                ('vaccination_type', models.CharField(blank=True, max_length=100)),
                ('next_vaccination_date', models.DateField(blank=True, null=True)),
                ('next_checkup_date', models.DateField(blank=True, null=True)),
                ('cost', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('cattle', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='health_records', to='herd.cattle')),
                ('gaushala', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='health_records', to='locations.gaushala')),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='health_records', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'health_records',
                'ordering': ['-record_date', '-id'],
            },
        ),
    ]
