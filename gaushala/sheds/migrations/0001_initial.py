# Generated manually
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('locations', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Shed',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('shed_name', models.CharField(max_length=200)),
                ('shed_number', models.CharField(max_length=50)),
                ('capacity', models.PositiveIntegerField()),
                ('shed_type', models.CharField(choices=[('MILKING', 'Milking'), ('DRY', 'Dry Cattle'), ('CALF', 'Calf'), ('BULL', 'Bull'), ('QUARANTINE', 'Quarantine'), ('GENERAL', 'General')], default='GENERAL', max_length=20)),
                ('area_sq_ft', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('ventilation_type', models.CharField(blank=True, max_length=100)),
                ('flooring_type', models.CharField(blank=True, max_length=100)),
                ('water_facility', models.BooleanField(default=True)),
                ('feeding_facility', models.BooleanField(default=True)),
                ('status', models.CharField(choices=[('ACTIVE', 'Active'), ('MAINTENANCE', 'Under Maintenance'), ('INACTIVE', 'Inactive')], default='ACTIVE', max_length=20)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('gaushala', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='sheds', to='locations.gaushala')),
            ],
            options={
                'db_table': 'sheds',
                'ordering': ['shed_number'],
                'indexes': [models.Index(fields=['gaushala', 'status'], name='idx_shed_gaushala_status')],
                'unique_together': {('gaushala', 'shed_number')},
            },
        ),
    ]
