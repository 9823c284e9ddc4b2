# Generated manually
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('locations', '0001_initial'),
        ('herd', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='MilkRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('entry_type', models.CharField(choices=[('SHED', 'Shed'), ('CATTLE', 'Cattle')], default='SHED', max_length=10)),
                ('shed_number', models.CharField(max_length=50)),
                ('record_date', models.DateField()),
                ('session', models.CharField(choices=[('MORNING', 'Morning'), ('EVENING', 'Evening'), ('FULL_DAY', 'Full Day')], default='FULL_DAY', max_length=10)),
                ('milk_quantity', models.DecimalField(decimal_places=2, max_digits=10)),
                ('fat_percentage', models.DecimalField(blank=True, decimal_places=2, max_digits=5, null=True)),
                ('snf', models.DecimalField(blank=True, decimal_places=2, max_digits=5, null=True)),
                ('status', models.CharField(blank=True, choices=[('EXCELLENT', 'Excellent'), ('GOOD', 'Good'), ('AVERAGE', 'Average'), ('POOR', 'Poor')], max_length=10)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('gaushala', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='milk_records', to='locations.gaushala')),
                ('cattle', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='milk_records', to='herd.cattle')),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='milk_records_created', to=settings.AUTH_USER_MODEL)),
                ('updated_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='milk_records_updated', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'milk_records',
                'ordering': ['-record_date', '-id'],
                'indexes': [
                    models.Index(fields=['gaushala', 'record_date'], name='idx_milk_gaushala_date'),
                    models.Index(fields=['shed_number', 'record_date'], name='idx_milk_shed_date'),
                ],
            },
        ),
        migrations.CreateModel(
            name='TableLayout',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('table_key', models.CharField(max_length=100)),
                ('version', models.CharField(max_length=20)),
                ('columns', models.JSONField(blank=True, default=list)),
                ('sort_spec', models.JSONField(blank=True, default=list)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='table_layouts', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'table_layouts',
                'unique_together': {('user', 'table_key')},
            },
        ),
    ]
