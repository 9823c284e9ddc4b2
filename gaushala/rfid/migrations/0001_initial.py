# Generated manually
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('locations', '0001_initial'),
        ('herd', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='RFIDScan',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('tag_id_hex', models.CharField(db_index=True, max_length=64)),
                ('scan_location', models.CharField(blank=True, max_length=200)),
                ('scan_timestamp', models.DateTimeField()),
                ('scanner_device_id', models.CharField(blank=True, max_length=100)),
                ('signal_strength', models.IntegerField(blank=True, null=True)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('cattle', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='rfid_scans', to='herd.cattle')),
                ('gaushala', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='rfid_scans', to='locations.gaushala')),
            ],
            options={
                'db_table': 'rfid_scans',
                'ordering': ['-scan_timestamp', '-id'],
                'indexes': [
                    models.Index(fields=['tag_id_hex', '-scan_timestamp'], name='idx_rfid_tag_time'),
                    models.Index(fields=['gaushala', 'scan_timestamp'], name='idx_rfid_gaushala_time'),
                ],
            },
        ),
    ]
