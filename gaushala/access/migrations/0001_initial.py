# Generated manually
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('locations', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='UserGaushalaAccess',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('granted_at', models.DateTimeField(auto_now_add=True)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='gaushala_access', to=settings.AUTH_USER_MODEL)),
                ('gaushala', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='user_access', to='locations.gaushala')),
                ('granted_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='granted_gaushala_access', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'user_gaushala_access',
                'ordering': ['-granted_at'],
                'unique_together': {('user', 'gaushala')},
            },
        ),
    ]
