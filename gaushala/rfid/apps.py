from django.apps import AppConfig


class RfidConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'gaushala.rfid'
