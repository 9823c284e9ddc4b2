from django.apps import AppConfig


class HerdConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'gaushala.herd'
