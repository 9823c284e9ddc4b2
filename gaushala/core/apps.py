from django.apps import AppConfig


class CoreConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'gaushala.core'

    def ready(self):
        """Import signals when app is ready"""
        import gaushala.core.model_cache  # noqa: F401
        import gaushala.core.cache_signals  # noqa: F401  # Cache invalidation signals
