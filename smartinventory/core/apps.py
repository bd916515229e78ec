import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class CoreConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'smartinventory.core'
    verbose_name = 'Core'

    def ready(self):
        """Import signals when app is ready"""
        import smartinventory.core.cache_signals  # noqa: F401
        logger.info("SmartInventory API ready, endpoints under /api/")
