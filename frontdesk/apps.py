# frontdesk/apps.py

from django.apps import AppConfig
import logging


class FrontdeskConfig(AppConfig):
    """App configuration for the front desk application."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'frontdesk'
    verbose_name = "Front Desk"

    def ready(self):
        """Bind signal receivers once the app registry is loaded."""
        import frontdesk.signals  # noqa: F401  # Import solely for side effects
        logging.getLogger(__name__).debug("frontdesk.signals loaded")
