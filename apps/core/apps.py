from django.apps import AppConfig
from django.core import checks
import logging

logger = logging.getLogger(__name__)


class CoreConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.core'

    def ready(self):
        """
        Register the tenant middleware ordering check.

        Misordered middleware would let a route's business be matched against
        a context that was never validated, so it is reported as an error by
        ``manage.py check`` and on server start.
        """
        from apps.core.checks import check_tenant_middleware_order

        checks.register(check_tenant_middleware_order)
        logger.debug('Tenant middleware checks registered')
