from django.apps import AppConfig


class TenantModelsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'tests.tenant_models'
    label = 'tenant_models'
