from django.apps import AppConfig


class CatalogConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.catalog'
    verbose_name = 'Catalog'

    def ready(self):
        from .variants import get_variant_catalog

        # Fail at startup on a bad CATALOG_IMAGE_VARIANTS setting
        get_variant_catalog()
