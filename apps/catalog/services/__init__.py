from .catalog_client import (
    HttpCatalogClient,
    OrmCatalogClient,
    ProductRecord,
    VariantRecord,
    get_catalog_client,
)
from .transformation import (
    CropMode,
    Focus,
    TransformationDescriptor,
    build_image_url,
    resolve,
    resolve_definition,
    transformation_for,
)

__all__ = [
    'HttpCatalogClient',
    'OrmCatalogClient',
    'ProductRecord',
    'VariantRecord',
    'get_catalog_client',
    'CropMode',
    'Focus',
    'TransformationDescriptor',
    'build_image_url',
    'resolve',
    'resolve_definition',
    'transformation_for',
]
