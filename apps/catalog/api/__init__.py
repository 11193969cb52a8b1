from .serializers import (
    ProductVariantSerializer,
    ProductListSerializer,
    ProductDetailSerializer,
)

__all__ = [
    'ProductVariantSerializer',
    'ProductListSerializer',
    'ProductDetailSerializer',
]
