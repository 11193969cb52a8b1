"""
Catalog models for the image storefront.

Model Hierarchy:
- Product: A source image with name, description and CDN path
- ProductVariant: A licensed, priced rendition of the image (square, wide, ...)
"""

from .product import Product
from .variant import ProductVariant

__all__ = [
    'Product',
    'ProductVariant',
]
