"""
Create demo products for the storefront.
Run with: python manage.py seed_catalog
"""
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.catalog.models import Product, ProductVariant
from apps.catalog.variants import License, VariantKind


SAMPLE_PRODUCTS = [
    {
        'name': 'Mountain Sunrise',
        'description': 'First light over a snowy ridge.',
        'image_url': '/samples/mountain-sunrise.jpg',
        'variants': [
            (VariantKind.SQUARE, License.PERSONAL, '9.99'),
            (VariantKind.WIDE, License.COMMERCIAL, '29.99'),
            (VariantKind.PORTRAIT, License.PERSONAL, '12.99'),
        ],
    },
    {
        'name': 'City Lights',
        'description': 'Long exposure of a downtown intersection at night.',
        'image_url': '/samples/city-lights.jpg',
        'variants': [
            (VariantKind.WIDE, License.PERSONAL, '14.99'),
            (VariantKind.THUMBNAIL, License.PERSONAL, '2.99'),
        ],
    },
    {
        'name': 'Ocean Texture',
        'description': 'Close up of foam on dark water.',
        'image_url': '/samples/ocean-texture.jpg',
        'variants': [
            (VariantKind.SQUARE, License.COMMERCIAL, '24.00'),
            (VariantKind.PORTRAIT, License.COMMERCIAL, '24.00'),
        ],
    },
]


class Command(BaseCommand):
    help = 'Create sample products with image variants (safe to run twice).'

    @transaction.atomic
    def handle(self, *args, **options):
        for item in SAMPLE_PRODUCTS:
            product, created = Product.objects.get_or_create(
                name=item['name'],
                defaults={
                    'description': item['description'],
                    'image_url': item['image_url'],
                    'is_active': True,
                }
            )
            for order, (kind, license, price) in enumerate(item['variants']):
                ProductVariant.objects.get_or_create(
                    product=product,
                    kind=kind,
                    defaults={
                        'license': license,
                        'price': Decimal(price),
                        'display_order': order,
                    }
                )
            action = 'Created' if created else 'Found'
            self.stdout.write(f"{action} {product.name} ({product.variant_count} variants)")

        self.stdout.write(self.style.SUCCESS(
            f"Sample data ready: {Product.objects.count()} products, "
            f"{ProductVariant.objects.count()} variants"
        ))
