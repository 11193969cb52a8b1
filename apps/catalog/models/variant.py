from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from simple_history.models import HistoricalRecords

from apps.catalog.variants import License, VariantKind


class ProductVariant(models.Model):
    """
    A licensed rendition of a product's image, priced on its own.
    Variants are shown in ``display_order``; each kind appears once per product.
    """
    product = models.ForeignKey(
        'catalog.Product',
        on_delete=models.CASCADE,
        related_name='variants',
        verbose_name='Product'
    )
    kind = models.CharField(
        max_length=20,
        choices=VariantKind.choices,
        verbose_name='Variant'
    )
    license = models.CharField(
        max_length=20,
        choices=License.choices,
        default=License.PERSONAL,
        verbose_name='License'
    )
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))],
        verbose_name='Price'
    )
    display_order = models.PositiveIntegerField(
        default=0,
        db_index=True,
        verbose_name='Display order'
    )

    # History tracking (price changes are audited here)
    history = HistoricalRecords()

    class Meta:
        ordering = ['display_order']
        constraints = [
            models.UniqueConstraint(
                fields=['product', 'kind'],
                name='unique_variant_kind_per_product',
            ),
        ]
        verbose_name = 'Product variant'
        verbose_name_plural = 'Product variants'

    def __str__(self):
        return f"{self.product.name} - {self.get_kind_display()} ({self.get_license_display()})"
