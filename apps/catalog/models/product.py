from django.db import models
from simple_history.models import HistoricalRecords


class Product(models.Model):
    """
    A digital image offered for sale.
    The image itself lives in the CDN; ``image_url`` is its path there.
    """
    name = models.CharField(
        max_length=255,
        verbose_name='Name'
    )
    description = models.TextField(
        blank=True,
        verbose_name='Description'
    )
    image_url = models.CharField(
        max_length=500,
        verbose_name='Image path',
        help_text='Path of the source image in the image CDN'
    )
    is_active = models.BooleanField(
        default=True,
        verbose_name='Active'
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name='Created at'
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        verbose_name='Updated at'
    )

    # History tracking
    history = HistoricalRecords()

    class Meta:
        ordering = ['name']
        verbose_name = 'Product'
        verbose_name_plural = 'Products'

    def __str__(self):
        return self.name

    @property
    def variant_count(self):
        return self.variants.count()
