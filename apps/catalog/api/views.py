from rest_framework import viewsets, filters
from django_filters.rest_framework import DjangoFilterBackend
from django.db.models import Prefetch

from apps.catalog.models import Product, ProductVariant
from .serializers import ProductListSerializer, ProductDetailSerializer
from .filters import ProductFilter


class ProductViewSet(viewsets.ReadOnlyModelViewSet):
    """
    API endpoint for published products.

    list: List products with their variants
    retrieve: Get one product by id (404 when missing or inactive)
    """
    queryset = Product.objects.filter(is_active=True).prefetch_related(
        Prefetch('variants', queryset=ProductVariant.objects.order_by('display_order', 'pk'))
    )
    filterset_class = ProductFilter
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    search_fields = ['name', 'description']
    ordering_fields = ['name', 'created_at']
    ordering = ['name']

    def get_serializer_class(self):
        if self.action == 'list':
            return ProductListSerializer
        return ProductDetailSerializer
