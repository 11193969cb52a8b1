from django_filters import rest_framework as filters
from apps.catalog.models import Product
from apps.catalog.variants import License, VariantKind


class ProductFilter(filters.FilterSet):
    """Filter products by the variants they are sold in."""

    kind = filters.ChoiceFilter(
        field_name='variants__kind', choices=VariantKind.choices, distinct=True
    )
    license = filters.ChoiceFilter(
        field_name='variants__license', choices=License.choices, distinct=True
    )

    # Price filters (any variant in range)
    min_price = filters.NumberFilter(field_name='variants__price', lookup_expr='gte', distinct=True)
    max_price = filters.NumberFilter(field_name='variants__price', lookup_expr='lte', distinct=True)

    class Meta:
        model = Product
        fields = ['kind', 'license', 'min_price', 'max_price']
