from rest_framework import serializers
from apps.catalog.models import Product, ProductVariant
from apps.catalog.services.transformation import resolve_definition


# =============================================================================
# Variant Serializers
# =============================================================================

class ProductVariantSerializer(serializers.ModelSerializer):
    """Variant as consumed by the storefront: ``type`` is the variant kind."""
    type = serializers.CharField(source='kind', read_only=True)
    label = serializers.SerializerMethodField()
    width = serializers.SerializerMethodField()
    height = serializers.SerializerMethodField()

    class Meta:
        model = ProductVariant
        fields = ['id', 'type', 'label', 'width', 'height', 'license', 'price']

    def get_label(self, obj):
        return resolve_definition(obj.kind).label

    def get_width(self, obj):
        return resolve_definition(obj.kind).dimensions.width

    def get_height(self, obj):
        return resolve_definition(obj.kind).dimensions.height


# =============================================================================
# Product Serializers
# =============================================================================

class ProductListSerializer(serializers.ModelSerializer):
    """Product summary for the catalog grid."""
    imageUrl = serializers.CharField(source='image_url', read_only=True)
    variants = ProductVariantSerializer(many=True, read_only=True)
    minPrice = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = ['id', 'name', 'description', 'imageUrl', 'variants', 'minPrice']

    def get_minPrice(self, obj):
        prices = [v.price for v in obj.variants.all()]
        return str(min(prices)) if prices else None


class ProductDetailSerializer(serializers.ModelSerializer):
    """Full product with its variants in display order."""
    imageUrl = serializers.CharField(source='image_url', read_only=True)
    variants = ProductVariantSerializer(many=True, read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Product
        fields = [
            'id', 'name', 'description', 'imageUrl', 'variants',
            'createdAt', 'updatedAt'
        ]
