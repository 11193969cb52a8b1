from django.contrib import admin
from django.utils.html import format_html
from import_export import resources, fields
from import_export.admin import ImportExportModelAdmin
from import_export.widgets import ForeignKeyWidget
from adminsortable2.admin import SortableAdminBase, SortableInlineAdminMixin
from simple_history.admin import SimpleHistoryAdmin

from .models import Product, ProductVariant
from .services.transformation import build_image_url, resolve


# =============================================================================
# Import/Export Resources
# =============================================================================

class ProductVariantResource(resources.ModelResource):
    """Resource for importing/exporting variant price lists."""

    product_name = fields.Field(
        column_name='product_name',
        attribute='product',
        widget=ForeignKeyWidget(Product, 'name')
    )

    class Meta:
        model = ProductVariant
        import_id_fields = ['id']
        fields = ('id', 'product_name', 'kind', 'license', 'price', 'display_order')
        export_order = fields


# =============================================================================
# Inlines
# =============================================================================

class ProductVariantInline(SortableInlineAdminMixin, admin.TabularInline):
    model = ProductVariant
    extra = 1
    fields = ['kind', 'license', 'price', 'display_order']


# =============================================================================
# Model Admins
# =============================================================================

@admin.register(Product)
class ProductAdmin(SortableAdminBase, SimpleHistoryAdmin):
    list_display = ['name', 'image_preview', 'variant_count', 'is_active', 'created_at']
    list_filter = ['is_active', 'created_at']
    search_fields = ['name', 'description']
    readonly_fields = ['image_preview', 'variant_count', 'created_at', 'updated_at']
    inlines = [ProductVariantInline]

    fieldsets = (
        (None, {
            'fields': ('name', 'description', 'image_url', 'image_preview', 'is_active')
        }),
        ('Info', {
            'fields': ('variant_count', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def image_preview(self, obj):
        if obj.image_url:
            return format_html(
                '<img src="{}" style="max-height: 50px; max-width: 100px;" />',
                build_image_url(obj.image_url, resolve('THUMBNAIL'))
            )
        return '-'
    image_preview.short_description = 'Preview'


@admin.register(ProductVariant)
class ProductVariantAdmin(ImportExportModelAdmin, SimpleHistoryAdmin):
    resource_classes = [ProductVariantResource]
    list_display = ['product', 'kind', 'license', 'price', 'display_order']
    list_filter = ['kind', 'license']
    list_editable = ['price']
    search_fields = ['product__name']
    autocomplete_fields = ['product']
    list_per_page = 50
