"""
Catalog fetch clients.

Both clients hand out immutable ProductRecord copies and report failures as
NotFoundError or TransportError; the view-models only depend on that
contract. HttpCatalogClient talks to the REST API, OrmCatalogClient reads the
local database.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Tuple, Union
from urllib.parse import urljoin

import requests
from asgiref.sync import sync_to_async
from django.conf import settings
from django.db.models import Prefetch

from apps.catalog.exceptions import NotFoundError, TransportError
from apps.catalog.models import Product, ProductVariant
from apps.catalog.variants import License, VariantKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VariantRecord:
    # Raw string when the stored kind is not a known VariantKind
    kind: Union[VariantKind, str]
    license: str
    price: Decimal

    @classmethod
    def from_model(cls, variant):
        return cls(
            kind=VariantKind.parse(variant.kind) or variant.kind,
            license=variant.license,
            price=variant.price,
        )

    @classmethod
    def from_payload(cls, data):
        raw_kind = data.get('type', data.get('kind'))
        return cls(
            kind=VariantKind.parse(raw_kind) or str(raw_kind),
            license=str(data.get('license') or License.PERSONAL),
            price=Decimal(str(data['price'])),
        )

    @property
    def kind_value(self):
        return self.kind.value if isinstance(self.kind, VariantKind) else self.kind

    @property
    def license_label(self):
        try:
            return License(self.license).label
        except ValueError:
            return self.license


@dataclass(frozen=True)
class ProductRecord:
    id: str
    name: str
    description: str
    image_url: str
    variants: Tuple[VariantRecord, ...] = ()

    @classmethod
    def from_model(cls, product):
        return cls(
            id=str(product.pk),
            name=product.name,
            description=product.description,
            image_url=product.image_url,
            variants=tuple(VariantRecord.from_model(v) for v in product.variants.all()),
        )

    @classmethod
    def from_payload(cls, data):
        return cls(
            id=str(data.get('id', data.get('_id'))),
            name=data['name'],
            description=data.get('description') or '',
            image_url=data.get('imageUrl', data.get('image_url')) or '',
            variants=tuple(VariantRecord.from_payload(v) for v in data.get('variants') or []),
        )

    @property
    def min_price(self):
        return min((v.price for v in self.variants), default=None)


class HttpCatalogClient:
    """Reads products from the catalog REST API with requests."""

    def __init__(self, base_url, timeout=10, session=None):
        self.base_url = base_url.rstrip('/') + '/'
        self.timeout = timeout
        self.session = session or requests.Session()

    def _get_json(self, path):
        url = urljoin(self.base_url, path)
        logger.debug("GET %s", url)
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise TransportError(str(e)) from e

        if response.status_code == 404:
            raise NotFoundError("Product not found")
        if not response.ok:
            raise TransportError("Failed to fetch product", status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise TransportError(f"Invalid JSON from catalog: {e}") from e

    def _parse(self, parser, payload):
        try:
            return parser(payload)
        except (KeyError, TypeError, AttributeError, InvalidOperation) as e:
            raise TransportError(f"Malformed product payload: {e!r}") from e

    def get_product(self, product_id):
        payload = self._get_json(f"products/{product_id}/")
        return self._parse(ProductRecord.from_payload, payload)

    def list_products(self):
        payload = self._get_json('products/')
        if isinstance(payload, dict):
            # Paginated response
            payload = payload.get('results', [])
        return [self._parse(ProductRecord.from_payload, item) for item in payload]

    async def fetch_product(self, product_id):
        return await sync_to_async(self.get_product, thread_sensitive=False)(product_id)

    async def fetch_products(self):
        return await sync_to_async(self.list_products, thread_sensitive=False)()


class OrmCatalogClient:
    """Reads products straight from the database."""

    def _queryset(self):
        return Product.objects.filter(is_active=True).prefetch_related(
            Prefetch('variants', queryset=ProductVariant.objects.order_by('display_order', 'pk'))
        )

    def get_product(self, product_id):
        try:
            product = self._queryset().get(pk=product_id)
        except (Product.DoesNotExist, ValueError, TypeError):
            raise NotFoundError("Product not found")
        return ProductRecord.from_model(product)

    def list_products(self):
        return [ProductRecord.from_model(p) for p in self._queryset()]

    async def fetch_product(self, product_id):
        return await sync_to_async(self.get_product)(product_id)

    async def fetch_products(self):
        return await sync_to_async(self.list_products)()


def get_catalog_client():
    """HTTP client when CATALOG_API_URL is configured, database otherwise."""
    if settings.CATALOG_API_URL:
        return HttpCatalogClient(settings.CATALOG_API_URL, timeout=settings.CATALOG_API_TIMEOUT)
    return OrmCatalogClient()
