"""
View-models for the storefront pages.

ProductDetailViewModel is the per-page state machine behind the product
detail page::

    Loading --fetch ok-------> Loaded(product) --select_variant--> Loaded
            --fetch failed---> LoadFailed(message)

Each page owns its own instance; nothing here is shared between views.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Union

from apps.catalog.exceptions import InvalidTransition, NotFoundError
from apps.catalog.notifications import Severity
from apps.catalog.services.catalog_client import ProductRecord
from apps.catalog.services.transformation import (
    build_image_url,
    resolve,
    resolve_definition,
    transformation_for,
)
from apps.catalog.variants import VariantKind

logger = logging.getLogger(__name__)

MISSING_ID_MESSAGE = 'Product ID is missing'
NOT_FOUND_MESSAGE = 'Product not found'
LOAD_FAILED_MESSAGE = 'Failed to load product'
DEFAULT_ASPECT_RATIO = '1 / 1'


class Status(str, Enum):
    LOADING = 'loading'
    ERROR = 'error'
    LOADED = 'loaded'


@dataclass(frozen=True)
class Loading:
    status = Status.LOADING


@dataclass(frozen=True)
class LoadFailed:
    message: str
    not_found: bool = False
    status = Status.ERROR


@dataclass(frozen=True)
class Loaded:
    product: ProductRecord
    status = Status.LOADED


ProductDetailState = Union[Loading, LoadFailed, Loaded]


class ProductDetailViewModel:
    """
    Fetch state, loaded product and selected variant of one product page.

    ``client`` needs an async ``fetch_product(product_id)`` raising
    NotFoundError / TransportError; ``relay`` needs ``notify(message, severity)``.
    """

    def __init__(self, client, relay, catalog=None):
        self.client = client
        self.relay = relay
        self.catalog = catalog
        self.product_id = None
        self.state: ProductDetailState = Loading()
        self.selected_variant = None
        self._generation = 0
        self._task: Optional[asyncio.Task] = None
        self._torn_down = False
        self._definitions = {}

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def mount(self, product_id):
        """
        Start loading ``product_id`` and return the fetch task (None when no
        fetch was needed). Must be called from a running event loop.
        """
        if self._torn_down:
            raise InvalidTransition('View-model was torn down')

        if (
            product_id == self.product_id
            and self._task is not None
            and not self._task.done()
        ):
            # Already fetching this product
            return self._task

        self.product_id = product_id
        self._generation += 1
        self.selected_variant = None

        if not product_id:
            self._task = None
            self.state = LoadFailed(MISSING_ID_MESSAGE)
            return None

        self.state = Loading()
        self._task = asyncio.ensure_future(self._fetch(product_id, self._generation))
        return self._task

    async def load(self, product_id):
        """Mount ``product_id`` and wait until the fetch settles."""
        task = self.mount(product_id)
        if task is not None:
            await task
        return self.state

    def teardown(self):
        """The page went away: drop the selection and ignore late results."""
        self._torn_down = True
        self._generation += 1
        self.selected_variant = None
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def _fetch(self, product_id, generation):
        try:
            product = await self.client.fetch_product(product_id)
        except NotFoundError:
            result = LoadFailed(NOT_FOUND_MESSAGE, not_found=True)
        except Exception as e:
            logger.error("Error fetching product %s: %s", product_id, e)
            result = LoadFailed(str(e) or LOAD_FAILED_MESSAGE)
        else:
            result = Loaded(product)

        if self._torn_down or generation != self._generation:
            logger.debug("Discarding stale response for product %s", product_id)
            return
        self.state = result
        self.selected_variant = None

    # -------------------------------------------------------------------------
    # User interaction
    # -------------------------------------------------------------------------

    @property
    def product(self):
        return self.state.product if isinstance(self.state, Loaded) else None

    def _require_variant_of_loaded_product(self, variant):
        product = self.product
        if product is None:
            raise InvalidTransition(f"No product loaded (state is {self.state.status.value})")
        if variant not in product.variants:
            raise InvalidTransition(f"Variant {variant.kind} does not belong to product {product.id}")

    def select_variant(self, variant):
        self._require_variant_of_loaded_product(variant)
        self.selected_variant = variant

    def select_kind(self, kind):
        """
        Select the product's variant of ``kind`` (case-insensitive, legacy
        kinds included); returns it, or None if the product has no such variant.
        """
        product = self.product
        if product is None or not kind:
            return None
        wanted = str(kind.value if isinstance(kind, VariantKind) else kind).upper()
        for variant in product.variants:
            if variant.kind_value.upper() == wanted:
                self.select_variant(variant)
                return variant
        return None

    def purchase(self, variant):
        """Stub checkout: only tells the shopper the purchase is being processed."""
        self._require_variant_of_loaded_product(variant)
        self.relay.notify(f"Processing purchase for {variant.kind_value} version", Severity.INFO)

    # -------------------------------------------------------------------------
    # Derived state
    # -------------------------------------------------------------------------

    @property
    def selected_kind(self):
        return self.selected_variant.kind if self.selected_variant else None

    def _definition(self, kind):
        # Resolved once per kind, so a legacy kind logs its fallback once
        key = kind.value if isinstance(kind, VariantKind) else kind
        if key not in self._definitions:
            self._definitions[key] = resolve_definition(kind, self.catalog)
        return self._definitions[key]

    @property
    def selected_definition(self):
        if self.selected_variant is None:
            return None
        return self._definition(self.selected_variant.kind)

    @property
    def aspect_ratio(self):
        definition = self.selected_definition
        return definition.dimensions.aspect_ratio if definition else DEFAULT_ASPECT_RATIO

    @property
    def transformation(self):
        return transformation_for(self._definition(self.selected_kind))

    @property
    def image_url(self):
        product = self.product
        if product is None:
            return None
        return build_image_url(product.image_url, self.transformation)

    def variant_options(self):
        """Rows for the variant picker, in display order."""
        product = self.product
        if product is None:
            return []
        return [
            {
                'variant': variant,
                'definition': self._definition(variant.kind),
                'is_selected': variant == self.selected_variant,
            }
            for variant in product.variants
        ]


@dataclass(frozen=True)
class ProductCard:
    product: ProductRecord
    image_url: str
    min_price: object


class CatalogListViewModel:
    """Product grid of the home page. A failed fetch leaves the grid empty."""

    def __init__(self, client, catalog=None):
        self.client = client
        self.catalog = catalog
        self.products: List[ProductRecord] = []
        self.loaded = False

    async def load(self):
        try:
            self.products = list(await self.client.fetch_products())
        except Exception as e:
            logger.error("Error fetching products: %s", e)
            self.products = []
        self.loaded = True
        return self.products

    @property
    def cards(self):
        transformation = resolve(VariantKind.THUMBNAIL, self.catalog)
        return [
            ProductCard(
                product=product,
                image_url=build_image_url(product.image_url, transformation),
                min_price=product.min_price,
            )
            for product in self.products
        ]
