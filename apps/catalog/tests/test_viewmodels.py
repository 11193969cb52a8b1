"""
Tests for the storefront view-models (viewmodels.py).

A fake async client stands in for the catalog fetch layer; the gated variant
lets a test hold a fetch in flight while it mounts another product.
"""

import asyncio
from dataclasses import dataclass
from decimal import Decimal

from django.test import SimpleTestCase

from apps.catalog.exceptions import InvalidTransition, NotFoundError, TransportError
from apps.catalog.notifications import Severity
from apps.catalog.services.catalog_client import ProductRecord, VariantRecord
from apps.catalog.variants import DEFAULT_VARIANTS, VariantCatalog, VariantKind
from apps.catalog.viewmodels import (
    CatalogListViewModel,
    LoadFailed,
    Loaded,
    Loading,
    ProductDetailViewModel,
    Status,
)

SQUARE = VariantRecord(kind=VariantKind.SQUARE, license='personal', price=Decimal('9.99'))
WIDE = VariantRecord(kind=VariantKind.WIDE, license='commercial', price=Decimal('29.99'))
LEGACY = VariantRecord(kind='PANORAMA', license='personal', price=Decimal('5.00'))

SUNRISE = ProductRecord(
    id='1', name='Sunrise', description='Morning', image_url='/sunrise.jpg',
    variants=(SQUARE, WIDE),
)
CITY = ProductRecord(
    id='2', name='City', description='Night', image_url='/city.jpg',
    variants=(WIDE,),
)


def small_catalog():
    definitions = {k: dict(v) for k, v in DEFAULT_VARIANTS.items()}
    definitions[VariantKind.SQUARE].update(width=400, height=400)
    definitions[VariantKind.WIDE].update(width=800, height=450)
    return VariantCatalog(definitions)


@dataclass(frozen=True)
class Notification:
    message: str
    severity: Severity = Severity.INFO


class CollectingRelay:
    """Keeps notifications in memory instead of sending them as messages."""

    def __init__(self):
        self.notifications = []

    def notify(self, message, severity=Severity.INFO):
        self.notifications.append(Notification(message, Severity(severity)))


class FakeClient:

    def __init__(self, products=(), error=None):
        self.products = {p.id: p for p in products}
        self.error = error
        self.calls = []
        self.gates = {}

    def gate(self, product_id):
        self.gates[product_id] = asyncio.Event()
        return self.gates[product_id]

    async def fetch_product(self, product_id):
        self.calls.append(product_id)
        if product_id in self.gates:
            await self.gates[product_id].wait()
        if self.error is not None:
            raise self.error
        try:
            return self.products[product_id]
        except KeyError:
            raise NotFoundError('Product not found')

    async def fetch_products(self):
        self.calls.append('*')
        if self.error is not None:
            raise self.error
        return list(self.products.values())


class ProductDetailLoadingTests(SimpleTestCase):

    def make(self, client):
        return ProductDetailViewModel(client, CollectingRelay(), catalog=small_catalog())

    def test_initial_state_is_loading(self):
        view_model = self.make(FakeClient())
        self.assertIsInstance(view_model.state, Loading)
        self.assertEqual(view_model.state.status, Status.LOADING)

    async def test_successful_fetch_loads_product(self):
        view_model = self.make(FakeClient([SUNRISE]))
        state = await view_model.load('1')
        self.assertEqual(state, Loaded(SUNRISE))
        self.assertIsNone(view_model.selected_variant)

    async def test_not_found(self):
        client = FakeClient([SUNRISE])
        view_model = self.make(client)
        await view_model.load('404-id')
        self.assertEqual(view_model.state, LoadFailed('Product not found', not_found=True))
        self.assertEqual(client.calls, ['404-id'])

    async def test_transport_error_uses_its_message(self):
        view_model = self.make(FakeClient(error=TransportError('Failed to fetch product', status_code=500)))
        with self.assertLogs('apps.catalog.viewmodels', level='ERROR'):
            await view_model.load('1')
        self.assertEqual(view_model.state.status, Status.ERROR)
        self.assertEqual(view_model.state.message, 'Failed to fetch product')
        self.assertFalse(view_model.state.not_found)

    async def test_error_without_message_uses_generic_text(self):
        view_model = self.make(FakeClient(error=TransportError()))
        with self.assertLogs('apps.catalog.viewmodels', level='ERROR'):
            await view_model.load('1')
        self.assertEqual(view_model.state, LoadFailed('Failed to load product'))

    async def test_unexpected_errors_do_not_escape(self):
        view_model = self.make(FakeClient(error=RuntimeError('boom')))
        with self.assertLogs('apps.catalog.viewmodels', level='ERROR'):
            await view_model.load('1')
        self.assertEqual(view_model.state, LoadFailed('boom'))

    async def test_missing_id_fails_without_fetching(self):
        for missing in (None, ''):
            with self.subTest(product_id=missing):
                client = FakeClient([SUNRISE])
                view_model = self.make(client)
                await view_model.load(missing)
                self.assertEqual(view_model.state, LoadFailed('Product ID is missing'))
                self.assertEqual(client.calls, [])

    async def test_same_id_is_not_fetched_twice_while_in_flight(self):
        client = FakeClient([SUNRISE])
        gate = client.gate('1')
        view_model = self.make(client)

        first = view_model.mount('1')
        second = view_model.mount('1')
        self.assertIs(first, second)
        await asyncio.sleep(0)
        gate.set()
        await first

        self.assertEqual(client.calls, ['1'])
        self.assertEqual(view_model.state, Loaded(SUNRISE))

    async def test_stale_response_is_discarded(self):
        client = FakeClient([SUNRISE, CITY])
        slow = client.gate('1')
        view_model = self.make(client)

        stale = view_model.mount('1')
        await asyncio.sleep(0)
        await view_model.load('2')
        self.assertEqual(view_model.state, Loaded(CITY))

        slow.set()
        await stale
        self.assertEqual(view_model.product_id, '2')
        self.assertEqual(view_model.state, Loaded(CITY))

    async def test_teardown_discards_in_flight_result(self):
        client = FakeClient([SUNRISE])
        client.gate('1')
        relay = CollectingRelay()
        view_model = ProductDetailViewModel(client, relay, catalog=small_catalog())

        task = view_model.mount('1')
        await asyncio.sleep(0)
        view_model.teardown()
        with self.assertRaises(asyncio.CancelledError):
            await task

        self.assertIsInstance(view_model.state, Loading)
        self.assertEqual(relay.notifications, [])
        with self.assertRaises(InvalidTransition):
            view_model.mount('1')


class ProductDetailSelectionTests(SimpleTestCase):

    async def load_sunrise(self):
        self.relay = CollectingRelay()
        self.view_model = ProductDetailViewModel(FakeClient([SUNRISE]), self.relay, catalog=small_catalog())
        await self.view_model.load('1')

    async def test_defaults_without_selection(self):
        await self.load_sunrise()
        self.assertEqual(self.view_model.aspect_ratio, '1 / 1')
        self.assertEqual(self.view_model.transformation[0].as_dict()['width'], '400')
        self.assertIsNone(self.view_model.selected_definition)

    async def test_select_wide_variant(self):
        await self.load_sunrise()
        self.view_model.select_variant(WIDE)
        self.assertIs(self.view_model.selected_variant, WIDE)
        self.assertEqual(self.view_model.aspect_ratio, '800 / 450')
        self.assertEqual(
            [step.as_dict() for step in self.view_model.transformation],
            [{'width': '800', 'height': '450', 'cropMode': 'extract', 'focus': 'center'}],
        )
        self.assertIn('/tr:w-800,h-450,cm-extract,fo-center/sunrise.jpg', self.view_model.image_url)

    async def test_last_selection_wins(self):
        await self.load_sunrise()
        self.view_model.select_variant(WIDE)
        self.view_model.select_variant(SQUARE)
        self.assertIs(self.view_model.selected_variant, SQUARE)
        self.assertEqual(self.view_model.aspect_ratio, '400 / 400')
        self.assertEqual(self.view_model.transformation[0].width, '400')

    async def test_select_kind(self):
        await self.load_sunrise()
        self.assertEqual(self.view_model.select_kind('wide'), WIDE)
        self.assertIsNone(self.view_model.select_kind('PORTRAIT'))
        self.assertIsNone(self.view_model.select_kind('nonsense'))
        self.assertIs(self.view_model.selected_variant, WIDE)

    async def test_variant_must_belong_to_product(self):
        await self.load_sunrise()
        foreign = VariantRecord(kind=VariantKind.PORTRAIT, license='personal', price=Decimal('1'))
        with self.assertRaises(InvalidTransition):
            self.view_model.select_variant(foreign)

    async def test_purchase_notifies_without_changing_state(self):
        await self.load_sunrise()
        self.view_model.select_variant(SQUARE)
        state = self.view_model.state
        self.view_model.purchase(WIDE)
        self.assertEqual(self.relay.notifications, [
            Notification('Processing purchase for WIDE version', Severity.INFO)
        ])
        self.assertIs(self.view_model.state, state)
        self.assertIs(self.view_model.selected_variant, SQUARE)

    async def test_variant_options_in_display_order(self):
        await self.load_sunrise()
        self.view_model.select_variant(WIDE)
        options = self.view_model.variant_options()
        self.assertEqual([o['variant'] for o in options], [SQUARE, WIDE])
        self.assertEqual([o['is_selected'] for o in options], [False, True])
        self.assertEqual(options[1]['definition'].label, 'Widescreen')


class ProductDetailInvalidStateTests(SimpleTestCase):

    def test_select_and_purchase_require_loaded_state(self):
        view_model = ProductDetailViewModel(FakeClient(), CollectingRelay())
        with self.assertRaises(InvalidTransition):
            view_model.select_variant(SQUARE)
        with self.assertRaises(InvalidTransition):
            view_model.purchase(SQUARE)
        self.assertIsNone(view_model.image_url)

    async def test_legacy_variant_kind_falls_back_to_square(self):
        product = ProductRecord(id='9', name='Old', description='', image_url='/old.jpg', variants=(LEGACY,))
        view_model = ProductDetailViewModel(FakeClient([product]), CollectingRelay(), catalog=small_catalog())
        await view_model.load('9')
        view_model.select_variant(LEGACY)
        with self.assertLogs('apps.catalog.services.transformation', level='WARNING'):
            self.assertEqual(view_model.aspect_ratio, '400 / 400')

    async def test_legacy_variant_can_be_selected_and_bought(self):
        product = ProductRecord(id='9', name='Old', description='', image_url='/old.jpg', variants=(SQUARE, LEGACY))
        relay = CollectingRelay()
        view_model = ProductDetailViewModel(FakeClient([product]), relay, catalog=small_catalog())
        await view_model.load('9')
        self.assertIs(view_model.select_kind('panorama'), LEGACY)
        view_model.purchase(LEGACY)
        self.assertEqual(relay.notifications, [
            Notification('Processing purchase for PANORAMA version', Severity.INFO)
        ])

    async def test_legacy_fallback_is_logged_once_per_page(self):
        product = ProductRecord(id='9', name='Old', description='', image_url='/old.jpg', variants=(SQUARE, LEGACY))
        view_model = ProductDetailViewModel(FakeClient([product]), CollectingRelay(), catalog=small_catalog())
        await view_model.load('9')
        view_model.select_variant(LEGACY)
        with self.assertLogs('apps.catalog.services.transformation', level='WARNING') as logs:
            self.assertEqual(view_model.selected_definition.dimensions.width, 400)
            self.assertEqual(view_model.aspect_ratio, '400 / 400')
            self.assertEqual(view_model.transformation[0].width, '400')
            self.assertIn('/tr:w-400,h-400,', view_model.image_url)
            self.assertEqual(len(view_model.variant_options()), 2)
        self.assertEqual(len(logs.records), 1)


class CatalogListViewModelTests(SimpleTestCase):

    async def test_load_builds_thumbnail_cards(self):
        view_model = CatalogListViewModel(FakeClient([SUNRISE, CITY]), catalog=small_catalog())
        await view_model.load()
        cards = view_model.cards
        self.assertEqual([c.product.name for c in cards], ['Sunrise', 'City'])
        self.assertIn('/tr:w-400,h-400,cm-extract,fo-center/sunrise.jpg', cards[0].image_url)
        self.assertEqual(cards[0].min_price, Decimal('9.99'))

    async def test_failed_load_leaves_empty_grid(self):
        view_model = CatalogListViewModel(FakeClient(error=TransportError('down')))
        with self.assertLogs('apps.catalog.viewmodels', level='ERROR'):
            products = await view_model.load()
        self.assertEqual(products, [])
        self.assertTrue(view_model.loaded)
