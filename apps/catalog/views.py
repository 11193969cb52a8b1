from asgiref.sync import async_to_sync
from django.http import Http404
from django.shortcuts import redirect, render
from django.urls import reverse
from django.views.decorators.http import require_GET, require_POST

from .notifications import MessagesRelay
from .services import get_catalog_client
from .viewmodels import CatalogListViewModel, LoadFailed, ProductDetailViewModel


@require_GET
def product_list(request):
    """Home page: grid of every published product."""
    view_model = CatalogListViewModel(get_catalog_client())
    async_to_sync(view_model.load)()
    return render(request, 'catalog/product_list.html', {
        'view_model': view_model,
        'title': 'Image Shop',
    })


@require_GET
def product_detail(request, product_id):
    """
    Product page. ``?variant=WIDE`` selects a variant for the preview;
    an unknown or absent kind keeps the square preview.
    """
    view_model = ProductDetailViewModel(get_catalog_client(), MessagesRelay(request))
    async_to_sync(view_model.load)(product_id)

    kind = request.GET.get('variant')
    if kind:
        view_model.select_kind(kind)

    status = 200
    if isinstance(view_model.state, LoadFailed):
        status = 404 if view_model.state.not_found else 502

    response = render(request, 'catalog/product_detail.html', {
        'view_model': view_model,
        'title': view_model.product.name if view_model.product else 'Product',
    }, status=status)
    view_model.teardown()
    return response


@require_POST
def product_purchase(request, product_id, kind):
    """'Buy Now' button. No order is created; the shopper only gets a toast."""
    view_model = ProductDetailViewModel(get_catalog_client(), MessagesRelay(request))
    async_to_sync(view_model.load)(product_id)

    variant = view_model.select_kind(kind)
    if variant is None:
        raise Http404('Variant not found')

    view_model.purchase(variant)
    view_model.teardown()
    url = reverse('catalog:product_detail', args=[product_id])
    return redirect(f"{url}?variant={variant.kind_value}")
