from django.urls import path
from . import views

app_name = 'catalog'

urlpatterns = [
    # Storefront pages
    path('', views.product_list, name='product_list'),
    path('products/<str:product_id>/', views.product_detail, name='product_detail'),

    # "Buy Now" stub
    path('products/<str:product_id>/buy/<str:kind>/', views.product_purchase, name='product_purchase'),
]
