from django.urls import path
from .views import (
    category_list_create, category_detail,
    product_list_create, product_detail, product_by_sku, product_search,
    products_by_category, products_by_supplier, product_low_stock, product_stock
)

urlpatterns = [
    # Category endpoints
    path('categories', category_list_create, name='category-list-create'),
    path('categories/<int:pk>', category_detail, name='category-detail'),

    # Product endpoints
    path('products', product_list_create, name='product-list-create'),
    path('products/search', product_search, name='product-search'),
    path('products/low-stock', product_low_stock, name='product-low-stock'),
    path('products/sku/<str:sku>', product_by_sku, name='product-by-sku'),
    path('products/category/<int:category_id>', products_by_category, name='products-by-category'),
    path('products/supplier/<int:supplier_id>', products_by_supplier, name='products-by-supplier'),
    path('products/<int:pk>', product_detail, name='product-detail'),
    path('products/<int:pk>/stock', product_stock, name='product-stock'),
]
