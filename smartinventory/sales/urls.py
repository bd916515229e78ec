from django.urls import path
from .views import (
    sale_list_create, sale_detail, sale_by_reference, sale_status,
    sales_by_client, sales_by_status, sales_pending, sales_recent,
    sale_item_list, sale_item_detail, sale_items_by_sale, sale_items_by_product,
    product_quantity_sold, product_revenue, top_selling_products,
    sale_items_with_discount, total_discounts
)

urlpatterns = [
    # Sale endpoints
    path('sales', sale_list_create, name='sale-list-create'),
    path('sales/pending', sales_pending, name='sales-pending'),
    path('sales/recent', sales_recent, name='sales-recent'),
    path('sales/reference/<str:reference>', sale_by_reference, name='sale-by-reference'),
    path('sales/client/<int:client_id>', sales_by_client, name='sales-by-client'),
    path('sales/status/<str:sale_status>', sales_by_status, name='sales-by-status'),
    path('sales/<int:pk>', sale_detail, name='sale-detail'),
    path('sales/<int:pk>/status', sale_status, name='sale-status'),

    # Sale item endpoints
    path('sale-items', sale_item_list, name='sale-item-list'),
    path('sale-items/top-selling', top_selling_products, name='sale-items-top-selling'),
    path('sale-items/with-discount', sale_items_with_discount, name='sale-items-with-discount'),
    path('sale-items/total-discounts', total_discounts, name='sale-items-total-discounts'),
    path('sale-items/sale/<int:sale_id>', sale_items_by_sale, name='sale-items-by-sale'),
    path('sale-items/product/<int:product_id>', sale_items_by_product, name='sale-items-by-product'),
    path('sale-items/product/<int:product_id>/sold', product_quantity_sold, name='product-quantity-sold'),
    path('sale-items/product/<int:product_id>/revenue', product_revenue, name='product-revenue'),
    path('sale-items/<int:pk>', sale_item_detail, name='sale-item-detail'),
]
