from django.urls import path
from .views import (
    stock_list, stock_detail, stock_add, stock_remove, stock_by_product,
    stock_recent, stock_current, stock_additions, stock_removals
)

urlpatterns = [
    path('stock', stock_list, name='stock-list'),
    path('stock/add', stock_add, name='stock-add'),
    path('stock/remove', stock_remove, name='stock-remove'),
    path('stock/recent', stock_recent, name='stock-recent'),
    path('stock/additions', stock_additions, name='stock-additions'),
    path('stock/removals', stock_removals, name='stock-removals'),
    path('stock/product/<int:product_id>', stock_by_product, name='stock-by-product'),
    path('stock/product/<int:product_id>/current', stock_current, name='stock-current'),
    path('stock/<int:pk>', stock_detail, name='stock-detail'),
]
