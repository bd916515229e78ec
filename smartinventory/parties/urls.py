from django.urls import path
from .views import (
    supplier_list_create, supplier_detail, supplier_search,
    client_list_create, client_detail, client_search, client_top
)

urlpatterns = [
    # Supplier endpoints
    path('suppliers', supplier_list_create, name='supplier-list-create'),
    path('suppliers/search', supplier_search, name='supplier-search'),
    path('suppliers/<int:pk>', supplier_detail, name='supplier-detail'),

    # Client endpoints
    path('clients', client_list_create, name='client-list-create'),
    path('clients/search', client_search, name='client-search'),
    path('clients/top', client_top, name='client-top'),
    path('clients/<int:pk>', client_detail, name='client-detail'),
]
