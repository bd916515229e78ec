"""
URL configuration for the SmartInventory backend.

Every REST endpoint lives under /api/. The bundled frontend, when present,
is served from /FrontEnd/ with its index page at the site root.
"""
from django.conf import settings
from django.contrib import admin
from django.urls import include, path, re_path
from django.views.static import serve

admin.site.site_header = "SmartInventory Admin"
admin.site.site_title = "SmartInventory Admin Portal"
admin.site.index_title = "Inventory administration"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', include('smartinventory.core.urls')),
    path('api/', include('smartinventory.catalog.urls')),
    path('api/', include('smartinventory.parties.urls')),
    path('api/', include('smartinventory.inventory.urls')),
    path('api/', include('smartinventory.sales.urls')),
    path('api/', include('smartinventory.reports.urls')),
    re_path(r'^FrontEnd/(?P<path>.*)$', serve, {'document_root': settings.FRONTEND_ROOT}),
    re_path(r'^(?:index\.html)?$', serve, {'document_root': settings.FRONTEND_ROOT, 'path': 'index.html'}),
    re_path(r'^static/(?P<path>.*)$', serve, {'document_root': settings.STATIC_ROOT}),
]
