from django.urls import path
from . import views

urlpatterns = [
    path('reports/summary', views.summary, name='report-summary'),
    path('reports/sales-trend', views.sales_trend, name='report-sales-trend'),
    path('reports/product-performance', views.product_performance, name='report-product-performance'),
    path('reports/category-performance', views.category_performance, name='report-category-performance'),
    path('reports/supplier-performance', views.supplier_performance, name='report-supplier-performance'),
    path('reports/stock-status', views.stock_status, name='report-stock-status'),
    path('reports/inventory-stats', views.inventory_stats, name='report-inventory-stats'),
    path('reports/recommendations', views.recommendations, name='report-recommendations'),
    path('reports/full', views.full_report, name='report-full'),
]
