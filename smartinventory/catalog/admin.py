from django.contrib import admin
from .models import Category, Product


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'description', 'created_at']
    search_fields = ['name']
    ordering = ['name']


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['name', 'sku', 'brand', 'category', 'supplier', 'cost_price', 'selling_price']
    list_filter = ['category', 'supplier']
    search_fields = ['name', 'sku', 'brand']
    raw_id_fields = ['category', 'supplier']
