from django.contrib import admin
from .models import Sale, SaleItem


class SaleItemInline(admin.TabularInline):
    model = SaleItem
    extra = 0
    readonly_fields = ['subtotal']
    raw_id_fields = ['product']


@admin.register(Sale)
class SaleAdmin(admin.ModelAdmin):
    list_display = ['sale_reference', 'client', 'total_amount', 'status', 'payment_method', 'sale_date']
    list_filter = ['status', 'payment_method', 'sale_date']
    search_fields = ['sale_reference', 'client__name']
    raw_id_fields = ['client']
    inlines = [SaleItemInline]
