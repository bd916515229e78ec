from django.db import models
from django.db.models import Sum
from decimal import Decimal, ROUND_HALF_UP

LOW_STOCK_THRESHOLD = 10


class Category(models.Model):
    """Product categories"""
    name = models.CharField(max_length=100, unique=True)
    description = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'categories'
        verbose_name_plural = 'categories'
        ordering = ['name']


class Product(models.Model):
    """Product master"""
    name = models.CharField(max_length=200, db_index=True)
    description = models.TextField(blank=True, null=True)
    brand = models.CharField(max_length=100, blank=True, null=True)
    sku = models.CharField(max_length=50, unique=True)
    cost_price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    selling_price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    category = models.ForeignKey(Category, on_delete=models.SET_NULL, null=True, blank=True, related_name='products')
    supplier = models.ForeignKey('parties.Supplier', on_delete=models.SET_NULL, null=True, blank=True, related_name='products')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.name} ({self.sku})"

    @property
    def current_stock(self):
        """Units on hand: the signed sum of every stock movement"""
        total = self.stock_movements.aggregate(total=Sum('quantity'))['total']
        return total or 0

    @property
    def profit_margin(self):
        """Markup over cost in percent, 0 when either price is unknown"""
        if self.cost_price is None or self.selling_price is None or self.cost_price == 0:
            return Decimal('0.00')
        margin = (self.selling_price - self.cost_price) / self.cost_price * 100
        return margin.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)

    @property
    def is_low_stock(self):
        return self.current_stock < LOW_STOCK_THRESHOLD

    class Meta:
        db_table = 'products'
        ordering = ['id']
