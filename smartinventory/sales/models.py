from django.db import models
from django.utils import timezone
from decimal import Decimal, ROUND_HALF_UP


class Sale(models.Model):
    """A sale to a client, made of one or more sale items"""
    STATUS_PENDING = 'PENDING'
    STATUS_PAID = 'PAID'
    STATUS_CANCELLED = 'CANCELLED'
    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_PAID, 'Paid'),
        (STATUS_CANCELLED, 'Cancelled'),
    ]

    client = models.ForeignKey('parties.Client', on_delete=models.SET_NULL, null=True, blank=True, related_name='sales')
    sale_reference = models.CharField(max_length=50, unique=True)
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)
    payment_method = models.CharField(max_length=50, blank=True, null=True)
    notes = models.TextField(blank=True, null=True)
    sale_date = models.DateTimeField(default=timezone.now, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.sale_reference

    @property
    def is_paid(self):
        return self.status == self.STATUS_PAID

    def calculate_total_amount(self):
        """Sum the item subtotals into total_amount (not saved)"""
        self.total_amount = sum((item.subtotal for item in self.items.all()), Decimal('0.00'))
        return self.total_amount

    class Meta:
        db_table = 'sales'
        ordering = ['-sale_date', '-id']


class SaleItem(models.Model):
    """One product line of a sale"""
    sale = models.ForeignKey(Sale, on_delete=models.CASCADE, related_name='items')
    product = models.ForeignKey('catalog.Product', on_delete=models.PROTECT, related_name='sale_items')
    quantity = models.PositiveIntegerField()
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    # Absolute amount taken off the line
    discount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    subtotal = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))

    def __str__(self):
        return f"{self.sale_id} - {self.product_id} x {self.quantity}"

    @property
    def gross_amount(self):
        return self.unit_price * self.quantity

    def calculate_subtotal(self):
        subtotal = self.gross_amount
        if self.discount and self.discount > 0:
            subtotal -= self.discount
        self.subtotal = subtotal
        return subtotal

    @property
    def discount_percentage(self):
        gross = self.gross_amount
        if not self.discount or gross <= 0:
            return Decimal('0.00')
        return (self.discount / gross * 100).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)

    def save(self, *args, **kwargs):
        self.calculate_subtotal()
        super().save(*args, **kwargs)

    class Meta:
        db_table = 'sale_items'
        ordering = ['id']
