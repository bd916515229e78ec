from decimal import Decimal

from django.db import models
from django.db.models import Sum


class Supplier(models.Model):
    """Product suppliers"""
    name = models.CharField(max_length=100, unique=True)
    contact_person = models.CharField(max_length=100, blank=True, null=True)
    phone = models.CharField(max_length=20, blank=True, null=True)
    email = models.EmailField(max_length=120, blank=True, null=True)
    address = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'suppliers'
        ordering = ['name']


class Client(models.Model):
    """Customers that sales are recorded against"""
    name = models.CharField(max_length=100, db_index=True)
    email = models.EmailField(max_length=120, unique=True, blank=True, null=True)
    phone = models.CharField(max_length=20, blank=True, null=True)
    address = models.TextField(blank=True, null=True)
    company = models.CharField(max_length=100, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    @property
    def total_purchases(self):
        """Sum of the totals of every sale made to this client"""
        total = self.sales.aggregate(total=Sum('total_amount'))['total']
        return total or Decimal('0.00')

    @property
    def order_count(self):
        return self.sales.count()

    class Meta:
        db_table = 'clients'
        ordering = ['name']
