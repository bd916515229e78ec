"""
Sale operations.

Each operation runs in one transaction: a sale, its items and the stock
movements they cause are written together or not at all. Only PAID sales
affect stock.
"""
import logging
from decimal import Decimal

from django.db import IntegrityError, transaction
from django.utils import timezone

from smartinventory.catalog.models import Product
from smartinventory.core.cache_signals import suspend_cache_signals
from smartinventory.core.exceptions import BusinessRuleError, ResourceNotFound
from smartinventory.inventory import services as stock_services
from smartinventory.parties.models import Client
from .models import Sale, SaleItem

logger = logging.getLogger(__name__)

REFERENCE_PREFIX = 'SALE-'
REFERENCE_ATTEMPTS = 5


def generate_reference():
    """Next free SALE-000001 style reference"""
    number = Sale.objects.count() + 1
    reference = f'{REFERENCE_PREFIX}{number:06d}'
    while Sale.objects.filter(sale_reference=reference).exists():
        number += 1
        reference = f'{REFERENCE_PREFIX}{number:06d}'
    return reference


def _lock_sale(sale):
    """Re-read the sale row under a lock so concurrent writers see each other's status"""
    try:
        return Sale.objects.select_for_update().get(pk=sale.pk)
    except Sale.DoesNotExist:
        raise ResourceNotFound(f'Sale not found with id: {sale.pk}')


def _insert_sale(sale_reference, **fields):
    """
    Insert the sale row. A generated reference taken by a concurrent create
    is replaced by the next free one; a caller supplied reference is not.
    """
    generated = not sale_reference
    for _ in range(REFERENCE_ATTEMPTS):
        reference = sale_reference or generate_reference()
        try:
            with transaction.atomic():
                return Sale.objects.create(sale_reference=reference, **fields)
        except IntegrityError:
            if not generated:
                raise BusinessRuleError('Sale reference already exists')
            logger.warning(f"Sale reference {reference} taken concurrently, retrying")
    raise BusinessRuleError('Could not allocate a sale reference, please retry')


def get_sale(pk):
    try:
        return Sale.objects.select_related('client').prefetch_related('items__product').get(pk=pk)
    except Sale.DoesNotExist:
        raise ResourceNotFound(f'Sale not found with id: {pk}')


def _remove_stock_for(sale):
    for item in sale.items.select_related('product'):
        stock_services.remove_stock(
            item.product, item.quantity,
            reason=f'Sale: {sale.sale_reference}',
            reference=sale.sale_reference,
        )


def _return_stock_for(sale):
    for item in sale.items.select_related('product'):
        stock_services.add_stock(
            item.product, item.quantity,
            reason=f'Sale cancelled: {sale.sale_reference}',
            reference=sale.sale_reference,
        )


@transaction.atomic
def create_sale(items=(), client_id=None, sale_reference=None, status=Sale.STATUS_PENDING,
                payment_method=None, notes=None, sale_date=None):
    client = None
    if client_id is not None:
        client = Client.objects.filter(pk=client_id).first()
        if client is None:
            raise ResourceNotFound('Client not found')

    if sale_reference and Sale.objects.filter(sale_reference=sale_reference).exists():
        raise BusinessRuleError('Sale reference already exists')

    with suspend_cache_signals():
        sale = _insert_sale(
            sale_reference,
            client=client,
            status=status,
            payment_method=payment_method,
            notes=notes,
            sale_date=sale_date or timezone.now(),
        )

        for item in items:
            product = Product.objects.filter(pk=item['product_id']).first()
            if product is None:
                raise ResourceNotFound('Product not found')
            unit_price = item.get('unit_price')
            if unit_price is None:
                unit_price = product.selling_price
            if unit_price is None:
                raise BusinessRuleError(f'Product {product.sku} has no selling price')
            SaleItem.objects.create(
                sale=sale,
                product=product,
                quantity=item['quantity'],
                unit_price=unit_price,
                discount=item.get('discount') or Decimal('0.00'),
            )

        if sale.is_paid:
            _remove_stock_for(sale)

        sale.calculate_total_amount()
        sale.save(update_fields=['total_amount', 'updated_at'])

    logger.info(f"Sale created: {sale.sale_reference} ({sale.status}, total {sale.total_amount})")
    return get_sale(sale.pk)


@transaction.atomic
def update_sale_status(sale, status):
    """Change the status; entering PAID takes the items out of stock"""
    sale = _lock_sale(sale)
    old_status = sale.status
    with suspend_cache_signals():
        if status == Sale.STATUS_PAID and old_status != Sale.STATUS_PAID:
            _remove_stock_for(sale)
        sale.status = status
        sale.save(update_fields=['status', 'updated_at'])
    logger.info(f"Sale {sale.sale_reference} status: {old_status} -> {status}")
    return get_sale(sale.pk)


@transaction.atomic
def delete_sale(sale):
    """Delete the sale; a PAID sale gives its items back to stock first"""
    sale = _lock_sale(sale)
    with suspend_cache_signals():
        if sale.is_paid:
            _return_stock_for(sale)
        reference = sale.sale_reference
        sale.delete()
    logger.info(f"Sale deleted: {reference}")


@transaction.atomic
def update_sale_item(item, quantity=None, unit_price=None, discount=None):
    """Change the provided fields, then recompute the item subtotal and the sale total"""
    with suspend_cache_signals():
        if quantity is not None:
            item.quantity = quantity
        if unit_price is not None:
            item.unit_price = unit_price
        if discount is not None:
            item.discount = discount
        item.save()

        sale = item.sale
        sale.calculate_total_amount()
        sale.save(update_fields=['total_amount', 'updated_at'])
    return item


@transaction.atomic
def delete_sale_item(item):
    with suspend_cache_signals():
        sale = item.sale
        item.delete()
        sale.calculate_total_amount()
        sale.save(update_fields=['total_amount', 'updated_at'])
