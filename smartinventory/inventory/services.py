"""
Stock level changes.

Every change is a StockMovement row; the stock of a product is the signed
sum of its movements. Removals lock the product row so two concurrent
removals cannot both pass the availability check.
"""
import logging

from django.db import transaction
from django.db.models import Sum

from smartinventory.catalog.models import Product
from smartinventory.core.exceptions import BusinessRuleError, ResourceNotFound
from .models import StockMovement

logger = logging.getLogger(__name__)


def current_stock(product):
    total = StockMovement.objects.filter(product=product).aggregate(total=Sum('quantity'))['total']
    return total or 0


def _get_product(product_id, lock=False):
    products = Product.objects.select_for_update() if lock else Product.objects.all()
    try:
        return products.get(pk=product_id)
    except Product.DoesNotExist:
        raise ResourceNotFound(f'Product not found with id: {product_id}')


def _resolve(product):
    return product if isinstance(product, Product) else _get_product(product)


@transaction.atomic
def add_stock(product, quantity, reason=None, reference=None):
    """Record an IN movement; product may be an instance or an id"""
    if quantity <= 0:
        raise BusinessRuleError('Quantity must be positive')
    product = _resolve(product)
    movement = StockMovement.objects.create(
        product=product,
        quantity=quantity,
        movement_type=StockMovement.MOVEMENT_IN,
        reason=reason,
        reference=reference,
    )
    logger.info(f"Stock added: {quantity} x {product.sku} ({reason or 'no reason'})")
    return movement


@transaction.atomic
def remove_stock(product, quantity, reason=None, reference=None):
    """Record an OUT movement; fails when fewer units are on hand"""
    if quantity <= 0:
        raise BusinessRuleError('Quantity must be positive')
    product_id = product.pk if isinstance(product, Product) else product
    product = _get_product(product_id, lock=True)

    available = current_stock(product)
    if available < quantity:
        raise BusinessRuleError(f'Insufficient stock. Available: {available}, Requested: {quantity}')

    movement = StockMovement.objects.create(
        product=product,
        quantity=-quantity,
        movement_type=StockMovement.MOVEMENT_OUT,
        reason=reason,
        reference=reference,
    )
    logger.info(f"Stock removed: {quantity} x {product.sku} ({reason or 'no reason'})")
    return movement
