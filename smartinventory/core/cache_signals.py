"""
Cache invalidation signals
Drop cached reports whenever the data they are built from changes
"""
from django.db import transaction
from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver
import logging
import threading
from contextlib import contextmanager

from .cache_utils import invalidate_reports_cache

logger = logging.getLogger(__name__)

REPORT_SOURCE_MODELS = {
    'Product', 'Category', 'Supplier', 'Client', 'StockMovement', 'Sale', 'SaleItem',
}

_thread_locals = threading.local()


@contextmanager
def suspend_cache_signals():
    """
    Temporarily suspend cache invalidation, e.g. while a sale writes many rows.
    The reports cache is invalidated once on exit, after the surrounding
    transaction commits.
    """
    previous = is_suspended()
    _thread_locals.suspended = True
    try:
        yield
    finally:
        _thread_locals.suspended = previous
        if not previous:
            transaction.on_commit(invalidate_reports_cache)


def is_suspended():
    return getattr(_thread_locals, 'suspended', False)


@receiver([post_save, post_delete])
def invalidate_reports_on_change(sender, instance, **kwargs):
    if is_suspended():
        return
    if sender.__name__ in REPORT_SOURCE_MODELS:
        logger.debug(f"{sender.__name__} changed, invalidating reports cache after commit")
        # Runs immediately when no transaction is open
        transaction.on_commit(invalidate_reports_cache)
