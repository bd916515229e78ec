"""
Report calculations.

Only PAID sales count, and a sale belongs to a range when
start <= sale_date <= end. Ratios are divided to four places with
ROUND_HALF_UP before being turned into percentages, so results match to
the cent whichever database is in use.
"""
import logging
from collections import OrderedDict
from datetime import datetime, time, timedelta
from decimal import Decimal, ROUND_HALF_UP

from django.db.models import Sum, Value
from django.db.models.functions import Coalesce
from django.utils import timezone

from smartinventory.catalog.models import Category, Product, LOW_STOCK_THRESHOLD
from smartinventory.parties.models import Supplier
from smartinventory.sales.models import Sale, SaleItem
from .dto import (
    CategoryPerformanceDTO, ProductPerformanceDTO, SupplierPerformanceDTO,
    StockStatusDTO, InventoryStatsDTO, SummaryMetricsDTO, RecommendationDTO, SalesTrendDTO
)

logger = logging.getLogger(__name__)

ZERO = Decimal('0')
HUNDRED = Decimal('100')
FOUR_PLACES = Decimal('0.0001')
TWO_PLACES = Decimal('0.01')

HIGH_ROI_THRESHOLD = Decimal('30')
SLOW_MOVER_MAX_UNITS = 5
RECOMMENDATION_WINDOW_DAYS = 30


def ratio(numerator, denominator):
    return (numerator / denominator).quantize(FOUR_PLACES, rounding=ROUND_HALF_UP)


def percent(numerator, denominator):
    return ratio(numerator, denominator) * HUNDRED


def day_bounds(day):
    """Aware datetimes covering the whole of a calendar day"""
    tz = timezone.get_current_timezone()
    start = timezone.make_aware(datetime.combine(day, time.min), tz)
    end = timezone.make_aware(datetime.combine(day, time.max), tz)
    return start, end


def paid_sales(start, end):
    return Sale.objects.filter(status=Sale.STATUS_PAID, sale_date__gte=start, sale_date__lte=end)


def paid_items(start, end):
    return SaleItem.objects.select_related('product').filter(
        sale__status=Sale.STATUS_PAID, sale__sale_date__gte=start, sale__sale_date__lte=end
    )


def item_cost(item):
    """Cost of a sold line at the product's cost price, None when unknown"""
    cost_price = item.product.cost_price
    if cost_price is None:
        return None
    return cost_price * item.quantity


def _revenue_and_cost(start, end):
    revenue = paid_sales(start, end).aggregate(total=Sum('total_amount'))['total'] or ZERO
    cost = ZERO
    for item in paid_items(start, end):
        line_cost = item_cost(item)
        if line_cost is not None:
            cost += line_cost
    return revenue, cost


def stock_levels():
    """Product id -> current stock for every product"""
    rows = Product.objects.annotate(
        stock_level=Coalesce(Sum('stock_movements__quantity'), Value(0))
    ).values_list('id', 'stock_level', 'cost_price', 'selling_price')
    return {pk: (stock, cost, selling) for pk, stock, cost, selling in rows}


def get_summary_metrics(start, end):
    revenue, cost = _revenue_and_cost(start, end)
    profit = revenue - cost
    sales_count = paid_sales(start, end).count()
    product_count = Product.objects.count()

    return SummaryMetricsDTO(
        total_revenue=revenue,
        total_profit=profit,
        profit_margin_percent=percent(profit, revenue) if revenue > 0 else ZERO,
        roi_percent=percent(profit, cost) if cost > 0 else ZERO,
        turnover_rate=ratio(Decimal(sales_count), Decimal(product_count)) if product_count else ZERO,
        total_sales=sales_count,
        total_products=product_count,
    )


def get_sales_trend(days=30):
    """Revenue and profit of each of the last `days` days, oldest first"""
    trend = SalesTrendDTO()
    today = timezone.localdate()
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        start, end = day_bounds(day)
        revenue, cost = _revenue_and_cost(start, end)
        trend.labels.append(day)
        trend.revenue.append(revenue)
        trend.profit.append(revenue - cost)
    return trend


def get_product_performance(start, end):
    """One entry per product, unsold products included with zeros"""
    performance = OrderedDict(
        (product.id, ProductPerformanceDTO(
            id=product.id, name=product.name, quantity=0,
            revenue=ZERO, cost=ZERO, profit=ZERO, profit_margin=ZERO, roi=ZERO,
        ))
        for product in Product.objects.order_by('id')
    )

    for item in paid_items(start, end):
        dto = performance.get(item.product_id)
        if dto is None:
            continue
        dto.quantity += item.quantity
        dto.revenue += item.subtotal
        line_cost = item_cost(item)
        if line_cost is not None:
            dto.cost += line_cost

    for dto in performance.values():
        dto.profit = dto.revenue - dto.cost
        if dto.revenue > 0:
            dto.profit_margin = percent(dto.profit, dto.revenue)
        if dto.cost > 0:
            dto.roi = percent(dto.profit, dto.cost)

    return list(performance.values())


def get_category_performance(start, end):
    """Categories that sold something in the range"""
    performance = OrderedDict(
        (category.id, CategoryPerformanceDTO(
            id=category.id, name=category.name,
            revenue=ZERO, cost=ZERO, profit=ZERO, roi=ZERO, quantity=0,
        ))
        for category in Category.objects.order_by('id')
    )

    for item in paid_items(start, end):
        dto = performance.get(item.product.category_id)
        if dto is None:
            continue
        dto.revenue += item.subtotal
        dto.quantity += item.quantity
        line_cost = item_cost(item)
        if line_cost is not None:
            dto.cost += line_cost

    for dto in performance.values():
        dto.profit = dto.revenue - dto.cost
        if dto.cost > 0:
            dto.roi = percent(dto.profit, dto.cost)

    return [dto for dto in performance.values() if dto.revenue > 0]


def get_supplier_performance(start, end):
    """Suppliers whose products sold in the range, highest revenue first"""
    performance = OrderedDict(
        (supplier.id, SupplierPerformanceDTO(
            id=supplier.id, name=supplier.name, revenue=ZERO, product_count=0,
        ))
        for supplier in Supplier.objects.order_by('id')
    )

    for item in paid_items(start, end):
        dto = performance.get(item.product.supplier_id)
        if dto is None:
            continue
        dto.revenue += item.subtotal
        dto.product_count += 1

    sold = [dto for dto in performance.values() if dto.revenue > 0]
    return sorted(sold, key=lambda dto: dto.revenue, reverse=True)


def get_stock_status():
    status = StockStatusDTO(in_stock=0, low_stock=0, out_of_stock=0)
    for stock, _, _ in stock_levels().values():
        if stock >= LOW_STOCK_THRESHOLD:
            status.in_stock += 1
        elif stock > 0:
            status.low_stock += 1
        else:
            status.out_of_stock += 1
    return status


def get_inventory_stats(start, end):
    levels = stock_levels().values()

    total_items = sum(stock for stock, _, _ in levels)
    total_value = sum(
        (Decimal(stock) * cost for stock, cost, _ in levels if cost is not None), ZERO
    )

    markups = [
        percent(selling - cost, cost) if cost > 0 else ZERO
        for _, cost, selling in levels
        if cost is not None and selling is not None
    ]
    average_markup = ZERO
    if markups:
        average_markup = (sum(markups, ZERO) / len(markups)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)

    items_sold = paid_items(start, end).aggregate(total=Sum('quantity'))['total'] or 0

    return InventoryStatsDTO(
        total_items_in_stock=total_items,
        total_inventory_value=total_value,
        average_profit_margin=average_markup,
        total_items_sold=items_sold,
    )


def get_recommendations():
    """Suggestions drawn from stock levels and the last 30 days of sales"""
    recommendations = []
    stock_status = get_stock_status()

    if stock_status.low_stock > 0:
        recommendations.append(RecommendationDTO(
            type='warning',
            icon='⚠️',
            title='Low Stock Alert',
            message=f'{stock_status.low_stock} products need restocking. Consider reordering soon.',
            action='View Items',
        ))

    if stock_status.out_of_stock > 0:
        recommendations.append(RecommendationDTO(
            type='warning',
            icon='❌',
            title='Out of Stock Items',
            message=f'{stock_status.out_of_stock} products are out of stock. Restock to avoid lost sales.',
            action='Restock Now',
        ))

    end = timezone.now()
    start = end - timedelta(days=RECOMMENDATION_WINDOW_DAYS)
    performance = get_product_performance(start, end)

    # max() keeps the first of equal entries, i.e. the lowest product id
    best_seller = max(performance, key=lambda dto: dto.revenue, default=None)
    if best_seller is not None and best_seller.revenue > 0:
        revenue = best_seller.revenue.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
        recommendations.append(RecommendationDTO(
            type='success',
            icon='🌟',
            title='Focus on Best Sellers',
            message=f'{best_seller.name} is your top performer with ${revenue} in revenue. '
                    f'Ensure adequate stock levels.',
            action='View Details',
        ))

    high_roi = max(
        (dto for dto in performance if dto.roi > HIGH_ROI_THRESHOLD),
        key=lambda dto: dto.roi, default=None,
    )
    if high_roi is not None:
        roi = high_roi.roi.quantize(Decimal('0.1'), rounding=ROUND_HALF_UP)
        recommendations.append(RecommendationDTO(
            type='success',
            icon='💰',
            title='High Profit Opportunity',
            message=f'{high_roi.name} has {roi}% ROI. Consider promoting it.',
            action='Promote',
        ))

    slow_mover = min(
        (dto for dto in performance if 0 < dto.quantity < SLOW_MOVER_MAX_UNITS),
        key=lambda dto: dto.quantity, default=None,
    )
    if slow_mover is not None:
        recommendations.append(RecommendationDTO(
            type='info',
            icon='📉',
            title='Slow Moving Items',
            message=f'{slow_mover.name} has low sales ({slow_mover.quantity} units). '
                    f'Consider discounting to improve turnover.',
            action='Create Promotion',
        ))

    logger.debug(f"Built {len(recommendations)} recommendations")
    return recommendations
