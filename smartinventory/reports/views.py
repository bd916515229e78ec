import logging
from datetime import datetime, timedelta

from django.utils import timezone
from rest_framework.decorators import api_view
from rest_framework.response import Response

from smartinventory.core.cache_utils import get_cached_report, cache_report
from smartinventory.core.exceptions import BusinessRuleError
from . import services
from .serializers import (
    SummaryMetricsSerializer, SalesTrendSerializer, ProductPerformanceSerializer,
    CategoryPerformanceSerializer, SupplierPerformanceSerializer, StockStatusSerializer,
    InventoryStatsSerializer, RecommendationSerializer
)

logger = logging.getLogger(__name__)

DEFAULT_RANGE_DAYS = 30
DEFAULT_TREND_DAYS = 30
MAX_TREND_DAYS = 366


def parse_date_range(request):
    """
    start_date / end_date as YYYY-MM-DD. Defaults are 30 days ago and now;
    an explicit end date covers the whole of that day.
    """
    start_date = request.query_params.get('start_date')
    end_date = request.query_params.get('end_date')
    try:
        if start_date:
            start = services.day_bounds(datetime.strptime(start_date, '%Y-%m-%d').date())[0]
        else:
            start = timezone.now() - timedelta(days=DEFAULT_RANGE_DAYS)
        if end_date:
            end = services.day_bounds(datetime.strptime(end_date, '%Y-%m-%d').date())[1]
        else:
            end = timezone.now()
    except ValueError:
        raise BusinessRuleError('Invalid date format. Use YYYY-MM-DD')
    return start, end


def parse_days(request):
    try:
        days = int(request.query_params.get('days', DEFAULT_TREND_DAYS))
    except ValueError:
        raise BusinessRuleError('days must be an integer')
    if days < 1 or days > MAX_TREND_DAYS:
        raise BusinessRuleError(f'days must be between 1 and {MAX_TREND_DAYS}')
    return days


def cached_response(request, name, build):
    """Serve a report from the cache, building and storing it on a miss"""
    params = sorted(request.query_params.items())
    cached_data, cache_key = get_cached_report(name, params)
    if cached_data is not None:
        logger.debug(f"Report {name} cache HIT")
        response = Response(cached_data)
        response['X-Cache'] = 'HIT'
        return response

    data = build()
    cache_report(cache_key, data)
    logger.info(f"Report {name} built (user: {request.user.username})")
    response = Response(data)
    response['X-Cache'] = 'MISS'
    return response


@api_view(['GET'])
def summary(request):
    start, end = parse_date_range(request)
    return cached_response(request, 'summary', lambda: SummaryMetricsSerializer(
        services.get_summary_metrics(start, end)).data)


@api_view(['GET'])
def sales_trend(request):
    days = parse_days(request)
    return cached_response(request, 'sales-trend', lambda: SalesTrendSerializer(
        services.get_sales_trend(days)).data)


@api_view(['GET'])
def product_performance(request):
    start, end = parse_date_range(request)
    return cached_response(request, 'product-performance', lambda: ProductPerformanceSerializer(
        services.get_product_performance(start, end), many=True).data)


@api_view(['GET'])
def category_performance(request):
    start, end = parse_date_range(request)
    return cached_response(request, 'category-performance', lambda: CategoryPerformanceSerializer(
        services.get_category_performance(start, end), many=True).data)


@api_view(['GET'])
def supplier_performance(request):
    start, end = parse_date_range(request)
    return cached_response(request, 'supplier-performance', lambda: SupplierPerformanceSerializer(
        services.get_supplier_performance(start, end), many=True).data)


@api_view(['GET'])
def stock_status(request):
    return cached_response(request, 'stock-status', lambda: StockStatusSerializer(
        services.get_stock_status()).data)


@api_view(['GET'])
def inventory_stats(request):
    start, end = parse_date_range(request)
    return cached_response(request, 'inventory-stats', lambda: InventoryStatsSerializer(
        services.get_inventory_stats(start, end)).data)


@api_view(['GET'])
def recommendations(request):
    return cached_response(request, 'recommendations', lambda: RecommendationSerializer(
        services.get_recommendations(), many=True).data)


@api_view(['GET'])
def full_report(request):
    """Every report in one response"""
    start, end = parse_date_range(request)
    days = parse_days(request)

    def build():
        return {
            'summary': SummaryMetricsSerializer(services.get_summary_metrics(start, end)).data,
            'sales_trend': SalesTrendSerializer(services.get_sales_trend(days)).data,
            'product_performance': ProductPerformanceSerializer(
                services.get_product_performance(start, end), many=True).data,
            'category_performance': CategoryPerformanceSerializer(
                services.get_category_performance(start, end), many=True).data,
            'supplier_performance': SupplierPerformanceSerializer(
                services.get_supplier_performance(start, end), many=True).data,
            'stock_status': StockStatusSerializer(services.get_stock_status()).data,
            'inventory_stats': InventoryStatsSerializer(services.get_inventory_stats(start, end)).data,
            'recommendations': RecommendationSerializer(services.get_recommendations(), many=True).data,
        }

    return cached_response(request, 'full', build)
