"""
Test suite for Reports module
Tests: summary, trend, product/category/supplier performance, stock status,
inventory stats, recommendations, date handling and caching
"""
from datetime import timedelta
from decimal import Decimal

from django.core.cache import cache
from django.test import TestCase
from django.utils import timezone
from rest_framework import status

from smartinventory.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from smartinventory.reports import services
from smartinventory.reports.dto import SummaryMetricsDTO, SalesTrendDTO


class ReportDataMixin:
    """
    Three products and a handful of sales:
    A sells 4 units (60.00), B sells 1 unit with a 6.00 discount (24.00);
    a pending sale and a sale from 60 days ago are outside the default figures.
    """

    def build_data(self):
        self.category = TestDataFactory.create_category(name='Tools')
        self.supplier = TestDataFactory.create_supplier(name='Acme')
        self.product_a = TestDataFactory.create_product(
            name='Alpha', category=self.category, supplier=self.supplier,
            cost_price=Decimal('10.00'), selling_price=Decimal('15.00'), stock=20)
        self.product_b = TestDataFactory.create_product(
            name='Beta', cost_price=Decimal('20.00'), selling_price=Decimal('30.00'), stock=5)
        self.product_c = TestDataFactory.create_product(
            name='Gamma', cost_price=None, selling_price=Decimal('8.00'))

        TestDataFactory.create_sale([
            (self.product_a, 4, Decimal('15.00'), Decimal('0.00')),
            (self.product_b, 1, Decimal('30.00'), Decimal('6.00')),
        ])
        TestDataFactory.create_sale([(self.product_a, 10, Decimal('15.00'), Decimal('0.00'))], status='PENDING')
        TestDataFactory.create_sale(
            [(self.product_a, 2, Decimal('15.00'), Decimal('0.00'))],
            sale_date=timezone.now() - timedelta(days=60),
        )

    def default_range(self):
        end = timezone.now()
        return end - timedelta(days=30), end


class ReportServiceTests(ReportDataMixin, TestCase):
    def setUp(self):
        cache.clear()
        self.build_data()

    def test_summary_metrics(self):
        summary = services.get_summary_metrics(*self.default_range())
        self.assertEqual(summary.total_revenue, Decimal('84.00'))
        self.assertEqual(summary.total_profit, Decimal('24.00'))
        self.assertEqual(summary.profit_margin_percent, Decimal('28.57'))
        self.assertEqual(summary.roi_percent, Decimal('40'))
        self.assertEqual(summary.turnover_rate, Decimal('0.3333'))
        self.assertEqual(summary.total_sales, 1)
        self.assertEqual(summary.total_products, 3)

    def test_summary_without_sales(self):
        end = timezone.now() - timedelta(days=200)
        summary = services.get_summary_metrics(end - timedelta(days=1), end)
        self.assertEqual(summary.total_revenue, Decimal('0'))
        self.assertEqual(summary.profit_margin_percent, Decimal('0'))
        self.assertEqual(summary.roi_percent, Decimal('0'))

    def test_product_performance(self):
        performance = services.get_product_performance(*self.default_range())
        self.assertEqual([p.name for p in performance], ['Alpha', 'Beta', 'Gamma'])
        alpha, beta, gamma = performance
        self.assertEqual(alpha.quantity, 4)
        self.assertEqual(alpha.revenue, Decimal('60.00'))
        self.assertEqual(alpha.cost, Decimal('40.00'))
        self.assertEqual(alpha.profit_margin, Decimal('33.33'))
        self.assertEqual(alpha.roi, Decimal('50'))
        self.assertEqual(beta.revenue, Decimal('24.00'))
        self.assertEqual(beta.profit_margin, Decimal('16.67'))
        self.assertEqual(beta.roi, Decimal('20'))
        self.assertEqual(gamma.quantity, 0)
        self.assertEqual(gamma.revenue, Decimal('0'))

    def test_category_performance(self):
        performance = services.get_category_performance(*self.default_range())
        self.assertEqual(len(performance), 1)
        tools = performance[0]
        self.assertEqual(tools.name, 'Tools')
        self.assertEqual(tools.revenue, Decimal('60.00'))
        self.assertEqual(tools.profit, Decimal('20.00'))
        self.assertEqual(tools.roi, Decimal('50'))
        self.assertEqual(tools.quantity, 4)

    def test_supplier_performance(self):
        other = TestDataFactory.create_supplier(name='Bigger')
        product = TestDataFactory.create_product(supplier=other, selling_price=Decimal('100.00'))
        TestDataFactory.create_sale([(product, 1, Decimal('100.00'), Decimal('0.00'))])

        performance = services.get_supplier_performance(*self.default_range())
        self.assertEqual([s.name for s in performance], ['Bigger', 'Acme'])
        self.assertEqual(performance[1].revenue, Decimal('60.00'))
        self.assertEqual(performance[1].product_count, 1)

    def test_stock_status(self):
        stock = services.get_stock_status()
        self.assertEqual((stock.in_stock, stock.low_stock, stock.out_of_stock), (1, 1, 1))

    def test_inventory_stats(self):
        stats = services.get_inventory_stats(*self.default_range())
        self.assertEqual(stats.total_items_in_stock, 25)
        self.assertEqual(stats.total_inventory_value, Decimal('300.00'))
        self.assertEqual(stats.average_profit_margin, Decimal('50.00'))
        self.assertEqual(stats.total_items_sold, 5)

    def test_sales_trend(self):
        trend = services.get_sales_trend(7)
        self.assertEqual(len(trend.labels), 7)
        self.assertEqual(trend.labels[-1], timezone.localdate())
        self.assertEqual(trend.revenue[-1], Decimal('84.00'))
        self.assertEqual(trend.profit[-1], Decimal('24.00'))
        self.assertEqual(sum(trend.revenue[:-1]), 0)

    def test_recommendations(self):
        recommendations = services.get_recommendations()
        titles = [r.title for r in recommendations]
        self.assertEqual(titles, [
            'Low Stock Alert',
            'Out of Stock Items',
            'Focus on Best Sellers',
            'High Profit Opportunity',
            'Slow Moving Items',
        ])
        by_title = {r.title: r for r in recommendations}
        self.assertEqual(by_title['Low Stock Alert'].message,
                         '1 products need restocking. Consider reordering soon.')
        self.assertEqual(by_title['Focus on Best Sellers'].message,
                         'Alpha is your top performer with $60.00 in revenue. Ensure adequate stock levels.')
        self.assertEqual(by_title['High Profit Opportunity'].message,
                         'Alpha has 50.0% ROI. Consider promoting it.')
        self.assertEqual(by_title['Slow Moving Items'].message,
                         'Beta has low sales (1 units). Consider discounting to improve turnover.')
        self.assertEqual(by_title['Slow Moving Items'].type, 'info')

    def test_dtos_start_empty(self):
        summary = SummaryMetricsDTO()
        self.assertIsNone(summary.total_revenue)
        self.assertEqual(SalesTrendDTO().labels, [])


class ReportAPITests(ReportDataMixin, TestCase):
    """Test report endpoints"""

    def setUp(self):
        cache.clear()
        self.build_data()
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_summary(self):
        response = self.client.get('/api/reports/summary')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_revenue'], Decimal('84.00'))
        self.assertEqual(response.data['total_sales'], 1)

    def test_summary_with_date_range(self):
        start = (timezone.localdate() - timedelta(days=90)).isoformat()
        end = timezone.localdate().isoformat()
        response = self.client.get(f'/api/reports/summary?start_date={start}&end_date={end}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_revenue'], Decimal('114.00'))
        self.assertEqual(response.data['total_sales'], 2)

    def test_invalid_date(self):
        response = self.client.get('/api/reports/summary?start_date=2024-13-45')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {'error': 'Invalid date format. Use YYYY-MM-DD'})

    def test_sales_trend(self):
        response = self.client.get('/api/reports/sales-trend?days=7')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['labels']), 7)
        self.assertEqual(len(response.data['revenue']), 7)

    def test_sales_trend_invalid_days(self):
        self.assertEqual(self.client.get('/api/reports/sales-trend?days=0').status_code,
                         status.HTTP_400_BAD_REQUEST)
        self.assertEqual(self.client.get('/api/reports/sales-trend?days=x').status_code,
                         status.HTTP_400_BAD_REQUEST)

    def test_list_reports(self):
        for path, expected in (
            ('/api/reports/product-performance', 3),
            ('/api/reports/category-performance', 1),
            ('/api/reports/supplier-performance', 1),
            ('/api/reports/recommendations', 5),
        ):
            response = self.client.get(path)
            self.assertEqual(response.status_code, status.HTTP_200_OK, path)
            self.assertEqual(len(response.data), expected, path)

    def test_stock_status_and_inventory_stats(self):
        response = self.client.get('/api/reports/stock-status')
        self.assertEqual(response.data, {'in_stock': 1, 'low_stock': 1, 'out_of_stock': 1})
        response = self.client.get('/api/reports/inventory-stats')
        self.assertEqual(response.data['total_items_in_stock'], 25)

    def test_full_report(self):
        response = self.client.get('/api/reports/full?days=7')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(set(response.data), {
            'summary', 'sales_trend', 'product_performance', 'category_performance',
            'supplier_performance', 'stock_status', 'inventory_stats', 'recommendations',
        })
        self.assertEqual(len(response.data['sales_trend']['labels']), 7)

    def test_reports_are_cached_until_data_changes(self):
        first = self.client.get('/api/reports/summary')
        self.assertEqual(first['X-Cache'], 'MISS')
        second = self.client.get('/api/reports/summary')
        self.assertEqual(second['X-Cache'], 'HIT')

        with self.captureOnCommitCallbacks(execute=False) as callbacks:
            TestDataFactory.create_sale([(self.product_b, 1, Decimal('30.00'), Decimal('0.00'))])
        # Still served from the cache until the writing transaction commits
        self.assertEqual(self.client.get('/api/reports/summary')['X-Cache'], 'HIT')

        for callback in callbacks:
            callback()
        third = self.client.get('/api/reports/summary')
        self.assertEqual(third['X-Cache'], 'MISS')
        self.assertEqual(third.data['total_revenue'], Decimal('114.00'))

    def test_requires_authentication(self):
        self.client.logout()
        response = self.client.get('/api/reports/summary')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
