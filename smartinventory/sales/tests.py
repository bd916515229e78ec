"""
Test suite for Sales module
Tests: sale creation, status changes, stock effects, sale items and their aggregates
"""
from decimal import Decimal
from unittest import mock

from django.core.cache import cache
from django.test import TestCase
from rest_framework import status

from smartinventory.core.exceptions import BusinessRuleError, ResourceNotFound
from smartinventory.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from smartinventory.inventory.services import current_stock
from smartinventory.sales import services
from smartinventory.sales.models import Sale, SaleItem


class SaleModelTests(TestCase):
    def setUp(self):
        self.product = TestDataFactory.create_product()

    def test_subtotal_with_discount(self):
        sale = TestDataFactory.create_sale([(self.product, 4, Decimal('25.00'), Decimal('10.00'))])
        item = sale.items.get()
        self.assertEqual(item.subtotal, Decimal('90.00'))
        self.assertEqual(item.discount_percentage, Decimal('10.00'))
        self.assertEqual(sale.total_amount, Decimal('90.00'))

    def test_subtotal_without_discount(self):
        sale = TestDataFactory.create_sale([(self.product, 3, Decimal('5.00'), Decimal('0.00'))])
        self.assertEqual(sale.items.get().subtotal, Decimal('15.00'))
        self.assertEqual(sale.items.get().discount_percentage, Decimal('0.00'))


class SaleServiceTests(TestCase):
    def setUp(self):
        self.client_record = TestDataFactory.create_client()
        self.product = TestDataFactory.create_product(selling_price=Decimal('20.00'), stock=10)

    def test_generated_reference(self):
        sale = services.create_sale(items=[{'product_id': self.product.id, 'quantity': 1}])
        self.assertEqual(sale.sale_reference, 'SALE-000001')
        sale = services.create_sale(items=[{'product_id': self.product.id, 'quantity': 1}])
        self.assertEqual(sale.sale_reference, 'SALE-000002')

    def test_generated_reference_skips_taken(self):
        TestDataFactory.create_sale([], reference='SALE-000002')
        sale = services.create_sale()
        self.assertEqual(sale.sale_reference, 'SALE-000003')

    def test_paid_sale_failing_stock_rolls_back(self):
        other = TestDataFactory.create_product(stock=1)
        with self.assertRaises(BusinessRuleError):
            services.create_sale(status='PAID', items=[
                {'product_id': self.product.id, 'quantity': 2},
                {'product_id': other.id, 'quantity': 5},
            ])
        self.assertFalse(Sale.objects.exists())
        self.assertEqual(current_stock(self.product), 10)

    def test_paid_transition_from_stale_instances_removes_stock_once(self):
        sale = services.create_sale(items=[{'product_id': self.product.id, 'quantity': 3}])
        first = services.get_sale(sale.pk)
        second = services.get_sale(sale.pk)
        self.assertEqual(second.status, Sale.STATUS_PENDING)

        services.update_sale_status(first, Sale.STATUS_PAID)
        services.update_sale_status(second, Sale.STATUS_PAID)
        self.assertEqual(current_stock(self.product), 7)

    def test_paid_sale_stock_is_returned_once(self):
        sale = services.create_sale(status='PAID', items=[{'product_id': self.product.id, 'quantity': 3}])
        stale = services.get_sale(sale.pk)

        services.delete_sale(services.get_sale(sale.pk))
        with self.assertRaises(ResourceNotFound):
            services.delete_sale(stale)
        self.assertEqual(current_stock(self.product), 10)

    def test_generated_reference_taken_at_insert_is_retried(self):
        TestDataFactory.create_sale([], reference='SALE-000001')
        with mock.patch.object(services, 'generate_reference', side_effect=['SALE-000001', 'SALE-000005']):
            sale = services.create_sale()
        self.assertEqual(sale.sale_reference, 'SALE-000005')
        self.assertEqual(Sale.objects.count(), 2)

    def test_reports_cache_cleared_only_after_commit(self):
        cache.set('reports:summary:marker', 'stale')
        with self.captureOnCommitCallbacks(execute=False) as callbacks:
            services.create_sale(status='PAID', items=[{'product_id': self.product.id, 'quantity': 1}])
            self.assertEqual(cache.get('reports:summary:marker'), 'stale')
        self.assertTrue(callbacks)

        for callback in callbacks:
            callback()
        self.assertIsNone(cache.get('reports:summary:marker'))

class SaleAPITests(TestCase):
    def setUp(self):
        cache.clear()
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.buyer = TestDataFactory.create_client(name='Buyer')
        self.product = TestDataFactory.create_product(selling_price=Decimal('20.00'), stock=10)

    def create(self, **data):
        payload = {'client_id': self.buyer.id, 'items': [{'product_id': self.product.id, 'quantity': 2}]}
        payload.update(data)
        return self.client.post('/api/sales', payload, format='json')

    def test_create_pending_sale_keeps_stock(self):
        response = self.create()
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'PENDING')
        self.assertEqual(response.data['client_name'], 'Buyer')
        self.assertEqual(response.data['total_amount'], Decimal('40.00'))
        self.assertEqual(response.data['items'][0]['unit_price'], Decimal('20.00'))
        self.assertEqual(current_stock(self.product), 10)

    def test_create_paid_sale_removes_stock(self):
        response = self.create(status='paid', sale_reference='INV-77')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['sale_reference'], 'INV-77')
        self.assertEqual(current_stock(self.product), 8)
        movement = self.product.stock_movements.order_by('-id').first()
        self.assertEqual(movement.reference, 'INV-77')
        self.assertEqual(movement.reason, 'Sale: INV-77')

    def test_create_paid_sale_insufficient_stock(self):
        response = self.create(status='PAID', items=[{'product_id': self.product.id, 'quantity': 11}])
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {'error': 'Insufficient stock. Available: 10, Requested: 11'})
        self.assertFalse(Sale.objects.exists())

    def test_explicit_price_and_discount(self):
        response = self.create(items=[{
            'product_id': self.product.id, 'quantity': 3, 'unit_price': '18.00', 'discount': '4.00'
        }])
        self.assertEqual(response.data['total_amount'], Decimal('50.00'))

    def test_duplicate_reference(self):
        self.create(sale_reference='DUP')
        response = self.create(sale_reference='DUP')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {'error': 'Sale reference already exists'})

    def test_unknown_client(self):
        response = self.create(client_id=99999)
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data, {'error': 'Client not found'})

    def test_unknown_product(self):
        response = self.create(items=[{'product_id': 99999, 'quantity': 1}])
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_status_change_to_paid_removes_stock_once(self):
        sale_id = self.create().data['id']
        response = self.client.put(f'/api/sales/{sale_id}/status', {'status': 'PAID'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'PAID')
        self.assertEqual(current_stock(self.product), 8)

        self.client.put(f'/api/sales/{sale_id}/status', {'status': 'PAID'}, format='json')
        self.assertEqual(current_stock(self.product), 8)

    def test_unknown_status(self):
        sale_id = self.create().data['id']
        response = self.client.put(f'/api/sales/{sale_id}/status', {'status': 'SHIPPED'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_delete_paid_sale_returns_stock(self):
        sale_id = self.create(status='PAID').data['id']
        self.assertEqual(current_stock(self.product), 8)
        response = self.client.delete(f'/api/sales/{sale_id}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'message': 'Sale deleted successfully'})
        self.assertEqual(current_stock(self.product), 10)
        self.assertFalse(Sale.objects.filter(pk=sale_id).exists())

    def test_delete_pending_sale_leaves_stock(self):
        sale_id = self.create().data['id']
        self.client.delete(f'/api/sales/{sale_id}')
        self.assertEqual(current_stock(self.product), 10)
        self.assertEqual(self.product.stock_movements.count(), 1)

    def test_lookups(self):
        pending = self.create(sale_reference='P-1').data
        paid = self.create(sale_reference='P-2', status='PAID').data

        response = self.client.get('/api/sales/reference/P-2')
        self.assertEqual(response.data['id'], paid['id'])

        response = self.client.get('/api/sales/reference/NOPE')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

        response = self.client.get(f'/api/sales/client/{self.buyer.id}')
        self.assertEqual(len(response.data), 2)

        response = self.client.get('/api/sales/status/paid')
        self.assertEqual([s['id'] for s in response.data], [paid['id']])

        response = self.client.get('/api/sales/pending')
        self.assertEqual([s['id'] for s in response.data], [pending['id']])

        response = self.client.get('/api/sales/recent')
        self.assertEqual(len(response.data), 2)


class SaleItemAPITests(TestCase):
    def setUp(self):
        cache.clear()
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.product = TestDataFactory.create_product(name='Widget')
        self.other = TestDataFactory.create_product(name='Gadget')
        self.sale = TestDataFactory.create_sale([
            (self.product, 2, Decimal('10.00'), Decimal('0.00')),
            (self.other, 1, Decimal('30.00'), Decimal('5.00')),
        ])
        TestDataFactory.create_sale([(self.product, 3, Decimal('10.00'), Decimal('0.00'))])

    def test_update_recalculates_totals(self):
        item = self.sale.items.get(product=self.product)
        response = self.client.put(f'/api/sale-items/{item.id}', {'quantity': 5, 'discount': '2.00'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['subtotal'], Decimal('48.00'))
        self.sale.refresh_from_db()
        self.assertEqual(self.sale.total_amount, Decimal('73.00'))

    def test_delete_item_recalculates_total(self):
        item = self.sale.items.get(product=self.other)
        response = self.client.delete(f'/api/sale-items/{item.id}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.sale.refresh_from_db()
        self.assertEqual(self.sale.total_amount, Decimal('20.00'))

    def test_listings(self):
        self.assertEqual(len(self.client.get('/api/sale-items').data), 3)
        self.assertEqual(len(self.client.get(f'/api/sale-items/sale/{self.sale.id}').data), 2)
        self.assertEqual(len(self.client.get(f'/api/sale-items/product/{self.product.id}').data), 2)

    def test_product_aggregates(self):
        response = self.client.get(f'/api/sale-items/product/{self.product.id}/sold')
        self.assertEqual(response.data, {'product_id': self.product.id, 'total_quantity_sold': 5})

        response = self.client.get(f'/api/sale-items/product/{self.product.id}/revenue')
        self.assertEqual(response.data['total_revenue'], Decimal('50.00'))

        response = self.client.get('/api/sale-items/product/99999/sold')
        self.assertEqual(response.data['total_quantity_sold'], 0)

    def test_top_selling(self):
        response = self.client.get('/api/sale-items/top-selling')
        self.assertEqual([row['product_name'] for row in response.data], ['Widget', 'Gadget'])
        self.assertEqual(response.data[0]['total_quantity'], 5)

    def test_discounts(self):
        response = self.client.get('/api/sale-items/with-discount')
        self.assertEqual([row['product_name'] for row in response.data], ['Gadget'])
        response = self.client.get('/api/sale-items/total-discounts')
        self.assertEqual(response.data['total_discounts'], Decimal('5.00'))
