"""
Test suite for Catalog module
Tests: categories, products, filtering, lookups and stock level views
"""
from decimal import Decimal

from django.core.cache import cache
from django.db import connection
from django.test import TestCase
from django.test.utils import CaptureQueriesContext
from rest_framework import status

from smartinventory.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from smartinventory.catalog.models import Category, Product


class ProductModelTests(TestCase):
    def test_profit_margin(self):
        product = TestDataFactory.create_product(cost_price=Decimal('8.00'), selling_price=Decimal('10.00'))
        self.assertEqual(product.profit_margin, Decimal('25.00'))

    def test_profit_margin_without_cost(self):
        product = TestDataFactory.create_product(cost_price=None)
        self.assertEqual(product.profit_margin, Decimal('0.00'))
        product = TestDataFactory.create_product(cost_price=Decimal('0.00'))
        self.assertEqual(product.profit_margin, Decimal('0.00'))

    def test_current_stock_and_low_stock(self):
        product = TestDataFactory.create_product(stock=12)
        TestDataFactory.create_stock_movement(product, -5, reason='Sold')
        self.assertEqual(product.current_stock, 7)
        self.assertTrue(product.is_low_stock)


class CategoryAPITests(TestCase):
    def setUp(self):
        cache.clear()
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_category_crud(self):
        response = self.client.post('/api/categories', {'name': 'Tools'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        category_id = response.data['id']

        response = self.client.post('/api/categories', {'name': 'Tools'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.patch(f'/api/categories/{category_id}', {'description': 'Hand tools'}, format='json')
        self.assertEqual(response.data['description'], 'Hand tools')

        response = self.client.delete(f'/api/categories/{category_id}')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Category.objects.exists())


class ProductAPITests(TestCase):
    def setUp(self):
        cache.clear()
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.category = TestDataFactory.create_category(name='Hardware')
        self.supplier = TestDataFactory.create_supplier(name='Acme Supply')

    def test_create_product(self):
        response = self.client.post('/api/products', {
            'name': 'Hammer',
            'sku': 'HAM-001',
            'brand': 'Stanley',
            'cost_price': '8.00',
            'selling_price': '12.00',
            'category': self.category.id,
            'supplier': self.supplier.id,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['category_name'], 'Hardware')
        self.assertEqual(response.data['supplier_name'], 'Acme Supply')
        self.assertEqual(response.data['current_stock'], 0)
        self.assertEqual(response.data['profit_margin'], Decimal('50.00'))

    def test_duplicate_sku(self):
        TestDataFactory.create_product(sku='DUP-1')
        response = self.client.post('/api/products', {'name': 'Other', 'sku': 'DUP-1'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('sku', response.data['error'])

    def test_negative_price_rejected(self):
        response = self.client.post('/api/products', {
            'name': 'Bad', 'sku': 'BAD-1', 'selling_price': '-1.00'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_list_filters(self):
        hammer = TestDataFactory.create_product(name='Hammer', brand='Stanley', category=self.category,
                                                selling_price=Decimal('12.00'))
        TestDataFactory.create_product(name='Saw', brand='Bosch', supplier=self.supplier,
                                       selling_price=Decimal('40.00'))

        response = self.client.get('/api/products?search=hamm')
        self.assertEqual([p['id'] for p in response.data], [hammer.id])

        response = self.client.get(f'/api/products?category={self.category.id}')
        self.assertEqual([p['name'] for p in response.data], ['Hammer'])

        response = self.client.get(f'/api/products?supplier={self.supplier.id}')
        self.assertEqual([p['name'] for p in response.data], ['Saw'])

        response = self.client.get('/api/products?brand=bosch')
        self.assertEqual([p['name'] for p in response.data], ['Saw'])

        response = self.client.get('/api/products?min_price=20')
        self.assertEqual([p['name'] for p in response.data], ['Saw'])

        response = self.client.get('/api/products?max_price=20')
        self.assertEqual([p['name'] for p in response.data], ['Hammer'])

    def test_lookup_endpoints(self):
        product = TestDataFactory.create_product(name='Drill', sku='DRL-9', category=self.category,
                                                 supplier=self.supplier)
        response = self.client.get('/api/products/sku/DRL-9')
        self.assertEqual(response.data['id'], product.id)

        response = self.client.get('/api/products/sku/NOPE')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

        response = self.client.get('/api/products/search?q=drl')
        self.assertEqual(len(response.data), 1)

        response = self.client.get(f'/api/products/category/{self.category.id}')
        self.assertEqual(len(response.data), 1)

        response = self.client.get(f'/api/products/supplier/{self.supplier.id}')
        self.assertEqual(len(response.data), 1)

    def test_low_stock(self):
        plenty = TestDataFactory.create_product(stock=50)
        few = TestDataFactory.create_product(stock=3)
        none = TestDataFactory.create_product()

        response = self.client.get('/api/products/low-stock')
        ids = {p['id'] for p in response.data}
        self.assertEqual(ids, {few.id, none.id})

        response = self.client.get('/api/products/low-stock?threshold=100')
        ids = {p['id'] for p in response.data}
        self.assertEqual(ids, {plenty.id, few.id, none.id})

        response = self.client.get('/api/products/low-stock?threshold=abc')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_list_reads_stock_without_a_query_per_product(self):
        TestDataFactory.create_product(stock=4)
        with CaptureQueriesContext(connection) as single:
            self.client.get('/api/products')

        TestDataFactory.create_product(stock=12)
        TestDataFactory.create_product()
        with CaptureQueriesContext(connection) as several:
            response = self.client.get('/api/products')

        self.assertEqual(len(several), len(single))
        self.assertEqual([p['current_stock'] for p in response.data], [4, 12, 0])
        self.assertEqual([p['is_low_stock'] for p in response.data], [True, False, True])

    def test_product_stock(self):
        product = TestDataFactory.create_product(stock=15)
        response = self.client.get(f'/api/products/{product.id}/stock')
        self.assertEqual(response.data['current_stock'], 15)
        self.assertFalse(response.data['is_low_stock'])

    def test_delete_sold_product_is_rejected(self):
        product = TestDataFactory.create_product()
        TestDataFactory.create_sale([(product, 1, Decimal('15.00'), Decimal('0'))])
        response = self.client.delete(f'/api/products/{product.id}')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(Product.objects.filter(pk=product.id).exists())
