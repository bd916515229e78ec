"""
Test suite for Inventory module
Tests: stock additions, removals and movement listings
"""
from django.core.cache import cache
from django.test import TestCase
from rest_framework import status

from smartinventory.core.exceptions import BusinessRuleError, ResourceNotFound
from smartinventory.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from smartinventory.inventory import services
from smartinventory.inventory.models import StockMovement


class StockServiceTests(TestCase):
    def setUp(self):
        self.product = TestDataFactory.create_product()

    def test_add_and_remove(self):
        services.add_stock(self.product, 10, reason='Delivery')
        movement = services.remove_stock(self.product.id, 4, reason='Damaged')
        self.assertEqual(movement.quantity, -4)
        self.assertEqual(movement.movement_type, StockMovement.MOVEMENT_OUT)
        self.assertEqual(services.current_stock(self.product), 6)

    def test_remove_more_than_available(self):
        services.add_stock(self.product, 3)
        with self.assertRaises(BusinessRuleError) as ctx:
            services.remove_stock(self.product, 5)
        self.assertEqual(str(ctx.exception.detail), 'Insufficient stock. Available: 3, Requested: 5')
        self.assertEqual(services.current_stock(self.product), 3)

    def test_quantity_must_be_positive(self):
        with self.assertRaises(BusinessRuleError):
            services.add_stock(self.product, 0)

    def test_unknown_product(self):
        with self.assertRaises(ResourceNotFound):
            services.add_stock(99999, 1)


class StockAPITests(TestCase):
    def setUp(self):
        cache.clear()
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.product = TestDataFactory.create_product()

    def test_add_stock(self):
        response = self.client.post('/api/stock/add', {
            'product_id': self.product.id, 'quantity': 20, 'reason': 'Delivery', 'reference': 'PO-1'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['quantity'], 20)
        self.assertEqual(response.data['movement_type'], 'IN')

    def test_remove_stock_insufficient(self):
        TestDataFactory.create_stock_movement(self.product, 2)
        response = self.client.post('/api/stock/remove', {
            'product_id': self.product.id, 'quantity': 5
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {'error': 'Insufficient stock. Available: 2, Requested: 5'})

    def test_zero_quantity_rejected(self):
        response = self.client.post('/api/stock/add', {'product_id': self.product.id, 'quantity': 0}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_add_stock_unknown_product(self):
        response = self.client.post('/api/stock/add', {'product_id': 99999, 'quantity': 1}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_listings(self):
        services.add_stock(self.product, 10)
        services.remove_stock(self.product, 3)
        other = TestDataFactory.create_product()
        services.add_stock(other, 1)

        response = self.client.get('/api/stock')
        self.assertEqual(len(response.data), 3)

        response = self.client.get(f'/api/stock/product/{self.product.id}')
        self.assertEqual(len(response.data), 2)

        response = self.client.get(f'/api/stock/product/{self.product.id}/current')
        self.assertEqual(response.data['current_stock'], 7)

        response = self.client.get('/api/stock/additions')
        self.assertEqual(len(response.data), 2)

        response = self.client.get('/api/stock/removals')
        self.assertEqual(len(response.data), 1)

    def test_recent_is_capped(self):
        for _ in range(12):
            services.add_stock(self.product, 1)
        response = self.client.get('/api/stock/recent')
        self.assertEqual(len(response.data), 10)

    def test_stock_detail(self):
        movement = services.add_stock(self.product, 4)
        response = self.client.get(f'/api/stock/{movement.id}')
        self.assertEqual(response.data['product_sku'], self.product.sku)
