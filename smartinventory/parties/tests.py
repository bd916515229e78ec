"""
Test suite for Parties module
Tests: suppliers, clients, search and top clients
"""
from decimal import Decimal

from django.core.cache import cache
from django.test import TestCase
from rest_framework import status

from smartinventory.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from smartinventory.parties.models import Client, Supplier


class SupplierAPITests(TestCase):
    def setUp(self):
        cache.clear()
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_supplier(self):
        response = self.client.post('/api/suppliers', {
            'name': 'Northwind', 'contact_person': 'Ann', 'email': 'sales@northwind.test'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['product_count'], 0)

    def test_duplicate_supplier_name(self):
        TestDataFactory.create_supplier(name='Northwind')
        response = self.client.post('/api/suppliers', {'name': 'Northwind'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('name', response.data['error'])

    def test_update_and_delete_supplier(self):
        supplier = TestDataFactory.create_supplier()
        response = self.client.put(f'/api/suppliers/{supplier.id}', {'phone': '12345'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['phone'], '12345')

        response = self.client.delete(f'/api/suppliers/{supplier.id}')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Supplier.objects.filter(pk=supplier.id).exists())

    def test_missing_supplier(self):
        response = self.client.get('/api/suppliers/99999')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertIn('error', response.data)

    def test_list_counts_products(self):
        stocked = TestDataFactory.create_supplier(name='Stocked')
        TestDataFactory.create_supplier(name='Empty')
        TestDataFactory.create_product(supplier=stocked)
        TestDataFactory.create_product(supplier=stocked)
        response = self.client.get('/api/suppliers')
        counts = {s['name']: s['product_count'] for s in response.data}
        self.assertEqual(counts, {'Stocked': 2, 'Empty': 0})

    def test_search_suppliers(self):
        TestDataFactory.create_supplier(name='Global Parts')
        TestDataFactory.create_supplier(name='Local Goods')
        response = self.client.get('/api/suppliers/search?q=global')
        self.assertEqual([s['name'] for s in response.data], ['Global Parts'])

    def test_requires_authentication(self):
        self.client.logout()
        response = self.client.get('/api/suppliers')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class ClientAPITests(TestCase):
    def setUp(self):
        cache.clear()
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_client_without_email(self):
        for name in ('Walk-in A', 'Walk-in B'):
            response = self.client.post('/api/clients', {'name': name, 'email': ''}, format='json')
            self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Client.objects.filter(email__isnull=True).count(), 2)

    def test_duplicate_client_email(self):
        TestDataFactory.create_client(email='buyer@example.com')
        response = self.client.post('/api/clients', {'name': 'Other', 'email': 'buyer@example.com'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_search_by_name_or_company(self):
        TestDataFactory.create_client(name='Jane Doe', company='Initech')
        TestDataFactory.create_client(name='John Roe', company='Globex')
        response = self.client.get('/api/clients/search?q=initech')
        self.assertEqual([c['name'] for c in response.data], ['Jane Doe'])
        response = self.client.get('/api/clients/search?q=roe')
        self.assertEqual([c['name'] for c in response.data], ['John Roe'])

    def test_top_clients_and_totals(self):
        product = TestDataFactory.create_product()
        small = TestDataFactory.create_client(name='Small')
        big = TestDataFactory.create_client(name='Big')
        TestDataFactory.create_sale([(product, 1, Decimal('10.00'), Decimal('0'))], client=small)
        TestDataFactory.create_sale([(product, 5, Decimal('10.00'), Decimal('0'))], client=big)
        TestDataFactory.create_sale([(product, 2, Decimal('10.00'), Decimal('0'))], client=big)

        response = self.client.get('/api/clients/top')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([c['name'] for c in response.data], ['Big', 'Small'])
        self.assertEqual(response.data[0]['total_purchases'], Decimal('70.00'))
        self.assertEqual(response.data[0]['order_count'], 2)
