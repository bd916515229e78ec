"""
Test utilities and factories for creating test data
"""
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from smartinventory.core import tokens
from smartinventory.catalog.models import Category, Product
from smartinventory.parties.models import Client, Supplier
from smartinventory.inventory.models import StockMovement
from smartinventory.sales.models import Sale, SaleItem
from decimal import Decimal
from django.utils import timezone
import random
import string

User = get_user_model()


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def create_user(username=None, email=None, password='testpass123', role='USER'):
        """Create a test user"""
        if not username:
            username = f'testuser_{TestDataFactory.random_string(6)}'
        if not email:
            email = f'{username}@test.com'
        return User.objects.create_user(
            username=username,
            email=email,
            password=password,
            role=role,
        )

    @staticmethod
    def create_admin(username=None, password='testpass123'):
        return TestDataFactory.create_user(username=username, password=password, role='ADMIN')

    @staticmethod
    def create_category(name=None, description=None):
        """Create a test category"""
        if not name:
            name = f'Category_{TestDataFactory.random_string(6)}'
        return Category.objects.create(
            name=name,
            description=description or f'Test category {name}'
        )

    @staticmethod
    def create_supplier(name=None, email=None):
        """Create a test supplier"""
        if not name:
            name = f'Supplier_{TestDataFactory.random_string(6)}'
        return Supplier.objects.create(
            name=name,
            contact_person='Test Contact',
            phone=f'9{random.randint(100000000, 999999999)}',
            email=email or f'{name.lower()}@test.com',
        )

    @staticmethod
    def create_client(name=None, email=None, company=None):
        """Create a test client"""
        if not name:
            name = f'Client_{TestDataFactory.random_string(6)}'
        return Client.objects.create(
            name=name,
            email=email or f'{name.lower()}@test.com',
            phone=f'9{random.randint(100000000, 999999999)}',
            company=company,
        )

    @staticmethod
    def create_product(name=None, sku=None, category=None, supplier=None, brand='Acme',
                       cost_price=Decimal('10.00'), selling_price=Decimal('15.00'), stock=0):
        """Create a test product, optionally with an opening stock movement"""
        if not name:
            name = f'Product_{TestDataFactory.random_string(6)}'
        if not sku:
            sku = f'SKU_{TestDataFactory.random_string(8)}'
        product = Product.objects.create(
            name=name,
            sku=sku,
            brand=brand,
            category=category,
            supplier=supplier,
            cost_price=cost_price,
            selling_price=selling_price,
        )
        if stock:
            TestDataFactory.create_stock_movement(product, stock)
        return product

    @staticmethod
    def create_stock_movement(product, quantity, reason='Opening stock'):
        return StockMovement.objects.create(
            product=product,
            quantity=quantity,
            movement_type=StockMovement.MOVEMENT_IN if quantity > 0 else StockMovement.MOVEMENT_OUT,
            reason=reason,
        )

    @staticmethod
    def create_sale(items, client=None, status='PAID', sale_date=None, reference=None):
        """
        Create a sale directly, without touching stock.
        items: list of (product, quantity, unit_price, discount) tuples
        """
        sale = Sale.objects.create(
            client=client,
            sale_reference=reference or f'TEST-{TestDataFactory.random_string(8)}',
            status=status,
            sale_date=sale_date or timezone.now(),
        )
        for product, quantity, unit_price, discount in items:
            SaleItem.objects.create(
                sale=sale,
                product=product,
                quantity=quantity,
                unit_price=unit_price,
                discount=discount,
            )
        sale.calculate_total_amount()
        sale.save()
        return sale


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helper"""

    def authenticate_user(self, user):
        """Authenticate the client with a freshly issued, recorded token"""
        self.token = tokens.generate_token(user)
        tokens.store_token(user, self.token)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {self.token}')
        return self

    def logout(self):
        """Remove authentication"""
        self.credentials()
