"""
Test suite for the core module
Tests: registration, login, token revocation, path access rules, user management
"""
from datetime import timedelta
from io import StringIO

from django.core.cache import cache
from django.core.management import call_command
from django.test import TestCase, RequestFactory, override_settings
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient

from smartinventory.core import tokens
from smartinventory.core.models import IssuedToken, User
from smartinventory.core.security import is_public_path, requires_authentication
from smartinventory.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from smartinventory.core.utils import get_client_ip


class RegisterTests(TestCase):
    """Test the registration endpoint"""

    def setUp(self):
        cache.clear()
        self.client = APIClient()

    def test_register_creates_user_and_returns_token(self):
        response = self.client.post('/api/auth/register', {
            'username': 'alice',
            'email': 'alice@example.com',
            'password': 'secret123',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['message'], 'User registered successfully')
        self.assertEqual(response.data['user']['role'], 'USER')
        self.assertEqual(response.data['user']['authorities'], ['ROLE_USER'])
        self.assertTrue(response.data['token'])
        self.assertNotIn('password', response.data['user'])

        user = User.objects.get(username='alice')
        self.assertTrue(user.password.startswith('bcrypt'))
        self.assertTrue(user.check_password('secret123'))
        self.assertEqual(IssuedToken.objects.filter(user=user).count(), 1)

    def test_register_duplicate_username(self):
        TestDataFactory.create_user(username='bob')
        response = self.client.post('/api/auth/register', {
            'username': 'bob',
            'email': 'other@example.com',
            'password': 'secret123',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {'error': 'Username already exists'})

    def test_register_duplicate_email(self):
        TestDataFactory.create_user(username='carol', email='carol@example.com')
        response = self.client.post('/api/auth/register', {
            'username': 'carol2',
            'email': 'carol@example.com',
            'password': 'secret123',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {'error': 'Email already exists'})

    def test_register_validation(self):
        response = self.client.post('/api/auth/register', {
            'username': 'ab',
            'email': 'not-an-email',
            'password': '123',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        errors = response.data['error']
        self.assertIn('username', errors)
        self.assertIn('email', errors)
        self.assertIn('password', errors)

    def test_register_rejects_username_with_spaces(self):
        response = self.client.post('/api/auth/register', {
            'username': 'john doe',
            'email': 'john@example.com',
            'password': 'secret123',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('username', response.data['error'])
        self.assertFalse(User.objects.filter(email='john@example.com').exists())


class LoginTests(TestCase):
    """Test login by username or email"""

    def setUp(self):
        cache.clear()
        self.client = APIClient()
        self.user = TestDataFactory.create_user(username='dave', email='dave@example.com', password='secret123')

    def test_login_with_username(self):
        response = self.client.post('/api/auth/login', {'username': 'dave', 'password': 'secret123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], 'Login successful')
        self.assertEqual(response.data['user']['username'], 'dave')
        self.assertEqual(tokens.extract_username(response.data['token']), 'dave')

    def test_login_with_email(self):
        response = self.client.post('/api/auth/login', {'username': 'dave@example.com', 'password': 'secret123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_login_wrong_password(self):
        response = self.client.post('/api/auth/login', {'username': 'dave', 'password': 'wrong'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data, {'error': 'Invalid credentials'})

    def test_login_unknown_user(self):
        response = self.client.post('/api/auth/login', {'username': 'nobody', 'password': 'secret123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_login_records_token(self):
        self.client.post('/api/auth/login', {'username': 'dave', 'password': 'secret123'}, format='json',
                         HTTP_USER_AGENT='tests', REMOTE_ADDR='10.0.0.5')
        issued = IssuedToken.objects.get(user=self.user)
        self.assertEqual(issued.user_agent, 'tests')
        self.assertEqual(issued.ip_address, '10.0.0.5')
        self.assertTrue(issued.is_valid)


class JWTAuthenticationTests(TestCase):
    """Test the bearer token gate"""

    def setUp(self):
        cache.clear()
        self.user = TestDataFactory.create_user()
        self.client = APIClient()

    def test_no_header_is_rejected_on_protected_path(self):
        response = self.client.get('/api/auth/me')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertIn('error', response.data)

    def test_valid_token(self):
        client = AuthenticatedAPIClient().authenticate_user(self.user)
        response = client.get('/api/auth/me')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['username'], self.user.username)
        self.assertEqual(response.data['authorities'], ['ROLE_USER'])
        self.assertEqual(response.data['active_sessions'], 1)

    def test_garbage_token_is_not_a_server_error(self):
        self.client.credentials(HTTP_AUTHORIZATION='Bearer not.a.token')
        response = self.client.get('/api/auth/me')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_other_scheme_is_ignored(self):
        self.client.credentials(HTTP_AUTHORIZATION='Basic dXNlcjpwYXNz')
        response = self.client.get('/api/auth/me')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_expired_token(self):
        token = tokens.generate_token(self.user)
        token.set_exp(from_time=timezone.now() - timedelta(days=2))
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
        response = self.client.get('/api/auth/me')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_token_of_deleted_user(self):
        token = tokens.generate_token(self.user)
        self.user.delete()
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
        response = self.client.get('/api/auth/me')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_invalid_token_on_public_path_still_passes(self):
        self.client.credentials(HTTP_AUTHORIZATION='Bearer not.a.token')
        response = self.client.post('/api/auth/login', {
            'username': self.user.username, 'password': 'testpass123'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_revoked_token_on_public_paths_still_passes(self):
        token = tokens.generate_token(self.user)
        tokens.store_token(self.user, token)
        tokens.revoke_token(token)
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')

        response = self.client.post('/api/auth/login', {
            'username': self.user.username, 'password': 'testpass123'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        response = self.client.post('/api/auth/register', {
            'username': 'freshuser', 'email': 'fresh@example.com', 'password': 'secret123'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        response = self.client.get('/api/auth/me')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_token_claims(self):
        token = tokens.generate_token(self.user)
        self.assertEqual(token['sub'], self.user.username)
        self.assertEqual(token['user_id'], self.user.id)
        self.assertEqual(token['email'], self.user.email)
        self.assertEqual(token['role'], 'USER')
        self.assertTrue(tokens.is_token_valid(token, self.user))
        other = TestDataFactory.create_user()
        self.assertFalse(tokens.is_token_valid(token, other))


class LogoutTests(TestCase):
    """Test token revocation"""

    def setUp(self):
        cache.clear()
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_logout_revokes_token(self):
        response = self.client.post('/api/auth/logout')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], 'Logout successful')
        self.assertTrue(tokens.is_token_revoked(self.client.token))

        response = self.client.get('/api/auth/me')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_logout_with_unrecorded_token(self):
        token = tokens.generate_token(self.user)
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
        response = client.post('/api/auth/logout')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {'error': 'Token not found or already revoked'})

    def test_logout_all(self):
        second = AuthenticatedAPIClient().authenticate_user(self.user)
        response = self.client.post('/api/auth/logout-all')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['revoked_tokens'], 2)
        self.assertEqual(second.get('/api/auth/me').status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(tokens.active_session_count(self.user), 0)


class ChangePasswordTests(TestCase):
    def setUp(self):
        cache.clear()
        self.user = TestDataFactory.create_user(password='oldpass123')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_change_password(self):
        response = self.client.post('/api/auth/change-password', {
            'old_password': 'oldpass123', 'new_password': 'newpass123'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password('newpass123'))

    def test_change_password_wrong_current(self):
        response = self.client.post('/api/auth/change-password', {
            'old_password': 'wrong', 'new_password': 'newpass123'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {'error': 'Current password is incorrect'})


class UserManagementTests(TestCase):
    """User endpoints are reserved for admins"""

    def setUp(self):
        cache.clear()
        self.admin = TestDataFactory.create_admin()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def test_regular_user_is_forbidden(self):
        user = TestDataFactory.create_user()
        client = AuthenticatedAPIClient().authenticate_user(user)
        response = client.get('/api/users')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_anonymous_is_unauthorized(self):
        response = APIClient().get('/api/users')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_list_and_count(self):
        TestDataFactory.create_user()
        response = self.client.get('/api/users')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 2)
        response = self.client.get('/api/users/count')
        self.assertEqual(response.data, {'count': 2})

    def test_users_by_role(self):
        TestDataFactory.create_user()
        response = self.client.get('/api/users/role/ADMIN')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([u['id'] for u in response.data], [self.admin.id])

    def test_create_user(self):
        response = self.client.post('/api/users', {
            'username': 'eve', 'email': 'eve@example.com', 'password': 'secret123', 'role': 'ADMIN'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['authorities'], ['ROLE_ADMIN'])

    def test_partial_update(self):
        user = TestDataFactory.create_user(username='frank')
        response = self.client.put(f'/api/users/{user.id}', {'phone': '555-0100'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        user.refresh_from_db()
        self.assertEqual(user.phone, '555-0100')
        self.assertEqual(user.username, 'frank')

    def test_update_rehashes_password(self):
        user = TestDataFactory.create_user()
        self.client.patch(f'/api/users/{user.id}', {'password': 'brandnew1'}, format='json')
        user.refresh_from_db()
        self.assertTrue(user.check_password('brandnew1'))

    def test_update_duplicate_email(self):
        TestDataFactory.create_user(email='taken@example.com')
        user = TestDataFactory.create_user()
        response = self.client.patch(f'/api/users/{user.id}', {'email': 'taken@example.com'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {'error': 'Email already exists'})

    def test_missing_user(self):
        response = self.client.get('/api/users/99999')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data, {'error': 'User not found with id: 99999'})

    def test_delete_user(self):
        user = TestDataFactory.create_user()
        response = self.client.delete(f'/api/users/{user.id}')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(User.objects.filter(pk=user.id).exists())


class PathAccessTests(TestCase):
    def test_public_paths(self):
        self.assertTrue(is_public_path('/api/auth/login'))
        self.assertTrue(is_public_path('/api/auth/register'))
        self.assertTrue(is_public_path('/'))
        self.assertTrue(is_public_path('/FrontEnd/css/app.css'))
        self.assertFalse(is_public_path('/api/products'))

    def test_protected_paths(self):
        self.assertTrue(requires_authentication('/api/products'))
        self.assertTrue(requires_authentication('/api/auth/me'))
        self.assertFalse(requires_authentication('/api/auth/login'))
        self.assertFalse(requires_authentication('/health'))

    @override_settings(SECURITY_PUBLIC_PREFIXES=['/FrontEnd/', '/api/public/'])
    def test_prefixes_come_from_settings(self):
        self.assertFalse(requires_authentication('/api/public/ping'))


class CorsAndLoggingTests(TestCase):
    def setUp(self):
        cache.clear()
        self.client = APIClient()

    def test_preflight_from_allowed_origin(self):
        response = self.client.options(
            '/api/products',
            HTTP_ORIGIN='http://localhost:5500',
            HTTP_ACCESS_CONTROL_REQUEST_METHOD='GET',
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response['Access-Control-Allow-Origin'], 'http://localhost:5500')
        self.assertEqual(response['Access-Control-Allow-Credentials'], 'true')

    def test_preflight_from_unknown_origin(self):
        response = self.client.options(
            '/api/products',
            HTTP_ORIGIN='http://evil.example.com',
            HTTP_ACCESS_CONTROL_REQUEST_METHOD='GET',
        )
        self.assertNotIn('Access-Control-Allow-Origin', response)

    def test_response_time_header(self):
        response = self.client.post('/api/auth/login', {'username': 'x', 'password': 'y'}, format='json')
        self.assertIn('X-Response-Time', response)


class TokenMaintenanceTests(TestCase):
    def setUp(self):
        self.user = TestDataFactory.create_user()

    def test_purge_expired_tokens_command(self):
        token = tokens.generate_token(self.user)
        issued = tokens.store_token(self.user, token)
        issued.expires_at = timezone.now() - timedelta(hours=1)
        issued.save()
        tokens.store_token(self.user, tokens.generate_token(self.user))

        out = StringIO()
        call_command('purge_expired_tokens', stdout=out)
        self.assertIn('Purged 1 expired tokens', out.getvalue())
        self.assertEqual(IssuedToken.objects.count(), 1)

    def test_revoke_is_idempotent(self):
        token = tokens.generate_token(self.user)
        tokens.store_token(self.user, token)
        self.assertTrue(tokens.revoke_token(token))
        self.assertFalse(tokens.revoke_token(token))


class UtilsTests(TestCase):
    def test_get_client_ip_prefers_forwarded_for(self):
        request = RequestFactory().get('/', HTTP_X_FORWARDED_FOR='203.0.113.7, 10.0.0.1')
        self.assertEqual(get_client_ip(request), '203.0.113.7')

    def test_get_client_ip_without_request(self):
        self.assertIsNone(get_client_ip(None))
