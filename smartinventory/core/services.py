"""
Account operations behind the auth and user endpoints.

Views validate the payload shape; the functions here enforce the rules that
need the database (uniqueness, credentials) and raise ServiceError
subclasses the exception handler turns into responses.
"""
import logging

from django.db import transaction
from django.db.models import Q

from .exceptions import BusinessRuleError, InvalidCredentials, ResourceNotFound
from .models import User
from . import tokens

logger = logging.getLogger(__name__)


def _check_unique(username=None, email=None, exclude_pk=None):
    users = User.objects.all()
    if exclude_pk is not None:
        users = users.exclude(pk=exclude_pk)
    if username is not None and users.filter(username=username).exists():
        raise BusinessRuleError('Username already exists')
    if email is not None and users.filter(email__iexact=email).exists():
        raise BusinessRuleError('Email already exists')


@transaction.atomic
def create_user(username, email, password, role=None, **extra):
    _check_unique(username=username, email=email)
    user = User(username=username, email=email, role=role or User.ROLE_USER, **extra)
    user.set_password(password)
    user.save()
    logger.info(f"User created: {username} ({user.role})")
    return user


def register(username, email, password, role=None, request=None):
    """Create the account and log it straight in; returns (user, token)"""
    user = create_user(username, email, password, role=role)
    token = tokens.generate_token(user)
    tokens.store_token(user, token, request)
    return user, token


def authenticate_credentials(identifier, password):
    """Find the user by username or email and check the password"""
    user = User.objects.filter(Q(username=identifier) | Q(email__iexact=identifier)).first()
    if user is None or not user.is_active or not user.check_password(password):
        logger.warning(f"Failed login attempt for: {identifier}")
        raise InvalidCredentials()
    return user


def login(identifier, password, request=None):
    user = authenticate_credentials(identifier, password)
    token = tokens.generate_token(user)
    tokens.store_token(user, token, request)
    logger.info(f"User logged in: {user.username}")
    return user, token


def change_password(user, old_password, new_password):
    if not user.check_password(old_password):
        raise BusinessRuleError('Current password is incorrect')
    user.set_password(new_password)
    user.save(update_fields=['password', 'updated_at'])
    logger.info(f"Password changed for user: {user.username}")


def get_user(pk):
    try:
        return User.objects.get(pk=pk)
    except User.DoesNotExist:
        raise ResourceNotFound(f'User not found with id: {pk}')


@transaction.atomic
def update_user(user, data):
    """Apply only the provided fields; the password is re-hashed when given"""
    _check_unique(
        username=data.get('username') if data.get('username') != user.username else None,
        email=data.get('email') if data.get('email') != user.email else None,
        exclude_pk=user.pk,
    )
    password = data.pop('password', None)
    for field, value in data.items():
        setattr(user, field, value)
    if password:
        user.set_password(password)
    user.save()
    logger.info(f"User updated: {user.username}")
    return user
