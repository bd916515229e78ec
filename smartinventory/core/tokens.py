"""
Issuing, validating and revoking bearer tokens.

Tokens are simplejwt access tokens signed with JWT_SECRET. The subject
claim carries the username; user_id, email and role ride along as extra
claims. Every token handed out at login is recorded in IssuedToken so a
logout can revoke it before it expires.
"""
import logging
from datetime import datetime, timezone as dt_timezone

from django.utils import timezone
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import AccessToken

from .models import IssuedToken
from .utils import get_client_ip, get_user_agent

logger = logging.getLogger(__name__)


def generate_token(user):
    """Build a signed access token for the user"""
    token = AccessToken.for_user(user)
    token['user_id'] = user.id
    token['email'] = user.email
    token['role'] = user.role
    return token


def extract_username(raw_token):
    """Subject of a raw token string; raises TokenError when it does not verify"""
    return AccessToken(raw_token)[api_settings.USER_ID_CLAIM]


def token_expiry(token):
    return datetime.fromtimestamp(token['exp'], tz=dt_timezone.utc)


def is_token_valid(token, user):
    """True when the token belongs to the user and has not expired"""
    if token.get(api_settings.USER_ID_CLAIM) != getattr(user, api_settings.USER_ID_FIELD):
        return False
    return token_expiry(token) > timezone.now()


def store_token(user, token, request=None):
    issued = IssuedToken.objects.create(
        user=user,
        token=str(token),
        jti=token[api_settings.JTI_CLAIM],
        expires_at=token_expiry(token),
        user_agent=get_user_agent(request),
        ip_address=get_client_ip(request),
    )
    logger.info(f"Token stored for user: {user.username}")
    return issued


def is_token_revoked(token):
    """A token counts as revoked when its record is flagged revoked"""
    return IssuedToken.objects.filter(
        jti=token.get(api_settings.JTI_CLAIM), revoked=True
    ).exists()


def revoke_token(token):
    """
    Revoke a single token.

    Returns False when the token was never issued by us or is already revoked.
    """
    issued = IssuedToken.objects.filter(jti=token.get(api_settings.JTI_CLAIM)).first()
    if issued is None or issued.revoked:
        return False
    issued.revoke()
    logger.info(f"Token revoked for user: {issued.user.username}")
    return True


def revoke_all_user_tokens(user):
    count = IssuedToken.objects.filter(user=user, revoked=False).update(revoked=True)
    logger.info(f"Revoked {count} tokens for user: {user.username}")
    return count


def active_session_count(user):
    return IssuedToken.objects.filter(
        user=user, revoked=False, expires_at__gt=timezone.now()
    ).count()


def purge_expired_tokens():
    """Delete token records past their expiry; returns how many went"""
    deleted, _ = IssuedToken.objects.filter(expires_at__lt=timezone.now()).delete()
    if deleted:
        logger.info(f"Purged {deleted} expired tokens")
    return deleted
