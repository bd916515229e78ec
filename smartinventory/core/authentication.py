import logging

from rest_framework_simplejwt.authentication import JWTAuthentication

from . import tokens

logger = logging.getLogger(__name__)


class JWTBearerAuthentication(JWTAuthentication):
    """
    Bearer token authentication that never fails the request.

    Requests without an ``Authorization: Bearer ...`` header pass through
    unauthenticated. A token that does not verify, names an unknown user,
    has expired or was revoked is logged and the request continues
    unauthenticated too; the permission layer decides whether that is
    acceptable for the path.
    """
    www_authenticate_realm = 'api'

    def authenticate(self, request):
        header = self.get_header(request)
        if header is None:
            return None

        try:
            raw_token = self.get_raw_token(header)
            if raw_token is None:
                return None

            validated_token = self.get_validated_token(raw_token)
            user = self.get_user(validated_token)

            if not tokens.is_token_valid(validated_token, user):
                logger.warning(f"Token rejected for user: {user.username}")
                return None
            if tokens.is_token_revoked(validated_token):
                logger.warning(f"Revoked token presented by user: {user.username}")
                return None
        except Exception as e:
            logger.error(f"Cannot set user authentication: {e}")
            return None

        return user, validated_token
