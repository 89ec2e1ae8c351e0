"""Bearer-token authentication and owner resolution.

Every catalog row is owned by the user id the token resolves to:

* Auth0 RS256 tokens -> ``Auth0User.sub`` (no local ``User`` row needed);
* SimpleJWT tokens / ``force_authenticate`` in tests -> the Django user pk.

``get_owner_id`` hides that difference from the views.

Security decisions
------------------
* **Fail Closed**: any decode / validation error returns 401.
* ``algorithms`` is pinned to ``AUTH0_ALGORITHM``, never taken from the
  token header.
* Audience **and** issuer are always validated.
* JWKS keys are cached by ``PyJWKClient`` (300 s), no network call on
  every request.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any

import jwt as pyjwt
import structlog
from django.conf import settings
from jwt import PyJWKClient
from jwt.exceptions import PyJWTError
from rest_framework.authentication import BaseAuthentication
from rest_framework.exceptions import AuthenticationFailed, NotAuthenticated

logger = structlog.get_logger(__name__)


class Auth0User:
    """Lightweight user object for requests authenticated via Auth0."""

    is_authenticated = True
    is_active = True

    def __init__(self, payload: dict):
        self.payload = payload
        self.sub: str = payload.get("sub", "")
        self.pk = self.sub

    def __str__(self) -> str:  # pragma: no cover
        return self.sub


def get_owner_id(user: Any) -> str:
    """Return the owning user id for row-level scoping.

    Raises ``NotAuthenticated`` for anonymous users so a view that
    forgot its permission class still fails closed.
    """
    if user is None or not getattr(user, "is_authenticated", False):
        raise NotAuthenticated()
    sub = getattr(user, "sub", None)
    if sub:
        return str(sub)
    return str(user.pk)


@lru_cache(maxsize=1)
def _jwks_client(jwks_url: str) -> PyJWKClient:
    return PyJWKClient(jwks_url, cache_jwk_set=True, lifespan=300)


class Auth0JSONWebTokenAuthentication(BaseAuthentication):
    """DRF authentication class that validates Auth0 JWT Bearer tokens.

    Returns ``None`` (lets SimpleJWT try) when Auth0 is not configured or
    when the token was not issued by the configured tenant.
    """

    keyword = "Bearer"

    def authenticate(self, request):
        header = request.META.get("HTTP_AUTHORIZATION", "")
        if not header:
            return None

        token = self._extract_token(header)
        issuer = self.issuer()
        if not issuer or not getattr(settings, "AUTH0_AUDIENCE", ""):
            return None
        if not self._token_has_issuer(token, issuer):
            return None

        payload = self._decode_token(token, issuer)
        user = Auth0User(payload)
        logger.info("jwt_authenticated", sub=user.sub)
        return (user, token)

    def authenticate_header(self, request):
        return f'{self.keyword} realm="api"'

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def issuer() -> str:
        domain = getattr(settings, "AUTH0_DOMAIN", "")
        return f"https://{domain}/" if domain else ""

    @staticmethod
    def _extract_token(header: str) -> str:
        parts = header.split()
        if len(parts) != 2 or parts[0].lower() != "bearer":
            raise AuthenticationFailed("Invalid Authorization header format.")
        return parts[1]

    @staticmethod
    def _token_has_issuer(token: str, issuer: str) -> bool:
        try:
            payload = pyjwt.decode(
                token,
                options={
                    "verify_signature": False,
                    "verify_aud": False,
                    "verify_iss": False,
                },
            )
        except PyJWTError:
            return False
        return payload.get("iss") == issuer

    @staticmethod
    def _decode_token(token: str, issuer: str) -> dict:
        client = _jwks_client(f"{issuer}.well-known/jwks.json")
        try:
            signing_key = client.get_signing_key_from_jwt(token)
            payload = pyjwt.decode(
                token,
                signing_key.key,
                algorithms=[getattr(settings, "AUTH0_ALGORITHM", "RS256")],
                audience=settings.AUTH0_AUDIENCE,
                issuer=issuer,
            )
        except PyJWTError as exc:
            logger.warning("jwt_validation_failed", error=str(exc))
            raise AuthenticationFailed(f"Token validation failed: {exc}") from exc
        return payload
