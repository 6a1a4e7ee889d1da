"""
Bearer token issuing and verification (HS256 JWT via Authlib JOSE).
"""

import time
from typing import Any, Dict

from authlib.jose import jwt
from authlib.jose.errors import ExpiredTokenError, JoseError

from finance_dashboard.config import Settings
from finance_dashboard.models.user import User


class TokenError(Exception):
    """Base class for bearer token failures."""


class TokenExpired(TokenError):
    pass


class TokenInvalid(TokenError):
    pass


def issue_token(user: User, settings: Settings) -> str:
    now = int(time.time())
    payload = {
        "sub": user.id,
        "email": user.email,
        "name": user.name,
        "picture": user.picture,
        "iat": now,
        "exp": now + settings.jwt_expires_days * 24 * 3600,
        "iss": settings.jwt_issuer,
        "aud": settings.jwt_audience,
    }
    token = jwt.encode({"alg": "HS256", "typ": "JWT"}, payload, settings.jwt_secret.encode("utf-8"))
    return token.decode("ascii")


def decode_token(token: str, settings: Settings) -> Dict[str, Any]:
    """Return the verified claims, or raise TokenExpired / TokenInvalid."""
    claims_options = {
        "sub": {"essential": True},
        "exp": {"essential": True},
        "iss": {"essential": True, "value": settings.jwt_issuer},
        "aud": {"essential": True, "value": settings.jwt_audience},
    }
    try:
        claims = jwt.decode(token, settings.jwt_secret.encode("utf-8"), claims_options=claims_options)
        claims.validate()
    except ExpiredTokenError as e:
        raise TokenExpired("Token expired") from e
    except (JoseError, ValueError) as e:
        raise TokenInvalid("Invalid token") from e
    return dict(claims)
