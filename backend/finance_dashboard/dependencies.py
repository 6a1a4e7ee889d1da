"""
FastAPI dependencies.
"""

import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from finance_dashboard.ai.client import AIClient
from finance_dashboard.auth.google import GoogleOAuthClient
from finance_dashboard.auth.tokens import TokenExpired, TokenInvalid, decode_token
from finance_dashboard.config import settings
from finance_dashboard.database import get_db
from finance_dashboard.models.user import User

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_ai_client(request: Request) -> Optional[AIClient]:
    return getattr(request.app.state, "ai_client", None)


def get_google_client(request: Request) -> GoogleOAuthClient:
    client = getattr(request.app.state, "google_client", None)
    if client is None or not client.is_configured:
        raise HTTPException(status_code=500, detail="Missing Google OAuth credentials")
    return client


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> User:
    """
    Resolve the bearer token to an active user.

    Missing token is 401; a token that fails verification is 403, with the
    message telling expired apart from invalid.
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="No token provided")

    try:
        claims = decode_token(credentials.credentials, settings)
    except TokenExpired:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Token expired")
    except TokenInvalid:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid token")

    user = db.query(User).filter(User.id == claims["sub"]).first()
    if not user or not user.is_active:
        logger.info(f"Token for unknown or inactive user {claims['sub']}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")
    return user
