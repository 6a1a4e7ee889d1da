"""
Authentication and profile endpoints.
"""

import json
import logging
import time
from datetime import datetime
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import RedirectResponse
from sqlalchemy import or_
from sqlalchemy.orm import Session

from finance_dashboard.auth.google import GoogleIdentity, GoogleOAuthClient
from finance_dashboard.auth.tokens import issue_token
from finance_dashboard.config import settings
from finance_dashboard.dependencies import get_current_user, get_db, get_google_client
from finance_dashboard.models.user import User, default_preferences
from finance_dashboard.schemas.auth import (
    AuthUrlResponse,
    MessageResponse,
    Preferences,
    ProfileResponse,
    ProfileUpdate,
    TokenResponse,
    UserProfile,
    UserSummary,
    VerifyTokenResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

DEFAULT_RETURN_TO = "/dashboard"


def user_summary(user: User) -> UserSummary:
    return UserSummary(id=user.id, email=user.email, name=user.name, picture=user.picture)


def user_profile(user: User) -> UserProfile:
    return UserProfile(
        id=user.id,
        email=user.email,
        name=user.name,
        picture=user.picture,
        preferences=Preferences.model_validate(user.preferences or default_preferences()),
        last_login=user.last_login,
        created_at=user.created_at,
    )


def upsert_user(db: Session, identity: GoogleIdentity) -> User:
    """Find the user by Google id or email, creating them on first sign-in."""
    user = db.query(User).filter(
        or_(User.google_id == identity.sub, User.email == identity.email)
    ).first()

    if user:
        user.google_id = identity.sub
        user.name = identity.name or user.name
        user.picture = identity.picture or user.picture
        user.last_login = datetime.utcnow()
    else:
        user = User(
            google_id=identity.sub,
            email=identity.email,
            name=identity.name or identity.email.split("@")[0],
            picture=identity.picture,
            last_login=datetime.utcnow(),
            preferences=default_preferences(),
        )
        db.add(user)
        logger.info(f"Created user for {identity.email}")

    db.commit()
    db.refresh(user)
    return user


def _return_to(state: Optional[str]) -> str:
    if not state:
        return DEFAULT_RETURN_TO
    try:
        return json.loads(state).get("returnTo") or DEFAULT_RETURN_TO
    except (ValueError, AttributeError) as e:
        logger.warning(f"Invalid state parameter: {e}")
        return DEFAULT_RETURN_TO


@router.get("/google", response_model=AuthUrlResponse)
async def google_login(
    return_to: str = Query(DEFAULT_RETURN_TO, alias="returnTo"),
    google: GoogleOAuthClient = Depends(get_google_client)
):
    """Start the Google OAuth flow"""
    state = json.dumps({"returnTo": return_to, "timestamp": int(time.time() * 1000)})
    return AuthUrlResponse(auth_url=await google.authorization_url(state))


@router.get("/google/callback")
async def google_callback(
    code: Optional[str] = None,
    state: Optional[str] = None,
    db: Session = Depends(get_db),
    google: GoogleOAuthClient = Depends(get_google_client)
):
    """Finish the OAuth flow and hand a bearer token to the frontend"""
    if not code:
        raise HTTPException(status_code=400, detail="Authorization code is required")

    callback_url = f"{settings.frontend_url}/auth/callback"

    try:
        identity = await google.fetch_identity(code)
    except Exception as e:
        logger.error(f"Google OAuth callback error: {e}")
        message = "Failed to authenticate with Google"
        if "invalid_grant" in str(e):
            message = "Authorization code has expired or is invalid"
        return RedirectResponse(f"{callback_url}?{urlencode({'error': message})}")

    if not identity.email_verified:
        raise HTTPException(status_code=400, detail="Please verify your email with Google first")

    user = upsert_user(db, identity)
    token = issue_token(user, settings)

    query = urlencode({
        "token": token,
        "user": user_summary(user).model_dump_json(),
        "returnTo": _return_to(state),
    })
    return RedirectResponse(f"{callback_url}?{query}")


@router.get("/profile", response_model=ProfileResponse)
def get_profile(user: User = Depends(get_current_user)):
    return ProfileResponse(user=user_profile(user))


@router.put("/profile", response_model=ProfileResponse)
def update_profile(
    update: ProfileUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Update display name and merge preference changes"""
    if update.name and update.name.strip():
        user.name = update.name.strip()

    if update.preferences is not None:
        preferences = dict(user.preferences or default_preferences())
        changes = update.preferences.model_dump(exclude_unset=True, exclude_none=True)
        # notification flags merge one by one
        notifications = changes.pop("notifications", {})
        preferences["notifications"] = {**preferences.get("notifications", {}), **notifications}
        preferences.update(changes)
        # reassign so the JSON column is flagged dirty
        user.preferences = Preferences.model_validate(preferences).model_dump()

    db.commit()
    db.refresh(user)

    return ProfileResponse(message="Profile updated successfully", user=user_profile(user))


@router.post("/logout", response_model=MessageResponse)
def logout(user: User = Depends(get_current_user)):
    """Tokens are stateless; the client discards its copy."""
    return MessageResponse(message="Logged out successfully")


@router.post("/verify-token", response_model=VerifyTokenResponse)
def verify_token(user: User = Depends(get_current_user)):
    return VerifyTokenResponse(user=user_summary(user))


@router.post("/refresh", response_model=TokenResponse)
def refresh_token(user: User = Depends(get_current_user)):
    return TokenResponse(token=issue_token(user, settings), user=user_summary(user))
