"""
Auth and profile schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from finance_dashboard.schemas.base import CamelModel


class NotificationPreferences(CamelModel):
    email: bool = True
    push: bool = False


class Preferences(CamelModel):
    currency: str = Field("USD", min_length=3, max_length=3)
    timezone: str = "UTC"
    notifications: NotificationPreferences = NotificationPreferences()


class PreferencesUpdate(CamelModel):
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    timezone: Optional[str] = None
    notifications: Optional[NotificationPreferences] = None


class UserSummary(CamelModel):
    id: str
    email: str
    name: str
    picture: Optional[str] = None


class UserProfile(UserSummary):
    preferences: Preferences
    last_login: datetime
    created_at: datetime


class ProfileResponse(CamelModel):
    message: Optional[str] = None
    user: UserProfile


class ProfileUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    preferences: Optional[PreferencesUpdate] = None


class AuthUrlResponse(CamelModel):
    auth_url: str


class TokenResponse(CamelModel):
    success: bool = True
    token: str
    user: UserSummary


class VerifyTokenResponse(CamelModel):
    valid: bool = True
    user: UserSummary


class MessageResponse(CamelModel):
    message: str
