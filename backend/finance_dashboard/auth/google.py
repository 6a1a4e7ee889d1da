"""
Google OAuth2 / OpenID Connect client.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from authlib.integrations.httpx_client import AsyncOAuth2Client

from finance_dashboard.config import Settings

logger = logging.getLogger(__name__)

AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
TOKEN_URL = "https://oauth2.googleapis.com/token"
USERINFO_URL = "https://openidconnect.googleapis.com/v1/userinfo"
SCOPE = "openid email profile"


@dataclass
class GoogleIdentity:
    sub: str
    email: str
    email_verified: bool
    name: Optional[str] = None
    picture: Optional[str] = None


class GoogleOAuthClient:

    def __init__(self, client_id: Optional[str], client_secret: Optional[str], redirect_uri: str):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri

    @property
    def is_configured(self) -> bool:
        return bool(self.client_id and self.client_secret)

    def _session(self) -> AsyncOAuth2Client:
        if not self.is_configured:
            raise RuntimeError("Missing Google OAuth credentials")
        return AsyncOAuth2Client(
            client_id=self.client_id,
            client_secret=self.client_secret,
            scope=SCOPE,
            redirect_uri=self.redirect_uri,
        )

    async def authorization_url(self, state: str) -> str:
        async with self._session() as session:
            url, _ = session.create_authorization_url(
                AUTHORIZE_URL,
                state=state,
                access_type="offline",
                prompt="consent",
                include_granted_scopes="true",
            )
        return url

    async def fetch_identity(self, code: str) -> GoogleIdentity:
        """Exchange an authorization code and read the signed-in user's profile."""
        async with self._session() as session:
            await session.fetch_token(TOKEN_URL, code=code)
            response = await session.get(USERINFO_URL)
            response.raise_for_status()
            info = response.json()

        return GoogleIdentity(
            sub=info["sub"],
            email=info["email"].lower(),
            email_verified=bool(info.get("email_verified", False)),
            name=info.get("name"),
            picture=info.get("picture"),
        )


def build_google_client(settings: Settings) -> GoogleOAuthClient:
    client = GoogleOAuthClient(
        client_id=settings.google_client_id,
        client_secret=settings.google_client_secret,
        redirect_uri=f"{settings.backend_url}/api/auth/google/callback",
    )
    if not client.is_configured:
        logger.warning("Google OAuth credentials not configured, sign-in is disabled")
    return client
