from typing import Annotated, Any, Dict, Optional, Protocol

from authlib.integrations.starlette_client import OAuth
from fastapi import Depends, HTTPException, Request
from pydantic import BaseModel
import logging

from settings import Settings

logger = logging.getLogger('uvicorn.error')

GOOGLE_DISCOVERY_URL = "https://accounts.google.com/.well-known/openid-configuration"
SESSION_USER_KEY = "user"


class User(BaseModel):
    sub: str
    email: str | None = None
    name: str | None = None
    picture: str | None = None


class LoginRequired(Exception):
    """Raised by the session guard; main.py turns it into a redirect to /login."""


class IdentityProvider(Protocol):
    async def authorize_redirect(self, request: Request, redirect_uri: str) -> Any:
        ...

    async def fetch_profile(self, request: Request) -> Dict[str, Any]:
        ...


class GoogleIdentityProvider:
    """
    Google OpenID Connect through Authlib's Starlette client.

    authorize_redirect keeps the OAuth state in request.session, so the app must
    run behind SessionMiddleware. fetch_profile raises authlib's OAuthError when
    the callback cannot be exchanged for a token.
    """

    def __init__(self, client_id: str, client_secret: str):
        self.oauth = OAuth()
        self.oauth.register(
            name="google",
            server_metadata_url=GOOGLE_DISCOVERY_URL,
            client_id=client_id,
            client_secret=client_secret,
            client_kwargs={"scope": "openid email profile"},
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "GoogleIdentityProvider":
        if not settings.google_client_id or not settings.google_client_secret:
            logger.warning("GOOGLE_CLIENT_ID/GOOGLE_CLIENT_SECRET not set; Google login will fail.")
        return cls(settings.google_client_id, settings.google_client_secret)

    @property
    def client(self):
        return self.oauth.google

    async def authorize_redirect(self, request: Request, redirect_uri: str):
        return await self.client.authorize_redirect(request, redirect_uri)

    async def fetch_profile(self, request: Request) -> Dict[str, Any]:
        token = await self.client.authorize_access_token(request)
        userinfo = token.get("userinfo")
        if userinfo is None:
            userinfo = await self.client.userinfo(token=token)
        return dict(userinfo)


async def get_identity_provider(request: Request) -> IdentityProvider:
    if not hasattr(request.app.state, 'identity_provider') or not request.app.state.identity_provider:
        logger.error("Identity provider not initialized or unavailable.")
        raise HTTPException(status_code=503, detail="Login service unavailable")
    return request.app.state.identity_provider


def login_user(request: Request, profile: Dict[str, Any]) -> User:
    user = User(**profile)
    request.session[SESSION_USER_KEY] = user.model_dump()
    return user


def logout_user(request: Request) -> None:
    request.session.clear()


def get_session_user(request: Request) -> Optional[User]:
    data = request.session.get(SESSION_USER_KEY)
    if not data:
        return None
    return User(**data)


async def get_current_user(request: Request) -> User:
    user = get_session_user(request)
    if user is None:
        logger.info(f"Unauthenticated request to {request.url.path}, redirecting to login.")
        raise LoginRequired()
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]
