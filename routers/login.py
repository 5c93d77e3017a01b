from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse
from authlib.integrations.starlette_client import OAuthError
import httpx
import logging

import auth
from settings import settings

logger = logging.getLogger('uvicorn.error')

router = APIRouter(tags=["login"])

# Authlib's Starlette client talks to Google over httpx
LOGIN_ERRORS = (OAuthError, httpx.HTTPError, ValueError)


def _back_to_login() -> RedirectResponse:
    return RedirectResponse("/login", status_code=status.HTTP_302_FOUND)


@router.get("/auth/google")
async def login_with_google(
    request: Request,
    provider: auth.IdentityProvider = Depends(auth.get_identity_provider),
):
    redirect_uri = settings.oauth_callback_url or str(request.url_for("google_callback"))
    try:
        return await provider.authorize_redirect(request, redirect_uri)
    except LOGIN_ERRORS as e:
        logger.warning(f"Could not start Google login: {e}")
        return _back_to_login()


@router.get("/auth/google/callback", name="google_callback")
async def google_callback(
    request: Request,
    provider: auth.IdentityProvider = Depends(auth.get_identity_provider),
):
    try:
        profile = await provider.fetch_profile(request)
        user = auth.login_user(request, profile)
    except LOGIN_ERRORS as e:
        logger.warning(f"Google login failed: {e}")
        return _back_to_login()
    logger.info(f"User '{user.email or user.sub}' logged in")
    return RedirectResponse("/home", status_code=status.HTTP_302_FOUND)


@router.get("/logout")
async def logout(request: Request):
    auth.logout_user(request)
    return _back_to_login()
