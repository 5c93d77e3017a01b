# In main.py

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware
from motor.motor_asyncio import AsyncIOMotorClient

import logging
import secrets
from contextlib import asynccontextmanager

import auth
from settings import settings
from services.record_store import RecordStore, StoreError, POSTS_COLLECTION, COMMENTS_COLLECTION

# Import routers
from routers import posts, comments, login, pages

logger = logging.getLogger('uvicorn.error')


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application startup: Initializing resources...")
    app.state.mongo_client = AsyncIOMotorClient(settings.mongo_db_connection_string)
    db = app.state.mongo_client[settings.mongo_db_name]
    app.state.post_store = RecordStore(db[POSTS_COLLECTION], unique_fields=("postContent",))
    app.state.comment_store = RecordStore(db[COMMENTS_COLLECTION])
    try:
        await app.state.post_store.ensure_indexes()
        logger.info(f"Connected to MongoDB database '{settings.mongo_db_name}'.")
    except StoreError as e:
        logger.error(f"Failed to prepare MongoDB indexes: {e}")
        # Without the unique index duplicate posts would be accepted
        app.state.post_store = None

    app.state.identity_provider = auth.GoogleIdentityProvider.from_settings(settings)
    logger.info("Google identity provider initialized.")

    yield
    logger.info("Application shutdown: Cleaning up resources...")
    app.state.mongo_client.close()
    logger.info("MongoDB client closed.")


def _session_secret() -> str:
    if settings.session_secret:
        return settings.session_secret
    logger.warning("SESSION_SECRET not set; using a random key, sessions will not survive a restart.")
    return secrets.token_urlsafe(32)


app = FastAPI(
    title="Game Review API",
    version="1.0.0",
    description="API documentation for the game review blog",
    docs_url="/api-docs",
    lifespan=lifespan,
)
app.include_router(posts.router)
app.include_router(comments.router)
app.include_router(login.router)
app.include_router(pages.router)

app.mount("/static", StaticFiles(directory=pages.STATIC_DIR), name="static")

app.add_middleware(SessionMiddleware, secret_key=_session_secret())
app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.allowed_hosts_list)


@app.exception_handler(RequestValidationError)
async def malformed_body_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Malformed request to {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Malformed request body"},
    )


@app.exception_handler(auth.LoginRequired)
async def login_required_handler(request: Request, exc: auth.LoginRequired):
    return RedirectResponse("/login", status_code=status.HTTP_302_FOUND)
