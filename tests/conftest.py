import os
from typing import Any, Dict, List, Optional

import pytest
import pytest_asyncio
from authlib.integrations.starlette_client import OAuthError
from bson import ObjectId
from fastapi.responses import RedirectResponse
from httpx import AsyncClient, ASGITransport

# Must be set before main/settings are imported
os.environ.setdefault("SESSION_SECRET", "test-session-secret")
os.environ.setdefault("GOOGLE_CLIENT_ID", "test-client-id")
os.environ.setdefault("GOOGLE_CLIENT_SECRET", "test-client-secret")

import auth  # noqa: E402
from main import app  # noqa: E402
from routers import comments, posts  # noqa: E402
from services.record_store import StoreError, UpdateOutcome  # noqa: E402


class InMemoryRecordStore:
    """Stands in for RecordStore; same method surface, dict-backed."""

    def __init__(self, name: str, unique_fields=()):
        self.name = name
        self.unique_fields = tuple(unique_fields)
        self.records: Dict[str, Dict[str, Any]] = {}
        self.fail = False

    def _check_available(self):
        if self.fail:
            raise StoreError(f"'{self.name}' is unavailable")

    def _check_id(self, record_id: str):
        if not ObjectId.is_valid(record_id):
            raise StoreError(f"Malformed record id '{record_id}'")

    def _check_unique(self, data: Dict[str, Any], skip_id: Optional[str] = None):
        for field in self.unique_fields:
            if field not in data:
                continue
            for record_id, record in self.records.items():
                if record_id != skip_id and record.get(field) == data[field]:
                    raise StoreError(f"Duplicate key for '{self.name}.{field}'")

    async def ensure_indexes(self) -> None:
        return None

    async def find_all(self) -> List[Dict[str, Any]]:
        self._check_available()
        return [dict(record, id=record_id) for record_id, record in self.records.items()]

    async def find_by_id(self, record_id: str) -> Optional[Dict[str, Any]]:
        self._check_available()
        self._check_id(record_id)
        record = self.records.get(record_id)
        return dict(record, id=record_id) if record is not None else None

    async def insert(self, data: Dict[str, Any]) -> str:
        self._check_available()
        self._check_unique(data)
        record_id = str(ObjectId())
        self.records[record_id] = dict(data)
        return record_id

    async def update_by_id(self, record_id: str, changes: Dict[str, Any]) -> UpdateOutcome:
        self._check_available()
        self._check_id(record_id)
        record = self.records.get(record_id)
        if record is None:
            return UpdateOutcome(matched_count=0, modified_count=0)
        self._check_unique(changes, skip_id=record_id)
        modified = any(record.get(key) != value for key, value in changes.items())
        record.update(changes)
        return UpdateOutcome(matched_count=1, modified_count=1 if modified else 0)

    async def delete_by_id(self, record_id: str) -> int:
        self._check_available()
        self._check_id(record_id)
        return 1 if self.records.pop(record_id, None) is not None else 0


class FakeIdentityProvider:
    """Issues a synthetic Google profile instead of talking to Google."""

    def __init__(self):
        self.profile = {
            "sub": "1234567890",
            "email": "alex@example.com",
            "name": "Alex",
        }
        self.fail = False
        # Raised instead of answering, e.g. an unreachable Google endpoint
        self.redirect_error: Optional[Exception] = None
        self.profile_error: Optional[Exception] = None
        self.redirect_uris: List[str] = []

    async def authorize_redirect(self, request, redirect_uri: str):
        if self.redirect_error is not None:
            raise self.redirect_error
        self.redirect_uris.append(redirect_uri)
        return RedirectResponse(f"https://accounts.example.com/authorize?redirect_uri={redirect_uri}", status_code=302)

    async def fetch_profile(self, request) -> Dict[str, Any]:
        if self.profile_error is not None:
            raise self.profile_error
        if self.fail:
            raise OAuthError(error="access_denied", description="User denied access")
        return dict(self.profile)


@pytest.fixture
def post_store():
    return InMemoryRecordStore("posts", unique_fields=("postContent",))


@pytest.fixture
def comment_store():
    return InMemoryRecordStore("comments")


@pytest.fixture
def identity_provider():
    return FakeIdentityProvider()


@pytest.fixture
def sample_post():
    return {
        "postTitle": "Zelda Review",
        "postDate": "2024-01-01",
        "postContent": "Great game",
        "gameTitle": "Zelda",
        "platform": "Switch",
        "rating": "9",
        "reviewer": "Alex",
    }


@pytest.fixture
def sample_comment():
    return {"author": "Sam", "content": "Totally agree about the dungeons."}


@pytest_asyncio.fixture
async def test_client(post_store, comment_store, identity_provider):
    app.dependency_overrides[posts.get_post_store] = lambda: post_store
    app.dependency_overrides[comments.get_comment_store] = lambda: comment_store
    app.dependency_overrides[auth.get_identity_provider] = lambda: identity_provider
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
    app.dependency_overrides.clear()
