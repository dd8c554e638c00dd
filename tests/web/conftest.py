"""Shared fixtures for web API tests."""

import os
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from web.user_store import init_db


@pytest.fixture
def jwt_secret():
    return "test-nextauth-secret"


def _make_auth_token(jwt_secret, user_id, email="u@test.com", name="U"):
    return jwt.encode(
        {"sub": user_id, "email": email, "name": name},
        jwt_secret,
        algorithm="HS256",
    )


@pytest.fixture
def auth_token(jwt_secret):
    return _make_auth_token(jwt_secret, "user-123", "test@example.com", "Test")


@pytest.fixture
def auth_headers(auth_token):
    return {"Authorization": f"Bearer {auth_token}"}


@pytest.fixture
def auth_token_b(jwt_secret):
    """Second user token for isolation tests."""
    return _make_auth_token(jwt_secret, "user-456", "b@test.com", "UserB")


@pytest.fixture
def auth_headers_b(auth_token_b):
    return {"Authorization": f"Bearer {auth_token_b}"}


@pytest.fixture
def users_db(tmp_path):
    """Fresh users.db for each test."""
    db_path = tmp_path / "users.db"
    init_db(db_path)
    return db_path


@pytest.fixture
def mock_vectors():
    """Vector store stand-in for routes that touch ChromaDB."""
    vectors = MagicMock()
    vectors.has_entry.return_value = False
    vectors.query.return_value = []
    vectors.add_chunks.side_effect = lambda journal_id, user_id, chunks: len(chunks)
    return vectors


@pytest.fixture
def client(jwt_secret, tmp_path, users_db, store, mock_vectors):
    """Test client backed by a tmp journal store and users db."""
    env = {
        "NEXTAUTH_SECRET": jwt_secret,
        "ECOJOURNAL_HOME": str(tmp_path),
        "ANTHROPIC_API_KEY": "test-key",
    }

    patches = [
        patch.dict(os.environ, env),
        patch("web.routes.journal.get_embeddings", return_value=mock_vectors),
        patch("web.routes.chat.get_embeddings", return_value=mock_vectors),
        # user_store uses test DB; real get_or_create_user so FK rows exist
        patch("web.user_store._DEFAULT_DB_PATH", users_db),
    ]

    for p in patches:
        p.start()

    from web.app import app
    from journal.gamification import GamificationStore
    from web.deps import get_gamification, get_store

    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_gamification] = lambda: GamificationStore(store.db_path)

    yield TestClient(app)

    app.dependency_overrides.clear()
    for p in reversed(patches):
        p.stop()
