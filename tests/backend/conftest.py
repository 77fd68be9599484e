import os
import sys
from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.append(PROJECT_ROOT)

from backend.app.auth.jwt import create_access_token  # noqa: E402
from backend.app.main import create_app  # noqa: E402
from devconnector.api import get_github_fetcher  # noqa: E402


@pytest.fixture
def test_app_client(database, fake_fetcher) -> Iterator[TestClient]:
    app = create_app()
    # Never reach the real GitHub API from the test suite
    app.dependency_overrides[get_github_fetcher] = lambda: fake_fetcher

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(user) -> dict[str, str]:
    return {"x-auth-token": create_access_token(user.id)}


@pytest.fixture
def headers_for():
    """Build auth headers for an arbitrary user."""

    def _headers(user) -> dict[str, str]:
        return {"x-auth-token": create_access_token(user.id)}

    return _headers


@pytest.fixture
def created_profile(test_app_client, auth_headers, sample_profile_input) -> dict:
    resp = test_app_client.post("/api/profile", json=sample_profile_input, headers=auth_headers)
    assert resp.status_code == 200
    return resp.json()
