"""
Pytest fixtures for DevConnector Profiles tests.

Each test gets a fresh in-memory SQLite database behind the global
DatabaseManager, so the application and the tests share one engine.
"""

import os
import sys

# Settings are cached on first use; configure them before any project import
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-that-is-long-enough-0123456789"
os.environ.setdefault("ENV", "development")
os.environ.pop("PAT_TOKEN", None)

import pytest  # noqa: E402

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.append(PROJECT_ROOT)

from devconnector.db import db  # noqa: E402
from devconnector.models import User  # noqa: E402
from devconnector.security import Identity  # noqa: E402


class FakeGitHubFetcher:
    """Records lookups and returns canned repositories (or raises)."""

    def __init__(self, repos=None, error: Exception | None = None):
        self.repos = repos if repos is not None else []
        self.error = error
        self.calls: list[dict] = []

    def list_repos(self, username, per_page=5, sort="created", direction="asc"):
        self.calls.append(
            {"username": username, "per_page": per_page, "sort": sort, "direction": direction}
        )
        if self.error is not None:
            raise self.error
        return self.repos


@pytest.fixture(scope="function")
def database():
    """Fresh in-memory database for each test."""
    db.reset()
    db.initialize("sqlite://")
    db.create_all_tables()

    yield db

    db.drop_all_tables()
    db.reset()


@pytest.fixture
def test_session(database):
    """Get a session on the test database."""
    session = database.get_session()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@pytest.fixture
def make_user(database):
    """Factory committing a user and returning it (detached, attributes loaded)."""
    counter = {"n": 0}

    def _make(name: str = "Jane Doe", email: str | None = None, avatar: str | None = None) -> User:
        counter["n"] += 1
        with database.session() as session:
            user = User(
                name=name,
                email=email or f"user{counter['n']}@example.com",
                avatar=avatar or "//www.gravatar.com/avatar/placeholder",
            )
            session.add(user)
            session.flush()
            return user

    return _make


@pytest.fixture
def user(make_user) -> User:
    return make_user()


@pytest.fixture
def identity(user) -> Identity:
    return Identity(user_id=user.id)


@pytest.fixture
def fake_fetcher() -> FakeGitHubFetcher:
    return FakeGitHubFetcher()


@pytest.fixture
def sample_profile_input():
    """Body of a typical create-profile request."""
    return {
        "status": "Developer",
        "skills": "python, fastapi , sql",
        "company": "Acme",
        "website": "https://acme.example.com",
        "location": "Berlin",
        "bio": "Backend developer",
        "githubusername": "octocat",
        "twitter": "https://twitter.com/jane",
        "linkedin": "https://linkedin.com/in/jane",
    }


@pytest.fixture
def sample_experience():
    return {
        "title": "Senior Developer",
        "company": "Acme",
        "location": "Berlin",
        "from": "2019-03-01",
        "to": "2022-06-30",
        "current": False,
        "description": "Built the billing platform",
    }


@pytest.fixture
def sample_education():
    return {
        "school": "TU Berlin",
        "degree": "MSc",
        "fieldofstudy": "Computer Science",
        "from": "2012-10-01",
        "to": "2015-09-30",
    }


@pytest.fixture
def other_user(make_user) -> User:
    return make_user(name="John Roe")
