import base64
from datetime import datetime, timedelta

import pytest

from bendinledim import create_app
from bendinledim.repository import get_repository

TEST_CONFIG = {
    "TESTING": True,
    "SQLALCHEMY_DATABASE_URI": "sqlite://",
    "SQLALCHEMY_ENGINE_OPTIONS": {},
    "SECRET_KEY": "test",
    "SITE_URL": "https://example.test",
    "ADMIN_USERNAME": "admin",
    "ADMIN_PASSWORD": "secret",
    "IS_PRODUCTION": False,
    "ENABLE_ADMIN_DASHBOARD": False,
    "OPENAI_API_KEY": "",
    "GEMINI_API_KEY": "",
}


def basic(user, password):
    token = base64.b64encode(f"{user}:{password}".encode()).decode()
    return {"Authorization": f"Basic {token}"}


@pytest.fixture
def make_app():
    def _make(**overrides):
        return create_app({**TEST_CONFIG, **overrides})
    return _make


@pytest.fixture
def app(make_app):
    return make_app()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth():
    return basic("admin", "secret")


@pytest.fixture
def repo(app):
    with app.app_context():
        yield get_repository()


@pytest.fixture
def category(repo):
    return repo.upsert_category("haber", "Haber", "#d97706", "News")


@pytest.fixture
def add_article(repo, category):
    """Create a published article; later calls are newer unless created_at is given."""
    clock = {"t": datetime(2024, 1, 1, 12, 0, 0)}

    def _add(title, **fields):
        clock["t"] += timedelta(minutes=1)
        data = {
            "title": title,
            "content": fields.pop("content", f"{title} hakkında uzun bir içerik."),
            "excerpt": fields.pop("excerpt", title),
            "category_id": fields.pop("category_id", category.id),
            "published": fields.pop("published", True),
            "created_at": fields.pop("created_at", clock["t"]),
        }
        data.update(fields)
        return repo.create_article(**data)

    return _add


@pytest.fixture
def basic_auth():
    return basic
