import pytest

from bookshare import create_app
from bookshare.config import Config
from bookshare.extensions import db
from bookshare.services.auth_service import AuthService
from bookshare.services.book_service import BookService


class ConfigForTests(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SQLALCHEMY_ENGINE_OPTIONS = {}
    SECRET_KEY = "test-secret-key-with-enough-bytes-for-hmac"
    JWT_SECRET_KEY = "test-jwt-secret-key-with-enough-bytes-for-hmac"
    JWT_COOKIE_CSRF_PROTECT = False
    MAIL_SUPPRESS_SEND = True
    INVITE_MAIL_ENABLED = False
    ISBN_LOOKUP_ENABLED = False
    AUTO_CREATE_TABLES = False


@pytest.fixture
def app():
    app = create_app(ConfigForTests)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    def _make(name, email=None, password="secret123", **extra):
        user, _token = AuthService.register(
            name=name,
            email=email or f"{name.lower()}@example.com",
            password=password,
            **extra,
        )
        return user
    return _make


@pytest.fixture
def make_book(app):
    def _make(owner, title="Dune", author="Frank Herbert", **extra):
        data = {"title": title, "author": author}
        data.update(extra)
        return BookService.create_book(owner.id, data)
    return _make


@pytest.fixture
def auth_headers(app):
    def _headers(user):
        return {"Authorization": f"Bearer {AuthService.issue_credential(user)}"}
    return _headers
