import os
import tempfile
from datetime import datetime, timedelta

# variáveis de ambiente antes de importar o pacote (settings/engine são lidos no import)
_db_dir = tempfile.mkdtemp(prefix="hostel_api_test_")
os.environ["DATABASE_URL_OVERRIDE"] = f"sqlite:///{os.path.join(_db_dir, 'test.db')}"
os.environ["SOCKETIO_ASYNC_MODE"] = "threading"
os.environ["PASSWORD_ITERATIONS"] = "1000"
os.environ["JWT_SECRET"] = "test-secret-key-for-testing-only-0123456789"
os.environ["ENVIRONMENT"] = "test"
os.environ["DEBUG"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402

from hostel_api import create_app  # noqa: E402
from hostel_api.core.interfaces.session_notifier import SessionsRevokedEvent  # noqa: E402
from hostel_api.entities.principal import Role  # noqa: E402
from hostel_api.infrastructure.database.base_model import BaseModel  # noqa: E402
from hostel_api.infrastructure.database.session import engine  # noqa: E402
from hostel_api.infrastructure.security.device_fingerprint import extract_device_info  # noqa: E402
from hostel_api.infrastructure.security.jwt_provider import JwtProvider  # noqa: E402
from hostel_api.repositories.refresh_token_repository import RefreshTokenRepository  # noqa: E402
from hostel_api.repositories.user_repository import UserRepository  # noqa: E402
from hostel_api.services.refresh_token_service import RefreshTokenService  # noqa: E402
from hostel_api.services.session_service import SessionService  # noqa: E402
from hostel_api.services.user_service import UserService  # noqa: E402

PASSWORD = "CorrectHorse42!"


class FakeClock:
    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 1, 10, 12, 0, 0)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


class RecordingNotifier:
    def __init__(self) -> None:
        self.events: list[SessionsRevokedEvent] = []

    def notify_sessions_revoked(self, event: SessionsRevokedEvent) -> None:
        self.events.append(event)


_notifier = RecordingNotifier()


@pytest.fixture(scope="session")
def app():
    app = create_app(session_notifier=_notifier)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def notifier():
    _notifier.events.clear()
    return _notifier


@pytest.fixture(autouse=True)
def tables():
    BaseModel.metadata.create_all(engine)
    yield
    BaseModel.metadata.drop_all(engine)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def session():
    s = Session(bind=engine, expire_on_commit=False)
    try:
        yield s
    finally:
        s.rollback()
        s.close()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def device():
    return extract_device_info("pytest-agent/1.0", "10.0.0.1")


@pytest.fixture
def refresh_repo(session):
    return RefreshTokenRepository(session)


@pytest.fixture
def refresh_tokens(refresh_repo, clock):
    return RefreshTokenService(repo=refresh_repo, clock=clock)


@pytest.fixture
def users(session, clock):
    return UserService(UserRepository(session), clock=clock)


@pytest.fixture
def session_service(refresh_tokens, users):
    return SessionService(jwt_provider=JwtProvider(), refresh_tokens=refresh_tokens, users=users)


@pytest.fixture
def user(users):
    return users.create_user(full_name="Ayesha Khan", email="ayesha@example.com", password=PASSWORD)


@pytest.fixture
def admin(users):
    return users.create_user(full_name="Warden Admin", email="warden@example.com", password=PASSWORD, role=Role.ADMIN)
