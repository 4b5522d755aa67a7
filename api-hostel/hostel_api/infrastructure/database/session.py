# hostel_api/infrastructure/database/session.py

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session, sessionmaker

from hostel_api.config.settings import settings
from hostel_api.core.exceptions import InfrastructureError


def _build_engine(url: str) -> Engine:
    if url.startswith("sqlite"):
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
        )

    connect_args = {
        "connect_timeout": settings.db_connect_timeout_seconds,
        "options": f"-c statement_timeout={settings.db_statement_timeout_ms}",
    }
    if settings.db_ssl:
        connect_args["sslmode"] = "require"

    return create_engine(
        url,
        echo=settings.debug and settings.environment == "development",
        pool_pre_ping=True,
        pool_timeout=settings.db_pool_timeout_seconds,
        connect_args=connect_args,
    )


engine = _build_engine(settings.database_url)

_SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
    expire_on_commit=False,
)


@contextmanager
def db_session(*, commit_on: tuple[type[BaseException], ...] = ()) -> Iterator[Session]:
    # commit_on: exceções que ainda gravam o que já foi feito (ex.: auditoria de falha)
    session: Session = _SessionLocal()
    try:
        yield session
        session.commit()
    except (OperationalError, PoolTimeoutError) as e:
        session.rollback()
        raise InfrastructureError() from e
    except Exception as e:
        if commit_on and isinstance(e, commit_on):
            session.commit()
        else:
            session.rollback()
        raise
    finally:
        session.close()
