import sys
from pathlib import Path

import pytest
import sqlalchemy as sa
from sqlalchemy.engine import make_url
from sqlalchemy.orm import scoped_session, sessionmaker
from alembic import command
from alembic.config import Config as AlembicConfig

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from streakline import create_app
from streakline.core.auth.auth_service import issue_access_token
from streakline.core.users.models import User
from streakline.extensions import db


# ==================== Pytest Markers ====================
def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (database, API)")


def _alembic_config(db_url: str) -> AlembicConfig:
    cfg = AlembicConfig(str(ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(ROOT / "streakline" / "migrations"))
    cfg.set_main_option("streakline_env", "testing")
    cfg.set_main_option("sqlalchemy.url", db_url)
    return cfg


def _use_explicit_sqlite_transactions(engine) -> None:
    """Let pysqlite honour BEGIN/SAVEPOINT so per-test rollbacks really isolate.

    pysqlite defers BEGIN on its own, which makes SAVEPOINT/RELEASE commit
    behind SQLAlchemy's back. Handing transaction control to SQLAlchemy fixes that.
    """
    if engine.dialect.name != "sqlite":
        return

    @sa.event.listens_for(engine, "connect")
    def _no_implicit_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @sa.event.listens_for(engine, "begin")
    def _explicit_begin(conn):
        conn.exec_driver_sql("BEGIN")


@pytest.fixture(scope="session", autouse=True)
def migrated_db():
    """Apply migrations once per session, on a fresh database file."""
    # Same absolute URL the testing app resolves, whatever the cwd.
    db_url = create_app("testing").config["SQLALCHEMY_DATABASE_URI"]
    url = make_url(db_url)
    if url.get_backend_name() == "sqlite" and url.database not in (None, "", ":memory:"):
        Path(url.database).unlink(missing_ok=True)
    cfg = _alembic_config(db_url)
    command.upgrade(cfg, "head")
    yield
    command.downgrade(cfg, "base")


@pytest.fixture()
def app(migrated_db):
    """
    Create a per-test app with an isolated database transaction.

    The session joins an outer connection transaction and turns its own
    commits into SAVEPOINT releases, so whatever a test commits is rolled
    back afterwards and nothing leaks between tests.
    """
    app = create_app("testing")
    ctx = app.app_context()
    ctx.push()

    engine = db.engine
    _use_explicit_sqlite_transactions(engine)
    connection = engine.connect()
    transaction = connection.begin()

    session_factory = scoped_session(
        sessionmaker(
            bind=connection,
            join_transaction_mode="create_savepoint",
            expire_on_commit=False,
        )
    )
    db.session = session_factory

    try:
        # Seed a default user for FK-dependent tests
        db.session.add(User(email="test@example.com"))
        db.session.commit()

        yield app
    finally:
        session_factory.remove()
        transaction.rollback()
        connection.close()
        engine.dispose()
        ctx.pop()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def user(app):
    return User.query.filter_by(email="test@example.com").one()


@pytest.fixture()
def other_user(app):
    other = User(email="someone-else@example.com")
    db.session.add(other)
    db.session.commit()
    return other


@pytest.fixture()
def auth_headers(user):
    return {"Authorization": f"Bearer {issue_access_token(user)}"}
