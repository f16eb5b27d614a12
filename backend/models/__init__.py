from contextlib import contextmanager

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
import structlog

from errors import ApiError, ConflictError, StorageError

log = structlog.get_logger(__name__)

db = SQLAlchemy()


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores FOREIGN KEY clauses unless asked per connection.
    if type(dbapi_connection).__module__.startswith("sqlite3"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def init_storage(app):
    """Bind the storage client to the app and make sure the tables exist."""
    db.init_app(app)

    # register mappers before create_all
    from models import user_model, category_model, record_models, balance_model  # noqa: F401

    with app.app_context():
        db.create_all()
        log.info("storage_ready", backend=db.engine.url.get_backend_name())


def close_storage(app):
    with app.app_context():
        db.session.remove()
        db.engine.dispose()
    log.info("storage_closed")


@contextmanager
def atomic(session, integrity_error=None):
    """
    Run a block of writes as one transaction.

    Commits once at the end; any failure rolls back everything written in the
    block and propagates. Integrity violations surface as ``integrity_error``
    (a ConflictError by default) instead of backend-specific codes.
    """
    try:
        yield session
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        log.info("integrity_violation", detail=str(exc.orig))
        raise (integrity_error or ConflictError()) from exc
    except ApiError:
        session.rollback()
        raise
    except SQLAlchemyError as exc:
        session.rollback()
        log.exception("transaction_failed")
        raise StorageError() from exc
    except Exception:
        session.rollback()
        raise
