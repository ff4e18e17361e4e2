"""Database engine and session helpers for the API service.

This module turns a resolved `ConnectionDescriptor` into a SQLAlchemy engine
and provides the FastAPI dependency (`get_db`) used by route handlers.

Design goals:
- the descriptor is passed in explicitly; nothing reads the environment here
- short-lived, request-scoped DB sessions
- safe teardown on errors
"""

import logging

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from petstore_common.db import ConnectionDescriptor, connect_args, to_sqlalchemy_url

logger = logging.getLogger(__name__)


def build_engine(descriptor: ConnectionDescriptor):
    """Create the SQLAlchemy engine for a resolved descriptor.

    The engine uses `pool_pre_ping=True` so stale pooled connections are
    replaced transparently in long-running containers.

    Args:
        descriptor: Output of `petstore_common.db.resolve()`.

    Returns:
        sqlalchemy.engine.Engine: Engine bound to psycopg2 or PyMySQL.
    """
    url = to_sqlalchemy_url(descriptor)
    logger.info("Creating %s engine: %s", descriptor.driver_kind.display_name, descriptor.redacted())
    return create_engine(url, connect_args=connect_args(descriptor), pool_pre_ping=True)


def make_session_factory(engine):
    return sessionmaker(bind=engine)


def get_db(request: Request):
    """FastAPI dependency that yields a request-scoped SQLAlchemy session.

    Route handlers declare `db: Session = Depends(get_db)` to receive a session
    bound to the engine the application was started with.

    Yields:
        sqlalchemy.orm.Session: An open SQLAlchemy session for the duration of the request.

    Notes:
        - A new session is created per request.
        - The session is always closed in `finally`.
    """
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def check_database(engine) -> bool:
    """Run `SELECT 1` against the engine.

    Returns:
        bool: True if the database answered, False otherwise.
    """
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("Health check failed")
        return False
    return True
