"""Session factories for request handlers and scripts."""
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .engine import create_sync_engine


def get_sessionmaker(bind: Engine | None = None) -> sessionmaker:
    """Return a ``sessionmaker`` over ``bind`` or a freshly configured engine.

    Objects stay usable after commit so the service can map them to
    responses without another round trip.
    """

    return sessionmaker(
        bind=bind if bind is not None else create_sync_engine(),
        autoflush=False,
        expire_on_commit=False,
    )


@contextmanager
def session_scope(factory: sessionmaker | None = None) -> Iterator[Session]:
    """Yield a session inside a transaction committed on success."""

    factory = factory or get_sessionmaker()
    with factory() as session, session.begin():
        yield session
