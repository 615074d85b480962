from sqlalchemy import create_engine, Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi import Request
from typing import Generator

from libraryhub.db.base import Base

def build_engine(database_url: str, echo: bool = False) -> Engine:
    """Engine = the DB connection factory"""
    kwargs = {}
    if database_url.startswith("sqlite"):
        # Requests and the reminder sweep share the engine across threads
        kwargs["connect_args"] = {"check_same_thread": False}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    return create_engine(database_url, echo=echo, future=True, **kwargs)

def build_session_factory(engine: Engine) -> sessionmaker:
    """SessionLocal = the session factory"""
    return sessionmaker(
        bind=engine,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
    )

def init_db(engine: Engine) -> None:
    # Register every table on Base.metadata before creating them
    from libraryhub.models import book, checkout, fee, payment, plan, student, subscription  # noqa: F401

    Base.metadata.create_all(engine)

def get_db(request: Request) -> Generator[Session, None, None]:
    """Dependency that provides a database session"""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
