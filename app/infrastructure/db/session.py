"""
Database session management (SQLAlchemy)

The engine and session factory are built explicitly by the application
factory (see app.main.create_app) and stored on app.state; nothing here
holds a process-wide connection.
"""
from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker, Session


class Base(DeclarativeBase):
    """
    SQLAlchemy declarative base for all ORM models
    """
    pass


def create_db_engine(url: str, **kwargs) -> Engine:
    """Create SQLAlchemy engine for the given URL"""
    kwargs.setdefault("pool_pre_ping", True)
    return create_engine(url, **kwargs)


def create_session_factory(engine: Engine) -> sessionmaker:
    """Session factory bound to an engine"""
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


def get_db(request: Request) -> Session:
    """
    FastAPI dependency: opens a session from the factory on app.state
    and closes it after the request.

    Usage:
        @router.get("/subscriptions")
        def list_subscriptions(db: Session = Depends(get_db)):
            ...
    """
    SessionLocal = request.app.state.session_factory
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_db_connection(engine: Engine) -> None:
    """
    Health check: run SELECT 1 against the database

    Raises:
        sqlalchemy.exc.OperationalError: database unavailable
    """
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
