from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi import Request

from crowdfund.core.config import Settings

# Create declarative base
Base = declarative_base()


def build_engine(settings: Settings) -> Engine:
    """Create the SQLAlchemy engine for the configured database URL."""
    url = settings.database_url
    if url.startswith("sqlite"):
        # In-memory SQLite needs a single shared connection across threads
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url or url in ("sqlite://", "sqlite:///"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=settings.sql_echo, **kwargs)
    return create_engine(url, pool_pre_ping=True, echo=settings.sql_echo)


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine: Engine) -> None:
    """Create all tables (models must be imported first)."""
    import crowdfund.models  # noqa: F401

    Base.metadata.create_all(bind=engine)


# Dependency for database session
def get_db(request: Request):
    db = request.app.state.session_factory()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
