from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker

Base = declarative_base()


def build_engine(database_url: str, database_key: str, echo: bool = False, **overrides) -> Engine:
    """Create the engine for the entry store.

    For Postgres URLs the store key is used as the connection password, so the
    URL itself can be committed without credentials.
    """
    url = make_url(database_url)
    engine_kwargs = {"echo": echo, "future": True, "pool_pre_ping": True}
    if url.drivername.startswith("sqlite"):
        engine_kwargs["connect_args"] = {"check_same_thread": False}
    elif url.drivername.startswith("postgresql"):
        if database_key and not url.password:
            url = url.set(password=database_key)
        if "sslmode" not in url.query:
            # Supabase and many hosted Postgres instances require SSL
            engine_kwargs["connect_args"] = {"sslmode": "require"}
    engine_kwargs.update(overrides)
    return create_engine(url, **engine_kwargs)


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


def get_db(request: Request) -> Iterator[Session]:
    """Yield a session from the factory the app was built with."""
    db: Session = request.app.state.session_factory()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
