# storefront/data/database.py
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from storefront.utils.settings import DATABASE_URL, STORAGE_TIMEOUT_SECONDS

Base = declarative_base()


def make_engine(url: str | None = None, timeout: float = STORAGE_TIMEOUT_SECONDS) -> Engine:
    url = url or DATABASE_URL
    if url.startswith("sqlite"):
        # sqlite busy timeout in seconds; same thread check off for the thread pool
        return create_engine(
            url,
            connect_args={"check_same_thread": False, "timeout": timeout},
        )
    return create_engine(
        url,
        pool_pre_ping=True,
        pool_timeout=timeout,
    )


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
