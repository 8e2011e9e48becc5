from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from course_checkout.config import DEFAULT_TIMEOUT

Base = declarative_base()


def make_engine(database_url: str, timeout: float = DEFAULT_TIMEOUT):
    if database_url.startswith("sqlite"):
        connect_args = {"check_same_thread": False, "timeout": timeout}
    elif database_url.startswith("postgresql"):
        connect_args = {"connect_timeout": int(timeout)}
    else:
        connect_args = {}
    return create_engine(database_url, connect_args=connect_args, pool_pre_ping=True)


def make_session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)
