import logging

from sqlalchemy import create_engine, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from tenacity import retry, stop_after_attempt, wait_fixed

from models import Base, VisitorCount

logger = logging.getLogger(__name__)


def make_engine(database_url: str) -> Engine:
    # SQLite connections are handed between the threadpool workers
    if database_url.startswith("sqlite"):
        return create_engine(database_url, connect_args={"check_same_thread": False})
    return create_engine(database_url, pool_pre_ping=True)


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


# The database container may still be booting when the app starts
@retry(stop=stop_after_attempt(5), wait=wait_fixed(2), reraise=True)
def create_tables_with_retry(engine: Engine):
    inspector = inspect(engine)
    if not inspector.has_table(VisitorCount.__tablename__):
        logger.info("Creating tables...")
        Base.metadata.create_all(bind=engine)
        logger.info("Tables created.")
    else:
        logger.info("Tables already exist.")
