from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

MEMORY_URL = "sqlite+pysqlite:///:memory:"

Base = declarative_base()


def create_memory_engine() -> Engine:
    # One shared connection, otherwise every checkout would get a fresh empty database.
    return create_engine(
        MEMORY_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    Base.metadata.create_all(engine)
    with engine.connect() as connection:
        connection.execute(text("SELECT 1"))
