from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine

from archlab.core.config import settings


def make_engine(database_url: str) -> Engine:
    connect_args = {}
    if database_url.startswith("sqlite"):
        # FastAPI serves sync handlers from a threadpool.
        connect_args["check_same_thread"] = False
    return create_engine(database_url, connect_args=connect_args)


engine = make_engine(settings.DATABASE_URL)


def init_db(db_engine: Engine = engine) -> None:
    # Tables must be imported before create_all sees them.
    from archlab import models  # noqa: F401

    SQLModel.metadata.create_all(db_engine)
