from __future__ import annotations
from typing import Generator
from sqlmodel import SQLModel, create_engine, Session

from trai import config

engine = create_engine(f"sqlite:///{config.DB_PATH}", echo=False, connect_args={"check_same_thread": False})

def init_db():
    # registers the table classes on SQLModel.metadata
    from trai import models  # noqa: F401
    SQLModel.metadata.create_all(engine)

def get_session() -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session
