from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

Base = declarative_base()


def create_db_engine(url: str, echo: bool = False) -> Engine:
    """建立資料庫引擎。"""

    return create_engine(url, echo=echo, future=True)


def create_session_factory(engine: Engine) -> sessionmaker:
    """依據引擎建立 Session Factory。"""

    return sessionmaker(bind=engine, expire_on_commit=False, class_=Session)


@contextmanager
def session_scope(session_factory: sessionmaker) -> Iterator[Session]:
    """產生具備自動提交／回滾的資料庫交易範圍。"""

    session = session_factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_schema(engine: Engine) -> None:
    """建立所有資料表（已存在者略過）。"""

    # 確保模型已註冊到 Base.metadata
    from . import schemas  # noqa: F401

    Base.metadata.create_all(engine)
