from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, String, Text, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

Base = declarative_base()


class Photo(Base):
    __tablename__ = "photos"
    id           = Column(String, primary_key=True)
    storage_path = Column(String, nullable=False)
    # Derived cache data written by the pipeline; both may stay NULL.
    variants     = Column(JSON, nullable=True)
    blurhash     = Column(Text, nullable=True)
    created_at   = Column(DateTime, default=datetime.utcnow, nullable=False)


def create_db_engine(url: str) -> Engine:
    if not url.startswith("sqlite"):
        return create_engine(url)
    connect_opts = {"check_same_thread": False}
    if url in ("sqlite://", "sqlite:///:memory:"):
        # In-memory databases exist per connection; share a single one.
        return create_engine(url, connect_args=connect_opts, poolclass=StaticPool)
    return create_engine(url, connect_args=connect_opts)


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, expire_on_commit=False)
