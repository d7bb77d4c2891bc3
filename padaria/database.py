# padaria/database.py

from typing import Generator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from .core.config import Settings

# Classe Base para os modelos (ORM)
Base = declarative_base()


def create_db_engine(settings: Settings) -> Engine:
    """
    Cria o "motor" (engine) com o pool de conexões.
    Chamado uma única vez no startup da aplicação (ver main.lifespan).
    """
    url = settings.database_url
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(
        url,
        pool_size=settings.DB_POOL_SIZE,
        pool_pre_ping=True,
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db(request: Request) -> Generator[Session, None, None]:
    """Uma sessão por pedido (request), tirada da fábrica guardada em app.state."""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
