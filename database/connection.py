# backend/database/connection.py
import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from config import settings

logger = logging.getLogger("database.connection")

MEMORY_URLS = ("sqlite://", "sqlite:///:memory:")


class Base(DeclarativeBase):
    pass


# ============================================================
# 🔧 CONSTRUCTOR DE ENGINE
# ============================================================
def build_engine(database_url: str) -> Engine:
    kwargs = {}
    if database_url.startswith("sqlite"):
        # FastAPI ejecuta endpoints sync en un threadpool
        kwargs["connect_args"] = {"check_same_thread": False}
        if database_url in MEMORY_URLS:
            kwargs["poolclass"] = StaticPool
    return create_engine(database_url, **kwargs)


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


# ============================================================
# 🧩 INSTANCIAS GLOBALES
# ============================================================
engine = build_engine(settings.DATABASE_URL)
SessionLocal = build_session_factory(engine)


# ============================================================
# 🚀 INICIALIZACIÓN DEL ESQUEMA
# ============================================================
def init_db(bind: Engine = engine) -> Engine:
    # registra las tablas en Base.metadata
    import models.track  # noqa: F401

    try:
        Base.metadata.create_all(bind=bind)
        logger.info(f"✅ Esquema de base de datos listo: {bind.url.render_as_string(hide_password=True)}")
        return bind
    except Exception:
        logger.exception("❌ Error al inicializar la base de datos.")
        raise


# ============================================================
# 🔒 TRANSACCIÓN EXPLÍCITA
# ============================================================
@contextmanager
def session_scope(session_factory: sessionmaker = SessionLocal) -> Iterator[Session]:
    """
    Abre una sesión y la envuelve en una transacción:
    commit si el bloque termina bien, rollback ante cualquier excepción,
    y cierre de la sesión en todos los casos.
    """
    session = session_factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
