# backend/repositories/track_repository.py
from typing import List, Optional
import logging

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from models.track import Track

logger = logging.getLogger("repositories.tracks")


# ============================================================
# 🔹 Obtener todos los tracks
# ============================================================
def find_all(db: Session) -> List[Track]:
    return list(db.scalars(select(Track).order_by(Track.id)))


# ============================================================
# 🔹 Obtener track por ID
# ============================================================
def find_by_id(db: Session, track_id: int) -> Optional[Track]:
    return db.get(Track, track_id)


# ============================================================
# 🔹 Guardar (insertar o actualizar) track
# ============================================================
def save(db: Session, track: Track) -> Track:
    """Agrega el track a la sesión y hace flush para obtener su ID."""
    db.add(track)
    db.flush()
    db.refresh(track)
    logger.debug(f"💾 Track guardado con ID {track.id}")
    return track


# ============================================================
# 🔹 Eliminar track
# ============================================================
def delete(db: Session, track: Track) -> None:
    db.delete(track)
    db.flush()
    logger.debug(f"🗑️ Track eliminado con ID {track.id}")


# ============================================================
# 🔍 Búsquedas
# ============================================================
LIKE_ESCAPE = "\\"


def _contains_ignore_case(column, text: str):
    escaped = (
        text.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return column.ilike(f"%{escaped}%", escape=LIKE_ESCAPE)


def search(db: Session, query: str) -> List[Track]:
    """Tracks cuyo título o artista contiene `query` (sin distinguir mayúsculas)."""
    stmt = (
        select(Track)
        .where(or_(_contains_ignore_case(Track.title, query), _contains_ignore_case(Track.artist, query)))
        .order_by(Track.id)
    )
    return list(db.scalars(stmt))


def find_by_title_containing(db: Session, title: str) -> List[Track]:
    stmt = select(Track).where(_contains_ignore_case(Track.title, title)).order_by(Track.id)
    return list(db.scalars(stmt))


def find_by_artist_containing(db: Session, artist: str) -> List[Track]:
    stmt = select(Track).where(_contains_ignore_case(Track.artist, artist)).order_by(Track.id)
    return list(db.scalars(stmt))


def find_by_category(db: Session, category: str) -> List[Track]:
    stmt = select(Track).where(Track.category == category).order_by(Track.id)
    return list(db.scalars(stmt))
