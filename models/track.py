# backend/models/track.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from database.connection import Base

TITLE_MAX_LENGTH = 50
ARTIST_MAX_LENGTH = 50
DESCRIPTION_MAX_LENGTH = 200
CATEGORY_MAX_LENGTH = 100


# ============================================================
# 🗂️ Tabla de tracks
# ============================================================
class Track(Base):
    __tablename__ = "tracks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)
    artist: Mapped[str] = mapped_column(String(ARTIST_MAX_LENGTH), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(DESCRIPTION_MAX_LENGTH), default="")
    category: Mapped[str] = mapped_column(String(CATEGORY_MAX_LENGTH), nullable=False)
    duration: Mapped[int] = mapped_column(Integer, nullable=False)  # duración en segundos
    audio_url: Mapped[str] = mapped_column(String(512), nullable=False)
    cover_url: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    added_date: Mapped[datetime] = mapped_column(DateTime, default=datetime.now)

    def __repr__(self) -> str:
        return f"<Track id={self.id} title={self.title!r} artist={self.artist!r}>"


# ============================================================
# 🔹 Representación externa (JSON camelCase)
# ============================================================
class TrackDTO(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    title: str
    artist: str
    description: Optional[str] = ""
    category: str
    duration: int
    audio_url: Optional[str] = None
    cover_url: Optional[str] = None
    added_date: Optional[datetime] = None


# ============================================================
# 🔹 Archivo subido (audio o portada)
# ============================================================
class UploadedFile(BaseModel):
    filename: Optional[str] = None
    content: bytes = b""
    content_type: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.content

    @property
    def size(self) -> int:
        return len(self.content)


# ============================================================
# 🔹 Datos de creación / actualización
# ============================================================
class TrackUpload(BaseModel):
    title: Optional[str] = None
    artist: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    duration: Optional[int] = None
    audio_file: Optional[UploadedFile] = None
    cover_file: Optional[UploadedFile] = None
