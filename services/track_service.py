# backend/services/track_service.py
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import sessionmaker

from database.connection import session_scope
from errors import NotFoundError, ValidationError
from models.track import (
    ARTIST_MAX_LENGTH,
    CATEGORY_MAX_LENGTH,
    DESCRIPTION_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    Track,
    TrackDTO,
    TrackUpload,
    UploadedFile,
)
from repositories import track_repository
from services.storage_service import StorageService

logger = logging.getLogger("services.tracks")


# ============================================================
# 🔧 Utilidades
# ============================================================
def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def _has_content(file: Optional[UploadedFile]) -> bool:
    return file is not None and not file.is_empty


def _check_length(value: Optional[str], max_length: int, label: str) -> None:
    if value is not None and len(value.strip()) > max_length:
        raise ValidationError(f"{label} no puede superar {max_length} caracteres")


def to_dto(track: Track) -> TrackDTO:
    return TrackDTO(
        id=track.id,
        title=track.title,
        artist=track.artist,
        description=track.description,
        category=track.category,
        duration=track.duration,
        audio_url=track.audio_url,
        cover_url=track.cover_url,
        added_date=track.added_date,
    )


# ============================================================
# 🎵 Servicio de tracks
# ============================================================
class TrackService:
    """Coordina validación, almacenamiento de archivos y persistencia de tracks."""

    def __init__(self, session_factory: sessionmaker, storage: StorageService):
        self.session_factory = session_factory
        self.storage = storage

    # --------------------------------------------------------
    # 🔹 Consultas
    # --------------------------------------------------------
    def get_all_tracks(self) -> List[TrackDTO]:
        logger.info("📜 Obteniendo todos los tracks")
        with session_scope(self.session_factory) as db:
            return [to_dto(t) for t in track_repository.find_all(db)]

    def get_tracks_by_category(self, category: str) -> List[TrackDTO]:
        logger.info(f"🏷️ Obteniendo tracks de la categoría: {category}")
        with session_scope(self.session_factory) as db:
            return [to_dto(t) for t in track_repository.find_by_category(db, category.strip())]

    def get_tracks_by_title(self, title: str) -> List[TrackDTO]:
        logger.info(f"🔎 Obteniendo tracks cuyo título contiene: {title!r}")
        with session_scope(self.session_factory) as db:
            return [to_dto(t) for t in track_repository.find_by_title_containing(db, title)]

    def get_tracks_by_artist(self, artist: str) -> List[TrackDTO]:
        logger.info(f"🔎 Obteniendo tracks cuyo artista contiene: {artist!r}")
        with session_scope(self.session_factory) as db:
            return [to_dto(t) for t in track_repository.find_by_artist_containing(db, artist)]

    def get_track_by_id(self, track_id: int) -> TrackDTO:
        logger.info(f"🔎 Obteniendo track con id: {track_id}")
        with session_scope(self.session_factory) as db:
            return to_dto(self._get_or_404(db, track_id))

    def search_tracks(self, query: Optional[str]) -> List[TrackDTO]:
        logger.info(f"🔍 Buscando tracks con query: {query!r}")
        if _is_blank(query):
            return self.get_all_tracks()

        with session_scope(self.session_factory) as db:
            return [to_dto(t) for t in track_repository.search(db, query)]

    # --------------------------------------------------------
    # 🔹 Crear track
    # --------------------------------------------------------
    def create_track(self, upload: TrackUpload) -> TrackDTO:
        logger.info(f"🆕 Creando track: {upload.title}")
        self._validate_new_track(upload)
        self._check_files(upload)

        logger.info(f"🎧 Guardando audio: {upload.audio_file.filename}")
        audio_url = self.storage.store_audio_file(upload.audio_file)

        cover_url = None
        if _has_content(upload.cover_file):
            logger.info(f"🖼️ Guardando portada: {upload.cover_file.filename}")
            cover_url = self.storage.store_image_file(upload.cover_file)

        track = Track(
            title=upload.title.strip(),
            artist=upload.artist.strip(),
            description=upload.description.strip() if upload.description is not None else "",
            category=upload.category.strip(),
            duration=upload.duration,
            audio_url=audio_url,
            cover_url=cover_url,
            added_date=datetime.now(),
        )

        # Si la persistencia falla, los archivos ya guardados quedan huérfanos.
        with session_scope(self.session_factory) as db:
            saved = track_repository.save(db, track)
            logger.info(f"✅ Track creado con id: {saved.id}")
            return to_dto(saved)

    def _validate_new_track(self, upload: TrackUpload) -> None:
        if _is_blank(upload.title):
            raise ValidationError("El título del track es obligatorio")
        _check_length(upload.title, TITLE_MAX_LENGTH, "El título")

        if _is_blank(upload.artist):
            raise ValidationError("El nombre del artista es obligatorio")
        _check_length(upload.artist, ARTIST_MAX_LENGTH, "El nombre del artista")

        if _is_blank(upload.category):
            raise ValidationError("La categoría es obligatoria")
        _check_length(upload.category, CATEGORY_MAX_LENGTH, "La categoría")

        if upload.duration is None or upload.duration <= 0:
            raise ValidationError("La duración debe ser mayor que 0")

        _check_length(upload.description, DESCRIPTION_MAX_LENGTH, "La descripción")

        if not _has_content(upload.audio_file):
            raise ValidationError("El archivo de audio es obligatorio")

    def _check_files(self, upload: TrackUpload) -> None:
        """Valida ambos archivos antes de escribir cualquiera de ellos."""
        if _has_content(upload.audio_file):
            self.storage.validate_audio_file(upload.audio_file)
        if _has_content(upload.cover_file):
            self.storage.validate_image_file(upload.cover_file)

    # --------------------------------------------------------
    # 🔹 Actualizar track
    # --------------------------------------------------------
    def update_track(self, track_id: int, upload: TrackUpload) -> TrackDTO:
        logger.info(f"✏️ Actualizando track con id: {track_id}")
        superseded: List[str] = []

        with session_scope(self.session_factory) as db:
            track = self._get_or_404(db, track_id)
            self._check_files(upload)

            if not _is_blank(upload.title):
                _check_length(upload.title, TITLE_MAX_LENGTH, "El título")
                track.title = upload.title.strip()

            if not _is_blank(upload.artist):
                _check_length(upload.artist, ARTIST_MAX_LENGTH, "El nombre del artista")
                track.artist = upload.artist.strip()

            if upload.description is not None:
                _check_length(upload.description, DESCRIPTION_MAX_LENGTH, "La descripción")
                track.description = upload.description.strip()

            if not _is_blank(upload.category):
                _check_length(upload.category, CATEGORY_MAX_LENGTH, "La categoría")
                track.category = upload.category.strip()

            if upload.duration is not None and upload.duration > 0:
                track.duration = upload.duration

            if _has_content(upload.audio_file):
                logger.info("🎧 Reemplazando archivo de audio")
                new_audio_url = self.storage.store_audio_file(upload.audio_file)
                if track.audio_url:
                    superseded.append(track.audio_url)
                track.audio_url = new_audio_url

            if _has_content(upload.cover_file):
                logger.info("🖼️ Reemplazando portada")
                new_cover_url = self.storage.store_image_file(upload.cover_file)
                if track.cover_url:
                    superseded.append(track.cover_url)
                track.cover_url = new_cover_url

            updated = to_dto(track_repository.save(db, track))

        for path in superseded:
            self.storage.delete(path)

        logger.info(f"✅ Track actualizado con id: {track_id}")
        return updated

    # --------------------------------------------------------
    # 🔹 Eliminar track
    # --------------------------------------------------------
    def delete_track(self, track_id: int) -> None:
        logger.info(f"🗑️ Eliminando track con id: {track_id}")

        with session_scope(self.session_factory) as db:
            track = self._get_or_404(db, track_id)
            files = [track.audio_url, track.cover_url]
            track_repository.delete(db, track)

        for path in files:
            if path is not None:
                self.storage.delete(path)

        logger.info(f"✅ Track eliminado con id: {track_id}")

    # --------------------------------------------------------
    # 🔧 Internos
    # --------------------------------------------------------
    @staticmethod
    def _get_or_404(db, track_id: int) -> Track:
        track = track_repository.find_by_id(db, track_id)
        if track is None:
            raise NotFoundError(f"Track no encontrado con id: {track_id}")
        return track
