# backend/routes/track_routes.py
from typing import List, Optional
import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Request, Response, UploadFile, status

from errors import MusicStreamError
from models.track import TrackDTO, TrackUpload, UploadedFile
from services.track_service import TrackService

router = APIRouter()
LOG = logging.getLogger("routes.tracks")

INTERNAL_ERROR = "Error interno del servidor"


# ------------------------------------------------------------
# 🔧 Dependencias y utilidades
# ------------------------------------------------------------
def get_track_service(request: Request) -> TrackService:
    return request.app.state.track_service


def to_uploaded_file(upload: Optional[UploadFile]) -> Optional[UploadedFile]:
    """Convierte el UploadFile de FastAPI en nuestro modelo (None si no vino)."""
    if upload is None:
        return None
    return UploadedFile(
        filename=upload.filename,
        content=upload.file.read(),
        content_type=upload.content_type,
    )


def raise_http_error(e: Exception, context: str):
    if isinstance(e, MusicStreamError):
        LOG.warning(f"⚠️ {context}: {e.message}")
        raise HTTPException(status_code=e.status_code, detail=e.message)
    LOG.exception(f"❌ {context}")
    raise HTTPException(status_code=500, detail=INTERNAL_ERROR)


# ------------------------------------------------------------
# 🔹 Listar tracks
# ------------------------------------------------------------
@router.get("", response_model=List[TrackDTO], summary="Obtener todos los tracks")
def list_tracks(
    category: Optional[str] = Query(None, description="Filtrar por categoría"),
    title: Optional[str] = Query(None, description="Filtrar por título (contiene)"),
    artist: Optional[str] = Query(None, description="Filtrar por artista (contiene)"),
    service: TrackService = Depends(get_track_service),
):
    try:
        if category:
            return service.get_tracks_by_category(category)
        if title:
            return service.get_tracks_by_title(title)
        if artist:
            return service.get_tracks_by_artist(artist)
        tracks = service.get_all_tracks()
        LOG.info(f"📜 Se obtuvieron {len(tracks)} tracks")
        return tracks
    except Exception as e:
        raise_http_error(e, "Error al listar tracks")


# ------------------------------------------------------------
# 🔍 Buscar tracks
# ------------------------------------------------------------
@router.get("/search", response_model=List[TrackDTO], summary="Buscar tracks por título o artista")
def search_tracks(
    q: Optional[str] = Query(None, description="Texto a buscar"),
    service: TrackService = Depends(get_track_service),
):
    try:
        return service.search_tracks(q)
    except Exception as e:
        raise_http_error(e, f"Error buscando tracks con query: {q}")


# ------------------------------------------------------------
# 🔹 Obtener track por ID
# ------------------------------------------------------------
@router.get("/{track_id}", response_model=TrackDTO, summary="Obtener track por ID")
def get_track(track_id: int, service: TrackService = Depends(get_track_service)):
    try:
        return service.get_track_by_id(track_id)
    except Exception as e:
        raise_http_error(e, f"Error al obtener track {track_id}")


# ------------------------------------------------------------
# 🔹 Crear track (multipart)
# ------------------------------------------------------------
@router.post(
    "",
    response_model=TrackDTO,
    status_code=status.HTTP_201_CREATED,
    summary="Crear track con audio y portada opcional",
)
def create_track(
    title: Optional[str] = Form(None),
    artist: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    duration: Optional[int] = Form(None),
    audioFile: Optional[UploadFile] = File(None),
    coverFile: Optional[UploadFile] = File(None),
    service: TrackService = Depends(get_track_service),
):
    LOG.info(f"🆕 POST /tracks -> title={title!r} artist={artist!r} category={category!r} duration={duration}")
    try:
        upload = TrackUpload(
            title=title,
            artist=artist,
            description=description,
            category=category,
            duration=duration,
            audio_file=to_uploaded_file(audioFile),
            cover_file=to_uploaded_file(coverFile),
        )
        return service.create_track(upload)
    except Exception as e:
        raise_http_error(e, "Error al crear track")


# ------------------------------------------------------------
# 🔹 Actualizar track (multipart, campos opcionales)
# ------------------------------------------------------------
@router.put("/{track_id}", response_model=TrackDTO, summary="Actualizar track")
def update_track(
    track_id: int,
    title: Optional[str] = Form(None),
    artist: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    duration: Optional[int] = Form(None),
    audioFile: Optional[UploadFile] = File(None),
    coverFile: Optional[UploadFile] = File(None),
    service: TrackService = Depends(get_track_service),
):
    LOG.info(f"✏️ PUT /tracks/{track_id}")
    try:
        upload = TrackUpload(
            title=title,
            artist=artist,
            description=description,
            category=category,
            duration=duration,
            audio_file=to_uploaded_file(audioFile),
            cover_file=to_uploaded_file(coverFile),
        )
        return service.update_track(track_id, upload)
    except Exception as e:
        raise_http_error(e, f"Error al actualizar track {track_id}")


# ------------------------------------------------------------
# 🔹 Eliminar track
# ------------------------------------------------------------
@router.delete("/{track_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Eliminar track")
def remove_track(track_id: int, service: TrackService = Depends(get_track_service)):
    LOG.info(f"🗑️ DELETE /tracks/{track_id}")
    try:
        service.delete_track(track_id)
    except Exception as e:
        raise_http_error(e, f"Error al eliminar track {track_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
