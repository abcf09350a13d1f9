# backend/routes/file_routes.py
import mimetypes
import logging
from typing import BinaryIO, Iterator

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import StreamingResponse

from errors import NotFoundError
from services.storage_service import AUDIO_DIR, IMAGES_DIR

router = APIRouter()
LOG = logging.getLogger("routes.files")

CHUNK_SIZE = 64 * 1024


def iter_file(stream: BinaryIO) -> Iterator[bytes]:
    with stream:
        while True:
            chunk = stream.read(CHUNK_SIZE)
            if not chunk:
                break
            yield chunk


# ------------------------------------------------------------
# 🔹 Servir audio / portadas subidas
# ------------------------------------------------------------
@router.get("/{category}/{filename}", summary="Descargar archivo subido")
def serve_upload(category: str, filename: str, request: Request):
    if category not in (AUDIO_DIR, IMAGES_DIR):
        raise HTTPException(status_code=404, detail="Archivo no encontrado")

    storage = request.app.state.storage
    try:
        stream = storage.load(f"/uploads/{category}/{filename}")
    except NotFoundError as e:
        LOG.warning(f"⚠️ {e.message}")
        raise HTTPException(status_code=404, detail="Archivo no encontrado")

    media_type = mimetypes.guess_type(filename)[0] or "application/octet-stream"
    return StreamingResponse(iter_file(stream), media_type=media_type)
