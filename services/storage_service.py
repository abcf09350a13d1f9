# backend/services/storage_service.py
import os
import uuid
import logging
import posixpath
from pathlib import Path
from typing import BinaryIO, Optional, Tuple, Union

from errors import NotFoundError, StorageError, ValidationError
from models.track import UploadedFile

logger = logging.getLogger("services.storage")

AUDIO_DIR = "audio"
IMAGES_DIR = "images"
UPLOADS_PREFIX = "/uploads/"

ALLOWED_AUDIO_EXTENSIONS = {"mp3", "wav", "ogg"}
ALLOWED_IMAGE_EXTENSIONS = {"jpg", "jpeg", "png", "gif", "webp"}


# ============================================================
# 🔧 Utilidades de nombres de archivo
# ============================================================
def clean_path(path: Optional[str]) -> str:
    """Normaliza separadores y segmentos `.` / `x/..` de un nombre de archivo."""
    if not path:
        return ""
    return posixpath.normpath(path.replace("\\", "/"))


def get_file_extension(filename: Optional[str]) -> str:
    if not filename or "." not in filename:
        return ""
    return filename.rsplit(".", 1)[1].lower()


def strip_uploads_prefix(logical_path: str) -> str:
    if logical_path.startswith(UPLOADS_PREFIX):
        return logical_path[len(UPLOADS_PREFIX):]
    return logical_path.lstrip("/")


# ============================================================
# 💾 Almacenamiento local de audio y portadas
# ============================================================
class StorageService:
    """
    Guarda archivos subidos bajo `<root>/audio` y `<root>/images` con un
    prefijo UUID, y los expone como rutas lógicas `/uploads/<categoría>/<nombre>`.
    """

    def __init__(self, location: Union[str, Path]):
        self.root_location = Path(location).resolve()

    # --------------------------------------------------------
    # 🚀 Inicialización de directorios
    # --------------------------------------------------------
    def init(self) -> None:
        try:
            for directory in (self.root_location, self.audio_dir, self.images_dir):
                directory.mkdir(parents=True, exist_ok=True)
            logger.info(f"📂 Almacenamiento inicializado en {self.root_location}")
        except OSError as e:
            logger.exception("❌ No se pudo inicializar el almacenamiento.")
            raise StorageError(f"No se pudo inicializar el almacenamiento: {e}") from e

    @property
    def audio_dir(self) -> Path:
        return self.root_location / AUDIO_DIR

    @property
    def images_dir(self) -> Path:
        return self.root_location / IMAGES_DIR

    # --------------------------------------------------------
    # 🔹 Guardar archivos
    # --------------------------------------------------------
    def store_audio_file(self, file: Optional[UploadedFile]) -> str:
        return self._store_file(file, AUDIO_DIR)

    def store_image_file(self, file: Optional[UploadedFile]) -> str:
        return self._store_file(file, IMAGES_DIR)

    def validate_audio_file(self, file: Optional[UploadedFile]) -> None:
        self._validate_file(file, AUDIO_DIR)

    def validate_image_file(self, file: Optional[UploadedFile]) -> None:
        self._validate_file(file, IMAGES_DIR)

    def _store_file(self, file: Optional[UploadedFile], sub_directory: str) -> str:
        filename, destination = self._validate_file(file, sub_directory)

        try:
            destination.write_bytes(file.content)
        except OSError as e:
            logger.exception(f"❌ Error escribiendo {destination}")
            raise StorageError(f"Error al almacenar el archivo: {e}") from e

        logger.info(f"✅ Archivo guardado: {sub_directory}/{filename} ({file.size} bytes)")
        return f"{UPLOADS_PREFIX}{sub_directory}/{filename}"

    def _validate_file(self, file: Optional[UploadedFile], sub_directory: str) -> Tuple[str, Path]:
        """Comprueba el archivo sin tocar el disco; devuelve el nombre generado y su destino."""
        if file is None or file.is_empty:
            raise ValidationError("No se puede almacenar un archivo vacío.")

        original_filename = clean_path(file.filename)
        if ".." in original_filename:
            raise ValidationError(
                "No se puede almacenar un archivo con ruta relativa fuera del directorio actual."
            )

        extension = get_file_extension(original_filename)
        if sub_directory == AUDIO_DIR and extension not in ALLOWED_AUDIO_EXTENSIONS:
            raise ValidationError("Formato de audio inválido. Permitidos: MP3, WAV, OGG")
        if sub_directory == IMAGES_DIR and extension not in ALLOWED_IMAGE_EXTENSIONS:
            raise ValidationError("Formato de imagen inválido. Permitidos: JPG, JPEG, PNG, GIF, WEBP")

        filename = f"{uuid.uuid4()}_{original_filename}"
        target_dir = self.root_location / sub_directory
        destination = Path(os.path.normpath(target_dir / filename))
        if destination.parent != target_dir:
            raise ValidationError("No se puede almacenar el archivo fuera del directorio actual.")
        return filename, destination

    # --------------------------------------------------------
    # 🔹 Resolver y leer archivos
    # --------------------------------------------------------
    def resolve(self, logical_path: str) -> Optional[Path]:
        """Ruta absoluta de un archivo lógico, o None si queda fuera de la raíz."""
        candidate = (self.root_location / strip_uploads_prefix(logical_path)).resolve()
        if candidate == self.root_location or self.root_location not in candidate.parents:
            return None
        return candidate

    def load(self, logical_path: str) -> BinaryIO:
        file_path = self.resolve(logical_path) if logical_path else None
        if file_path is None or not file_path.is_file() or not os.access(file_path, os.R_OK):
            raise NotFoundError(f"No se pudo leer el archivo: {logical_path}")
        try:
            return open(file_path, "rb")
        except OSError as e:
            raise NotFoundError(f"No se pudo leer el archivo: {logical_path}") from e

    # --------------------------------------------------------
    # 🗑️ Eliminar archivos (best-effort)
    # --------------------------------------------------------
    def delete(self, logical_path: Optional[str]) -> None:
        if not logical_path:
            return

        file_path = self.resolve(logical_path)
        if file_path is None:
            logger.warning(f"⚠️ Ruta fuera del almacenamiento, se ignora: {logical_path}")
            return

        try:
            file_path.unlink(missing_ok=True)
            logger.info(f"🗑️ Archivo eliminado: {logical_path}")
        except OSError as e:
            logger.error(f"❌ Error al eliminar archivo {logical_path}: {e}")
