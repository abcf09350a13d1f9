"""
conftest.py - Fixtures compartidas para la suite de MusicStream.

Cada test recibe su propia base SQLite y su propio directorio de uploads.
"""

import os
import tempfile

# La app global de main.py se construye al importar; se aísla del cwd.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("STORAGE_LOCATION", tempfile.mkdtemp(prefix="musicstream-uploads-"))

import pytest
from fastapi.testclient import TestClient

from database.connection import build_engine, build_session_factory, init_db
from models.track import TrackUpload, UploadedFile
from services.storage_service import StorageService
from services.track_service import TrackService


@pytest.fixture
def storage(tmp_path):
    service = StorageService(tmp_path / "uploads")
    service.init()
    return service


@pytest.fixture
def session_factory(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'tracks.db'}")
    init_db(engine)
    yield build_session_factory(engine)
    engine.dispose()


@pytest.fixture
def track_service(session_factory, storage):
    return TrackService(session_factory, storage)


@pytest.fixture
def client(tmp_path):
    from main import create_app

    app = create_app(
        database_url=f"sqlite:///{tmp_path / 'api.db'}",
        storage_location=str(tmp_path / "api-uploads"),
    )
    with TestClient(app) as test_client:
        yield test_client


# =====================================================
# * Helpers
# =====================================================
def make_file(filename="song.mp3", content=b"ID3-fake-audio-bytes", content_type="audio/mpeg"):
    return UploadedFile(filename=filename, content=content, content_type=content_type)


def make_upload(**overrides):
    data = {
        "title": "Sun",
        "artist": "Rae",
        "description": None,
        "category": "pop",
        "duration": 180,
        "audio_file": make_file(),
        "cover_file": None,
    }
    data.update(overrides)
    return TrackUpload(**data)
