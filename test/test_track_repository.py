"""
Unit tests for the track repository queries.
"""

from datetime import datetime

import pytest
from sqlalchemy.exc import IntegrityError

from database.connection import session_scope
from models.track import Track
from repositories import track_repository


def new_track(title, artist, category="pop"):
    return Track(
        title=title,
        artist=artist,
        description="",
        category=category,
        duration=120,
        audio_url=f"/uploads/audio/{title}.mp3",
        added_date=datetime.now(),
    )


@pytest.fixture
def seeded(session_factory):
    with session_scope(session_factory) as db:
        for title, artist, category in [
            ("Night Drive", "Kavinsky", "synthwave"),
            ("Nightcall", "Kavinsky", "synthwave"),
            ("Blue 100%", "Mono", "ambient"),
        ]:
            track_repository.save(db, new_track(title, artist, category))
    return session_factory


def test_save_assigns_id(session_factory):
    with session_scope(session_factory) as db:
        saved = track_repository.save(db, new_track("A", "B"))
        assert saved.id is not None


def test_find_by_id_missing(session_factory):
    with session_scope(session_factory) as db:
        assert track_repository.find_by_id(db, 42) is None


def test_search_title_or_artist(seeded):
    with session_scope(seeded) as db:
        assert [t.title for t in track_repository.search(db, "night")] == ["Night Drive", "Nightcall"]
        assert [t.title for t in track_repository.search(db, "MONO")] == ["Blue 100%"]
        assert [t.title for t in track_repository.search(db, "100%")] == ["Blue 100%"]


def test_containing_finders(seeded):
    with session_scope(seeded) as db:
        assert len(track_repository.find_by_artist_containing(db, "kav")) == 2
        assert [t.title for t in track_repository.find_by_title_containing(db, "call")] == ["Nightcall"]


def test_find_by_category_is_exact(seeded):
    with session_scope(seeded) as db:
        assert len(track_repository.find_by_category(db, "synthwave")) == 2
        assert track_repository.find_by_category(db, "synth") == []


def test_delete(seeded):
    with session_scope(seeded) as db:
        track = track_repository.find_all(db)[0]
        track_repository.delete(db, track)
    with session_scope(seeded) as db:
        assert len(track_repository.find_all(db)) == 2


def test_scope_rolls_back_on_error(session_factory):
    with pytest.raises(ValueError):
        with session_scope(session_factory) as db:
            track_repository.save(db, new_track("Ghost", "Nobody"))
            raise ValueError("abort")
    with session_scope(session_factory) as db:
        assert track_repository.find_all(db) == []


def test_audio_url_is_required(session_factory):
    track = new_track("Silent", "Nobody")
    track.audio_url = None
    with pytest.raises(IntegrityError):
        with session_scope(session_factory) as db:
            track_repository.save(db, track)
