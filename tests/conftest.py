"""Shared fixtures for the Jotter test-suite."""

from pathlib import Path

import pytest

from jotter.config import load_config
from jotter.db import NoteStore
from jotter.session import NoteSession
from jotter.state import KeyValueStore


class FakeClock:
    """Millisecond clock that advances by ``step`` on every read."""

    def __init__(self, start: int = 1_700_000_000_000, step: int = 1000):
        self.now = start
        self.step = step

    def __call__(self) -> int:
        value = self.now
        self.now += self.step
        return value


@pytest.fixture(autouse=True)
def jotter_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point config and data directories at a temporary location."""
    home = tmp_path / "home"
    monkeypatch.setenv("JOTTER_HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.delenv("JOTTER_LOG_LEVEL", raising=False)
    return home


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def db_path(jotter_env: Path) -> Path:
    return jotter_env / "NotesAppDB.db"


@pytest.fixture
def store(db_path: Path, clock: FakeClock) -> NoteStore:
    """An unopened store with a deterministic clock."""
    store = NoteStore(db_path, clock=clock)
    yield store
    store.close()


@pytest.fixture
def notices() -> list[str]:
    return []


@pytest.fixture
def session(store: NoteStore, jotter_env: Path, notices: list[str]) -> NoteSession:
    """A session with a short draft debounce that records notices."""
    config = load_config()
    config["drafts"]["debounce_seconds"] = 0.01
    session = NoteSession(
        store=store,
        kv=KeyValueStore(jotter_env / "state.db"),
        config=config,
        notify=notices.append,
    )
    yield session
    session.close()
