import pytest

from app.core.config import Settings
from app.db.session import build_engine, init_db
from app.features.notes.services import NoteStore


class StepClock:
    """Horloge de test : chaque appel avance d'un pas fixe."""

    def __init__(self, start: int = 1_700_000_000_000, step: int = 1000):
        self.now = start
        self.step = step

    def __call__(self) -> int:
        self.now += self.step
        return self.now


@pytest.fixture
def engine(tmp_path):
    eng = build_engine(f"sqlite:///{tmp_path / 'notes.db'}", echo=False)
    yield eng
    eng.dispose()


@pytest.fixture
def db(engine):
    init_db(engine)
    return engine


@pytest.fixture
def test_settings():
    return Settings(_env_file=None, ENV="test", TITLE_DEFAULT="<Untitled>", NOTE_DEFAULT="")


@pytest.fixture
def clock():
    return StepClock()


@pytest.fixture
def store(db, test_settings, clock):
    return NoteStore(db, settings=test_settings, clock=clock)


@pytest.fixture
def collection(store):
    return store.collection_address
