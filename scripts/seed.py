import logging

from app.core.config import settings
from app.core.logging import setup_logging
from app.db.session import engine, init_db
from app.db.seed import seed_all
from app.features.notes.services import NoteStore

LOGGER = logging.getLogger("scripts.seed")


def run_seed():
    setup_logging()
    init_db()
    store = NoteStore(engine)

    # lancer le seed
    ids = seed_all(store, settings.SEED_PATH)
    LOGGER.info("Seeded %s note(s) into %s", len(ids), settings.DATABASE_URL)


if __name__ == "__main__":
    run_seed()
