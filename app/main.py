"""
➡️ But : assembler toutes les pièces du puzzle.

Configure le logging, amène la base SQLite à la dernière version du schéma
et construit le NoteStore partagé par les appelants (liste, éditeur...).

Lancé directement (python -m app.main), affiche la liste des notes.

🔹 Avantages :

Point unique d'initialisation : create_store() renvoie un store prêt à l'emploi.
"""

import logging
from typing import Optional

from sqlalchemy.engine import Engine

from app.core.config import settings
from app.core.logging import setup_logging
from app.db.session import engine as default_engine, init_db
from app.features.notes.listing import NotesListing
from app.features.notes.services import NoteStore

LOGGER = logging.getLogger(__name__)


def create_store(bind: Optional[Engine] = None) -> NoteStore:
    bind = bind or default_engine
    version = init_db(bind)
    LOGGER.info("%s ready (schema version %s)", settings.APP_NAME, version)
    return NoteStore(bind)


def main() -> None:
    setup_logging()
    store = create_store()
    listing = NotesListing(store)
    for item in listing.refresh():
        print(f"{item.id:>4}  {item.modified:16}  {item.category_label:12} {item.title or ''}")
    listing.close()


if __name__ == "__main__":
    main()
