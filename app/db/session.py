"""
➡️ But : Configurer la base SQLite et gérer les sessions de base de données.

engine : connexion à la base SQLite (sqlite:///note_pad.db).

init_db() : amène le schéma à la dernière version (app.db.migrations).

get_session() : ouvre une session, la fournit à l'appelant, puis la ferme proprement.

🔹 Avantages :

Un seul endroit pour gérer les connexions DB.

Un seul Engine partagé par tous les appelants : SQLite sérialise les écritures.
"""

from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from sqlmodel import Session, create_engine
from sqlalchemy.engine import Engine

from app.core.config import settings
from app.db.migrations import migrate


def build_engine(url: Optional[str] = None, *, echo: Optional[bool] = None) -> Engine:
    url = url or settings.DATABASE_URL
    assert url, "DATABASE_URL must be set"

    if not url.startswith("sqlite:"):
        raise ValueError(f"Only SQLite databases are supported, got {url}")

    connect_args: Dict[str, Any] = {
        # Requis quand plusieurs threads d'appelants partagent l'engine
        "check_same_thread": False,
    }

    # echo seulement en dev pour ne pas polluer les logs en prod
    return create_engine(
        url,
        echo=(settings.ENV == "dev") if echo is None else echo,
        connect_args=connect_args,
    )


engine: Engine = build_engine()


def init_db(bind: Optional[Engine] = None) -> int:
    """
    Crée ou met à jour le schéma et retourne sa version.
    """
    return migrate(bind or engine)


@contextmanager
def get_session(bind: Optional[Engine] = None) -> Iterator[Session]:
    """
    Fournit une session courte.
    Utilisation :
        with get_session(engine) as session:
            ...
    """
    with Session(bind or engine) as session:
        yield session
