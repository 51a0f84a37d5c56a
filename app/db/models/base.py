"""
➡️ But : Définir la structure des tables de la base (ORM).

Contient les classes héritant de SQLModel (ou Base de SQLAlchemy).

Représente les objets persistés. Ici on représente les propriétés communes : l'id et les horodatages.

Les horodatages sont des entiers en millisecondes depuis l'epoch (UTC).

🔹 Avantages :

Tu manipules des objets Python, pas du SQL brut.
"""

import time
from typing import Optional

from sqlmodel import SQLModel, Field


def now_ms() -> int:
    """Horloge par défaut : millisecondes depuis l'epoch."""
    return int(time.time() * 1000)


class BaseModelDB(SQLModel, table=False):
    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: Optional[int] = Field(default=None)
    modified_at: Optional[int] = Field(default=None)
