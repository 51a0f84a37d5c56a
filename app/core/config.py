"""
➡️ But : Centraliser tous les paramètres configurables (nom d’app, chemin DB, valeurs par défaut des notes, etc.)

Utilise pydantic-settings pour charger automatiquement les variables d’environnement (.env, variables système…).

Fournit un objet settings unique, que tu importes ailleurs :

from app.core.config import settings
print(settings.APP_NAME)


🔹 Avantages :

Plus propre que des constantes éparpillées dans le code.

Facilite le passage entre environnements (dev / prod / test).

Le NoteStore reçoit ses Settings en argument : les tests peuvent en construire d'autres.
"""

from typing import List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # -----------------------------
    # App
    # -----------------------------
    APP_NAME: str = "NotePad-Back"
    ENV: str = "dev"  # dev | prod | test
    LOG_LEVEL: str = "INFO"

    # -----------------------------
    # DB
    # -----------------------------
    SQLITE_PATH: str = "note_pad.db"  # fichier SQLite
    # Si tu veux forcer une URL différente, définis DATABASE_URL dans l'env.
    DATABASE_URL: Optional[str] = None

    # -----------------------------
    # Adresses
    # -----------------------------
    AUTHORITY: str = "com.google.provider.NotePad"

    # -----------------------------
    # Notes
    # -----------------------------
    DEFAULT_SORT_ORDER: str = "id DESC"
    TITLE_DEFAULT: str = "<Untitled>"
    NOTE_DEFAULT: str = ""

    # Noms affichés, indexés par valeur de Category (None, Work, Personal, Study)
    CATEGORY_NAMES: List[str] = ["None", "Work", "Personal", "Study"]
    UNKNOWN_CATEGORY_NAME: str = "Unknown"
    # False = accepte n'importe quel entier comme catégorie (comportement historique)
    STRICT_CATEGORIES: bool = True

    # -----------------------------
    # Seed
    # -----------------------------
    SEED_PATH: str = "app/db/seed_data.yaml"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
    }

    @field_validator("CATEGORY_NAMES")
    @classmethod
    def _four_category_names(cls, value: List[str]) -> List[str]:
        if len(value) != 4:
            raise ValueError("CATEGORY_NAMES must hold exactly 4 names")
        return value

    # -----------------------------
    # Post-process values
    # -----------------------------
    def model_post_init(self, __context): # appelée automatiquement
        # DATABASE_URL par défaut depuis SQLITE_PATH si non fourni
        if not self.DATABASE_URL:
            object.__setattr__(self, "DATABASE_URL", f"sqlite:///{self.SQLITE_PATH}")


# Instance globale importable partout
settings = Settings()
