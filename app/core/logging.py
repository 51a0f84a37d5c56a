"""
➡️ But : Configurer le logging de l'application en un seul endroit.

Chaque module déclare son propre logger :

    LOGGER = logging.getLogger(__name__)

setup_logging() installe un handler console sur le logger racine (une seule fois).
"""

import logging
from typing import Optional

from app.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(level: Optional[str] = None) -> None:
    """Configure le logger racine au niveau demandé (défaut : settings.LOG_LEVEL)."""
    level_name = (level or settings.LOG_LEVEL).upper()
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format=LOG_FORMAT)
    root.setLevel(level_name)
