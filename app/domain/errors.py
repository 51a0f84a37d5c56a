"""
➡️ But : Regrouper les erreurs levées par le NoteStore.

Les appelants attrapent InvalidArgumentError (ou ValueError) pour toute entrée rejetée
avant d'avoir touché la base, et WriteFailureError quand l'écriture SQLite échoue.

Une note introuvable n'est PAS une erreur pour update/delete : le compte vaut 0.
"""


class NoteStoreError(Exception):
    pass


class InvalidArgumentError(NoteStoreError, ValueError):
    pass


class InvalidAddressError(InvalidArgumentError):
    """Adresse qui ne correspond à aucune forme connue (ou interdite pour l'opération)."""


class UnknownColumnError(InvalidArgumentError):
    """Nom de colonne absent de la liste blanche."""


class InvalidFilterError(InvalidArgumentError):
    """Expression de filtre mal formée ou nombre d'arguments incorrect."""


class InvalidCategoryError(InvalidArgumentError):
    pass


class WriteFailureError(NoteStoreError):
    """L'écriture n'a pas abouti ; aucun état partiel n'est conservé."""
