"""
➡️ But : Porter l'état d'une session d'édition de note, explicitement, hors du store.

Un NoteEditor = une note ouverte en édition (EDIT) ou fraîchement créée (INSERT),
avec son contenu et sa catégorie d'origine pour pouvoir annuler.

Aucune logique d'affichage ici : l'appelant fournit le texte saisi et décide quand sauver.
"""

import logging
from enum import Enum
from typing import Optional

from app.domain.addresses import CONTENT_ITEM_TYPE, AddressLike, NoteAddress
from app.domain.categories import Category
from app.domain.errors import InvalidAddressError
from app.features.notes.schemas import NoteOut
from app.features.notes.services import NoteStore

LOGGER = logging.getLogger(__name__)

TITLE_MAX_LENGTH = 30


class EditorState(str, Enum):
    EDIT = "edit"
    INSERT = "insert"


class PauseResult(str, Enum):
    SAVED = "saved"
    DELETED = "deleted"
    NOTHING = "nothing"


def derive_title(text: str) -> str:
    """30 premiers caractères, coupés au dernier espace si le texte est plus long."""
    title = text[:TITLE_MAX_LENGTH]
    if len(text) > TITLE_MAX_LENGTH:
        last_space = title.rfind(" ")
        if last_space > 0:
            title = title[:last_space]
    return title


class NoteEditor:
    def __init__(self, store: NoteStore, address: NoteAddress, state: EditorState):
        self.store = store
        self.address = address
        self.state = state
        self.title: Optional[str] = None
        self.current_category = Category.NONE
        self.original_text: Optional[str] = None
        self.original_category = Category.NONE
        self.closed = False

    # --------------- Ouverture ---------------

    @classmethod
    def open_edit(cls, store: NoteStore, address: AddressLike) -> "NoteEditor":
        address = store.address(address)
        if not address.is_item:
            raise InvalidAddressError(f"Not a note address: {address}")
        editor = cls(store, address, EditorState.EDIT)
        if editor.load() is None:
            raise LookupError(f"Note not found: {address}")
        return editor

    @classmethod
    def open_insert(cls, store: NoteStore, collection: Optional[AddressLike] = None) -> "NoteEditor":
        """Crée une note vide (catégorie None) et l'ouvre en mode INSERT."""
        collection = store.address(collection) if collection is not None else store.collection_address
        note_id = store.insert({"category": int(Category.NONE)}, address=collection)
        editor = cls(store, collection.with_id(note_id), EditorState.INSERT)
        editor.load()
        return editor

    def load(self) -> Optional[NoteOut]:
        """Relit la note ; la première lecture fixe le contenu d'origine."""
        note = self.store.get_note(self.address)
        if note is None:
            LOGGER.warning("Note %s disappeared while being edited", self.address)
            return None

        self.title = note.title
        category = _as_category(note.category)
        self.current_category = category if self.state is EditorState.EDIT else Category.NONE
        if self.original_text is None:
            self.original_text = note.body or ""
            self.original_category = category
        return note

    # --------------- Etat ---------------

    def select_category(self, category: Category) -> None:
        self.current_category = Category(category)

    def has_changes(self, text: str) -> bool:
        return text != self.original_text or self.current_category != self.original_category

    def _ensure_open(self) -> None:
        if self.closed:
            raise RuntimeError(f"Editor for {self.address} is closed")

    # --------------- Commandes ---------------

    def save(self, text: str, title: Optional[str] = None, category: Optional[Category] = None) -> int:
        self._ensure_open()
        category = self.current_category if category is None else Category(category)
        values = {
            "modified_at": self.store.clock(),
            "category": int(category),
            "body": text,
        }
        if self.state is EditorState.INSERT:
            values["title"] = title if title is not None else derive_title(text)
        elif title is not None:
            values["title"] = title

        count = self.store.update(self.address, values)
        if "title" in values:
            self.title = values["title"]
        self.original_text = text
        self.original_category = category
        return count

    def pause(self, text: str, finishing: bool = False) -> PauseResult:
        """Sauvegarde automatique quand l'appelant quitte l'écran."""
        if self.closed:
            return PauseResult.NOTHING
        if finishing and not text:
            self.delete()
            return PauseResult.DELETED
        if self.state is EditorState.EDIT:
            self.save(text)
            return PauseResult.SAVED
        if text:
            # INSERT : le texte entier sert de titre
            self.save(text, title=text)
            self.state = EditorState.EDIT
            return PauseResult.SAVED
        return PauseResult.NOTHING

    def cancel(self) -> None:
        """EDIT : restaure contenu et catégorie d'origine. INSERT : supprime la note."""
        self._ensure_open()
        if self.state is EditorState.EDIT:
            self.store.update(
                self.address,
                {"body": self.original_text, "category": int(self.original_category)},
            )
            self.closed = True
        else:
            self.delete()

    def delete(self) -> int:
        self._ensure_open()
        count = self.store.delete(self.address)
        self.closed = True
        return count

    def paste(self, source: AddressLike) -> int:
        """
        Colle une note (adresse de type note : titre, corps et catégorie copiés)
        ou, à défaut, le texte brut de `source`.
        """
        self._ensure_open()
        text: Optional[str] = None
        title: Optional[str] = None
        category = Category.NONE

        try:
            address = self.store.address(source)
        except InvalidAddressError:
            address = None
        if address is not None and self.store.get_type(address) == CONTENT_ITEM_TYPE:
            note = self.store.get_note(address)
            if note is not None:
                text, title, category = note.body, note.title, _as_category(note.category)

        if text is None:
            text = str(source)
        count = self.save(text, title, category)
        self.state = EditorState.EDIT
        return count


def _as_category(value) -> Category:
    try:
        return Category(value)
    except ValueError:
        return Category.NONE
