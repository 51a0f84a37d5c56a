"""
➡️ But : Décrire les adresses reconnues par le NoteStore.

Trois formes seulement :

content://<authority>/notes              -> toute la collection
content://<authority>/notes/<id>         -> une note
content://<authority>/live_folders/notes -> la collection, vue "live folder"

Toute autre forme lève InvalidAddressError.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union
from urllib.parse import urlsplit

from app.core.config import settings
from app.domain.errors import InvalidAddressError

SCHEME = "content"

CONTENT_TYPE = "vnd.android.cursor.dir/vnd.google.note"
CONTENT_ITEM_TYPE = "vnd.android.cursor.item/vnd.google.note"

_ID_SEGMENT = re.compile(r"[0-9]+")


class AddressKind(str, Enum):
    COLLECTION = "notes"
    ITEM = "note_id"
    LIVE_FOLDER = "live_folder"


@dataclass(frozen=True)
class NoteAddress:
    kind: AddressKind
    note_id: Optional[int] = None
    authority: str = field(default_factory=lambda: settings.AUTHORITY)

    def __post_init__(self):
        if self.kind is AddressKind.ITEM:
            if isinstance(self.note_id, bool) or not isinstance(self.note_id, int) or self.note_id < 0:
                raise InvalidAddressError(f"Invalid note id {self.note_id!r}")
        elif self.note_id is not None:
            raise InvalidAddressError(f"{self.kind.value} address takes no id")

    # ---------- Constructeurs ----------

    @classmethod
    def collection(cls, authority: Optional[str] = None) -> "NoteAddress":
        return cls(AddressKind.COLLECTION, authority=authority or settings.AUTHORITY)

    @classmethod
    def item(cls, note_id: int, authority: Optional[str] = None) -> "NoteAddress":
        return cls(AddressKind.ITEM, note_id, authority=authority or settings.AUTHORITY)

    @classmethod
    def live_folder(cls, authority: Optional[str] = None) -> "NoteAddress":
        return cls(AddressKind.LIVE_FOLDER, authority=authority or settings.AUTHORITY)

    def with_id(self, note_id: int) -> "NoteAddress":
        """Adresse d'une note sous cette collection (ContentUris.withAppendedId)."""
        if self.kind is not AddressKind.COLLECTION:
            raise InvalidAddressError(f"Cannot append an id to {self}")
        return NoteAddress.item(note_id, authority=self.authority)

    # ---------- Forme ----------

    @property
    def segments(self) -> Tuple[str, ...]:
        if self.kind is AddressKind.COLLECTION:
            return ("notes",)
        if self.kind is AddressKind.ITEM:
            return ("notes", str(self.note_id))
        return ("live_folders", "notes")

    @property
    def is_item(self) -> bool:
        return self.kind is AddressKind.ITEM

    @property
    def mime_type(self) -> str:
        return CONTENT_ITEM_TYPE if self.is_item else CONTENT_TYPE

    def is_ancestor_of(self, other: "NoteAddress") -> bool:
        """True si other est strictement sous self (ex: notes -> notes/3)."""
        if self.authority != other.authority:
            return False
        mine, theirs = self.segments, other.segments
        return len(theirs) > len(mine) and theirs[: len(mine)] == mine

    def __str__(self) -> str:
        return f"{SCHEME}://{self.authority}/" + "/".join(self.segments)


AddressLike = Union[NoteAddress, str]


def parse_address(value: AddressLike, authority: Optional[str] = None) -> NoteAddress:
    """
    Convertit une chaîne en NoteAddress (UriMatcher).
    Un NoteAddress déjà construit est renvoyé tel quel.
    """
    if isinstance(value, NoteAddress):
        return value
    if not isinstance(value, str):
        raise InvalidAddressError(f"Unknown address {value!r}")

    authority = authority or settings.AUTHORITY
    parts = urlsplit(value)
    if parts.scheme != SCHEME or parts.netloc != authority or parts.query or parts.fragment:
        raise InvalidAddressError(f"Unknown address {value}")

    segments = parts.path.strip("/").split("/")
    if segments == ["notes"]:
        return NoteAddress.collection(authority)
    if len(segments) == 2 and segments[0] == "notes" and _ID_SEGMENT.fullmatch(segments[1]):
        return NoteAddress.item(int(segments[1]), authority)
    if segments == ["live_folders", "notes"]:
        return NoteAddress.live_folder(authority)
    raise InvalidAddressError(f"Unknown address {value}")
