"""
➡️ But : Prévenir les abonnés quand des notes changent.

register(address, observer) : l'observer sera appelé avec l'adresse modifiée.

notify_change(address) appelle :
- les observers inscrits sur cette adresse,
- ceux inscrits sur un ancêtre avec notify_for_descendants=True (notes <- notes/3),
- ceux inscrits sur un descendant (notes -> notes/3).

Livraison synchrone, sans ordre garanti entre abonnés.
Un observer qui lève une exception est journalisé et n'empêche pas les autres d'être prévenus.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Callable, List

from app.domain.addresses import AddressLike, NoteAddress, parse_address

LOGGER = logging.getLogger(__name__)

Observer = Callable[[NoteAddress], None]


@dataclass(frozen=True)
class _Registration:
    address: NoteAddress
    observer: Observer
    notify_for_descendants: bool


class ChangeNotifier:
    def __init__(self):
        self._registrations: List[_Registration] = []
        self._lock = threading.Lock()

    def register(
        self,
        address: AddressLike,
        observer: Observer,
        notify_for_descendants: bool = True,
    ) -> None:
        registration = _Registration(parse_address(address), observer, notify_for_descendants)
        with self._lock:
            self._registrations.append(registration)

    def unregister(self, observer: Observer) -> bool:
        """Retire toutes les inscriptions de cet observer ; False s'il n'était pas inscrit."""
        with self._lock:
            before = len(self._registrations)
            self._registrations = [r for r in self._registrations if r.observer != observer]
            return len(self._registrations) != before

    def observers_for(self, address: AddressLike) -> List[Observer]:
        address = parse_address(address)
        with self._lock:
            registrations = list(self._registrations)
        return [
            r.observer
            for r in registrations
            if r.address == address
            or (r.notify_for_descendants and r.address.is_ancestor_of(address))
            or address.is_ancestor_of(r.address)
        ]

    def notify_change(self, address: AddressLike) -> int:
        """Prévient les abonnés concernés et retourne leur nombre."""
        address = parse_address(address)
        observers = self.observers_for(address)
        LOGGER.debug("Change at %s, notifying %s observer(s)", address, len(observers))
        for observer in observers:
            try:
                observer(address)
            except Exception:
                LOGGER.exception("Observer %r failed for change at %s", observer, address)
        return len(observers)
