"""In-memory implementation of ContactStore (no DB)."""

import itertools
import threading
from collections.abc import Iterator

from contactbook.application.ports import EmailConflict
from contactbook.domain import Contact


class InMemoryContactStore:
    """Stores contacts in memory, keyed by id. Ids come from a counter and are never reused.

    Emails are kept unique here as well: a write that would duplicate an email
    raises EmailConflict, like a database unique constraint would.
    """

    def __init__(self) -> None:
        self._by_id: dict[int, Contact] = {}
        self._ids = itertools.count(1)
        self._lock = threading.RLock()

    def _snapshot(self) -> list[Contact]:
        with self._lock:
            return [self._by_id[cid] for cid in sorted(self._by_id)]

    def _email_owner(self, email: str) -> int | None:
        for contact in self._by_id.values():
            if contact.email == email:
                return contact.id
        return None

    def get(self, contact_id: int) -> Contact | None:
        with self._lock:
            return self._by_id.get(contact_id)

    def list_all(self) -> list[Contact]:
        return self._snapshot()

    def iter_all(self) -> Iterator[Contact]:
        yield from self._snapshot()

    def find_by_email(self, email: str) -> Contact | None:
        with self._lock:
            owner = self._email_owner(email)
            return self._by_id[owner] if owner is not None else None

    def search_by_name(self, query: str) -> list[Contact]:
        needle = (query or "").lower()
        return [c for c in self._snapshot() if needle in c.name.lower()]

    def add(self, name: str, email: str) -> int:
        with self._lock:
            if self._email_owner(email) is not None:
                raise EmailConflict(email)
            contact_id = next(self._ids)
            self._by_id[contact_id] = Contact(id=contact_id, name=name, email=email)
            return contact_id

    def edit(self, contact_id: int, name: str, email: str) -> bool:
        with self._lock:
            if contact_id not in self._by_id:
                return False
            owner = self._email_owner(email)
            if owner is not None and owner != contact_id:
                raise EmailConflict(email)
            self._by_id[contact_id] = Contact(id=contact_id, name=name, email=email)
            return True

    def remove(self, contact_id: int) -> bool:
        with self._lock:
            return self._by_id.pop(contact_id, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_id)
