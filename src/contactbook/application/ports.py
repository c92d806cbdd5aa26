"""Application ports (interfaces). Implemented by infrastructure adapters."""

from collections.abc import Iterator
from typing import Protocol

from contactbook.domain import Contact


class StoreError(Exception):
    """The underlying persistence failed (I/O, connection, constraint)."""


class EmailConflict(StoreError):
    """The store's own uniqueness constraint rejected a write for this email."""

    def __init__(self, email: str) -> None:
        super().__init__(f"Email already stored: {email}")
        self.email = email


class ContactStore(Protocol):
    """Owns the persisted contacts. Every method may raise StoreError."""

    def get(self, contact_id: int) -> Contact | None:
        """Return the contact with the given id, or None."""
        ...

    def list_all(self) -> list[Contact]:
        """Return all contacts ordered by id."""
        ...

    def iter_all(self) -> Iterator[Contact]:
        """Yield all contacts ordered by id, one at a time."""
        ...

    def find_by_email(self, email: str) -> Contact | None:
        """Return the contact whose email equals the given string exactly, or None."""
        ...

    def search_by_name(self, query: str) -> list[Contact]:
        """Return contacts whose name contains query (case-insensitive). Empty query matches all."""
        ...

    def add(self, name: str, email: str) -> int:
        """Store a new contact and return its freshly assigned id."""
        ...

    def edit(self, contact_id: int, name: str, email: str) -> bool:
        """Replace name and email. Returns True if updated, False if not found."""
        ...

    def remove(self, contact_id: int) -> bool:
        """Delete the contact. Returns True if removed, False if not found."""
        ...
