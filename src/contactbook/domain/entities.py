"""Domain entities: Contact."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Contact:
    """
    A person in the directory, reachable by email.
    The id is assigned by the store and never changes; name and email are
    replaced as a whole on edit.
    """

    id: int
    name: str
    email: str

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValueError("Contact name must be non-empty.")
