"""Plain-text export of the whole directory."""

from collections.abc import Iterator

from contactbook.application.ports import ContactStore
from contactbook.domain import Contact

EXPORT_FILENAME = "contacts.txt"


def format_line(contact: Contact) -> str:
    return f"name: '{contact.name}'\temail: '{contact.email}'\n"


def export_lines(store: ContactStore) -> Iterator[str]:
    """Yield one line per contact in store order, reading contacts as it goes."""
    for contact in store.iter_all():
        yield format_line(contact)
