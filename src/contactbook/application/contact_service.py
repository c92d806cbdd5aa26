"""Contact create, read, update, delete, list and search."""

import logging
import threading

from contactbook.application.dto import (
    ContactNotFound,
    CreateRejected,
    EditRejected,
    EmailTaken,
    ValidationError,
)
from contactbook.application.ports import ContactStore, EmailConflict
from contactbook.application.validation import (
    check_email_available,
    validate_email_syntax,
    validate_name,
)
from contactbook.domain import Contact

logger = logging.getLogger(__name__)

EMAIL_TAKEN_MESSAGE = "This email is already occupied"


def _message(error: ValidationError) -> str:
    if isinstance(error, EmailTaken):
        return EMAIL_TAKEN_MESSAGE
    return error.reason


class ContactService:
    """Validates input and applies it to the store. Knows nothing about HTTP or templates.

    Create and update hold a lock from the availability check until the write
    returns, so two writers cannot both claim the same email through this
    service. Stores shared between processes back this up with their own
    constraint and raise EmailConflict, which is reported as EmailTaken.
    StoreError from any operation propagates to the caller.
    """

    def __init__(self, store: ContactStore) -> None:
        self._store = store
        self._write_lock = threading.Lock()

    @property
    def store(self) -> ContactStore:
        """The store behind this service. The export reads from it directly."""
        return self._store

    def _validate(self, name: str, email: str) -> ValidationError | None:
        return validate_name(name) or validate_email_syntax(email)

    def create_contact(self, name: str, email: str) -> Contact | CreateRejected:
        """Create a contact. Rejections echo the submitted name and email unchanged."""
        error = self._validate(name, email)
        if error is None:
            with self._write_lock:
                error = check_email_available(self._store, email)
                if error is None:
                    try:
                        contact_id = self._store.add(name, email)
                    except EmailConflict:
                        error = EmailTaken(email=email)
        if error is not None:
            logger.info("Create rejected for %r: %s", email, _message(error))
            return CreateRejected(
                message=_message(error),
                submitted_name=name,
                submitted_email=email,
                error=error,
            )
        logger.info("Created contact %s", contact_id)
        return Contact(id=contact_id, name=name, email=email)

    def get_contact(self, contact_id: int) -> Contact | ContactNotFound:
        """Return the contact, or ContactNotFound."""
        contact = self._store.get(contact_id)
        if contact is None:
            return ContactNotFound(contact_id=contact_id)
        return contact

    def update_contact(
        self, contact_id: int, name: str, email: str
    ) -> Contact | EditRejected | ContactNotFound:
        """Replace name and email of a contact. The contact may keep its own email.

        A missing id is reported as ContactNotFound whatever the submitted values are.
        """
        with self._write_lock:
            if self._store.get(contact_id) is None:
                return ContactNotFound(contact_id=contact_id)
            error = self._validate(name, email) or check_email_available(
                self._store, email, excluding_id=contact_id
            )
            updated = False
            if error is None:
                try:
                    updated = self._store.edit(contact_id, name, email)
                except EmailConflict:
                    error = EmailTaken(email=email)
        if error is not None:
            logger.info("Edit of contact %s rejected: %s", contact_id, _message(error))
            return EditRejected(
                contact_id=contact_id,
                message=_message(error),
                submitted_name=name,
                submitted_email=email,
                error=error,
            )
        if not updated:
            return ContactNotFound(contact_id=contact_id)
        logger.info("Updated contact %s", contact_id)
        return Contact(id=contact_id, name=name, email=email)

    def delete_contact(self, contact_id: int) -> None:
        """Delete a contact. Deleting an id that does not exist is not an error."""
        with self._write_lock:
            removed = self._store.remove(contact_id)
        if removed:
            logger.info("Deleted contact %s", contact_id)
        else:
            logger.info("Delete of missing contact %s ignored", contact_id)

    def list_contacts(self, query: str | None = None) -> list[Contact]:
        """Return all contacts, or those whose name contains query when one is given.

        None means no query; an empty string is a query that matches every name.
        """
        if query is None:
            return self._store.list_all()
        return self._store.search_by_name(query)
