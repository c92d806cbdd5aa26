"""Application layer: use cases, ports, validation, and DTOs. Depends only on domain."""

from contactbook.application.contact_service import ContactService
from contactbook.application.dto import (
    ContactNotFound,
    CreateRejected,
    EditRejected,
    EmailTaken,
    InvalidEmail,
    InvalidName,
)
from contactbook.application.export import EXPORT_FILENAME, export_lines
from contactbook.application.ports import ContactStore, EmailConflict, StoreError
from contactbook.application.validation import (
    check_email_available,
    validate_email_syntax,
)

__all__ = [
    "EXPORT_FILENAME",
    "ContactNotFound",
    "ContactService",
    "ContactStore",
    "CreateRejected",
    "EditRejected",
    "EmailConflict",
    "EmailTaken",
    "InvalidEmail",
    "InvalidName",
    "StoreError",
    "check_email_available",
    "export_lines",
    "validate_email_syntax",
]
