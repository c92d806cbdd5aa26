"""
Contactbook core: clean-architecture layout.

- domain: the Contact entity. No outer dependencies.
- application: use cases (ContactService), ports (ContactStore), validation, export, DTOs.
- infrastructure: adapters (InMemoryContactStore, Neo4jContactStore).
"""

from contactbook.application import (
    ContactNotFound,
    ContactService,
    ContactStore,
    CreateRejected,
    EditRejected,
    EmailConflict,
    EmailTaken,
    InvalidEmail,
    InvalidName,
    StoreError,
    export_lines,
)
from contactbook.domain import Contact
from contactbook.infrastructure import InMemoryContactStore, Neo4jContactStore

__all__ = [
    "Contact",
    "ContactNotFound",
    "ContactService",
    "ContactStore",
    "CreateRejected",
    "EditRejected",
    "EmailConflict",
    "EmailTaken",
    "InMemoryContactStore",
    "InvalidEmail",
    "InvalidName",
    "Neo4jContactStore",
    "StoreError",
    "export_lines",
]
