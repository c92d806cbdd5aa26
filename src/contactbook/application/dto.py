"""Result types for the contact use cases. Each use case returns one of these or a Contact."""

from dataclasses import dataclass

# --- validation failures ---


@dataclass(frozen=True)
class InvalidEmail:
    """Email is not a syntactically valid address."""

    reason: str


@dataclass(frozen=True)
class EmailTaken:
    """Another contact already uses this email."""

    email: str
    contact_id: int | None = None


@dataclass(frozen=True)
class InvalidName:
    """Name is missing or blank."""

    reason: str


ValidationError = InvalidEmail | EmailTaken | InvalidName


# --- create / update rejections ---


@dataclass(frozen=True)
class CreateRejected:
    """Contact was not created. Carries the submitted values so the form can be shown again."""

    message: str
    submitted_name: str
    submitted_email: str
    error: ValidationError


@dataclass(frozen=True)
class EditRejected:
    """Contact was not changed. Carries the target id and the submitted values."""

    contact_id: int
    message: str
    submitted_name: str
    submitted_email: str
    error: ValidationError


# --- read ---


@dataclass(frozen=True)
class ContactNotFound:
    """No contact with this id."""

    contact_id: int
