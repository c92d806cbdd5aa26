"""Email syntax and uniqueness checks used by the contact service."""

from email_validator import EmailNotValidError, validate_email

from contactbook.application.dto import EmailTaken, InvalidEmail, InvalidName
from contactbook.application.ports import ContactStore


def validate_name(name: str | None) -> InvalidName | None:
    """Return InvalidName for a missing or blank name, None otherwise."""
    if not name or not name.strip():
        return InvalidName(reason="Name is required.")
    return None


def validate_email_syntax(email: str | None) -> InvalidEmail | None:
    """Return InvalidEmail if the string is not local-part@domain with a dotted domain, None otherwise.

    Structural checks run first so the common mistakes get a short message;
    the remaining grammar (allowed characters, label lengths) is left to
    email-validator. Deliverability (DNS) is not checked.
    """
    raw = email or ""
    if not raw.strip():
        return InvalidEmail(reason="Email is required.")
    if raw.count("@") != 1:
        return InvalidEmail(reason="Email must contain exactly one @-sign.")
    local, domain = raw.split("@")
    if not local:
        return InvalidEmail(reason="There must be something before the @-sign.")
    if "." not in domain:
        return InvalidEmail(reason="The part after the @-sign must contain a period.")
    try:
        validate_email(raw, check_deliverability=False)
    except EmailNotValidError as e:
        return InvalidEmail(reason=str(e))
    return None


def check_email_available(
    store: ContactStore, email: str, excluding_id: int | None = None
) -> EmailTaken | None:
    """Return EmailTaken if another contact holds this email.

    A match whose id equals excluding_id is not a conflict, so a contact
    can keep its own email on edit.
    """
    existing = store.find_by_email(email)
    if existing is None or existing.id == excluding_id:
        return None
    return EmailTaken(email=email, contact_id=existing.id)
