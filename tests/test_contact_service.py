"""Unit tests for ContactService. No HTTP; in-memory store only."""

import threading

import pytest

from contactbook.application import (
    ContactNotFound,
    ContactService,
    CreateRejected,
    EditRejected,
    EmailConflict,
    EmailTaken,
    InvalidEmail,
    InvalidName,
    StoreError,
)
from contactbook.domain import Contact
from contactbook.infrastructure import InMemoryContactStore


def _service() -> ContactService:
    return ContactService(store=InMemoryContactStore())


def test_create_then_read_returns_same_values() -> None:
    service = _service()
    created = service.create_contact("Alice", "alice@example.org")
    assert isinstance(created, Contact)
    assert created.name == "Alice"

    found = service.get_contact(created.id)
    assert isinstance(found, Contact)
    assert found.name == "Alice"
    assert found.email == "alice@example.org"


def test_round_trip_create_update_delete() -> None:
    service = _service()
    created = service.create_contact("Ada Lovelace", "ada@example.org")
    assert isinstance(created, Contact)
    assert created.id == 1

    found = service.get_contact(1)
    assert found == Contact(id=1, name="Ada Lovelace", email="ada@example.org")

    updated = service.update_contact(1, "Ada L.", "ada@example.org")
    assert updated == Contact(id=1, name="Ada L.", email="ada@example.org")
    assert service.get_contact(1).name == "Ada L."

    assert service.delete_contact(1) is None
    assert service.get_contact(1) == ContactNotFound(contact_id=1)


def test_duplicate_email_rejected_with_submitted_values() -> None:
    service = _service()
    assert isinstance(service.create_contact("A", "x@x.com"), Contact)

    r = service.create_contact("B", "x@x.com")
    assert isinstance(r, CreateRejected)
    assert isinstance(r.error, EmailTaken)
    assert r.error.contact_id == 1
    assert r.submitted_name == "B"
    assert r.submitted_email == "x@x.com"
    assert r.message == "This email is already occupied"
    assert len(service.list_contacts()) == 1


@pytest.mark.parametrize(
    "email",
    ["", "plainaddress", "no-domain-dot@localhost", "two@@example.com", "a@b@example.com", "@example.com"],
)
def test_malformed_email_rejected_and_not_stored(email: str) -> None:
    service = _service()
    r = service.create_contact("Bob", email)
    assert isinstance(r, CreateRejected)
    assert isinstance(r.error, InvalidEmail)
    assert r.message
    assert r.submitted_name == "Bob"
    assert r.submitted_email == email
    assert service.list_contacts() == []


def test_blank_name_rejected() -> None:
    service = _service()
    r = service.create_contact("   ", "carol@example.org")
    assert isinstance(r, CreateRejected)
    assert isinstance(r.error, InvalidName)
    assert "name" in r.message.lower()
    assert service.list_contacts() == []


def test_update_keeps_own_email() -> None:
    service = _service()
    created = service.create_contact("Dave", "dave@example.org")
    assert service.store.find_by_email("dave@example.org").id == created.id

    r = service.update_contact(created.id, "David", "dave@example.org")
    assert isinstance(r, Contact)
    assert r.id == created.id
    assert r.name == "David"


def test_update_to_other_contacts_email_rejected() -> None:
    service = _service()
    first = service.create_contact("Eve", "eve@example.org")
    second = service.create_contact("Frank", "frank@example.org")

    r = service.update_contact(second.id, "Frank", "eve@example.org")
    assert isinstance(r, EditRejected)
    assert isinstance(r.error, EmailTaken)
    assert r.contact_id == second.id
    assert r.submitted_name == "Frank"
    assert r.submitted_email == "eve@example.org"
    assert service.get_contact(second.id).email == "frank@example.org"
    assert service.get_contact(first.id).email == "eve@example.org"


def test_update_with_invalid_email_rejected() -> None:
    service = _service()
    created = service.create_contact("Grace", "grace@example.org")
    r = service.update_contact(created.id, "Grace H.", "grace-at-example")
    assert isinstance(r, EditRejected)
    assert isinstance(r.error, InvalidEmail)
    assert r.submitted_name == "Grace H."
    assert service.get_contact(created.id).name == "Grace"


def test_update_unknown_id_returns_not_found() -> None:
    service = _service()
    service.create_contact("Taken", "taken@example.org")

    assert service.update_contact(42, "Nobody", "nobody@example.org") == ContactNotFound(contact_id=42)
    assert service.update_contact(42, "Nobody", "taken@example.org") == ContactNotFound(contact_id=42)
    assert service.update_contact(42, "", "not-an-email") == ContactNotFound(contact_id=42)
    assert len(service.list_contacts()) == 1


def test_delete_missing_id_is_silent() -> None:
    service = _service()
    service.create_contact("Hank", "hank@example.org")
    before = service.list_contacts()

    assert service.delete_contact(99) is None
    assert service.list_contacts() == before


def test_deleted_ids_are_not_reused() -> None:
    service = _service()
    first = service.create_contact("Ivan", "ivan@example.org")
    service.delete_contact(first.id)
    second = service.create_contact("Ivan", "ivan@example.org")
    assert second.id != first.id


def test_list_returns_store_order() -> None:
    service = _service()
    for name in ("Charlie", "Alice", "Bob"):
        service.create_contact(name, f"{name.lower()}@example.org")
    assert [c.name for c in service.list_contacts()] == ["Charlie", "Alice", "Bob"]


def test_search_is_case_insensitive_substring() -> None:
    service = _service()
    service.create_contact("Julia Roberts", "julia@example.org")
    service.create_contact("Kate Jul", "kate@example.org")
    service.create_contact("Leo", "leo@example.org")

    assert [c.name for c in service.list_contacts("JUL")] == ["Julia Roberts", "Kate Jul"]
    assert [c.name for c in service.list_contacts("leo")] == ["Leo"]
    assert service.list_contacts("nonexistent") == []


def test_empty_search_matches_list() -> None:
    service = _service()
    service.create_contact("Mia", "mia@example.org")
    service.create_contact("Ned", "ned@example.org")
    assert service.list_contacts("") == service.list_contacts()
    assert service.list_contacts(None) == service.list_contacts()


def test_store_conflict_reported_as_email_taken() -> None:
    class RacingStore(InMemoryContactStore):
        def find_by_email(self, email):
            return None

    store = RacingStore()
    store.add("Olga", "olga@example.org")
    service = ContactService(store)

    r = service.create_contact("Other", "olga@example.org")
    assert isinstance(r, CreateRejected)
    assert isinstance(r.error, EmailTaken)
    assert len(store) == 1


def test_store_error_propagates() -> None:
    class BrokenStore(InMemoryContactStore):
        def remove(self, contact_id):
            raise StoreError("disk full")

    service = ContactService(BrokenStore())
    with pytest.raises(StoreError):
        service.delete_contact(1)


def test_concurrent_creates_with_same_email_store_one() -> None:
    service = _service()
    results = []
    barrier = threading.Barrier(8)

    def worker(i: int) -> None:
        barrier.wait()
        results.append(service.create_contact(f"Person {i}", "same@example.org"))

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sum(isinstance(r, Contact) for r in results) == 1
    assert sum(isinstance(r, CreateRejected) for r in results) == 7
    assert len(service.list_contacts()) == 1


def test_email_conflict_is_store_error() -> None:
    assert issubclass(EmailConflict, StoreError)


class _FailingStore(InMemoryContactStore):
    """In-memory store whose writes and reads can be made to fail one by one."""

    def __init__(self, failing: str) -> None:
        super().__init__()
        self.failing = failing

    def _check(self, operation: str) -> None:
        if self.failing == operation:
            raise StoreError(f"{operation} failed")

    def add(self, name, email):
        self._check("add")
        return super().add(name, email)

    def edit(self, contact_id, name, email):
        self._check("edit")
        return super().edit(contact_id, name, email)

    def get(self, contact_id):
        self._check("get")
        return super().get(contact_id)


@pytest.mark.parametrize(
    ("failing", "call"),
    [
        ("add", lambda s: s.create_contact("New", "new@example.org")),
        ("edit", lambda s: s.update_contact(1, "Changed", "changed@example.org")),
        ("get", lambda s: s.get_contact(1)),
    ],
)
def test_store_error_propagates_and_leaves_store_unchanged(failing, call) -> None:
    store = _FailingStore(failing="")
    store.add("Paula", "paula@example.org")
    before = store.list_all()
    store.failing = failing
    service = ContactService(store)

    with pytest.raises(StoreError):
        call(service)
    assert store.list_all() == before
