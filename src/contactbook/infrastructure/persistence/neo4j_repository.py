"""Neo4j implementation of ContactStore.
Graph: (c:Contact {id, name, email}) nodes plus one (s:Sequence {name: "contact", value})
node that hands out ids. Ids are integers, assigned in the same statement that
creates the contact, and never reused.
"""

import logging
from collections.abc import Iterator

from neo4j.exceptions import ConstraintError, DriverError, Neo4jError

from contactbook.application.ports import EmailConflict, StoreError
from contactbook.domain import Contact

logger = logging.getLogger(__name__)

_CONSTRAINT_QUERIES = (
    """
    CREATE CONSTRAINT contact_email_unique IF NOT EXISTS
    FOR (c:Contact) REQUIRE c.email IS UNIQUE
    """,
    """
    CREATE CONSTRAINT contact_id_unique IF NOT EXISTS
    FOR (c:Contact) REQUIRE c.id IS UNIQUE
    """,
    """
    CREATE CONSTRAINT sequence_name_unique IF NOT EXISTS
    FOR (s:Sequence) REQUIRE s.name IS UNIQUE
    """,
)

_GET_QUERY = """
MATCH (c:Contact {id: $id})
RETURN c
"""

_LIST_QUERY = """
MATCH (c:Contact)
RETURN c
ORDER BY c.id
"""

_FIND_BY_EMAIL_QUERY = """
MATCH (c:Contact {email: $email})
RETURN c
LIMIT 1
"""

_SEARCH_QUERY = """
MATCH (c:Contact)
WHERE toLower(c.name) CONTAINS toLower($query)
RETURN c
ORDER BY c.id
"""

_ADD_QUERY = """
MERGE (s:Sequence {name: "contact"})
ON CREATE SET s.value = 0
SET s.value = s.value + 1
WITH s.value AS id
CREATE (c:Contact {id: id, name: $name, email: $email})
RETURN c.id AS id
"""

_EDIT_QUERY = """
MATCH (c:Contact {id: $id})
SET c.name = $name, c.email = $email
RETURN c.id AS id
"""

_REMOVE_QUERY = """
MATCH (c:Contact {id: $id})
DETACH DELETE c
RETURN count(*) AS removed
"""


def ensure_constraints(driver) -> None:
    """Create unique constraints on Contact(email), Contact(id) and Sequence(name) if missing."""
    with driver.session() as session:
        for query in _CONSTRAINT_QUERIES:
            session.run(query)
    logger.info("Contact constraints ensured")


class Neo4jContactStore:
    """Stores contacts in Neo4j. The driver is passed in and owned by the caller.

    Each write is a single auto-commit statement, so it is applied completely
    or not at all. Driver and server errors surface as StoreError; a unique
    constraint violation on email surfaces as EmailConflict.
    """

    def __init__(self, driver: object, database: str | None = None) -> None:
        self._driver = driver
        self._database = database

    def _session(self):
        if self._database:
            return self._driver.session(database=self._database)
        return self._driver.session()

    def _fetch(self, query: str, **params) -> list[Contact]:
        try:
            with self._session() as session:
                result = session.run(query, **params)
                return [_record_to_contact(rec) for rec in result]
        except (Neo4jError, DriverError) as e:
            raise StoreError(str(e)) from e

    def get(self, contact_id: int) -> Contact | None:
        found = self._fetch(_GET_QUERY, id=contact_id)
        return found[0] if found else None

    def list_all(self) -> list[Contact]:
        return self._fetch(_LIST_QUERY)

    def iter_all(self) -> Iterator[Contact]:
        try:
            with self._session() as session:
                for rec in session.run(_LIST_QUERY):
                    yield _record_to_contact(rec)
        except (Neo4jError, DriverError) as e:
            raise StoreError(str(e)) from e

    def find_by_email(self, email: str) -> Contact | None:
        found = self._fetch(_FIND_BY_EMAIL_QUERY, email=email)
        return found[0] if found else None

    def search_by_name(self, query: str) -> list[Contact]:
        return self._fetch(_SEARCH_QUERY, query=query or "")

    def add(self, name: str, email: str) -> int:
        try:
            with self._session() as session:
                record = session.run(_ADD_QUERY, name=name, email=email).single()
        except ConstraintError as e:
            raise _constraint_error(e, email) from e
        except (Neo4jError, DriverError) as e:
            raise StoreError(str(e)) from e
        if record is None:
            raise StoreError("Contact was not created.")
        return int(record["id"])

    def edit(self, contact_id: int, name: str, email: str) -> bool:
        try:
            with self._session() as session:
                record = session.run(
                    _EDIT_QUERY, id=contact_id, name=name, email=email
                ).single()
        except ConstraintError as e:
            raise _constraint_error(e, email) from e
        except (Neo4jError, DriverError) as e:
            raise StoreError(str(e)) from e
        return record is not None

    def remove(self, contact_id: int) -> bool:
        try:
            with self._session() as session:
                record = session.run(_REMOVE_QUERY, id=contact_id).single()
        except (Neo4jError, DriverError) as e:
            raise StoreError(str(e)) from e
        return bool(record and record["removed"])


def _record_to_contact(record) -> Contact:
    c = record["c"]
    return Contact(id=int(c["id"]), name=c["name"], email=c["email"])


def _constraint_error(error: ConstraintError, email: str) -> StoreError:
    if "email" in (error.message or ""):
        return EmailConflict(email)
    return StoreError(str(error))
