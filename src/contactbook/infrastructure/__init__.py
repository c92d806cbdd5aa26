"""Infrastructure layer: concrete implementations of application ports."""

from contactbook.infrastructure.memory_repository import InMemoryContactStore
from contactbook.infrastructure.persistence.neo4j_repository import (
    Neo4jContactStore,
    ensure_constraints,
)

__all__ = [
    "InMemoryContactStore",
    "Neo4jContactStore",
    "ensure_constraints",
]
