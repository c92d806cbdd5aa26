#!/usr/bin/env python3
"""One-off setup: create the Neo4j unique constraints for Contact(email),
Contact(id) and the id Sequence(name).

The API also does this on first use of the Neo4j store; run this when
preparing a fresh database ahead of deployment. Run from repo root with .env
(NEO4J_URI, NEO4J_USER, NEO4J_PASSWORD). Idempotent.
"""
import os
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(REPO_ROOT / "src"))

from dotenv import load_dotenv  # noqa: E402
from neo4j import GraphDatabase  # noqa: E402
from neo4j.exceptions import DriverError, Neo4jError  # noqa: E402

from contactbook.infrastructure import ensure_constraints  # noqa: E402

load_dotenv(REPO_ROOT / ".env")


def main() -> int:
    uri = os.environ.get("NEO4J_URI", "bolt://localhost:7687").strip()
    user = os.environ.get("NEO4J_USER", "neo4j").strip()
    password = os.environ.get("NEO4J_PASSWORD", "password").strip()
    driver = GraphDatabase.driver(uri, auth=(user, password))
    try:
        ensure_constraints(driver)
        print("Contact constraints are in place.")
        return 0
    except (Neo4jError, DriverError) as e:
        print(f"Could not create constraints: {e}", file=sys.stderr)
        return 1
    finally:
        driver.close()


if __name__ == "__main__":
    sys.exit(main())
