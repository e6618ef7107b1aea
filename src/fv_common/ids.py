"""Identifier helpers.

Primary keys are PostgreSQL UUIDs (gen_random_uuid()). Ids arrive from URLs as
plain strings, so repositories check the shape before binding them to a UUID
column: a malformed id means "not found", not a DB cast error.
"""

import uuid


def is_uuid(value: str) -> bool:
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True
