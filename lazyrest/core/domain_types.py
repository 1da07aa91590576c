"""Domain Types - names and bounds shared by the validator and the dispatcher.

Invariants:
    - Operation values are the method names looked up on a service
    - Mandatory operations are validated in MANDATORY_OPERATIONS order (get first)
    - Record ids are ASCII decimal, 0..MAX_RECORD_ID (signed 64-bit range)
"""

import re
from enum import Enum
from typing import TypeAlias


# ─── Identity Types ──────────────────────────────────────────────

RecordId: TypeAlias = int

MAX_RECORD_ID = 2**63 - 1
RECORD_ID_PATTERN = re.compile(r"[0-9]+")


# ─── Value Types ─────────────────────────────────────────────────

# Query string decoded as key -> every value given for that key
QueryArgs: TypeAlias = dict[str, list[str]]


# ─── Enums ───────────────────────────────────────────────────────

class Operation(str, Enum):
    """Contract operations, keyed by the service method name."""
    READ = "get"
    WRITE = "put"
    CREATE = "new"
    DELETE = "delete"
    LIST = "query"


MANDATORY_OPERATIONS = (
    Operation.READ,
    Operation.WRITE,
    Operation.CREATE,
    Operation.DELETE,
)
