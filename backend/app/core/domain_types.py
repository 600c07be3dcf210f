"""Domain Types - rich types that replace bare primitives across the codebase.

Invariants:
    - CoreId and CommandId wrap generated string identifiers
    - All valid states encoded as Enums - no raw string matching
    - Progress values are bounded 0-100

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders (records are stored as JSON columns)
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

CoreId = NewType("CoreId", str)
CommandId = NewType("CommandId", str)


# ─── Value Types ─────────────────────────────────────────────────

Progress = NewType("Progress", int)     # 0-100


# ─── Enums ───────────────────────────────────────────────────────

class Locale(str, Enum):
    """Supported reply languages for the chat classifier."""
    EN = "en"
    ID = "id"


class CoreType(str, Enum):
    """Role of a core instance. Only a prime core can serve chat traffic."""
    PRIME = "prime"
    CLONE = "clone"
    TESTER = "tester"


class CoreStatus(str, Enum):
    """Core lifecycle states - maps to DB `status` column."""
    ACTIVE = "active"
    HIBERNATING = "hibernating"
    UPGRADING = "upgrading"
    TESTING = "testing"
    DELETED = "deleted"


class CommandStatus(str, Enum):
    """Strategic command lifecycle states."""
    PENDING = "pending"
    PROCESSING = "processing"
    TESTING = "testing"
    COMPLETED = "completed"
    FAILED = "failed"


class Intent(str, Enum):
    """Chat intents, listed in match priority order."""
    GREETING = "greeting"
    CAPABILITY = "capability"
    IDENTITY = "identity"
    PROGRAMMING = "programming"
    QUESTION = "question"
    DEFAULT = "default"


# ─── Constants ───────────────────────────────────────────────────

RETIRED_CORE_STATUSES: frozenset[CoreStatus] = frozenset({
    CoreStatus.DELETED, CoreStatus.HIBERNATING,
})

IN_FLIGHT_COMMAND_STATUSES: frozenset[CommandStatus] = frozenset({
    CommandStatus.PENDING, CommandStatus.PROCESSING, CommandStatus.TESTING,
})

PRIME_CORE_ID = CoreId("core-prime-001")
INITIAL_CORE_VERSION = "1.0.0"
INITIAL_CORE_CAPABILITIES: tuple[str, ...] = (
    "Natural Language Understanding",
    "Multi-language Support",
    "Text Generation",
    "Conversation Management",
)

DEFAULT_GUEST_WORD_LIMIT = 500
