"""Config Commands - tiny natural-language grammar for admin config edits.

Invariants:
    - Pure: returns the partial update and the reply, never touches the store
    - Word limit needs "limit"/"batasan" AND "<number> kata|word"
    - Disable keywords are checked before enable ones ("disable" contains "enable",
      "nonaktifkan" contains "aktifkan")
    - Unrecognised commands produce an empty update and a generic acknowledgment
"""

import re
from dataclasses import dataclass, field

_LIMIT_KEYWORDS = ("limit", "batasan")
_LIMIT_PATTERN = re.compile(r"(\d+)\s*(kata|word)", re.IGNORECASE)
_MAINTENANCE_KEYWORD = "maintenance"
_DISABLE_KEYWORDS = ("disable", "nonaktifkan", "matikan")
_ENABLE_KEYWORDS = ("enable", "aktifkan", "nyalakan")

GENERIC_ACKNOWLEDGMENT = "Configuration command processed."


@dataclass(frozen=True)
class ConfigCommandResult:
    updates: dict = field(default_factory=dict)
    reply: str = GENERIC_ACKNOWLEDGMENT


def parse_config_command(command: str) -> ConfigCommandResult:
    lowered = command.lower()

    if any(keyword in lowered for keyword in _LIMIT_KEYWORDS):
        match = _LIMIT_PATTERN.search(command)
        if match:
            limit = int(match.group(1))
            return ConfigCommandResult(
                updates={"guest_word_limit": limit},
                reply=f"Guest word limit updated to {limit} words.",
            )

    if _MAINTENANCE_KEYWORD in lowered:
        enable = _maintenance_toggle(lowered)
        if enable is not None:
            return ConfigCommandResult(
                updates={"maintenance_mode": enable},
                reply=f"Maintenance mode {'enabled' if enable else 'disabled'}.",
            )

    return ConfigCommandResult()


def _maintenance_toggle(lowered: str) -> bool | None:
    if any(keyword in lowered for keyword in _DISABLE_KEYWORDS):
        return False
    if any(keyword in lowered for keyword in _ENABLE_KEYWORDS):
        return True
    return None
