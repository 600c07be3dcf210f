"""Language Detection - deterministic keyword-based text-to-locale mapping.

Invariants:
    - Always returns a valid Locale (never None)
    - Indonesian only when a marker keyword appears; everything else is EN
    - Empty text returns EN

Design Decisions:
    - Case-insensitive substring match over a fixed keyword set: replies are
      canned templates in two languages, so a statistical detector adds nothing
"""

from app.core.domain_types import Locale

_INDONESIAN_MARKERS: tuple[str, ...] = ("apa", "bagaimana", "mengapa", "siapa")


def detect_locale(text: str) -> Locale:
    """Detect the reply locale of the given chat message."""
    lowered = (text or "").lower()
    if any(marker in lowered for marker in _INDONESIAN_MARKERS):
        return Locale.ID
    return Locale.EN
