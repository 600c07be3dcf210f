"""Response Classifier - maps a chat message to a canned reply template.

Invariants:
    - All functions are PURE given their inputs (randomness is injected)
    - Total over any string input, including "" (default intent)
    - Intent rules are mutually exclusive and checked in fixed priority order
    - The body (before the closing remark) is deterministic for fixed inputs
    - Guest replies never carry more than guest_word_limit body words

Design Decisions:
    - Ordered tuple of (Intent, keywords) over if/elif chain: priority is data
      and testable through match_intent()
    - rng only needs .choice(): random.Random, the random module, or a test double
"""

import random
from dataclasses import dataclass
from typing import Protocol, Sequence

from app.core.detect_language import detect_locale
from app.core.domain_types import Intent, Locale, INITIAL_CORE_VERSION
from app.core.language_strings import (
    format_guest_limit_notice,
    get_closing_remarks,
    get_question_clause,
    get_reply_template,
)
from app.core.records import SystemConfig
from app.core.word_count import count_words, truncate_words

_FALLBACK_CAPABILITIES = "various tasks"
_ELLIPSIS = "..."

_INTENT_RULES: tuple[tuple[Intent, tuple[str, ...]], ...] = (
    (Intent.GREETING, ("hello", "hi", "halo")),
    (Intent.CAPABILITY, ("apa yang bisa", "what can you")),
    (Intent.IDENTITY, ("siapa kamu", "who are you")),
    (Intent.PROGRAMMING, ("code", "program", "kode")),
    (Intent.QUESTION, ("?", "bagaimana", "how")),
)


class ChoiceSource(Protocol):
    def choice(self, seq: Sequence[str]) -> str: ...


@dataclass(frozen=True)
class ClassifiedReply:
    """Full classifier result. `text` is what classify() returns."""
    text: str
    locale: Locale
    intent: Intent
    truncated: bool


def match_intent(message: str) -> Intent:
    """First rule whose keyword occurs in the lowercased message wins."""
    lowered = message.lower()
    for intent, keywords in _INTENT_RULES:
        if any(keyword in lowered for keyword in keywords):
            return intent
    return Intent.DEFAULT


def build_response_body(
    message: str,
    active_core_capabilities: Sequence[str] | None = None,
    active_core_version: str | None = None,
) -> str:
    """Template-selected body, without closing remark or guest truncation."""
    locale = detect_locale(message)
    intent = match_intent(message)
    return _render(locale, intent, message, active_core_capabilities, active_core_version)


def apply_guest_limit(response: str, limit: int, locale: Locale) -> tuple[str, bool]:
    """Truncate to `limit` words plus ellipsis and notice. Returns (text, truncated)."""
    if count_words(response) <= limit:
        return response, False
    truncated = truncate_words(response, limit) + _ELLIPSIS
    return truncated + format_guest_limit_notice(locale, limit), True


def classify_detailed(
    message: str,
    is_authenticated: bool,
    config: SystemConfig,
    active_core_capabilities: Sequence[str] | None = None,
    active_core_version: str | None = None,
    rng: ChoiceSource | None = None,
) -> ClassifiedReply:
    message = message or ""
    locale = detect_locale(message)
    intent = match_intent(message)
    body = _render(locale, intent, message, active_core_capabilities, active_core_version)

    response = body + (rng or random).choice(get_closing_remarks(locale))

    truncated = False
    if not is_authenticated:
        response, truncated = apply_guest_limit(
            response, config.guest_word_limit, locale,
        )
    return ClassifiedReply(
        text=response, locale=locale, intent=intent, truncated=truncated,
    )


def classify(
    message: str,
    is_authenticated: bool,
    config: SystemConfig,
    active_core_capabilities: Sequence[str] | None = None,
    active_core_version: str | None = None,
    rng: ChoiceSource | None = None,
) -> str:
    """Classify a chat message and return the reply text."""
    return classify_detailed(
        message, is_authenticated, config,
        active_core_capabilities, active_core_version, rng,
    ).text


def _render(
    locale: Locale,
    intent: Intent,
    message: str,
    capabilities: Sequence[str] | None,
    version: str | None,
) -> str:
    template = get_reply_template(locale, intent)
    if intent == Intent.CAPABILITY:
        return template.format(
            capabilities=", ".join(capabilities) if capabilities else _FALLBACK_CAPABILITIES,
            version=version or INITIAL_CORE_VERSION,
        )
    if intent == Intent.QUESTION:
        return template.format(clause=get_question_clause(locale, message.lower()))
    if intent == Intent.DEFAULT:
        return template.format(message=message)
    return template
