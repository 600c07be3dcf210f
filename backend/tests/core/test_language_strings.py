"""Language Strings tests - pure data functions for locale-specific chat text.

Tests cover:
    - All locales have a template for every intent
    - Closing remarks: 4 per locale, exactly one empty
    - Guest notice names the limit in the locale's wording
"""

from app.core.domain_types import Intent, Locale
from app.core.language_strings import (
    format_guest_limit_notice,
    get_apology,
    get_closing_remarks,
    get_question_clause,
    get_reply_template,
)


def test_reply_templates_cover_all_locales_and_intents():
    for locale in Locale:
        for intent in Intent:
            template = get_reply_template(locale, intent)
            assert isinstance(template, str)
            assert len(template) > 0


def test_closing_remarks_have_four_variants_one_empty():
    for locale in Locale:
        remarks = get_closing_remarks(locale)
        assert len(remarks) == 4
        assert remarks.count("") == 1


def test_guest_notice_english():
    notice = format_guest_limit_notice(Locale.EN, 300)
    assert notice.startswith("\n\n[300 word limit reached.")


def test_guest_notice_indonesian():
    notice = format_guest_limit_notice(Locale.ID, 300)
    assert "Batas 300 kata tercapai" in notice


def test_question_clause_keys_on_locale_how_word():
    assert '"how"' in get_question_clause(Locale.EN, "how do i start")
    assert '"how"' not in get_question_clause(Locale.EN, "bagaimana")
    assert '"bagaimana"' in get_question_clause(Locale.ID, "bagaimana caranya")


def test_apology_is_generic():
    assert get_apology() == "Sorry, I encountered an error. Please try again."
