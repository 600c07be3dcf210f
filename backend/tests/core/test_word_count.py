"""Word counting tests - the shared rule used for truncation and reporting."""

from app.core.word_count import count_words, split_words, truncate_words


def test_counts_words_separated_by_whitespace_runs():
    assert count_words("  a  b   c ") == 3


def test_empty_string_has_zero_words():
    assert count_words("") == 0


def test_whitespace_only_has_zero_words():
    assert count_words(" \n\t  ") == 0


def test_newlines_and_tabs_are_separators():
    assert count_words("one\n\ntwo\tthree") == 3


def test_split_drops_empty_tokens():
    assert split_words("\n\nI'm here  ") == ["I'm", "here"]


def test_truncate_keeps_first_n_words_single_spaced():
    assert truncate_words("a  b\n\nc d", 3) == "a b c"


def test_truncate_to_zero_is_empty():
    assert truncate_words("a b c", 0) == ""


def test_truncate_never_exceeds_limit():
    text = "word " * 50
    for limit in (0, 1, 7, 49, 50, 80):
        assert count_words(truncate_words(text, limit)) <= limit
