"""Word Counting - the single word rule shared by truncation and reporting.

Invariants:
    - A word is a maximal run of non-whitespace characters
    - count_words(truncate_words(text, n)) <= n
"""


def split_words(text: str) -> list[str]:
    """Trim, split on whitespace runs, drop empty tokens."""
    return [word for word in text.strip().split() if word]


def count_words(text: str) -> int:
    return len(split_words(text))


def truncate_words(text: str, limit: int) -> str:
    """Keep the first `limit` words, re-joined with single spaces."""
    return " ".join(split_words(text)[:limit])
