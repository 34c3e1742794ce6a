"""
Helpers for free-text search filters.
"""

LIKE_ESCAPE = "\\"


def contains_pattern(text: str) -> str:
    """
    Build a LIKE pattern matching ``text`` anywhere, lower-cased.

    ``%`` and ``_`` in the input match literally; use the pattern with
    ``escape=LIKE_ESCAPE``.

    Example:
        >>> contains_pattern(" 50%_Off ")
        '%50\\\\%\\\\_off%'
    """
    escaped = (
        text.strip().lower()
        .replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"
