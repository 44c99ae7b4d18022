"""Text processing utilities."""

LIKE_ESCAPE_CHAR = "\\"


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so user input matches literally.

    Use together with ``escape=LIKE_ESCAPE_CHAR`` on the SQL expression.

    Args:
        term: Raw search text

    Returns:
        The term with ``\\``, ``%`` and ``_`` escaped

    Examples:
        >>> escape_like("50%_off")
        '50\\\\%\\\\_off'
    """
    return (
        term.replace(LIKE_ESCAPE_CHAR, LIKE_ESCAPE_CHAR * 2)
        .replace("%", f"{LIKE_ESCAPE_CHAR}%")
        .replace("_", f"{LIKE_ESCAPE_CHAR}_")
    )


def contains_pattern(term: str) -> str:
    """Build a ``%term%`` pattern with wildcards in ``term`` escaped."""
    return f"%{escape_like(term)}%"


def filter_term(value: str | None) -> str | None:
    """Trim a query filter, treating a blank one as absent."""
    if value is None:
        return None
    return value.strip() or None
