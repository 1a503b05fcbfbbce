import re

# Word characters are ASCII only, so accented letters compare as separators.
_DISALLOWED = re.compile(r"[^\w\s.-]", re.ASCII)
_WHITESPACE_RUN = re.compile(r"\s+")


def normalize_filename(name: str) -> str:
    """Canonicalize a filename for fuzzy equality checks.

    Characters other than letters, digits, underscore, whitespace, '.' and '-'
    become spaces, whitespace runs collapse to one space and the ends are
    trimmed. The result is only ever compared, never stored.
    """
    cleaned = _DISALLOWED.sub(" ", name)
    return _WHITESPACE_RUN.sub(" ", cleaned).strip()
