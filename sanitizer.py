# sanitizer.py
import re

from errors import ValidationError

_UNSAFE_CHARACTERS = re.compile(r"[`'\";]")

# Unquoted Oracle identifier
_IDENTIFIER = re.compile(r"^[A-Za-z][A-Za-z0-9_$#]*$")


def clean(value):
    """Removes backticks, quotes and semicolons from a user supplied string."""
    if value is None:
        return None
    return _UNSAFE_CHARACTERS.sub("", value)


def clean_identifier(name):
    """
    Cleans a table or column name and checks that it can be used unquoted.
    Identifiers cannot be bound as parameters, so anything that is not a
    plain identifier after cleaning is rejected.
    """
    cleaned = clean(name or "").strip()
    if not _IDENTIFIER.match(cleaned):
        raise ValidationError(f"Invalid identifier: {name!r}")
    return cleaned
