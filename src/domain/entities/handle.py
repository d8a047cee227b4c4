"""Handle format rules.

Length and charset are separate predicates so callers can report exactly
which rule a handle breaks. Matching is case-sensitive: ``alice`` and
``ALICE`` are different handles.
"""

import string

MIN_HANDLE_LENGTH = 3
MAX_HANDLE_LENGTH = 20

HANDLE_ALPHABET = frozenset(string.ascii_letters + string.digits + "_-")


def is_valid_handle_length(handle: str) -> bool:
    """Check that the handle has between 3 and 20 characters."""
    return MIN_HANDLE_LENGTH <= len(handle) <= MAX_HANDLE_LENGTH


def is_valid_handle_charset(handle: str) -> bool:
    """Check that every character is one of ``[A-Za-z0-9_-]``."""
    return all(char in HANDLE_ALPHABET for char in handle)
