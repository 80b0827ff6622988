"""
Input validation for resource payloads.
Lengths are counted in characters (code points) for both fields.
"""

from eczemahub.catalog.errors import InvalidInput

MAX_TITLE_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 1000


def validate(title: str, description: str):
    """Raise InvalidInput unless both fields are non-empty and within limits."""
    if not title or len(title) > MAX_TITLE_LENGTH:
        raise InvalidInput("Invalid title length")
    if not description or len(description) > MAX_DESCRIPTION_LENGTH:
        raise InvalidInput("Invalid description length")
