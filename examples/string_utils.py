"""String manipulation utilities for the MCP sandbox demo."""

import random
import re
import string

__all__ = [
    "to_title_case",
    "random_string",
    "word_count",
    "reverse",
    "is_palindrome",
    "capitalize",
]


def to_title_case(text=""):
    """Convert a string to title case."""
    return re.sub(r"\w\S*", lambda m: m.group(0)[0].upper() + m.group(0)[1:].lower(), text)


def random_string(length=10, include_numbers=True):
    """Generate a random string of letters, optionally with digits."""
    pool = string.ascii_letters + (string.digits if include_numbers else "")
    return "".join(random.choice(pool) for _ in range(int(length)))


def word_count(text=""):
    """Count the words in a string."""
    return len(text.split())


def reverse(text=""):
    """Reverse a string."""
    return text[::-1]


def is_palindrome(text="", ignore_case=True):
    """Check whether a string reads the same backwards."""
    normalized = text.lower() if ignore_case else text
    cleaned = re.sub(r"[^a-zA-Z0-9]", "", normalized)
    return cleaned == cleaned[::-1]


def capitalize(text=""):
    """Capitalize the first letter of each word."""
    return re.sub(r"(?:^|\s)\S", lambda m: m.group(0).upper(), text.lower())
