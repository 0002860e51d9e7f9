import secrets
import string
import time
from typing import Callable

ALPHANUMERIC = string.ascii_uppercase + string.digits

MAX_CODE_ATTEMPTS = 10


def random_chars(length: int) -> str:
    return ''.join(secrets.choice(ALPHANUMERIC) for _ in range(length))


def time_suffix(digits: int) -> str:
    """Last `digits` digits of the current epoch time in milliseconds."""
    return str(int(time.time() * 1000))[-digits:]


def generate_code(prefix: str, suffix_digits: int, random_length: int) -> str:
    return f"{prefix}{time_suffix(suffix_digits)}{random_chars(random_length)}"


def generate_unique_code(
        prefix: str,
        exists: Callable[[str], bool],
        suffix_digits: int,
        random_length: int,
        max_attempts: int = MAX_CODE_ATTEMPTS) -> str:
    """
    Generate a code that `exists` reports as unused.

    After max_attempts collisions, fall back to the full millisecond clock
    plus 16 hex chars of token randomness, which is not checked again.
    """
    for _ in range(max_attempts):
        code = generate_code(prefix, suffix_digits, random_length)
        if not exists(code):
            return code

    return f"{prefix}{int(time.time() * 1000)}{secrets.token_hex(8).upper()}"
