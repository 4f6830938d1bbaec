import secrets
import string
import random

from .errors import InvalidLength

LOWERCASE = string.ascii_lowercase
UPPERCASE = string.ascii_uppercase
DIGITS = string.digits
SYMBOLS = string.punctuation

REQUIRED_POOLS = (LOWERCASE, UPPERCASE, DIGITS, SYMBOLS)
FULL_ALPHABET = "".join(REQUIRED_POOLS)
MIN_LENGTH = len(REQUIRED_POOLS)


def generate_password(length: int = 16) -> str:
    if isinstance(length, bool) or not isinstance(length, int):
        raise InvalidLength(f"Length must be an integer, got {length!r}")
    if length < MIN_LENGTH:
        raise InvalidLength(f"Length {length} is too short for {MIN_LENGTH} required character types")
    password_chars = [secrets.choice(pool) for pool in REQUIRED_POOLS]
    for _ in range(length - len(password_chars)):
        password_chars.append(secrets.choice(FULL_ALPHABET))
    random.SystemRandom().shuffle(password_chars)
    return "".join(password_chars)
