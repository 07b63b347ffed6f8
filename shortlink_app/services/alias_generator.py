"""
Short code generation and custom alias validation.
"""

import random
import re
import string
from typing import Optional

from shortlink_app.errors import ValidationError

ALPHABET = string.digits + string.ascii_uppercase + string.ascii_lowercase

CUSTOM_ALIAS_PATTERN = re.compile(r"[A-Za-z0-9]{3,30}")


class AliasGenerator:
    """
    Random short code generator.

    Each character is drawn independently and uniformly from the 62-symbol
    alphabet. The generator does not check uniqueness: the alias table's
    unique constraint does, and the service retries on collision.

    One instance is shared by the whole process. It owns a single random
    source created once and never reseeded; SystemRandom reads from the OS
    and holds no state, so concurrent callers cannot observe correlated
    sequences.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.SystemRandom()

    def generate(self, length: int) -> str:
        if length < 1:
            raise ValueError(f"Code length must be positive, got {length}")
        return "".join(self._rng.choice(ALPHABET) for _ in range(length))

    @staticmethod
    def validate_custom(code: str) -> None:
        """Accept only ASCII alphanumerics of length 3-30."""
        if not isinstance(code, str) or not CUSTOM_ALIAS_PATTERN.fullmatch(code):
            raise ValidationError(
                "Field 'custom_alias' is incorrect: must be 3-30 alphanumeric characters"
            )
