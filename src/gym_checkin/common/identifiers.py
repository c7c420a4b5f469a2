from __future__ import annotations

import secrets
import time


_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"


def _base36(number: int) -> str:
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_ALPHABET[rem])
    return "".join(reversed(digits)) or "0"


def generate_id(prefix: str) -> str:
    """Time-ordered, collision-resistant id such as ``ATT_LX3K9ZQ1A2B3C4``."""
    stamp = _base36(int(time.time() * 1000))
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(6))
    return f"{prefix}_{stamp}{suffix}".upper()
