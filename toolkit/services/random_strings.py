"""Random string generation over a fixed 64-character alphabet."""

import random
import secrets
import threading

RANDOM_STRING_SOURCE = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_+"

# Digits and symbols sit at the end of the alphabet
NUM_NONALPHA = 12


class RandomStringGenerator:
    """Draws random strings from ``RANDOM_STRING_SOURCE``.

    By default characters come from the operating system's CSPRNG. A
    ``random.Random`` instance can be injected instead (a seeded one makes
    tests reproducible); draws are serialized with a lock so one generator can
    be shared between threads.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng if rng is not None else secrets.SystemRandom()
        self._lock = threading.Lock()

    def _draw(self, pool: str, length: int) -> str:
        with self._lock:
            return "".join(self._rng.choice(pool) for _ in range(length))

    def random_string(self, length: int) -> str:
        """Returns ``length`` characters drawn uniformly from the full alphabet."""
        if length <= 0:
            return ""
        return self._draw(RANDOM_STRING_SOURCE, length)

    def random_string_with_alpha_start(self, length: int) -> str:
        """Like :meth:`random_string`, but the first character is always a letter."""
        if length <= 0:
            return ""
        alpha = RANDOM_STRING_SOURCE[: len(RANDOM_STRING_SOURCE) - NUM_NONALPHA]
        return self._draw(alpha, 1) + self._draw(RANDOM_STRING_SOURCE, length - 1)
