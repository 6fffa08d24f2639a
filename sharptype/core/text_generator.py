"""Practice text generation biased toward the learner's weak keys."""

from __future__ import annotations

import math
import random
import string
from typing import List, Mapping, Optional

from sharptype import config

COMMON_WORDS = (
    "the", "and", "for", "are", "but", "not", "you", "all", "can", "had",
    "her", "was", "one", "our", "out", "day", "get", "has", "him", "his",
    "how", "man", "new", "now", "old", "see", "two", "way", "who", "boy",
    "did", "its", "let", "put", "say", "she", "too", "use",
)


_default_rng = random.Random()


def weak_keys(errors_by_key: Mapping[str, int], limit: int = config.WEAK_KEY_LIMIT) -> List[str]:
    """Keys with the most errors, highest first.

    Ties keep the mapping's iteration order. Keys without errors are skipped.
    """
    ranked = sorted(
        (key for key, count in errors_by_key.items() if count > 0),
        key=lambda key: errors_by_key[key],
        reverse=True,
    )
    return ranked[:limit]


def generate_random_text(length: int, rng: Optional[random.Random] = None) -> str:
    """Common words separated by spaces, cut to exactly ``length`` characters."""
    if length <= 0:
        return ""
    rng = rng or _default_rng
    words: List[str] = []
    size = -1
    while size < length:
        word = rng.choice(COMMON_WORDS)
        words.append(word)
        size += len(word) + 1
    return " ".join(words)[:length]


def _pseudo_word(keys: List[str], rng: random.Random) -> str:
    size = rng.randint(config.PSEUDO_WORD_MIN, config.PSEUDO_WORD_MAX)
    chars = []
    for _ in range(size):
        if rng.random() < config.WEAK_KEY_PROBABILITY:
            chars.append(rng.choice(keys))
        else:
            chars.append(rng.choice(string.ascii_lowercase))
    return "".join(chars)


def generate_spaced_repetition_text(
    errors_by_key: Mapping[str, int],
    length: int = config.DEFAULT_PRACTICE_LENGTH,
    rng: Optional[random.Random] = None,
) -> str:
    """Pseudo-words drawn mostly from the weakest keys.

    One word per ten characters of budget, topped up with extra words when
    short words leave the budget unfilled; the joined text is cut to
    ``length`` and may end mid-word. With no recorded errors this falls back
    to :func:`generate_random_text`.
    """
    rng = rng or _default_rng
    keys = weak_keys(errors_by_key)
    if not keys:
        return generate_random_text(length, rng)
    if length <= 0:
        return ""
    words = [_pseudo_word(keys, rng) for _ in range(math.ceil(length / 10))]
    size = sum(len(word) for word in words) + len(words) - 1
    while size < length:
        word = _pseudo_word(keys, rng)
        words.append(word)
        size += len(word) + 1
    return " ".join(words)[:length]
