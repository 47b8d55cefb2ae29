"""Cache key resolution and the exact-match relation.

Both phases decide whether a save is redundant through ``is_exact_match``;
keeping it in one place keeps the restore output ``cache-hit`` and the save
short-circuit consistent.
"""

from __future__ import annotations

import unicodedata

from storesnap.config.inputs import get_input, get_input_as_array
from storesnap.config.sources import InputSource
from storesnap.constants.inputs import INPUT_KEY, INPUT_RESTORE_KEYS
from storesnap.types import CacheKey


def resolve_primary_key(source: InputSource) -> str:
    """Return the required primary key, raising ``ConfigError`` when it is missing."""
    return get_input(source, INPUT_KEY, required=True)


def resolve_fallbacks(source: InputSource) -> tuple[str, ...]:
    """Return the ordered restore-key prefixes."""
    return tuple(get_input_as_array(source, INPUT_RESTORE_KEYS))


def resolve_cache_key(source: InputSource) -> CacheKey:
    return CacheKey(primary=resolve_primary_key(source), restore_fallbacks=resolve_fallbacks(source))


def is_exact_match(key: str, candidate: str | None) -> bool:
    """Return True iff *candidate* is present and equals *key* ignoring case.

    Accents stay significant; only letter case is folded.
    """
    if not candidate:
        return False
    return _fold(candidate) == _fold(key)


def _fold(value: str) -> str:
    return unicodedata.normalize("NFC", value).casefold()


def is_exact_hit(cache_key: CacheKey) -> bool:
    """Return True iff the key a lookup matched is the primary key itself."""
    return is_exact_match(cache_key.primary, cache_key.matched)
