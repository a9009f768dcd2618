"""
core/constants.py — All system constants for the Kairen transliterator.

Single frozen dataclass with typed constant groups: token types and resolver
kinds (Enum), exception words, phonetic delimiters, final-rule letters, and
lookup service defaults.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import ClassVar, Mapping


# ──────────────────────────────────────────────────────────────
# Enums
# ──────────────────────────────────────────────────────────────

class TokenType(Enum):
    """Classification of a segmented span of input text."""

    WORD = "word"
    NON_WORD = "non-word"


class ResolverKind(Enum):
    """Pronunciation source used by the word pipeline."""

    PHONEME_SET = "phoneme_set"
    PHONETIC_ALPHABET = "phonetic_alphabet"


# ──────────────────────────────────────────────────────────────
# Frozen constants dataclass
# ──────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class KairenConstants:
    """
    Frozen dataclass holding all Kairen pipeline constants.

    All fields are typed. Use the class attributes directly — do not
    instantiate this class.

    Example::

        from core.constants import KairenConstants as C, TokenType

        print(C.EXCEPTION_WORDS["EYE"])   # 'ao'
        print(TokenType.WORD.value)       # 'word'
    """

    # ── Exception words ───────────────────────────────────────
    EXCEPTION_WORDS: ClassVar[Mapping[str, str]] = MappingProxyType({
        "I": "ki",
        "EYE": "ao",
    })
    """Uppercased English word → hardcoded Kairen form, bypassing the pipeline."""

    # ── Phonetic alphabet parsing ─────────────────────────────
    PHONETIC_DELIMITERS: ClassVar[frozenset[str]] = frozenset({"/", "[", "]"})
    """Characters wrapping a transcription (``/ˈhɛloʊ/``); stripped before matching."""

    ASCII_UNIT_ALPHABET: ClassVar[frozenset[str]] = frozenset("abcdefghijklmnopqrstuvwxyz")
    """Every ASCII phoneme unit must be spelled with these letters only."""

    # ── Final-rule repair ─────────────────────────────────────
    OPEN_SYLLABLE_TRIGGER: ClassVar[str] = "h"
    """A final form ending in this letter gets :attr:`OPEN_SYLLABLE_VOWEL` appended."""

    OPEN_SYLLABLE_VOWEL: ClassVar[str] = "u"

    VERB_SUFFIX_SOUNDS: ClassVar[tuple[str, ...]] = ("s", "z")
    """ASCII units that realise the English third-person ``-s`` suffix."""

    # ── Lookup services ───────────────────────────────────────
    DICTIONARY_API_URL: ClassVar[str] = "https://api.dictionaryapi.dev/api/v2/entries/en"
    """Base URL of the free dictionary API; the word is appended as a path segment."""

    PHONEME_TABLE_URL: ClassVar[str] = (
        "https://gist.githubusercontent.com/kimeiga/0045ed27442d66eb62846d79d0d3d254"
        "/raw/transformed_syllables.json"
    )
    """Full word → syllable/phoneme table, fetched once by ``scripts/fetch_phoneme_table.py``."""

    LOOKUP_TIMEOUT_S: ClassVar[float] = 5.0
    """Per-request timeout for the remote pronunciation lookup."""

    LOOKUP_RETRIES: ClassVar[int] = 2
    """Bounded retry count for the remote pronunciation lookup."""

    LOOKUP_BACKOFF_S: ClassVar[float] = 0.3
    """urllib3 backoff factor between lookup retries."""

    # ── Token type reference ──────────────────────────────────
    Tokens: ClassVar[type[TokenType]] = TokenType
    """Convenience reference to :class:`TokenType` — use ``C.Tokens.WORD``."""


# ──────────────────────────────────────────────────────────────
# Module-level convenience alias
# ──────────────────────────────────────────────────────────────

#: Convenience alias: ``from core.constants import C``
C = KairenConstants
