"""
phonetics/symbol_table.py — IPA symbol → ASCII phoneme unit table.

Each phonetic symbol (1–3 code points) maps to zero or more ASCII phoneme
units spelled with ``a``–``z`` only. Diacritics, stress, length and boundary
marks map to nothing. The table is queried by longest-prefix match so that
overlapping symbols (``aɪ`` vs ``a``, ``t͡ʃ`` vs ``t``) resolve to the
longer one.
"""

from __future__ import annotations

import unicodedata
from types import MappingProxyType
from typing import Mapping, NamedTuple, Optional

from core.constants import KairenConstants as C


# ──────────────────────────────────────────────────────────────
# Match result
# ──────────────────────────────────────────────────────────────

class SymbolMatch(NamedTuple):
    """
    A successful longest-prefix match.

    Attributes:
        ascii: ASCII phoneme units for the matched symbol (possibly empty).
        length: Number of code points consumed from the input.
    """

    ascii: tuple[str, ...]
    length: int


# ──────────────────────────────────────────────────────────────
# Table definition
# ──────────────────────────────────────────────────────────────
# Columns: symbol, ascii units, description

_RAW: list[tuple[str, tuple[str, ...], str]] = [

    # ── Vowels: monophthongs ─────────────────────────────────
    ("ɪ",  ("i",),      "near-close front, 'bit'"),
    ("ɛ",  ("e",),      "open-mid front, 'bet'"),
    ("æ",  ("a",),      "near-open front, 'bat'"),
    ("ʌ",  ("u",),      "open-mid back, 'but'"),
    ("ɒ",  ("o",),      "open back rounded, 'bot' (British)"),
    ("ɔ",  ("o",),      "open-mid back rounded, 'bought'"),
    ("ʊ",  ("u",),      "near-close back, 'put'"),
    ("ə",  ("a",),      "schwa, 'about'"),
    ("ɜ",  ("e",),      "open-mid central, 'bird'"),
    ("ɑ",  ("a",),      "open back, 'father'"),
    ("ɐ",  ("a",),      "near-open central"),
    ("ɚ",  ("e", "r"),  "r-coloured schwa, 'butter' (American)"),
    ("ɝ",  ("e", "r"),  "r-coloured open-mid central, 'bird' (American)"),
    ("ᵻ",  ("i",),      "reduced i, 'roses'"),
    ("ɨ",  ("i",),      "close central unrounded"),
    ("ʉ",  ("u",),      "close central rounded"),
    ("ɵ",  ("o",),      "close-mid central rounded"),
    ("i",  ("i",),      "close front"),
    ("e",  ("e",),      "close-mid front"),
    ("a",  ("a",),      "open front"),
    ("o",  ("o",),      "close-mid back"),
    ("u",  ("u",),      "close back"),

    # ── Vowels: long ─────────────────────────────────────────
    ("iː", ("i",),      "long i, 'beat'"),
    ("uː", ("u",),      "long u, 'boot'"),
    ("ɔː", ("o",),      "long o, 'bought'"),
    ("ɑː", ("a",),      "long a, 'bath' (British)"),
    ("ɜː", ("e",),      "long e, 'bird' (British)"),
    ("ɝː", ("e", "r"),  "long r-coloured vowel"),

    # ── Vowels: diphthongs ───────────────────────────────────
    ("eɪ", ("e", "i"),  "'day'"),
    ("aɪ", ("a", "i"),  "'my'"),
    ("ɔɪ", ("o", "i"),  "'boy'"),
    ("aʊ", ("a", "u"),  "'now'"),
    ("əʊ", ("o",),      "'go' (British)"),
    ("oʊ", ("o",),      "'go' (American)"),
    ("ɪə", ("i", "a"),  "'near'"),
    ("eə", ("e", "a"),  "'square'"),
    ("ɛə", ("e", "a"),  "'square' (alternative)"),
    ("ʊə", ("u", "a"),  "'cure'"),

    # ── Consonants: stops ────────────────────────────────────
    ("p",  ("p",),      "voiceless bilabial stop"),
    ("b",  ("b",),      "voiced bilabial stop"),
    ("t",  ("t",),      "voiceless alveolar stop"),
    ("d",  ("d",),      "voiced alveolar stop"),
    ("k",  ("k",),      "voiceless velar stop"),
    ("g",  ("g",),      "voiced velar stop (ASCII g)"),
    ("ɡ",  ("g",),      "voiced velar stop (IPA script g)"),
    ("ʔ",  ("t",),      "glottal stop"),

    # ── Consonants: fricatives ───────────────────────────────
    ("f",  ("f",),      "voiceless labiodental fricative"),
    ("v",  ("v",),      "voiced labiodental fricative"),
    ("θ",  ("th",),     "voiceless dental fricative, 'think'"),
    ("ð",  ("dh",),     "voiced dental fricative, 'this'"),
    ("s",  ("s",),      "voiceless alveolar fricative"),
    ("z",  ("z",),      "voiced alveolar fricative"),
    ("ʃ",  ("sh",),     "voiceless postalveolar fricative, 'ship'"),
    ("ʒ",  ("zh",),     "voiced postalveolar fricative, 'measure'"),
    ("h",  ("h",),      "voiceless glottal fricative"),
    ("x",  ("h",),      "voiceless velar fricative, 'loch'"),

    # ── Consonants: affricates ───────────────────────────────
    ("tʃ",  ("ch",),    "voiceless postalveolar affricate, 'church'"),
    ("dʒ",  ("j",),     "voiced postalveolar affricate, 'judge'"),
    ("t͡ʃ", ("ch",),    "tie-barred tʃ"),
    ("d͡ʒ", ("j",),     "tie-barred dʒ"),

    # ── Consonants: nasals ───────────────────────────────────
    ("m",  ("m",),      "bilabial nasal"),
    ("n",  ("n",),      "alveolar nasal"),
    ("ŋ",  ("ng",),     "velar nasal, 'sing'"),

    # ── Consonants: liquids ──────────────────────────────────
    ("l",  ("l",),      "alveolar lateral approximant"),
    ("r",  ("r",),      "alveolar trill"),
    ("ɹ",  ("r",),      "alveolar approximant (English r)"),
    ("ɾ",  ("r",),      "alveolar tap"),
    ("ɫ",  ("l",),      "dark l"),

    # ── Consonants: glides ───────────────────────────────────
    ("w",  ("w",),      "labio-velar approximant"),
    ("ʍ",  ("w",),      "voiceless labio-velar, 'which'"),
    ("j",  ("y",),      "palatal approximant (English y)"),
    ("ɥ",  ("w",),      "labial-palatal approximant"),

    # ── Suprasegmentals (silent) ─────────────────────────────
    ("ˈ",  (),          "primary stress"),
    ("ˌ",  (),          "secondary stress"),
    (".",  (),          "syllable boundary"),
    ("ː",  (),          "length mark"),
    ("ˑ",  (),          "half-long mark"),
    ("‿",  (),          "linking mark"),
    ("͡", (),      "tie bar"),

    # ── Modifier letters (silent) ────────────────────────────
    ("ʰ",  (),          "aspiration"),
    ("ʷ",  (),          "labialization"),
    ("ʲ",  (),          "palatalization"),
    ("ˠ",  (),          "velarization"),
    ("ˤ",  (),          "pharyngealization"),

    # ── Combining diacritics (silent) ────────────────────────
    ("̃", (),      "nasalization"),
    ("̊", (),      "voiceless"),
    ("̥", (),      "voiceless (below)"),
    ("̬", (),      "voiced"),
    ("̴", (),      "creaky voice"),
    ("̰", (),      "creaky voice (below)"),
    ("̤", (),      "breathy voice"),
    ("̼", (),      "linguolabial"),
    ("̺", (),      "apical"),
    ("̻", (),      "laminal"),
    ("̹", (),      "more rounded"),
    ("̜", (),      "less rounded"),
    ("̟", (),      "advanced"),
    ("̠", (),      "retracted"),
    ("̈", (),      "centralized"),
    ("̽", (),      "mid-centralized"),
    ("̝", (),      "raised"),
    ("̞", (),      "lowered"),
    ("̘", (),      "advanced tongue root"),
    ("̙", (),      "retracted tongue root"),
    ("̪", (),      "dental"),
    ("̚", (),      "no audible release"),
    ("̯", (),      "non-syllabic"),
    ("̩", (),      "syllabic"),
    ("̆", (),      "extra-short"),
    ("̄", (),      "mid tone"),
    ("̀", (),      "low tone"),
    ("́", (),      "high tone"),
    ("̂", (),      "falling tone"),
    ("̌", (),      "rising tone"),
]


# ──────────────────────────────────────────────────────────────
# SymbolTable
# ──────────────────────────────────────────────────────────────

class SymbolTable:
    """
    Read-only phonetic symbol table with longest-prefix lookup.

    Keys are NFD-normalised at construction so they line up with the
    tokenizer's normalised input.

    Args:
        entries: Mapping of phonetic symbol → ASCII unit sequence.

    Raises:
        ValueError: If a key is empty or longer than 3 code points, if two
            keys collide after normalisation, or if an ASCII unit is not
            spelled with ``a``–``z`` only.
    """

    def __init__(self, entries: Mapping[str, tuple[str, ...]]) -> None:
        table: dict[str, tuple[str, ...]] = {}
        for symbol, units in entries.items():
            key = unicodedata.normalize("NFD", symbol)
            if not 1 <= len(key) <= 3:
                raise ValueError(f"Phonetic symbol must be 1–3 code points: {symbol!r}")
            if key in table:
                raise ValueError(f"Duplicate phonetic symbol after normalisation: {symbol!r}")
            for unit in units:
                if not unit or not set(unit) <= C.ASCII_UNIT_ALPHABET:
                    raise ValueError(f"Invalid ASCII unit {unit!r} for symbol {symbol!r}")
            table[key] = tuple(units)

        self._table: Mapping[str, tuple[str, ...]] = MappingProxyType(table)
        self._max_len: int = max((len(k) for k in table), default=0)

    @classmethod
    def default(cls) -> "SymbolTable":
        """Build the table from the built-in English IPA alphabet."""
        return cls({symbol: units for symbol, units, _ in _RAW})

    # ──────────────────────────────────────────
    # Public API
    # ──────────────────────────────────────────

    def lookup_longest_match(self, text: str, offset: int) -> Optional[SymbolMatch]:
        """
        Find the longest symbol that is a prefix of ``text[offset:]``.

        Args:
            text: NFD-normalised phonetic string.
            offset: Code-point index to match from.

        Returns:
            The :class:`SymbolMatch` for the longest matching symbol, or
            ``None`` if no symbol matches at *offset*.
        """
        remaining = len(text) - offset
        for size in range(min(self._max_len, remaining), 0, -1):
            units = self._table.get(text[offset:offset + size])
            if units is not None:
                return SymbolMatch(ascii=units, length=size)
        return None

    def get(self, symbol: str) -> Optional[tuple[str, ...]]:
        """Return the ASCII units for an exact symbol, or ``None``."""
        return self._table.get(unicodedata.normalize("NFD", symbol))

    @property
    def max_symbol_length(self) -> int:
        """Length in code points of the longest symbol."""
        return self._max_len

    @property
    def symbols(self) -> frozenset[str]:
        """All (normalised) symbols in the table."""
        return frozenset(self._table)

    def __contains__(self, symbol: object) -> bool:
        return isinstance(symbol, str) and unicodedata.normalize("NFD", symbol) in self._table

    def __len__(self) -> int:
        return len(self._table)


#: Shared default table, built once at import and read-only thereafter.
DEFAULT_SYMBOL_TABLE: SymbolTable = SymbolTable.default()
