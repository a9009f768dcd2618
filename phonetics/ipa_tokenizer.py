"""
phonetics/ipa_tokenizer.py — Phonetic-alphabet string → ASCII phoneme units.

Strips transcription delimiters, NFD-normalises the input, then walks it
left to right taking the longest matching symbol from the
:class:`~phonetics.symbol_table.SymbolTable` at each offset. Unknown
symbols are skipped one code point at a time and logged; they never abort
the conversion.
"""

from __future__ import annotations

import unicodedata
from typing import Optional

from core.constants import KairenConstants as C
from core.logger import get_logger
from phonetics.symbol_table import DEFAULT_SYMBOL_TABLE, SymbolTable

_log = get_logger()


class IPATokenizer:
    """
    Longest-match tokenizer over a phonetic symbol table.

    Args:
        table: Symbol table to match against (default: built-in English IPA).
        delimiters: Characters removed before matching. Whitespace is always
            removed as well.
    """

    def __init__(
        self,
        table: SymbolTable = DEFAULT_SYMBOL_TABLE,
        delimiters: frozenset[str] = C.PHONETIC_DELIMITERS,
    ) -> None:
        self._table = table
        self._delimiters = delimiters

    def clean(self, ipa: str) -> str:
        """
        Normalise and strip delimiters/whitespace from a transcription.

        Example::

            IPATokenizer().clean("/ˈhɛloʊ/")   # → 'ˈhɛloʊ'
        """
        text = unicodedata.normalize("NFD", ipa)
        return "".join(ch for ch in text if ch not in self._delimiters and not ch.isspace())

    def parse(self, ipa: Optional[str]) -> list[str]:
        """
        Convert a phonetic-alphabet string to ASCII phoneme units.

        Example::

            IPATokenizer().parse("/θɹuː/")   # → ['th', 'r', 'u']

        Args:
            ipa: Transcription, optionally wrapped in ``/.../`` or ``[...]``.
                 ``None`` and empty strings are accepted.

        Returns:
            Ordered ASCII units; empty when the input is empty, delimiter-only,
            or made up solely of silent or unknown symbols.
        """
        if not ipa:
            return []

        text = self.clean(ipa)
        units: list[str] = []
        unknown: list[str] = []
        offset = 0

        while offset < len(text):
            match = self._table.lookup_longest_match(text, offset)
            if match is None:
                unknown.append(text[offset])
                _log.warn("ipa", "unknown_symbol", {
                    "symbol": text[offset],
                    "codepoint": f"U+{ord(text[offset]):04X}",
                    "offset": offset,
                    "ipa": ipa,
                })
                offset += 1
                continue
            units.extend(match.ascii)
            offset += match.length

        _log.debug("ipa", "parsed", {"ipa": ipa, "units": units, "unknown": unknown})
        return units
