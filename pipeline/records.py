"""
pipeline/records.py — Per-token accumulator carried through the word pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from core.constants import TokenType


@dataclass
class WordRecord:
    """
    Everything known about one segmented token, filled stage by stage.

    Each stage writes only the fields it owns. Once :attr:`final` has been
    set early by an exception word, later stages leave the record alone.

    Attributes:
        word: Original token text.
        type: Word or non-word token.
        phonemes: CMU phoneme codes (phoneme-set resolver), else ``None``.
        ipa: Phonetic-alphabet transcription (phonetic-alphabet resolver), else ``None``.
        syllables: Syllable breakdown when the phoneme table provides one.
        ascii_units: Kairen ASCII phoneme units.
        transliteration: Concatenated :attr:`ascii_units`.
        swapped: Cipher output.
        plural_noun_with_s: Word ends in ``s`` and tags as a plural noun.
        singular_verb_with_s: Word ends in ``s`` and tags as a singular verb.
        resolved_early: :attr:`final` came from the exception table.
        lookup_miss: No pronunciation was found for the word.
        final: Kairen output form.
    """

    word: str
    type: TokenType = TokenType.WORD
    phonemes: Optional[list[str]] = None
    ipa: Optional[str] = None
    syllables: list[list[str]] = field(default_factory=list)
    ascii_units: list[str] = field(default_factory=list)
    transliteration: str = ""
    swapped: str = ""
    plural_noun_with_s: bool = False
    singular_verb_with_s: bool = False
    resolved_early: bool = False
    lookup_miss: bool = False
    final: Optional[str] = None

    @classmethod
    def non_word(cls, text: str) -> "WordRecord":
        """Build the pass-through record for a whitespace/punctuation run."""
        return cls(
            word=text,
            type=TokenType.NON_WORD,
            transliteration=text,
            swapped=text,
            final=text,
        )

    @property
    def is_word(self) -> bool:
        """True for word tokens."""
        return self.type is TokenType.WORD

    @property
    def needs_processing(self) -> bool:
        """True for word tokens not already resolved by an exception."""
        return self.is_word and not self.resolved_early

    def to_dict(self) -> dict:
        """Serialise to a JSON-safe dict (the converter's boundary shape)."""
        return {
            "word": self.word,
            "type": self.type.value,
            "phonemes": self.phonemes,
            "ipa": self.ipa,
            "syllables": self.syllables,
            "ascii_units": self.ascii_units,
            "transliteration": self.transliteration,
            "swapped": self.swapped,
            "plural_noun_with_s": self.plural_noun_with_s,
            "singular_verb_with_s": self.singular_verb_with_s,
            "resolved_early": self.resolved_early,
            "lookup_miss": self.lookup_miss,
            "final": self.final,
        }
