"""
pipeline/resolvers.py — Interchangeable pronunciation strategies.

Both resolvers answer the same question ("which Kairen ASCII units does this
word sound like?") from different sources:

* :class:`PhonemeSetResolver` — static word → CMU phoneme table, mapped
  through :data:`~phonetics.cmu_map.CMU_TO_KAIREN`.
* :class:`PhoneticAlphabetResolver` — remote IPA lookup, parsed by the
  :class:`~phonetics.ipa_tokenizer.IPATokenizer`.

The configured :class:`~core.constants.ResolverKind` picks one; the rest of
the pipeline never knows which.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Protocol, runtime_checkable

from core.constants import ResolverKind
from lookup.dictionary_api import DictionaryApiClient
from lookup.phoneme_table import PhonemeTable
from phonetics.cmu_map import phonemes_to_ascii
from phonetics.ipa_tokenizer import IPATokenizer


@dataclass
class Resolution:
    """
    Result of one pronunciation lookup.

    Attributes:
        ascii_units: Kairen ASCII units; empty on a miss.
        phonemes: CMU codes when the phoneme-set source answered.
        ipa: Transcription when the phonetic-alphabet source answered.
        syllables: Syllable breakdown, if the source has one.
    """

    ascii_units: list[str] = field(default_factory=list)
    phonemes: Optional[list[str]] = None
    ipa: Optional[str] = None
    syllables: list[list[str]] = field(default_factory=list)

    @property
    def is_miss(self) -> bool:
        """True when the source produced no units."""
        return not self.ascii_units


@runtime_checkable
class PronunciationResolver(Protocol):
    """Minimal interface required of any pronunciation strategy."""

    kind: ResolverKind

    def resolve(self, word: str) -> Resolution:
        """Return the pronunciation of *word*; a miss is an empty resolution."""
        ...


class PhonemeSetResolver:
    """
    Resolve words through a static phoneme table.

    Args:
        table: Word → CMU phoneme table.
    """

    kind = ResolverKind.PHONEME_SET

    def __init__(self, table: PhonemeTable) -> None:
        self._table = table

    def resolve(self, word: str) -> Resolution:
        phonemes = self._table.lookup(word)
        if not phonemes:
            return Resolution()
        return Resolution(
            ascii_units=phonemes_to_ascii(phonemes),
            phonemes=phonemes,
            syllables=self._table.syllables(word),
        )

    def close(self) -> None:
        """Nothing to release; present for interface symmetry."""


class PhoneticAlphabetResolver:
    """
    Resolve words through a remote IPA lookup and the phonetic tokenizer.

    Args:
        client: Pronunciation service client.
        tokenizer: IPA → ASCII tokenizer.
    """

    kind = ResolverKind.PHONETIC_ALPHABET

    def __init__(
        self,
        client: DictionaryApiClient,
        tokenizer: Optional[IPATokenizer] = None,
    ) -> None:
        self._client = client
        self._tokenizer = tokenizer or IPATokenizer()

    def resolve(self, word: str) -> Resolution:
        ipa = self._client.fetch_pronunciation(word)
        if not ipa:
            return Resolution()
        return Resolution(ascii_units=self._tokenizer.parse(ipa), ipa=ipa)

    def close(self) -> None:
        """Close the pronunciation client's HTTP session."""
        self._client.close()
