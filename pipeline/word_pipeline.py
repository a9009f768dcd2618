"""
pipeline/word_pipeline.py — Per-word transformation stages.

Each word token moves through five stages in a fixed order::

    exception check ─► phoneme resolution ─► transliteration ─► cipher swap ─► repair

Every stage is a separate method operating on a :class:`~pipeline.records.WordRecord`
so the orchestrator can run one stage across all words before the next and
log each boundary. :meth:`WordPipeline.run` chains them for a single word.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional

from cipher.engine import DEFAULT_CIPHER, CipherEngine
from core.constants import C
from core.logger import get_logger
from lookup.pos_tagger import NullPosTagger, PosTagger, PosTags
from pipeline.records import WordRecord
from pipeline.resolvers import PronunciationResolver, Resolution

_log = get_logger()


def build_exception_table(extra: Optional[Mapping[str, str]] = None) -> Mapping[str, str]:
    """
    Merge configured exception words over the built-in ones.

    Args:
        extra: Additional ``WORD → kairen`` entries; keys are uppercased.

    Returns:
        A read-only mapping keyed by uppercased English words.
    """
    table = dict(C.EXCEPTION_WORDS)
    for word, form in (extra or {}).items():
        table[word.upper()] = form
    return MappingProxyType(table)


class WordPipeline:
    """
    The five-stage transformation applied to a single word token.

    Args:
        resolver: Pronunciation strategy (phoneme set or phonetic alphabet).
        tagger: Part-of-speech collaborator; defaults to :class:`NullPosTagger`.
        cipher: Consonant-pair cipher.
        exceptions: Uppercased word → hardcoded Kairen form.
    """

    def __init__(
        self,
        resolver: PronunciationResolver,
        tagger: Optional[PosTagger] = None,
        cipher: CipherEngine = DEFAULT_CIPHER,
        exceptions: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._resolver = resolver
        self._tagger: PosTagger = tagger or NullPosTagger()
        self._cipher = cipher
        self._exceptions = exceptions if exceptions is not None else build_exception_table()

    @property
    def resolver(self) -> PronunciationResolver:
        return self._resolver

    # ── Stage 1 ───────────────────────────────────────────────────────────────

    def apply_exception(self, record: WordRecord) -> WordRecord:
        """Short-circuit words found in the exception table."""
        if not record.is_word:
            return record
        form = self._exceptions.get(record.word.upper())
        if form is not None:
            record.final = form
            record.resolved_early = True
            _log.debug("word", "exception_hit", {"word": record.word, "final": form})
        return record

    # ── Stage 2 ───────────────────────────────────────────────────────────────

    def lookup(self, word: str) -> Resolution:
        """
        Ask the resolver for *word*'s pronunciation.

        A raising resolver is treated as a miss for this word only.
        """
        try:
            return self._resolver.resolve(word)
        except Exception as exc:  # noqa: BLE001
            _log.warn("word", "resolver_failed", {
                "word": word,
                "resolver": self._resolver.kind.value,
                "error": str(exc),
            })
            return Resolution()

    def resolve(self, record: WordRecord, resolution: Optional[Resolution] = None) -> WordRecord:
        """
        Fill pronunciation fields and grammatical flags.

        Args:
            record: Word record after the exception check.
            resolution: Pre-fetched lookup result (parallel mode); looked up
                here when omitted.
        """
        if not record.needs_processing:
            return record
        if resolution is None:
            resolution = self.lookup(record.word)

        record.phonemes = resolution.phonemes
        record.ipa = resolution.ipa
        record.syllables = resolution.syllables
        record.ascii_units = list(resolution.ascii_units)
        record.lookup_miss = resolution.is_miss
        if record.lookup_miss:
            _log.debug("word", "lookup_miss", {"word": record.word})

        if record.word.lower().endswith("s"):
            tags = self._classify(record.word)
            record.plural_noun_with_s = tags.is_noun and tags.is_plural
            record.singular_verb_with_s = tags.is_verb and tags.is_singular
        return record

    # ── Stage 3 ───────────────────────────────────────────────────────────────

    def transliterate(self, record: WordRecord) -> WordRecord:
        """Concatenate the ASCII units into the plain transliteration."""
        if record.needs_processing:
            record.transliteration = "".join(record.ascii_units)
        return record

    # ── Stage 4 ───────────────────────────────────────────────────────────────

    def swap(self, record: WordRecord) -> WordRecord:
        """Apply the consonant-pair cipher phoneme by phoneme."""
        if record.needs_processing:
            record.swapped = self._cipher.swap_phonemes(record.ascii_units)
        return record

    # ── Stage 5 ───────────────────────────────────────────────────────────────

    def repair(self, record: WordRecord) -> WordRecord:
        """
        Apply the final-form rules and set :attr:`WordRecord.final`.

        * a form ending in ``h`` gets ``u`` appended;
        * a singular verb drops the cipher image of its ``-s``/``-z`` suffix;
        * a plural noun keeps its suffix.
        """
        if not record.needs_processing:
            return record

        form = record.swapped
        if form.endswith(C.OPEN_SYLLABLE_TRIGGER):
            form += C.OPEN_SYLLABLE_VOWEL

        if record.singular_verb_with_s and record.ascii_units:
            last = record.ascii_units[-1]
            if last in C.VERB_SUFFIX_SOUNDS and form.endswith(self._cipher.swap_unit(last)):
                form = form[:-1]

        record.final = form
        return record

    # ── Convenience ───────────────────────────────────────────────────────────

    def new_record(self, word: str) -> WordRecord:
        return WordRecord(word=word)

    def run(self, word: str) -> WordRecord:
        """Run every stage for one word and return its completed record."""
        record = self.apply_exception(self.new_record(word))
        for stage in (self.resolve, self.transliterate, self.swap, self.repair):
            record = stage(record)
        return record

    # ──────────────────────────────────────────
    # Internal helpers
    # ──────────────────────────────────────────

    def _classify(self, word: str) -> PosTags:
        try:
            tags = self._tagger.classify(word)
        except Exception as exc:  # noqa: BLE001
            _log.warn("word", "tagger_failed", {"word": word, "error": str(exc)})
            return PosTags()
        if not isinstance(tags, PosTags):
            _log.warn("word", "tagger_failed", {
                "word": word,
                "error": f"tagger returned {type(tags).__name__}, expected PosTags",
            })
            return PosTags()
        return tags
