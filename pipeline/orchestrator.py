"""
pipeline/orchestrator.py — KairenConverter: sentence-level orchestrator.

Segments a sentence, drives every word token through the
:class:`~pipeline.word_pipeline.WordPipeline` one stage at a time, and
returns the ordered records::

    segment ─► exceptions ─► resolve ─► transliterate ─► swap ─► repair

Each stage boundary is logged, and an internal EventBus lets callers observe
conversions without holding references to the pipeline internals.
Pronunciation lookups may run on a thread pool; every other stage is
sequential and order-preserving.
"""

from __future__ import annotations

import concurrent.futures
import time
from collections import defaultdict
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from cipher.engine import DEFAULT_CIPHER, CipherEngine
from core.config import KairenConfig, load_config
from core.constants import ResolverKind
from core.logger import get_logger
from lookup.dictionary_api import DictionaryApiClient
from lookup.phoneme_table import PhonemeTable
from lookup.pos_tagger import NltkPosTagger, NullPosTagger, PosTagger
from pipeline.records import WordRecord
from pipeline.resolvers import (
    PhonemeSetResolver,
    PhoneticAlphabetResolver,
    PronunciationResolver,
    Resolution,
)
from pipeline.word_pipeline import WordPipeline, build_exception_table
from text.segmenter import segment

_log = get_logger()

# ── EventBus event-name constants ─────────────────────────────────────────────

ON_SEGMENTED = "ON_SEGMENTED"
"""Fired after segmentation with the token texts and types."""

ON_WORD_DONE = "ON_WORD_DONE"
"""Fired once per token, in order, with the completed record dict."""

ON_CONVERTED = "ON_CONVERTED"
"""Fired after a conversion with the rendered sentence and latency."""


# ── Factories ─────────────────────────────────────────────────────────────────

def build_phoneme_table(config: KairenConfig) -> PhonemeTable:
    """
    Build the phoneme table named by *config*.

    A local ``path`` wins over a ``url``; with neither, the bundled sample
    table is used.
    """
    table_cfg = config.phoneme_table
    if table_cfg.resolved_path is not None:
        return PhonemeTable.from_json(table_cfg.resolved_path)
    if table_cfg.url:
        return PhonemeTable.from_url(table_cfg.url)
    return PhonemeTable.load_default()


def build_resolver(
    config: KairenConfig,
    table: Optional[PhonemeTable] = None,
) -> PronunciationResolver:
    """Build the pronunciation strategy selected by ``resolver.kind``."""
    if config.resolver.resolver_kind is ResolverKind.PHONETIC_ALPHABET:
        return PhoneticAlphabetResolver(DictionaryApiClient(config.dictionary_api))
    return PhonemeSetResolver(table if table is not None else build_phoneme_table(config))


def build_tagger(config: KairenConfig) -> PosTagger:
    if not config.tagger.enabled:
        return NullPosTagger()
    return NltkPosTagger(auto_download=config.tagger.auto_download)


# ── KairenConverter ───────────────────────────────────────────────────────────

class KairenConverter:
    """
    Converts English sentences into Kairen.

    Args:
        resolver: Pronunciation strategy.
        tagger: Part-of-speech collaborator; ``None`` disables tagging.
        cipher: Consonant-pair cipher.
        exceptions: Extra ``WORD → kairen`` entries merged over the built-ins.
        max_workers: Pronunciation lookups run on this many threads when >1.

    Example::

        conv = KairenConverter(PhonemeSetResolver(PhonemeTable.load_default()))
        conv.subscribe(ON_CONVERTED, lambda d: print(d["text"]))
        conv.translate("The cats run.")
    """

    def __init__(
        self,
        resolver: PronunciationResolver,
        tagger: Optional[PosTagger] = None,
        cipher: CipherEngine = DEFAULT_CIPHER,
        exceptions: Optional[Dict[str, str]] = None,
        max_workers: int = 1,
    ) -> None:
        if max_workers < 1:
            raise ValueError(f"max_workers must be ≥1, got {max_workers}")
        self._words = WordPipeline(
            resolver=resolver,
            tagger=tagger,
            cipher=cipher,
            exceptions=build_exception_table(exceptions),
        )
        self._max_workers = max_workers
        self._subscribers: Dict[str, List[Callable[[Dict[str, Any]], None]]] = (
            defaultdict(list)
        )
        _log.info("pipeline", "converter_ready", {
            "resolver": resolver.kind.value,
            "tagger": type(tagger).__name__ if tagger is not None else None,
            "max_workers": max_workers,
        })

    # ── Construction from config ──────────────────────────────────────────────

    @classmethod
    def from_config(cls, config: KairenConfig) -> "KairenConverter":
        """Wire a converter (and the logger level) from a loaded config."""
        _log.set_level(config.logging.level)
        return cls(
            resolver=build_resolver(config),
            tagger=build_tagger(config),
            exceptions=config.pipeline.exceptions,
            max_workers=config.pipeline.max_workers,
        )

    @classmethod
    def from_config_file(cls, path: Path | str | None = None) -> "KairenConverter":
        return cls.from_config(load_config(path))

    # ── EventBus ──────────────────────────────────────────────────────────────

    def subscribe(self, event: str, callback: Callable[[Dict[str, Any]], None]) -> None:
        """
        Register *callback* to receive payloads whenever *event* is published.

        Callbacks run synchronously in registration order; a raising callback
        is logged and the rest still run.

        Args:
            event:    One of the ``ON_*`` module-level constants.
            callback: Callable ``(data: dict) → None``.
        """
        self._subscribers[event].append(callback)
        _log.info("pipeline", "event_subscribed", {"event": event})

    def publish(self, event: str, data: Dict[str, Any]) -> None:
        for cb in self._subscribers.get(event, []):
            try:
                cb(data)
            except Exception as exc:  # noqa: BLE001
                _log.error("pipeline", "event_callback_error", {
                    "event": event,
                    "error": str(exc),
                })

    # ── Conversion ────────────────────────────────────────────────────────────

    def convert(self, sentence: Optional[str]) -> List[WordRecord]:
        """
        Convert *sentence* into ordered per-token records.

        Args:
            sentence: English text; ``None`` or empty yields ``[]``.

        Returns:
            One :class:`~pipeline.records.WordRecord` per segmented token, in
            input order. Concatenating their ``final`` values renders the
            Kairen sentence.
        """
        t0 = time.perf_counter()
        tokens = segment(sentence)
        if not tokens:
            _log.debug("pipeline", "empty_input", {})
            return []

        records = [
            self._words.new_record(t.text) if t.is_word else WordRecord.non_word(t.text)
            for t in tokens
        ]
        words = [r for r in records if r.is_word]
        _log.info("pipeline", "segmented", {
            "tokens": len(records), "words": len(words),
        })
        self.publish(ON_SEGMENTED, {
            "tokens": [{"text": r.word, "type": r.type.value} for r in records],
        })

        for r in words:
            self._words.apply_exception(r)
        pending = [r for r in words if r.needs_processing]
        _log.info("pipeline", "exceptions_applied", {
            "resolved_early": len(words) - len(pending),
        })

        resolutions = self._lookup_all([r.word for r in pending])
        for r, resolution in zip(pending, resolutions):
            self._words.resolve(r, resolution)
        _log.info("pipeline", "resolved", {
            "words": len(pending),
            "misses": sum(1 for r in pending if r.lookup_miss),
        })

        for r in pending:
            self._words.transliterate(r)
        _log.info("pipeline", "transliterated", {"words": len(pending)})
        _log.debug("pipeline", "transliterated_forms", {
            "forms": [r.transliteration for r in pending],
        })

        for r in pending:
            self._words.swap(r)
        _log.info("pipeline", "swapped", {"words": len(pending)})
        _log.debug("pipeline", "swapped_forms", {"forms": [r.swapped for r in pending]})

        for r in pending:
            self._words.repair(r)
        _log.info("pipeline", "repaired", {"words": len(pending)})
        _log.debug("pipeline", "repaired_forms", {"forms": [r.final for r in pending]})

        for r in records:
            self.publish(ON_WORD_DONE, r.to_dict())

        text = self.render(records)
        latency_ms = (time.perf_counter() - t0) * 1_000.0
        _log.perf("pipeline", "convert_done", latency_ms, {
            "tokens": len(records),
            "words": len(words),
            "misses": sum(1 for r in pending if r.lookup_miss),
        })
        self.publish(ON_CONVERTED, {"text": text, "latency_ms": round(latency_ms, 2)})
        return records

    @staticmethod
    def render(records: List[WordRecord]) -> str:
        """Concatenate the ``final`` value of every record."""
        return "".join(r.final or "" for r in records)

    def translate(self, sentence: Optional[str]) -> str:
        """Convert *sentence* and return the rendered Kairen text."""
        return self.render(self.convert(sentence))

    def close(self) -> None:
        """Release the resolver's resources (HTTP session, if any)."""
        close = getattr(self._words.resolver, "close", None)
        if callable(close):
            close()

    # ──────────────────────────────────────────
    # Internal helpers
    # ──────────────────────────────────────────

    def _lookup_all(self, words: List[str]) -> List[Resolution]:
        """Look up every word, on a thread pool when configured; order is kept."""
        if self._max_workers <= 1 or len(words) <= 1:
            return [self._words.lookup(w) for w in words]
        with concurrent.futures.ThreadPoolExecutor(
            max_workers=min(self._max_workers, len(words)),
            thread_name_prefix="kairen-lookup",
        ) as pool:
            return list(pool.map(self._words.lookup, words))
