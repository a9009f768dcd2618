"""
lookup/pos_tagger.py — Best-effort part-of-speech classification.

The word pipeline only needs to know whether an ``-s`` word reads as a
plural noun or as a third-person singular verb. :class:`NltkPosTagger`
answers both by tagging the word in two short carrier frames with NLTK's
averaged perceptron tagger:

* noun frame ``the <word>`` — ``NN*`` means noun, ``NNS``/``NNPS`` plural
* verb frame ``it <word>``  — ``VB*`` means verb, ``VBZ`` singular

Any tagger failure yields an all-false :class:`PosTags`.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from core.logger import get_logger

_log = get_logger()

# NLTK ≥3.9 ships the English tagger under the ``_eng`` name
_TAGGER_RESOURCES: tuple[tuple[str, str], ...] = (
    ("taggers/averaged_perceptron_tagger_eng", "averaged_perceptron_tagger_eng"),
    ("taggers/averaged_perceptron_tagger", "averaged_perceptron_tagger"),
)

_PLURAL_NOUN_TAGS = frozenset({"NNS", "NNPS"})
_SINGULAR_VERB_TAGS = frozenset({"VBZ"})


@dataclass(frozen=True)
class PosTags:
    """Grammatical facts about a single word; all false when unknown."""

    is_noun: bool = False
    is_verb: bool = False
    is_plural: bool = False
    is_singular: bool = False

    def to_dict(self) -> dict:
        """Serialise to a JSON-safe dict for structured logging."""
        return {
            "is_noun": self.is_noun,
            "is_verb": self.is_verb,
            "is_plural": self.is_plural,
            "is_singular": self.is_singular,
        }


@runtime_checkable
class PosTagger(Protocol):
    """Minimal interface required of any part-of-speech collaborator."""

    def classify(self, word: str) -> PosTags:
        """Return the grammatical flags for *word*."""
        ...


class NullPosTagger:
    """Tagger used when tagging is disabled; knows nothing about any word."""

    def classify(self, word: str) -> PosTags:
        return PosTags()


class NltkPosTagger:
    """
    Frame-based classifier over :func:`nltk.pos_tag`.

    The tagger model is located lazily on the first :meth:`classify` call.
    If it is missing and *auto_download* is set, it is downloaded once;
    otherwise the tagger stays unavailable and every word is all-false.

    Args:
        auto_download: Fetch the NLTK tagger model when it is not installed.
    """

    def __init__(self, auto_download: bool = False) -> None:
        self._auto_download = auto_download
        self._ready: bool | None = None
        self._lock = threading.Lock()

    def classify(self, word: str) -> PosTags:
        """
        Classify *word* as noun/verb and plural/singular.

        Args:
            word: A single word token.

        Returns:
            The detected :class:`PosTags`; all-false if the tagger is
            unavailable or raises.
        """
        if not word or not self._ensure_ready():
            return PosTags()

        try:
            import nltk  # type: ignore
            noun_tag = nltk.pos_tag(["the", word.lower()])[1][1]
            verb_tag = nltk.pos_tag(["it", word.lower()])[1][1]
        except Exception as exc:  # noqa: BLE001
            _log.warn("tagger", "classify_failed", {"word": word, "error": str(exc)})
            return PosTags()

        tags = PosTags(
            is_noun=noun_tag.startswith("NN"),
            is_verb=verb_tag.startswith("VB"),
            is_plural=noun_tag in _PLURAL_NOUN_TAGS,
            is_singular=verb_tag in _SINGULAR_VERB_TAGS,
        )
        _log.debug("tagger", "classified", {
            "word": word, "noun_frame": noun_tag, "verb_frame": verb_tag, **tags.to_dict(),
        })
        return tags

    # ──────────────────────────────────────────
    # Internal helpers
    # ──────────────────────────────────────────

    def _ensure_ready(self) -> bool:
        """
        Locate (and optionally download) the tagger model once.

        Returns:
            True if :func:`nltk.pos_tag` can be called.
        """
        if self._ready is not None:
            return self._ready
        with self._lock:
            if self._ready is None:
                self._ready = self._locate_model()
        return self._ready

    def _locate_model(self) -> bool:
        try:
            import nltk  # type: ignore
        except ImportError as exc:
            _log.warn("tagger", "nltk_unavailable", {"error": str(exc)})
            return False

        for path, _ in _TAGGER_RESOURCES:
            try:
                nltk.data.find(path)
                _log.info("tagger", "model_found", {"resource": path})
                return True
            except LookupError:
                continue

        if self._auto_download:
            for _, package in _TAGGER_RESOURCES:
                try:
                    if nltk.download(package, quiet=True):
                        _log.info("tagger", "model_downloaded", {"package": package})
                        return True
                except Exception as exc:  # noqa: BLE001
                    _log.warn("tagger", "model_download_failed", {
                        "package": package, "error": str(exc),
                    })

        _log.warn("tagger", "model_missing", {
            "auto_download": self._auto_download,
            "fallback": "no plural/singular flags",
        })
        return False
