"""
tests/conftest.py — Shared fixtures for the Kairen test suite.

The JSONL logger is a process-wide singleton that picks its directory on
first use, so ``KAIREN_LOG_DIR`` is pointed at a temporary directory before
any project module is imported.
"""

from __future__ import annotations

import os
import tempfile

os.environ.setdefault("KAIREN_LOG_DIR", tempfile.mkdtemp(prefix="kairen-logs-"))

from typing import Dict  # noqa: E402

import pytest  # noqa: E402

from core.logger import get_logger  # noqa: E402
from lookup.phoneme_table import PhonemeTable  # noqa: E402
from lookup.pos_tagger import PosTags  # noqa: E402


class StubTagger:
    """Tagger answering from a fixed word → PosTags table."""

    def __init__(self, tags: Dict[str, PosTags]) -> None:
        self._tags = {w.lower(): t for w, t in tags.items()}
        self.calls: list[str] = []

    def classify(self, word: str) -> PosTags:
        self.calls.append(word)
        return self._tags.get(word.lower(), PosTags())


PLURAL_NOUN = PosTags(is_noun=True, is_plural=True)
SINGULAR_VERB = PosTags(is_verb=True, is_singular=True)


@pytest.fixture(autouse=True)
def _debug_logging():
    """Keep every level flowing to the JSONL file regardless of test order."""
    get_logger().set_level("DEBUG")
    yield
    get_logger().set_level("DEBUG")


@pytest.fixture()
def table() -> PhonemeTable:
    return PhonemeTable.from_mapping({
        "THE": [["DH", "AH"]],
        "CATS": [["K", "AE1", "T", "S"]],
        "RUN": ["R", "AH1", "N"],
        "RUNS": [["R", "AH1", "N", "Z"]],
        "BACH": ["B", "AA1", "HH"],
        "EYE": ["AY1"],
        "LAPH": ["L", "AE", "P", "HH"],
    })


@pytest.fixture()
def tagger() -> StubTagger:
    return StubTagger({
        "cats": PLURAL_NOUN,
        "runs": SINGULAR_VERB,
    })
