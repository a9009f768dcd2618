"""
lookup/phoneme_table.py — Static word → phoneme-sequence table.

Entries are keyed by uppercased word and hold ARPAbet phoneme codes, either
as a flat list (``["K", "AE1", "T"]``) or as a list of syllables
(``[["K", "AE", "T"], ["S"]]``). The table is built once through an explicit
constructor (in-memory mapping, JSON file, remote URL, or the bundled
sample) and is read-only afterwards.
"""

from __future__ import annotations

import json
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional, Union

import requests
from pydantic import TypeAdapter, ValidationError

from core.constants import KairenConstants as C
from core.logger import get_logger
from lookup.http import build_session

_log = get_logger()

_BUNDLED_TABLE = Path(__file__).parent / "data" / "phoneme_table.json"

Syllables = tuple[tuple[str, ...], ...]

_ENTRIES = TypeAdapter(dict[str, Union[list[str], list[list[str]]]])


def _to_syllables(value: Union[list[str], list[list[str]]]) -> Syllables:
    """Normalise a flat or syllabified entry to a tuple of syllables."""
    if value and all(isinstance(item, str) for item in value):
        return (tuple(value),)  # type: ignore[arg-type]
    return tuple(tuple(s) for s in value if s)  # type: ignore[union-attr]


class PhonemeTable:
    """
    Read-only, case-insensitive word → phoneme table.

    Args:
        entries: Mapping of word → flat phoneme list or list of syllables.
        source: Human-readable origin, used in log entries.

    Raises:
        ValueError: If *entries* does not have the expected shape.
    """

    def __init__(
        self,
        entries: Mapping[str, Union[list[str], list[list[str]]]],
        source: str = "memory",
    ) -> None:
        try:
            validated = _ENTRIES.validate_python(dict(entries))
        except ValidationError as exc:
            raise ValueError(f"Invalid phoneme table from {source}: {exc}") from exc

        table = {word.upper(): _to_syllables(value) for word, value in validated.items()}
        self._table: Mapping[str, Syllables] = MappingProxyType(table)
        self._source = source
        _log.info("lookup", "phoneme_table_loaded", {"source": source, "words": len(table)})

    # ──────────────────────────────────────────
    # Constructors
    # ──────────────────────────────────────────

    @classmethod
    def from_mapping(
        cls, entries: Mapping[str, Union[list[str], list[list[str]]]]
    ) -> "PhonemeTable":
        """Build a table from an in-memory mapping."""
        return cls(entries, source="memory")

    @classmethod
    def from_json(cls, path: Path | str) -> "PhonemeTable":
        """
        Load a table from a JSON file.

        Raises:
            FileNotFoundError: If *path* does not exist.
            ValueError: If the file is not a valid table.
        """
        path = Path(path)
        with path.open("r", encoding="utf-8") as fh:
            try:
                raw = json.load(fh)
            except json.JSONDecodeError as exc:
                raise ValueError(f"Phoneme table is not valid JSON: {path}") from exc
        return cls(raw, source=str(path))

    @classmethod
    def from_url(
        cls,
        url: str = C.PHONEME_TABLE_URL,
        session: Optional[requests.Session] = None,
        timeout_s: float = 30.0,
    ) -> "PhonemeTable":
        """
        Fetch a table over HTTP.

        Raises:
            requests.RequestException: On transport or HTTP errors.
            ValueError: If the payload is not a valid table.
        """
        session = session or build_session()
        response = session.get(url, timeout=timeout_s)
        response.raise_for_status()
        try:
            raw = response.json()
        except ValueError as exc:
            raise ValueError(f"Phoneme table at {url} is not valid JSON") from exc
        return cls(raw, source=url)

    @classmethod
    def load_default(cls) -> "PhonemeTable":
        """Load the small sample table bundled with the package."""
        return cls.from_json(_BUNDLED_TABLE)

    # ──────────────────────────────────────────
    # Queries
    # ──────────────────────────────────────────

    def syllables(self, word: str) -> list[list[str]]:
        """
        Return the syllable breakdown for *word*, or ``[]`` if unknown.

        Example::

            table.syllables("cats")   # → [['K', 'AE', 'T', 'S']]
        """
        return [list(s) for s in self._table.get(word.upper(), ())]

    def lookup(self, word: str) -> list[str]:
        """
        Return the flat phoneme sequence for *word*, or ``[]`` if unknown.

        Example::

            table.lookup("Cats")   # → ['K', 'AE', 'T', 'S']
        """
        return [p for syllable in self._table.get(word.upper(), ()) for p in syllable]

    @property
    def source(self) -> str:
        """Where the table was loaded from."""
        return self._source

    def __contains__(self, word: object) -> bool:
        return isinstance(word, str) and word.upper() in self._table

    def __len__(self) -> int:
        return len(self._table)
