"""
lookup/dictionary_api.py — Remote phonetic-alphabet pronunciation lookup.

Queries a free-dictionary style API (``GET <base_url>/<word>``) and returns
the first IPA transcription found. Every failure — transport error, timeout,
404, malformed payload, entry without a transcription — is reported as
``None`` so a single word can never fail a whole conversion.
"""

from __future__ import annotations

from typing import Optional
from urllib.parse import quote

import requests
from pydantic import BaseModel, TypeAdapter, ValidationError, field_validator

from core.config import DictionaryApiConfig
from core.logger import get_logger
from lookup.http import build_session

_log = get_logger()


# ──────────────────────────────────────────────────────────────
# Response models
# ──────────────────────────────────────────────────────────────

class Phonetic(BaseModel):
    """One entry of the ``phonetics`` array."""

    text: Optional[str] = None
    audio: Optional[str] = None

    @field_validator("text")
    @classmethod
    def blank_is_missing(cls, v: Optional[str]) -> Optional[str]:
        """Treat empty or whitespace-only transcriptions as absent."""
        if v is None or not v.strip():
            return None
        return v.strip()


class DictionaryEntry(BaseModel):
    """
    One dictionary entry; unknown fields (meanings, license, …) are ignored.
    """

    word: str = ""
    phonetic: Optional[str] = None
    phonetics: list[Phonetic] = []

    @field_validator("phonetic")
    @classmethod
    def blank_is_missing(cls, v: Optional[str]) -> Optional[str]:
        """Treat empty or whitespace-only transcriptions as absent."""
        if v is None or not v.strip():
            return None
        return v.strip()

    def transcription(self) -> Optional[str]:
        """Return the headline transcription, else the first non-empty alternative."""
        if self.phonetic:
            return self.phonetic
        for item in self.phonetics:
            if item.text:
                return item.text
        return None


_ENTRIES = TypeAdapter(list[DictionaryEntry])


def pick_transcription(entries: list[DictionaryEntry]) -> Optional[str]:
    """Return the first transcription across *entries*, or ``None``."""
    for entry in entries:
        text = entry.transcription()
        if text:
            return text
    return None


# ──────────────────────────────────────────────────────────────
# Client
# ──────────────────────────────────────────────────────────────

class DictionaryApiClient:
    """
    Fail-soft client for the remote pronunciation service.

    The underlying :class:`requests.Session` retries transient failures a
    bounded number of times (see :func:`~lookup.http.build_session`) and each
    request carries a timeout, so a slow service delays a word but never
    blocks it indefinitely.

    Args:
        config: Endpoint, timeout and retry settings.
        session: Optional pre-built session (injected in tests).
    """

    def __init__(
        self,
        config: DictionaryApiConfig = DictionaryApiConfig(),
        session: Optional[requests.Session] = None,
    ) -> None:
        self._config = config
        self._session = session or build_session(
            total_retries=config.retries,
            backoff_factor=config.backoff_factor,
        )
        self._base_url = config.base_url.rstrip("/")

    def fetch_pronunciation(self, word: str) -> Optional[str]:
        """
        Return an IPA transcription for *word*, or ``None``.

        Args:
            word: English word (case-insensitive).

        Returns:
            The transcription string as published (usually ``/.../``), or
            ``None`` on any transport, HTTP, parse, or not-found condition.
        """
        if not word or not word.strip():
            return None

        url = f"{self._base_url}/{quote(word.strip().lower())}"
        try:
            response = self._session.get(url, timeout=self._config.timeout_s)
        except requests.RequestException as exc:
            _log.warn("lookup", "dictionary_transport_error", {"word": word, "error": str(exc)})
            return None

        if response.status_code == 404:
            _log.debug("lookup", "dictionary_not_found", {"word": word})
            return None
        if not response.ok:
            _log.warn("lookup", "dictionary_http_error", {
                "word": word, "status": response.status_code,
            })
            return None

        try:
            entries = _ENTRIES.validate_python(response.json())
        except (ValueError, ValidationError) as exc:
            _log.warn("lookup", "dictionary_bad_payload", {"word": word, "error": str(exc)})
            return None

        ipa = pick_transcription(entries)
        _log.debug("lookup", "dictionary_hit" if ipa else "dictionary_no_ipa", {
            "word": word, "ipa": ipa,
        })
        return ipa

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._session.close()
