"""
tests/test_lookup.py — Phoneme table, dictionary client, and POS tagger.

No network access: the HTTP session and NLTK entry points are mocked.
"""

from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

import nltk
import requests

from core.config import DictionaryApiConfig
from lookup.dictionary_api import DictionaryApiClient, DictionaryEntry, pick_transcription
from lookup.http import build_session
from lookup.phoneme_table import PhonemeTable
from lookup.pos_tagger import NltkPosTagger, NullPosTagger, PosTagger, PosTags


def _response(status: int = 200, payload=None, bad_json: bool = False) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    resp.ok = 200 <= status < 400
    if bad_json:
        resp.json.side_effect = ValueError("no json")
    else:
        resp.json.return_value = payload
    return resp


# ──────────────────────────────────────────────────────────────
# Phoneme table
# ──────────────────────────────────────────────────────────────

class TestPhonemeTable(unittest.TestCase):

    def test_flat_and_syllabified_entries(self) -> None:
        table = PhonemeTable.from_mapping({
            "cat": ["K", "AE1", "T"],
            "HELLO": [["HH", "AH"], ["L", "OW"]],
        })
        self.assertEqual(table.lookup("Cat"), ["K", "AE1", "T"])
        self.assertEqual(table.syllables("cat"), [["K", "AE1", "T"]])
        self.assertEqual(table.lookup("hello"), ["HH", "AH", "L", "OW"])
        self.assertEqual(table.syllables("hello"), [["HH", "AH"], ["L", "OW"]])

    def test_unknown_word(self) -> None:
        table = PhonemeTable.from_mapping({"A": ["AH"]})
        self.assertEqual(table.lookup("zzz"), [])
        self.assertEqual(table.syllables("zzz"), [])
        self.assertNotIn("zzz", table)
        self.assertIn("a", table)

    def test_invalid_entries_rejected(self) -> None:
        with self.assertRaises(ValueError):
            PhonemeTable.from_mapping({"A": "AH"})  # type: ignore[dict-item]
        with self.assertRaises(ValueError):
            PhonemeTable.from_mapping({"A": [1, 2]})  # type: ignore[list-item]

    def test_bundled_sample(self) -> None:
        table = PhonemeTable.load_default()
        self.assertGreater(len(table), 10)
        self.assertEqual(table.lookup("the"), ["DH", "AH"])
        self.assertEqual(table.lookup("cats"), ["K", "AE", "T", "S"])

    def test_from_json(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "table.json"
            path.write_text(json.dumps({"RUN": [["R", "AH", "N"]]}), encoding="utf-8")
            table = PhonemeTable.from_json(path)
            self.assertEqual(table.lookup("run"), ["R", "AH", "N"])
            self.assertEqual(table.source, str(path))

    def test_from_json_malformed(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "table.json"
            path.write_text("{not json", encoding="utf-8")
            with self.assertRaises(ValueError):
                PhonemeTable.from_json(path)

    def test_from_json_missing(self) -> None:
        with self.assertRaises(FileNotFoundError):
            PhonemeTable.from_json("/nonexistent/table.json")

    def test_from_url(self) -> None:
        session = MagicMock()
        session.get.return_value = _response(payload={"DOG": [["D", "AO", "G"]]})
        table = PhonemeTable.from_url("https://example.test/t.json", session=session)
        self.assertEqual(table.lookup("dog"), ["D", "AO", "G"])
        self.assertEqual(table.source, "https://example.test/t.json")
        session.get.return_value.raise_for_status.assert_called_once()

    def test_from_url_http_error_propagates(self) -> None:
        session = MagicMock()
        resp = _response(status=500)
        resp.raise_for_status.side_effect = requests.HTTPError("boom")
        session.get.return_value = resp
        with self.assertRaises(requests.HTTPError):
            PhonemeTable.from_url("https://example.test/t.json", session=session)


# ──────────────────────────────────────────────────────────────
# Dictionary API client
# ──────────────────────────────────────────────────────────────

class TestDictionaryModels(unittest.TestCase):

    def test_headline_phonetic_preferred(self) -> None:
        entry = DictionaryEntry.model_validate({
            "word": "hello",
            "phonetic": "/həˈləʊ/",
            "phonetics": [{"text": "/hɛˈloʊ/"}],
        })
        self.assertEqual(entry.transcription(), "/həˈləʊ/")

    def test_falls_back_to_first_non_empty_alternative(self) -> None:
        entry = DictionaryEntry.model_validate({
            "word": "cat",
            "phonetic": "  ",
            "phonetics": [{"text": ""}, {"audio": "x.mp3"}, {"text": "/kæt/"}],
        })
        self.assertEqual(entry.transcription(), "/kæt/")

    def test_pick_transcription_across_entries(self) -> None:
        entries = [
            DictionaryEntry.model_validate({"word": "a", "phonetics": []}),
            DictionaryEntry.model_validate({"word": "a", "phonetic": "/ə/"}),
        ]
        self.assertEqual(pick_transcription(entries), "/ə/")
        self.assertIsNone(pick_transcription([]))


class TestDictionaryApiClient(unittest.TestCase):

    def setUp(self) -> None:
        self.session = MagicMock()
        self.config = DictionaryApiConfig(base_url="https://dict.test/en/", timeout_s=2.5)
        self.client = DictionaryApiClient(self.config, session=self.session)

    def test_hit(self) -> None:
        self.session.get.return_value = _response(payload=[
            {"word": "cat", "phonetic": "/kæt/", "meanings": []},
        ])
        self.assertEqual(self.client.fetch_pronunciation("Cat"), "/kæt/")
        self.session.get.assert_called_once_with("https://dict.test/en/cat", timeout=2.5)

    def test_word_is_url_quoted(self) -> None:
        self.session.get.return_value = _response(status=404)
        self.client.fetch_pronunciation("a b")
        self.session.get.assert_called_once_with("https://dict.test/en/a%20b", timeout=2.5)

    def test_not_found(self) -> None:
        self.session.get.return_value = _response(status=404, payload={"title": "No Definitions Found"})
        self.assertIsNone(self.client.fetch_pronunciation("qwzx"))

    def test_server_error(self) -> None:
        self.session.get.return_value = _response(status=503)
        self.assertIsNone(self.client.fetch_pronunciation("cat"))

    def test_transport_error(self) -> None:
        self.session.get.side_effect = requests.ConnectionError("down")
        self.assertIsNone(self.client.fetch_pronunciation("cat"))

    def test_timeout(self) -> None:
        self.session.get.side_effect = requests.Timeout("slow")
        self.assertIsNone(self.client.fetch_pronunciation("cat"))

    def test_bad_json(self) -> None:
        self.session.get.return_value = _response(bad_json=True)
        self.assertIsNone(self.client.fetch_pronunciation("cat"))

    def test_wrong_shape(self) -> None:
        self.session.get.return_value = _response(payload={"word": "cat"})
        self.assertIsNone(self.client.fetch_pronunciation("cat"))

    def test_entry_without_transcription(self) -> None:
        self.session.get.return_value = _response(payload=[{"word": "cat", "phonetics": []}])
        self.assertIsNone(self.client.fetch_pronunciation("cat"))

    def test_blank_word_skips_request(self) -> None:
        self.assertIsNone(self.client.fetch_pronunciation("  "))
        self.session.get.assert_not_called()

    def test_close_closes_session(self) -> None:
        self.client.close()
        self.session.close.assert_called_once()


class TestBuildSession(unittest.TestCase):

    def test_retry_policy_mounted(self) -> None:
        session = build_session(total_retries=3, backoff_factor=0.1)
        adapter = session.get_adapter("https://example.test/")
        self.assertEqual(adapter.max_retries.total, 3)
        self.assertEqual(adapter.max_retries.backoff_factor, 0.1)
        self.assertIn(503, adapter.max_retries.status_forcelist)
        self.assertNotIn(404, adapter.max_retries.status_forcelist)
        self.assertEqual(session.headers["Accept"], "application/json")
        session.close()


# ──────────────────────────────────────────────────────────────
# POS tagger
# ──────────────────────────────────────────────────────────────

def _fake_pos_tag(tags: dict):
    """Return a pos_tag replacement answering per (frame, word)."""
    def pos_tag(tokens):
        frame, word = tokens
        return [(frame, "DT" if frame == "the" else "PRP"), (word, tags[(frame, word)])]
    return pos_tag


class TestNltkPosTagger(unittest.TestCase):

    def test_protocol_conformance(self) -> None:
        self.assertIsInstance(NltkPosTagger(), PosTagger)
        self.assertIsInstance(NullPosTagger(), PosTagger)

    def test_null_tagger_knows_nothing(self) -> None:
        self.assertEqual(NullPosTagger().classify("cats"), PosTags())

    def test_plural_noun(self) -> None:
        fake = _fake_pos_tag({("the", "cats"): "NNS", ("it", "cats"): "NNS"})
        with patch.object(nltk.data, "find", return_value="ok"), \
             patch.object(nltk, "pos_tag", side_effect=fake):
            tags = NltkPosTagger().classify("Cats")
        self.assertEqual(tags, PosTags(is_noun=True, is_verb=False, is_plural=True, is_singular=False))

    def test_singular_verb(self) -> None:
        fake = _fake_pos_tag({("the", "runs"): "NNS", ("it", "runs"): "VBZ"})
        with patch.object(nltk.data, "find", return_value="ok"), \
             patch.object(nltk, "pos_tag", side_effect=fake):
            tags = NltkPosTagger().classify("runs")
        self.assertTrue(tags.is_verb)
        self.assertTrue(tags.is_singular)

    def test_tagger_exception_is_all_false(self) -> None:
        with patch.object(nltk.data, "find", return_value="ok"), \
             patch.object(nltk, "pos_tag", side_effect=RuntimeError("broken")):
            self.assertEqual(NltkPosTagger().classify("cats"), PosTags())

    def test_missing_model_without_download(self) -> None:
        with patch.object(nltk.data, "find", side_effect=LookupError("missing")), \
             patch.object(nltk, "download") as download, \
             patch.object(nltk, "pos_tag") as pos_tag:
            tags = NltkPosTagger(auto_download=False).classify("cats")
        self.assertEqual(tags, PosTags())
        download.assert_not_called()
        pos_tag.assert_not_called()

    def test_missing_model_downloaded_once(self) -> None:
        fake = _fake_pos_tag({("the", "dogs"): "NNS", ("it", "dogs"): "VBZ"})
        with patch.object(nltk.data, "find", side_effect=LookupError("missing")), \
             patch.object(nltk, "download", return_value=True) as download, \
             patch.object(nltk, "pos_tag", side_effect=fake):
            tagger = NltkPosTagger(auto_download=True)
            tagger.classify("dogs")
            tagger.classify("dogs")
        download.assert_called_once()

    def test_empty_word(self) -> None:
        self.assertEqual(NltkPosTagger().classify(""), PosTags())

    def test_to_dict(self) -> None:
        self.assertEqual(
            PosTags(is_noun=True).to_dict(),
            {"is_noun": True, "is_verb": False, "is_plural": False, "is_singular": False},
        )
