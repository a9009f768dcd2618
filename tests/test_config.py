"""
tests/test_config.py — YAML configuration loading and validation.
"""

from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from core.config import KairenConfig, config_from_dict, load_config
from core.constants import C, ResolverKind


class TestLoadConfig(unittest.TestCase):

    def _write(self, text: str) -> Path:
        tmp = tempfile.NamedTemporaryFile("w", suffix=".yaml", delete=False, encoding="utf-8")
        tmp.write(text)
        tmp.close()
        self.addCleanup(os.unlink, tmp.name)
        return Path(tmp.name)

    def test_bundled_config_loads(self) -> None:
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("KAIREN_CONFIG", None)
            config = load_config()
        self.assertIsInstance(config, KairenConfig)
        self.assertIs(config.resolver.resolver_kind, ResolverKind.PHONEME_SET)
        self.assertEqual(config.pipeline.max_workers, 4)

    def test_explicit_path(self) -> None:
        path = self._write(
            "resolver:\n  kind: phonetic_alphabet\n"
            "dictionary_api:\n  timeout_s: 1.5\n"
            "pipeline:\n  exceptions:\n    hello: zzz\n"
        )
        config = load_config(path)
        self.assertIs(config.resolver.resolver_kind, ResolverKind.PHONETIC_ALPHABET)
        self.assertEqual(config.dictionary_api.timeout_s, 1.5)
        self.assertEqual(config.dictionary_api.base_url, C.DICTIONARY_API_URL)
        self.assertEqual(config.pipeline.exceptions, {"HELLO": "zzz"})

    def test_env_var_path(self) -> None:
        path = self._write("logging:\n  level: ERROR\n")
        with patch.dict(os.environ, {"KAIREN_CONFIG": str(path)}):
            config = load_config()
        self.assertEqual(config.logging.level, "ERROR")

    def test_explicit_missing_file(self) -> None:
        with self.assertRaises(FileNotFoundError):
            load_config("/nonexistent/kairen.yaml")

    def test_empty_file_uses_defaults(self) -> None:
        config = load_config(self._write(""))
        self.assertEqual(config, KairenConfig())

    def test_non_mapping_rejected(self) -> None:
        with self.assertRaises(ValueError):
            load_config(self._write("- a\n- b\n"))


class TestValidation(unittest.TestCase):

    def test_defaults_are_valid(self) -> None:
        config = config_from_dict({})
        self.assertEqual(config.pipeline.max_workers, 1)
        self.assertTrue(config.tagger.enabled)
        self.assertIsNone(config.phoneme_table.resolved_path)

    def test_unknown_resolver(self) -> None:
        with self.assertRaises(ValueError):
            config_from_dict({"resolver": {"kind": "guess"}})

    def test_unknown_key(self) -> None:
        with self.assertRaises(ValueError):
            config_from_dict({"tagger": {"colour": "blue"}})

    def test_non_positive_timeout(self) -> None:
        with self.assertRaises(ValueError):
            config_from_dict({"dictionary_api": {"timeout_s": 0}})

    def test_negative_retries(self) -> None:
        with self.assertRaises(ValueError):
            config_from_dict({"dictionary_api": {"retries": -1}})

    def test_zero_workers(self) -> None:
        with self.assertRaises(ValueError):
            config_from_dict({"pipeline": {"max_workers": 0}})

    def test_exceptions_must_be_mapping(self) -> None:
        with self.assertRaises(ValueError):
            config_from_dict({"pipeline": {"exceptions": ["I"]}})

    def test_unknown_log_level(self) -> None:
        with self.assertRaises(ValueError):
            config_from_dict({"logging": {"level": "LOUD"}})

    def test_wrong_value_types(self) -> None:
        bad = [
            {"pipeline": {"max_workers": "4"}},
            {"pipeline": {"max_workers": 2.5}},
            {"dictionary_api": {"timeout_s": "5"}},
            {"dictionary_api": {"retries": True}},
            {"dictionary_api": {"backoff_factor": None}},
            {"logging": {"level": 10}},
            {"resolver": {"kind": ["phoneme_set"]}},
            {"tagger": {"enabled": "yes"}},
            {"phoneme_table": {"path": 42}},
        ]
        for raw in bad:
            with self.subTest(raw=raw):
                with self.assertRaises(ValueError):
                    config_from_dict(raw)

    def test_integer_timeout_accepted(self) -> None:
        config = config_from_dict({"dictionary_api": {"timeout_s": 3}})
        self.assertEqual(config.dictionary_api.timeout_s, 3)

    def test_table_path_expands_user(self) -> None:
        config = config_from_dict({"phoneme_table": {"path": "~/table.json"}})
        self.assertEqual(config.phoneme_table.resolved_path, Path.home() / "table.json")

    def test_config_is_frozen(self) -> None:
        config = config_from_dict({})
        with self.assertRaises(Exception):
            config.pipeline = None  # type: ignore[misc]
