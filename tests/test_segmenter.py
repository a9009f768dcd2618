"""
tests/test_segmenter.py — Sentence segmentation into word / non-word runs.
"""

from __future__ import annotations

import unittest

from core.constants import TokenType
from text.segmenter import Token, join, segment


class TestSegment(unittest.TestCase):

    def test_simple_sentence(self) -> None:
        tokens = segment("The cats run.")
        self.assertEqual([t.text for t in tokens], ["The", " ", "cats", " ", "run", "."])
        self.assertEqual(
            [t.type for t in tokens],
            [TokenType.WORD, TokenType.NON_WORD] * 2 + [TokenType.WORD, TokenType.NON_WORD],
        )

    def test_offsets(self) -> None:
        tokens = segment("Hi, you")
        self.assertEqual([t.start for t in tokens], [0, 2, 4])

    def test_punctuation_runs_merge(self) -> None:
        tokens = segment("wait... what?!")
        self.assertEqual([t.text for t in tokens], ["wait", "... ", "what", "?!"])

    def test_digits_and_underscore_are_word_characters(self) -> None:
        tokens = segment("room_42 ok")
        self.assertTrue(tokens[0].is_word)
        self.assertEqual(tokens[0].text, "room_42")

    def test_unicode_letters_are_word_characters(self) -> None:
        tokens = segment("café ñu")
        self.assertEqual([t.text for t in tokens], ["café", " ", "ñu"])

    def test_leading_non_word(self) -> None:
        tokens = segment("  hello")
        self.assertFalse(tokens[0].is_word)
        self.assertEqual(tokens[0].text, "  ")

    def test_empty_and_none(self) -> None:
        self.assertEqual(segment(""), [])
        self.assertEqual(segment(None), [])

    def test_round_trip(self) -> None:
        for text in ["The cats run.", "  a--b  ", "I, EYE & you!", "tab\tnew\nline", "x"]:
            self.assertEqual(join(segment(text)), text)

    def test_tokens_alternate(self) -> None:
        tokens = segment("one, two; three")
        for a, b in zip(tokens, tokens[1:]):
            self.assertNotEqual(a.type, b.type)

    def test_token_is_frozen(self) -> None:
        token = Token(text="a", type=TokenType.WORD)
        with self.assertRaises(Exception):
            token.text = "b"  # type: ignore[misc]
