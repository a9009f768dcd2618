"""
text/segmenter.py — Lossless sentence segmentation into word / non-word runs.

Every maximal run of word characters (letters, digits, underscore) becomes a
``word`` token; every maximal run of anything else (spaces, punctuation)
becomes a ``non-word`` token. Concatenating the token texts always
reconstructs the input exactly.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from core.constants import TokenType

_RUNS = re.compile(r"(\w+)|\W+")


@dataclass(frozen=True)
class Token:
    """
    A classified contiguous span of input text.

    Attributes:
        text: Literal characters of the span.
        type: :attr:`TokenType.WORD` or :attr:`TokenType.NON_WORD`.
        start: Code-point offset of the span in the original input.
    """

    text: str
    type: TokenType
    start: int = 0

    @property
    def is_word(self) -> bool:
        """True for word-character runs."""
        return self.type is TokenType.WORD


def segment(sentence: Optional[str]) -> list[Token]:
    """
    Split *sentence* into alternating word and non-word tokens.

    Example::

        [t.text for t in segment("The cats run.")]
        # → ['The', ' ', 'cats', ' ', 'run', '.']

    Args:
        sentence: Raw input; ``None`` and ``""`` yield an empty list.

    Returns:
        Tokens in left-to-right order.
    """
    if not sentence:
        return []
    tokens: list[Token] = []
    for match in _RUNS.finditer(sentence):
        run = match.group(0)
        kind = TokenType.WORD if match.group(1) is not None else TokenType.NON_WORD
        tokens.append(Token(text=run, type=kind, start=match.start()))
    return tokens


def join(tokens: list[Token]) -> str:
    """Concatenate token texts back into the original string."""
    return "".join(t.text for t in tokens)
