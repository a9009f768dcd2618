"""
cipher/engine.py — Self-inverse Kairen substitution cipher.

The cipher swaps paired ASCII units (digraphs and single letters). Text is
first segmented into units by greedy longest match, then every unit is
relabeled through the pair table in one pass, so a unit produced by the
swap is never swapped again. ``h``, the vowels, and any letter that is not
part of a pair are fixed points.

Because relabeling happens per unit, :meth:`CipherEngine.swap_units` is an
exact involution. :meth:`CipherEngine.swap` on raw text is an involution
whenever the swapped text segments back into the same unit boundaries; the
word pipeline sidesteps the ambiguity by splitting each phoneme separately.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Mapping, Sequence

from core.constants import KairenConstants as C

# ──────────────────────────────────────────────────────────────
# Pair table
# ──────────────────────────────────────────────────────────────

DIGRAPH_PAIRS: tuple[tuple[str, str], ...] = (
    ("sh", "th"),
    ("zh", "dh"),
    ("ch", "k"),
    ("ng", "mb"),
)

LETTER_PAIRS: tuple[tuple[str, str], ...] = (
    ("g", "j"),
    ("t", "p"),
    ("d", "b"),
    ("s", "f"),
    ("z", "v"),
    ("m", "n"),
    ("r", "l"),
    ("y", "w"),
)

FIXED_UNITS: frozenset[str] = frozenset({"h", "a", "e", "i", "o", "u"})


class CipherEngine:
    """
    Unit-level substitution cipher satisfying ``swap(swap(x)) == x``.

    Args:
        pairs: Unit pairs to swap. Each unit may appear in at most one pair.
        fixed: Units that map to themselves and must not appear in a pair.

    Raises:
        ValueError: If a unit is reused across pairs, a pair swaps a unit
            with itself, a fixed unit is also paired, or a unit is not
            spelled with ``a``–``z``.
    """

    def __init__(
        self,
        pairs: Iterable[tuple[str, str]] = DIGRAPH_PAIRS + LETTER_PAIRS,
        fixed: frozenset[str] = FIXED_UNITS,
    ) -> None:
        mapping: dict[str, str] = {}
        for left, right in pairs:
            if left == right:
                raise ValueError(f"Cipher pair maps a unit to itself: {left!r}")
            for unit in (left, right):
                if not unit or not set(unit) <= C.ASCII_UNIT_ALPHABET:
                    raise ValueError(f"Cipher unit must be lowercase ASCII: {unit!r}")
                if unit in mapping:
                    raise ValueError(f"Cipher unit appears in more than one pair: {unit!r}")
                if unit in fixed:
                    raise ValueError(f"Cipher unit is declared fixed but also paired: {unit!r}")
            mapping[left] = right
            mapping[right] = left

        for unit in fixed:
            mapping[unit] = unit

        for unit, image in mapping.items():
            if mapping[image] != unit:
                raise ValueError(f"Cipher map is not self-inverse at {unit!r}")

        self._map: Mapping[str, str] = MappingProxyType(mapping)
        # Longest first so digraphs claim their letters before single-letter units
        self._units_by_length: tuple[str, ...] = tuple(
            sorted(mapping, key=lambda u: (-len(u), u))
        )
        self._max_len: int = max((len(u) for u in mapping), default=1)

    # ──────────────────────────────────────────
    # Public API
    # ──────────────────────────────────────────

    @property
    def mapping(self) -> Mapping[str, str]:
        """Read-only unit → swapped unit table (fixed points included)."""
        return self._map

    @property
    def units(self) -> tuple[str, ...]:
        """All known units, longest first."""
        return self._units_by_length

    def swap_unit(self, unit: str) -> str:
        """Return the paired counterpart of *unit*; unknown units are fixed points."""
        return self._map.get(unit, unit)

    def split(self, text: str) -> list[str]:
        """
        Segment *text* into cipher units by greedy longest match.

        Characters that start no known unit become single-character units
        of their own, so ``"".join(split(text)) == text`` always holds.

        Example::

            CipherEngine().split("chang")   # → ['ch', 'a', 'ng']
        """
        units: list[str] = []
        offset = 0
        while offset < len(text):
            for size in range(min(self._max_len, len(text) - offset), 0, -1):
                piece = text[offset:offset + size]
                if size == 1 or piece in self._map:
                    units.append(piece)
                    offset += size
                    break
        return units

    def swap_units(self, units: Sequence[str]) -> list[str]:
        """
        Relabel every unit through the pair table in a single pass.

        This is an exact involution: ``swap_units(swap_units(u)) == list(u)``.
        """
        return [self.swap_unit(u) for u in units]

    def swap(self, text: str) -> str:
        """
        Apply the cipher to a whole ASCII string.

        Example::

            CipherEngine().swap("kat")   # → 'chap'
        """
        return "".join(self.swap_units(self.split(text)))

    def swap_phonemes(self, phonemes: Sequence[str]) -> str:
        """
        Apply the cipher to a phoneme sequence without merging across phonemes.

        Each phoneme is split into units on its own, so adjacent phonemes
        such as ``p`` + ``h`` are never read as a digraph.

        Example::

            CipherEngine().swap_phonemes(["a", "p", "h"])   # → 'ath'
        """
        units: list[str] = []
        for phoneme in phonemes:
            units.extend(self.split(phoneme))
        return "".join(self.swap_units(units))


#: Shared default engine, built once at import and read-only thereafter.
DEFAULT_CIPHER: CipherEngine = CipherEngine()
