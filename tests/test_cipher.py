"""
tests/test_cipher.py — pytest unit tests for cipher.engine.CipherEngine.

The cipher must be its own inverse on unit sequences, and on raw strings
whose segmentation survives the swap.
"""

from __future__ import annotations

import random

import pytest

from cipher.engine import (
    DEFAULT_CIPHER,
    DIGRAPH_PAIRS,
    FIXED_UNITS,
    LETTER_PAIRS,
    CipherEngine,
)


@pytest.fixture()
def cipher() -> CipherEngine:
    return CipherEngine()


class TestPairs:
    @pytest.mark.parametrize("left,right", DIGRAPH_PAIRS + LETTER_PAIRS)
    def test_pair_swaps_both_ways(self, cipher: CipherEngine, left: str, right: str) -> None:
        assert cipher.swap_unit(left) == right
        assert cipher.swap_unit(right) == left

    @pytest.mark.parametrize("unit", sorted(FIXED_UNITS))
    def test_fixed_points(self, cipher: CipherEngine, unit: str) -> None:
        assert cipher.swap_unit(unit) == unit

    def test_unknown_unit_passes_through(self, cipher: CipherEngine) -> None:
        assert cipher.swap_unit("x") == "x"
        assert cipher.swap("c-q!") == "c-q!"

    def test_mapping_is_read_only(self, cipher: CipherEngine) -> None:
        with pytest.raises(TypeError):
            cipher.mapping["s"] = "s"  # type: ignore[index]


class TestSplit:
    def test_digraphs_claim_their_letters(self, cipher: CipherEngine) -> None:
        assert cipher.split("chang") == ["ch", "a", "ng"]
        assert cipher.split("thesh") == ["th", "e", "sh"]

    def test_split_is_lossless(self, cipher: CipherEngine) -> None:
        for text in ["", "kairen", "mbadhzh", "x y!"]:
            assert "".join(cipher.split(text)) == text

    def test_units_longest_first(self, cipher: CipherEngine) -> None:
        lengths = [len(u) for u in cipher.units]
        assert lengths == sorted(lengths, reverse=True)


class TestSwap:
    @pytest.mark.parametrize("text,expected", [
        ("kat", "chap"),
        ("dha", "zha"),
        ("ram", "lan"),
        ("shing", "thimb"),
        ("hu", "hu"),
    ])
    def test_swap_cases(self, cipher: CipherEngine, text: str, expected: str) -> None:
        assert cipher.swap(text) == expected

    def test_swap_phonemes_does_not_merge_boundaries(self, cipher: CipherEngine) -> None:
        """'p' + 'h' are two phonemes, so they swap to 't' + 'h', not 'sh'."""
        assert cipher.swap_phonemes(["a", "p", "h"]) == "ath"
        assert cipher.swap("aph") == "ath"

    def test_swap_phonemes_splits_multi_unit_phonemes(self, cipher: CipherEngine) -> None:
        assert cipher.swap_phonemes(["er"]) == "el"
        assert cipher.swap_phonemes(["dh", "a"]) == "zha"


class TestInvolution:
    def test_swap_units_involution_random(self, cipher: CipherEngine) -> None:
        rng = random.Random(1234)
        alphabet = list(cipher.units) + ["x", "c", "q"]
        for _ in range(500):
            units = [rng.choice(alphabet) for _ in range(rng.randint(0, 12))]
            assert cipher.swap_units(cipher.swap_units(units)) == units

    def test_every_unit_involution(self, cipher: CipherEngine) -> None:
        for unit in cipher.units:
            assert cipher.swap(cipher.swap(unit)) == unit

    def test_string_involution_when_segmentation_stable(self, cipher: CipherEngine) -> None:
        rng = random.Random(99)
        alphabet = list(cipher.units)
        checked = 0
        for _ in range(2000):
            units = [rng.choice(alphabet) for _ in range(rng.randint(1, 8))]
            text = "".join(units)
            swapped = cipher.swap_units(units)
            if cipher.split(text) != units or cipher.split("".join(swapped)) != swapped:
                continue
            checked += 1
            assert cipher.swap(cipher.swap(text)) == text
        assert checked > 100

    def test_default_engine_matches_fresh_engine(self) -> None:
        assert dict(DEFAULT_CIPHER.mapping) == dict(CipherEngine().mapping)


class TestConstructionValidation:
    def test_self_pair_rejected(self) -> None:
        with pytest.raises(ValueError):
            CipherEngine(pairs=[("s", "s")])

    def test_reused_unit_rejected(self) -> None:
        with pytest.raises(ValueError):
            CipherEngine(pairs=[("s", "f"), ("s", "z")])

    def test_fixed_unit_in_pair_rejected(self) -> None:
        with pytest.raises(ValueError):
            CipherEngine(pairs=[("h", "x")])

    def test_non_ascii_unit_rejected(self) -> None:
        with pytest.raises(ValueError):
            CipherEngine(pairs=[("S", "f")])
        with pytest.raises(ValueError):
            CipherEngine(pairs=[("θ", "f")])

    def test_custom_pairs(self) -> None:
        engine = CipherEngine(pairs=[("p", "b")], fixed=frozenset())
        assert engine.swap("pib") == "bip"
