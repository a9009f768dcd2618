"""
phonetics/cmu_map.py — CMU/ARPAbet phoneme code → Kairen ASCII unit.

Used only when pronunciations come from the discrete phoneme-set table
rather than from raw phonetic-alphabet text. Stress digits (``AH0``,
``IY1``) carry no Kairen distinction and are dropped before lookup.
"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Mapping, Optional

from core.constants import KairenConstants as C
from core.logger import get_logger

_log = get_logger()

# ──────────────────────────────────────────────────────────────
# ARPAbet → Kairen ASCII (39 phonemes)
# ──────────────────────────────────────────────────────────────

CMU_TO_KAIREN: Mapping[str, str] = MappingProxyType({
    # Vowels
    "AA": "a",  "AE": "a",  "AH": "a",  "AO": "o",
    "AW": "au", "AY": "ai", "EH": "e",  "ER": "er",
    "EY": "ei", "IH": "i",  "IY": "i",  "OW": "o",
    "OY": "oi", "UH": "u",  "UW": "u",
    # Consonants
    "B": "b",   "CH": "ch", "D": "d",   "DH": "dh",
    "F": "f",   "G": "g",   "HH": "h",  "JH": "j",
    "K": "k",   "L": "l",   "M": "m",   "N": "n",
    "NG": "ng", "P": "p",   "R": "r",   "S": "s",
    "SH": "sh", "T": "t",   "TH": "th", "V": "v",
    "W": "w",   "Y": "y",   "Z": "z",   "ZH": "zh",
})

def validate_unit_map(mapping: Mapping[str, str]) -> None:
    """
    Check that every code maps to a non-empty unit spelled in lowercase ASCII.

    Raises:
        ValueError: On the first code whose unit is empty or non-ASCII.
    """
    for code, unit in mapping.items():
        if not unit or not set(unit) <= C.ASCII_UNIT_ALPHABET:
            raise ValueError(f"CMU code {code!r} maps to invalid unit {unit!r}")


validate_unit_map(CMU_TO_KAIREN)

_STRESS = re.compile(r"[0-2]$")


def strip_stress(phoneme: str) -> str:
    """
    Remove a trailing ARPAbet stress digit and uppercase the code.

    Example::

        strip_stress("ah0")   # → 'AH'
    """
    return _STRESS.sub("", phoneme.strip().upper())


def phoneme_to_ascii(phoneme: str) -> Optional[str]:
    """
    Map one CMU phoneme code to its Kairen ASCII unit.

    Args:
        phoneme: ARPAbet code, with or without a stress digit.

    Returns:
        The ASCII unit, or ``None`` if the code is not in the table.
    """
    return CMU_TO_KAIREN.get(strip_stress(phoneme))


def phonemes_to_ascii(phonemes: list[str]) -> list[str]:
    """
    Map a CMU phoneme sequence to Kairen ASCII units, preserving order.

    Unknown codes are logged and fall back to their lowercased letters
    (digits stripped) so the word still yields a pronounceable form.

    Args:
        phonemes: ARPAbet codes, e.g. ``['K', 'AE1', 'T', 'S']``.

    Returns:
        ASCII units, e.g. ``['k', 'a', 't', 's']``.
    """
    units: list[str] = []
    for phoneme in phonemes:
        unit = phoneme_to_ascii(phoneme)
        if unit is None:
            fallback = "".join(ch for ch in strip_stress(phoneme).lower() if ch in C.ASCII_UNIT_ALPHABET)
            _log.warn("cmu", "unknown_phoneme", {"phoneme": phoneme, "fallback": fallback})
            if fallback:
                units.append(fallback)
            continue
        units.append(unit)
    return units
