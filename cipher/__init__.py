"""
cipher — Reversible Kairen substitution cipher.

Swaps paired consonant units (``sh↔th``, ``t↔p``, …) in a single
relabeling pass over a segmented unit sequence.
"""
