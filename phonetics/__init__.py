"""
phonetics — Phonetic symbol tables and the IPA tokenizer.

Turns pronunciations (IPA strings or CMU phoneme codes) into the closed
set of ASCII phoneme units the Kairen alphabet is built from.
"""
