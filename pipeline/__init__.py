"""
pipeline — Sentence orchestration.

The converter segments a sentence, routes each word through the staged
word pipeline (exception → resolve → transliterate → swap → repair) and
returns ordered per-token records.
"""
