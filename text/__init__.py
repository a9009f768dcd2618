"""
text — Sentence segmentation.
"""
