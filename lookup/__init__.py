"""
lookup — External collaborators of the word pipeline.

Static phoneme table, remote IPA dictionary client, and part-of-speech
tagger. All of them fail soft: a miss is an empty result, never an error.
"""
