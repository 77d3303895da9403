"""Cross-vocabulary exercise-name matching.

Legacy names are normalized (lowercased, equipment extracted, filler words
dropped) and scored against every canonical name. The resulting mapping
report is persisted and reused on later runs.
"""
