"""
srs-core: FSRS-6 review scheduling and memory analytics.
"""
