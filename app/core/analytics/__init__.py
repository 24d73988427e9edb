"""Cardio analytics core: per-session metric derivation, synthetic session
generation and aggregation.

Functions take plain scalars or session dicts and return plain dicts; schema
conversion lives in app.cardio.
"""
