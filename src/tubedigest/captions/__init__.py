"""Transcript acquisition: wire-format parsers, normalizer and strategy chain."""
