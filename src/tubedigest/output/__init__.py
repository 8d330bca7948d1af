"""Rendering and delivery of composed summaries."""
