"""Background enrichment of a delivered summary."""
