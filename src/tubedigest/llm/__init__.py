"""Model client backends."""
