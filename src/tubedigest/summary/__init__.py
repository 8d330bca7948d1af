"""Summary prompts and orchestration."""
