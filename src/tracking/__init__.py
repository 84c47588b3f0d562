"""LLM call tracking."""
