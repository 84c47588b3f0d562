"""LLM transport and completion client."""
