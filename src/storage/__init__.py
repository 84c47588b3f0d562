"""Artifact persistence over the key-value store."""
