"""Agent base class."""
