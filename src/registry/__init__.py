"""Declarative host registry update plans."""
