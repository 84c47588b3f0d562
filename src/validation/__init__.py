"""Content validation gate."""
