"""Domain models, errors and host conventions."""
