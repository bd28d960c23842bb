"""Shared helpers (logging) used across npmkit modules."""
