"""Shared helpers: seeded random streams and logging setup."""
