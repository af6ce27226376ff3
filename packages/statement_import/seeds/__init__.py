"""Bundled seed data (default category catalog)."""
