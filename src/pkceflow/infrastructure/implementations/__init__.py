"""Concrete pending authorization repositories (memory, sqlite, aws)."""
