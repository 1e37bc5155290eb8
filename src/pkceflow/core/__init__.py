"""Core cross-cutting utilities (logging)."""
