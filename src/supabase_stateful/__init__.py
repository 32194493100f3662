"""Persistent local state for Supabase development."""

__version__ = "0.1.0"
