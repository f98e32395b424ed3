"""Shared helpers for configuration loading and hashing."""
