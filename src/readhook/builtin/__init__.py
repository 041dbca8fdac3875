"""Builtin readhook plugins."""
