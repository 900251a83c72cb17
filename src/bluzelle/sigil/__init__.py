"""Sigil - key loading and transaction signing."""
