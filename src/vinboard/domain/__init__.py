"""Cellar domain: status engine, normalization, import reconciliation."""
