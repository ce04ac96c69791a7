"""Command-line interface for stdrpc."""
