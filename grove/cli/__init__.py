"""Command line interface for Grove."""
