"""Command-line interface for the ascent quiz."""
