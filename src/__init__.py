"""Ascent adaptive quiz."""
