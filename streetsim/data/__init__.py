"""Bundled map data."""
