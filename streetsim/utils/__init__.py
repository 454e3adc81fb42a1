"""Shared utilities: logging, vectors, geometry, spatial indexing, JSON loading and the game clock."""
