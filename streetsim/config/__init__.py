"""Configuration management package.

This package provides functionality for loading and managing simulation configuration.
Every tunable constant of the navigation graph, spatial index, resident behaviour and
population lives in the packaged ``default.yaml``.
"""

from streetsim.config.config_loader import Config

__all__ = ['Config']
