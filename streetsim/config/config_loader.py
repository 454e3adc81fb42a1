"""Configuration loader for StreetSim.

The packaged ``default.yaml`` holds every tunable constant of the simulation. A user
YAML file, or an in-memory dict, can be merged over it; values are then read through
dot-notation paths such as ``'navigation.pedestrian.offset'``.
"""
from pathlib import Path

import yaml

DEFAULT_CONFIG_PATH = Path(__file__).parent / 'default.yaml'


def _load_yaml(path: Path, what: str) -> dict:
    """Read a YAML mapping from disk.

    Raises:
        PermissionError: If the file cannot be opened.
        ValueError: If the file is not valid YAML or its top level is not a mapping.
    """
    try:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
    except (PermissionError, IOError) as e:
        raise PermissionError(f'Cannot open {what} config file: {path}') from e
    except yaml.YAMLError as e:
        raise ValueError(f'Invalid YAML in {what} config file {path}: {e}') from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f'{what.capitalize()} config file {path} must contain a mapping')
    return data


class Config:
    """Simulation configuration backed by the packaged defaults.

    Components take an optional Config and fall back to a fresh default one, so
    overrides never leak between instances.
    """
    def __init__(self, path: str = None):
        """Load the defaults and merge an optional user file over them.

        Args:
            path: Optional path to a user YAML file.

        Raises:
            FileNotFoundError: If ``path`` is given and does not exist.
            PermissionError: If a config file cannot be opened.
            ValueError: If a config file is not a YAML mapping.
        """
        if path and not Path(path).exists():
            raise FileNotFoundError(f'Config file not found: {path}')

        self.config = _load_yaml(DEFAULT_CONFIG_PATH, 'default')
        if path:
            self._merge_dicts(self.config, _load_yaml(Path(path), 'user'))

    @classmethod
    def from_dict(cls, overrides: dict) -> 'Config':
        """Build a config from the packaged defaults with in-memory overrides.

        Args:
            overrides: Nested dictionary merged over the defaults.

        Returns:
            A new Config instance.
        """
        config = cls()
        config._merge_dicts(config.config, overrides)
        return config

    def get(self, key_path: str, default=None):
        """Get a configuration value by its dot-notation path.

        Args:
            key_path: Dot-notation path, e.g. ``'vehicle.yield_distance'``.
            default: Value returned when the path is missing.

        Returns:
            The configuration value, or ``default`` when the path is missing.

        Raises:
            ValueError: If the path is missing and no default is given.
        """
        value = self.config
        for key in key_path.split('.'):
            if not isinstance(value, dict) or key not in value:
                if default is not None:
                    return default
                raise ValueError(f'Key {key_path} not found in config')
            value = value[key]
        return value

    def __getitem__(self, key_path: str):
        return self.get(key_path)

    def set(self, key_path: str, value):
        """Override a single value by its dot-notation path.

        Intermediate sections are created when missing.

        Raises:
            ValueError: If a section along the path holds a plain value.
        """
        *sections, leaf = key_path.split('.')
        node = self.config
        for key in sections:
            node = node.setdefault(key, {})
            if not isinstance(node, dict):
                raise ValueError(f'Cannot set {key_path}: {key} is not a section')
        node[leaf] = value

    def _merge_dicts(self, base: dict, updates: dict):
        """Recursively merge ``updates`` into ``base`` in place."""
        for k, v in updates.items():
            if isinstance(v, dict) and isinstance(base.get(k), dict):
                self._merge_dicts(base[k], v)
            else:
                base[k] = v
