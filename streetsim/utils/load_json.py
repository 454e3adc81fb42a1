"""Loading of map JSON files, from disk or from the maps bundled in ``streetsim.data``."""

import importlib.resources as pkg_resources
import json
import os
from typing import List

from streetsim.utils.logger import Logger

DATA_PACKAGE = 'streetsim.data'


def bundled_maps(package: str = DATA_PACKAGE) -> List[str]:
    """Names of the JSON maps shipped with the package, sorted."""
    return sorted(entry.name for entry in pkg_resources.files(package).iterdir()
                  if entry.name.endswith('.json'))


def load_default_json(file_name: str, package: str = DATA_PACKAGE):
    """Load a JSON file bundled with the package.

    Args:
        file_name: Name of the bundled file.
        package: Package holding the file.

    Returns:
        The decoded JSON data.

    Raises:
        FileNotFoundError: If no bundled file has that name.
    """
    resource = pkg_resources.files(package).joinpath(file_name)
    if not resource.is_file():
        raise FileNotFoundError(f"No bundled map named '{file_name}' (available: {bundled_maps(package)})")
    with resource.open('r') as f:
        return json.load(f)


def load_json(file_path: str):
    """Load a map JSON file, falling back to the bundled map with the same basename.

    Args:
        file_path: Path of the JSON file.

    Returns:
        The decoded JSON data.

    Raises:
        FileNotFoundError: If neither the path nor a bundled map of that name exists.
        ValueError: If the file is not valid JSON.
    """
    try:
        with open(file_path, 'r') as f:
            return json.load(f)
    except (FileNotFoundError, IsADirectoryError):
        file_name = os.path.basename(file_path)
        Logger.get_logger('JsonLoader').warning(f"File not found at '{file_path}', trying bundled map '{file_name}'")
        try:
            return load_default_json(file_name)
        except FileNotFoundError as e:
            raise FileNotFoundError(f"Could not load JSON file from '{file_path}' or the bundled maps") from e
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in '{file_path}': {e}") from e
