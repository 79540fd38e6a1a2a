from pathlib import Path
from typing import Any, Dict

import yaml

YAML_SUFFIXES = (".yml", ".yaml")


def load_yml(file_path: str) -> Dict[str, Any]:
    """Read a YAML configuration file into a mapping. An empty file yields {}."""
    path = Path(file_path)

    if not path.is_file():
        raise FileNotFoundError(f"Configuration file not found: {path.absolute()}")

    if path.suffix not in YAML_SUFFIXES:
        raise ValueError(f"File {path.name} is not a YAML file ({', '.join(YAML_SUFFIXES)}).")

    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing YAML file {path.name}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"File {path.name} must contain a mapping at the top level.")
    return data
