"""Helper operations used to assemble configuration dictionaries."""

from copy import deepcopy
from typing import Any, Dict, List, Tuple

import yaml

from .errors import ConfigPathError, ConfigTypeError

__all__ = ["deep_merge", "parse_value", "set_nested_value", "extract_directives"]


def deep_merge(
    base_dict: Dict[str, Any], override_dict: Dict[str, Any]
) -> Dict[str, Any]:
    """Recursively merge override_dict into base_dict.

    Parameters
    ----------
    base_dict : Dict[str, Any]
        Base dictionary
    override_dict : Dict[str, Any]
        Override dictionary

    Returns
    -------
    Dict[str, Any]
        Merged dictionary (new copy)
    """
    result = deepcopy(base_dict)
    for key, value in override_dict.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def parse_value(value_str: Any) -> Any:
    """Parse a string value into appropriate Python type.

    Parameters
    ----------
    value_str : Any
        Value to parse (if string, attempts YAML parsing)

    Returns
    -------
    Any
        Parsed value
    """
    if not isinstance(value_str, str) or value_str.strip() == "":
        return value_str

    try:
        return yaml.safe_load(value_str)
    except yaml.YAMLError:
        return value_str


def set_nested_value(
    config: Dict[str, Any], key_path: str, value: Any, delete: bool = False
) -> Dict[str, Any]:
    """Set or delete a nested value using dot notation.

    Parameters
    ----------
    config : Dict[str, Any]
        Configuration dictionary, modified in place
    key_path : str
        Dot-separated path (e.g., "reco.cosmic_track_matching.min_matched_hits")
    value : Any
        Value to set (ignored if delete=True)
    delete : bool, default False
        If True, delete the key

    Returns
    -------
    Dict[str, Any]
        Modified configuration

    Raises
    ------
    ConfigPathError
        If the key path to delete does not exist
    ConfigTypeError
        If path traverses non-dict value
    """
    keys = key_path.split(".")
    current = config
    for i, key in enumerate(keys[:-1]):
        if key not in current:
            if delete:
                partial_path = ".".join(keys[: i + 1])
                raise ConfigPathError(
                    f"Cannot delete '{key_path}': path '{partial_path}' does not exist"
                )
            current[key] = {}
        elif not isinstance(current[key], dict):
            raise ConfigTypeError(f"Cannot set '{key_path}': '{key}' is not a dictionary")
        current = current[key]

    final_key = keys[-1]
    if delete:
        if final_key not in current:
            raise ConfigPathError(f"Cannot delete '{key_path}': key does not exist")
        del current[final_key]
    else:
        current[final_key] = value

    return config


def extract_directives(
    config: Dict[str, Any]
) -> Tuple[List[str], Dict[str, Any], Dict[str, Any]]:
    """Split the `include` and `override` directives from the content.

    Parameters
    ----------
    config : Dict[str, Any]
        Raw configuration, as loaded from YAML

    Returns
    -------
    includes : List[str]
        Files to include, in order
    overrides : Dict[str, Any]
        Dot-path overrides to apply after merging
    content : Dict[str, Any]
        Remaining configuration content
    """
    content = dict(config)
    includes = content.pop("include", [])
    if isinstance(includes, str):
        includes = [includes]

    overrides = content.pop("override", {}) or {}
    if not isinstance(overrides, dict):
        raise ConfigTypeError("The `override` block must be a dictionary.")

    return includes, overrides, content
