from __future__ import annotations

"""
Configuration Domain Management.

Handles persistent storage of user preferences using JSON in the user data
directory, and normalizes untrusted configuration dictionaries against a
declarative schema with default fallback.
"""

import json
import logging
import os
from typing import Any, Dict, List, Tuple

from sketchpad.domain import constants as const
from sketchpad.infra.fs import get_user_data_dir

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "config.json"


def get_config_path() -> str:
    """Absolute path of the persistent configuration file."""
    return os.path.join(get_user_data_dir(), CONFIG_FILE_NAME)


# -----------------------------------------------------------------------------
# Configuration Models (Dict-based)
# -----------------------------------------------------------------------------
def get_default_config() -> Dict[str, Any]:
    """
    Generate the default runtime configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # Project
        "entry_name": const.ENTRY_SCRIPT_NAME,

        # Preview runtime
        "p5_version": const.P5_VERSION,
        "library_url": const.P5_LIBRARY_URL,
        "origin_tag": const.BRIDGE_ORIGIN_TAG,

        # AI assistant
        "ai_provider": const.DEFAULT_PROVIDER,
        "ai_model": const.DEFAULT_MODEL_BY_PROVIDER[const.DEFAULT_PROVIDER],

        # Editing
        "history_limit": 0,

        # Diagnostics
        "log_level": "INFO",
    }


# -----------------------------------------------------------------------------
# Validation
# -----------------------------------------------------------------------------
def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize a configuration dictionary.

    Fills in missing values with defaults and coerces types where the
    intent is unambiguous.

    Args:
        config: Raw configuration dictionary (or untrusted input).
        strict: If True, raises TypeError/ValueError on invalid data.

    Returns:
        Tuple[Dict, List[str]]: (Normalized Config, List of Warnings).
    """
    warnings: List[str] = []
    defaults = get_default_config()

    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        return defaults, warnings

    merged: Dict[str, Any] = dict(defaults)
    merged.update({k: v for k, v in config.items() if k in defaults})

    string_fields = [
        "entry_name", "p5_version", "library_url", "origin_tag",
        "ai_provider", "ai_model", "log_level",
    ]
    for field in string_fields:
        merged[field] = _as_str(merged.get(field), defaults[field], field, warnings, strict)

    merged["history_limit"] = _as_non_negative_int(
        merged.get("history_limit"), defaults["history_limit"], "history_limit", warnings, strict
    )

    # Post-processing normalization
    merged["ai_provider"] = merged["ai_provider"].upper()
    if merged["ai_provider"] not in const.DEFAULT_MODEL_BY_PROVIDER:
        msg = f"Unknown AI provider '{merged['ai_provider']}'."
        if strict:
            raise ValueError(msg)
        warnings.append(f"{msg} Using {const.DEFAULT_PROVIDER}.")
        merged["ai_provider"] = const.DEFAULT_PROVIDER
        merged["ai_model"] = const.DEFAULT_MODEL_BY_PROVIDER[const.DEFAULT_PROVIDER]
    elif not config.get("ai_model"):
        merged["ai_model"] = const.DEFAULT_MODEL_BY_PROVIDER[merged["ai_provider"]]

    if "/" in merged["entry_name"] or "\\" in merged["entry_name"]:
        msg = f"Entry name '{merged['entry_name']}' must be a plain file name."
        if strict:
            raise ValueError(msg)
        warnings.append(f"{msg} Using '{defaults['entry_name']}'.")
        merged["entry_name"] = defaults["entry_name"]

    if not merged["entry_name"].endswith(const.SCRIPT_EXTENSION):
        warnings.append(f"Entry name '{merged['entry_name']}' corrected to use '{const.SCRIPT_EXTENSION}'.")
        merged["entry_name"] += const.SCRIPT_EXTENSION

    return merged, warnings


def _as_str(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    """Ensure value is a non-empty string."""
    if value is None:
        return fallback
    if isinstance(value, str):
        v = value.strip()
        return v if v else fallback
    msg = f"Invalid field '{field}': expected str, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_non_negative_int(value: Any, fallback: int, field: str, warnings: List[str], strict: bool) -> int:
    """Coerce value to an integer >= 0."""
    if value is None:
        return fallback
    if isinstance(value, bool):
        value = None
    elif isinstance(value, str) and not strict:
        try:
            converted = int(value.strip())
            warnings.append(f"Field '{field}' converted from '{value}' to {converted}.")
            value = converted
        except ValueError:
            value = None

    if isinstance(value, int) and value >= 0:
        return value

    msg = f"Invalid field '{field}': expected non-negative int."
    if strict:
        raise ValueError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_config() -> Dict[str, Any]:
    """
    Load the configuration from disk merged over the defaults.

    Returns:
        Dict[str, Any]: The loaded configuration or defaults on failure.
    """
    config_path = get_config_path()
    if not os.path.exists(config_path):
        logger.debug("Config file not found. Returning defaults.")
        return get_default_config()

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config: {e}. Using defaults.")
        return get_default_config()

    if not isinstance(data, dict):
        logger.warning("Corrupted config file. Resetting to defaults.")
        return get_default_config()

    cfg, warnings = validate_config(data.get("settings", data))
    for w in warnings:
        logger.warning(f"Configuration Warning: {w}")
    return cfg


def save_config(config: Dict[str, Any]) -> None:
    """
    Persist the configuration to disk.

    Args:
        config: The configuration dictionary to save.
    """
    config_path = get_config_path()
    state = {"version": const.CURRENT_CONFIG_VERSION, "settings": config}
    try:
        os.makedirs(os.path.dirname(config_path), exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(state, f, ensure_ascii=False, indent=4)
        logger.debug(f"Configuration saved to {config_path}")
    except OSError as e:
        logger.error(f"Failed to save configuration: {e}")
