"""
Configuration loading and validation utilities.
"""

import os
import yaml
import logging

logger = logging.getLogger(__name__)

# Default configuration values
DEFAULTS = {
    "resource_dir": "./res",
    "package": "app",
    "model_kind": "raw",
    "material_kind": "raw",
    "texture_kind": "drawable",
    "parallel": False,
    "validate_face_indices": False,
    "log_level": "WARNING",
}

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def default_config() -> dict:
    """Return a fresh copy of the default configuration."""
    return dict(DEFAULTS)


def load_config(config_path: str) -> dict:
    """Load a YAML config file, fill missing keys with defaults, and validate."""
    if not os.path.isfile(config_path):
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f) or {}

    if not isinstance(cfg, dict):
        raise ValueError(f"Config file must contain a mapping, got {type(cfg).__name__}")

    # Fill defaults for missing keys
    for key, default_val in DEFAULTS.items():
        if key not in cfg:
            cfg[key] = default_val
            logger.info("Config key '%s' not found, using default: %s", key, default_val)

    _validate_config(cfg)
    return cfg


def _validate_config(cfg: dict) -> None:
    """Validate configuration values."""
    # Resource lookup names must be non-empty strings
    for key in ["resource_dir", "package", "model_kind", "material_kind", "texture_kind"]:
        if not isinstance(cfg[key], str) or not cfg[key]:
            raise ValueError(f"'{key}' must be a non-empty string, got {cfg[key]!r}")

    # Check flags
    for key in ["parallel", "validate_face_indices"]:
        if not isinstance(cfg[key], bool):
            raise ValueError(f"'{key}' must be true or false, got {cfg[key]!r}")

    # Check log level
    level = str(cfg["log_level"]).upper()
    if level not in LOG_LEVELS:
        raise ValueError(f"Unsupported log_level '{cfg['log_level']}'. Choose from: {list(LOG_LEVELS)}")
    cfg["log_level"] = level
