#!/usr/bin/env python3

import os
import json
import tomllib
from pathlib import Path

import logging
import sys

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(message)s",
    handlers=[
        logging.StreamHandler(sys.stderr) # Default to stderr
    ]
)
logger = logging.getLogger("repoprov")

CONFIG_FILENAMES = ['config.json', 'config.toml', 'config.yaml', 'config.yml']

# Suffix shared by clone directories and provenance keys
CLONE_SUFFIX = "-repository"


def get_config_path():
    """Get the path to the configuration file.

    Checks in order:
    1. REPOPROV_CONFIG environment variable
    2. .repoprov/ directory in the current working directory
    3. ~/.repoprov/ directory
    """
    if 'REPOPROV_CONFIG' in os.environ:
        path = Path(os.environ['REPOPROV_CONFIG'])
        if path.exists():
            return path

    for base in (Path.cwd() / '.repoprov', Path.home() / '.repoprov'):
        for filename in CONFIG_FILENAMES:
            path = base / filename
            if path.exists() and path.stat().st_size > 0:
                return path

    # If no file exists, return default path for saving
    return Path.home() / '.repoprov' / 'config.json'


def _read_config_file(config_path: Path) -> dict:
    suffix = config_path.suffix.lower()
    if suffix == '.toml':
        with open(config_path, 'rb') as f:
            return tomllib.load(f)
    if suffix in ('.yaml', '.yml'):
        import yaml
        with open(config_path, 'r') as f:
            return yaml.safe_load(f) or {}
    with open(config_path, 'r') as f:
        return json.load(f)


def load_config(config_path=None):
    """Load configuration from file, merged over the defaults."""
    if config_path is None:
        config_path = get_config_path()
    config_path = Path(config_path)

    config = get_default_config()

    if config_path.exists():
        try:
            file_config = _read_config_file(config_path)
            if isinstance(file_config, dict):
                config = merge_configs(config, file_config)
            else:
                logger.error(f"Ignoring config at {config_path}: top level is not a mapping")
        except Exception as e:
            logger.error(f"Error loading config from {config_path}: {e}")

    config = apply_env_overrides(config)

    # The suffix is part of the identity scheme and is never configurable
    if isinstance(config.get("workspace"), dict):
        config["workspace"]["clone_suffix"] = CLONE_SUFFIX

    return config


def save_config(config, config_path=None):
    """Save configuration to file, choosing the format from the suffix."""
    if config_path is None:
        config_path = get_config_path()
    config_path = Path(config_path)

    config_path.parent.mkdir(parents=True, exist_ok=True)

    suffix = config_path.suffix.lower()
    if suffix == '.toml':
        import toml
        with open(config_path, 'w') as f:
            toml.dump(config, f)
    elif suffix in ('.yaml', '.yml'):
        import yaml
        with open(config_path, 'w') as f:
            yaml.safe_dump(config, f, default_flow_style=False, sort_keys=False)
    else:
        with open(config_path, 'w') as f:
            json.dump(config, f, indent=2)
            f.write('\n')

    logger.info(f"Configuration saved to {config_path}")
    return config_path


def get_default_config():
    """Get default configuration."""
    return {
        "workspace": {
            "root": ".",
            "stores_dir": "stores",
            "manifest": "stores/meta.json",
            "clone_suffix": CLONE_SUFFIX,
        },
        "provisioning": {
            "max_concurrent_operations": 4,
            "timeout_seconds": 120,
            "git_timeout_seconds": 600,
            "clone_depth": 1,
        },
        "validation": {
            "descriptor": "package.json",
            "default_entry_point": "index.js",
            "required_directories": [],
        },
        "store": {
            "enabled": True,
            "path": "stores/repositories.json",
        },
        "library": {
            "path": "fabric",
            "name": "@fabric/core",
            "required_directories": ["types", "services", "tests"],
            "probe_enabled": True,
        },
        "logging": {
            "level": "INFO",
            "format": "%(levelname)s: %(message)s",
        },
    }


def configure_logging(config):
    """Apply the logging section of a loaded config to the package logger."""
    section = config.get("logging", {})
    level_name = str(section.get("level", "INFO")).upper()
    level = getattr(logging, level_name, None)
    if not isinstance(level, int):
        logger.warning(f"Unknown log level {level_name!r}, using INFO")
        level = logging.INFO
    logger.setLevel(level)

    fmt = section.get("format")
    if fmt:
        for handler in logging.getLogger().handlers:
            handler.setFormatter(logging.Formatter(fmt))


def load_runtime_config(config_path=None, workspace=None):
    """Load config for a command run, applying CLI overrides and logging."""
    config = load_config(config_path)
    if workspace:
        config["workspace"]["root"] = str(workspace)
    configure_logging(config)
    return config


def workspace_root(config) -> Path:
    """Absolute workspace root from config."""
    return Path(config["workspace"]["root"]).expanduser().resolve()


def resolve_workspace_path(config, value) -> Path:
    """Resolve a config path relative to the workspace root."""
    path = Path(value).expanduser()
    if path.is_absolute():
        return path
    return workspace_root(config) / path


def merge_configs(base_config, override_config):
    """
    Recursively merge two configuration dictionaries.

    Args:
        base_config (dict): Base configuration
        override_config (dict): Configuration to merge/override with

    Returns:
        dict: Merged configuration
    """
    merged = base_config.copy()

    for key, value in override_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = value

    return merged


def _coerce_env_value(value: str):
    if value.lower() in ('true', '1', 'yes', 'on'):
        return True
    if value.lower() in ('false', '0', 'no', 'off'):
        return False
    if value.isdigit():
        return int(value)
    return value


def apply_env_overrides(config):
    """
    Apply environment variable overrides to configuration.
    Environment variables follow the pattern: REPOPROV_SECTION_KEY
    For example: REPOPROV_STORE_ENABLED=false
    """
    env_prefix = "REPOPROV_"

    for env_key, value in os.environ.items():
        if not env_key.startswith(env_prefix) or env_key == "REPOPROV_CONFIG":
            continue

        key_parts = env_key[len(env_prefix):].lower().split('_')
        typed_value = _coerce_env_value(value)

        current_level = config
        i = 0
        while i < len(key_parts):
            # Longest config key that prefixes the remaining parts wins
            best_match_len = 0
            matched_key = None

            for config_key in current_level.keys():
                config_key_parts = config_key.split('_')
                if key_parts[i : i + len(config_key_parts)] == config_key_parts:
                    if len(config_key_parts) > best_match_len:
                        best_match_len = len(config_key_parts)
                        matched_key = config_key

            if matched_key is None:
                break

            if i + best_match_len == len(key_parts):
                current_level[matched_key] = typed_value
                break

            if not isinstance(current_level[matched_key], dict):
                break
            current_level = current_level[matched_key]
            i += best_match_len

    return config
