"""Load and persist runtime configuration for the checker."""

from __future__ import annotations

import hashlib
import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from ..utils.errors import ConfigError
from .settings import CheckerSettings, RuntimeConfig

logger = logging.getLogger(__name__)

CONFIG_PATH = Path(__file__).with_name("checker.yaml")
CONFIG_PATH_ENV = "JIRA_CHECKER_CONFIG"

# Pattern to match env("VAR_NAME") placeholders
ENV_PATTERN = re.compile(r'env\("([^"]+)"\)')


def default_config_path() -> Path:
    override = os.getenv(CONFIG_PATH_ENV)
    return Path(override) if override else CONFIG_PATH


def _resolve_env_placeholders(value: Any) -> Any:
    """Recursively resolve env("VAR") placeholders in YAML values."""
    if isinstance(value, str):
        match = ENV_PATTERN.search(value)
        if match:
            var_name = match.group(1)
            env_value = os.getenv(var_name)
            if env_value is None:
                logger.warning(f"Environment variable {var_name} not set (required by config)")
                raise ConfigError(var_name, "environment variable not set")
            return env_value
        return value
    elif isinstance(value, dict):
        return {k: _resolve_env_placeholders(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_resolve_env_placeholders(item) for item in value]
    else:
        return value


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge override dict into base dict."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _compute_config_version(yaml_content: str, override_content: Dict[str, Any]) -> str:
    """SHA256 of the YAML text plus overrides, truncated for display."""
    combined = {
        "yaml": yaml_content,
        "override": json.dumps(override_content, sort_keys=True, default=str),
    }
    combined_str = json.dumps(combined, sort_keys=True)
    return hashlib.sha256(combined_str.encode("utf-8")).hexdigest()[:16]


def _read_yaml(path: Path) -> tuple[str, Dict[str, Any]]:
    if not path.exists():
        logger.info(f"No config file at {path}, using defaults")
        return "", {}
    with path.open("r", encoding="utf-8") as handle:
        content = handle.read()
    try:
        data = yaml.safe_load(content) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(str(path), str(exc)) from exc
    if not isinstance(data, dict):
        raise ConfigError(str(path), "top level must be a mapping")
    return content, data


def load_runtime_config(
    path: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> RuntimeConfig:
    """Load runtime configuration from YAML with optional overrides.

    Every field has a default, so a missing file or a partially populated
    ``checker`` section still yields a complete configuration.

    Args:
        path: Optional path to the YAML file. Defaults to ``checker.yaml``
            next to this module, or ``$JIRA_CHECKER_CONFIG`` when set.
        overrides: Optional mapping deep-merged over the file contents.

    Returns:
        RuntimeConfig with resolved env placeholders and a config version.
    """
    target = path or default_config_path()
    yaml_content, data = _read_yaml(target)

    data = _resolve_env_placeholders(data)

    overrides = overrides or {}
    if overrides:
        data = _deep_merge(data, overrides)

    if "metadata" not in data or not isinstance(data["metadata"], dict):
        data["metadata"] = {}
    data["metadata"]["config_version"] = _compute_config_version(yaml_content, overrides)

    try:
        return RuntimeConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(str(target), str(exc)) from exc


def save_checker_settings(settings: CheckerSettings, path: Optional[Path] = None) -> Path:
    """Write the ``checker`` section back to the YAML file, keeping other sections."""
    target = path or default_config_path()
    _, data = _read_yaml(target)
    data["checker"] = settings.model_dump()
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(data, handle, sort_keys=False)
    logger.info("Checker settings saved", extra={"path": str(target)})
    return target


def reset_checker_settings(path: Optional[Path] = None) -> CheckerSettings:
    """Restore the default rule toggles and messages."""
    defaults = CheckerSettings()
    save_checker_settings(defaults, path)
    return defaults
