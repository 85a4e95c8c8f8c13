"""
Configuration loader: reads jlink.yml and toolchains files into models.

This is the only place where defaults derived from the environment
(the home-directory cache path) are applied.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from jlink_wrapper.core.errors import ConfigurationError
from jlink_wrapper.core.models.config import JlinkConfig
from jlink_wrapper.core.models.toolchain import ToolchainsFile
from jlink_wrapper.core.services.toolchains import FileToolchainRegistry

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "jlink.yml"

DEFAULT_CACHE_DIRNAME = ".jlinkJdkCache"


def default_cache_path() -> str:
    """Per-user JDK cache folder."""
    return str(Path.home() / DEFAULT_CACHE_DIRNAME)


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for jlink.yml starting from the given directory, walking up.

    Returns:
        Path to jlink.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def _read_yaml_mapping(path: Path) -> dict[str, Any]:
    if not path.is_file():
        raise ConfigurationError(f"Config file not found: {path}")

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")
    return data


def _resolve_path(value: str, base_dir: Path) -> str:
    if not value or value.startswith("~") or Path(value).is_absolute():
        return value
    return str(base_dir / value)


_PATH_KEYS = ("output", "jdeps_report_path", "toolchains_file", "tool_jdk", "cache_path")


def _resolve_relative_paths(data: dict[str, Any], base_dir: Path) -> dict[str, Any]:
    resolved = dict(data)
    for key in _PATH_KEYS:
        value = resolved.get(key)
        if isinstance(value, str):
            resolved[key] = _resolve_path(value, base_dir)
    return resolved


def _read_jlink_section(path: Path) -> dict[str, Any]:
    """Settings of jlink.yml, with or without the ``jlink:`` wrapper key."""
    data = _read_yaml_mapping(path)
    if "jlink" in data:
        data = data["jlink"]
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Expected a YAML mapping under 'jlink' in {path}, got {type(data).__name__}"
            )
    return _resolve_relative_paths(data, path.parent.resolve())


def config_from_mapping(data: dict[str, Any], base_dir: Path | None = None) -> JlinkConfig:
    """Validate a raw mapping, applying boundary defaults.

    Relative paths in the mapping are resolved against ``base_dir``.

    Raises:
        ConfigurationError: If required settings are missing or invalid.
    """
    data = {k: v for k, v in data.items() if v is not None}
    if base_dir is not None:
        data = _resolve_relative_paths(data, base_dir)
    data.setdefault("cache_path", default_cache_path())

    try:
        return JlinkConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid jlink configuration: {e}") from e


def load_config(
    path: Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> JlinkConfig:
    """Load and validate jlink.yml, then apply CLI overrides on top.

    Args:
        path: Explicit path to jlink.yml. If None, searches upward; a
            missing file is fine when the overrides are complete.
        overrides: Values that win over the file (None values ignored).

    Raises:
        ConfigurationError: If the file is unreadable or the merged
            configuration is invalid.
    """
    if path is None:
        path = find_config_file()

    data: dict[str, Any] = {}
    if path is not None:
        logger.debug("Loading jlink config from %s", path)
        data = _read_jlink_section(path)

    for key, value in (overrides or {}).items():
        if value is None or value == () or value == []:
            continue
        data[key] = list(value) if isinstance(value, tuple) else value

    config = config_from_mapping(data)
    logger.info("Loaded jlink config: provider=%s output=%s", config.provider.value, config.output)
    return config


def load_toolchains(path: Path | None) -> FileToolchainRegistry:
    """Build a toolchain registry from a toolchains file (empty without one).

    Relative ``jdkHome`` values are resolved against the file's folder.
    """
    if path is None:
        return FileToolchainRegistry()

    path = path.expanduser()
    data = _read_yaml_mapping(path)
    try:
        parsed = ToolchainsFile.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid toolchains file {path}: {e}") from e

    base_dir = path.parent.resolve()
    for entry in parsed.toolchains:
        if entry.jdk_home:
            entry.configuration["jdkHome"] = _resolve_path(entry.jdk_home, base_dir)

    logger.debug("Loaded %d toolchains from %s", len(parsed.toolchains), path)
    return FileToolchainRegistry(parsed)


def load_cache_path(path: Path | None = None) -> str:
    """Cache folder from jlink.yml (searched upward) or the default."""
    if path is None:
        path = find_config_file()
    if path is None:
        return default_cache_path()

    data = _read_jlink_section(path)
    value = data.get("cache_path")
    return str(value) if value else default_cache_path()
