"""
Configuration module for battery-planner.

This module loads the run configuration from a TOML or YAML file, or from the
``[tool.battery-planner]`` table of pyproject.toml, and validates it into a
:class:`~battery_planner.models.config.PlannerConfig`.
"""

import sys
import warnings
from pathlib import Path
from typing import Any, Dict, Optional, Union

import pydantic
import yaml

from battery_planner.errors import ConfigNotFoundError, ParseError, ReadError, ValidationError
from battery_planner.models.config import BatteryConfig, DispatchPolicy, PlannerConfig

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

CONFIG_FILENAME = "config.toml"
PYPROJECT_SECTION = "battery-planner"
SECTIONS = ("settings", "policy")


def find_upwards(filename: str, start: Optional[Path] = None) -> Optional[Path]:
    """Find ``filename`` in ``start`` (default: cwd) or one of its parents."""
    current_dir = (start or Path.cwd()).resolve()
    for directory in (current_dir, *current_dir.parents):
        candidate = directory / filename
        if candidate.exists():
            return candidate
    return None


def _read_file(path: Path) -> Dict[str, Any]:
    """Parse a TOML or YAML document into a dict."""
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise ReadError(f"Failed to read configuration file: {path}") from exc

    suffix = path.suffix.lower()
    try:
        if suffix in (".yaml", ".yml"):
            data = yaml.safe_load(raw)
        else:
            data = tomllib.loads(raw.decode("utf-8"))
    except (tomllib.TOMLDecodeError, yaml.YAMLError, UnicodeDecodeError) as exc:
        raise ParseError(f"Failed to parse configuration file: {path}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ParseError(f"Configuration file {path} must contain a mapping")
    return data


def _pyproject_section(path: Path) -> Optional[Dict[str, Any]]:
    data = _read_file(path)
    return data.get("tool", {}).get(PYPROJECT_SECTION)


def parse_config(data: Dict[str, Any], source: str = "<config>") -> PlannerConfig:
    """
    Validate a section → values mapping.

    Unknown sections are ignored with a warning.
    """
    for key in data:
        if key not in SECTIONS:
            warnings.warn(
                f"Ignoring unknown section [{key}] in {source}.",
                UserWarning,
            )

    if "settings" not in data:
        raise ValidationError(f"Missing [settings] section in {source}")

    try:
        return PlannerConfig(
            settings=BatteryConfig(**data["settings"]),
            policy=DispatchPolicy(**(data.get("policy") or {})),
        )
    except (pydantic.ValidationError, TypeError) as exc:
        raise ValidationError(f"Invalid configuration in {source}: {exc}") from exc


def load_config(file_path: Union[str, Path, None] = None) -> PlannerConfig:
    """
    Load the planner configuration.

    With an explicit ``file_path`` only that file is used. Otherwise the
    nearest ``config.toml`` is used, and failing that the
    ``[tool.battery-planner]`` table of the nearest pyproject.toml.

    Returns:
        PlannerConfig: the validated configuration

    Raises:
        ConfigNotFoundError: if no configuration can be located
        ReadError, ParseError, ValidationError: if the located file is unusable
    """
    if file_path is not None:
        path = Path(file_path)
        if not path.exists():
            raise ConfigNotFoundError(f"Configuration file not found: {path}")
        return parse_config(_read_file(path), str(path))

    config_path = find_upwards(CONFIG_FILENAME)
    if config_path is not None:
        return parse_config(_read_file(config_path), str(config_path))

    pyproject_path = find_upwards("pyproject.toml")
    if pyproject_path is not None:
        section = _pyproject_section(pyproject_path)
        if section is not None:
            return parse_config(section, f"{pyproject_path} [tool.{PYPROJECT_SECTION}]")

    raise ConfigNotFoundError(
        f"Could not find {CONFIG_FILENAME} or a [tool.{PYPROJECT_SECTION}] "
        "section in pyproject.toml"
    )
