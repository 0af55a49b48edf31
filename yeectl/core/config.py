"""Loading and validation of the optional YAML configuration file."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from yeectl.core.errors import ConfigError
from yeectl.core.model import ControlSettings, DiscoverySettings, Settings

LOGGER = logging.getLogger(__name__)
_CONFIG_NAMES = ("config.yaml", "config.yml")


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys."""


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[str, Any]:
    mapping: dict[str, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise ConfigError(f"Duplicate key '{key}' in YAML document")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


@dataclass(frozen=True)
class LoadedSettings:
    settings: Settings
    source: Path | None
    warnings: tuple[str, ...]


def _load_schema_validator() -> Any:
    schema_text = resources.files("yeectl.schemas").joinpath("config.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def config_dir() -> Path:
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return xdg_config / "yeectl"


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Could not read config file {path}: {exc}") from exc

    try:
        loaded = yaml.load(content, Loader=UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"Config file {path} must contain a mapping at root")
    return loaded


def _build_settings(doc: dict[str, Any], source: Path) -> Settings:
    validator = _load_schema_validator()
    try:
        validator.validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise ConfigError(f"Schema validation failed for {source}{where}: {exc.message}") from exc

    discovery = doc.get("discovery") or {}
    control = doc.get("control") or {}
    return Settings(
        discovery=DiscoverySettings(**discovery),
        control=ControlSettings(**control),
    )


def _find_config() -> tuple[Path | None, list[str]]:
    warnings: list[str] = []
    directory = config_dir()
    found = [directory / name for name in _CONFIG_NAMES if (directory / name).is_file()]
    if not found:
        return None, warnings
    if len(found) > 1:
        warning = f"Both {found[0].name} and {found[1].name} exist in {directory}; using {found[0].name}"
        LOGGER.warning(warning)
        warnings.append(warning)
    return found[0], warnings


def load_settings(path: Path | None = None) -> LoadedSettings:
    """Load settings from ``path`` or the user config directory.

    A missing user config file yields defaults; an explicit ``path`` must exist.
    """
    warnings: list[str] = []
    if path is None:
        path, warnings = _find_config()
        if path is None:
            return LoadedSettings(settings=Settings(), source=None, warnings=())

    doc = _read_yaml(path)
    settings = _build_settings(doc, path)
    LOGGER.debug("Loaded settings from %s", path)
    return LoadedSettings(settings=settings, source=path, warnings=tuple(warnings))
