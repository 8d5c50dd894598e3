"""Settings loading and validation for the optional goproctl YAML config."""

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

from goproctl.core.errors import ConfigError
from goproctl.core.model import MatchRules

LOGGER = logging.getLogger(__name__)


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
class Settings:
    match: MatchRules = MatchRules()
    adapter: str | None = None
    scan_timeout_s: float = 10.0
    connect_timeout_s: float = 20.0
    read_timeout_s: float = 5.0
    concurrent_reads: bool = False


def _load_schema_validator() -> Any:
    schema_text = resources.files("goproctl.schemas").joinpath("config.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def default_config_path() -> Path:
    override = os.environ.get("GOPROCTL_CONFIG")
    if override:
        return Path(override)
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return xdg_config / "goproctl/config.yaml"


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

    defaults = Settings()
    match_doc = doc.get("match", {})
    timeouts = doc.get("timeouts", {})
    return Settings(
        match=MatchRules(
            name_contains=tuple(match_doc.get("name_contains", defaults.match.name_contains)),
            address=tuple(a.upper() for a in match_doc.get("address", ())),
        ),
        adapter=doc.get("adapter", defaults.adapter),
        scan_timeout_s=float(timeouts.get("scan_s", defaults.scan_timeout_s)),
        connect_timeout_s=float(timeouts.get("connect_s", defaults.connect_timeout_s)),
        read_timeout_s=float(timeouts.get("read_s", defaults.read_timeout_s)),
        concurrent_reads=doc.get("concurrent_reads", defaults.concurrent_reads),
    )


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from `path`, or from the default location when omitted.

    A missing file at the default location yields default settings; a missing
    file that was asked for explicitly is an error.
    """
    explicit = path is not None
    source = path if path is not None else default_config_path()
    if not source.exists():
        if explicit:
            raise ConfigError(f"Config file {source} does not exist")
        LOGGER.debug("No config at %s; using defaults", source)
        return Settings()
    return _build_settings(_read_yaml(source), source)
