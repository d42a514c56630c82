# Copyright 2026 scopelex Contributors
# SPDX-License-Identifier: Apache-2.0

"""Scanner configuration model and its YAML file format."""

from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

# ###############
# Public Interface
# ###############

CONFIG_FILE_NAME = ".scopelex.yaml"


class ConfigError(Exception):
    """Raised when the configuration file cannot be read, written, or is invalid."""


class ScanConfig(BaseModel):
    """Settings that influence a scan.

    The keyword, operator and delimiter tables are fixed and not part of the
    configuration.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)

    tab_width: int = Field(alias="tab-width", default=4, ge=1)
    max_line_length: int | None = Field(alias="max-line-length", default=None, ge=1)
    extra_builtins: tuple[str, ...] = Field(alias="extra-builtins", default=())


def load_config(path: Path) -> ScanConfig:
    """Load and validate a configuration file.

    An empty file yields the default configuration.

    Args:
        path: Path to the ``.scopelex.yaml`` file.

    Returns:
        A validated ScanConfig instance.

    Raises:
        ConfigError: If the file cannot be read, contains invalid YAML,
            or does not conform to the expected schema.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {path}") from None
    except OSError as exc:
        raise ConfigError(f"Cannot read config file '{path}': {exc}") from exc

    return parse_config(raw, source_label=str(path))


def parse_config(text: str, source_label: str = "<string>") -> ScanConfig:
    """Parse configuration YAML text into a ScanConfig.

    Raises:
        ConfigError: If the YAML is invalid or does not match the schema.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {source_label}: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"{source_label}: configuration must be a YAML mapping")

    try:
        return ScanConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in {source_label}: {exc}") from exc


def save_config(config: ScanConfig, path: Path) -> None:
    """Write *config* to *path* as YAML.

    Raises:
        ConfigError: If the file cannot be written.
    """
    data = config.model_dump(by_alias=True, mode="json")
    try:
        path.write_text(yaml.dump(data, default_flow_style=False, sort_keys=True), encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot write config file '{path}': {exc}") from exc
