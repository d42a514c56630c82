# Copyright 2026 scopelex Contributors
# SPDX-License-Identifier: Apache-2.0

"""Scanner configuration for scopelex."""

from scopelex.config.loader import (
    CONFIG_FILE_NAME,
    ConfigError,
    ScanConfig,
    load_config,
    parse_config,
    save_config,
)

__all__ = [
    "CONFIG_FILE_NAME",
    "ConfigError",
    "ScanConfig",
    "load_config",
    "parse_config",
    "save_config",
]
