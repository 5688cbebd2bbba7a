#!/usr/bin/env python3
"""
Configuration Manager for GasLens

Holds the gas cost schedule and analysis settings, persisted as YAML.
"""

import logging
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "~/.gaslens/config.yaml"

ALL_CHECKS = ["loop_storage_reads", "inefficient_types", "redundant_operations"]

# Expected YAML shapes of the top-level settings
_SETTING_TYPES = {
    "solc_version": str,
    "use_compiler": bool,
    "enabled_checks": list,
    "narrow_types": list,
}


@dataclass
class GasSchedule:
    """Heuristic gas costs used to estimate savings.

    Defaults follow the post-EIP-2929 warm SLOAD approximation.
    """
    storage_read: int = 800        # SLOAD
    memory_read: int = 3           # MLOAD
    narrow_type_penalty: int = 200
    redundant_expression: int = 50

    @property
    def cached_read_savings(self) -> int:
        """Gas saved for each storage read replaced by a memory read."""
        return self.storage_read - self.memory_read


@dataclass
class GasLensConfig:
    """Main configuration for GasLens."""

    # Compiler settings
    solc_version: str = "0.8.30"
    use_compiler: bool = True

    # Analysis settings
    enabled_checks: List[str] = field(default_factory=lambda: list(ALL_CHECKS))
    narrow_types: List[str] = field(default_factory=lambda: ["uint8", "uint16", "uint32"])

    schedule: GasSchedule = field(default_factory=GasSchedule)


class ConfigManager:
    """Manages GasLens configuration."""

    def __init__(self, config_file: str = DEFAULT_CONFIG_FILE):
        self.config_file = Path(config_file).expanduser()
        self.config = GasLensConfig()
        self.load_config()

    def load_config(self) -> None:
        """Load configuration from file, keeping defaults for anything missing."""
        if not self.config_file.exists():
            return

        try:
            with open(self.config_file, 'r') as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Could not load config file {self.config_file}: {e}")
            return

        if not data:
            return
        if not isinstance(data, dict):
            logger.warning(f"Ignoring config file {self.config_file}: top level is not a mapping")
            return

        self.apply(data)

    def apply(self, data: Dict[str, Any]) -> None:
        """Overlay a mapping of settings onto the current configuration."""
        for key, value in data.items():
            if key == 'schedule':
                self._apply_schedule(value)
            elif key not in _SETTING_TYPES:
                logger.warning(f"Unknown config key ignored: {key}")
            elif not _matches(value, _SETTING_TYPES[key]):
                logger.warning(f"Config key {key} must be a {_SETTING_TYPES[key].__name__}, got {value!r}; keeping default")
            else:
                setattr(self.config, key, value)

    def _apply_schedule(self, value: Any) -> None:
        if not isinstance(value, dict):
            logger.warning("Config key 'schedule' must be a mapping, keeping defaults")
            return
        known = {f.name for f in fields(GasSchedule)}
        for key, cost in value.items():
            if key not in known:
                logger.warning(f"Unknown gas schedule entry ignored: {key}")
            elif isinstance(cost, bool) or not isinstance(cost, int) or cost < 0:
                logger.warning(f"Gas schedule entry {key} must be a non-negative integer, got {cost!r}")
            else:
                setattr(self.config.schedule, key, cost)

    def save_config(self) -> None:
        """Save current configuration to file."""
        self.config_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_file, 'w') as f:
            yaml.dump(asdict(self.config), f, default_flow_style=False, indent=2)
        logger.info(f"Configuration saved to {self.config_file}")

    def is_check_enabled(self, check: str) -> bool:
        return check in self.config.enabled_checks


def _matches(value: Any, expected: type) -> bool:
    if expected is list:
        return isinstance(value, list) and all(isinstance(item, str) for item in value)
    return isinstance(value, expected)


def load_config(config_file: Optional[str] = None) -> GasLensConfig:
    """Convenience loader returning just the configuration object."""
    return ConfigManager(config_file or DEFAULT_CONFIG_FILE).config
