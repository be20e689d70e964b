"""Configuration loading: bundled local-config.yaml plus an optional override."""

import logging
import os
from importlib.resources import files
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "FIELDRULES_CONFIG"


class ConfigLoader:
    """Handles two-tier configuration: bundled defaults + optional override file."""

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize config loader.

        Args:
            config_path: Optional override YAML file. When omitted, the
                FIELDRULES_CONFIG environment variable is consulted.

        Raises:
            FileNotFoundError: If the override file does not exist
            ValueError: If a config file is not a YAML mapping
        """
        config_file = files("fieldrules").joinpath("local-config.yaml")
        self.local_config_path = str(config_file)
        with config_file.open("r") as f:
            self.local_config = self._as_mapping(yaml.safe_load(f), self.local_config_path)
        self._base_dir = Path(self.local_config_path).parent

        override_path = config_path or os.environ.get(CONFIG_ENV_VAR)
        self.override_path: Optional[str] = None
        if override_path:
            self.override_path = str(Path(override_path).expanduser().resolve())
            override = self._load_yaml(self.override_path)
            self.config = self._merge(self.local_config, override)
            self._base_dir = Path(self.override_path).parent
            logger.info(f"Loaded configuration override from {self.override_path}")
        else:
            self.config = dict(self.local_config)

    def _load_yaml(self, path: str) -> Dict[str, Any]:
        """Load YAML file from disk."""
        if not os.path.isfile(path):
            raise FileNotFoundError(f"Config file not found: {path}")
        with open(path) as f:
            return self._as_mapping(yaml.safe_load(f), path)

    @staticmethod
    def _as_mapping(data: Any, path: str) -> Dict[str, Any]:
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file must contain a YAML mapping: {path}")
        return data

    @staticmethod
    def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        merged = dict(base)
        for key, value in override.items():
            if key in ("messages", "rule_settings") and isinstance(value, dict):
                merged[key] = {**(base.get(key) or {}), **value}
            else:
                merged[key] = value
        return merged

    def get_config(self) -> Dict[str, Any]:
        """Get the effective (merged) configuration."""
        return self.config

    def get_local_config(self) -> Dict[str, Any]:
        """Get the bundled configuration, before overrides."""
        return self.local_config

    def get_rule_modules(self) -> List[str]:
        return list(self.config.get("rule_modules") or [])

    def get_custom_rules_directory(self) -> Optional[Path]:
        """Resolve custom_rules_directory relative to the declaring config file."""
        directory = self.config.get("custom_rules_directory")
        if not directory:
            return None
        path = Path(directory).expanduser()
        if not path.is_absolute():
            path = self._base_dir / path
        return path.resolve()

    def get_rule_settings(self) -> Dict[str, Any]:
        return dict(self.config.get("rule_settings") or {})

    def get_messages(self) -> Dict[str, str]:
        return dict(self.config.get("messages") or {})

    def get_schema_fetch_timeout(self) -> float:
        return float(self.config.get("schema_fetch_timeout_seconds", 10))
