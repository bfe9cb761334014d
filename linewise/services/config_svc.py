# ======================================================================
#  Config Service - Configuration loading and caching
#  - Loads config from defaults, YAML, env vars and explicit overrides
#  - Caches composed config
#  - Builds the EngineConfig handed to every workflow
# ======================================================================

from __future__ import annotations

import logging
import os
from typing import Any

import yaml

from linewise.helpers.content import newline_from_name
from linewise.helpers.dto.config_dto import EngineConfig

ENV_PREFIX = "LINEWISE_"
CONFIG_PATH_ENV = "LINEWISE_CONFIG"
DEFAULT_CONFIG_FILE = "linewise.yaml"


class ConfigService:
    """
    Service for loading and caching engine configuration.

    Loads config from multiple sources (defaults → YAML → env → overrides),
    caches the result, and provides reload capability.
    """

    def __init__(self, overrides: dict[str, Any] | None = None) -> None:
        """Initialize ConfigService with empty cache."""
        self._overrides = overrides or {}
        self._config: dict[str, Any] | None = None
        self._logger = logging.getLogger(__name__)

    def get_config(self, force_reload: bool = False) -> dict[str, Any]:
        """
        Get the composed configuration.

        Args:
            force_reload: If True, bypass cache and reload from sources

        Returns:
            Complete configuration dict
        """
        if self._config is None or force_reload:
            self._config = self._compose()
        return self._config

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get a config value by dotted path.

        Example:
            >>> service.get("display.head_lines")
            2
        """
        node: Any = self.get_config()
        for part in key_path.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def reload(self) -> dict[str, Any]:
        """Force reload configuration from all sources."""
        self._logger.info("[config] Reloading configuration from all sources")
        return self.get_config(force_reload=True)

    # ----------------------------------------------------------------------
    # Private composition logic
    # ----------------------------------------------------------------------

    def _compose(self) -> dict[str, Any]:
        """
        Load final configuration from:
          1) Built-in defaults
          2) $LINEWISE_CONFIG, else ./linewise.yaml (if present)
          3) Environment variables (LINEWISE_<SECTION>_<KEY>)
          4) Overrides dict passed to the constructor
        """
        cfg = self._default_config()

        env_path = os.getenv(CONFIG_PATH_ENV)
        if env_path:
            self._deep_merge(cfg, self._load_yaml(env_path))
        else:
            self._deep_merge(cfg, self._load_yaml(os.path.join(os.getcwd(), DEFAULT_CONFIG_FILE)))

        self._apply_env_overrides(cfg)

        if self._overrides:
            self._deep_merge(cfg, self._overrides)

        self._logger.debug(f"[config] Composed configuration sections: {sorted(cfg)}")
        return cfg

    def _default_config(self) -> dict[str, Any]:
        """
        Base defaults; all fields present so no KeyErrors downstream.
        """
        return {
            "detection": {
                "sample_bytes": 65536,  # prefix sample for charset/newline detection
                "tail_probe_bytes": 4,  # widest code unit (UTF-32)
            },
            "io": {
                "buffer_size": 65536,
            },
            "display": {
                "highlight": True,  # ANSI reverse video on matches
                "max_full_lines": 5,  # previews longer than this collapse
                "head_lines": 2,
            },
            "files": {
                "default_newline": "lf",
                "new_file_trailing_newline": True,
                "backup_timestamp_format": "%Y%m%d%H%M%S",
            },
        }

    def _deep_merge(self, a: dict[str, Any], b: dict[str, Any]) -> dict[str, Any]:
        """
        Recursively merge dict b into dict a (mutates a, returns it).
        """
        for k, v in b.items():
            if isinstance(v, dict) and isinstance(a.get(k), dict):
                self._deep_merge(a[k], v)
            else:
                a[k] = v
        return a

    def _load_yaml(self, path: str) -> dict[str, Any]:
        """
        Load a YAML file; returns {} if not found or invalid.
        """
        if not path or not os.path.exists(path):
            return {}
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            self._logger.warning(f"[config] Ignoring unreadable config file {path}: {e}")
            return {}
        if not isinstance(data, dict):
            self._logger.warning(f"[config] Ignoring {path}: top level must be a mapping")
            return {}
        self._logger.debug(f"[config] Loaded {path}")
        return data

    def _apply_env_overrides(self, cfg: dict[str, Any]) -> None:
        """
        Support environment overrides of the form:
          LINEWISE_DISPLAY_HIGHLIGHT=false
          LINEWISE_DETECTION_SAMPLE_BYTES=131072
        Values are parsed as YAML scalars.
        """
        for k, v in os.environ.items():
            if not k.startswith(ENV_PREFIX) or k == CONFIG_PATH_ENV:
                continue
            parts = k[len(ENV_PREFIX) :].lower().split("_", 1)
            if len(parts) == 1:
                continue
            section, field = parts
            if not isinstance(cfg.get(section), dict):
                self._logger.debug(f"[config] Ignoring {k}: unknown section '{section}'")
                continue
            try:
                val = yaml.safe_load(v)
            except yaml.YAMLError:
                val = v
            cfg[section][field] = val

    def get_engine_config(self) -> EngineConfig:
        """
        Build an EngineConfig from the current configuration.

        This is the boundary where raw config values are converted and
        validated.

        Raises:
            ValueError: a value is out of range or of the wrong type
        """
        cfg = self.get_config()
        detection, io_cfg = cfg["detection"], cfg["io"]
        display, files = cfg["display"], cfg["files"]
        try:
            return EngineConfig(
                sample_bytes=int(detection["sample_bytes"]),
                tail_probe_bytes=int(detection["tail_probe_bytes"]),
                buffer_size=int(io_cfg["buffer_size"]),
                highlight=bool(display["highlight"]),
                max_full_lines=int(display["max_full_lines"]),
                head_lines=int(display["head_lines"]),
                default_newline=newline_from_name(str(files["default_newline"])),
                new_file_trailing_newline=bool(files["new_file_trailing_newline"]),
                backup_timestamp_format=str(files["backup_timestamp_format"]),
            )
        except (KeyError, TypeError) as e:
            raise ValueError(f"Invalid linewise configuration: {e}") from e
