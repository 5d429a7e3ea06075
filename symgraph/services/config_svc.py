#!/usr/bin/env python3
# ======================================================================
#  Config Service - Configuration loading and caching
#  - Loads config from defaults, YAML files and env vars
#  - Caches composed config for performance
#  - Provides reload() for runtime changes
# ======================================================================

from __future__ import annotations

import logging
import os
from typing import Any

import yaml

from symgraph.helpers.dto.compatibility_dto import TypeCompatibilityMode
from symgraph.helpers.dto.config_dto import EngineConfig

ENV_PREFIX = "SYMGRAPH_"
CONFIG_PATH_ENV = "SYMGRAPH_CONFIG_PATH"
REPOSITORY_KINDS = ("memory", "sqlite")


class ConfigService:
    """
    Service for loading and caching engine configuration.

    Loads config from multiple sources (defaults → YAML → overrides → env),
    caches the result, and provides reload capability.
    """

    def __init__(self, overrides: dict[str, Any] | None = None) -> None:
        """
        Initialize ConfigService with empty cache.

        Args:
            overrides: Values applied after YAML files and before env vars
        """
        self._config: dict[str, Any] | None = None
        self._overrides = dict(overrides or {})
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
            self._config = self._compose(self._overrides)
        return self._config

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get a config value by dotted path.

        Example:
            >>> service.get("type_mode")
            'compatible'
            >>> service.get("missing.key", 2)
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
        self._logger.info("[config_svc] Reloading configuration from all sources")
        return self.get_config(force_reload=True)

    def make_engine_config(self) -> EngineConfig:
        """
        Build an EngineConfig from the current configuration.

        This is the boundary where raw values are checked and coerced.

        Raises:
            ValueError: If repository or type_mode holds an unsupported value
        """
        cfg = self.get_config()

        repository = str(cfg["repository"]).lower()
        if repository not in REPOSITORY_KINDS:
            raise ValueError(f"Unsupported repository '{repository}', expected one of {REPOSITORY_KINDS}")

        type_mode = str(cfg["type_mode"]).lower()
        valid_modes = [m.value for m in TypeCompatibilityMode]
        if type_mode not in valid_modes:
            raise ValueError(f"Unsupported type_mode '{type_mode}', expected one of {valid_modes}")

        return EngineConfig(
            repository=repository,  # type: ignore[arg-type]
            db_path=str(cfg["db_path"]),
            type_mode=type_mode,
            check_cardinality=bool(cfg["check_cardinality"]),
            reject_cycles=bool(cfg["reject_cycles"]),
            include_structural_edges=bool(cfg["include_structural_edges"]),
            log_level=str(cfg["log_level"]).upper(),
        )

    # ----------------------------------------------------------------------
    # Private composition logic
    # ----------------------------------------------------------------------

    def _compose(self, overrides: dict[str, Any] | None = None) -> dict[str, Any]:
        """
        Load final configuration from:
          1) Built-in defaults
          2) /etc/symgraph/config.yaml  (if present)
          3) ./config/config.yaml
          4) $SYMGRAPH_CONFIG_PATH (if set)
          5) overrides dict passed in
          6) Environment variables (SYMGRAPH_*)

        Returns merged config as dict.
        """
        cfg = self._default_config()

        # 1) System-wide YAML
        self._deep_merge(cfg, self._load_yaml("/etc/symgraph/config.yaml"))

        # 2) Repo-local config
        self._deep_merge(cfg, self._load_yaml(os.path.join(os.getcwd(), "config", "config.yaml")))

        # 3) Optional path via env
        env_path = os.getenv(CONFIG_PATH_ENV)
        if env_path:
            self._deep_merge(cfg, self._load_yaml(env_path))

        # 4) Direct overrides
        if overrides:
            self._deep_merge(cfg, overrides)

        # 5) Environment variable overrides
        self._apply_env_overrides(cfg)

        self._logger.debug(f"[config_svc] Composed config; keys: {sorted(cfg)}")
        return cfg

    def _default_config(self) -> dict[str, Any]:
        """
        Base defaults; all fields present so no KeyErrors downstream.
        """
        return {
            # Storage
            "repository": "memory",
            "db_path": "./data/symgraph.sqlite",
            # Wiring rules
            "type_mode": TypeCompatibilityMode.COMPATIBLE.value,
            "check_cardinality": True,
            "reject_cycles": False,
            # Graph building
            "include_structural_edges": False,
            # Logging
            "log_level": "INFO",
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
            self._logger.warning(f"[config_svc] Ignoring unreadable config file {path}: {e}")
            return {}
        if not isinstance(data, dict):
            self._logger.warning(f"[config_svc] Ignoring config file {path}: top level is not a mapping")
            return {}
        return data

    def _apply_env_overrides(self, cfg: dict[str, Any]) -> None:
        """
        Support environment overrides of the form:
          SYMGRAPH_REPOSITORY=sqlite
          SYMGRAPH_REJECT_CYCLES=true
        """
        for k, v in os.environ.items():
            if not k.startswith(ENV_PREFIX) or k == CONFIG_PATH_ENV:
                continue
            key = k[len(ENV_PREFIX) :].lower()
            if not key:
                continue

            # try to parse numeric/bool types
            if v.lower() in ("true", "false"):
                val: Any = v.lower() == "true"
            elif v.isdigit():
                val = int(v)
            else:
                val = v
            cfg[key] = val
