"""
Network table loading and merging.

Search order:
1. Explicit path (--config flag or CHAINPLAN_NETWORKS_FILE)
2. .chainplan/networks.yaml (project root)
3. ~/.chainplan/networks.yaml (user home)
4. Built-in networks only

Entries from a file are merged over the built-in table, key by key, so a
file only needs to state what it changes.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import structlog
import yaml

from chainplan.config.networks import BUILTIN_NETWORKS, NetworkConfig
from chainplan.core.errors import ConfigurationError

logger = structlog.get_logger()


def get_config_path(explicit_path: str | Path | None = None) -> Path | None:
    """
    Find the networks file to use.

    An explicit path that does not exist is an error rather than a silent
    fall-through to the defaults.
    """
    if explicit_path:
        path = Path(explicit_path)
        if path.exists():
            return path
        raise ConfigurationError(f"Networks file not found: {path}", details={"path": str(path)})

    cwd_config = Path.cwd() / ".chainplan" / "networks.yaml"
    if cwd_config.exists():
        return cwd_config

    home_config = Path.home() / ".chainplan" / "networks.yaml"
    if home_config.exists():
        return home_config

    return None


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class NetworkLoader:
    """Loads the network table from built-ins plus an optional YAML file."""

    def __init__(self, config_path: Path | None = None):
        self.config_path = config_path

    def load(self) -> dict[str, NetworkConfig]:
        networks = dict(BUILTIN_NETWORKS)
        if self.config_path is None:
            return networks

        try:
            with open(self.config_path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in {self.config_path}: {e}",
                details={"path": str(self.config_path)},
            ) from e

        entries = data.get("networks", {})
        if not isinstance(entries, dict):
            raise ConfigurationError(
                "'networks' must be a mapping of network name to settings",
                details={"path": str(self.config_path)},
            )

        for name, overrides in entries.items():
            base = networks[name].to_dict() if name in networks else {}
            networks[name] = NetworkConfig.from_dict(name, _deep_merge(base, overrides or {}))

        logger.debug("loaded_networks", path=str(self.config_path), networks=sorted(entries))
        return networks


def load_networks(path: str | Path | None = None) -> dict[str, NetworkConfig]:
    """Convenience function returning the merged network table."""
    return NetworkLoader(get_config_path(path)).load()


def get_network(name: str, path: str | Path | None = None) -> NetworkConfig:
    """Resolve a single network by name."""
    networks = load_networks(path)
    network = networks.get(name)
    if network is None:
        raise ConfigurationError(
            f"Unknown network '{name}'",
            details={"available": ", ".join(sorted(networks))},
        )
    return network
