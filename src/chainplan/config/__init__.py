"""
chainplan configuration.

- Pydantic-based settings (environment variables, .env files)
- Per-network tables (chain id, RPC URL, named accounts, plan constants)
- Project and user level networks.yaml overrides
"""

from chainplan.config.loader import NetworkLoader, get_config_path, get_network, load_networks
from chainplan.config.networks import (
    BUILTIN_NETWORKS,
    NamedAccounts,
    NetworkConfig,
    PrizePoolParams,
    TicketParams,
)
from chainplan.config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
    "BUILTIN_NETWORKS",
    "NamedAccounts",
    "NetworkConfig",
    "PrizePoolParams",
    "TicketParams",
    "NetworkLoader",
    "get_config_path",
    "get_network",
    "load_networks",
]
