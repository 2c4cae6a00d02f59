"""Deployment registry backends."""

from chainplan.registry.store import (
    DEFAULT_DEPLOYMENTS_DIR,
    InMemoryRegistry,
    JsonFileRegistry,
    RegistryEntry,
    RegistryStore,
)

__all__ = [
    "DEFAULT_DEPLOYMENTS_DIR",
    "InMemoryRegistry",
    "JsonFileRegistry",
    "RegistryEntry",
    "RegistryStore",
]
