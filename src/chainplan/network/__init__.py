"""Network clients and compiled artifact access."""

from chainplan.network.artifacts import Artifact, ArtifactStore
from chainplan.network.base import NetworkClient, Receipt, resolve_account
from chainplan.network.rpc import JsonRpcNetworkClient

__all__ = [
    "Artifact",
    "ArtifactStore",
    "JsonRpcNetworkClient",
    "NetworkClient",
    "Receipt",
    "resolve_account",
]
