"""
Resource registry: last-known deployment per (network, logical name).

The registry is the sole source of truth for "already deployed". Entries are
written only after a creation is confirmed and are never deleted here.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Dict, List, Protocol, Tuple

import structlog

from chainplan.core.errors import ConfigurationError

logger = structlog.get_logger()

DEFAULT_DEPLOYMENTS_DIR = Path("deployments")


@dataclass(frozen=True)
class RegistryEntry:
    logical_name: str
    network: str
    address: str
    template_hash: str
    tx_hash: str | None = None
    deployed_at: str | None = None


class RegistryStore(Protocol):
    """Keyed store of registry entries."""

    def get(self, network: str, logical_name: str) -> RegistryEntry | None:
        ...

    def put(self, entry: RegistryEntry) -> None:
        ...

    def list(self, network: str) -> List[RegistryEntry]:
        ...


class InMemoryRegistry:
    """Registry kept in process memory, for tests and throwaway networks."""

    def __init__(self) -> None:
        self._entries: Dict[Tuple[str, str], RegistryEntry] = {}

    def get(self, network: str, logical_name: str) -> RegistryEntry | None:
        return self._entries.get((network, logical_name))

    def put(self, entry: RegistryEntry) -> None:
        self._entries[(entry.network, entry.logical_name)] = entry

    def list(self, network: str) -> List[RegistryEntry]:
        return sorted(
            (e for (net, _), e in self._entries.items() if net == network),
            key=lambda e: e.logical_name,
        )


class JsonFileRegistry:
    """File-backed registry laid out as ``<root>/<network>/<LogicalName>.json``."""

    def __init__(self, root: Path | None = None) -> None:
        self.root = root or DEFAULT_DEPLOYMENTS_DIR

    def _path(self, network: str, logical_name: str) -> Path:
        return self.root / network / f"{logical_name}.json"

    def get(self, network: str, logical_name: str) -> RegistryEntry | None:
        path = self._path(network, logical_name)
        if not path.exists():
            return None
        return _read_entry(path)

    def put(self, entry: RegistryEntry) -> None:
        path = self._path(entry.network, entry.logical_name)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(asdict(entry), indent=2, sort_keys=True) + "\n")
        logger.debug("registry_entry_written", path=str(path), address=entry.address)

    def list(self, network: str) -> List[RegistryEntry]:
        network_dir = self.root / network
        if not network_dir.is_dir():
            return []
        return [_read_entry(path) for path in sorted(network_dir.glob("*.json"))]


def _read_entry(path: Path) -> RegistryEntry:
    try:
        data = json.loads(path.read_text())
        return RegistryEntry(
            logical_name=data["logical_name"],
            network=data["network"],
            address=data["address"],
            template_hash=data["template_hash"],
            tx_hash=data.get("tx_hash"),
            deployed_at=data.get("deployed_at"),
        )
    except (json.JSONDecodeError, KeyError) as e:
        raise ConfigurationError(
            f"Corrupt registry entry: {path}",
            details={"path": str(path), "error": str(e)},
        ) from e
