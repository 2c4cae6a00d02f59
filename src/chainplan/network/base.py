from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, Sequence

from chainplan.core.errors import ConfigurationError


@dataclass(frozen=True)
class Receipt:
    """Confirmed transaction as reported by the network."""

    tx_hash: str
    block_number: int
    contract_address: str | None = None
    status: bool = True


class NetworkClient(Protocol):
    """Blocking primitives the deployment core needs from a network."""

    def template_hash(self, template_name: str) -> str:
        ...

    def submit_creation(self, template_name: str, args: Sequence[Any]) -> str:
        ...

    def submit_call(
        self, address: str, method: str, args: Sequence[Any], *, template: str
    ) -> str:
        ...

    def query(self, address: str, method: str, args: Sequence[Any], *, template: str) -> Any:
        ...

    def wait_for_confirmation(self, tx_hash: str, confirmations: int = 1) -> Receipt:
        ...

    def accounts(self) -> list[str]:
        ...


def resolve_account(client: NetworkClient, ref: str | int) -> str:
    """Turn a named-account reference into an address.

    Integer references index into the node's unlocked accounts, the same way
    ``default: 0`` works for local development nodes.
    """
    if isinstance(ref, str):
        return ref
    accounts = client.accounts()
    if ref >= len(accounts):
        raise ConfigurationError(
            f"Account index {ref} out of range",
            details={"available_accounts": len(accounts)},
        )
    return accounts[ref]
