"""Root test configuration."""

import logging
from typing import Any, Sequence

import pytest
import structlog
from chainplan.config.networks import NamedAccounts, NetworkConfig, PrizePoolParams
from chainplan.core.errors import NetworkError
from chainplan.network.base import Receipt
from chainplan.registry.store import InMemoryRegistry

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


def pytest_configure(config):
    """Configure structlog for tests to suppress debug/info output."""
    logging.basicConfig(level=logging.WARNING, force=True)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


class FakeNetwork:
    """In-memory chain implementing the NetworkClient protocol.

    Contracts get sequential addresses. Controllers answer ``getTicket(bool)``
    and ``setTicket(yes, no)``. Every call is recorded in ``calls``.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[Any, ...]] = []
        self.contracts: dict[str, dict[str, Any]] = {}
        self.linkage: dict[str, list[str]] = {}
        self.template_hashes: dict[str, str] = {}
        self.fail_creation_of: set[str] = set()
        self.fail_queries = False
        self.fail_calls = False
        self.fail_confirmations = False
        self._pending: dict[str, str | None] = {}
        self._next_address = 0xA0
        self._next_tx = 0
        self.block = 1

    # helpers

    def _tx(self) -> str:
        self._next_tx += 1
        return f"0x{self._next_tx:064x}"

    def set_linkage(self, controller: str, yes: str, no: str) -> None:
        self.linkage[controller] = [yes, no]

    @property
    def creations(self) -> list[tuple[Any, ...]]:
        return [c for c in self.calls if c[0] == "create"]

    @property
    def updates(self) -> list[tuple[Any, ...]]:
        return [c for c in self.calls if c[0] == "call"]

    @property
    def mutating_calls(self) -> int:
        return len(self.creations) + len(self.updates)

    # NetworkClient protocol

    def template_hash(self, template_name: str) -> str:
        return self.template_hashes.get(template_name, f"0xhash-{template_name.lower()}")

    def submit_creation(self, template_name: str, args: Sequence[Any]) -> str:
        self.calls.append(("create", template_name, tuple(args)))
        if template_name in self.fail_creation_of:
            raise NetworkError(f"creation of {template_name} rejected")
        address = f"0x{self._next_address:040x}"
        self._next_address += 1
        self.contracts[address] = {"template": template_name, "args": tuple(args)}
        self.linkage.setdefault(address, [ZERO_ADDRESS, ZERO_ADDRESS])
        tx_hash = self._tx()
        self._pending[tx_hash] = address
        return tx_hash

    def submit_call(self, address: str, method: str, args: Sequence[Any], *, template: str) -> str:
        self.calls.append(("call", address, method, tuple(args)))
        if self.fail_calls:
            raise NetworkError(f"{method} reverted")
        if method == "setTicket":
            self.linkage[address] = list(args)
        tx_hash = self._tx()
        self._pending[tx_hash] = None
        return tx_hash

    def query(self, address: str, method: str, args: Sequence[Any], *, template: str) -> Any:
        self.calls.append(("query", address, method, tuple(args)))
        if self.fail_queries:
            raise NetworkError("eth_call failed")
        assert method == "getTicket"
        yes, no = self.linkage.get(address, [ZERO_ADDRESS, ZERO_ADDRESS])
        return yes if args[0] else no

    def wait_for_confirmation(self, tx_hash: str, confirmations: int = 1) -> Receipt:
        if self.fail_confirmations:
            raise NetworkError(f"Timed out waiting for {tx_hash}")
        self.block += confirmations
        return Receipt(tx_hash=tx_hash, block_number=self.block, contract_address=self._pending[tx_hash])

    def accounts(self) -> list[str]:
        return [
            "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266",
            "0x70997970C51812dc3A010C7d01b50e0d17dc79C8",
        ]


@pytest.fixture
def fake_network():
    return FakeNetwork()


@pytest.fixture
def registry():
    return InMemoryRegistry()


@pytest.fixture
def local_network():
    """A prize-pool capable network config using node account indices."""
    return NetworkConfig(
        name="local",
        chain_id=31337,
        rpc_url="http://127.0.0.1:8545",
        accounts=NamedAccounts(deployer=0, defender_relayer=1),
        prize_pool=PrizePoolParams(draw_start_timestamp=1654905600),
    )
