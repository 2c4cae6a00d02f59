"""
Per-network deployment configuration.

Each target network carries its chain id, RPC endpoint, named accounts and
the constants the prize pool plan feeds into constructors. Values are
resolved once, before a plan runs.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from chainplan.core.errors import ConfigurationError

# New draw every 13 days
DEFAULT_BEACON_PERIOD_SECONDS = 86400 * 13
DEFAULT_TOKEN_DECIMALS = 18

DEFAULT_DEPLOYER = "0x5DC27a3BB1501eA928137b10558DC8B42feA04f1"

# A named account is either a literal address or an index into eth_accounts.
AccountRef = str | int


@dataclass(frozen=True)
class NamedAccounts:
    """Accounts the deployment refers to by role."""

    deployer: AccountRef = 0
    defender_relayer: AccountRef = 0

    def to_dict(self) -> dict[str, Any]:
        return {"deployer": self.deployer, "defender_relayer": self.defender_relayer}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> NamedAccounts:
        return cls(
            deployer=_account_ref(data.get("deployer", 0)),
            defender_relayer=_account_ref(data.get("defender_relayer", 0)),
        )


@dataclass(frozen=True)
class TicketParams:
    """Constructor constants for one outcome ticket."""

    name: str
    symbol: str

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "symbol": self.symbol}


@dataclass(frozen=True)
class PrizePoolParams:
    """Constants for the prize pool and its yes/no tickets."""

    draw_start_timestamp: int
    beacon_period_seconds: int = DEFAULT_BEACON_PERIOD_SECONDS
    draw_id: int = 1
    chain_label: str = "fantom"
    token_decimals: int = DEFAULT_TOKEN_DECIMALS
    yes_ticket: TicketParams = field(default_factory=lambda: TicketParams("yesUnitV1", "yUNIT"))
    no_ticket: TicketParams = field(default_factory=lambda: TicketParams("noUnitV1", "nUNIT"))
    # The no ticket is redeployed on every run unless this is set
    reuse_no_ticket: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "draw_start_timestamp": self.draw_start_timestamp,
            "beacon_period_seconds": self.beacon_period_seconds,
            "draw_id": self.draw_id,
            "chain_label": self.chain_label,
            "token_decimals": self.token_decimals,
            "yes_ticket": self.yes_ticket.to_dict(),
            "no_ticket": self.no_ticket.to_dict(),
            "reuse_no_ticket": self.reuse_no_ticket,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PrizePoolParams:
        if "draw_start_timestamp" not in data:
            raise ConfigurationError("prize_pool.draw_start_timestamp is required")
        yes = data.get("yes_ticket", {})
        no = data.get("no_ticket", {})
        return cls(
            draw_start_timestamp=int(data["draw_start_timestamp"]),
            beacon_period_seconds=int(
                data.get("beacon_period_seconds", DEFAULT_BEACON_PERIOD_SECONDS)
            ),
            draw_id=int(data.get("draw_id", 1)),
            chain_label=str(data.get("chain_label", "fantom")),
            token_decimals=int(data.get("token_decimals", DEFAULT_TOKEN_DECIMALS)),
            yes_ticket=TicketParams(yes.get("name", "yesUnitV1"), yes.get("symbol", "yUNIT")),
            no_ticket=TicketParams(no.get("name", "noUnitV1"), no.get("symbol", "nUNIT")),
            reuse_no_ticket=bool(data.get("reuse_no_ticket", False)),
        )


@dataclass(frozen=True)
class NetworkConfig:
    """Configuration for one target network."""

    name: str
    chain_id: int
    rpc_url: str
    accounts: NamedAccounts = field(default_factory=NamedAccounts)
    prize_pool: PrizePoolParams | None = None
    gas: int | None = None

    def resolve_rpc_url(self, infura_api_key: str | None = None) -> str:
        """Fill the ``{infura_api_key}`` placeholder, if the URL has one."""
        if "{infura_api_key}" not in self.rpc_url:
            return self.rpc_url
        if not infura_api_key:
            raise ConfigurationError(
                f"Network '{self.name}' needs an Infura API key",
                details={"hint": "set CHAINPLAN_INFURA_API_KEY"},
            )
        return self.rpc_url.replace("{infura_api_key}", infura_api_key)

    def with_rpc_url(self, url: str) -> NetworkConfig:
        return replace(self, rpc_url=url)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "chain_id": self.chain_id,
            "rpc_url": self.rpc_url,
            "accounts": self.accounts.to_dict(),
        }
        if self.prize_pool is not None:
            data["prize_pool"] = self.prize_pool.to_dict()
        if self.gas is not None:
            data["gas"] = self.gas
        return data

    @classmethod
    def from_dict(cls, name: str, data: dict[str, Any]) -> NetworkConfig:
        if "chain_id" not in data or "rpc_url" not in data:
            raise ConfigurationError(
                f"Network '{name}' must define chain_id and rpc_url",
                details={"network": name},
            )
        prize_pool = data.get("prize_pool")
        return cls(
            name=name,
            chain_id=int(data["chain_id"]),
            rpc_url=str(data["rpc_url"]),
            accounts=NamedAccounts.from_dict(data.get("accounts", {})),
            prize_pool=PrizePoolParams.from_dict(prize_pool) if prize_pool else None,
            gas=int(data["gas"]) if data.get("gas") is not None else None,
        )


def _account_ref(value: Any) -> AccountRef:
    if isinstance(value, bool):
        raise ConfigurationError(f"Invalid account reference: {value!r}")
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if text.isdigit():
        return int(text)
    if not (text.startswith("0x") and len(text) == 42):
        raise ConfigurationError(f"Invalid account address: {text!r}")
    return text


BUILTIN_NETWORKS: dict[str, NetworkConfig] = {
    "hardhat": NetworkConfig(
        name="hardhat",
        chain_id=31337,
        rpc_url="http://127.0.0.1:8545",
        prize_pool=PrizePoolParams(draw_start_timestamp=1654905600),
    ),
    "rinkeby": NetworkConfig(
        name="rinkeby",
        chain_id=4,
        rpc_url="https://rinkeby.infura.io/v3/{infura_api_key}",
        accounts=NamedAccounts(
            deployer=DEFAULT_DEPLOYER,
            defender_relayer="0xc40a27ea8facfbf2be191734a0e9fe90011d1c6e",
        ),
        prize_pool=PrizePoolParams(draw_start_timestamp=1656931617),
        gas=13450000,
    ),
    "mumbai": NetworkConfig(
        name="mumbai",
        chain_id=80001,
        rpc_url="https://rpc-mumbai.maticvigil.com",
        accounts=NamedAccounts(
            deployer=DEFAULT_DEPLOYER,
            defender_relayer="0x7a7aef651c161412ca89d45d9aa038a2f625d30f",
        ),
    ),
    "fuji": NetworkConfig(
        name="fuji",
        chain_id=43113,
        rpc_url="https://api.avax-test.network/ext/bc/C/rpc",
        accounts=NamedAccounts(
            deployer=DEFAULT_DEPLOYER,
            defender_relayer="0x2e5901a29eebc67f7ebdc6e48921a306389ff21e",
        ),
        prize_pool=PrizePoolParams(draw_start_timestamp=1654905600),
    ),
}
