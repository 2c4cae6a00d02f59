"""Shared wiring for CLI commands: settings, network, client and registry."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import structlog

from chainplan.config.loader import get_network
from chainplan.config.networks import NetworkConfig
from chainplan.config.settings import Settings, get_settings
from chainplan.core.errors import ConfigurationError
from chainplan.network.artifacts import ArtifactStore
from chainplan.network.base import resolve_account
from chainplan.network.rpc import JsonRpcNetworkClient
from chainplan.registry.store import JsonFileRegistry

logger = structlog.get_logger()


@dataclass
class CommandContext:
    settings: Settings
    network: NetworkConfig
    client: JsonRpcNetworkClient
    registry: JsonFileRegistry


def build_context(
    network_name: str,
    *,
    config_path: str | None = None,
    deployments_dir: str | None = None,
    artifacts_dir: str | None = None,
    rpc_url: str | None = None,
    check_chain_id: bool = True,
) -> CommandContext:
    """Resolve configuration once and build the client for ``network_name``."""
    settings = get_settings()
    network = get_network(network_name, config_path or settings.networks_file)

    url = rpc_url or settings.rpc_url or network.resolve_rpc_url(settings.infura_api_key)
    client = JsonRpcNetworkClient(
        url,
        ArtifactStore(Path(artifacts_dir or settings.artifacts_dir)),
        gas=network.gas,
        timeout=settings.rpc_timeout,
        max_retries=settings.rpc_max_retries,
        poll_interval=settings.poll_interval,
        confirmation_timeout=settings.confirmation_timeout,
    )

    if check_chain_id:
        remote_chain_id = client.chain_id()
        if remote_chain_id != network.chain_id:
            raise ConfigurationError(
                f"Endpoint reports chain id {remote_chain_id}, expected {network.chain_id}",
                details={"network": network.name},
            )

    registry = JsonFileRegistry(Path(deployments_dir or settings.deployments_dir))
    logger.debug("context_ready", network=network.name, chain_id=network.chain_id)
    return CommandContext(settings=settings, network=network, client=client, registry=registry)


def use_deployer_account(ctx: CommandContext) -> str:
    """Resolve the deployer named account and make it the transaction sender."""
    deployer = resolve_account(ctx.client, ctx.network.accounts.deployer)
    ctx.client.use_sender(deployer)
    return deployer
