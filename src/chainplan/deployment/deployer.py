"""Deploy-or-reuse decision for a single resource."""

from __future__ import annotations

from datetime import datetime, timezone

import structlog

from chainplan.core.errors import ConfigurationError, DeploymentFailed
from chainplan.deployment.models import DeployedResource, ResourceSpec
from chainplan.network.base import NetworkClient
from chainplan.registry.store import RegistryEntry, RegistryStore

logger = structlog.get_logger()


class Deployer:
    """Deploys resources onto one target network, recording them in the registry."""

    def __init__(
        self,
        client: NetworkClient,
        registry: RegistryStore,
        network: str,
        *,
        confirmations: int = 1,
    ) -> None:
        self._client = client
        self._registry = registry
        self.network = network
        self._confirmations = confirmations

    def deploy(self, spec: ResourceSpec) -> DeployedResource:
        """
        Return the registered deployment for ``spec`` or create a new one.

        An existing entry is reused only when the skip flag is set and its
        template hash matches the current template. Otherwise exactly one
        creation is submitted and the registry entry is overwritten once it
        is confirmed.
        """
        log = logger.bind(network=self.network, logical_name=spec.logical_name)
        template_hash = self._client.template_hash(spec.template_name)
        stale_address = None

        if spec.skip_if_already_deployed:
            entry = self._registry.get(self.network, spec.logical_name)
            if entry is not None and entry.template_hash == template_hash:
                log.info("resource_reused", address=entry.address)
                return DeployedResource(
                    logical_name=spec.logical_name,
                    address=entry.address,
                    newly_deployed=False,
                    template_name=spec.template_name,
                )
            if entry is not None:
                log.warning(
                    "stale_registry_entry",
                    address=entry.address,
                    recorded_hash=entry.template_hash,
                    current_hash=template_hash,
                )
                stale_address = entry.address

        try:
            tx_hash = self._client.submit_creation(spec.template_name, spec.constructor_args)
            receipt = self._client.wait_for_confirmation(tx_hash, self._confirmations)
        except ConfigurationError:
            raise
        except Exception as exc:
            log.error("deployment_failed", error=str(exc))
            raise DeploymentFailed(spec.logical_name, exc) from exc

        if not receipt.contract_address:
            raise DeploymentFailed(
                spec.logical_name, RuntimeError(f"receipt for {tx_hash} has no contract address")
            )

        self._registry.put(
            RegistryEntry(
                logical_name=spec.logical_name,
                network=self.network,
                address=receipt.contract_address,
                template_hash=template_hash,
                tx_hash=tx_hash,
                deployed_at=datetime.now(timezone.utc).isoformat(),
            )
        )
        log.info("resource_deployed", address=receipt.contract_address, tx_hash=tx_hash)
        return DeployedResource(
            logical_name=spec.logical_name,
            address=receipt.contract_address,
            newly_deployed=True,
            template_name=spec.template_name,
            tx_hash=tx_hash,
            replaced_address=stale_address,
        )
