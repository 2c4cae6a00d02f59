"""Read-verify-write reconciliation of a controller's linkage."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence, Tuple

import structlog

from chainplan.core.errors import ConfigurationError, ReconciliationFailed
from chainplan.deployment.models import ReconcileResult
from chainplan.network.base import NetworkClient

logger = structlog.get_logger()


@dataclass(frozen=True)
class LinkageAccessor:
    """How a controller's linkage is read (one getter call per slot) and written."""

    template: str
    getter: str
    getter_args: Tuple[Tuple[Any, ...], ...]
    setter: str


def _same(current: Any, desired: Any) -> bool:
    if isinstance(current, str) and isinstance(desired, str):
        return current.lower() == desired.lower()
    return current == desired


def linkage_matches(current: Sequence[Any], desired: Sequence[Any]) -> bool:
    """Ordered, element-wise comparison; a length mismatch is a difference."""
    if len(current) != len(desired):
        return False
    return all(_same(c, d) for c, d in zip(current, desired))


class Reconciler:
    def __init__(
        self,
        client: NetworkClient,
        accessor: LinkageAccessor,
        *,
        confirmations: int = 1,
    ) -> None:
        self._client = client
        self._accessor = accessor
        self._confirmations = confirmations

    def read(self, controller_address: str) -> Tuple[Any, ...]:
        acc = self._accessor
        return tuple(
            self._client.query(controller_address, acc.getter, list(args), template=acc.template)
            for args in acc.getter_args
        )

    def reconcile(self, controller_address: str, desired: Sequence[Any]) -> ReconcileResult:
        """Update the controller only if its current linkage differs from ``desired``."""
        log = logger.bind(controller=controller_address)
        desired = tuple(desired)
        try:
            current = self.read(controller_address)
        except ConfigurationError:
            raise
        except Exception as exc:
            log.error("linkage_query_failed", error=str(exc))
            raise ReconciliationFailed(controller_address, exc) from exc

        if linkage_matches(current, desired):
            log.info("linkage_reconciled", changed=False)
            return ReconcileResult(controller_address, changed=False, previous=current, desired=desired)

        log.info("linkage_drift", current=list(current), desired=list(desired))
        try:
            tx_hash = self._client.submit_call(
                controller_address,
                self._accessor.setter,
                list(desired),
                template=self._accessor.template,
            )
            self._client.wait_for_confirmation(tx_hash, self._confirmations)
        except ConfigurationError:
            raise
        except Exception as exc:
            log.error("linkage_update_failed", error=str(exc))
            raise ReconciliationFailed(controller_address, exc) from exc

        log.info("linkage_reconciled", changed=True, tx_hash=tx_hash)
        return ReconcileResult(
            controller_address,
            changed=True,
            previous=current,
            desired=desired,
            tx_hash=tx_hash,
        )
