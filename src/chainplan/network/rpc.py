"""
Ethereum JSON-RPC network client.

Submits transactions from an unlocked node account (``eth_sendTransaction``),
so no key material passes through this process. Transport errors and
retryable HTTP statuses are retried; JSON-RPC errors are not.
"""

from __future__ import annotations

import itertools
import time
from typing import Any, Sequence

import httpx
import structlog
from eth_utils import to_checksum_address
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from chainplan.core.errors import NetworkError
from chainplan.network.artifacts import ArtifactStore
from chainplan.network.base import Receipt

logger = structlog.get_logger()

DEFAULT_USER_AGENT = "chainplan-rpc/0.1.0"


class RetryableRPCError(Exception):
    """Transport failures that should be retried."""


def is_retryable_status(status_code: int) -> bool:
    """Determine if HTTP status code is retryable."""
    return status_code in (408, 429, 500, 502, 503, 504)


def _to_int(value: str | int) -> int:
    return value if isinstance(value, int) else int(value, 16)


class JsonRpcNetworkClient:
    """Blocking JSON-RPC client implementing the ``NetworkClient`` protocol."""

    def __init__(
        self,
        url: str,
        artifacts: ArtifactStore,
        *,
        sender: str | None = None,
        gas: int | None = None,
        timeout: float = 30.0,
        max_retries: int = 3,
        backoff_factor: float = 0.5,
        poll_interval: float = 2.0,
        confirmation_timeout: float = 300.0,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self._url = url
        self._artifacts = artifacts
        self._sender = sender
        self._gas = gas
        self._timeout = timeout
        self._max_retries = max(1, max_retries)
        self._backoff_factor = backoff_factor
        self._poll_interval = poll_interval
        self._confirmation_timeout = confirmation_timeout
        self._user_agent = user_agent
        self._ids = itertools.count(1)

    @property
    def sender(self) -> str | None:
        return self._sender

    def use_sender(self, sender: str) -> None:
        self._sender = sender

    def _post(self, payload: dict[str, Any]) -> dict[str, Any]:
        headers = {"Content-Type": "application/json", "User-Agent": self._user_agent}
        try:
            with httpx.Client(timeout=self._timeout) as client:
                response = client.post(self._url, json=payload, headers=headers)
        except (httpx.TimeoutException, httpx.ConnectError, httpx.ReadError) as exc:
            logger.warning("rpc_network_error", method=payload["method"], error=str(exc))
            raise RetryableRPCError(str(exc)) from exc

        if is_retryable_status(response.status_code):
            logger.warning("rpc_retryable_error", status=response.status_code, method=payload["method"])
            raise RetryableRPCError(f"HTTP {response.status_code}: {response.text}")
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise NetworkError(
                f"RPC {payload['method']} failed: HTTP {response.status_code}",
                details={"method": payload["method"]},
            ) from exc
        try:
            return response.json()
        except ValueError as exc:
            raise NetworkError(
                f"RPC {payload['method']} returned a non-JSON response",
                details={
                    "method": payload["method"],
                    "content_type": response.headers.get("content-type", ""),
                },
            ) from exc

    def _rpc(self, method: str, params: list[Any]) -> Any:
        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}
        try:
            for attempt in Retrying(
                retry=retry_if_exception_type(RetryableRPCError),
                stop=stop_after_attempt(self._max_retries),
                wait=wait_exponential(multiplier=self._backoff_factor, max=30),
                reraise=True,
            ):
                with attempt:
                    body = self._post(payload)
        except RetryableRPCError as exc:
            raise NetworkError(f"RPC {method} failed: {exc}", details={"method": method}) from exc

        if body.get("error"):
            err = body["error"]
            raise NetworkError(
                f"RPC {method} error: {err.get('message', err)}",
                details={"method": method, "code": err.get("code")},
            )
        return body.get("result")

    def chain_id(self) -> int:
        return _to_int(self._rpc("eth_chainId", []))

    def block_number(self) -> int:
        return _to_int(self._rpc("eth_blockNumber", []))

    def accounts(self) -> list[str]:
        return [to_checksum_address(a) for a in self._rpc("eth_accounts", []) or []]

    def template_hash(self, template_name: str) -> str:
        return self._artifacts.get(template_name).template_hash

    def _send(self, tx: dict[str, Any]) -> str:
        if not self._sender:
            raise NetworkError("No sender account configured for transactions")
        tx = {"from": self._sender, **tx}
        if self._gas is not None:
            tx["gas"] = hex(self._gas)
        return self._rpc("eth_sendTransaction", [tx])

    def submit_creation(self, template_name: str, args: Sequence[Any]) -> str:
        data = self._artifacts.get(template_name).encode_deploy(args)
        tx_hash = self._send({"data": data})
        logger.debug("creation_submitted", template=template_name, tx_hash=tx_hash)
        return tx_hash

    def submit_call(self, address: str, method: str, args: Sequence[Any], *, template: str) -> str:
        data = self._artifacts.get(template).encode_call(method, args)
        tx_hash = self._send({"to": address, "data": data})
        logger.debug("call_submitted", to=address, method=method, tx_hash=tx_hash)
        return tx_hash

    def query(self, address: str, method: str, args: Sequence[Any], *, template: str) -> Any:
        artifact = self._artifacts.get(template)
        data = artifact.encode_call(method, args)
        result = self._rpc("eth_call", [{"to": address, "data": data}, "latest"])
        return artifact.decode_result(method, len(args), result)

    def wait_for_confirmation(self, tx_hash: str, confirmations: int = 1) -> Receipt:
        deadline = time.monotonic() + self._confirmation_timeout
        while True:
            raw = self._rpc("eth_getTransactionReceipt", [tx_hash])
            if raw is not None:
                mined_in = _to_int(raw["blockNumber"])
                if self.block_number() - mined_in + 1 >= confirmations:
                    return self._receipt(tx_hash, raw)
            if time.monotonic() >= deadline:
                raise NetworkError(
                    f"Timed out waiting for {tx_hash}",
                    details={"tx_hash": tx_hash, "timeout": self._confirmation_timeout},
                )
            time.sleep(self._poll_interval)

    @staticmethod
    def _receipt(tx_hash: str, raw: dict[str, Any]) -> Receipt:
        status = _to_int(raw.get("status", "0x1")) == 1
        if not status:
            raise NetworkError(f"Transaction {tx_hash} reverted", details={"tx_hash": tx_hash})
        contract = raw.get("contractAddress")
        return Receipt(
            tx_hash=tx_hash,
            block_number=_to_int(raw["blockNumber"]),
            contract_address=to_checksum_address(contract) if contract else None,
            status=status,
        )
