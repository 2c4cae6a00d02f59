"""
Compiled contract artifacts.

Reads Hardhat-style artifact files (``artifacts/contracts/X.sol/X.json``)
holding ``abi`` and ``bytecode``, and encodes constructor and function calls
against that ABI.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Sequence

from eth_abi import decode, encode
from eth_utils import keccak

from chainplan.core.errors import ConfigurationError

DEFAULT_ARTIFACTS_DIR = Path("artifacts")


def _canonical_type(param: dict[str, Any]) -> str:
    kind = param["type"]
    if kind.startswith("tuple"):
        inner = ",".join(_canonical_type(c) for c in param.get("components", []))
        return f"({inner}){kind[len('tuple'):]}"
    return kind


def _strip_0x(value: str) -> str:
    return value[2:] if value.startswith("0x") else value


@dataclass(frozen=True)
class Artifact:
    name: str
    abi: List[Dict[str, Any]]
    bytecode: str

    @property
    def template_hash(self) -> str:
        return "0x" + keccak(bytes.fromhex(_strip_0x(self.bytecode))).hex()

    def constructor_types(self) -> List[str]:
        for item in self.abi:
            if item.get("type") == "constructor":
                return [_canonical_type(p) for p in item.get("inputs", [])]
        return []

    def _function(self, method: str, arg_count: int) -> Dict[str, Any]:
        for item in self.abi:
            if (
                item.get("type") == "function"
                and item.get("name") == method
                and len(item.get("inputs", [])) == arg_count
            ):
                return item
        raise ConfigurationError(
            f"{self.name} has no function {method} taking {arg_count} argument(s)",
            details={"template": self.name},
        )

    def encode_deploy(self, args: Sequence[Any]) -> str:
        types = self.constructor_types()
        if len(types) != len(args):
            raise ConfigurationError(
                f"{self.name} constructor takes {len(types)} argument(s), got {len(args)}",
                details={"template": self.name},
            )
        return "0x" + _strip_0x(self.bytecode) + encode(types, list(args)).hex()

    def encode_call(self, method: str, args: Sequence[Any]) -> str:
        fn = self._function(method, len(args))
        types = [_canonical_type(p) for p in fn.get("inputs", [])]
        selector = keccak(text=f"{method}({','.join(types)})")[:4]
        return "0x" + selector.hex() + encode(types, list(args)).hex()

    def decode_result(self, method: str, arg_count: int, data: str) -> Any:
        fn = self._function(method, arg_count)
        types = [_canonical_type(p) for p in fn.get("outputs", [])]
        values = decode(types, bytes.fromhex(_strip_0x(data)))
        if len(values) == 1:
            return values[0]
        return values


class ArtifactStore:
    """Lazily indexes artifact files under a root directory."""

    def __init__(self, root: Path | None = None) -> None:
        self.root = root or DEFAULT_ARTIFACTS_DIR
        self._cache: Dict[str, Artifact] = {}

    def get(self, name: str) -> Artifact:
        if name in self._cache:
            return self._cache[name]
        matches = [p for p in self.root.rglob(f"{name}.json") if not p.name.endswith(".dbg.json")]
        if not matches:
            raise ConfigurationError(
                f"No compiled artifact for {name}",
                details={"artifacts_dir": str(self.root)},
            )
        data = json.loads(matches[0].read_text())
        bytecode = data.get("bytecode") or ""
        if _strip_0x(bytecode) == "":
            raise ConfigurationError(
                f"Artifact {name} has no creation bytecode (abstract contract or interface?)",
                details={"path": str(matches[0])},
            )
        artifact = Artifact(name=data.get("contractName", name), abi=data["abi"], bytecode=bytecode)
        self._cache[name] = artifact
        return artifact
