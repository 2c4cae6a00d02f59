"""Tests for registry/store.py."""

import json

import pytest
from chainplan.core.errors import ConfigurationError
from chainplan.registry.store import InMemoryRegistry, JsonFileRegistry, RegistryEntry


def _entry(name="PrizePool", network="rinkeby", address="0xabc"):
    return RegistryEntry(
        logical_name=name,
        network=network,
        address=address,
        template_hash="0xhash",
        tx_hash="0xtx",
        deployed_at="2024-01-01T00:00:00+00:00",
    )


class TestInMemoryRegistry:
    def test_get_missing(self):
        assert InMemoryRegistry().get("rinkeby", "PrizePool") is None

    def test_put_then_get(self):
        reg = InMemoryRegistry()
        reg.put(_entry())

        assert reg.get("rinkeby", "PrizePool").address == "0xabc"
        assert reg.get("fuji", "PrizePool") is None

    def test_put_overwrites(self):
        reg = InMemoryRegistry()
        reg.put(_entry(address="0xold"))
        reg.put(_entry(address="0xnew"))

        assert reg.get("rinkeby", "PrizePool").address == "0xnew"

    def test_list_is_per_network_and_sorted(self):
        reg = InMemoryRegistry()
        reg.put(_entry("YesTicket"))
        reg.put(_entry("NoTicket"))
        reg.put(_entry("PrizePool", network="fuji"))

        assert [e.logical_name for e in reg.list("rinkeby")] == ["NoTicket", "YesTicket"]


class TestJsonFileRegistry:
    def test_layout(self, tmp_path):
        reg = JsonFileRegistry(tmp_path)
        reg.put(_entry())

        path = tmp_path / "rinkeby" / "PrizePool.json"
        assert path.exists()
        data = json.loads(path.read_text())
        assert data["address"] == "0xabc"
        assert data["template_hash"] == "0xhash"
        assert path.read_text().endswith("\n")

    def test_roundtrip(self, tmp_path):
        reg = JsonFileRegistry(tmp_path)
        reg.put(_entry())

        assert JsonFileRegistry(tmp_path).get("rinkeby", "PrizePool") == _entry()

    def test_get_missing(self, tmp_path):
        assert JsonFileRegistry(tmp_path).get("rinkeby", "PrizePool") is None

    def test_overwrite_replaces_whole_entry(self, tmp_path):
        reg = JsonFileRegistry(tmp_path)
        reg.put(_entry(address="0xold"))
        reg.put(RegistryEntry("PrizePool", "rinkeby", "0xnew", "0xhash2"))

        entry = reg.get("rinkeby", "PrizePool")
        assert entry.address == "0xnew"
        assert entry.tx_hash is None

    def test_list(self, tmp_path):
        reg = JsonFileRegistry(tmp_path)
        reg.put(_entry("YesTicket"))
        reg.put(_entry("NoTicket"))

        assert [e.logical_name for e in reg.list("rinkeby")] == ["NoTicket", "YesTicket"]
        assert reg.list("fuji") == []

    def test_corrupt_entry(self, tmp_path):
        path = tmp_path / "rinkeby" / "PrizePool.json"
        path.parent.mkdir(parents=True)
        path.write_text("{not json")

        with pytest.raises(ConfigurationError):
            JsonFileRegistry(tmp_path).get("rinkeby", "PrizePool")
