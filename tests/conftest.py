from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Optional

import pytest

from bottlecoin.app.state import ApplicationState
from bottlecoin.app.view import LoadingView, RecordingSignals

NETWORK_ID = "5777"
DEPLOYED_ADDRESS = "0x" + "ab" * 20
DEPLOYED_CODE = "0x6080604052348015600f57600080fd5b50"

BOTTLECOIN_ABI = [
    {"type": "constructor", "inputs": [{"name": "initialSupply", "type": "uint256"}]},
    {
        "type": "function",
        "name": "totalSupply",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "balanceOf",
        "inputs": [{"name": "owner", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
    },
    {
        "type": "event",
        "name": "Transfer",
        "inputs": [
            {"name": "from", "type": "address", "indexed": True},
            {"name": "to", "type": "address", "indexed": True},
            {"name": "value", "type": "uint256", "indexed": False},
        ],
    },
]


def make_artifact(networks: Optional[dict[str, Any]] = None) -> dict[str, Any]:
    return {
        "contractName": "BottleCoin",
        "abi": BOTTLECOIN_ABI,
        "bytecode": "0x6080",
        "networks": {NETWORK_ID: {"address": DEPLOYED_ADDRESS}} if networks is None else networks,
    }


class FakeProvider:
    """In-memory provider answering from a method -> result map."""

    def __init__(
        self,
        responses: Optional[dict[str, Any]] = None,
        on_request: Optional[Callable[[str, list], None]] = None,
    ) -> None:
        self.responses = {"net_version": NETWORK_ID, "eth_getCode": DEPLOYED_CODE}
        self.responses.update(responses or {})
        self.on_request = on_request
        self.calls: list[tuple[str, list]] = []

    async def request(self, method: str, params: Optional[list] = None) -> Any:
        params = params or []
        self.calls.append((method, params))
        if self.on_request is not None:
            self.on_request(method, params)
        result = self.responses[method]
        if isinstance(result, BaseException):
            raise result
        return result

    async def is_connected(self) -> bool:
        return True


class DictSource:
    """Artifact source serving payloads from memory."""

    def __init__(self, artifacts: dict[str, Any], on_fetch: Optional[Callable[[str], None]] = None) -> None:
        self.artifacts = artifacts
        self.on_fetch = on_fetch
        self.fetched: list[str] = []

    async def fetch(self, contract_name: str) -> dict[str, Any]:
        if self.on_fetch is not None:
            self.on_fetch(contract_name)
        self.fetched.append(contract_name)
        result = self.artifacts[contract_name]
        if isinstance(result, BaseException):
            raise result
        return result


@pytest.fixture()
def state() -> ApplicationState:
    return ApplicationState()


@pytest.fixture()
def signals() -> RecordingSignals:
    return RecordingSignals()


@pytest.fixture()
def view(signals: RecordingSignals) -> LoadingView:
    return LoadingView(signals)


@pytest.fixture()
def artifacts_dir(tmp_path: Path) -> Path:
    """A truffle build/contracts directory holding BottleCoin.json."""
    root = tmp_path / "build" / "contracts"
    root.mkdir(parents=True)
    (root / "BottleCoin.json").write_text(json.dumps(make_artifact()), encoding="utf-8")
    return root
