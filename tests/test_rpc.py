"""Tests for the httpx JSON-RPC provider."""

from __future__ import annotations

import json

import httpx
import pytest

from bottlecoin.errors import ProviderUnavailableError, RpcError
from bottlecoin.provider.rpc import (
    DEFAULT_RPC_URL,
    HttpProvider,
    get_accounts,
    get_chain_id,
    get_network_id,
    get_rpc_url,
    validate_endpoint,
)


def _rpc_transport(results: dict, seen: list) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        seen.append(payload)
        result = results[payload["method"]]
        if isinstance(result, dict) and "error" in result:
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": payload["id"], **result})
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": payload["id"], "result": result})

    return httpx.MockTransport(handler)


def test_default_endpoint_is_local_ganache(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("BOTTLECOIN_RPC_URL", raising=False)
    assert DEFAULT_RPC_URL == "http://localhost:7545"
    assert get_rpc_url() == "http://localhost:7545"


def test_rpc_url_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BOTTLECOIN_RPC_URL", "http://10.0.0.2:8545")
    assert get_rpc_url() == "http://10.0.0.2:8545"


@pytest.mark.parametrize("endpoint", ["ftp://localhost:7545", "not a url", "http://"])
def test_rejects_unusable_endpoints(endpoint: str) -> None:
    with pytest.raises(ProviderUnavailableError):
        validate_endpoint(endpoint)


@pytest.mark.asyncio
async def test_request_posts_jsonrpc_payload() -> None:
    seen: list = []
    provider = HttpProvider(transport=_rpc_transport({"eth_blockNumber": "0x10"}, seen))

    assert await provider.request("eth_blockNumber") == "0x10"
    assert await provider.request("eth_blockNumber") == "0x10"

    assert seen[0]["jsonrpc"] == "2.0"
    assert seen[0]["method"] == "eth_blockNumber"
    assert seen[0]["params"] == []
    assert [p["id"] for p in seen] == [1, 2]


@pytest.mark.asyncio
async def test_error_object_raises_rpc_error() -> None:
    transport = _rpc_transport(
        {"eth_call": {"error": {"code": -32601, "message": "method not found"}}}, []
    )
    provider = HttpProvider(transport=transport)

    with pytest.raises(RpcError) as exc_info:
        await provider.request("eth_call", [{}, "latest"])
    assert exc_info.value.code == -32601


@pytest.mark.asyncio
async def test_is_connected_reports_unreachable_node() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    provider = HttpProvider(transport=httpx.MockTransport(handler))
    assert await provider.is_connected() is False


@pytest.mark.asyncio
async def test_is_connected_true_when_node_answers() -> None:
    provider = HttpProvider(transport=_rpc_transport({"net_version": "5777"}, []))
    assert await provider.is_connected() is True


@pytest.mark.asyncio
async def test_network_id_normalises_hex_answers() -> None:
    provider = HttpProvider(transport=_rpc_transport({"net_version": "0x1691"}, []))
    assert await get_network_id(provider) == "5777"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        ["not", "an", "object"],
        "0x1",
        {"jsonrpc": "2.0", "id": 1, "error": "boom"},
    ],
)
async def test_malformed_response_raises_rpc_error(body) -> None:
    provider = HttpProvider(transport=httpx.MockTransport(lambda r: httpx.Response(200, json=body)))

    with pytest.raises(RpcError) as exc_info:
        await provider.request("net_version")
    assert exc_info.value.code == -32700


@pytest.mark.asyncio
async def test_chain_id_and_accounts() -> None:
    accounts = ["0x" + "11" * 20, "0x" + "22" * 20]
    provider = HttpProvider(
        transport=_rpc_transport({"eth_chainId": "0x539", "eth_accounts": accounts}, [])
    )

    assert await get_chain_id(provider) == 1337
    assert await get_accounts(provider) == accounts
