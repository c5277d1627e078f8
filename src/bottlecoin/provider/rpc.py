"""
JSON-RPC provider for an Ethereum-compatible node.

Lightweight alternative to web3.py: uses httpx for HTTP.  The pipeline only
needs two capabilities from a provider: submit an RPC call and report
connectivity.  Anything with ``request`` and ``is_connected`` coroutines
satisfies ``Provider`` (an injected provider need not be an HttpProvider).
"""

from __future__ import annotations

import itertools
import logging
import os
from typing import Any, Optional, Protocol

import httpx

from ..errors import ProviderUnavailableError, RpcError

logger = logging.getLogger(__name__)

# Default RPC endpoint (local Ganache)
DEFAULT_RPC_URL = "http://localhost:7545"
DEFAULT_TIMEOUT = 30.0


def get_rpc_url() -> str:
    """Get the RPC URL from environment or default."""
    return os.environ.get("BOTTLECOIN_RPC_URL", DEFAULT_RPC_URL)


class Provider(Protocol):
    async def request(self, method: str, params: Optional[list] = None) -> Any:
        ...

    async def is_connected(self) -> bool:
        ...


def validate_endpoint(endpoint: str) -> httpx.URL:
    """
    Parse and check an RPC endpoint.

    Raises:
        ProviderUnavailableError: If the endpoint is not an http(s) URL with a host
    """
    try:
        url = httpx.URL(endpoint)
    except (httpx.InvalidURL, TypeError) as exc:
        raise ProviderUnavailableError(f"Malformed RPC endpoint {endpoint!r}: {exc}") from exc

    if url.scheme not in ("http", "https"):
        raise ProviderUnavailableError(
            f"Unsupported RPC endpoint scheme {url.scheme!r} in {endpoint!r} (expected http or https)"
        )
    if not url.host:
        raise ProviderUnavailableError(f"RPC endpoint {endpoint!r} has no host")
    return url


class HttpProvider:
    """JSON-RPC 2.0 over HTTP POST."""

    def __init__(
        self,
        endpoint: str = DEFAULT_RPC_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.url = validate_endpoint(endpoint)
        self.endpoint = endpoint
        self.timeout = timeout
        self._transport = transport
        self._ids = itertools.count(1)

    def __repr__(self) -> str:
        return f"HttpProvider({self.endpoint!r})"

    async def request(self, method: str, params: Optional[list] = None) -> Any:
        """
        Make a JSON-RPC call.

        Args:
            method: RPC method name (e.g., "eth_call")
            params: RPC parameters

        Returns:
            Result field from the RPC response

        Raises:
            RpcError: If the node answers with an error object
            httpx.HTTPError: On transport failure or non-2xx status
        """
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params or [],
            "id": next(self._ids),
        }
        logger.debug("rpc %s -> %s", method, self.endpoint)

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.post(str(self.url), json=payload)
            response.raise_for_status()
            data = response.json()

        if not isinstance(data, dict):
            raise RpcError(-32700, f"invalid JSON-RPC response: {data!r}")

        if "error" in data:
            error = data["error"] or {}
            if not isinstance(error, dict):
                raise RpcError(-32700, f"invalid JSON-RPC error object: {error!r}")
            raise RpcError(
                int(error.get("code", -32000)),
                str(error.get("message", "unknown error")),
                error.get("data"),
            )

        return data.get("result")

    async def is_connected(self) -> bool:
        try:
            await self.request("net_version")
        except (httpx.HTTPError, RpcError, ValueError) as exc:
            logger.debug("provider %s not connected: %s", self.endpoint, exc)
            return False
        return True


async def get_network_id(provider: Provider) -> str:
    """Network id as reported by ``net_version`` (decimal string)."""
    result = await provider.request("net_version")
    if isinstance(result, int):
        return str(result)
    result = str(result)
    # Some nodes answer net_version with a hex quantity.
    if result.startswith("0x"):
        return str(int(result, 16))
    return result


async def get_chain_id(provider: Provider) -> int:
    result = await provider.request("eth_chainId")
    return int(result, 16)


async def get_code(provider: Provider, address: str) -> str:
    """Deployed bytecode at ``address`` ("0x" when nothing is deployed)."""
    return await provider.request("eth_getCode", [address, "latest"])


async def get_accounts(provider: Provider) -> list[str]:
    return list(await provider.request("eth_accounts") or [])


__all__ = [
    "DEFAULT_RPC_URL",
    "HttpProvider",
    "Provider",
    "get_accounts",
    "get_chain_id",
    "get_code",
    "get_network_id",
    "get_rpc_url",
    "validate_endpoint",
]
