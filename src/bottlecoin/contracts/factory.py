"""
Contract binding - an artifact bound to a provider, and its deployed instance.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from ..errors import InstanceResolutionError
from ..provider.resolver import ProviderHandle
from ..provider.rpc import Provider, get_code, get_network_id
from .abi import decode_result, encode_call, to_checksum_address
from .artifact import ContractArtifact

logger = logging.getLogger(__name__)

_EMPTY_CODE = ("", "0x", "0x0")


@dataclass(frozen=True)
class DeployedInstance:
    """A contract at a concrete address on the provider's network."""
    contract_name: str
    address: str
    network_id: str
    abi: list[dict[str, Any]]
    provider: Provider

    async def call(self, function_name: str, *args: Any) -> Any:
        """
        Read from the contract (eth_call).

        Returns:
            Decoded return value(s), or None for an empty result
        """
        calldata = encode_call(self.abi, function_name, list(args))
        result = await self.provider.request(
            "eth_call",
            [{"to": self.address, "data": calldata}, "latest"],
        )
        if result is None or result == "0x":
            return None
        return decode_result(self.abi, function_name, result)


@dataclass(frozen=True)
class ContractFactory:
    """An artifact bound to the session's provider."""
    artifact: ContractArtifact
    handle: ProviderHandle

    @property
    def contract_name(self) -> str:
        return self.artifact.contract_name

    @property
    def provider(self) -> Provider:
        return self.handle.provider

    async def deployed(self) -> DeployedInstance:
        """
        Resolve the instance deployed on the provider's current network.

        Raises:
            InstanceResolutionError: If the network cannot be detected, the
                artifact has no deployment for it, or no code lives at the
                recorded address
        """
        name = self.contract_name
        network_id = await self._detect_network()

        address = self.artifact.address_for(network_id)
        if not address:
            known = ", ".join(sorted(self.artifact.networks)) or "none"
            raise InstanceResolutionError(
                f"{name} has not been deployed to detected network {network_id} "
                f"(artifact networks: {known})"
            )

        logger.debug("%s recorded at %s on network %s", name, address, network_id)
        return await self._instance_at(address, network_id)

    async def at(self, address: str) -> DeployedInstance:
        """Bind to an explicit address, skipping the network lookup."""
        network_id = await self._detect_network()
        return await self._instance_at(address, network_id)

    async def _detect_network(self) -> str:
        try:
            return await get_network_id(self.provider)
        except Exception as exc:
            # injected providers may raise anything
            raise InstanceResolutionError(
                f"{self.contract_name}: could not detect the provider's network: {exc}"
            ) from exc

    async def _instance_at(self, address: str, network_id: str) -> DeployedInstance:
        name = self.contract_name
        try:
            checksummed = to_checksum_address(address)
        except ValueError as exc:
            raise InstanceResolutionError(f"{name}: invalid address {address!r}") from exc

        try:
            code = await get_code(self.provider, checksummed)
        except Exception as exc:
            # injected providers may raise anything
            raise InstanceResolutionError(
                f"{name}: could not read code at {checksummed}: {exc}"
            ) from exc

        if code in _EMPTY_CODE or code is None:
            raise InstanceResolutionError(
                f"Cannot create instance of {name}; no code at address {checksummed}"
            )

        return DeployedInstance(
            contract_name=name,
            address=checksummed,
            network_id=network_id,
            abi=self.artifact.abi,
            provider=self.provider,
        )


def bind(artifact: ContractArtifact, handle: ProviderHandle) -> ContractFactory:
    return ContractFactory(artifact=artifact, handle=handle)


__all__ = ["ContractFactory", "DeployedInstance", "bind"]
