"""
Contract artifacts - fetch and validate compiled contract descriptions.

An artifact is the truffle-style JSON document produced by compilation and
migration: the ABI plus a map from network id to deployed address.  It is
fetched by contract name, ``"BottleCoin"`` living at ``"BottleCoin.json"``.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Protocol

import httpx

from ..errors import ArtifactFetchError
from ..schemas import ARTIFACT_SCHEMA, SchemaRegistry, SchemaValidationError

logger = logging.getLogger(__name__)

DEFAULT_ARTIFACTS_DIR = "build/contracts"


def artifact_filename(contract_name: str) -> str:
    if not contract_name or "/" in contract_name or "\\" in contract_name:
        raise ArtifactFetchError(f"Invalid contract name: {contract_name!r}")
    return f"{contract_name}.json"


@dataclass(frozen=True)
class ContractArtifact:
    """
    A compiled contract.

    Attributes:
        contract_name: Name of the contract (e.g., "BottleCoin")
        abi: ABI as a list of dicts
        networks: Network id (decimal string) -> deployment record with "address"
        bytecode: 0x-prefixed creation bytecode, when the artifact carries it
    """
    contract_name: str
    abi: list[dict[str, Any]]
    networks: dict[str, dict[str, Any]] = field(default_factory=dict)
    bytecode: Optional[str] = None

    @classmethod
    def from_dict(
        cls,
        payload: Any,
        contract_name: Optional[str] = None,
        registry: SchemaRegistry | None = None,
    ) -> "ContractArtifact":
        registry = registry or SchemaRegistry.default()
        try:
            registry.validate_instance(payload, ARTIFACT_SCHEMA)
        except SchemaValidationError as exc:
            raise ArtifactFetchError(
                f"Artifact {contract_name or '<unnamed>'} is not a valid contract artifact.",
                errors=exc.errors,
            ) from exc

        return cls(
            contract_name=payload.get("contractName") or contract_name or "",
            abi=list(payload["abi"]),
            networks={str(k): dict(v) for k, v in (payload.get("networks") or {}).items()},
            bytecode=payload.get("bytecode"),
        )

    def address_for(self, network_id: str) -> Optional[str]:
        deployment = self.networks.get(str(network_id))
        if not deployment:
            return None
        return deployment.get("address")

    def function_names(self) -> list[str]:
        return [it["name"] for it in self.abi if it.get("type") == "function" and it.get("name")]

    def event_names(self) -> list[str]:
        return [it["name"] for it in self.abi if it.get("type") == "event" and it.get("name")]


class ArtifactSource(Protocol):
    async def fetch(self, contract_name: str) -> dict[str, Any]:
        ...


@dataclass(frozen=True)
class LocalDirArtifactSource:
    """Reads ``<root>/<ContractName>.json`` (truffle's build/contracts layout)."""
    root: Path

    async def fetch(self, contract_name: str) -> dict[str, Any]:
        root = self.root.resolve()
        path = (root / artifact_filename(contract_name)).resolve()
        if not path.is_relative_to(root):
            raise ArtifactFetchError(f"Path traversal detected: {contract_name}")

        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ArtifactFetchError(
                f"Artifact not found: {path}. Run 'truffle migrate' to build it."
            ) from exc

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise ArtifactFetchError(f"Artifact {path} is not valid JSON: {exc}") from exc


@dataclass(frozen=True)
class HttpArtifactSource:
    """Fetches ``<base_url>/<ContractName>.json`` with a single GET."""
    base_url: str
    timeout: float = 30.0
    transport: Optional[httpx.AsyncBaseTransport] = None

    def url_for(self, contract_name: str) -> str:
        return f"{self.base_url.rstrip('/')}/{artifact_filename(contract_name)}"

    async def fetch(self, contract_name: str) -> dict[str, Any]:
        url = self.url_for(contract_name)
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                resp = await client.get(url)
        except httpx.HTTPError as exc:
            raise ArtifactFetchError(f"Failed to fetch artifact {url}: {exc}") from exc

        if resp.status_code != 200:
            raise ArtifactFetchError(f"Failed to fetch artifact {url}: HTTP {resp.status_code}")

        try:
            return resp.json()
        except ValueError as exc:
            raise ArtifactFetchError(f"Artifact {url} is not valid JSON: {exc}") from exc


def source_for(location: str) -> ArtifactSource:
    """An HTTP source for http(s) URLs, a local directory source otherwise."""
    if location.startswith(("http://", "https://")):
        return HttpArtifactSource(location)
    return LocalDirArtifactSource(Path(location))


async def fetch_artifact(source: ArtifactSource, contract_name: str) -> ContractArtifact:
    """
    Fetch and validate the named artifact.

    Raises:
        ArtifactFetchError: If the artifact cannot be retrieved, parsed or validated
    """
    logger.debug("fetching artifact %s from %r", contract_name, source)
    payload = await source.fetch(contract_name)
    return ContractArtifact.from_dict(payload, contract_name=contract_name)


__all__ = [
    "ArtifactSource",
    "ContractArtifact",
    "DEFAULT_ARTIFACTS_DIR",
    "HttpArtifactSource",
    "LocalDirArtifactSource",
    "artifact_filename",
    "fetch_artifact",
    "source_for",
]
