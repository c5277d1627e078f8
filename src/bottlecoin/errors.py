"""
Error taxonomy for the bootstrap pipeline.

Every failure a pipeline run can end in is a ``BootstrapError``; the
subclass names the stage that failed.  ``exit_code`` is what the CLI
exits with.
"""

from __future__ import annotations

from typing import Any, Optional


class BootstrapError(RuntimeError):
    exit_code: int = 1
    stage: str = "bootstrap"


class ProviderUnavailableError(BootstrapError):
    exit_code = 2
    stage = "provider"


class ArtifactFetchError(BootstrapError):
    exit_code = 3
    stage = "artifact"

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class InstanceResolutionError(BootstrapError):
    exit_code = 4
    stage = "instance"


class RpcError(RuntimeError):
    """JSON-RPC error object returned by a node."""

    def __init__(self, code: int, message: str, data: Optional[Any] = None) -> None:
        super().__init__(f"RPC error {code}: {message}")
        self.code = code
        self.message = message
        self.data = data


__all__ = [
    "ArtifactFetchError",
    "BootstrapError",
    "InstanceResolutionError",
    "ProviderUnavailableError",
    "RpcError",
]
