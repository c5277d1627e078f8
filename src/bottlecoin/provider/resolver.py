"""
Provider resolution - pick the injected provider or build the local one.

The host decides whether a provider has been injected (a wallet extension,
an embedding application, ...).  That decision is an explicit capability
check on a ``Host`` object rather than sniffing for a global.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Protocol

from ..errors import ProviderUnavailableError
from .rpc import DEFAULT_RPC_URL, HttpProvider, Provider

if TYPE_CHECKING:
    from ..app.state import ApplicationState

logger = logging.getLogger(__name__)

INJECTED = "injected"
LOCAL = "local"

INJECTED_PROVIDER_ENV = "WEB3_PROVIDER_URI"


@dataclass(frozen=True)
class ProviderHandle:
    """
    The provider a session talks to.

    Attributes:
        provider: The provider object itself (the injected object is kept by
            reference, never copied)
        source: ``"injected"`` or ``"local"``
        endpoint: RPC URL when known
    """
    provider: Provider
    source: str
    endpoint: Optional[str] = None

    @property
    def injected(self) -> bool:
        return self.source == INJECTED


class Host(Protocol):
    def injected_provider(self) -> Optional[Provider]:
        ...


class NoInjectedHost:
    """A host that never injects a provider."""

    def injected_provider(self) -> Optional[Provider]:
        return None


@dataclass
class StaticHost:
    """A host that injects a fixed provider object (or none)."""
    provider: Optional[Provider] = None

    def injected_provider(self) -> Optional[Provider]:
        return self.provider


@dataclass
class EnvironmentHost:
    """
    Treats ``WEB3_PROVIDER_URI`` as the injected provider.

    The variable is read each time the capability is checked, so a host that
    swaps the URI between runs is seen by the next resolution.
    """
    env_var: str = INJECTED_PROVIDER_ENV

    def injected_provider(self) -> Optional[Provider]:
        uri = os.environ.get(self.env_var)
        if not uri:
            return None
        return HttpProvider(uri)


def resolve_provider(
    state: "ApplicationState",
    host: Host,
    endpoint: str = DEFAULT_RPC_URL,
) -> ProviderHandle:
    """
    Decide which provider this session uses and store it on ``state``.

    An injected provider always wins over the local fallback.  Connectivity
    is not checked here.

    Raises:
        ProviderUnavailableError: If the host check or the local provider
            construction fails
    """
    try:
        injected = host.injected_provider()
    except ProviderUnavailableError:
        raise
    except Exception as exc:
        raise ProviderUnavailableError(f"Injected provider check failed: {exc}") from exc

    if injected is not None:
        handle = ProviderHandle(
            provider=injected,
            source=INJECTED,
            endpoint=getattr(injected, "endpoint", None),
        )
        logger.info("using injected provider %r", injected)
    else:
        handle = ProviderHandle(provider=HttpProvider(endpoint), source=LOCAL, endpoint=endpoint)
        logger.info("no injected provider, falling back to %s", endpoint)

    state.provider = handle
    return handle


__all__ = [
    "EnvironmentHost",
    "Host",
    "INJECTED",
    "LOCAL",
    "NoInjectedHost",
    "ProviderHandle",
    "StaticHost",
    "resolve_provider",
]
