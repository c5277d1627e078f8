"""
Bootstrap pipeline - provider, then contract, then deployed instance.

Stages run strictly in order and each hands its result to the next:

    resolve_provider -> load_contract -> render

A stage failure ends the run.  ``bootstrap`` turns it into a failed
``BootstrapResult`` instead of letting it escape, and never retries.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..contracts.artifact import ArtifactSource, fetch_artifact
from ..contracts.factory import ContractFactory, DeployedInstance, bind
from ..errors import (
    ArtifactFetchError,
    BootstrapError,
    InstanceResolutionError,
    ProviderUnavailableError,
)
from ..provider.resolver import Host, resolve_provider
from ..provider.rpc import DEFAULT_RPC_URL
from .state import ApplicationState
from .view import LoadingView

logger = logging.getLogger(__name__)

DEFAULT_CONTRACT = "BottleCoin"

STAGE_PROVIDER = "provider"
STAGE_ARTIFACT = "artifact"
STAGE_INSTANCE = "instance"
STAGE_DONE = "done"


@dataclass(frozen=True)
class BootstrapResult:
    """
    Outcome of one pipeline run.

    Attributes:
        ok: True when every stage completed
        stage: Stage the run stopped in (``"done"`` on success)
        instance: Resolved deployed instance on success
        error: The terminal error on failure
    """
    ok: bool
    stage: str
    instance: Optional[DeployedInstance] = None
    error: Optional[BootstrapError] = None


async def load_contract(
    state: ApplicationState,
    source: ArtifactSource,
    name: str = DEFAULT_CONTRACT,
) -> ContractFactory:
    """
    Fetch the named artifact, bind it to the session provider and register it.

    Raises:
        ProviderUnavailableError: If no provider has been resolved yet
        ArtifactFetchError: If the artifact cannot be fetched or parsed
    """
    if state.provider is None:
        raise ProviderUnavailableError(
            f"Cannot load {name}: provider must be resolved before fetching artifacts"
        )

    try:
        artifact = await fetch_artifact(source, name)
    except ArtifactFetchError:
        raise
    except Exception as exc:
        raise ArtifactFetchError(f"Failed to fetch artifact {name}: {exc}") from exc

    factory = bind(artifact, state.provider)
    state.register_contract(name, factory)
    logger.info("loaded %s (%d ABI entries)", name, len(artifact.abi))
    return factory


async def render(
    state: ApplicationState,
    name: str,
    view: LoadingView,
) -> DeployedInstance:
    """
    Resolve the deployed instance while the view shows the loader.

    The view only becomes ready once resolution has completed.

    Raises:
        InstanceResolutionError: If no deployed instance can be resolved; the
            view is left in its error state
    """
    view.enter_loading()
    factory = state.contract(name)
    try:
        instance = await factory.deployed()
    except InstanceResolutionError as exc:
        view.enter_error(exc)
        raise

    view.enter_ready()
    logger.info("%s resolved at %s (network %s)", name, instance.address, instance.network_id)
    return instance


async def bootstrap(
    state: ApplicationState,
    host: Host,
    source: ArtifactSource,
    view: LoadingView,
    name: str = DEFAULT_CONTRACT,
    endpoint: str = DEFAULT_RPC_URL,
    account: Optional[str] = None,
) -> BootstrapResult:
    """Run the whole pipeline once for ``name``."""
    if account:
        state.account = account

    stage = STAGE_PROVIDER
    try:
        resolve_provider(state, host, endpoint=endpoint)

        stage = STAGE_ARTIFACT
        await load_contract(state, source, name)

        stage = STAGE_INSTANCE
        instance = await render(state, name, view)
    except BootstrapError as exc:
        logger.error("bootstrap of %s failed in %s stage: %s", name, stage, exc)
        return BootstrapResult(ok=False, stage=exc.stage, error=exc)

    return BootstrapResult(ok=True, stage=STAGE_DONE, instance=instance)


__all__ = [
    "BootstrapResult",
    "DEFAULT_CONTRACT",
    "bootstrap",
    "load_contract",
    "render",
]
