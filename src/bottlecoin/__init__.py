"""
BottleCoin - connect to a node and load the BottleCoin contract client.

Resolves a provider (injected or local), fetches the contract artifact,
binds it and resolves the deployed instance.
"""
__all__ = [
    # Pipeline
    "ApplicationState",
    "BootstrapResult",
    "bootstrap",
    "load_contract",
    "render",
    # Provider
    "EnvironmentHost",
    "HttpProvider",
    "NoInjectedHost",
    "ProviderHandle",
    "StaticHost",
    "resolve_provider",
    # Contracts
    "ContractArtifact",
    "ContractFactory",
    "DeployedInstance",
    "HttpArtifactSource",
    "LocalDirArtifactSource",
    # View
    "LoadingView",
    "RecordingSignals",
    "ViewState",
    # Errors
    "ArtifactFetchError",
    "BootstrapError",
    "InstanceResolutionError",
    "ProviderUnavailableError",
    "RpcError",
]

from .errors import (
    ArtifactFetchError,
    BootstrapError,
    InstanceResolutionError,
    ProviderUnavailableError,
    RpcError,
)
from .provider.rpc import HttpProvider
from .provider.resolver import (
    EnvironmentHost,
    NoInjectedHost,
    ProviderHandle,
    StaticHost,
    resolve_provider,
)
from .contracts.artifact import ContractArtifact, HttpArtifactSource, LocalDirArtifactSource
from .contracts.factory import ContractFactory, DeployedInstance
from .app.state import ApplicationState
from .app.view import LoadingView, RecordingSignals, ViewState
from .app.pipeline import BootstrapResult, bootstrap, load_contract, render
