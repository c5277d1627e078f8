"""
BottleCoin CLI

Connects to a node, loads a contract artifact and resolves the deployed
instance, reporting each step.

Commands:
  boot  - Run the bootstrap pipeline
  info  - Show the resolved configuration
"""

from __future__ import annotations

import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import Optional

import click
import httpx

from .account import resolve_account
from .app.pipeline import DEFAULT_CONTRACT, bootstrap
from .app.state import ApplicationState
from .app.view import LoadingView, RecordingSignals
from .contracts.artifact import DEFAULT_ARTIFACTS_DIR, source_for
from .errors import ProviderUnavailableError, RpcError
from .provider.resolver import (
    INJECTED_PROVIDER_ENV,
    EnvironmentHost,
    NoInjectedHost,
    resolve_provider,
)
from .provider.rpc import DEFAULT_RPC_URL, Provider, get_accounts, get_chain_id, get_rpc_url


# ============ Constants ============

VERSION = "0.1.0"


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _load_account(env_file: Optional[Path]) -> str:
    try:
        return resolve_account(env_path=env_file)
    except ValueError as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        sys.exit(1)


# ============ Main CLI Group ============


@click.group(invoke_without_command=True)
@click.version_option(version=VERSION, prog_name="bottlecoin")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """BottleCoin - contract bootstrap for a local or injected node."""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


_rpc_option = click.option(
    "--rpc-url",
    default=get_rpc_url,
    show_default=f"$BOTTLECOIN_RPC_URL or {DEFAULT_RPC_URL}",
    help="Fallback RPC URL when no provider is injected",
)
_artifacts_option = click.option(
    "--artifacts",
    envvar="BOTTLECOIN_ARTIFACTS",
    default=DEFAULT_ARTIFACTS_DIR,
    show_default=True,
    help="Artifact directory or base URL",
)
_injected_option = click.option(
    "--injected/--no-injected",
    default=True,
    help=f"Use the provider injected through {INJECTED_PROVIDER_ENV}",
)
_env_file_option = click.option(
    "--env-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to a .env file holding PRIVATE_KEY",
)


@cli.command()
@click.option("--contract", "contract_name", default=DEFAULT_CONTRACT, show_default=True, help="Contract to load")
@_rpc_option
@_artifacts_option
@_injected_option
@_env_file_option
@click.option("-v", "--verbose", is_flag=True, help="Debug logging")
def boot(
    contract_name: str,
    rpc_url: str,
    artifacts: str,
    injected: bool,
    env_file: Optional[Path],
    verbose: bool,
) -> None:
    """
    Resolve a provider, load the contract and find its deployment.

    Exits non-zero when any stage fails: 2 for the provider, 3 for the
    artifact, 4 for the deployed instance.
    """
    _configure_logging(verbose)

    click.echo("=== BottleCoin Boot ===")
    click.echo("")

    state = ApplicationState()
    signals = RecordingSignals()
    view = LoadingView(signals)
    host = EnvironmentHost() if injected else NoInjectedHost()
    account = _load_account(env_file)

    result = asyncio.run(
        bootstrap(
            state,
            host,
            source_for(artifacts),
            view,
            name=contract_name,
            endpoint=rpc_url,
            account=account,
        )
    )

    if state.provider is not None:
        endpoint = state.provider.endpoint or "(unknown endpoint)"
        click.echo(f"  Provider:  {state.provider.source} {endpoint}")
    click.echo(f"  Account:   {state.account}")
    click.echo(f"  Contract:  {contract_name}")
    click.echo(f"  View:      {view.state.value}")
    click.echo("")

    if not result.ok:
        click.secho(f"FAILED ({result.stage}): {result.error}", fg="red")
        errors = getattr(result.error, "errors", None)
        for line in errors or []:
            click.echo(f"  - {line}")
        sys.exit(result.error.exit_code if result.error else 1)

    instance = result.instance
    click.secho("SUCCESS: Contract instance resolved", fg="green")
    click.echo(f"  Address:   {instance.address}")
    click.echo(f"  Network:   {instance.network_id}")


async def _node_status(provider: Provider) -> tuple[int, list[str]]:
    """Chain id and unlocked accounts of a reachable node."""
    return await get_chain_id(provider), await get_accounts(provider)


@cli.command()
@_rpc_option
@_artifacts_option
@_env_file_option
def info(rpc_url: str, artifacts: str, env_file: Optional[Path]) -> None:
    """Show the resolved configuration and the node it points at."""
    injected_uri = os.environ.get(INJECTED_PROVIDER_ENV)

    click.echo(f"BottleCoin v{VERSION}")
    click.echo("")
    click.echo(f"  Fallback RPC:    {rpc_url}")
    click.echo(f"  Injected RPC:    {injected_uri or '(none)'}")
    click.echo(f"  Artifacts:       {artifacts}")
    click.echo(f"  Account:         {_load_account(env_file)}")

    try:
        handle = resolve_provider(ApplicationState(), EnvironmentHost(), endpoint=rpc_url)
    except ProviderUnavailableError as exc:
        click.secho(f"  Node:            {exc}", fg="red")
        return

    try:
        chain_id, accounts = asyncio.run(_node_status(handle.provider))
    except (httpx.HTTPError, RpcError, ValueError) as exc:
        click.secho(f"  Node:            unreachable ({exc})", fg="yellow")
        return

    click.echo(f"  Node:            {handle.source} {handle.endpoint}")
    click.echo(f"  Chain ID:        {chain_id}")
    click.echo(f"  Node accounts:   {len(accounts)}")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
