"""
Active account for the session.

The key is read from a ``.env`` file or the environment as PRIVATE_KEY (hex
format).  Without one the session keeps the ``"0x0"`` placeholder account.

Dependencies: eth-account (no full web3.py needed)
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_utils import ValidationError

from .app.state import ZERO_ACCOUNT

DEFAULT_ENV = Path(".env")


def load_private_key(env_path: Optional[Path] = None) -> str:
    """
    Load private key from .env file or environment.

    Args:
        env_path: Path to .env file (default: ./.env)

    Returns:
        0x-prefixed hex private key

    Raises:
        ValueError: If PRIVATE_KEY is not set
    """
    env_path = env_path or DEFAULT_ENV

    if env_path.exists():
        load_dotenv(env_path, override=True)

    private_key = os.environ.get("PRIVATE_KEY")
    if not private_key:
        raise ValueError(f"PRIVATE_KEY not found. Set PRIVATE_KEY in {env_path} or the environment.")

    # Ensure 0x prefix
    if not private_key.startswith("0x"):
        private_key = "0x" + private_key

    return private_key


def get_account(private_key: Optional[str] = None) -> LocalAccount:
    if private_key is None:
        private_key = load_private_key()
    return Account.from_key(private_key)


def get_address(private_key: Optional[str] = None) -> str:
    """0x-prefixed checksummed address for a private key."""
    return get_account(private_key).address


def resolve_account(private_key: Optional[str] = None, env_path: Optional[Path] = None) -> str:
    """
    Address of the configured account, or ``"0x0"`` when none is configured.

    Raises:
        ValueError: If a key is configured but is not a valid secp256k1 key
    """
    if private_key is None:
        try:
            private_key = load_private_key(env_path)
        except ValueError:
            return ZERO_ACCOUNT
    try:
        return get_address(private_key)
    except (ValueError, ValidationError) as exc:
        raise ValueError(f"Invalid PRIVATE_KEY: {exc}") from exc


__all__ = ["get_account", "get_address", "load_private_key", "resolve_account"]
