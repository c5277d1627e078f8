from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from ..errors import ProviderUnavailableError

if TYPE_CHECKING:
    from ..contracts.factory import ContractFactory
    from ..provider.resolver import ProviderHandle

ZERO_ACCOUNT = "0x0"


@dataclass
class ApplicationState:
    """
    Per-session application record.

    Built once and handed to each pipeline stage.  Only the running pipeline
    writes to it.

    Attributes:
        provider: Resolved provider handle (set before any contract)
        contracts: Contract name -> bound factory, one entry per name
        account: Active account address, ``"0x0"`` until one is known
    """
    provider: Optional["ProviderHandle"] = None
    contracts: dict[str, "ContractFactory"] = field(default_factory=dict)
    account: str = ZERO_ACCOUNT

    def register_contract(self, name: str, factory: "ContractFactory") -> None:
        if self.provider is None:
            raise ProviderUnavailableError(
                f"Cannot register {name}: no provider has been resolved yet"
            )
        self.contracts[name] = factory

    def contract(self, name: str) -> "ContractFactory":
        try:
            return self.contracts[name]
        except KeyError:
            raise KeyError(f"Contract {name} has not been loaded") from None
