"""
Aura Chain Configuration Management

Provides the per-environment chain records (endpoints, address prefix, fee
denom, broadcast timing) and the environment-variable loaders used by the
command line. Library functions never read these globals; the CLI selects a
record once and passes it down.
"""

import os
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
import dotenv

from ...engine.exceptions import ConfigurationError

dotenv.load_dotenv()


class ChainConfig(BaseModel):
    """Aura network configuration."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Short name used to select this record")
    rest_endpoint: str = Field(..., description="Cosmos REST (LCD) endpoint used for transactions and queries")
    prefix: str = Field(default="aura", description="Bech32 human-readable address prefix")
    denom: str = Field(..., description="Fee denomination")
    chain_id: str = Field(..., description="Chain ID")
    gas_price: float = Field(default=0.025, ge=0, description="Minimum gas price in `denom`")
    broadcast_timeout_ms: int = Field(default=5000, gt=0, description="Time to wait for inclusion")
    broadcast_poll_interval_ms: int = Field(default=1000, gt=0, description="Inclusion polling interval")

    @property
    def broadcast_timeout(self) -> float:
        return self.broadcast_timeout_ms / 1000

    @property
    def broadcast_poll_interval(self) -> float:
        return self.broadcast_poll_interval_ms / 1000


_AURA_CHAINS_DATA: Dict[str, Dict] = {
    "local": {
        "rest_endpoint": "http://localhost:1317",
        "denom": "uaura",
        "chain_id": "local-aura",
        "broadcast_timeout_ms": 2000,
        "broadcast_poll_interval_ms": 500,
    },
    "local-docker": {
        "rest_endpoint": "http://dev-aurad:1317",
        "denom": "uaura",
        "chain_id": "local-aura",
        "broadcast_timeout_ms": 2000,
        "broadcast_poll_interval_ms": 500,
    },
    "serenity": {
        "rest_endpoint": "https://lcd.serenity.aura.network",
        "denom": "uaura",
        "chain_id": "serenity-testnet-001",
    },
    "aura-testnet": {
        "rest_endpoint": "https://lcd.dev.aura.network",
        "denom": "utaura",
        "chain_id": "aura-testnet",
    },
    "euphoria": {
        "rest_endpoint": "https://lcd.euphoria.aura.network",
        "denom": "ueaura",
        "chain_id": "euphoria-1",
    },
}

CHAINS: Dict[str, ChainConfig] = {
    name: ChainConfig(name=name, **data) for name, data in _AURA_CHAINS_DATA.items()
}

DEFAULT_CHAIN = "serenity"

#: Cosmos SLIP-44 coin type; every Aura account lives under this path.
COSMOS_HD_PATH_TEMPLATE = "m/44'/118'/0'/0/{index}"

DEFAULT_WASM_PATH = "target/wasm32-unknown-unknown/release/cw4973.wasm"


def get_chain_config(name: Optional[str] = None) -> ChainConfig:
    """
    Return the chain record called ``name``.

    Args:
        name: One of the keys of ``CHAINS``. ``None`` reads ``CHAIN_ID`` from
            the environment and falls back to ``DEFAULT_CHAIN``.

    Raises:
        ConfigurationError: If no record has that name.
    """
    name = name or get_chain_name_from_env() or DEFAULT_CHAIN
    try:
        return CHAINS[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown chain '{name}'. Supported chains: {', '.join(sorted(CHAINS))}"
        )


def get_chain_name_from_env() -> Optional[str]:
    """Chain record name from the ``CHAIN_ID`` environment variable."""
    return os.getenv("CHAIN_ID")


def get_mnemonic_from_env() -> Optional[str]:
    """
    Load the deployer (minter) mnemonic from ``MNEMONIC``.

    The mnemonic should be stored in an ``.env`` file or the environment and
    never committed to version control.
    """
    return os.getenv("MNEMONIC")


def get_tester_mnemonic_from_env() -> Optional[str]:
    """Load the tester (receiver) mnemonic from ``TESTER_MNEMONIC``."""
    return os.getenv("TESTER_MNEMONIC")
