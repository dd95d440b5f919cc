"""Settings loading from the environment and an optional .env file."""

import math
import os
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping, Optional

import eth_utils
from dotenv import dotenv_values

from .errors import ConfigMissing
from .multicall import MULTICALL3_ADDRESS
from .transport import DEFAULT_TIMEOUT

RPC_URL_ENV = "MAINNET_RPC_URL"
LOG_LEVEL_ENV = "W3BATCH_LOG_LEVEL"
TIMEOUT_ENV = "W3BATCH_RPC_TIMEOUT"

DEFAULT_CONTRACTS: Mapping[str, str] = MappingProxyType(
    {
        "aggregator": MULTICALL3_ADDRESS,
        "token": "0x6B175474E89094C44Da98b954EedeAC495271d0F",  # DAI
        "holder": "0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045",  # vitalik.eth
    }
)


@dataclass(frozen=True)
class Settings:
    rpc_url: str
    contracts: Mapping[str, str] = field(default_factory=lambda: DEFAULT_CONTRACTS)
    log_level: str = "INFO"
    timeout: float = DEFAULT_TIMEOUT


def contract_table(overrides: Optional[Mapping[str, str]] = None) -> Mapping[str, str]:
    """Build the read-only address table.

    Args:
        overrides: Logical name to address entries replacing or extending the defaults.

    Returns:
        Read-only mapping of logical name to checksummed address.

    Raises:
        ConfigMissing: If an address is malformed.
    """
    table: Dict[str, str] = dict(DEFAULT_CONTRACTS)
    if overrides:
        table.update(overrides)
    for name, address in table.items():
        try:
            table[name] = eth_utils.to_checksum_address(address)
        except (ValueError, TypeError) as e:
            raise ConfigMissing(
                f"Invalid address for '{name}': {address!r}",
                ConfigMissing.ERR_INVALID_ADDRESS,
                hint="Address must be a 0x-prefixed hex string of 40 characters",
            ) from e
    return MappingProxyType(table)


def load_settings(
    env_file: Optional[str] = ".env",
    environ: Optional[Mapping[str, str]] = None,
    contracts: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Load settings; process environment values win over the .env file.

    Args:
        env_file: Optional key-value file, skipped when absent.
        environ: Environment to read, defaults to os.environ.
        contracts: Optional contract table overrides.

    Raises:
        ConfigMissing: If the RPC URL is absent or a value is unusable.
    """
    values: Dict[str, Optional[str]] = {}
    if env_file and os.path.exists(env_file):
        values.update(dotenv_values(env_file))
    values.update(os.environ if environ is None else environ)

    rpc_url = (values.get(RPC_URL_ENV) or "").strip()
    if not rpc_url:
        raise ConfigMissing(
            f"{RPC_URL_ENV} is required",
            ConfigMissing.ERR_MISSING_VALUE,
            hint=f"Export {RPC_URL_ENV} or add it to a .env file",
        )

    raw_timeout = values.get(TIMEOUT_ENV)
    try:
        timeout = float(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT
    except ValueError as e:
        raise ConfigMissing(
            f"{TIMEOUT_ENV} must be a number of seconds, got {raw_timeout!r}",
            ConfigMissing.ERR_INVALID_VALUE,
            hint="Use a positive number such as 10",
        ) from e
    if not (math.isfinite(timeout) and timeout > 0):
        raise ConfigMissing(
            f"{TIMEOUT_ENV} must be a positive number of seconds, got {raw_timeout!r}",
            ConfigMissing.ERR_INVALID_VALUE,
            hint="Use a positive number such as 10",
        )

    return Settings(
        rpc_url=rpc_url,
        contracts=contract_table(contracts),
        log_level=(values.get(LOG_LEVEL_ENV) or "INFO").upper(),
        timeout=timeout,
    )
