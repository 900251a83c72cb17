"""
Client configuration.

Values come from keyword overrides first, then the process environment,
then ~/.bluzelle/.env (loaded with python-dotenv without overriding
variables that are already set).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from .errors import ConfigError
from .sigil.keys import BLUZELLE_ENV, load_private_key
from .spec.models import GasInfo

DEFAULT_ENDPOINT = "http://localhost:1317"
DEFAULT_CHAIN_ID = "bluzelle"
DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class ClientOptions:
    address: str
    private_key: str = field(repr=False)
    endpoint: str = DEFAULT_ENDPOINT
    chain_id: str = DEFAULT_CHAIN_ID
    uuid: str = ""
    gas_info: Optional[GasInfo] = None
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        if not self.address:
            raise ConfigError("address is required")
        if not self.private_key:
            raise ConfigError("private_key is required")
        if not self.uuid:
            object.__setattr__(self, "uuid", self.address)


def _env_int(name: str) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return 0
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from exc


def load_gas_info() -> Optional[GasInfo]:
    """Default gas policy from BLUZELLE_MAX_GAS / _MAX_FEE / _GAS_PRICE, if any is set."""
    gas_info = GasInfo(
        max_gas=_env_int("BLUZELLE_MAX_GAS"),
        max_fee=_env_int("BLUZELLE_MAX_FEE"),
        gas_price=_env_int("BLUZELLE_GAS_PRICE"),
    )
    if not (gas_info.max_gas or gas_info.max_fee or gas_info.gas_price):
        return None
    return gas_info


def load_options(env_path: Optional[Path] = None, **overrides: Any) -> ClientOptions:
    """
    Build ClientOptions from the environment.

    Args:
        env_path: .env file to load (default: ~/.bluzelle/.env)
        **overrides: ClientOptions fields that win over the environment

    Raises:
        ConfigError: If address or key is missing, or a number is malformed
    """
    env_path = env_path or BLUZELLE_ENV
    if env_path.exists():
        load_dotenv(env_path, override=False)

    values: dict[str, Any] = {
        "endpoint": os.environ.get("BLUZELLE_ENDPOINT", DEFAULT_ENDPOINT),
        "chain_id": os.environ.get("BLUZELLE_CHAIN_ID", DEFAULT_CHAIN_ID),
        "uuid": os.environ.get("BLUZELLE_UUID", ""),
        "address": os.environ.get("BLUZELLE_ADDRESS", ""),
        "gas_info": load_gas_info(),
        "timeout": _env_float("BLUZELLE_TIMEOUT", DEFAULT_TIMEOUT),
    }
    values.update({k: v for k, v in overrides.items() if v is not None})

    if "private_key" not in values:
        values["private_key"] = load_private_key(env_path)

    if not values["address"]:
        raise ConfigError(f"BLUZELLE_ADDRESS not found. Set it in {env_path} or the environment.")

    return ClientOptions(**values)
