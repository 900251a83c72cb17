"""Shared CLI plumbing: client construction, gas and lease options."""

from __future__ import annotations

import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator, Optional

import click

from ..client import Client
from ..config import load_options
from ..errors import BluzelleError
from ..spec.models import GasInfo, LeaseInfo


def fail(message: str) -> None:
    click.secho(f"ERROR: {message}", fg="red")
    sys.exit(1)


@contextmanager
def client_session(ctx: click.Context) -> Iterator[Client]:
    """Open a Client from the group's config; ledger errors exit with status 1."""
    env_file: Optional[Path] = (ctx.obj or {}).get("env_file")
    try:
        options = load_options(env_file, endpoint=(ctx.obj or {}).get("endpoint"))
        with Client(options) as client:
            yield client
    except BluzelleError as exc:
        fail(str(exc))


def gas_options(func: Callable) -> Callable:
    """--max-gas / --max-fee / --gas-price, collected into ``gas_info``."""
    func = click.option("--gas-price", type=int, default=0, help="Fee per unit of gas")(func)
    func = click.option("--max-fee", type=int, default=0, help="Fixed fee (wins over --gas-price)")(func)
    func = click.option("--max-gas", type=int, default=0, help="Upper bound on gas")(func)
    return func


def lease_options(func: Callable) -> Callable:
    func = click.option("--lease-seconds", type=int, default=0, help="Lease seconds")(func)
    func = click.option("--lease-minutes", type=int, default=0, help="Lease minutes")(func)
    func = click.option("--lease-hours", type=int, default=0, help="Lease hours")(func)
    func = click.option("--lease-days", type=int, default=0, help="Lease days")(func)
    return func


def gas_info_from(max_gas: int, max_fee: int, gas_price: int) -> Optional[GasInfo]:
    """None when no flag is given, so the configured default applies."""
    if not (max_gas or max_fee or gas_price):
        return None
    return GasInfo(max_gas=max_gas, max_fee=max_fee, gas_price=gas_price)


def lease_from(days: int, hours: int, minutes: int, seconds: int) -> Optional[LeaseInfo]:
    if not (days or hours or minutes or seconds):
        return None
    return LeaseInfo(days=days, hours=hours, minutes=minutes, seconds=seconds)
