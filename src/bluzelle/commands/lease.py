"""Lease commands."""

from __future__ import annotations

import click

from .common import client_session, fail, gas_info_from, gas_options, lease_from, lease_options


@click.command()
@click.argument("key")
@click.option("--tx", "use_tx", is_flag=True, help="Query through a signed transaction")
@gas_options
@click.pass_context
def lease(ctx: click.Context, key: str, use_tx: bool, max_gas: int, max_fee: int, gas_price: int) -> None:
    """Show the remaining lease of KEY in seconds."""
    with client_session(ctx) as client:
        if use_tx:
            seconds = client.tx_get_lease(key, gas_info=gas_info_from(max_gas, max_fee, gas_price))
        else:
            seconds = client.get_lease(key)
    click.echo(f"lease({seconds})")


@click.command("renew-lease")
@click.argument("key")
@lease_options
@gas_options
@click.pass_context
def renew_lease(
    ctx: click.Context,
    key: str,
    lease_days: int,
    lease_hours: int,
    lease_minutes: int,
    lease_seconds: int,
    max_gas: int,
    max_fee: int,
    gas_price: int,
) -> None:
    """Renew the lease of KEY."""
    new_lease = lease_from(lease_days, lease_hours, lease_minutes, lease_seconds)
    if new_lease is None:
        fail("a lease is required (--lease-days/--lease-hours/--lease-minutes/--lease-seconds)")
    with client_session(ctx) as client:
        client.renew_lease(key, new_lease, gas_info=gas_info_from(max_gas, max_fee, gas_price))
    click.secho("renewed lease", fg="green")


@click.command("shortest-leases")
@click.argument("n", type=int)
@click.pass_context
def shortest_leases(ctx: click.Context, n: int) -> None:
    """List the N keys whose leases expire first."""
    with client_session(ctx) as client:
        leases = client.get_n_shortest_leases(n)
    for kl in leases:
        click.echo(f"{kl.key} {kl.lease}")
