"""
CRUD commands.

Every write goes through the client's transaction worker; reads default to
the unsigned query path and switch to a signed transaction with --tx.
"""

from __future__ import annotations

import click

from .common import client_session, gas_info_from, gas_options, lease_from, lease_options


@click.command()
@click.argument("key")
@click.argument("value")
@lease_options
@gas_options
@click.pass_context
def create(
    ctx: click.Context,
    key: str,
    value: str,
    lease_days: int,
    lease_hours: int,
    lease_minutes: int,
    lease_seconds: int,
    max_gas: int,
    max_fee: int,
    gas_price: int,
) -> None:
    """Create KEY with VALUE."""
    lease = lease_from(lease_days, lease_hours, lease_minutes, lease_seconds)
    with client_session(ctx) as client:
        click.echo(f"creating key({key})...")
        client.create(key, value, lease=lease, gas_info=gas_info_from(max_gas, max_fee, gas_price))
    click.secho("created key", fg="green")


@click.command()
@click.argument("key")
@click.argument("value")
@lease_options
@gas_options
@click.pass_context
def update(
    ctx: click.Context,
    key: str,
    value: str,
    lease_days: int,
    lease_hours: int,
    lease_minutes: int,
    lease_seconds: int,
    max_gas: int,
    max_fee: int,
    gas_price: int,
) -> None:
    """Update KEY to VALUE."""
    lease = lease_from(lease_days, lease_hours, lease_minutes, lease_seconds)
    with client_session(ctx) as client:
        click.echo(f"updating key({key})...")
        client.update(key, value, lease=lease, gas_info=gas_info_from(max_gas, max_fee, gas_price))
    click.secho("updated key", fg="green")


@click.command()
@click.argument("key")
@gas_options
@click.pass_context
def delete(ctx: click.Context, key: str, max_gas: int, max_fee: int, gas_price: int) -> None:
    """Delete KEY."""
    with client_session(ctx) as client:
        click.echo(f"deleting key({key})...")
        client.delete(key, gas_info=gas_info_from(max_gas, max_fee, gas_price))
    click.secho("deleted key", fg="green")


@click.command()
@click.argument("key")
@click.argument("new_key")
@gas_options
@click.pass_context
def rename(ctx: click.Context, key: str, new_key: str, max_gas: int, max_fee: int, gas_price: int) -> None:
    """Rename KEY to NEW_KEY."""
    with client_session(ctx) as client:
        click.echo(f"renaming key({key}) to {new_key}...")
        client.rename(key, new_key, gas_info=gas_info_from(max_gas, max_fee, gas_price))
    click.secho("renamed key", fg="green")


@click.command("delete-all")
@gas_options
@click.confirmation_option(prompt="Delete every key in this UUID?")
@click.pass_context
def delete_all(ctx: click.Context, max_gas: int, max_fee: int, gas_price: int) -> None:
    """Delete every key."""
    with client_session(ctx) as client:
        client.delete_all(gas_info=gas_info_from(max_gas, max_fee, gas_price))
    click.secho("deleted all keys", fg="green")


@click.command()
@click.argument("key")
@click.option("--tx", "use_tx", is_flag=True, help="Read through a signed transaction")
@gas_options
@click.pass_context
def read(ctx: click.Context, key: str, use_tx: bool, max_gas: int, max_fee: int, gas_price: int) -> None:
    """Read the value of KEY."""
    with client_session(ctx) as client:
        if use_tx:
            value = client.tx_read(key, gas_info=gas_info_from(max_gas, max_fee, gas_price))
        else:
            value = client.read(key)
    click.echo(value)


@click.command()
@click.argument("key")
@click.option("--tx", "use_tx", is_flag=True, help="Check through a signed transaction")
@gas_options
@click.pass_context
def has(ctx: click.Context, key: str, use_tx: bool, max_gas: int, max_fee: int, gas_price: int) -> None:
    """Check whether KEY exists."""
    with client_session(ctx) as client:
        if use_tx:
            exists = client.tx_has(key, gas_info=gas_info_from(max_gas, max_fee, gas_price))
        else:
            exists = client.has(key)
    click.echo(f"key({key}) exist status: {str(exists).lower()}")


@click.command()
@click.option("--tx", "use_tx", is_flag=True, help="List through a signed transaction")
@gas_options
@click.pass_context
def keys(ctx: click.Context, use_tx: bool, max_gas: int, max_fee: int, gas_price: int) -> None:
    """List keys."""
    with client_session(ctx) as client:
        if use_tx:
            names = client.tx_keys(gas_info=gas_info_from(max_gas, max_fee, gas_price))
        else:
            names = client.keys()
    for name in names:
        click.echo(name)


@click.command()
@click.option("--tx", "use_tx", is_flag=True, help="List through a signed transaction")
@gas_options
@click.pass_context
def keyvalues(ctx: click.Context, use_tx: bool, max_gas: int, max_fee: int, gas_price: int) -> None:
    """List key/value pairs."""
    with client_session(ctx) as client:
        if use_tx:
            pairs = client.tx_key_values(gas_info=gas_info_from(max_gas, max_fee, gas_price))
        else:
            pairs = client.key_values()
    for kv in pairs:
        click.echo(f"{kv.key}={kv.value}")


@click.command()
@click.option("--tx", "use_tx", is_flag=True, help="Count through a signed transaction")
@gas_options
@click.pass_context
def count(ctx: click.Context, use_tx: bool, max_gas: int, max_fee: int, gas_price: int) -> None:
    """Count keys."""
    with client_session(ctx) as client:
        if use_tx:
            total = client.tx_count(gas_info=gas_info_from(max_gas, max_fee, gas_price))
        else:
            total = client.count()
    click.echo(str(total))
