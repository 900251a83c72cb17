"""Identity and node commands."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click
from dotenv import dotenv_values

from ..config import load_options
from ..errors import BluzelleError
from ..sigil.keys import (
    BLUZELLE_ENV,
    compressed_public_key,
    generate_private_key,
    get_signing_key,
    save_private_key,
)
from ..utils import base64_encode
from .common import client_session, fail


@click.command()
@click.pass_context
def whoami(ctx: click.Context) -> None:
    """Show the configured address and public key."""
    env_file: Optional[Path] = (ctx.obj or {}).get("env_file")
    try:
        options = load_options(env_file)
        public_key = compressed_public_key(get_signing_key(options.private_key))
    except BluzelleError as exc:
        fail(str(exc))
        return
    click.echo(f"Address:    {options.address}")
    click.echo(f"Public key: {base64_encode(public_key)}")
    click.echo(f"Chain:      {options.chain_id}")
    click.echo(f"UUID:       {options.uuid}")


@click.command()
@click.pass_context
def account(ctx: click.Context) -> None:
    """Show the ledger's account number and sequence."""
    with client_session(ctx) as client:
        state = client.account()
    click.echo(f"Address:        {state.address}")
    click.echo(f"Account number: {state.account_number}")
    click.echo(f"Sequence:       {state.sequence}")


@click.command()
@click.pass_context
def version(ctx: click.Context) -> None:
    """Show the node's application version."""
    with client_session(ctx) as client:
        click.echo(client.version())


@click.command()
@click.option("--force", is_flag=True, help="Replace an existing key")
@click.pass_context
def keygen(ctx: click.Context, force: bool) -> None:
    """Generate a signing key and store it in the .env file."""
    env_path: Path = (ctx.obj or {}).get("env_file") or BLUZELLE_ENV
    if env_path.exists() and dotenv_values(env_path).get("BLUZELLE_PRIVATE_KEY") and not force:
        fail(f"{env_path} already has BLUZELLE_PRIVATE_KEY (use --force to replace it)")

    private_key = generate_private_key()
    save_private_key(private_key, env_path)
    public_key = compressed_public_key(get_signing_key(private_key))
    click.secho(f"saved key to {env_path}", fg="green")
    click.echo(f"Public key: {base64_encode(public_key)}")
    click.echo("Set BLUZELLE_ADDRESS to the account address for this key.")
