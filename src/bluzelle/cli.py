"""
Bluzelle CLI

Command-line interface for the Bluzelle key-value ledger client.

Configuration comes from ~/.bluzelle/.env (or --env-file) and the
environment: BLUZELLE_ENDPOINT, BLUZELLE_CHAIN_ID, BLUZELLE_ADDRESS,
BLUZELLE_PRIVATE_KEY or BLUZELLE_MNEMONIC, BLUZELLE_UUID and the default
gas policy BLUZELLE_MAX_GAS / BLUZELLE_MAX_FEE / BLUZELLE_GAS_PRICE.

Commands:
  whoami        - Show the configured signer
  keygen        - Generate a signing key into the .env file
  account       - Show account number and sequence on the ledger
  version       - Show the node's application version
  create        - Create a key
  update        - Update a key
  delete        - Delete a key
  rename        - Rename a key
  read          - Read a key (query, or --tx)
  has           - Check a key exists (query, or --tx)
  keys          - List keys (query, or --tx)
  keyvalues     - List key/value pairs (query, or --tx)
  count         - Count keys (query, or --tx)
  lease         - Remaining lease of a key (query, or --tx)
  renew-lease   - Renew the lease of a key
  shortest-leases - Keys whose leases expire first
  delete-all    - Delete every key
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from .logging_config import setup_logging

# ============ Constants ============

VERSION = "0.1.0"


# ============ Main CLI Group ============


@click.group()
@click.version_option(version=VERSION, prog_name="bluzelle")
@click.option(
    "--env-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config .env file (default: ~/.bluzelle/.env)",
)
@click.option("--endpoint", envvar="BLUZELLE_ENDPOINT", default=None, help="Ledger REST endpoint")
@click.option("--log-level", default=None, help="Log level (default: $LOG_LEVEL or INFO)")
@click.pass_context
def cli(ctx: click.Context, env_file: Optional[Path], endpoint: Optional[str], log_level: Optional[str]) -> None:
    """Bluzelle: signed CRUD over a ledger REST interface."""
    setup_logging(log_level)
    ctx.ensure_object(dict)
    ctx.obj["env_file"] = env_file
    ctx.obj["endpoint"] = endpoint


# ============ Commands ============

from .commands.account import account, keygen, version, whoami
from .commands.crud import count, create, delete, delete_all, has, keys, keyvalues, read, rename, update
from .commands.lease import lease, renew_lease, shortest_leases

cli.add_command(whoami)
cli.add_command(keygen)
cli.add_command(account)
cli.add_command(version)
cli.add_command(create)
cli.add_command(update)
cli.add_command(delete)
cli.add_command(rename)
cli.add_command(read)
cli.add_command(has)
cli.add_command(keys)
cli.add_command(keyvalues)
cli.add_command(count)
cli.add_command(lease)
cli.add_command(renew_lease)
cli.add_command(shortest_leases)
cli.add_command(delete_all)


# ============ Entry Points ============


def main() -> None:
    """Bluzelle CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
