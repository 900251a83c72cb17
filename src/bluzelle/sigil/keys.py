"""
secp256k1 Key Management for the Bluzelle client.

The client holds exactly one signing key, loaded from a hex private key
or derived from a BIP-39 mnemonic along the Cosmos HD path.

Keys are read from ~/.bluzelle/.env (BLUZELLE_PRIVATE_KEY or
BLUZELLE_MNEMONIC) or from the process environment.

Dependencies: eth-account / eth-keys (secp256k1 without a full node stack)
"""

from __future__ import annotations

import os
import secrets
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv, set_key
from eth_account import Account
from eth_keys import keys

from ..errors import ConfigError, SigningError

# Default config directory
BLUZELLE_DIR = Path.home() / ".bluzelle"
BLUZELLE_ENV = BLUZELLE_DIR / ".env"

COSMOS_HD_PATH = "m/44'/118'/0'/0/0"


def generate_private_key() -> str:
    """Generate a new secp256k1 private key as 0x-prefixed hex."""
    return "0x" + secrets.token_hex(32)


def save_private_key(private_key: str, env_path: Optional[Path] = None) -> Path:
    """
    Write BLUZELLE_PRIVATE_KEY into a .env file, keeping its other entries.

    Args:
        private_key: 0x-prefixed hex private key
        env_path: Path to .env file (default: ~/.bluzelle/.env)

    Returns:
        Path to the saved .env file
    """
    env_path = env_path or BLUZELLE_ENV
    env_path.parent.mkdir(parents=True, exist_ok=True)
    env_path.touch(mode=0o600, exist_ok=True)
    set_key(env_path, "BLUZELLE_PRIVATE_KEY", private_key, quote_mode="never")

    if os.name != "nt":
        env_path.chmod(0o600)

    return env_path


def private_key_from_mnemonic(mnemonic: str) -> str:
    """Derive the account key for ``mnemonic`` on the Cosmos HD path."""
    Account.enable_unaudited_hdwallet_features()
    try:
        account = Account.from_mnemonic(mnemonic.strip(), account_path=COSMOS_HD_PATH)
    except Exception as exc:
        raise ConfigError(f"Invalid mnemonic: {exc}") from exc
    return "0x" + bytes(account.key).hex()


def load_private_key(env_path: Optional[Path] = None) -> str:
    """
    Load private key from .env file or environment.

    BLUZELLE_PRIVATE_KEY wins over BLUZELLE_MNEMONIC when both are set.

    Raises:
        ConfigError: If neither is configured
    """
    env_path = env_path or BLUZELLE_ENV

    if env_path.exists():
        load_dotenv(env_path, override=False)

    private_key = os.environ.get("BLUZELLE_PRIVATE_KEY")
    if not private_key:
        mnemonic = os.environ.get("BLUZELLE_MNEMONIC")
        if mnemonic:
            return private_key_from_mnemonic(mnemonic)
        raise ConfigError(
            f"BLUZELLE_PRIVATE_KEY not found. Set BLUZELLE_PRIVATE_KEY or "
            f"BLUZELLE_MNEMONIC in {env_path} or the environment."
        )

    # Ensure 0x prefix
    if not private_key.startswith("0x"):
        private_key = "0x" + private_key

    return private_key


def get_signing_key(private_key: str) -> keys.PrivateKey:
    """
    Parse a hex private key into an eth-keys PrivateKey.

    Raises:
        SigningError: If the key is not a valid 32-byte secp256k1 scalar
    """
    try:
        raw = bytes.fromhex(private_key.removeprefix("0x"))
        return keys.PrivateKey(raw)
    except Exception as exc:
        raise SigningError(f"Unusable private key: {exc}") from exc


def compressed_public_key(signing_key: keys.PrivateKey) -> bytes:
    """33-byte SEC1 compressed public key."""
    return signing_key.public_key.to_compressed_bytes()
