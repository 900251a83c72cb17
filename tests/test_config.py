"""Configuration loading from .env files, the environment, and overrides."""

from __future__ import annotations

import re

import pytest

from bluzelle.config import DEFAULT_CHAIN_ID, DEFAULT_ENDPOINT, ClientOptions, load_gas_info, load_options
from bluzelle.errors import ConfigError
from bluzelle.sigil.keys import private_key_from_mnemonic
from bluzelle.spec.models import GasInfo

from conftest import TEST_ADDRESS, TEST_PRIVATE_KEY

TEST_MNEMONIC = (
    "abandon abandon abandon abandon abandon abandon "
    "abandon abandon abandon abandon abandon about"
)


@pytest.fixture()
def env_file(tmp_path):
    path = tmp_path / ".env"
    path.write_text(
        f"BLUZELLE_ADDRESS={TEST_ADDRESS}\nBLUZELLE_PRIVATE_KEY={TEST_PRIVATE_KEY}\n",
        encoding="utf-8",
    )
    return path


def test_load_from_env_file(env_file) -> None:
    options = load_options(env_file)
    assert options.address == TEST_ADDRESS
    assert options.private_key == TEST_PRIVATE_KEY
    assert options.endpoint == DEFAULT_ENDPOINT
    assert options.chain_id == DEFAULT_CHAIN_ID
    assert options.uuid == TEST_ADDRESS
    assert options.gas_info is None
    assert options.timeout == 30.0


def test_environment_wins_over_env_file(env_file, monkeypatch) -> None:
    monkeypatch.setenv("BLUZELLE_ADDRESS", "bluzelle1other")
    monkeypatch.setenv("BLUZELLE_UUID", "shared")
    options = load_options(env_file)
    assert options.address == "bluzelle1other"
    assert options.uuid == "shared"


def test_overrides_win_and_none_is_ignored(env_file, monkeypatch) -> None:
    monkeypatch.setenv("BLUZELLE_ENDPOINT", "http://env:1317")
    options = load_options(env_file, endpoint="http://override:1317", chain_id=None)
    assert options.endpoint == "http://override:1317"
    assert options.chain_id == DEFAULT_CHAIN_ID


def test_key_without_prefix_is_normalized(tmp_path) -> None:
    path = tmp_path / ".env"
    path.write_text(
        f"BLUZELLE_ADDRESS={TEST_ADDRESS}\nBLUZELLE_PRIVATE_KEY={TEST_PRIVATE_KEY[2:]}\n",
        encoding="utf-8",
    )
    assert load_options(path).private_key == TEST_PRIVATE_KEY


def test_missing_address(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("BLUZELLE_PRIVATE_KEY", TEST_PRIVATE_KEY)
    with pytest.raises(ConfigError, match="BLUZELLE_ADDRESS"):
        load_options(tmp_path / "missing.env")


def test_missing_key(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("BLUZELLE_ADDRESS", TEST_ADDRESS)
    with pytest.raises(ConfigError, match="BLUZELLE_PRIVATE_KEY"):
        load_options(tmp_path / "missing.env")


def test_mnemonic_is_used_without_private_key(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("BLUZELLE_ADDRESS", TEST_ADDRESS)
    monkeypatch.setenv("BLUZELLE_MNEMONIC", TEST_MNEMONIC)
    options = load_options(tmp_path / "missing.env")
    assert options.private_key == private_key_from_mnemonic(TEST_MNEMONIC)


def test_mnemonic_derivation_is_stable() -> None:
    first = private_key_from_mnemonic(TEST_MNEMONIC)
    assert re.fullmatch(r"0x[0-9a-f]{64}", first)
    assert private_key_from_mnemonic(f"  {TEST_MNEMONIC}\n") == first


def test_invalid_mnemonic() -> None:
    with pytest.raises(ConfigError):
        private_key_from_mnemonic("not a real mnemonic")


def test_gas_info_from_environment(monkeypatch) -> None:
    assert load_gas_info() is None
    monkeypatch.setenv("BLUZELLE_MAX_GAS", "200000")
    monkeypatch.setenv("BLUZELLE_GAS_PRICE", "10")
    assert load_gas_info() == GasInfo(max_gas=200000, max_fee=0, gas_price=10)


@pytest.mark.parametrize(
    ("name", "raw"),
    [("BLUZELLE_MAX_FEE", "lots"), ("BLUZELLE_TIMEOUT", "soon")],
)
def test_malformed_numbers(env_file, monkeypatch, name, raw) -> None:
    monkeypatch.setenv(name, raw)
    with pytest.raises(ConfigError, match=name):
        load_options(env_file)


def test_options_require_address_and_key() -> None:
    with pytest.raises(ConfigError):
        ClientOptions(address="", private_key=TEST_PRIVATE_KEY)
    with pytest.raises(ConfigError):
        ClientOptions(address=TEST_ADDRESS, private_key="")


def test_private_key_not_in_repr() -> None:
    options = ClientOptions(address=TEST_ADDRESS, private_key=TEST_PRIVATE_KEY)
    assert TEST_PRIVATE_KEY not in repr(options)
