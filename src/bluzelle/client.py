"""
Bluzelle Client - CRUD over the ledger's REST interface.

Transactional calls build a TransactionRecord and hand it to the
single-flight worker; query calls are plain GETs that never touch the
signer's account state and may run from any thread.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Iterable, Optional

from .config import ClientOptions
from .errors import DecodeError, InvalidArgumentError
from .ledger.account import fetch_account
from .ledger.broadcast import BROADCAST_RETRY_INTERVAL, BroadcastController
from .ledger.rest import RestTransport
from .ledger.worker import TransactionPipeline, TransactionWorker
from .sigil.keys import get_signing_key
from .spec.models import (
    AccountState,
    GasInfo,
    KeyLease,
    KeyValue,
    LeaseInfo,
    TransactionRecord,
    blocks_to_seconds,
)
from .spec.schemas import QUERY_RESPONSE, decode_response, load_json_bytes
from .utils import path_segment, to_int

logger = logging.getLogger(__name__)


def _validate_key(key: str) -> None:
    if not key:
        raise InvalidArgumentError("key is required")
    if "/" in key:
        raise InvalidArgumentError("key cannot contain a slash")


def _lease_blocks(lease: Optional[LeaseInfo]) -> int:
    if lease is None:
        return 0
    blocks = lease.to_blocks()
    if blocks < 0:
        raise InvalidArgumentError("invalid lease time")
    return blocks


def _int_field(payload: dict[str, Any], name: str) -> int:
    try:
        return to_int(payload.get(name, 0), name)
    except ValueError as exc:
        raise DecodeError(str(exc)) from exc


class Client:
    """One signing account, one worker thread."""

    def __init__(
        self,
        options: ClientOptions,
        transport: Optional[RestTransport] = None,
        retry_interval: float = BROADCAST_RETRY_INTERVAL,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.options = options
        self._signing_key = get_signing_key(options.private_key)
        self._owns_transport = transport is None
        self.transport = transport or RestTransport(options.endpoint, timeout=options.timeout)

        controller = BroadcastController(
            self.transport,
            self._signing_key,
            chain_id=options.chain_id,
            retry_interval=retry_interval,
            sleep=sleep,
        )
        self._pipeline = TransactionPipeline(
            self.transport,
            controller,
            address=options.address,
            chain_id=options.chain_id,
            uuid=options.uuid,
        )
        self._worker = TransactionWorker(self._pipeline)

    # ============ Lifecycle ============

    def close(self) -> None:
        self._worker.close()
        if self._owns_transport:
            self.transport.close()

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def address(self) -> str:
        return self.options.address

    @property
    def uuid(self) -> str:
        return self.options.uuid

    # ============ Transactions ============

    def submit(self, record: TransactionRecord) -> bytes:
        """Run ``record`` through the worker and block until it finishes."""
        return self._worker.submit(record)

    def _send(self, operation: str, endpoint: str, gas_info: Optional[GasInfo], **fields: Any) -> bytes:
        record = TransactionRecord(
            operation=operation,
            endpoint=endpoint,
            gas_info=gas_info or self.options.gas_info,
            **fields,
        )
        return self.submit(record)

    def _send_json(self, operation: str, endpoint: str, gas_info: Optional[GasInfo], **fields: Any) -> dict[str, Any]:
        body = self._send(operation, endpoint, gas_info, **fields)
        payload = load_json_bytes(body) if body else {}
        if not isinstance(payload, dict):
            raise DecodeError(f"{operation}: expected a JSON object, got {payload!r}")
        return payload

    def create(self, key: str, value: str, lease: Optional[LeaseInfo] = None, gas_info: Optional[GasInfo] = None) -> None:
        _validate_key(key)
        self._send("create", "/crud/create", gas_info, key=key, value=value, lease=_lease_blocks(lease))

    def update(self, key: str, value: str, lease: Optional[LeaseInfo] = None, gas_info: Optional[GasInfo] = None) -> None:
        _validate_key(key)
        self._send("update", "/crud/update", gas_info, key=key, value=value, lease=_lease_blocks(lease))

    def upsert(self, key: str, value: str, lease: Optional[LeaseInfo] = None, gas_info: Optional[GasInfo] = None) -> None:
        _validate_key(key)
        self._send("upsert", "/crud/upsert", gas_info, key=key, value=value, lease=_lease_blocks(lease))

    def delete(self, key: str, gas_info: Optional[GasInfo] = None) -> None:
        _validate_key(key)
        self._send("delete", "/crud/delete", gas_info, method="DELETE", key=key)

    def rename(self, key: str, new_key: str, gas_info: Optional[GasInfo] = None) -> None:
        _validate_key(key)
        _validate_key(new_key)
        self._send("rename", "/crud/rename", gas_info, key=key, new_key=new_key)

    def multi_update(self, key_values: Iterable[KeyValue], gas_info: Optional[GasInfo] = None) -> None:
        items = list(key_values)
        for kv in items:
            _validate_key(kv.key)
        self._send("multiupdate", "/crud/multiupdate", gas_info, key_values=items)

    def delete_all(self, gas_info: Optional[GasInfo] = None) -> None:
        self._send("deleteall", "/crud/deleteall", gas_info)

    def renew_lease(self, key: str, lease: LeaseInfo, gas_info: Optional[GasInfo] = None) -> None:
        _validate_key(key)
        self._send("renewlease", "/crud/renewlease", gas_info, key=key, lease=_lease_blocks(lease))

    def renew_all_leases(self, lease: LeaseInfo, gas_info: Optional[GasInfo] = None) -> None:
        self._send("renewleaseall", "/crud/renewleaseall", gas_info, lease=_lease_blocks(lease))

    def tx_read(self, key: str, gas_info: Optional[GasInfo] = None) -> str:
        _validate_key(key)
        return self._send_json("read", "/crud/read", gas_info, key=key).get("value", "")

    def tx_has(self, key: str, gas_info: Optional[GasInfo] = None) -> bool:
        _validate_key(key)
        return bool(self._send_json("has", "/crud/has", gas_info, key=key).get("has", False))

    def tx_keys(self, gas_info: Optional[GasInfo] = None) -> list[str]:
        return list(self._send_json("keys", "/crud/keys", gas_info).get("keys") or [])

    def tx_key_values(self, gas_info: Optional[GasInfo] = None) -> list[KeyValue]:
        payload = self._send_json("keyvalues", "/crud/keyvalues", gas_info)
        return [KeyValue.from_dict(kv) for kv in payload.get("keyvalues") or []]

    def tx_count(self, gas_info: Optional[GasInfo] = None) -> int:
        return _int_field(self._send_json("count", "/crud/count", gas_info), "count")

    def tx_get_lease(self, key: str, gas_info: Optional[GasInfo] = None) -> int:
        """Remaining lease of ``key`` in seconds."""
        _validate_key(key)
        payload = self._send_json("getlease", "/crud/getlease", gas_info, key=key)
        return blocks_to_seconds(_int_field(payload, "lease"))

    def tx_get_n_shortest_leases(self, n: int, gas_info: Optional[GasInfo] = None) -> list[KeyLease]:
        if n < 0:
            raise InvalidArgumentError("n must be non-negative")
        payload = self._send_json("getnshortestleases", "/crud/getnshortestleases", gas_info, n=n)
        return [KeyLease.from_dict(kl) for kl in payload.get("keyleases") or []]

    # ============ Queries ============

    def _query(self, path: str) -> dict[str, Any]:
        body = self.transport.query(path)
        return decode_response(body, QUERY_RESPONSE)["result"]

    def read(self, key: str) -> str:
        _validate_key(key)
        return self._query(f"/crud/read/{path_segment(self.uuid)}/{path_segment(key)}").get("value", "")

    def has(self, key: str) -> bool:
        _validate_key(key)
        return bool(self._query(f"/crud/has/{path_segment(self.uuid)}/{path_segment(key)}").get("has", False))

    def keys(self) -> list[str]:
        return list(self._query(f"/crud/keys/{path_segment(self.uuid)}").get("keys") or [])

    def key_values(self) -> list[KeyValue]:
        result = self._query(f"/crud/keyvalues/{path_segment(self.uuid)}")
        return [KeyValue.from_dict(kv) for kv in result.get("keyvalues") or []]

    def count(self) -> int:
        return _int_field(self._query(f"/crud/count/{path_segment(self.uuid)}"), "count")

    def get_lease(self, key: str) -> int:
        """Remaining lease of ``key`` in seconds."""
        _validate_key(key)
        result = self._query(f"/crud/getlease/{path_segment(self.uuid)}/{path_segment(key)}")
        return blocks_to_seconds(_int_field(result, "lease"))

    def get_n_shortest_leases(self, n: int) -> list[KeyLease]:
        if n < 0:
            raise InvalidArgumentError("n must be non-negative")
        result = self._query(f"/crud/getnshortestleases/{path_segment(self.uuid)}/{n}")
        return [KeyLease.from_dict(kl) for kl in result.get("keyleases") or []]

    def version(self) -> str:
        payload = load_json_bytes(self.transport.query("/node_info"))
        try:
            return payload["application_version"]["version"]
        except (KeyError, TypeError) as exc:
            raise DecodeError("node_info response has no application_version.version") from exc

    def account(self) -> AccountState:
        """Fresh account state from the ledger; does not affect the worker's copy."""
        return fetch_account(self.transport, self.address)
