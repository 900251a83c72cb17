"""
Transaction validation - ask the ledger to build the broadcast template.

The ledger computes default gas, fee and message shape server-side; the
client only fills in memo, fee and signatures before broadcasting.
"""

from __future__ import annotations

import json
import logging

from ..spec.models import AccountState, BroadcastPayload, TransactionRecord
from ..spec.schemas import VALIDATE_RESPONSE, decode_response
from .rest import RestTransport

logger = logging.getLogger(__name__)


def build_validate_request(
    record: TransactionRecord,
    account: AccountState,
    chain_id: str,
    uuid: str,
) -> bytes:
    body = record.validate_request(address=account.address, chain_id=chain_id, uuid=uuid)
    return json.dumps(body, sort_keys=True, separators=(",", ":")).encode("utf-8")


def validate_transaction(
    transport: RestTransport,
    record: TransactionRecord,
    account: AccountState,
    chain_id: str,
    uuid: str,
) -> BroadcastPayload:
    """
    Send ``record`` to its endpoint and decode the returned template.

    Raises:
        TransportError: On network / HTTP failure
        RemoteError: If the ledger rejects the request
        DecodeError: If the response is not a wrapped broadcast payload
    """
    payload = build_validate_request(record, account, chain_id, uuid)
    logger.debug("txn init %s", payload.decode("utf-8"))
    body = transport.mutate(record.method, record.endpoint, payload)
    logger.debug("txn init response %s", body.decode("utf-8", errors="replace"))
    decoded = decode_response(body, VALIDATE_RESPONSE)
    return BroadcastPayload.from_dict(decoded["value"])
