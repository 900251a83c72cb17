"""
Broadcast with sequence-conflict retry.

Each attempt runs Prepare -> Sign -> Send. A response code of zero is
success. A nonzero code whose raw log carries the signature-verification
marker means the local sequence is stale: the account is resynced from
the ledger and the transaction is re-prepared with a fresh memo. Any other
nonzero code is fatal.
"""

from __future__ import annotations

import binascii
import enum
import json
import logging
import time
from typing import Callable, Optional

from eth_keys import keys

from ..errors import ConflictError, DecodeError, RemoteError, RetryExhaustedError
from ..sigil.crypto import sign_payload
from ..sigil.keys import compressed_public_key
from ..spec.models import (
    AccountState,
    BroadcastPayload,
    BroadcastResponse,
    GasInfo,
    SignPayload,
    SignatureRecord,
    TransactionRecord,
)
from ..spec.schemas import BROADCAST_RESPONSE, decode_response
from ..utils import base64_encode, random_memo
from .account import refresh_account
from .fees import resolve_fee
from .rest import RestTransport

logger = logging.getLogger(__name__)

TX_COMMAND = "/txs"
BROADCAST_MODE = "block"
BROADCAST_MAX_RETRIES = 10
BROADCAST_RETRY_INTERVAL = 1.0
SIGNATURE_VERIFICATION_FAILED = "signature verification failed"


class BroadcastOutcome(enum.Enum):
    SUCCESS = "success"
    CONFLICT = "conflict"
    FATAL = "fatal"


def is_sequence_conflict(raw_log: str) -> bool:
    """Whether a failed broadcast's log means the signed sequence was stale."""
    return SIGNATURE_VERIFICATION_FAILED in raw_log


def classify_broadcast(response: BroadcastResponse) -> BroadcastOutcome:
    if response.code == 0:
        return BroadcastOutcome.SUCCESS
    if is_sequence_conflict(response.raw_log):
        return BroadcastOutcome.CONFLICT
    return BroadcastOutcome.FATAL


class BroadcastController:
    """Signs and broadcasts templates for one account, retrying on conflict."""

    def __init__(
        self,
        transport: RestTransport,
        signing_key: keys.PrivateKey,
        chain_id: str,
        max_retries: int = BROADCAST_MAX_RETRIES,
        retry_interval: float = BROADCAST_RETRY_INTERVAL,
        sleep: Callable[[float], None] = time.sleep,
        memo_factory: Callable[[], str] = random_memo,
    ) -> None:
        self.transport = transport
        self.signing_key = signing_key
        self.chain_id = chain_id
        self.max_retries = max_retries
        self.retry_interval = retry_interval
        self._sleep = sleep
        self._memo_factory = memo_factory
        self._public_key_b64 = base64_encode(compressed_public_key(signing_key))

    def prepare(
        self,
        template: BroadcastPayload,
        gas_info: Optional[GasInfo],
        account: AccountState,
    ) -> BroadcastPayload:
        """Fresh memo, resolved fee, and a signature for the current sequence."""
        payload = BroadcastPayload(
            fee=resolve_fee(template.fee, gas_info),
            msg=template.msg,
            memo=self._memo_factory(),
        )
        signature = sign_payload(
            SignPayload(
                account_number=account.account_number,
                chain_id=self.chain_id,
                fee=payload.fee,
                memo=payload.memo,
                msgs=payload.msg,
                sequence=account.sequence,
            ),
            self.signing_key,
        )
        payload.signatures = [
            SignatureRecord(
                pub_key_value=self._public_key_b64,
                signature=signature,
                account_number=account.account_number,
                sequence=account.sequence,
            )
        ]
        return payload

    def send(self, payload: BroadcastPayload) -> BroadcastResponse:
        request = {"mode": BROADCAST_MODE, "tx": payload.to_dict()}
        body = json.dumps(request, separators=(",", ":")).encode("utf-8")
        logger.debug("txn broadcast request %s", body.decode("utf-8"))
        raw = self.transport.mutate("POST", TX_COMMAND, body)
        response = BroadcastResponse.from_dict(decode_response(raw, BROADCAST_RESPONSE))
        logger.debug("txn broadcast response %s", response)
        return response

    def attempt(
        self,
        template: BroadcastPayload,
        gas_info: Optional[GasInfo],
        account: AccountState,
    ) -> bytes:
        """
        One Prepare -> Sign -> Send pass.

        Raises:
            ConflictError: If the ledger rejected the sequence
            RemoteError: For any other ledger failure
        """
        payload = self.prepare(template, gas_info, account)
        response = self.send(payload)
        outcome = classify_broadcast(response)

        if outcome is BroadcastOutcome.SUCCESS:
            account.sequence += 1
            if not response.data:
                return b""
            try:
                return binascii.unhexlify(response.data)
            except (binascii.Error, ValueError) as exc:
                raise DecodeError(f"Broadcast data is not hex: {response.data!r}") from exc

        if outcome is BroadcastOutcome.CONFLICT:
            raise ConflictError(response.raw_log)

        raise RemoteError(response.raw_log)

    def broadcast(
        self,
        template: BroadcastPayload,
        gas_info: Optional[GasInfo],
        account: AccountState,
        record: Optional[TransactionRecord] = None,
    ) -> bytes:
        """
        Broadcast ``template`` until it lands, fails, or runs out of retries.

        Returns:
            Hex-decoded result data (empty when the ledger returns none)

        Raises:
            RetryExhaustedError: After ``max_retries`` conflicting attempts
            RemoteError: On a non-conflict ledger failure
        """
        attempts = 0
        while True:
            try:
                return self.attempt(template, gas_info, account)
            except ConflictError as exc:
                attempts += 1
                if record is not None:
                    record.broadcast_retries = attempts
                logger.warning("txn failed ... retrying(%d) ...", attempts)
                if attempts >= self.max_retries:
                    raise RetryExhaustedError(attempts, exc.message) from exc
                self._sleep(self.retry_interval)
                refresh_account(self.transport, account)
