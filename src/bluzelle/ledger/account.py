"""Signer account lookup."""

from __future__ import annotations

import logging

from ..errors import DecodeError
from ..spec.models import AccountState
from ..spec.schemas import ACCOUNT_RESPONSE, decode_response
from ..utils import path_segment, to_int
from .rest import RestTransport

logger = logging.getLogger(__name__)


def fetch_account(transport: RestTransport, address: str) -> AccountState:
    """
    Read the account number and next sequence for ``address``.

    Returns:
        A fresh AccountState; the ledger's view is authoritative.
    """
    body = transport.query(f"/auth/accounts/{path_segment(address)}")
    payload = decode_response(body, ACCOUNT_RESPONSE)
    value = payload["result"]["value"]
    try:
        account_number = to_int(value.get("account_number", 0), "account_number")
        sequence = to_int(value.get("sequence", 0), "sequence")
    except ValueError as exc:
        raise DecodeError(str(exc)) from exc
    return AccountState(address=address, account_number=account_number, sequence=sequence)


def refresh_account(transport: RestTransport, state: AccountState) -> AccountState:
    """Resync ``state`` in place from the ledger and return it."""
    fresh = fetch_account(transport, state.address)
    if fresh.sequence != state.sequence or fresh.account_number != state.account_number:
        logger.info(
            "account resync: account_number %d -> %d, sequence %d -> %d",
            state.account_number,
            fresh.account_number,
            state.sequence,
            fresh.sequence,
        )
    state.account_number = fresh.account_number
    state.sequence = fresh.sequence
    return state
