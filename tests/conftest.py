"""
Shared fixtures: an in-memory ledger behind httpx.MockTransport.

The fake ledger enforces the one rule the pipeline exists for: a broadcast
is accepted only if it was signed for the account's current sequence.
"""

from __future__ import annotations

import json
import threading
import time
from typing import Any, Callable, Optional

import httpx
import pytest

from bluzelle.client import Client
from bluzelle.config import ClientOptions
from bluzelle.ledger.rest import RestTransport
from bluzelle.spec.models import GasInfo

TEST_PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
TEST_ADDRESS = "bluzelle1upsfjftremwgxz3gfy0wf3xgvwpymqx754ssu9"
TEST_UUID = "test-uuid"
TEST_CHAIN_ID = "bluzelle"
ENDPOINT = "http://ledger.test"

CONFLICT_LOG = (
    "unauthorized: signature verification failed; "
    "verify correct account sequence and chain-id"
)


def default_template(gas: str = "200000", amount: Optional[str] = "4000000") -> dict[str, Any]:
    fee: dict[str, Any] = {"gas": gas, "amount": None}
    if amount is not None:
        fee["amount"] = [{"amount": amount, "denom": "ubnt"}]
    return {
        "type": "cosmos-sdk/StdTx",
        "value": {
            "fee": fee,
            "memo": "",
            "msg": [
                {
                    "type": "crud/create",
                    "value": {"Key": "k", "Owner": TEST_ADDRESS, "UUID": TEST_UUID, "Value": "v"},
                }
            ],
            "signatures": None,
        },
    }


class FakeLedger:
    """Request handler emulating the ledger's REST interface."""

    def __init__(self, account_number: int = 7, sequence: int = 3) -> None:
        self.account_number = account_number
        self.sequence = sequence
        self.template = default_template()
        self.result_data: dict[str, Any] | None = None
        self.always_conflict = False
        self.broadcast_override: Optional[Callable[[dict[str, Any]], dict[str, Any]]] = None
        self.queries: dict[str, Any] = {}
        self.handler_delay = 0.0

        self.requests: list[httpx.Request] = []
        self.validations: list[tuple[str, str, dict[str, Any]]] = []
        self.broadcasts: list[dict[str, Any]] = []
        self.account_fetches = 0

        self._lock = threading.Lock()
        self._in_flight = 0
        self.max_in_flight = 0

    @staticmethod
    def _json(payload: Any, status: int = 200) -> httpx.Response:
        return httpx.Response(status, json=payload)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path.startswith("/auth/accounts/"):
            self.account_fetches += 1
            return self._json(
                {
                    "height": "12",
                    "result": {
                        "type": "cosmos-sdk/Account",
                        "value": {
                            "address": TEST_ADDRESS,
                            "account_number": str(self.account_number),
                            "sequence": str(self.sequence),
                        },
                    },
                }
            )

        if path == "/txs":
            return self._tracked(lambda: self._broadcast(json.loads(request.content)))

        if request.method in ("POST", "DELETE") and path.startswith("/crud/"):
            body = json.loads(request.content)
            return self._tracked(lambda: self._validate(request.method, path, body))

        if request.method == "GET" and path in self.queries:
            return self._json(self.queries[path])

        return self._json({"error": f"unknown route {request.method} {path}"}, status=404)

    def _tracked(self, fn: Callable[[], httpx.Response]) -> httpx.Response:
        with self._lock:
            self._in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self._in_flight)
        try:
            if self.handler_delay:
                time.sleep(self.handler_delay)
            return fn()
        finally:
            with self._lock:
                self._in_flight -= 1

    def _validate(self, method: str, path: str, body: dict[str, Any]) -> httpx.Response:
        self.validations.append((method, path, body))
        return self._json(self.template)

    def _broadcast(self, body: dict[str, Any]) -> httpx.Response:
        self.broadcasts.append(body)
        if self.broadcast_override is not None:
            return self._json(self.broadcast_override(body))

        signature = body["tx"]["signatures"][0]
        if self.always_conflict or int(signature["sequence"]) != self.sequence:
            return self._json({"height": "0", "txhash": "DEE236", "code": 4, "raw_log": CONFLICT_LOG})

        self.sequence += 1
        response = {"height": "13", "txhash": "3F596D", "raw_log": "[]"}
        if self.result_data is not None:
            response["data"] = json.dumps(self.result_data).encode("utf-8").hex().upper()
        return self._json(response)


BLUZELLE_ENV_VARS = (
    "BLUZELLE_ENDPOINT",
    "BLUZELLE_CHAIN_ID",
    "BLUZELLE_UUID",
    "BLUZELLE_ADDRESS",
    "BLUZELLE_PRIVATE_KEY",
    "BLUZELLE_MNEMONIC",
    "BLUZELLE_MAX_GAS",
    "BLUZELLE_MAX_FEE",
    "BLUZELLE_GAS_PRICE",
    "BLUZELLE_TIMEOUT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Start each test without BLUZELLE_* variables; values set by dotenv are undone."""
    for name in BLUZELLE_ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


@pytest.fixture()
def ledger() -> FakeLedger:
    return FakeLedger()


@pytest.fixture()
def transport(ledger: FakeLedger) -> RestTransport:
    http = httpx.Client(transport=httpx.MockTransport(ledger.handler))
    rest = RestTransport(ENDPOINT, client=http)
    yield rest
    http.close()


@pytest.fixture()
def options() -> ClientOptions:
    return ClientOptions(
        address=TEST_ADDRESS,
        private_key=TEST_PRIVATE_KEY,
        endpoint=ENDPOINT,
        chain_id=TEST_CHAIN_ID,
        uuid=TEST_UUID,
        gas_info=GasInfo(max_fee=4000001),
    )


@pytest.fixture()
def sleeps() -> list[float]:
    return []


@pytest.fixture()
def client(options: ClientOptions, transport: RestTransport, sleeps: list[float]) -> Client:
    c = Client(options, transport=transport, retry_interval=1.0, sleep=sleeps.append)
    yield c
    c.close()
