"""
Single-flight transaction queue.

The ledger rejects any transaction whose sequence is not exactly the
account's current value, so writes from one account must never overlap.
One worker thread per client drains a FIFO queue and drives each record
through validate -> fee -> sign -> broadcast before taking the next.
The AccountState is read and written only on that thread.
"""

from __future__ import annotations

import logging
import queue
import threading
from concurrent.futures import CancelledError
from typing import Optional

from ..errors import BluzelleError, ConfigError, PipelineError
from ..spec.models import AccountState, TransactionRecord
from .account import fetch_account
from .broadcast import BroadcastController
from .rest import RestTransport
from .tx import validate_transaction

logger = logging.getLogger(__name__)

_STOP = object()


class TransactionPipeline:
    """validate -> fee -> sign -> broadcast for one record at a time."""

    def __init__(
        self,
        transport: RestTransport,
        controller: BroadcastController,
        address: str,
        chain_id: str,
        uuid: str,
    ) -> None:
        self.transport = transport
        self.controller = controller
        self.address = address
        self.chain_id = chain_id
        self.uuid = uuid
        self.account: Optional[AccountState] = None

    def ensure_account(self) -> AccountState:
        if self.account is None:
            self.account = fetch_account(self.transport, self.address)
            logger.info(
                "account %s loaded: account_number=%d sequence=%d",
                self.address,
                self.account.account_number,
                self.account.sequence,
            )
        return self.account

    def process(self, record: TransactionRecord) -> bytes:
        record.broadcast_retries = 0
        if record.gas_info is None:
            raise ConfigError("gas_info is required")

        account = self.ensure_account()
        template = validate_transaction(
            self.transport, record, account, chain_id=self.chain_id, uuid=self.uuid
        )
        return self.controller.broadcast(template, record.gas_info, account, record=record)


class TransactionWorker:
    """Owns the queue and the one thread that runs the pipeline."""

    def __init__(self, pipeline: TransactionPipeline, name: str = "bluzelle-tx-worker") -> None:
        self.pipeline = pipeline
        self._queue: queue.Queue = queue.Queue()
        self._lock = threading.Lock()
        self._closed = False
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)
        self._thread.start()

    def submit(self, record: TransactionRecord) -> bytes:
        """
        Enqueue ``record`` and block until the worker finishes it.

        Returns:
            The transaction's result bytes (possibly empty)

        Raises:
            BluzelleError: Whatever terminal error the pipeline hit
            PipelineError: If the client is closed or no outcome was delivered
        """
        with self._lock:
            if self._closed:
                raise PipelineError("client is closed")
            # A running future cannot be cancelled; in-flight records always finish.
            try:
                accepted = record.done.set_running_or_notify_cancel()
            except RuntimeError as exc:
                raise PipelineError("record was already submitted") from exc
            if not accepted:
                raise PipelineError("record was cancelled before submission")
            self._queue.put(record)

        try:
            result = record.done.result()
        except CancelledError as exc:
            logger.critical("txn did not complete: %s", record.operation)
            raise PipelineError("txn did not complete") from exc
        except BluzelleError as exc:
            logger.error("transaction err(%s)", exc)
            raise
        if result is None:
            raise PipelineError("txn completed without a result")
        return result

    def close(self, timeout: Optional[float] = None) -> None:
        """Stop accepting records and wait for queued ones to finish."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._queue.put(_STOP)
        self._thread.join(timeout)

    @property
    def running(self) -> bool:
        return self._thread.is_alive()

    def _run(self) -> None:
        while True:
            record = self._queue.get()
            if record is _STOP:
                return
            try:
                result = self.pipeline.process(record)
            except BaseException as exc:
                if not isinstance(exc, BluzelleError):
                    logger.exception("unexpected failure processing %s", record.operation)
                record.done.set_exception(exc)
                if not isinstance(exc, Exception):
                    self._abandon()
                    raise
            else:
                record.done.set_result(result)

    def _abandon(self) -> None:
        """Stop accepting records and fail the ones still queued."""
        with self._lock:
            self._closed = True
            while True:
                try:
                    record = self._queue.get_nowait()
                except queue.Empty:
                    return
                if record is not _STOP:
                    record.done.set_exception(PipelineError("transaction worker stopped"))
