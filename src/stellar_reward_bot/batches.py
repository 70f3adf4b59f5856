import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterator, List, Optional, Sequence

from stellar_sdk import Account, Asset, Keypair, Server, TransactionBuilder
from stellar_sdk.exceptions import BaseHorizonError, BaseRequestError
from stellar_sdk.sep.exceptions import AccountRequiresMemoError

from .config import BotConfig, RewardBotError
from .events import EventSink
from .rewards import Payment


class DistributorInPaymentsError(RewardBotError):
    pass


@dataclass
class BatchResult:
    index: int
    payments: List[Payment]
    tx_hash: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def total(self) -> Decimal:
        return sum((p.amount for p in self.payments), Decimal("0"))


def chunk(payments: Sequence[Payment], size: int) -> Iterator[List[Payment]]:
    for start in range(0, len(payments), size):
        yield list(payments[start : start + size])


def describe_error(error: Exception) -> str:
    if isinstance(error, BaseHorizonError):
        result_codes = (error.extras or {}).get("result_codes")
        return f"{error.status} {error.title}: {result_codes or error.detail}"
    if isinstance(error, AccountRequiresMemoError):
        return f"{error} account={error.account_id} operation={error.operation_index}"
    return str(error) or type(error).__name__


class BatchSubmitter:
    def __init__(self, server: Server, keypair: Keypair, config: BotConfig, events: EventSink):
        self.server = server
        self.keypair = keypair
        self.config = config
        self.events = events

    def ensure_distributor_excluded(self, payments: Sequence[Payment]) -> None:
        if any(p.destination == self.keypair.public_key for p in payments):
            raise DistributorInPaymentsError(
                f"Distributor {self.keypair.public_key} found in payment list"
            )

    def build_transaction(self, account: Account, batch: Sequence[Payment]):
        builder = TransactionBuilder(
            source_account=account,
            network_passphrase=self.config.network_passphrase,
            base_fee=self.config.base_fee,
        )
        for payment in batch:
            builder.append_payment_op(
                destination=payment.destination,
                asset=Asset.native(),
                amount=payment.amount_str,
            )
        # build() advances the account's local sequence number
        transaction = builder.set_timeout(self.config.tx_timeout).build()
        transaction.sign(self.keypair)
        return transaction

    def submit_batch(self, account: Account, index: int, batch: List[Payment]) -> BatchResult:
        result = BatchResult(index=index, payments=batch)
        self.events.emit("batch_started", batch=index, payments=len(batch), sequence=account.sequence)
        transaction = self.build_transaction(account, batch)

        if self.config.nobroadcast:
            result.tx_hash = transaction.hash_hex()
            self.events.emit("batch_dry_run", batch=index, tx_hash=result.tx_hash)
            return result

        try:
            response = self.server.submit_transaction(transaction)
        except (BaseHorizonError, BaseRequestError, AccountRequiresMemoError) as e:
            result.error = describe_error(e)
            self.events.emit("batch_failed", level=logging.ERROR, batch=index, error=result.error)
            return result

        result.tx_hash = response["hash"]
        self.events.emit("batch_submitted", batch=index, tx_hash=result.tx_hash)
        return result

    def reload_account(self, account: Account) -> Account:
        try:
            return self.server.load_account(self.keypair.public_key)
        except BaseRequestError as e:
            self.events.emit("account_reload_failed", level=logging.ERROR, error=describe_error(e))
            return account

    def submit(
        self,
        payments: Sequence[Payment],
        account: Account,
        results: Optional[List[BatchResult]] = None,
    ) -> List[BatchResult]:
        """
        Submit ``payments`` in batches, one signed transaction per batch.

        A failed batch is logged and abandoned; later batches are still
        attempted against a freshly loaded account sequence, or the
        previous account if the reload fails too. Each result is appended
        to ``results`` as soon as its batch completes.
        """
        self.ensure_distributor_excluded(payments)

        batches = list(chunk(payments, self.config.batch_size))
        results = [] if results is None else results
        for index, batch in enumerate(batches, start=1):
            result = self.submit_batch(account, index, batch)
            results.append(result)
            if not result.ok and index < len(batches):
                account = self.reload_account(account)
        return results
