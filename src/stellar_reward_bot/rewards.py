import logging
from dataclasses import dataclass
from decimal import ROUND_DOWN, Decimal
from typing import Iterable, List

from stellar_sdk import Asset

from .events import EventSink
from .holders import Holder

STROOP = Decimal("0.0000001")


@dataclass(frozen=True)
class Payment:
    destination: str
    amount: Decimal

    @property
    def amount_str(self) -> str:
        return f"{self.amount:.7f}"


def reward_amount(balance: Decimal, rate: Decimal) -> Decimal:
    return (balance * rate).quantize(STROOP, rounding=ROUND_DOWN)


def calculate_rewards(
    holders: Iterable[Holder],
    asset: Asset,
    distributor_id: str,
    rate: Decimal,
    min_payment: Decimal,
    events: EventSink,
) -> List[Payment]:
    """
    Map holders to reward payments, preserving input order.

    The distributor is never paid, holders without a trustline balance in
    ``asset`` are dropped, and rewards below ``min_payment`` are dropped.
    """
    payments = []
    for holder in holders:
        if holder.account_id == distributor_id:
            events.emit("holder_skipped", account=holder.account_id, reason="distributor")
            continue

        entry = holder.balance_of(asset)
        if entry is None:
            events.emit(
                "holder_skipped",
                level=logging.DEBUG,
                account=holder.account_id,
                reason="no_balance",
            )
            continue

        amount = reward_amount(entry.balance, rate)
        if amount < min_payment:
            events.emit(
                "holder_skipped",
                level=logging.DEBUG,
                account=holder.account_id,
                reason="below_minimum",
                balance=entry.balance,
                amount=f"{amount:.7f}",
            )
            continue

        events.emit(
            "reward_calculated",
            level=logging.DEBUG,
            account=holder.account_id,
            balance=entry.balance,
            amount=f"{amount:.7f}",
        )
        payments.append(Payment(destination=holder.account_id, amount=amount))
    return payments
