import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterator, List, Optional

from stellar_sdk import Asset, Server

from .events import EventSink

CREDIT_ASSET_TYPES = ("credit_alphanum4", "credit_alphanum12")


@dataclass(frozen=True)
class BalanceEntry:
    asset_type: str
    balance: Decimal
    asset_code: Optional[str] = None
    asset_issuer: Optional[str] = None

    def matches(self, asset: Asset) -> bool:
        return (
            self.asset_type in CREDIT_ASSET_TYPES
            and self.asset_code == asset.code
            and self.asset_issuer == asset.issuer
        )


@dataclass(frozen=True)
class Holder:
    account_id: str
    balances: List[BalanceEntry]

    @classmethod
    def from_record(cls, record: dict) -> "Holder":
        return cls(
            account_id=record["id"],
            balances=[
                BalanceEntry(
                    asset_type=b["asset_type"],
                    balance=Decimal(b["balance"]),
                    asset_code=b.get("asset_code"),
                    asset_issuer=b.get("asset_issuer"),
                )
                for b in record.get("balances", [])
            ],
        )

    def balance_of(self, asset: Asset) -> Optional[BalanceEntry]:
        return next((b for b in self.balances if b.matches(asset)), None)


def iter_holders(
    server: Server, asset: Asset, events: EventSink, page_size: int = 200
) -> Iterator[Holder]:
    """
    Yield every account holding ``asset``, one Horizon page at a time.

    Pages are requested with ``limit(page_size)`` and followed by the
    paging token of the last record until an empty page comes back.
    Request errors propagate to the caller.
    """
    cursor = None
    page = 0
    total = 0
    while True:
        builder = server.accounts().for_asset(asset).limit(page_size)
        if cursor is not None:
            builder = builder.cursor(cursor)
        records = builder.call()["_embedded"]["records"]
        page += 1
        events.emit("holders_page", level=logging.DEBUG, page=page, count=len(records))
        if not records:
            break
        for record in records:
            total += 1
            yield Holder.from_record(record)
        cursor = records[-1]["paging_token"]
    events.emit("holders_fetched", total=total, pages=page)
