"""Shared fixtures: a recording event sink and an in-memory Horizon server."""

import logging
from decimal import Decimal

import pytest
from stellar_sdk import Account, Asset, Keypair

from stellar_reward_bot.config import BotConfig


class RecordingEvents:
    def __init__(self):
        self.records = []

    def emit(self, event, level=logging.INFO, **fields):
        self.records.append((event, level, fields))

    def names(self):
        return [event for event, _, _ in self.records]

    def of(self, name):
        return [fields for event, _, fields in self.records if event == name]

    def levels(self, name):
        return [level for event, level, _ in self.records if event == name]


class FakeAccountsCall:
    def __init__(self, server):
        self.server = server
        self.params = {}

    def for_asset(self, asset):
        self.params["asset"] = asset
        return self

    def limit(self, limit):
        self.params["limit"] = limit
        return self

    def cursor(self, cursor):
        self.params["cursor"] = cursor
        return self

    def call(self):
        self.server.requests.append(dict(self.params))
        if self.server.query_error is not None:
            raise self.server.query_error
        index = len(self.server.requests) - 1
        records = self.server.pages[index] if index < len(self.server.pages) else []
        return {"_embedded": {"records": records}}


class FakeServer:
    """Stands in for ``stellar_sdk.Server`` with canned pages and submissions."""

    def __init__(self, pages=None, sequence=100):
        self.pages = pages or []
        self.sequence = sequence
        self.requests = []
        self.loaded = []
        self.submitted = []
        self.failures = {}
        self.query_error = None

    def accounts(self):
        return FakeAccountsCall(self)

    def load_account(self, account_id):
        self.loaded.append(account_id)
        return Account(account_id, self.sequence)

    def submit_transaction(self, transaction):
        self.submitted.append(transaction)
        error = self.failures.get(len(self.submitted))
        if error is not None:
            raise error
        return {"hash": transaction.hash_hex(), "successful": True}


def holder_record(account_id, balance=None, asset=None, extra_balances=()):
    balances = list(extra_balances)
    if balance is not None:
        balances.append(
            {
                "asset_type": "credit_alphanum4" if len(asset.code) <= 4 else "credit_alphanum12",
                "asset_code": asset.code,
                "asset_issuer": asset.issuer,
                "balance": balance,
            }
        )
    balances.append({"asset_type": "native", "balance": "10000.0000000"})
    return {"id": account_id, "paging_token": account_id, "balances": balances}


@pytest.fixture
def events():
    return RecordingEvents()


@pytest.fixture
def distributor_keypair():
    return Keypair.random()


@pytest.fixture
def asset():
    return Asset("ARC", Keypair.random().public_key)


@pytest.fixture
def config(distributor_keypair, asset):
    return BotConfig(
        secret_key=distributor_keypair.secret,
        asset_code=asset.code,
        asset_issuer=asset.issuer,
        reward_rate=Decimal("0.01"),
    )


@pytest.fixture
def server():
    return FakeServer()
