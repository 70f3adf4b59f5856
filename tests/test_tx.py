import time
from decimal import Decimal

from stellar_sdk import Account, Asset, Keypair, Network
from stellar_sdk.operation import Payment as PaymentOp

from stellar_reward_bot.batches import BatchSubmitter
from stellar_reward_bot.rewards import Payment


def test_build_transaction(server, config, distributor_keypair, events):
    submitter = BatchSubmitter(server, distributor_keypair, config, events)
    account = Account(distributor_keypair.public_key, 100)
    recipients = [Keypair.random().public_key for _ in range(3)]
    batch = [Payment(r, Decimal("0.0010000")) for r in recipients]

    envelope = submitter.build_transaction(account, batch)
    tx = envelope.transaction

    assert tx.sequence == 101
    assert account.sequence == 101
    assert tx.fee == 3 * 100
    time_bounds = tx.preconditions.time_bounds
    assert time_bounds.min_time == 0
    assert time.time() < time_bounds.max_time <= time.time() + 30
    assert envelope.network_passphrase == Network.TESTNET_NETWORK_PASSPHRASE
    assert len(envelope.signatures) == 1

    assert [type(op) for op in tx.operations] == [PaymentOp] * 3
    assert [op.destination.account_id for op in tx.operations] == recipients
    assert all(op.asset == Asset.native() for op in tx.operations)
    assert all(Decimal(op.amount) == Decimal("0.001") for op in tx.operations)
