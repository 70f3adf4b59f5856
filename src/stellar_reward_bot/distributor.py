import logging
import time
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from stellar_sdk import Server

from .batches import BatchResult, BatchSubmitter, DistributorInPaymentsError
from .config import BotConfig
from .events import EventSink
from .holders import iter_holders
from .rewards import calculate_rewards

logger = logging.getLogger("stellar_reward_bot")


class CycleState(Enum):
    IDLE = "idle"
    ENUMERATING = "enumerating"
    CALCULATING = "calculating"
    SUBMITTING = "submitting"


@dataclass
class CycleReport:
    total_holders: int = 0
    total_payments: int = 0
    batches: List[BatchResult] = field(default_factory=list)
    start_time: Optional[float] = None
    end_time: Optional[float] = None
    aborted: Optional[str] = None

    @property
    def successful_batches(self) -> List[BatchResult]:
        return [b for b in self.batches if b.ok]

    @property
    def failed_batches(self) -> List[BatchResult]:
        return [b for b in self.batches if not b.ok]

    @property
    def successful_payments(self) -> int:
        return sum(len(b.payments) for b in self.successful_batches)

    @property
    def total_distributed(self) -> Decimal:
        return sum((b.total for b in self.successful_batches), Decimal("0"))

    @property
    def unpaid(self) -> List[str]:
        return [p.destination for b in self.failed_batches for p in b.payments]

    @property
    def duration(self) -> float:
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0


class RewardDistributor:
    """Run one holder enumeration, reward calculation and payout cycle."""

    def __init__(self, config: BotConfig, events: EventSink, server: Optional[Server] = None):
        self.config = config
        self.events = events
        self.server = server or Server(horizon_url=config.horizon_url)
        self.keypair = config.keypair
        self.asset = config.asset
        self.submitter = BatchSubmitter(self.server, self.keypair, config, events)
        self.state = CycleState.IDLE

    def _enter(self, state: CycleState) -> None:
        self.state = state
        self.events.emit("cycle_state", level=logging.DEBUG, state=state.value)

    def run_cycle(self) -> CycleReport:
        report = CycleReport(start_time=time.time())
        self.events.emit("cycle_started", asset=f"{self.asset.code}:{self.asset.issuer}")
        try:
            self._run(report)
        except DistributorInPaymentsError as e:
            report.aborted = str(e)
            self.events.emit("distributor_in_payments", level=logging.CRITICAL, error=str(e))
        except Exception as e:
            report.aborted = str(e) or type(e).__name__
            self.events.emit(
                "cycle_failed", level=logging.ERROR, state=self.state.value, error=report.aborted
            )
            logger.debug("Cycle traceback", exc_info=True)
        finally:
            report.end_time = time.time()
            self._enter(CycleState.IDLE)

        self.events.emit(
            "cycle_finished",
            holders=report.total_holders,
            payments=report.total_payments,
            batches=len(report.batches),
            failed_batches=len(report.failed_batches),
            distributed=f"{report.total_distributed:.7f}",
        )
        if report.unpaid:
            self.events.emit("unpaid_holders", level=logging.WARNING, accounts=",".join(report.unpaid))
        return report

    def _run(self, report: CycleReport) -> None:
        self._enter(CycleState.ENUMERATING)
        holders = list(
            iter_holders(self.server, self.asset, self.events, page_size=self.config.page_size)
        )
        report.total_holders = len(holders)
        if not holders:
            self.events.emit("no_holders", level=logging.WARNING)
            return

        self._enter(CycleState.CALCULATING)
        payments = calculate_rewards(
            holders,
            self.asset,
            self.keypair.public_key,
            self.config.reward_rate,
            self.config.min_payment,
            self.events,
        )
        report.total_payments = len(payments)
        self.events.emit("payments_calculated", payments=len(payments))
        if not payments:
            self.events.emit("no_payments")
            return

        self._enter(CycleState.SUBMITTING)
        self.submitter.ensure_distributor_excluded(payments)
        account = self.server.load_account(self.keypair.public_key)
        self.events.emit("distributor_loaded", sequence=account.sequence)
        self.submitter.submit(payments, account, report.batches)
