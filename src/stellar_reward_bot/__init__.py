"""
Stellar asset holder reward bot.

Periodically enumerates every holder of an asset, pays each a fixed
fraction of its balance in XLM, and submits the payments in batches.

Requires environment variables:
- SECRET_KEY
- ASSET_CODE
- ASSET_ISSUER
- REWARD_RATE
"""

import logging
import os
import sys

from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler

from .batches import BatchResult, BatchSubmitter, DistributorInPaymentsError, chunk
from .config import BotConfig, ConfigError, RewardBotError
from .distributor import CycleReport, CycleState, RewardDistributor
from .events import EventSink, LoggingEventSink
from .holders import BalanceEntry, Holder, iter_holders
from .report import display_configuration, display_summary_report
from .rewards import Payment, calculate_rewards, reward_amount
from .scheduler import DistributionScheduler

__all__ = [
    "BalanceEntry",
    "BatchResult",
    "BatchSubmitter",
    "BotConfig",
    "ConfigError",
    "CycleReport",
    "CycleState",
    "DistributionScheduler",
    "DistributorInPaymentsError",
    "EventSink",
    "Holder",
    "LoggingEventSink",
    "Payment",
    "RewardBotError",
    "RewardDistributor",
    "calculate_rewards",
    "chunk",
    "iter_holders",
    "main",
    "reward_amount",
]

# Rich Console for pretty output
console = Console()
logger = logging.getLogger("stellar_reward_bot")


def configure_logging() -> None:
    log_level = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_time=True, show_path=False)],
    )


def main():
    load_dotenv()
    configure_logging()

    try:
        config = BotConfig.from_env()
    except ConfigError as e:
        logger.critical(f"Configuration error: {e}")
        sys.exit(1)

    if config.nobroadcast:
        logger.warning("DRY RUN mode active: transactions will not be submitted")
    display_configuration(config, console)

    events = LoggingEventSink(logger)
    distributor = RewardDistributor(config, events)

    def cycle():
        report = distributor.run_cycle()
        display_summary_report(report, config, console)
        return report

    if config.run_once:
        report = cycle()
        sys.exit(1 if report.aborted else 0)

    scheduler = DistributionScheduler(cycle, config.interval, events)
    logger.info("🚀 Reward bot started")
    scheduler.run_forever()
