import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from stellar_sdk import Asset, Keypair, Network

MIN_PAYMENT = Decimal("0.0000001")
BATCH_SIZE = 100
PAGE_SIZE = 200
TX_TIMEOUT = 30

NETWORKS = {
    "testnet": Network.TESTNET_NETWORK_PASSPHRASE,
    "public": Network.PUBLIC_NETWORK_PASSPHRASE,
}


class RewardBotError(Exception):
    pass


class ConfigError(RewardBotError):
    pass


def _flag(value: str | None) -> bool:
    return (value or "").lower() in ("true", "1", "yes")


def _decimal(name: str, value: str) -> Decimal:
    try:
        parsed = Decimal(value)
    except InvalidOperation:
        raise ConfigError(f"{name} is not a number: {value!r}") from None
    if not parsed.is_finite():
        raise ConfigError(f"{name} must be finite, got {value!r}")
    return parsed


def _int(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ConfigError(f"{name} is not an integer: {value!r}") from None


@dataclass(frozen=True)
class BotConfig:
    secret_key: str
    asset_code: str
    asset_issuer: str
    reward_rate: Decimal
    min_payment: Decimal = MIN_PAYMENT
    horizon_url: str = "https://horizon-testnet.stellar.org"
    network_passphrase: str = Network.TESTNET_NETWORK_PASSPHRASE
    base_fee: int = 100
    interval: int = 60
    nobroadcast: bool = False
    run_once: bool = False
    batch_size: int = BATCH_SIZE
    page_size: int = PAGE_SIZE
    tx_timeout: int = TX_TIMEOUT

    def __post_init__(self):
        if not 0 < self.reward_rate <= 1:
            raise ConfigError(f"REWARD_RATE must be in (0, 1], got {self.reward_rate}")
        if self.min_payment <= 0:
            raise ConfigError(f"MIN_PAYMENT must be positive, got {self.min_payment}")
        if self.base_fee < 100:
            raise ConfigError(f"BASE_FEE must be at least 100 stroops, got {self.base_fee}")
        if self.interval <= 0:
            raise ConfigError(f"DISTRIBUTION_INTERVAL must be positive, got {self.interval}")
        # Fail at startup rather than on the first tick.
        self.keypair
        self.asset

    @property
    def keypair(self) -> Keypair:
        try:
            return Keypair.from_secret(self.secret_key)
        except ValueError as e:
            raise ConfigError(f"SECRET_KEY is not a valid secret seed: {e}") from None

    @property
    def asset(self) -> Asset:
        try:
            return Asset(self.asset_code, self.asset_issuer)
        except ValueError as e:
            raise ConfigError(f"Invalid asset {self.asset_code}:{self.asset_issuer}: {e}") from None

    @classmethod
    def from_env(cls, environ=None) -> "BotConfig":
        env = os.environ if environ is None else environ
        required_vars = ["SECRET_KEY", "ASSET_CODE", "ASSET_ISSUER", "REWARD_RATE"]
        missing_vars = [var for var in required_vars if not env.get(var)]
        if missing_vars:
            raise ConfigError(
                f"Missing required environment vars: {', '.join(missing_vars)}"
            )

        network = env.get("NETWORK", "testnet")
        return cls(
            secret_key=env["SECRET_KEY"],
            asset_code=env["ASSET_CODE"],
            asset_issuer=env["ASSET_ISSUER"],
            reward_rate=_decimal("REWARD_RATE", env["REWARD_RATE"]),
            min_payment=_decimal("MIN_PAYMENT", env.get("MIN_PAYMENT", f"{MIN_PAYMENT:f}")),
            horizon_url=env.get("HORIZON_URL", "https://horizon-testnet.stellar.org"),
            network_passphrase=NETWORKS.get(network.lower(), network),
            base_fee=_int("BASE_FEE", env.get("BASE_FEE", "100")),
            interval=_int("DISTRIBUTION_INTERVAL", env.get("DISTRIBUTION_INTERVAL", "60")),
            nobroadcast=_flag(env.get("DRY_RUN")),
            run_once=_flag(env.get("RUN_ONCE")),
        )
