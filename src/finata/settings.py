"""Runtime configuration sourced from environment variables."""

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Optional

from finata.domain.errors import ValidationError

DEFAULT_USER = "local"
DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_MAX_ATTEMPTS = 5
DEFAULT_BUSY_TIMEOUT = 5.0


def default_data_dir() -> Path:
    """Return ~/.finata, creating it if needed."""
    data_dir = Path.home() / ".finata"
    data_dir.mkdir(exist_ok=True)
    return data_dir


@dataclass(frozen=True)
class Settings:
    """Settings for the store, the rate table and logging.

    Attributes:
        db_path: SQLite database file, or None for the default location.
        user_id: Namespace for every stored collection.
        rates_path: JSON file holding the exchange-rate table, or None for
            the default location.
        log_level: Name of the root logging level.
        max_attempts: Attempts per atomic operation on write conflicts.
        busy_timeout: Seconds SQLite waits for a locked database.
    """

    db_path: Optional[str] = None
    user_id: str = DEFAULT_USER
    rates_path: Optional[str] = None
    log_level: str = DEFAULT_LOG_LEVEL
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    busy_timeout: float = DEFAULT_BUSY_TIMEOUT

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from FINATA_* environment variables.

        Raises:
            ValidationError: If a numeric variable does not parse or is not positive
        """
        return cls(
            db_path=os.getenv("FINATA_DB_PATH") or None,
            user_id=(os.getenv("FINATA_USER") or DEFAULT_USER).strip(),
            rates_path=os.getenv("FINATA_RATES_PATH") or None,
            log_level=(os.getenv("FINATA_LOG_LEVEL") or DEFAULT_LOG_LEVEL).strip().upper(),
            max_attempts=_positive(
                "FINATA_MAX_ATTEMPTS", os.getenv("FINATA_MAX_ATTEMPTS"), DEFAULT_MAX_ATTEMPTS, int
            ),
            busy_timeout=_positive(
                "FINATA_BUSY_TIMEOUT", os.getenv("FINATA_BUSY_TIMEOUT"), DEFAULT_BUSY_TIMEOUT, float
            ),
        )

    def resolved_db_path(self) -> str:
        """Return the database path, defaulting to ~/.finata/finata.db."""
        if self.db_path is not None:
            return self.db_path
        return str(default_data_dir() / "finata.db")

    def resolved_rates_path(self) -> Path:
        """Return the rate table path, defaulting to ~/.finata/rates.json."""
        if self.rates_path is not None:
            return Path(self.rates_path)
        return default_data_dir() / "rates.json"


def _positive(name: str, raw: Optional[str], default, cast):
    if raw is None or not raw.strip():
        return default
    try:
        value = cast(raw.strip())
    except ValueError:
        raise ValidationError(f"{name} must be a number, got '{raw}'")
    if value <= 0:
        raise ValidationError(f"{name} must be positive, got '{raw}'")
    return value
