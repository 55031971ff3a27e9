"""Exchange-rate table persisted as a local JSON file."""

import json
import logging
from decimal import Decimal, InvalidOperation
from pathlib import Path

from finata.domain.entities import BASE_CURRENCY
from finata.domain.errors import ValidationError

logger = logging.getLogger(__name__)

DEFAULT_EXCHANGE_RATES: dict[str, Decimal] = {
    "USD": Decimal("42.43"),
    "EUR": Decimal("49.19"),
    "GRAM": Decimal("5680"),
    "USDT": Decimal("42.43"),
}


class RateTableFile:
    """Load and save the currency -> base-currency factor table."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> dict[str, Decimal]:
        """Return the saved table, or the defaults if nothing usable is saved."""
        if not self.path.exists():
            return dict(DEFAULT_EXCHANGE_RATES)
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            return {str(code).upper(): Decimal(str(rate)) for code, rate in raw.items()}
        except (OSError, ValueError, AttributeError, InvalidOperation) as exc:
            logger.warning("Ignoring unreadable rate table %s: %s", self.path, exc)
            return dict(DEFAULT_EXCHANGE_RATES)

    def save(self, rates: dict[str, Decimal]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {code: str(rate) for code, rate in sorted(rates.items())}
        self.path.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    def set_rate(self, currency: str, rate: Decimal) -> dict[str, Decimal]:
        """Set one currency's factor and persist the table.

        Raises:
            ValidationError: If the currency is the base currency or the rate is not positive
        """
        code = currency.strip().upper()
        if not code:
            raise ValidationError("Currency code is required")
        if code == BASE_CURRENCY:
            raise ValidationError(f"{BASE_CURRENCY} is the base currency and has no rate")
        if rate <= 0:
            raise ValidationError(f"Rate must be positive, got '{rate}'")
        rates = self.load()
        rates[code] = rate
        self.save(rates)
        return rates

    def reset(self) -> dict[str, Decimal]:
        """Restore the default table."""
        rates = dict(DEFAULT_EXCHANGE_RATES)
        self.save(rates)
        return rates
