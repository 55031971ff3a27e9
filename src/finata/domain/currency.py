"""Currency conversion for display aggregates.

Nothing here touches stored balances: conversions are only used to show
wallets side by side in the base currency.
"""

from decimal import Decimal
from typing import Iterable, Mapping, Optional

from finata.domain.entities import BASE_CURRENCY, Wallet


def to_base(
    amount: Decimal,
    currency: str,
    rates: Mapping[str, Decimal],
    base: str = BASE_CURRENCY,
) -> Optional[Decimal]:
    """Convert ``amount`` of ``currency`` into the base currency.

    Returns None when the rate table has no factor for ``currency``.
    """
    if currency == base:
        return amount
    rate = rates.get(currency)
    if rate is None:
        return None
    return amount * rate


def secondary_display(wallet: Wallet, rates: Mapping[str, Decimal]) -> Optional[Decimal]:
    """Base-currency amount shown next to a foreign wallet's own balance."""
    if wallet.currency == BASE_CURRENCY:
        return None
    return to_base(wallet.balance, wallet.currency, rates)


def net_worth(
    wallets: Iterable[Wallet], rates: Mapping[str, Decimal]
) -> tuple[Decimal, tuple[str, ...]]:
    """Sum every wallet's balance in the base currency.

    Wallets whose currency has no rate are left out of the sum.

    Returns:
        The total and the sorted currencies that were left out
    """
    total = Decimal("0")
    excluded = set()
    for wallet in wallets:
        converted = to_base(wallet.balance, wallet.currency, rates)
        if converted is None:
            excluded.add(wallet.currency)
            continue
        total += converted
    return total, tuple(sorted(excluded))
