"""Utility for resolving wallet names to IDs."""

from finata.domain.errors import NotFoundError, ValidationError
from finata.domain.wallet import WalletService


def resolve_wallet(wallet_service: WalletService, wallet: str) -> str:
    """Resolve a wallet name, ID or unique ID prefix to the wallet ID.

    Args:
        wallet_service: WalletService instance
        wallet: Wallet name, full ID, or a prefix of an ID (at least 4 characters)

    Returns:
        Wallet ID

    Raises:
        NotFoundError: If no wallet matches
        ValidationError: If an ID prefix matches more than one wallet
    """
    wallet = wallet.strip()
    wallets = wallet_service.list_wallets()

    for candidate in wallets:
        if candidate.id == wallet:
            return candidate.id

    for candidate in wallets:
        if candidate.name == wallet:
            return candidate.id

    if len(wallet) >= 4:
        matches = [candidate for candidate in wallets if candidate.id.startswith(wallet)]
        if len(matches) == 1:
            return matches[0].id
        if len(matches) > 1:
            raise ValidationError(f"Wallet ID prefix '{wallet}' is ambiguous")

    raise NotFoundError(f"Wallet '{wallet}' not found")
