from decimal import Decimal
from typing import Dict, Optional

from models import ClientAccount, TransactionHistoryEntry


class LedgerStore:
    """
    In-memory state for one ledger run.
    Stores client accounts and transaction history for dispute lookups.
    Carries no validation; business rules live in LedgerEngine.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}
        self._transactions: Dict[int, TransactionHistoryEntry] = {}

    def get_account(self, client_id: int) -> Optional[ClientAccount]:
        """Retrieve account by client ID, or None if the client is unseen."""
        return self._accounts.get(client_id)

    def insert_account(self, client_id: int, available: Decimal) -> ClientAccount:
        """Create a new unlocked account with nothing held."""
        account = ClientAccount(client_id=client_id, available=available)
        self._accounts[client_id] = account
        return account

    def lock_account(self, client_id: int) -> None:
        self._accounts[client_id].locked = True

    def insert_transaction(self, transaction_id: int, client_id: int, amount: Optional[Decimal]) -> None:
        """Store transaction for future dispute lookups."""
        self._transactions[transaction_id] = TransactionHistoryEntry(client_id=client_id, amount=amount)

    def get_transaction(self, transaction_id: int) -> Optional[TransactionHistoryEntry]:
        """Retrieve stored transaction by ID."""
        return self._transactions.get(transaction_id)

    def mark_transaction_disputed(self, transaction_id: int) -> None:
        self._transactions[transaction_id].in_dispute = True

    def clear_transaction_dispute(self, transaction_id: int) -> None:
        self._transactions[transaction_id].in_dispute = False

    def get_all_accounts(self) -> Dict[int, ClientAccount]:
        """Return all accounts keyed by client ID."""
        return dict(self._accounts)

    def get_all_transactions(self) -> Dict[int, TransactionHistoryEntry]:
        return dict(self._transactions)
