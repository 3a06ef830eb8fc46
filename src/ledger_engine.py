from dataclasses import replace
from typing import Dict, Optional, Tuple

from models import Transaction, TransactionType, ClientAccount, TransactionHistoryEntry, AccountSnapshot
from ledger_store import LedgerStore


class LedgerEngine:
    """
    Applies transactions to a ledger store it owns exclusively.

    Any transaction that fails a business rule (insufficient funds, locked
    account, unknown or undisputed transaction) is dropped silently: the
    store is left untouched and nothing is raised or logged.

    Transaction IDs are assumed to be unique across all clients. A reused ID
    is not rejected; the later deposit or withdrawal replaces the history entry.
    """

    def __init__(self):
        self._store = LedgerStore()

    def apply(self, transaction: Transaction) -> None:
        match transaction.transaction_type:
            case TransactionType.DEPOSIT:
                self._handle_deposit(transaction)
            case TransactionType.WITHDRAWAL:
                self._handle_withdrawal(transaction)
            case TransactionType.DISPUTE:
                self._handle_dispute(transaction)
            case TransactionType.RESOLVE:
                self._handle_resolve(transaction)
            case TransactionType.CHARGEBACK:
                self._handle_chargeback(transaction)
            case _:
                pass

    def snapshot(self) -> Dict[int, AccountSnapshot]:
        """Return a point-in-time copy of every account. Order is unspecified."""
        return {
            client_id: AccountSnapshot.of(account)
            for client_id, account in self._store.get_all_accounts().items()
        }

    def history(self) -> Dict[int, TransactionHistoryEntry]:
        """Return copies of all transaction history entries."""
        return {
            transaction_id: replace(entry)
            for transaction_id, entry in self._store.get_all_transactions().items()
        }

    def get_history_entry(self, transaction_id: int) -> Optional[TransactionHistoryEntry]:
        entry = self._store.get_transaction(transaction_id)
        if entry is None:
            return None
        return replace(entry)

    def _handle_deposit(self, transaction: Transaction) -> None:
        if transaction.amount is None:
            return

        account = self._store.get_account(transaction.client_id)
        if account is None:
            self._store.insert_account(transaction.client_id, transaction.amount)
        elif account.locked:
            return
        else:
            account.credit(transaction.amount)

        self._store.insert_transaction(transaction.transaction_id, transaction.client_id, transaction.amount)

    def _handle_withdrawal(self, transaction: Transaction) -> None:
        if transaction.amount is None:
            return

        account = self._store.get_account(transaction.client_id)
        if account is None or account.locked:
            return

        if account.available < transaction.amount:
            return

        account.debit(transaction.amount)
        self._store.insert_transaction(transaction.transaction_id, transaction.client_id, transaction.amount)

    def _handle_dispute(self, transaction: Transaction) -> None:
        # The full original amount is held even if later withdrawals already
        # spent part of it, so available can go negative.
        found = self._find_disputable(transaction.transaction_id)
        if found is None:
            return

        entry, account = found
        account.hold(entry.amount)
        self._store.mark_transaction_disputed(transaction.transaction_id)

    def _handle_resolve(self, transaction: Transaction) -> None:
        found = self._find_disputable(transaction.transaction_id)
        if found is None:
            return

        entry, account = found
        if not entry.in_dispute:
            return

        account.release_hold(entry.amount)
        self._store.clear_transaction_dispute(transaction.transaction_id)

    def _handle_chargeback(self, transaction: Transaction) -> None:
        found = self._find_disputable(transaction.transaction_id)
        if found is None:
            return

        entry, account = found
        if not entry.in_dispute:
            return

        account.remove_held(entry.amount)
        self._store.lock_account(account.client_id)
        self._store.clear_transaction_dispute(transaction.transaction_id)

    def _find_disputable(self, transaction_id: int) -> Optional[Tuple[TransactionHistoryEntry, ClientAccount]]:
        """
        Look up a history entry and the account it belongs to.
        Returns None unless the entry carries an amount and its account exists
        and is not locked. The account comes from the entry, not the record.
        """
        entry = self._store.get_transaction(transaction_id)
        if entry is None or entry.amount is None:
            return None

        account = self._store.get_account(entry.client_id)
        if account is None or account.locked:
            return None

        return entry, account
