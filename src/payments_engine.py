import logging
from typing import Dict, Iterable, Optional

from models import Transaction, AccountSnapshot
from ledger_engine import LedgerEngine
from transaction_reader import read_transactions

logger = logging.getLogger(__name__)


class PaymentsEngine:
    """
    Feeds transactions into a LedgerEngine strictly in order.
    Parse and I/O errors propagate to the caller and abort the run;
    transactions applied before the failure are not rolled back.
    """

    def __init__(self, ledger: Optional[LedgerEngine] = None):
        self._ledger = ledger if ledger is not None else LedgerEngine()

    def process_file(self, filepath: str) -> Dict[int, AccountSnapshot]:
        """Process CSV file and return final account states."""
        logger.info(f"Starting processing of {filepath}")
        count = self.process_transactions(read_transactions(filepath))
        logger.info(f"Processing complete: {count} transactions read")
        return self._ledger.snapshot()

    def process_transactions(self, transactions: Iterable[Transaction]) -> int:
        """Apply each transaction before pulling the next one. Returns how many were read."""
        count = 0
        for transaction in transactions:
            self._ledger.apply(transaction)
            count += 1
        return count

    def snapshot(self) -> Dict[int, AccountSnapshot]:
        return self._ledger.snapshot()
