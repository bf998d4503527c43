import logging
from typing import Dict, Iterable

from models import Transaction, ClientAccount, ProcessingResult, ProcessingStats
from state_manager import StateManager
from transaction_processor import TransactionProcessor
from transaction_reader import read_transactions

logger = logging.getLogger(__name__)


class PaymentsEngine:
    """
    Replays transactions against client accounts, one at a time and
    strictly in arrival order.
    """

    def __init__(self):
        self._state = StateManager()
        self._processor = TransactionProcessor(self._state)
        self._stats = ProcessingStats()

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def apply(self, transaction: Transaction) -> ProcessingResult:
        """Apply a single transaction. Rejections are returned, never raised."""
        result = self._processor.process_transaction(transaction)
        self._stats.record(result)
        if not result.applied:
            logger.debug(f"Rejected {transaction}: {result.value}")
        return result

    def process(self, transactions: Iterable[Transaction]) -> Dict[int, ClientAccount]:
        """Apply every transaction in order and return final account states."""
        for transaction in transactions:
            self.apply(transaction)
        return self.accounts()

    def process_file(self, filepath: str) -> Dict[int, ClientAccount]:
        """Process CSV file and return final account states."""
        logger.info(f"Processing transactions from {filepath}")

        with open(filepath, "r", newline="") as f:
            accounts = self.process(read_transactions(f))

        logger.info(self._stats.summary())
        return accounts

    def accounts(self) -> Dict[int, ClientAccount]:
        """Snapshot of all known accounts keyed by client id."""
        return self._state.get_all_accounts()
