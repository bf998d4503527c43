import logging

from models import Transaction, TransactionType, TransactionRecord, ClientAccount, ProcessingResult
from state_manager import StateManager

logger = logging.getLogger(__name__)


class TransactionProcessor:
    """
    Applies transactions to client accounts.
    Returns ProcessingResult so callers can tell an applied transaction
    from one rejected by a rule precondition. Rejections never raise.
    """

    def __init__(self, state: StateManager):
        self._state = state

    def process_transaction(self, transaction: Transaction) -> ProcessingResult:
        """
        Process a single transaction against its client's account,
        creating the account on first reference.

        Returns:
            SUCCESS: Balances and dispute state were updated
            anything else: The reason the transaction was a no-op
        """
        account = self._state.get_or_create_account(transaction.client_id)

        if account.locked:
            return ProcessingResult.ACCOUNT_LOCKED

        match transaction.transaction_type:
            case TransactionType.DEPOSIT:
                return self._handle_deposit(account, transaction)
            case TransactionType.WITHDRAWAL:
                return self._handle_withdrawal(account, transaction)
            case TransactionType.DISPUTE:
                return self._handle_dispute(account, transaction)
            case TransactionType.RESOLVE:
                return self._handle_resolve(account, transaction)
            case TransactionType.CHARGEBACK:
                return self._handle_chargeback(account, transaction)

    def _handle_deposit(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        if transaction.amount is None or transaction.amount < 0:
            logger.debug(f"Deposit tx {transaction.transaction_id}: invalid amount {transaction.amount}")
            return ProcessingResult.INVALID_AMOUNT

        # A reused id replaces its record, unless that record is under dispute.
        existing = account.history.get(transaction.transaction_id)
        if existing is not None and existing.disputed:
            logger.debug(f"Deposit tx {transaction.transaction_id}: record is under dispute for client {account.client_id}, skipping")
            return ProcessingResult.ALREADY_DISPUTED

        account.credit(transaction.amount)
        account.history[transaction.transaction_id] = TransactionRecord(amount=transaction.amount)
        return ProcessingResult.SUCCESS

    def _handle_withdrawal(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        if transaction.amount is None or transaction.amount < 0:
            logger.debug(f"Withdrawal tx {transaction.transaction_id}: invalid amount {transaction.amount}")
            return ProcessingResult.INVALID_AMOUNT

        if account.available < transaction.amount:
            logger.debug(f"Withdrawal tx {transaction.transaction_id}: insufficient funds ({account.available} < {transaction.amount})")
            return ProcessingResult.INSUFFICIENT_FUNDS

        account.debit(transaction.amount)
        return ProcessingResult.SUCCESS

    def _handle_dispute(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        original = account.history.get(transaction.transaction_id)

        if original is None:
            logger.debug(f"Dispute for tx {transaction.transaction_id}: no deposit with that id for client {account.client_id}")
            return ProcessingResult.TRANSACTION_NOT_FOUND

        if original.disputed:
            logger.debug(f"Dispute for tx {transaction.transaction_id}: transaction already disputed")
            return ProcessingResult.ALREADY_DISPUTED

        # Held funds must be backed by what is still available.
        if account.available < original.amount:
            logger.debug(f"Dispute for tx {transaction.transaction_id}: available {account.available} does not cover {original.amount}")
            return ProcessingResult.INSUFFICIENT_FUNDS

        account.hold(original.amount)
        original.disputed = True
        return ProcessingResult.SUCCESS

    def _handle_resolve(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        original = account.history.get(transaction.transaction_id)

        if original is None:
            return ProcessingResult.TRANSACTION_NOT_FOUND

        if not original.disputed:
            return ProcessingResult.NOT_DISPUTED

        account.release_hold(original.amount)
        original.disputed = False
        return ProcessingResult.SUCCESS

    def _handle_chargeback(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        original = account.history.get(transaction.transaction_id)

        if original is None:
            return ProcessingResult.TRANSACTION_NOT_FOUND

        if not original.disputed:
            return ProcessingResult.NOT_DISPUTED

        account.remove_held(original.amount)
        account.locked = True
        original.disputed = False
        return ProcessingResult.SUCCESS
