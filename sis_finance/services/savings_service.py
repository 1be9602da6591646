"""
SavingsService -- per-student savings balances with an append-only log.

Responsibility:
    Applies deposits and withdrawals to a student's savings account and
    appends the matching SavingTransaction, creating the account on first
    use.  Also serves the read side of the savings book.

Architecture position:
    Ledger > Services.  The only read-modify-write in the ledger that must
    serialize across concurrent callers.

Invariants enforced:
    - balance >= 0 after every committed transaction.
    - balance == sum(Deposit) - sum(Withdrawal) over the account's log.
      The balance update and the log append happen in one savepoint, so
      they land together or not at all.
    - One account per student.  A concurrent first-deposit race is
      resolved by the unique constraint: the loser rolls back its inner
      savepoint and re-selects the winner's row with the lock.

Concurrency:
    ``SELECT ... FOR UPDATE`` on the account row.  Two transactions for
    the same student serialize; different students never block each
    other.  On SQLite the engine opens every transaction with
    ``BEGIN IMMEDIATE``, which serializes writers database-wide.

Failure modes:
    - ValidationError: unknown transaction type, or amount <= 0.
    - InsufficientBalanceError: withdrawal larger than the balance.  Nothing
      is written, including an account created by this same call.
    - PersistenceError: any other store failure.
"""

from decimal import Decimal
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from sis_finance.domain.dtos import SavingAccountInfo, SavingTransactionInfo
from sis_finance.domain.requests import (
    parse_amount,
    parse_saving_transaction_type,
)
from sis_finance.exceptions import (
    InsufficientBalanceError,
    PersistenceError,
    SavingAccountNotFoundError,
)
from sis_finance.logging_config import LogContext, get_logger
from sis_finance.models.savings import (
    SavingAccount,
    SavingTransaction,
    SavingTransactionType,
)
from sis_finance.services.base import BaseService

logger = get_logger("services.savings")


class SavingsService(BaseService[SavingAccount]):
    """
    Savings transaction processor.

    Contract:
        ``process_transaction`` is atomic on its own: it runs inside a
        savepoint of the caller's transaction.  The row lock is held until
        the caller commits or rolls back.

    Non-goals:
        - Does NOT call ``session.commit()``.
        - Transactions are never edited or deleted.
    """

    def process_transaction(
        self,
        student_id: UUID,
        handled_by_id: UUID,
        txn_type: SavingTransactionType | str,
        amount: Decimal,
        notes: str = "",
    ) -> SavingTransactionInfo:
        """
        Apply a deposit or withdrawal and append it to the log.

        Preconditions:
            - ``txn_type`` is "Deposit" or "Withdrawal".
            - ``amount`` > 0.

        Postconditions:
            - The account exists and its balance reflects the transaction.
            - Exactly one SavingTransaction row was appended.

        Raises:
            ValidationError: Bad type or amount.
            InsufficientBalanceError: Withdrawal exceeds the balance.
        """
        txn_type = parse_saving_transaction_type(txn_type)
        amount = parse_amount(amount, "amount", positive=True)

        with LogContext.bind(student_id=str(student_id), actor_id=str(handled_by_id)):
            try:
                with self.session.begin_nested():
                    account = self._lock_or_create_account(student_id)
                    balance_before = account.balance

                    if txn_type == SavingTransactionType.DEPOSIT:
                        account.balance = balance_before + amount
                    elif balance_before < amount:
                        logger.warning(
                            "insufficient_balance",
                            extra={
                                "account_id": str(account.id),
                                "balance": str(balance_before),
                                "requested": str(amount),
                            },
                        )
                        raise InsufficientBalanceError(
                            str(account.id), balance_before, amount
                        )
                    else:
                        account.balance = balance_before - amount

                    now = self._clock.now()
                    account.updated_at = now
                    self.session.flush()

                    txn = SavingTransaction(
                        account_id=account.id,
                        type=txn_type.value,
                        amount=amount,
                        date=now,
                        handled_by_id=handled_by_id,
                        notes=notes,
                    )
                    self.session.add(txn)
                    self.session.flush()
            except SQLAlchemyError as exc:
                raise PersistenceError("process_saving_transaction") from exc

            logger.info(
                "saving_transaction_processed",
                extra={
                    "account_id": str(account.id),
                    "transaction_id": str(txn.id),
                    "type": txn_type.value,
                    "amount": str(amount),
                    "balance_before": str(balance_before),
                    "balance_after": str(account.balance),
                },
            )
            return SavingTransactionInfo.from_model(txn)

    def _lock_or_create_account(self, student_id: UUID) -> SavingAccount:
        account = self._select_for_update(student_id)
        if account is not None:
            return account

        savepoint = self.session.begin_nested()
        try:
            account = SavingAccount(student_id=student_id, balance=Decimal("0"))
            self.session.add(account)
            self.session.flush()
            savepoint.commit()
            logger.info(
                "saving_account_created",
                extra={"account_id": str(account.id)},
            )
            return account
        except IntegrityError:
            logger.debug("saving_account_race_retry")
            savepoint.rollback()
            account = self._select_for_update(student_id)
            if account is None:
                raise
            return account

    def _select_for_update(self, student_id: UUID) -> SavingAccount | None:
        return self.session.execute(
            select(SavingAccount)
            .where(SavingAccount.student_id == student_id)
            # lock only the account row, not the eager-loaded directory rows
            .with_for_update(of=SavingAccount)
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get_student_account(self, student_id: UUID) -> SavingAccountInfo:
        account = self.session.execute(
            select(SavingAccount).where(SavingAccount.student_id == student_id)
        ).scalar_one_or_none()
        if account is None:
            raise SavingAccountNotFoundError(str(student_id))
        return SavingAccountInfo.from_model(account)

    def get_all_accounts(self) -> list[SavingAccountInfo]:
        """All accounts, most recently active first."""
        accounts = self.session.execute(
            select(SavingAccount).order_by(SavingAccount.updated_at.desc())
        ).scalars().all()
        return [SavingAccountInfo.from_model(a) for a in accounts]

    def get_transactions(self, account_id: UUID) -> list[SavingTransactionInfo]:
        """An account's log, newest first."""
        rows = self.session.execute(
            select(SavingTransaction)
            .where(SavingTransaction.account_id == account_id)
            .order_by(SavingTransaction.date.desc())
        ).scalars().all()
        return [SavingTransactionInfo.from_model(t) for t in rows]

    def verify_account(self, account_id: UUID) -> bool:
        """
        Recompute the balance from the log and compare with the stored one.

        Raises:
            SavingAccountNotFoundError: No such account.
        """
        account = self.session.get(SavingAccount, account_id)
        if account is None:
            raise SavingAccountNotFoundError(str(account_id))

        totals = dict(
            self.session.execute(
                select(SavingTransaction.type, func.sum(SavingTransaction.amount))
                .where(SavingTransaction.account_id == account_id)
                .group_by(SavingTransaction.type)
            ).all()
        )
        deposits = Decimal(totals.get(SavingTransactionType.DEPOSIT.value) or 0)
        withdrawals = Decimal(totals.get(SavingTransactionType.WITHDRAWAL.value) or 0)
        expected = deposits - withdrawals

        if expected != account.balance:
            logger.error(
                "saving_account_balance_mismatch",
                extra={
                    "account_id": str(account_id),
                    "stored_balance": str(account.balance),
                    "log_balance": str(expected),
                },
            )
            return False
        return True
