"""Transaction service: entry, edit and deletion of transactions."""

from datetime import date
from decimal import Decimal
from typing import List, Optional, Union

from errors import ValidationError
from models.document import Document
from models.transaction import TRANSACTION_TYPES, Transaction, parse_amount
from services.ids import new_id
from logger import get_logger

logger = get_logger()


class TransactionService:
    """Service for managing transactions."""

    def __init__(self, document: Document, store):
        """Initialize the transaction service.

        Args:
            document: The shared in-memory document.
            store: StateStore used to persist after each change.
        """
        self.document = document
        self.store = store

    def find_all(self) -> List[Transaction]:
        """Get all transactions, in insertion order."""
        return list(self.document.transactions)

    def find(self, transaction_id: str) -> Optional[Transaction]:
        """Get a single transaction by ID.

        Returns:
            Transaction object if found, None otherwise.
        """
        return self.document.find_transaction(transaction_id)

    def add(
        self,
        type: str,
        amount: Union[Decimal, str, int, float],
        date: Optional[date],
        category_id: Optional[str] = None,
        subcategory_id: Optional[str] = None,
        note: str = "",
    ) -> Transaction:
        """Record a new transaction.

        Args:
            type: 'income' or 'expense'.
            amount: Positive amount.
            date: Calendar date of the transaction.
            category_id: Optional category ID.
            subcategory_id: Optional subcategory ID; dropped if it does not
                belong to the category.
            note: Optional free text.

        Returns:
            The created Transaction with its id populated.

        Raises:
            ValidationError: If any field is invalid. Nothing is saved.
        """
        fields = self._validate(type, amount, date, category_id, subcategory_id, note)
        existing = {t.id for t in self.document.transactions}
        transaction = Transaction(id=new_id(existing), **fields)

        self.document.transactions.append(transaction)
        self.store.save(self.document)

        logger.debug(f"Added transaction {transaction.id}")
        return transaction

    def update(
        self,
        transaction_id: str,
        type: str,
        amount: Union[Decimal, str, int, float],
        date: Optional[date],
        category_id: Optional[str] = None,
        subcategory_id: Optional[str] = None,
        note: str = "",
    ) -> Transaction:
        """Replace the fields of an existing transaction.

        Raises:
            ValidationError: If the transaction is not found or any field is
                invalid. Nothing is changed.
        """
        transaction = self.find(transaction_id)
        if transaction is None:
            raise ValidationError(f"Transaction with ID {transaction_id} not found")

        fields = self._validate(type, amount, date, category_id, subcategory_id, note)
        for name, value in fields.items():
            setattr(transaction, name, value)
        self.store.save(self.document)

        logger.debug(f"Updated transaction {transaction.id}")
        return transaction

    def delete(self, transaction_id: str) -> bool:
        """Delete a transaction by ID.

        Returns:
            True if the transaction was deleted, False if not found.
        """
        before = len(self.document.transactions)
        self.document.transactions = [
            t for t in self.document.transactions if t.id != transaction_id
        ]
        if len(self.document.transactions) == before:
            return False

        self.store.save(self.document)
        logger.debug(f"Deleted transaction {transaction_id}")
        return True

    def _validate(self, type, amount, date, category_id, subcategory_id, note) -> dict:
        if type not in TRANSACTION_TYPES:
            raise ValidationError(f"Unknown transaction type: {type}")

        parsed = parse_amount(amount)
        if parsed is None or parsed <= 0:
            raise ValidationError("Enter valid amount.")

        if date is None:
            raise ValidationError("Select date.")

        category_id = category_id or None
        subcategory_id = subcategory_id or None
        if category_id is not None:
            category = self.document.categories.get(category_id)
            if category is None:
                raise ValidationError(f"Category with ID {category_id} not found")
            if not category.find_subcategory(subcategory_id):
                subcategory_id = None
        else:
            subcategory_id = None

        return {
            "type": type,
            "amount": parsed,
            "date": date,
            "category_id": category_id,
            "subcategory_id": subcategory_id,
            "note": (note or "").strip(),
        }
