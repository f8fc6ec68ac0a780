from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional

INCOME = "income"
EXPENSE = "expense"
TRANSACTION_TYPES = (INCOME, EXPENSE)


def parse_amount(value) -> Optional[Decimal]:
    """Parse a JSON/user amount into a Decimal, or None if it is not numeric."""
    if value is None or isinstance(value, bool):
        return None
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not amount.is_finite():
        return None
    return amount


@dataclass
class Transaction:
    id: str  # creation-time millisecond token
    type: str  # 'income' or 'expense'
    amount: Decimal  # always positive
    date: date
    category_id: Optional[str] = None
    subcategory_id: Optional[str] = None
    note: str = ""

    def to_dict(self) -> dict:
        """Convert transaction to its persisted JSON form."""
        return {
            "id": self.id,
            "type": self.type,
            "amount": _amount_to_json(self.amount),
            "catId": self.category_id,
            "subId": self.subcategory_id,
            "date": self.date.isoformat(),
            "note": self.note,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Transaction":
        """Build a Transaction from its persisted JSON form.

        A missing or non-numeric amount becomes zero and an unknown type
        becomes an expense.

        Raises:
            ValueError: If the record has no id or no parseable date.
        """
        tx_id = data.get("id")
        if tx_id is None or tx_id == "":
            raise ValueError("transaction has no id")
        try:
            tx_date = date.fromisoformat(str(data.get("date")))
        except ValueError:
            raise ValueError(f"transaction {tx_id} has no valid date")

        amount = parse_amount(data.get("amount"))
        tx_type = data.get("type")

        return cls(
            id=str(tx_id),
            type=tx_type if tx_type in TRANSACTION_TYPES else EXPENSE,
            amount=amount if amount is not None else Decimal("0"),
            date=tx_date,
            category_id=data.get("catId") or None,
            subcategory_id=data.get("subId") or None,
            note=data.get("note") or "",
        )


def _amount_to_json(amount: Decimal):
    # Numbers where a JSON number is exact; otherwise the decimal string.
    if amount == amount.to_integral_value():
        return int(amount)
    as_float = float(amount)
    if Decimal(repr(as_float)) == amount:
        return as_float
    return str(amount)
