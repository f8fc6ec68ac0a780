"""Period aggregation tools: windowing, totals and breakdowns for one month or year."""

from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Optional, Tuple

from dateutil.relativedelta import relativedelta

from models.category import Category
from models.document import Document
from models.period import MONTH, PeriodCursor
from models.transaction import EXPENSE, INCOME, Transaction, parse_amount

OTHER_ID = "other"
OTHER_NAME = "Other"

ZERO = Decimal("0")


@dataclass(frozen=True)
class PeriodWindow:
    """The calendar month or year a cursor points at."""

    mode: str
    start: date

    def matches(self, day: Optional[date]) -> bool:
        """Check whether a date falls inside the window (calendar fields only)."""
        if day is None:
            return False
        if self.mode == MONTH:
            return (day.year, day.month) == (self.start.year, self.start.month)
        return day.year == self.start.year


@dataclass(frozen=True)
class Totals:
    income: Decimal = ZERO
    expense: Decimal = ZERO
    balance: Decimal = ZERO


@dataclass
class DayGroup:
    """Transactions of one day with that day's subtotals."""

    date: date
    transactions: List[Transaction] = field(default_factory=list)
    income: Decimal = ZERO
    expense: Decimal = ZERO


@dataclass(frozen=True)
class CategoryShare:
    category_id: str
    name: str
    emoji: Optional[str]
    amount: Decimal
    percentage: int  # of total expense


@dataclass(frozen=True)
class SubcategoryShare:
    subcategory_id: Optional[str]  # None for the "Other" bucket
    name: str
    amount: Decimal
    percentage: int  # of the category total


@dataclass
class PeriodSummary:
    """Everything a summary view needs for one period."""

    window: PeriodWindow
    title: str
    subtitle: str
    transactions: List[Transaction]
    totals: Totals
    days: List[DayGroup]
    categories: List[CategoryShare]

    @property
    def count(self) -> int:
        return len(self.transactions)


def amount_of(transaction: Transaction) -> Decimal:
    """Get a transaction's amount for aggregation; anything non-numeric counts as zero."""
    amount = transaction.amount
    if isinstance(amount, Decimal):
        return amount if amount.is_finite() else ZERO
    parsed = parse_amount(amount)
    return parsed if parsed is not None else ZERO


def percent_of(amount: Decimal, total: Decimal) -> int:
    """Whole-number percentage, rounding halves up. Zero when total is zero."""
    if not total:
        return 0
    return int((amount * 100 / total).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def resolve_window(cursor: PeriodCursor, today: Optional[date] = None) -> PeriodWindow:
    """Resolve a cursor to the calendar window it selects.

    Args:
        cursor: Mode and offset relative to the current month/year.
        today: Reference date; defaults to today's local date.

    Returns:
        PeriodWindow starting on the first day of the month (month mode) or
        January 1st (year mode).
    """
    today = today or date.today()
    if cursor.mode == MONTH:
        start = today.replace(day=1) + relativedelta(months=cursor.offset)
    else:
        start = date(today.year + cursor.offset, 1, 1)
    return PeriodWindow(mode=cursor.mode, start=start)


def filter_and_sort(
    doc: Document, cursor: PeriodCursor, today: Optional[date] = None
) -> List[Transaction]:
    """Get the transactions inside the cursor's window, newest date first.

    Transactions sharing a date keep no particular order.
    """
    window = resolve_window(cursor, today)
    matching = [t for t in doc.transactions if window.matches(t.date)]
    return sorted(matching, key=lambda t: t.date, reverse=True)


def totals(transactions: List[Transaction]) -> Totals:
    """Sum income and expense separately.

    Returns:
        Totals with balance = income - expense (all zero for no transactions).
    """
    income = ZERO
    expense = ZERO
    for transaction in transactions:
        if transaction.type == INCOME:
            income += amount_of(transaction)
        elif transaction.type == EXPENSE:
            expense += amount_of(transaction)
    return Totals(income=income, expense=expense, balance=income - expense)


def group_by_day(transactions: List[Transaction]) -> List[DayGroup]:
    """Group transactions by date, newest day first, with per-day subtotals."""
    groups: Dict[date, DayGroup] = {}
    for transaction in transactions:
        group = groups.get(transaction.date)
        if group is None:
            group = groups[transaction.date] = DayGroup(date=transaction.date)
        group.transactions.append(transaction)

        if transaction.type == INCOME:
            group.income += amount_of(transaction)
        elif transaction.type == EXPENSE:
            group.expense += amount_of(transaction)

    return [groups[day] for day in sorted(groups, reverse=True)]


def category_breakdown(
    transactions: List[Transaction],
    categories: Optional[Dict[str, Category]] = None,
) -> List[CategoryShare]:
    """Break expenses down by category, largest first.

    Transactions without a category, or with one not in ``categories``, are
    bucketed together under "Other".

    Args:
        transactions: Transactions of the period (income is ignored).
        categories: Known categories, used for names and to detect unknown ids.

    Returns:
        One CategoryShare per category with a non-zero amount; empty when
        there is no expense.
    """
    expenses = [t for t in transactions if t.type == EXPENSE]
    total_expense = sum((amount_of(t) for t in expenses), ZERO)
    if not total_expense:
        return []

    by_category: Dict[str, Decimal] = {}
    for transaction in expenses:
        key = _category_key(transaction, categories)
        by_category[key] = by_category.get(key, ZERO) + amount_of(transaction)

    shares = []
    for category_id, amount in by_category.items():
        if not amount:
            continue
        category = (categories or {}).get(category_id)
        shares.append(
            CategoryShare(
                category_id=category_id,
                name=category.name if category else OTHER_NAME,
                emoji=category.emoji if category else None,
                amount=amount,
                percentage=percent_of(amount, total_expense),
            )
        )

    return sorted(shares, key=lambda s: s.amount, reverse=True)


def subcategory_breakdown(
    category_id: str,
    transactions: List[Transaction],
    category_total: Decimal,
    categories: Optional[Dict[str, Category]] = None,
) -> List[SubcategoryShare]:
    """Break one category's expenses down by subcategory, largest first.

    Transactions whose subcategory is missing or no longer exists fold into
    a synthetic "Other" bucket. Zero-amount buckets are omitted.

    Args:
        category_id: Category to expand (as returned by category_breakdown).
        transactions: Transactions of the period.
        category_total: The category's expense total, the base for percentages.
        categories: Known categories.

    Returns:
        SubcategoryShare list. An unknown category yields a single "Other"
        bucket holding the whole category total.
    """
    category = (categories or {}).get(category_id)
    if category is None:
        if not category_total:
            return []
        return [
            SubcategoryShare(
                subcategory_id=None,
                name=OTHER_NAME,
                amount=category_total,
                percentage=percent_of(category_total, category_total),
            )
        ]

    amounts: Dict[str, Decimal] = {sub.id: ZERO for sub in category.subcategories}
    other = ZERO
    for transaction in transactions:
        if transaction.type != EXPENSE or transaction.category_id != category_id:
            continue
        if transaction.subcategory_id in amounts:
            amounts[transaction.subcategory_id] += amount_of(transaction)
        else:
            other += amount_of(transaction)

    shares = [
        SubcategoryShare(
            subcategory_id=sub.id,
            name=sub.name,
            amount=amounts[sub.id],
            percentage=percent_of(amounts[sub.id], category_total),
        )
        for sub in category.subcategories
        if amounts[sub.id]
    ]
    if other:
        shares.append(
            SubcategoryShare(
                subcategory_id=None,
                name=OTHER_NAME,
                amount=other,
                percentage=percent_of(other, category_total),
            )
        )

    return sorted(shares, key=lambda s: s.amount, reverse=True)


def period_labels(cursor: PeriodCursor, today: Optional[date] = None) -> Tuple[str, str]:
    """Get the header title and relative description for a cursor.

    Returns:
        (title, subtitle), e.g. ("Mar 2024", "This month") or
        ("2022", "2 years ago").
    """
    window = resolve_window(cursor, today)
    offset = cursor.offset

    if cursor.mode == MONTH:
        title = window.start.strftime("%b %Y")
        named = {0: "This month", -1: "Previous month", 1: "Next month"}
        unit = "months"
    else:
        title = str(window.start.year)
        named = {0: "This year", -1: "Last year", 1: "Next year"}
        unit = "years"

    if offset in named:
        return title, named[offset]
    if offset < 0:
        return title, f"{abs(offset)} {unit} ago"
    return title, f"{offset} {unit} ahead"


def period_summary(
    doc: Document, cursor: PeriodCursor, today: Optional[date] = None
) -> PeriodSummary:
    """Compute everything shown for one period in a single pass over the document."""
    window = resolve_window(cursor, today)
    title, subtitle = period_labels(cursor, today)
    transactions = filter_and_sort(doc, cursor, today)

    return PeriodSummary(
        window=window,
        title=title,
        subtitle=subtitle,
        transactions=transactions,
        totals=totals(transactions),
        days=group_by_day(transactions),
        categories=category_breakdown(transactions, doc.categories),
    )


def _category_key(
    transaction: Transaction, categories: Optional[Dict[str, Category]]
) -> str:
    category_id = transaction.category_id
    if not category_id:
        return OTHER_ID
    if categories is not None and category_id not in categories:
        return OTHER_ID
    return category_id
