#!/usr/bin/env python3

from datetime import date

from models.period import PERIOD_MODES, PeriodCursor
from models.transaction import TRANSACTION_TYPES
from tools.periods import period_summary
from cli.common import format_amount, parse_date, sync_after_mutation
from logger import get_logger

logger = get_logger()


def _describe(transaction, services) -> str:
    category = services.categories.find(transaction.category_id)
    title = category.name if category else "Other"
    if category:
        sub = category.find_subcategory(transaction.subcategory_id)
        if sub:
            title += f" · {sub.name}"
    emoji = category.emoji if category else "💸"
    sign = "+" if transaction.type == "income" else "-"
    amount = format_amount(transaction.amount, services.config.currency_symbol)
    note = f"  ({transaction.note})" if transaction.note else ""
    return f"  {emoji} {title}  {sign}{amount}  [{transaction.id}]{note}"


def cmd_list(args, services):
    """List the transactions of a month or year, grouped by day."""
    symbol = services.config.currency_symbol
    summary = period_summary(services.document, PeriodCursor(args.mode, args.offset))

    logger.info(f"\n{summary.title} - {summary.subtitle}")
    logger.info("=" * 80)
    logger.info(
        f"Income: {format_amount(summary.totals.income, symbol)}  "
        f"Expense: {format_amount(summary.totals.expense, symbol)}  "
        f"Balance: {format_amount(summary.totals.balance, symbol)}"
    )

    if not summary.transactions:
        logger.info("No entries for this period.")
        return

    for day in summary.days:
        logger.info(
            f"\n{day.date.strftime('%a, %d %b')}  "
            f"Inc {format_amount(day.income, symbol)} · Exp {format_amount(day.expense, symbol)}"
        )
        for transaction in day.transactions:
            logger.info(_describe(transaction, services))


def cmd_add(args, services):
    """Record a new transaction."""
    transaction = services.transactions.add(
        type=args.type,
        amount=args.amount,
        date=args.date or date.today(),
        category_id=args.category,
        subcategory_id=args.subcategory,
        note=args.note or "",
    )
    logger.info(f"✓ Transaction added with ID: {transaction.id}")
    sync_after_mutation(services, "transaction added")


def cmd_edit(args, services):
    """Edit an existing transaction; unspecified fields keep their values."""
    current = services.transactions.find(args.transaction_id)
    if current is None:
        logger.error(f"Transaction with ID {args.transaction_id} not found.")
        raise SystemExit(1)

    category_id = current.category_id if args.category is None else args.category
    if args.subcategory is not None:
        subcategory_id = args.subcategory
    elif category_id == current.category_id:
        subcategory_id = current.subcategory_id
    else:
        subcategory_id = None

    transaction = services.transactions.update(
        args.transaction_id,
        type=args.type or current.type,
        amount=args.amount if args.amount is not None else current.amount,
        date=args.date or current.date,
        category_id=category_id,
        subcategory_id=subcategory_id,
        note=current.note if args.note is None else args.note,
    )
    logger.info(f"✓ Transaction {transaction.id} updated")
    sync_after_mutation(services, "transaction edited")


def cmd_delete(args, services):
    """Delete a transaction by ID."""
    if not services.transactions.delete(args.transaction_id):
        logger.error(f"Transaction with ID {args.transaction_id} not found.")
        raise SystemExit(1)
    logger.info(f"✓ Transaction {args.transaction_id} deleted")
    sync_after_mutation(services, "transaction deleted")


def setup_parser(subparsers):
    """Setup transactions subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "transactions",
        help="Record and list transactions",
        description="Add, edit, delete and list income/expense transactions",
    )

    transactions_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available transaction commands",
        dest="subcommand",
        required=True,
    )

    list_parser = transactions_subparsers.add_parser(
        "list", help="List transactions for a month or year"
    )
    list_parser.add_argument("--mode", choices=PERIOD_MODES, default="month")
    list_parser.add_argument(
        "--offset", type=int, default=0, help="Periods from now (-1 = previous)"
    )
    list_parser.set_defaults(func=cmd_list)

    add_parser = transactions_subparsers.add_parser("add", help="Add a transaction")
    add_parser.add_argument("type", choices=TRANSACTION_TYPES)
    add_parser.add_argument("amount", help="Positive amount, e.g. 250 or 12.50")
    add_parser.add_argument(
        "--date", type=parse_date, default=None, help="YYYY-MM-DD (default: today)"
    )
    add_parser.add_argument("--category", help="Category ID")
    add_parser.add_argument("--subcategory", help="Subcategory ID")
    add_parser.add_argument("--note", help="Optional note")
    add_parser.set_defaults(func=cmd_add)

    edit_parser = transactions_subparsers.add_parser("edit", help="Edit a transaction")
    edit_parser.add_argument("transaction_id")
    edit_parser.add_argument("--type", choices=TRANSACTION_TYPES)
    edit_parser.add_argument("--amount")
    edit_parser.add_argument("--date", type=parse_date)
    edit_parser.add_argument("--category", help="Category ID ('' to clear)")
    edit_parser.add_argument("--subcategory", help="Subcategory ID ('' to clear)")
    edit_parser.add_argument("--note")
    edit_parser.set_defaults(func=cmd_edit)

    delete_parser = transactions_subparsers.add_parser(
        "delete", help="Delete a transaction by ID"
    )
    delete_parser.add_argument("transaction_id")
    delete_parser.set_defaults(func=cmd_delete)
