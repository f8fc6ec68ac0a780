#!/usr/bin/env python3

from models.period import PERIOD_MODES, PeriodCursor
from tools.periods import period_summary, subcategory_breakdown
from cli.common import format_amount
from logger import get_logger

logger = get_logger()


def cmd_summary(args, services):
    """Show totals and the expense breakdown for a month or year."""
    symbol = services.config.currency_symbol
    doc = services.document
    summary = period_summary(doc, PeriodCursor(args.mode, args.offset))

    logger.info(f"\n{summary.title} - {summary.subtitle}")
    logger.info("=" * 80)
    logger.info(f"Income:       {format_amount(summary.totals.income, symbol)}")
    logger.info(f"Expense:      {format_amount(summary.totals.expense, symbol)}")
    logger.info(f"Balance:      {format_amount(summary.totals.balance, symbol)}")
    logger.info(f"Transactions: {summary.count}")

    if not summary.categories:
        logger.info("\nNo expense data for this period.")
        return

    logger.info("\nExpenses by category:")
    logger.info("-" * 80)
    for share in summary.categories:
        emoji = share.emoji or "💸"
        logger.info(
            f"{emoji} {share.name:<30} {format_amount(share.amount, symbol):>14}  {share.percentage}%"
        )
        subs = subcategory_breakdown(
            share.category_id, summary.transactions, share.amount, doc.categories
        )
        for sub in subs:
            logger.info(
                f"      {sub.name:<26} {format_amount(sub.amount, symbol):>14}  {sub.percentage}%"
            )


def setup_parser(subparsers):
    """Setup summary command parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "summary",
        help="Show period totals and category breakdown",
        description="Income, expense, balance and expenses by category for a period",
    )
    parser.add_argument("--mode", choices=PERIOD_MODES, default="month")
    parser.add_argument(
        "--offset", type=int, default=0, help="Periods from now (-1 = previous)"
    )
    parser.set_defaults(func=cmd_summary)
