#!/usr/bin/env python3

import sys
from cli.common import confirm, split_names, sync_after_mutation
from logger import get_logger

logger = get_logger()


def cmd_list(args, services):
    """List all categories with their subcategories."""
    categories = services.categories.find_all()

    if not categories:
        logger.info("No categories. Add one.")
        return

    logger.info("\nCategories:")
    logger.info("=" * 80)
    for category in categories:
        logger.info(f"{category.emoji} {category.name} (ID: {category.id})")
        for sub in category.subcategories:
            logger.info(f"    {sub.name} (ID: {sub.id})")
        logger.info("-" * 80)

    logger.info(f"\nTotal categories: {len(categories)}")


def cmd_create(args, services):
    """Create a new category."""
    category = services.categories.create(
        args.name, args.emoji, split_names(args.subcategories)
    )
    logger.info(f"✓ Category created successfully with ID: {category.id}")
    for sub in category.subcategories:
        logger.info(f"  {sub.name} (ID: {sub.id})")
    sync_after_mutation(services, "category created")


def cmd_edit(args, services):
    """Edit a category; unspecified fields keep their values."""
    category = services.categories.find(args.category_id)
    if not category:
        logger.error(f"Category with ID {args.category_id} not found.")
        sys.exit(1)

    if args.subcategories is None:
        subcategories = list(category.subcategories)
    else:
        subcategories = services.categories.subcategories_from_names(
            category, split_names(args.subcategories)
        )

    services.categories.edit_category(
        args.category_id,
        args.name if args.name is not None else category.name,
        args.emoji if args.emoji is not None else category.emoji,
        subcategories,
    )
    logger.info(f"✓ Category '{category.name}' updated")
    sync_after_mutation(services, "category edited")


def cmd_delete(args, services):
    """Delete a category by ID; its transactions become uncategorized."""
    category = services.categories.find(args.category_id)
    if not category:
        logger.error(f"Category with ID {args.category_id} not found.")
        sys.exit(1)

    used = services.categories.usage_count(category.id)
    if used and not args.yes:
        if not confirm(
            f"{used} transaction(s) use '{category.name}'. Delete anyway?"
        ):
            logger.info("Deletion cancelled.")
            return

    cleared = services.categories.delete_category(category.id)
    logger.info(f"✓ Category '{category.name}' deleted successfully.")
    if cleared:
        logger.info(f"  {cleared} transaction(s) are now uncategorized")
    sync_after_mutation(services, "category deleted")


def setup_parser(subparsers):
    """Setup categories subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "categories",
        help="Manage categories",
        description="Create, list, edit and delete transaction categories",
    )

    categories_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available category commands",
        dest="subcommand",
        required=True,
    )

    list_parser = categories_subparsers.add_parser("list", help="List all categories")
    list_parser.set_defaults(func=cmd_list)

    create_parser = categories_subparsers.add_parser(
        "create", help="Create a new category"
    )
    create_parser.add_argument("name", help="Category name (e.g., Groceries)")
    create_parser.add_argument("--emoji", help="Glyph shown next to the name")
    create_parser.add_argument(
        "--subcategories", help="Comma-separated subcategory names"
    )
    create_parser.set_defaults(func=cmd_create)

    edit_parser = categories_subparsers.add_parser("edit", help="Edit a category")
    edit_parser.add_argument("category_id", help="ID of the category to edit")
    edit_parser.add_argument("--name")
    edit_parser.add_argument("--emoji")
    edit_parser.add_argument(
        "--subcategories",
        help="Complete comma-separated subcategory list (replaces the current one)",
    )
    edit_parser.set_defaults(func=cmd_edit)

    delete_parser = categories_subparsers.add_parser(
        "delete", help="Delete a category by ID"
    )
    delete_parser.add_argument("category_id", help="ID of the category to delete")
    delete_parser.add_argument(
        "--yes", action="store_true", help="Do not ask for confirmation"
    )
    delete_parser.set_defaults(func=cmd_delete)
