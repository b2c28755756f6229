"""Category management commands."""

import click
from cashflow.cli.error_handling import handle_domain_error
from cashflow.cli.options import TYPE_CHOICES
from cashflow.domain.category import CategoryService
from cashflow.domain.entities import CategoryLevel, PersonalSublevel, TransactionType
from cashflow.domain.errors import DomainError

LEVEL_CHOICES = [level.value for level in CategoryLevel]
SUBLEVEL_CHOICES = [sub.value for sub in PersonalSublevel]


@click.group()
def category_group():
    """Manage categories."""
    pass


@category_group.command("list")
@click.option("--type", "category_type", type=click.Choice(TYPE_CHOICES, case_sensitive=False), help="Only show one type")
@click.pass_context
def list_categories(ctx, category_type: str | None):
    """List categories grouped by type."""
    db = ctx.obj["db"]
    service = CategoryService(db)

    selected = TransactionType(category_type.lower()) if category_type else None
    categories = service.list_categories(category_type=selected)
    if not categories:
        click.echo("No categories found. Create one with 'category create'.")
        return

    click.echo(f"\n{'ID':<6} {'Name':<30} {'Type':<10} {'Level':<10} {'Sublevel':<12} {'Fixed':<6}")
    click.echo("-" * 78)
    for cat in categories:
        sublevel = cat.sublevel.value if cat.sublevel else ""
        fixed = "yes" if cat.is_fixed else ""
        click.echo(
            f"{cat.id:<6} {cat.name:<30} {cat.type.value:<10} {cat.level.value:<10} "
            f"{sublevel:<12} {fixed:<6}"
        )


@category_group.command("create")
@click.argument("name")
@click.option("--type", "category_type", type=click.Choice(TYPE_CHOICES, case_sensitive=False), default="expense", show_default=True, help="Category type")
@click.option("--level", type=click.Choice(LEVEL_CHOICES, case_sensitive=False), default=CategoryLevel.EMPRESA.value, show_default=True, help="Company or personal category")
@click.option("--sublevel", type=click.Choice(SUBLEVEL_CHOICES, case_sensitive=False), help="Personal sub-bucket (personal level only)")
@click.option("--color", help="Display color, e.g. '#3b82f6'")
@click.option("--fixed", is_flag=True, help="Mark as a fixed cost or income")
@click.pass_context
def create_category(
    ctx,
    name: str,
    category_type: str,
    level: str,
    sublevel: str | None,
    color: str | None,
    fixed: bool,
):
    """Create a new category.

    Examples:
        cashflow category create "Cliente ACME" --type income
        cashflow category create Supermercado --level personal --sublevel casa
    """
    db = ctx.obj["db"]
    service = CategoryService(db)

    try:
        category_id = service.create_category(
            name=name,
            category_type=TransactionType(category_type.lower()),
            level=CategoryLevel(level.lower()),
            sublevel=PersonalSublevel(sublevel.lower()) if sublevel else None,
            color=color,
            is_fixed=fixed,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created category '{name}' (ID: {category_id})")


@category_group.command("update")
@click.argument("category_id", type=int)
@click.option("--name", help="New name")
@click.option("--level", type=click.Choice(LEVEL_CHOICES, case_sensitive=False), help="Company or personal category")
@click.option("--sublevel", type=click.Choice(SUBLEVEL_CHOICES, case_sensitive=False), help="Personal sub-bucket")
@click.option("--color", help="Display color")
@click.option("--fixed/--not-fixed", default=None, help="Fixed cost or income flag")
@click.pass_context
def update_category(
    ctx,
    category_id: int,
    name: str | None,
    level: str | None,
    sublevel: str | None,
    color: str | None,
    fixed: bool | None,
):
    """Update a category. Only the given fields change."""
    db = ctx.obj["db"]
    service = CategoryService(db)

    fields = {}
    if name is not None:
        fields["name"] = name
    if level is not None:
        fields["level"] = CategoryLevel(level.lower())
    if sublevel is not None:
        fields["sublevel"] = PersonalSublevel(sublevel.lower())
    if color is not None:
        fields["color"] = color
    if fixed is not None:
        fields["is_fixed"] = fixed

    if not fields:
        click.echo("Error: Nothing to update", err=True)
        ctx.exit(1)

    try:
        service.update_category(category_id, **fields)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated category {category_id}")


@category_group.command("delete")
@click.argument("category_id", type=int)
@click.option("--yes", is_flag=True, help="Skip confirmation prompt")
@click.pass_context
def delete_category(ctx, category_id: int, yes: bool):
    """Delete a category. Its transactions are kept without a category."""
    db = ctx.obj["db"]
    service = CategoryService(db)

    category = service.get_category(category_id)
    if category is None:
        click.echo(f"Error: Category {category_id} not found", err=True)
        ctx.exit(1)

    if not yes:
        linked = service.count_transactions(category_id)
        click.confirm(
            f"Delete category '{category.name}' ({linked} transaction(s) will be uncategorized)?",
            abort=True,
        )

    try:
        cleared = service.delete_category(category_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted category '{category.name}'")
    if cleared:
        click.echo(f"  {cleared} transaction(s) are now uncategorized")


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
