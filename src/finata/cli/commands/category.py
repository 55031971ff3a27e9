"""Category management commands."""

import click

from finata.cli.error_handling import handle_domain_error
from finata.domain.category import CategoryService
from finata.domain.entities import CategoryType
from finata.domain.errors import DomainError

type_option = click.option(
    "--type",
    "category_type",
    type=click.Choice([t.value for t in CategoryType]),
    help="income or expense",
)


@click.group()
def category_group():
    """Manage categories."""
    pass


def _resolve(ctx, service: CategoryService, category: str, category_type: str | None) -> str:
    """Find a category by ID, or by name within the optional type."""
    candidates = service.list_categories(CategoryType(category_type) if category_type else None)
    for candidate in candidates:
        if candidate.id == category:
            return candidate.id

    matches = [c for c in candidates if c.name.lower() == category.strip().lower()]
    if len(matches) == 1:
        return matches[0].id
    if len(matches) > 1:
        click.echo(f"Error: '{category}' exists as both types; pass --type", err=True)
    else:
        click.echo(f"Error: Category '{category}' not found", err=True)
    ctx.exit(1)


@category_group.command("list")
@type_option
@click.pass_context
def list_categories(ctx, category_type: str | None):
    """List default and custom categories."""
    service = CategoryService(ctx.obj["store"])
    categories = service.list_categories(CategoryType(category_type) if category_type else None)

    for kind in CategoryType:
        group = [c for c in categories if c.type == kind]
        if not group:
            continue
        click.echo(f"\n{kind.value.capitalize()} categories:")
        click.echo("-" * 60)
        for category in group:
            marker = " (default)" if category.is_default else ""
            click.echo(f"{category.id:34s} {category.name}{marker}")


@category_group.command("create")
@click.argument("name")
@click.option(
    "--type",
    "category_type",
    type=click.Choice([t.value for t in CategoryType]),
    required=True,
    help="income or expense",
)
@click.pass_context
def create_category(ctx, name: str, category_type: str):
    """Create a custom category.

    Examples:
        finata category create "Kırtasiye" --type expense
        finata category create "Prim" --type income
    """
    service = CategoryService(ctx.obj["store"])
    try:
        category_id = service.create_category(name, CategoryType(category_type))
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created {category_type} category '{name.strip()}' (ID: {category_id})")


@category_group.command("rename")
@click.argument("category", metavar="CATEGORY")
@click.argument("new_name", metavar="NEW_NAME")
@type_option
@click.pass_context
def rename_category(ctx, category: str, new_name: str, category_type: str | None):
    """Rename a custom category.

    CATEGORY can be a category name or ID. Existing transactions keep the
    name they were saved with. Default categories cannot be renamed.
    """
    service = CategoryService(ctx.obj["store"])
    category_id = _resolve(ctx, service, category, category_type)
    try:
        service.rename_category(category_id, new_name)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Renamed category to '{new_name.strip()}'")


@category_group.command("delete")
@click.argument("category", metavar="CATEGORY")
@type_option
@click.pass_context
def delete_category(ctx, category: str, category_type: str | None):
    """Delete a custom category.

    Transactions that used it keep their saved category name. Default
    categories cannot be deleted.
    """
    service = CategoryService(ctx.obj["store"])
    category_id = _resolve(ctx, service, category, category_type)
    name = service.require_category(category_id).name
    try:
        service.delete_category(category_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted category '{name}'")


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
