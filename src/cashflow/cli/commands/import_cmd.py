"""Spreadsheet import command."""

from pathlib import Path

import click
from cashflow.cli.options import format_money
from cashflow.domain.sheet_import import ImportService


@click.command("import")
@click.argument("sheet_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--commit", is_flag=True, help="Save the non-duplicate rows (default: preview only)")
@click.option("--dedupe-batch", is_flag=True, help="Also treat repeated rows within the file as duplicates")
@click.option("--show-rows", is_flag=True, help="List every parsed row in the preview")
@click.pass_context
def import_sheet(ctx, sheet_file: str, commit: bool, dedupe_batch: bool, show_rows: bool):
    """Import a monthly cash-flow spreadsheet (.xlsx or CSV).

    The sheet needs a header row with month names (Ene, Feb... or Jan,
    Feb...) and category rows below it, grouped under INGRESOS / GASTOS
    section rows. Without --commit only a preview is shown.
    """
    db = ctx.obj["db"]
    service = ImportService(db)

    result = service.preview(Path(sheet_file).read_bytes(), within_batch=dedupe_batch)
    if not result.success:
        for error in result.errors:
            click.echo(f"Error: {error}", err=True)
        ctx.exit(1)

    stats = result.stats
    click.echo(f"\nImport preview ({result.year}):")
    click.echo(f"  Rows: {stats.total_rows}")
    click.echo(f"  Categories: {len(stats.new_categories)}")
    click.echo(f"  Potential duplicates: {stats.potential_duplicates}")
    click.echo(f"  Total amount: {format_money(stats.estimated_total_amount)}")

    if show_rows:
        click.echo("-" * 80)
        for row in result.rows:
            marker = " (duplicate)" if row.is_duplicate else ""
            click.echo(
                f"  {row.date}  {row.type.value:<8} {format_money(row.amount):>14}  "
                f"{row.category_name}{marker}"
            )

    if not commit:
        click.echo("\nRun again with --commit to save these rows.")
        return

    outcome = service.commit(result.rows)
    click.echo("\nImport complete:")
    click.echo(f"  Imported: {outcome['imported']} transactions")
    click.echo(f"  Skipped: {outcome['skipped']} duplicates")
    if outcome["categories_created"]:
        click.echo(f"  New categories: {', '.join(outcome['categories_created'])}")


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_sheet)
