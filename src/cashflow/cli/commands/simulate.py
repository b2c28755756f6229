"""What-if simulation command."""

import click
from cashflow.cli.commands.dashboard import echo_metrics
from cashflow.cli.options import (
    FOCUS_CHOICES,
    build_filters,
    dashboard_filter_options,
    format_money,
)
from cashflow.domain.dashboard import DashboardService
from cashflow.domain.entities import (
    FocusMode,
    SimulationVariable,
    SimulationVariableType,
)
from cashflow.utils.amount_parser import parse_amount
from cashflow.utils.date_parser import parse_date


def parse_new_movement(
    value: str, variable_type: SimulationVariableType, variable_id: str
) -> SimulationVariable:
    """Parse ``DATE:AMOUNT[:NAME]`` into a new-income/new-expense variable."""
    parts = value.split(":", 2)
    if len(parts) < 2:
        raise ValueError(f"Expected DATE:AMOUNT[:NAME], got '{value}'")
    name = parts[2].strip() if len(parts) == 3 and parts[2].strip() else variable_type.value
    return SimulationVariable(
        id=variable_id,
        type=variable_type,
        name=name,
        date=parse_date(parts[0]),
        amount=parse_amount(parts[1]),
    )


def parse_amount_change(value: str, variable_id: str) -> SimulationVariable:
    """Parse ``TRANSACTION_ID:AMOUNT`` into a modify-amount variable."""
    target, _, amount = value.partition(":")
    if not target.strip().isdigit() or not amount:
        raise ValueError(f"Expected TRANSACTION_ID:AMOUNT, got '{value}'")
    return SimulationVariable(
        id=variable_id,
        type=SimulationVariableType.MODIFY_AMOUNT,
        name=f"Amount of #{target.strip()}",
        date=None,
        amount=parse_amount(amount),
        target_transaction_id=int(target),
    )


@click.command("simulate")
@dashboard_filter_options
@click.option(
    "--focus",
    type=click.Choice(FOCUS_CHOICES, case_sensitive=False),
    default=FocusMode.ALL.value,
    show_default=True,
    help="Restrict to company or personal categories",
)
@click.option("--add-expense", multiple=True, metavar="DATE:AMOUNT[:NAME]", help="Hypothetical expense")
@click.option("--add-income", multiple=True, metavar="DATE:AMOUNT[:NAME]", help="Hypothetical income")
@click.option("--set-amount", multiple=True, metavar="ID:AMOUNT", help="Change a transaction's amount")
@click.option("--remove", multiple=True, type=int, metavar="ID", help="Leave a transaction out")
@click.pass_context
def simulate(
    ctx,
    year: int | None,
    real_only: bool,
    origin: str,
    focus: str,
    add_expense: tuple[str, ...],
    add_income: tuple[str, ...],
    set_amount: tuple[str, ...],
    remove: tuple[int, ...],
):
    """Show metrics for a what-if scenario without touching stored data.

    Examples:
        cashflow simulate --add-expense 2025-06-01:3000:Hire
        cashflow simulate --remove 42 --set-amount 17:900
    """
    db = ctx.obj["db"]
    service = DashboardService(db)
    filters = build_filters(year, real_only, origin)
    focus_mode = FocusMode(focus.lower())

    variables: list[SimulationVariable] = []
    try:
        for value in add_expense:
            variables.append(
                parse_new_movement(value, SimulationVariableType.NEW_EXPENSE, f"sim-{len(variables) + 1}")
            )
        for value in add_income:
            variables.append(
                parse_new_movement(value, SimulationVariableType.NEW_INCOME, f"sim-{len(variables) + 1}")
            )
        for value in set_amount:
            variables.append(parse_amount_change(value, f"sim-{len(variables) + 1}"))
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    for transaction_id in remove:
        variables.append(
            SimulationVariable(
                id=f"sim-{len(variables) + 1}",
                type=SimulationVariableType.TOGGLE_ACTIVE,
                name=f"Without #{transaction_id}",
                date=None,
                target_transaction_id=transaction_id,
            )
        )

    if not variables:
        click.echo("Error: Add at least one scenario change (see --help)", err=True)
        ctx.exit(1)

    baseline = service.metrics(filters, focus_mode)
    scenario = service.metrics(filters, focus_mode, variables=variables)

    click.echo(f"\nScenario {filters.year} ({len(variables)} change(s))")
    echo_metrics(scenario)

    click.echo("\nCompared to current data:")
    click.echo(f"  Runway:        {baseline.kpi.runway:.1f} -> {scenario.kpi.runway:.1f} months")
    click.echo(
        f"  Cash on hand:  {format_money(baseline.kpi.cash_on_hand)} -> "
        f"{format_money(scenario.kpi.cash_on_hand)}"
    )
    year_end_before = baseline.monthly_data[-1].accumulated
    year_end_after = scenario.monthly_data[-1].accumulated
    click.echo(f"  Year-end:      {format_money(year_end_before)} -> {format_money(year_end_after)}")


def register_commands(cli):
    """Register simulate command with main CLI."""
    cli.add_command(simulate)
