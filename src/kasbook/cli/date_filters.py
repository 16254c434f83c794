"""CLI helpers for date range resolution."""

from datetime import date

import click

from kasbook.utils.date_parser import PERIODS, get_date_range, parse_date


def date_range_options(func):
    """Add --start-date, --end-date and --period options to a command."""
    func = click.option(
        "--period",
        type=click.Choice(PERIODS, case_sensitive=False),
        help="Named period instead of explicit dates",
    )(func)
    func = click.option("--end-date", help="Last day (YYYY-MM-DD or 'today', 'kemarin', ...)")(func)
    func = click.option("--start-date", help="First day (YYYY-MM-DD or 'today', 'kemarin', ...)")(func)
    return func


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period: str | None,
    default_range: tuple[date, date] | None = None,
) -> tuple[date | None, date | None]:
    """Resolve CLI date range from a period name or explicit dates."""
    if period and (start_date or end_date):
        click.echo(
            "Error: --period cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    if period:
        return get_date_range(period)

    start = None
    end = None
    if start_date:
        try:
            start = parse_date(start_date)
        except ValueError as e:
            click.echo(f"Error: Invalid start date: {e}", err=True)
            ctx.exit(1)

    if end_date:
        try:
            end = parse_date(end_date)
        except ValueError as e:
            click.echo(f"Error: Invalid end date: {e}", err=True)
            ctx.exit(1)

    if start is None and end is None and default_range is not None:
        start, end = default_range

    if start is not None and end is not None and start > end:
        click.echo("Error: Start date must be on or before end date.", err=True)
        ctx.exit(1)

    return start, end
