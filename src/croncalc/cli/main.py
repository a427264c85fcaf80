import sys
import os
import click
from rich import print
from rich.table import Table
from rich.console import Console
from datetime import datetime
from dateutil.parser import parse as dateutil_parse

from croncalc import __version__
from croncalc.croncalc_env import CroncalcEnvironment
from croncalc.errors import ExpressionError
from croncalc.expression import FieldKind, parse_expression
from croncalc.occurrence import default_end, iter_occurrences, local_now
from croncalc.shared import bug_msg, format_fire, log_msg


class _DateTimeParam(click.ParamType):
    name = "datetime"

    def convert(self, value, param, ctx):
        if value is None:
            return None
        if isinstance(value, datetime):
            return value
        s = str(value).strip()
        if s.lower() == "now":
            return local_now()
        try:
            return dateutil_parse(s)
        except (ValueError, OverflowError):
            self.fail("Expected a date/time such as '2024-01-03 08:00' or 'now'", param, ctx)


_DATETIME = _DateTimeParam()


def _expression_or_exit(expression: str):
    try:
        return parse_expression(expression)
    except ExpressionError as e:
        log_msg(f"invalid expression {expression!r}: {e}")
        print(f"[red]✘ Invalid expression:[/red] {expression!r}")
        print(f"  {e}")
        sys.exit(1)


@click.group()
@click.version_option(__version__, prog_name="croncalc", message="%(prog)s version %(version)s")
@click.option(
    "--home",
    help="Override the croncalc home directory (equivalent to setting $CRONCALC_HOME).",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.pass_context
def cli(ctx, home, verbose):
    """Croncalc CLI – compute the fire times of cron expressions."""
    if home:
        os.environ["CRONCALC_HOME"] = (
            home  # Must be set before CroncalcEnvironment is instantiated
        )

    env = CroncalcEnvironment()
    env.ensure(init_config=True)
    config = env.load_config()

    ctx.ensure_object(dict)
    ctx.obj["ENV"] = env
    ctx.obj["CONFIG"] = config
    ctx.obj["VERBOSE"] = verbose


@cli.command(name="next")
@click.argument("expression", nargs=-1)
@click.option(
    "--count",
    "-n",
    type=click.IntRange(min=1),
    help="How many fire times to print. Default: search.count from config.",
)
@click.option(
    "--start",
    "start",
    type=_DATETIME,
    help="Search after this date/time. Default: now.",
)
@click.option(
    "--end",
    "end",
    type=_DATETIME,
    help="Stop at this date/time (exclusive). Default: no limit.",
)
@click.pass_context
def next_cmd(ctx, expression, count, start, end):
    """
    Print the next fire times of EXPRESSION.

    Examples:
      croncalc next "0 12 * * *"
      croncalc next 10 0-8/2 '*' '*' SUN,TUE -n 5
      croncalc next "0 0 1 1 *" --start 2024-06-01 --end 2030-01-01
    """
    config = ctx.obj["CONFIG"]
    verbose = ctx.obj["VERBOSE"]

    expression = " ".join(expression).strip() or config.search.expression
    count = count or config.search.count

    schedule = _expression_or_exit(expression)
    if verbose:
        print(f"[blue]Expression:[/blue] {expression}")
        bug_msg(f"{expression = }, {schedule = }")

    if start is None:
        start = local_now()
    if end is not None and (start.tzinfo is None) != (end.tzinfo is None):
        ctx.fail("--start and --end must both have a UTC offset or both have none.")

    produced = 0
    for fire in iter_occurrences(
        schedule, start, end if end is not None else default_end(start), count
    ):
        print(
            format_fire(
                fire,
                config.output.datetime_format,
                config.output.show_weekday,
            )
        )
        produced += 1

    if produced < count:
        limit = f"{end:%Y-%m-%d %H:%M:%S}" if end is not None else "the end of time"
        print(f"[yellow]No further fire times before {limit}.[/yellow]")


@cli.command()
@click.argument("expression", nargs=-1)
@click.pass_context
def check(ctx, expression):
    """Check whether EXPRESSION is valid and show the allowed values of each field."""
    verbose = ctx.obj["VERBOSE"]

    if not expression and not sys.stdin.isatty():
        expression = sys.stdin.read().strip()
    else:
        expression = " ".join(expression).strip()

    if not expression:
        print("[bold red]✘ No expression provided. Use argument or pipe.[/bold red]")
        sys.exit(1)

    schedule = _expression_or_exit(expression)
    print("[green]✔ Expression is valid.[/green]")
    if verbose:
        bug_msg(f"{expression = }, {schedule = }")

    table = Table(title=expression)
    table.add_column("field")
    table.add_column("token")
    table.add_column("values")
    for kind in FieldKind:
        field = schedule[kind]
        table.add_row(kind.label, field.token, ", ".join(map(str, field.values())))
    Console(highlight=False).print(table)


if __name__ == "__main__":
    cli()
