"""
Oracle Earth CLI

Scenario simulation, time machine lookups, crisis feed replay and
database setup from the terminal
"""
import asyncio
import random

import click
from rich.console import Console
from rich.table import Table

from oracle_earth import __version__
from oracle_earth.config import get_config
from oracle_earth.simulation.constants import EVENT_CATEGORIES, FILTER_ALL
from oracle_earth.simulation.event_feed import EventFeed, SyntheticEventSource, format_time_ago
from oracle_earth.simulation.scenario_evaluator import ScenarioEvaluator, list_scenarios
from oracle_earth.simulation.scheduler import VirtualScheduler
from oracle_earth.simulation.time_cursor import TimeCursor
from oracle_earth.storage.database import OracleDatabase
from oracle_earth.utils import get_logger, setup_logging

console = Console()
logger = get_logger(__name__)

_SEVERITY_STYLE = {"critical": "bold red", "high": "dark_orange", "medium": "yellow", "low": "green"}


def _parse_params(values: tuple[str, ...]) -> dict[str, float]:
    params: dict[str, float] = {}
    for item in values:
        name, sep, raw = item.partition("=")
        if not sep or not name.strip():
            raise click.BadParameter(f"Expected name=value, got '{item}'", param_hint="--param")
        try:
            params[name.strip()] = float(raw)
        except ValueError:
            raise click.BadParameter(f"'{raw}' is not a number", param_hint="--param")
    return params


# ═══════════════════════════════════════════════════════════════════
# MAIN CLI GROUP
# ═══════════════════════════════════════════════════════════════════

@click.group()
@click.version_option(version=__version__)
@click.option("--log-level", default=None, help="Override ORACLE_LOG_LEVEL")
def main(log_level):
    """
    Oracle Earth - global intelligence dashboard

    Time machine, crisis feed and what-if scenario simulator.
    """
    config = get_config()
    setup_logging(log_level or config.log_level, config.log_file)


# ═══════════════════════════════════════════════════════════════════
# WHAT-IF SIMULATOR
# ═══════════════════════════════════════════════════════════════════

@main.command()
def scenarios():
    """List the what-if scenario catalog"""
    table = Table(title="What-If Scenarios")
    table.add_column("ID", style="cyan")
    table.add_column("Title")
    table.add_column("Category", style="magenta")
    table.add_column("Parameters")
    for scenario in list_scenarios():
        params = ", ".join(f"{k}={v:g}" for k, v in scenario.base_parameters.items())
        table.add_row(scenario.id, f"{scenario.icon} {scenario.title}", scenario.category, params)
    console.print(table)


@main.command()
@click.argument("scenario_id")
@click.option("--param", "-p", "params", multiple=True, help="Parameter override as name=value")
@click.option("--delay", type=float, default=None, help="Analysis delay in seconds (default from config)")
def simulate(scenario_id, params, delay):
    """Evaluate a what-if scenario"""
    overrides = _parse_params(params)
    logger.debug("Simulating %s with overrides %s", scenario_id, overrides)
    config = get_config()
    evaluator = ScenarioEvaluator(
        delay_seconds=config.analysis_delay_seconds if delay is None else delay
    )

    with console.status("[bold green]AI is analyzing the scenario..."):
        report = asyncio.run(evaluator.evaluate(scenario_id, overrides))

    run = evaluator.last_run
    console.print(f"\n[bold blue]{report.scenario_title}[/bold blue]")
    if run and run.effective_parameters:
        applied = ", ".join(f"{k}={v:g}" for k, v in run.effective_parameters.items())
        console.print(f"Parameters: [cyan]{applied}[/cyan]")

    for heading, style, items in (
        ("Positive", "green", report.positive_outcomes),
        ("Negative", "red", report.negative_outcomes),
        ("Neutral", "yellow", report.neutral_outcomes),
    ):
        console.print(f"\n[bold {style}]{heading} outcomes[/bold {style}]")
        for item in items:
            console.print(f"  • {item}")

    console.print(
        f"\nProbability: [cyan]{report.probability_percent}%[/cyan]  "
        f"Timeframe: [cyan]{report.timeframe_label}[/cyan]  "
        f"Global impact: [cyan]{report.global_impact_score:.1f}/10[/cyan]"
    )


# ═══════════════════════════════════════════════════════════════════
# TIME MACHINE
# ═══════════════════════════════════════════════════════════════════

@main.command()
@click.argument("year", type=int)
def timeline(year):
    """Show the era label and nearest milestone for a year"""
    config = get_config()
    cursor = TimeCursor(
        VirtualScheduler(),
        min_year=config.min_year,
        max_year=config.max_year,
        present_year=config.present_year,
    )
    cursor.seek(year)
    milestone = cursor.milestone()
    console.print(f"\n[bold]{cursor.current_year}[/bold]  [magenta]{cursor.label}[/magenta]")
    if milestone:
        console.print(f"Nearest milestone: {milestone['event']} ({milestone['year']})")
    if cursor.current_year != year:
        console.print(f"[yellow]Clamped from {year} to [{config.min_year}, {config.max_year}][/yellow]")


# ═══════════════════════════════════════════════════════════════════
# CRISIS FEED
# ═══════════════════════════════════════════════════════════════════

@main.command()
@click.option("--ticks", default=20, show_default=True, help="Generation ticks to replay")
@click.option("--seed", type=int, default=None, help="Random seed for a reproducible feed")
@click.option(
    "--category",
    type=click.Choice([FILTER_ALL, *EVENT_CATEGORIES]),
    default=FILTER_ALL,
    show_default=True,
)
def feed(ticks, seed, category):
    """Replay the synthetic crisis feed on virtual time"""
    config = get_config()
    scheduler = VirtualScheduler()
    source = SyntheticEventSource(rng=random.Random(seed), probability=config.feed_event_probability)
    crisis_feed = EventFeed(
        scheduler, source, capacity=config.feed_capacity, interval_ms=config.feed_interval_ms
    )
    crisis_feed.seed(source.batch(config.feed_initial_events))
    crisis_feed.start()
    try:
        scheduler.advance(ticks * config.feed_interval_ms)
    finally:
        crisis_feed.close()

    table = Table(title=f"Crisis Feed ({category})")
    table.add_column("Severity")
    table.add_column("Category", style="magenta")
    table.add_column("Title")
    table.add_column("Location", style="cyan")
    table.add_column("When")
    for event in crisis_feed.filter_by(category):
        style = _SEVERITY_STYLE.get(event.severity, "white")
        table.add_row(
            f"[{style}]{event.severity.upper()}[/{style}]",
            event.category,
            event.title,
            event.location,
            format_time_ago(event.created_at),
        )
    console.print(table)


# ═══════════════════════════════════════════════════════════════════
# DATABASE / SERVER
# ═══════════════════════════════════════════════════════════════════

@main.command("init-db")
@click.option("--seed/--no-seed", default=True, help="Insert sample intelligence data")
def init_db(seed):
    """Create the SQLite tables (and sample rows)"""
    config = get_config()
    database = OracleDatabase(config.database_file)
    try:
        database.initialize()
        if seed:
            database.seed_demo_data()
    finally:
        database.close()
    console.print(f"[green]✓ Database ready at {config.database_file}[/green]")


@main.command()
@click.option("--host", default=None, help="Bind host (default from config)")
@click.option("--port", type=int, default=None, help="Bind port (default from config)")
def serve(host, port):
    """Run the API server"""
    import uvicorn

    config = get_config()
    uvicorn.run(
        "oracle_earth.api.main:create_app",
        factory=True,
        host=host or config.api_host,
        port=port or config.api_port,
    )


if __name__ == "__main__":
    main()
