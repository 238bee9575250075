"""
Command-line interface for FareScope.
Collects fares, previews route plans and reports statistics with Rich output.
"""

import asyncio
import logging
from typing import List, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from farescope import __app_name__, __version__
from farescope.cli.validators import (
    airport_code_callback,
    airport_codes_list_callback,
    target_codes_callback,
    trip_type_callback,
)
from farescope.config import ALL_AIRPORTS, AirportGroup, TripDates, get_settings
from farescope.database import Database, masked_database_url
from farescope.exceptions import InvalidAirportGroupError
from farescope.models.domain import AirportRecord, StatisticsSummary
from farescope.orchestration.fare_orchestrator import (
    FareCollectionOrchestrator,
    GroupCollectionResult,
)
from farescope.orchestration.route_planner import plan_routes
from farescope.scrapers.aegean_scraper import AegeanFareClient
from farescope.services.airport_catalog import AirportCatalog
from farescope.services.experiment_service import ExperimentService
from farescope.services.fare_store import WindowBounds
from farescope.services.statistics_service import StatisticsService
from farescope.utils.logging_config import setup_logging_from_settings

# Create Typer app
app = typer.Typer(
    name="farescope",
    help="FareScope - airfare price collector and route statistics",
    add_completion=False,
)

# Create sub-commands
config_app = typer.Typer(help="Manage configuration")
db_app = typer.Typer(help="Database management")

app.add_typer(config_app, name="config")
app.add_typer(db_app, name="db")

console = Console()
logger = logging.getLogger(__name__)


# ============================================================================
# Utility Functions
# ============================================================================

def handle_error(e: Exception, message: str = "An error occurred"):
    """Handle errors with nice formatting."""
    console.print(f"\n[bold red]✗ {message}[/bold red]")
    console.print(f"[red]{type(e).__name__}: {str(e)}[/red]\n")
    if get_settings().debug:
        console.print_exception()
    raise typer.Exit(code=1)


def success(message: str):
    """Print success message."""
    console.print(f"[bold green]✓ {message}[/bold green]")


def info(message: str):
    """Print info message."""
    console.print(f"[blue]{message}[/blue]")


def warning(message: str):
    """Print warning message."""
    console.print(f"[yellow]⚠ {message}[/yellow]")


def format_stat(value: Optional[float]) -> str:
    if value is None:
        return "-"
    return f"{value:.2f}"


def build_group(
    name: str,
    airports: str,
    targets: Optional[str],
    trip_type: str,
    departure_date: Optional[str],
    return_date: Optional[str],
) -> AirportGroup:
    """
    Build an ad-hoc airport group from command-line options.

    Raises:
        InvalidAirportGroupError: If the options do not form a valid group
    """
    if not departure_date or not return_date:
        raise InvalidAirportGroupError(
            name, "--departure-date and --return-date are required with --airports"
        )
    try:
        return AirportGroup(
            name=name,
            airports=airports,
            targets=targets or [],
            trip_type=trip_type,
            trip_dates=TripDates(departure_date=departure_date, return_date=return_date),
        )
    except ValidationError as e:
        raise InvalidAirportGroupError(name, str(e)) from e


# ============================================================================
# Version Callback
# ============================================================================

def version_callback(value: bool):
    """Show version and exit."""
    if value:
        console.print(Panel(
            f"[bold blue]{__app_name__}[/bold blue] version [green]{__version__}[/green]\n"
            f"Airfare price collector and route statistics",
            title="FareScope",
            border_style="blue",
        ))
        raise typer.Exit()


# ============================================================================
# Main Callback
# ============================================================================

@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", callback=version_callback, is_eager=True,
        help="Show version and exit",
    ),
):
    """
    FareScope CLI - airfare price collector and route statistics.

    Use 'farescope COMMAND --help' for command-specific help.
    """
    settings = get_settings()
    setup_logging_from_settings(settings, console_output=settings.debug)


# ============================================================================
# COLLECT Command
# ============================================================================

@app.command()
def collect(
    airports: Optional[str] = typer.Option(
        None,
        help="Ad-hoc group: comma-separated IATA codes or ALL. Default: configured groups",
        callback=airport_codes_list_callback,
    ),
    targets: Optional[str] = typer.Option(
        None,
        help="Ad-hoc group: comma-separated target IATA codes",
        callback=target_codes_callback,
    ),
    trip_type: str = typer.Option(
        "RT",
        help="Ad-hoc group: RT (round trip) or OW (one way)",
        callback=trip_type_callback,
    ),
    departure_date: Optional[str] = typer.Option(
        None,
        help="Ad-hoc group: departure month or date as the fare API expects it (e.g., 2021-9)",
    ),
    return_date: Optional[str] = typer.Option(
        None,
        help="Ad-hoc group: return month or date (e.g., 2021-9)",
    ),
    name: str = typer.Option("adhoc", help="Ad-hoc group name used in logs"),
):
    """
    Collect fares for every configured airport group, or for one ad-hoc group.

    Examples:
        farescope collect
        farescope collect --airports BER,CDG,ATH --targets ATH --departure-date 2021-9 --return-date 2021-9
        farescope collect --airports ALL --trip-type OW --departure-date 2021-9 --return-date 2021-9
    """
    settings = get_settings()

    if airports is not None:
        try:
            groups = [build_group(name, airports, targets, trip_type, departure_date, return_date)]
        except InvalidAirportGroupError as e:
            handle_error(e, "Invalid airport group")
    else:
        groups = list(settings.airport_groups)

    if not groups:
        warning("No airport groups configured (set AIRPORT_GROUPS)")
        raise typer.Exit()

    console.print(Panel("[bold]Fare Collection[/bold]", border_style="green"))

    try:
        results = asyncio.run(_run_collect(groups))
    except Exception as e:
        handle_error(e, "Collection failed")

    table = Table(title="Collection Results", show_header=True, header_style="bold magenta")
    table.add_column("Group", style="cyan")
    table.add_column("Lookups", justify="right")
    table.add_column("Failed", justify="right")
    table.add_column("Stored", justify="right", style="green")
    table.add_column("Status")

    for result in results:
        status = "[green]✓ OK[/green]" if result.succeeded else f"[red]✗ {result.error}[/red]"
        table.add_row(
            result.group_name,
            str(result.planned_requests),
            str(result.failed_lookups),
            str(result.stored_fares),
            status,
        )

    console.print(table)

    if any(not result.succeeded for result in results):
        warning("Some groups failed; see logs/error.log")
        raise typer.Exit(code=1)

    success(f"Stored {sum(r.stored_fares for r in results)} fares")


async def _run_collect(groups: List[AirportGroup]) -> List[GroupCollectionResult]:
    settings = get_settings()
    database = Database.from_settings(settings)
    orchestrator = FareCollectionOrchestrator(database, AegeanFareClient.from_settings(settings))

    results = []
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TimeElapsedColumn(),
            console=console,
        ) as progress:
            task = progress.add_task("[yellow]Collecting fares...", total=len(groups))

            for idx, group in enumerate(groups):
                progress.update(
                    task,
                    description=f"[yellow]Collecting {group.name} ({idx + 1}/{len(groups)})...",
                )
                results.append(await orchestrator.process_group(group))
                progress.advance(task)
    finally:
        await database.dispose()

    return results


# ============================================================================
# PLAN Command
# ============================================================================

@app.command()
def plan(
    airports: str = typer.Option(
        ...,
        help="Comma-separated IATA codes or ALL",
        callback=airport_codes_list_callback,
    ),
    targets: Optional[str] = typer.Option(
        None,
        help="Comma-separated target IATA codes",
        callback=target_codes_callback,
    ),
    trip_type: str = typer.Option("RT", help="RT or OW", callback=trip_type_callback),
    use_catalog: bool = typer.Option(
        True,
        "--catalog/--no-catalog",
        help="Resolve airports against the catalog (required for ALL)",
    ),
):
    """
    Show the fare lookups a collection run would issue, without calling the API.

    Examples:
        farescope plan --airports BER,CDG,MAD,FCO,LON,ATH --targets ATH
        farescope plan --airports BER,CDG,ATH --trip-type OW --no-catalog
    """
    target_codes = [code for code in (targets or "").split(",") if code]

    if use_catalog:
        try:
            records = asyncio.run(_resolve_airports(airports, target_codes))
        except Exception as e:
            handle_error(e, "Catalog lookup failed")
    else:
        if airports == ALL_AIRPORTS:
            handle_error(ValueError("ALL needs the catalog"), "Invalid airports")
        records = [
            AirportRecord(code=code, is_target=code in target_codes)
            for code in dict.fromkeys(airports.split(","))
        ]

    requests = plan_routes(records, trip_type, has_targets=len(target_codes) > 0)

    table = Table(title=f"Route Plan ({trip_type})", show_header=True, header_style="bold magenta")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Departure", style="cyan")
    table.add_column("Arrival", style="cyan")

    for idx, request in enumerate(requests, 1):
        table.add_row(str(idx), request.departure, request.arrival)

    console.print(table)
    info(f"{len(requests)} lookups for {len(records)} airports")


async def _resolve_airports(airports: str, targets: List[str]) -> List[AirportRecord]:
    database = Database.from_settings(get_settings())
    codes = ALL_AIRPORTS if airports == ALL_AIRPORTS else airports.split(",")
    try:
        async with database.session() as db:
            return await AirportCatalog.resolve(db, codes, targets)
    finally:
        await database.dispose()


# ============================================================================
# STATS Command
# ============================================================================

@app.command()
def stats(
    departure: str = typer.Argument(..., help="Departure IATA code", callback=airport_code_callback),
    arrival: str = typer.Argument(..., help="Arrival IATA code", callback=airport_code_callback),
    trip_type: str = typer.Option("RT", help="RT or OW", callback=trip_type_callback),
    interval: str = typer.Option(
        "once per day",
        help="Collection interval; values containing 'three' group by collection run",
    ),
):
    """
    Statistics for one route.

    Examples:
        farescope stats BER ATH
        farescope stats ATH BER --trip-type RT --interval "three times per day"
    """
    try:
        summary = asyncio.run(_route_stats(departure, arrival, trip_type, interval))
    except Exception as e:
        handle_error(e, "Statistics query failed")

    if not summary.has_data:
        warning(f"No fares stored for {departure}-{arrival} ({trip_type})")
        return

    table = Table(title=f"{departure} → {arrival} ({trip_type})", show_header=True,
                  header_style="bold magenta")
    table.add_column("Statistic", style="cyan")
    table.add_column("Value", justify="right", style="green")

    for key, value in summary.as_dict(nan_as_none=True).items():
        table.add_row(key.replace("_", " ").title(), format_stat(value))

    console.print(table)


async def _route_stats(
    departure: str, arrival: str, trip_type: str, interval: str
) -> StatisticsSummary:
    settings = get_settings()
    database = Database.from_settings(settings)
    try:
        async with database.session() as db:
            return await StatisticsService.get_statistics(
                db, departure, arrival, trip_type, interval, WindowBounds.from_settings(settings)
            )
    finally:
        await database.dispose()


# ============================================================================
# RESULTS Command
# ============================================================================

@app.command()
def results(
    name: Optional[str] = typer.Argument(None, help="Experiment name. Default: all experiments"),
):
    """
    Show configured experiments with per-route statistics.

    Examples:
        farescope results
        farescope results experiment
    """
    try:
        findings_list = asyncio.run(_experiment_findings(name))
    except Exception as e:
        handle_error(e, "Results query failed")

    for findings in findings_list:
        experiment = findings.experiment
        console.print(Panel(
            f"[bold]{experiment.name}[/bold]\n"
            f"{experiment.description}\n\n"
            f"Source: {experiment.source}  Trip type: {experiment.trip_type}  "
            f"Interval: {experiment.request_interval}\n"
            f"Period: {experiment.start_date or '?'} - {experiment.end_date or '?'}",
            border_style="blue",
        ))

        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Route", style="cyan")
        table.add_column("Mean", justify="right")
        table.add_column("Median", justify="right")
        table.add_column("Variance", justify="right")
        table.add_column("Range", justify="right")
        table.add_column("Std Dev", justify="right")

        for route in findings.routes:
            values = route.statistics.as_dict(nan_as_none=True)
            table.add_row(
                f"{route.departure}-{route.arrival}",
                format_stat(values["mean"]),
                format_stat(values["median"]),
                format_stat(values["variance"]),
                format_stat(values["range"]),
                format_stat(values["standard_deviation"]),
            )

        console.print(table)


async def _experiment_findings(name: Optional[str]):
    settings = get_settings()
    database = Database.from_settings(settings)
    service = ExperimentService(database, settings)
    try:
        if name is not None:
            return [await service.get_findings_by_name(name)]
        return await service.get_all_findings()
    finally:
        await database.dispose()


# ============================================================================
# SERVE Command
# ============================================================================

@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", help="Bind address"),
    port: int = typer.Option(8000, help="Bind port"),
    reload: bool = typer.Option(False, help="Reload on code changes (development)"),
):
    """
    Serve the results API with uvicorn.
    """
    import uvicorn

    settings = get_settings()
    info(f"Serving {settings.app_name} on http://{host}:{port}")
    uvicorn.run(
        "farescope.api.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


# ============================================================================
# CONFIG Commands
# ============================================================================

@config_app.command("show")
def config_show():
    """
    Display current configuration.
    """
    settings = get_settings()

    console.print("\n")
    console.print(Panel("[bold]Current Configuration[/bold]", border_style="blue"))

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Setting", style="cyan", no_wrap=True)
    table.add_column("Value", style="green")

    table.add_row("App Name", settings.app_name)
    table.add_row("Version", settings.app_version)
    table.add_row("Environment", settings.environment)
    table.add_row("Debug", str(settings.debug))
    table.add_row("Log Level", settings.log_level)
    table.add_row("Log File", settings.log_file or "-")
    table.add_row("Error Log File", settings.error_log_file or "-")

    table.add_row("", "")
    table.add_row("[bold]Storage[/bold]", "")
    table.add_row("Database", masked_database_url(settings.database_url))

    table.add_row("", "")
    table.add_row("[bold]Fare API[/bold]", "")
    table.add_row("URL", settings.fare_api_url)
    table.add_row("Timeout (s)", str(settings.fare_api_timeout))
    table.add_row("Max Retries", str(settings.fare_api_max_retries))

    table.add_row("", "")
    table.add_row("[bold]Airport Groups[/bold]", "")
    for group in settings.airport_groups:
        airports = group.airports if group.all_airports else ",".join(group.airports)
        table.add_row(
            group.name,
            f"{airports} → {','.join(group.targets) or '-'} "
            f"({group.trip_type}, {group.trip_dates.departure_date}/{group.trip_dates.return_date})",
        )

    table.add_row("", "")
    table.add_row("[bold]Experiments[/bold]", "")
    for experiment in settings.experiments:
        table.add_row(
            experiment.name,
            f"{','.join(experiment.airports)} ({experiment.trip_type}, {experiment.request_interval})",
        )

    console.print(table)
    console.print("\n")


# ============================================================================
# DB Commands
# ============================================================================

@db_app.command("init")
def db_init(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
    drop: bool = typer.Option(False, "--drop", help="Drop existing tables first (deletes collected fares)"),
):
    """
    Initialize database (create all tables).
    """
    console.print("\n")
    console.print(Panel(
        "[bold red]⚠ Database Initialization[/bold red]\n\n"
        "This will create all missing database tables."
        + ("\n[bold]Existing tables and collected fares will be dropped.[/bold]" if drop else ""),
        border_style="red",
    ))

    if not yes and not typer.confirm("Are you sure you want to continue?"):
        warning("Operation cancelled")
        raise typer.Exit()

    try:
        asyncio.run(_db_init(drop))
    except Exception as e:
        handle_error(e, "Database initialization failed")


async def _db_init(drop: bool = False):
    """Initialize database tables, optionally dropping them first."""
    database = Database.from_settings(get_settings())
    try:
        if drop:
            await database.drop_models()
        with console.status("[bold yellow]Creating database tables..."):
            await database.init_models()
    finally:
        await database.dispose()

    success("Database initialized successfully")
    info("Use 'farescope db seed' to populate the airport catalog")


@db_app.command("seed")
def db_seed():
    """
    Seed the airport catalog with European airports.
    """
    console.print("\n")
    console.print(Panel(
        "[bold]Database Seeding[/bold]\n\n"
        "This will populate the airport catalog.",
        border_style="blue",
    ))

    try:
        created = asyncio.run(_db_seed())
    except Exception as e:
        handle_error(e, "Database seeding failed")

    success(f"Database seeded successfully ({created} airports created)")


async def _db_seed() -> int:
    from farescope.utils.seed_data import seed_airports

    database = Database.from_settings(get_settings())
    try:
        with console.status("[bold yellow]Seeding database..."):
            async with database.session() as db:
                return await seed_airports(db)
    finally:
        await database.dispose()


@db_app.command("airports")
def db_airports():
    """
    List airport codes in the catalog.
    """
    try:
        codes = asyncio.run(_catalog_codes())
    except Exception as e:
        handle_error(e, "Failed to read airport catalog")

    if not codes:
        warning("Airport catalog is empty. Run 'farescope db seed' first.")
        return

    console.print(", ".join(codes))
    info(f"{len(codes)} airports in catalog")


async def _catalog_codes() -> List[str]:
    database = Database.from_settings(get_settings())
    try:
        async with database.session() as db:
            return await AirportCatalog.list_codes(db)
    finally:
        await database.dispose()


if __name__ == "__main__":
    app()
