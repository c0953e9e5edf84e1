"""
CLI interface for the LLM price catalog.

Provides command-line access to price sync and cost projection.
"""

import logging
import sys
from typing import Optional

import typer
import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from price_catalog.config.loader import SyncConfig, resolve_sync_config
from price_catalog.core.calculator import (
    USAGE_PRESETS,
    CostBreakdown,
    UsageParameters,
    calculate_cost,
    get_preset,
    rank_models_by_cost,
)
from price_catalog.core.catalog import Provider
from price_catalog.core.errors import PricingSyncError
from price_catalog.core.sync import (
    SyncStatus,
    find_model,
    read_catalog,
    synchronize,
)
from price_catalog.storage.repository import CatalogRepository

app = typer.Typer()
console = Console()

EXIT_CODE_PASS = 0
EXIT_CODE_FAIL = 1

CONFIG_OPTION = typer.Option(
    None,
    "--config",
    "-c",
    help="Path to YAML sync configuration"
)
DB_OPTION = typer.Option(
    None,
    "--db",
    help="Path to the catalog database (overrides config)"
)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")
):
    """LLM price catalog CLI."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    if ctx.invoked_subcommand is None:
        console.print("LLM Price Catalog - Use --help to see available commands")


def _load_config(config_path: Optional[str], db_path: Optional[str]) -> SyncConfig:
    """Resolve sync settings, exiting with an error on a bad config file."""
    try:
        return resolve_sync_config(config_path, db_path)
    except (ValueError, FileNotFoundError, yaml.YAMLError) as e:
        console.print(f"[red]Error:[/] {escape(str(e))}")
        sys.exit(EXIT_CODE_FAIL)


def _repository(config_path: Optional[str], db_path: Optional[str]) -> CatalogRepository:
    return CatalogRepository(_load_config(config_path, db_path).db_path)


@app.command()
def init(config_path: Optional[str] = CONFIG_OPTION, db_path: Optional[str] = DB_OPTION):
    """Initialize the catalog database."""
    try:
        _repository(config_path, db_path).initialize_schema()
        console.print("[green]✓[/] Database initialized successfully")
        sys.exit(EXIT_CODE_PASS)
    except PricingSyncError as e:
        console.print(f"[red]Error initializing database:[/] {str(e)}")
        sys.exit(EXIT_CODE_FAIL)


@app.command()
def sync(
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Sync even if the minimum interval has not elapsed"
    ),
    config_path: Optional[str] = CONFIG_OPTION,
    db_path: Optional[str] = DB_OPTION
):
    """
    Synchronize model prices from the upstream feed.

    Safe to run from a scheduler: the sync is skipped unless the minimum
    interval has elapsed since the last successful run, or --force is given.
    """
    config = _load_config(config_path, db_path)
    repository = CatalogRepository(config.db_path)
    try:
        repository.initialize_schema()
    except PricingSyncError as e:
        console.print(f"[red]Error:[/] {str(e)}")
        sys.exit(EXIT_CODE_FAIL)

    outcome = synchronize(repository, config, force=force)

    if outcome.status == SyncStatus.SKIPPED:
        console.print(f"[yellow]Skipped:[/] {outcome.message}")
        console.print(f"Last updated: {_format_timestamp(outcome.last_synced)}")
        console.print(f"Next update: {_format_timestamp(outcome.next_eligible)}")
        sys.exit(EXIT_CODE_PASS)

    if outcome.status == SyncStatus.ERROR:
        console.print(f"[red]Sync failed ({outcome.error_kind.value}):[/] {outcome.message}")
        if outcome.models:
            console.print(f"{len(outcome.models)} models were fetched but not stored")
        sys.exit(EXIT_CODE_FAIL)

    console.print(f"[green]✓[/] Synced {outcome.models_updated} models "
                  f"({outcome.inserted} inserted, {outcome.updated} updated)")
    console.print(f"Source: {outcome.source}")
    console.print(f"Next update: {_format_timestamp(outcome.next_eligible)}")
    sys.exit(EXIT_CODE_PASS)


@app.command()
def models(
    provider: Optional[str] = typer.Option(
        None,
        "--provider",
        "-p",
        help="Only show models from this provider"
    ),
    config_path: Optional[str] = CONFIG_OPTION,
    db_path: Optional[str] = DB_OPTION
):
    """List the current model catalog."""
    snapshot = read_catalog(_repository(config_path, db_path))
    entries = snapshot.models
    if provider:
        try:
            wanted = Provider(provider)
        except ValueError:
            valid = [p.value for p in Provider]
            console.print(f"[red]Error:[/] unknown provider {provider} (expected one of: {valid})")
            sys.exit(EXIT_CODE_FAIL)
        entries = [m for m in entries if m.provider == wanted]

    table = Table(title="Model Catalog")
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Provider")
    table.add_column("Input $/1M", justify="right")
    table.add_column("Output $/1M", justify="right")
    table.add_column("Tier")
    for model in entries:
        table.add_row(
            model.id,
            model.name,
            model.provider.value,
            f"{model.input_price:,.3f}",
            f"{model.output_price:,.3f}",
            model.tier.value
        )
    console.print(table)
    console.print(f"Source: {snapshot.source}")
    console.print(f"Last updated: {_format_timestamp(snapshot.last_synced)}")


def _resolve_usage(
    preset: Optional[str],
    input_tokens: Optional[int],
    output_tokens: Optional[int],
    requests_per_day: Optional[int],
    days_per_month: Optional[int]
) -> UsageParameters:
    """Start from a preset and apply any explicit overrides."""
    base = get_preset(preset or "custom").to_usage()
    return UsageParameters(
        input_tokens=base.input_tokens if input_tokens is None else input_tokens,
        output_tokens=base.output_tokens if output_tokens is None else output_tokens,
        requests_per_day=base.requests_per_day if requests_per_day is None else requests_per_day,
        days_per_month=base.days_per_month if days_per_month is None else days_per_month,
    )


PRESET_OPTION = typer.Option(None, "--preset", help="Usage preset to start from")
INPUT_TOKENS_OPTION = typer.Option(None, "--input-tokens", min=0, help="Input tokens per request")
OUTPUT_TOKENS_OPTION = typer.Option(None, "--output-tokens", min=0, help="Output tokens per request")
REQUESTS_OPTION = typer.Option(None, "--requests-per-day", min=0, help="Requests per day")
DAYS_OPTION = typer.Option(None, "--days-per-month", min=0, max=31, help="Active days per month")


@app.command()
def calculate(
    model_id: str = typer.Argument(..., help="Catalog model identifier"),
    preset: Optional[str] = PRESET_OPTION,
    input_tokens: Optional[int] = INPUT_TOKENS_OPTION,
    output_tokens: Optional[int] = OUTPUT_TOKENS_OPTION,
    requests_per_day: Optional[int] = REQUESTS_OPTION,
    days_per_month: Optional[int] = DAYS_OPTION,
    config_path: Optional[str] = CONFIG_OPTION,
    db_path: Optional[str] = DB_OPTION
):
    """Project monthly, daily and yearly cost for a model."""
    try:
        usage = _resolve_usage(preset, input_tokens, output_tokens,
                               requests_per_day, days_per_month)
        model = find_model(read_catalog(_repository(config_path, db_path)), model_id)
    except ValueError as e:
        console.print(f"[red]Error:[/] {str(e)}")
        sys.exit(EXIT_CODE_FAIL)

    breakdown = calculate_cost(model, usage)
    _display_breakdown(model.name, breakdown)


@app.command()
def compare(
    preset: Optional[str] = PRESET_OPTION,
    input_tokens: Optional[int] = INPUT_TOKENS_OPTION,
    output_tokens: Optional[int] = OUTPUT_TOKENS_OPTION,
    requests_per_day: Optional[int] = REQUESTS_OPTION,
    days_per_month: Optional[int] = DAYS_OPTION,
    config_path: Optional[str] = CONFIG_OPTION,
    db_path: Optional[str] = DB_OPTION
):
    """Rank every catalog model by projected monthly cost."""
    try:
        usage = _resolve_usage(preset, input_tokens, output_tokens,
                               requests_per_day, days_per_month)
    except ValueError as e:
        console.print(f"[red]Error:[/] {str(e)}")
        sys.exit(EXIT_CODE_FAIL)

    snapshot = read_catalog(_repository(config_path, db_path))
    table = Table(title="Monthly Cost Comparison")
    table.add_column("#", justify="right")
    table.add_column("Model")
    table.add_column("Provider")
    table.add_column("Tier")
    table.add_column("Monthly", justify="right")
    table.add_column("Yearly", justify="right")
    for rank, (model, breakdown) in enumerate(rank_models_by_cost(snapshot.models, usage), start=1):
        table.add_row(
            str(rank),
            model.name,
            model.provider.value,
            model.tier.value,
            _format_currency(breakdown.monthly_cost),
            _format_currency(breakdown.yearly_cost)
        )
    console.print(table)
    console.print(f"Source: {snapshot.source}")


@app.command()
def presets():
    """List the built-in usage presets."""
    table = Table(title="Usage Presets")
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Input", justify="right")
    table.add_column("Output", justify="right")
    table.add_column("Requests/day", justify="right")
    table.add_column("Days/month", justify="right")
    for preset in USAGE_PRESETS:
        table.add_row(
            preset.id,
            preset.name,
            f"{preset.input_tokens:,}",
            f"{preset.output_tokens:,}",
            f"{preset.requests_per_day:,}",
            str(preset.days_per_month)
        )
    console.print(table)


def _format_currency(amount: float) -> str:
    """Format currency, keeping sub-cent amounts visible."""
    if amount >= 0.01:
        return f"${amount:,.2f}"
    return f"${amount:.4f}"


def _format_tokens(count: int) -> str:
    """Format token counts with K/M/B suffixes."""
    if count >= 1_000_000_000:
        return f"{count / 1_000_000_000:.1f}B"
    if count >= 1_000_000:
        return f"{count / 1_000_000:.1f}M"
    if count >= 1_000:
        return f"{count / 1_000:.0f}K"
    return f"{count:,}"


def _format_timestamp(value) -> str:
    return value.isoformat() if value else "never"


def _display_breakdown(model_name: str, breakdown: CostBreakdown):
    """Display a cost breakdown in a clean, financial format."""
    console.print(f"\n[bold]Cost Estimate: {model_name}[/bold]")
    console.print("-" * 40)
    console.print(f"Monthly cost: {_format_currency(breakdown.monthly_cost)}")
    console.print(f"Daily cost: {_format_currency(breakdown.daily_cost)}")
    console.print(f"Yearly cost: {_format_currency(breakdown.yearly_cost)}")
    console.print(
        f"Input: {_format_tokens(breakdown.total_input_tokens)} tokens "
        f"({_format_currency(breakdown.input_cost)}, {breakdown.input_percentage:.1f}%)"
    )
    console.print(
        f"Output: {_format_tokens(breakdown.total_output_tokens)} tokens "
        f"({_format_currency(breakdown.output_cost)}, {breakdown.output_percentage:.1f}%)"
    )
    console.print(f"Total tokens: {_format_tokens(breakdown.total_tokens)}")
    console.print(f"Total requests: {breakdown.total_requests:,}")


if __name__ == "__main__":
    app()
