"""
AWS Cost Report CLI - Main entry point.
"""

import sys
import logging
from typing import Optional

import click
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.markup import escape

from .config import ConfigurationError, Settings, load_settings
from .monitor.aws_monitor import collect_aws, cost_explorer_fetcher, create_cost_explorer_client
from .alerting.thresholds import find_notable_changes, format_change_percentage
from .alerting.notifiers import GitHubIssuePublisher
from .report.models import CostReport
from .report.writers import build_issue_body, build_issue_title, render_summary_json

logger = logging.getLogger(__name__)

# stdout is reserved for the JSON summary
console = Console(stderr=True)


def configure_logging(debug: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr,
        force=True,
    )


@click.group()
@click.option('--debug', is_flag=True, help='Enable debug logging')
def cli(debug):
    """Daily AWS cost report published as a GitHub issue."""
    configure_logging(debug)


@cli.command()
@click.option("--config", default=None, help="Path to settings file")
@click.option("--dry-run", is_flag=True, default=False, help="Don't create the GitHub issue")
def generate(config, dry_run):
    """Fetch costs, print the JSON summary and publish the daily issue."""

    try:
        console.print(Panel.fit("🚀 [bold cyan]Starting AWS Cost Report[/bold cyan]"))

        # 1. Configuration is checked before any AWS call
        console.print("[bold]Loading configuration...[/bold]")
        settings = load_settings(config)
        settings.validate(require_github=not dry_run)

        # 2. Collect and aggregate
        console.print("\n[bold]Collecting AWS cost data...[/bold]")
        ce = create_cost_explorer_client(settings.aws_profile, settings.aws_region)
        report = collect_aws(cost_explorer_fetcher(ce))
        console.print("✅ AWS cost data collected successfully")

        # 3. Machine summary goes out before publishing
        click.echo(render_summary_json(report))

        display_category_summary(report)
        display_notable_changes(report, settings)

        # 4. Publish
        if dry_run:
            console.print("\n[yellow]ℹ️ Dry-run mode: No issue created[/yellow]")
        else:
            console.print("\n[bold]Creating GitHub issue...[/bold]")
            publisher = GitHubIssuePublisher.from_settings(settings)
            number = publisher.publish(
                build_issue_title(report),
                build_issue_body(report, settings.thresholds),
                settings.labels,
            )
            console.print(f"[green]✅ GitHub issue #{number} created[/green]")

        console.print("\n[green]✅ Complete![/green]")

    except Exception as e:
        console.print(f"\n[red]Fatal error: {escape(str(e))}[/red]")
        logger.exception("Fatal error in generate command")
        sys.exit(1)


@cli.command()
@click.option("--config", default=None, help="Path to settings file")
@click.option("--dry-run", is_flag=True, default=False, help="Don't require GitHub settings")
def validate_config(config, dry_run):
    """Validate settings, reporting every missing key."""
    try:
        console.print("[bold]Validating configuration...[/bold]")
        settings = load_settings(config)
        settings.validate(require_github=not dry_run)
        console.print("[green]✅ Configuration valid[/green]")

    except ConfigurationError as e:
        console.print("[red]❌ Validation errors:[/red]")
        for key in e.missing:
            console.print(f"   • Missing {key}")
        sys.exit(1)
    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)


@cli.command()
@click.option("--config", default=None, help="Path to settings file")
def print_config(config):
    """Print effective configuration (without secrets)."""
    try:
        settings = load_settings(config)

        console.print(Panel.fit("[bold]Effective Configuration[/bold]"))
        console.print_json(data=settings.masked())

    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)


def display_category_summary(report: CostReport):
    """Display category cost table."""
    table = Table(
        title=f"AWS Costs {report.period_start.isoformat()} ~ {report.period_end.isoformat()}",
        show_header=True,
    )
    table.add_column("Category", style="cyan")
    table.add_column("Current", justify="right", style="green")
    table.add_column("Previous", justify="right")
    table.add_column("Change", justify="right", style="yellow")
    table.add_column("Share", justify="right")

    ranked = sorted(report.categories.items(), key=lambda item: item[1].current, reverse=True)
    for category, data in ranked:
        table.add_row(
            category.value.upper(),
            f"${data.current:,.2f}",
            f"${data.previous:,.2f}",
            format_change_percentage(data.change_percentage),
            f"{report.share_of_total(data.current):.1f}%",
        )

    table.add_row(
        "[bold]Total[/bold]",
        f"[bold]${report.total:,.2f}[/bold]",
        f"${report.previous_total:,.2f}",
        format_change_percentage(report.total_change_percentage),
        "",
    )

    console.print(table)


def display_notable_changes(report: CostReport, settings: Optional[Settings] = None):
    """Display services with notable day-over-day changes."""
    thresholds = (settings or Settings()).thresholds
    notable = find_notable_changes(report.services, thresholds)
    if not notable:
        console.print("[green]✅ No notable changes[/green]")
        return

    table = Table(title="Notable Changes", show_header=True)
    table.add_column("Service", style="white")
    table.add_column("Current", justify="right", style="red")
    table.add_column("Previous", justify="right", style="green")
    table.add_column("Change", justify="right", style="yellow")

    for cost in notable[:10]:  # Show top 10
        table.add_row(
            escape(cost.service_name),
            f"${cost.amount:,.4f}",
            f"${cost.previous_amount:,.4f}",
            format_change_percentage(cost.change_percentage),
        )

    console.print(table)

    if len(notable) > 10:
        console.print(f"[yellow]... and {len(notable) - 10} more services[/yellow]")


if __name__ == "__main__":
    cli()
