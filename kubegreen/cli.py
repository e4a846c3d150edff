"""
kubegreen CLI - Command line interface for namespace waste audits.
"""

import json
from dataclasses import replace
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from kubegreen.audit import AuditFailedError, AuditOrchestrator, AuditReport
from kubegreen.config import AuditSettings
from kubegreen.connect import (
    BaseCollector,
    DataRetrievalError,
    KubernetesCollector,
    SnapshotCollector,
)
from kubegreen.connect.snapshot import demo_collector
from kubegreen.log import configure_logging

app = typer.Typer(
    name="kubegreen",
    help="Kubernetes Waste Auditor - Find unused requests and orphaned storage",
    add_completion=False,
)
console = Console()

SEVERITY_STYLES = {
    "high_waste": ("red bold", "HIGH WASTE"),
    "waste": ("yellow", "WASTE"),
    "optimized": ("green", "OPTIMIZED"),
}


def create_collector(
    settings: AuditSettings,
    demo: bool = False,
    snapshot: Optional[Path] = None,
) -> BaseCollector:
    """Pick the data source for an audit run."""
    if demo:
        return demo_collector()
    if snapshot is not None:
        return SnapshotCollector.from_file(snapshot)
    return KubernetesCollector.from_settings(settings)


def render_report(report: AuditReport, show_all: bool = False) -> None:
    """Print an audit report as rich tables."""
    console.print(Panel(
        f"[bold]Namespace:[/] {report.namespace}\n"
        f"[bold]Generated:[/] {report.generated_at.strftime('%Y-%m-%d %H:%M:%S %Z')}",
        title="Green Kube Audit Report",
    ))

    # Compute
    if report.compute_error:
        console.print(f"[red]Compute audit failed:[/] {report.compute_error}")
    else:
        records = report.waste_records if show_all else report.significant_records
        table = Table(title="Compute Audit (CPU + RAM)")
        table.add_column("Pod", style="cyan")
        table.add_column("CPU Waste", justify="right")
        table.add_column("RAM Waste", justify="right")
        table.add_column("Total /mo", justify="right")
        table.add_column("Status")

        for record in records:
            style, label = SEVERITY_STYLES[record.severity.value]
            table.add_row(
                record.name,
                f"${record.cpu_cost_usd:.2f}",
                f"${record.ram_cost_usd:.2f}",
                f"${record.total_cost_usd:.2f}",
                f"[{style}]{label}[/]",
            )

        console.print(table)
        hidden = len(report.waste_records) - len(records)
        if hidden:
            console.print(f"[dim]{hidden} insignificant workloads hidden (use --all)[/]")
        console.print(
            f"\n[bold]Total Potential Savings:[/] "
            f"[yellow]${report.cluster_total_usd:,.2f} / month[/]\n"
        )

    # Storage
    if report.storage_error:
        console.print(f"[red]Storage audit failed:[/] {report.storage_error}")
    elif report.orphan_records:
        table = Table(title="Storage (PVCs)")
        table.add_column("Orphaned Claim", style="red")
        table.add_column("Size", justify="right")
        table.add_column("Cost /mo", justify="right")

        for orphan in report.orphan_records:
            table.add_row(
                orphan.name,
                orphan.declared_size or "-",
                f"~${orphan.estimated_monthly_cost_usd:.2f}",
            )

        console.print(table)
    else:
        console.print("[green]No storage waste found.[/]")

    # Warnings
    if report.warnings:
        console.print()
        for warning in report.warnings:
            console.print(f"[yellow]Warning:[/] {warning.message}")


@app.command()
def audit(
    namespace: Optional[str] = typer.Option(
        None,
        "--namespace", "-n",
        help="Namespace to audit (default: KUBEGREEN_NAMESPACE or 'simulation')",
    ),
    demo: bool = typer.Option(False, "--demo", help="Audit a built-in simulated namespace"),
    snapshot: Optional[Path] = typer.Option(
        None,
        "--snapshot", "-s",
        help="Audit a saved JSON snapshot instead of a live cluster",
        exists=True,
        dir_okay=False,
    ),
    show_all: bool = typer.Option(False, "--all", "-a", help="List insignificant workloads too"),
    degraded_storage: bool = typer.Option(
        False,
        "--degraded-storage",
        help="Flag every claim as orphaned if pod volume bindings can't be read",
    ),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Audit a namespace for wasted compute and orphaned storage."""
    if verbose:
        configure_logging(level="DEBUG", force=True)

    try:
        settings = AuditSettings.from_env()
    except ValueError as e:
        console.print(f"[red]Invalid configuration:[/] {e}")
        raise typer.Exit(code=2)
    if degraded_storage:
        settings = replace(settings, allow_degraded_storage=True)
    if demo:
        namespace = namespace or "simulation"

    try:
        collector = create_collector(settings, demo=demo, snapshot=snapshot)
    except DataRetrievalError as e:
        console.print(f"[red]Could not load data:[/] {e}")
        raise typer.Exit(code=1)

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            progress.add_task("Auditing namespace...", total=None)
            report = AuditOrchestrator(collector, settings).run_audit(namespace)
    except AuditFailedError as e:
        console.print(f"[red]Audit failed:[/] {e}")
        raise typer.Exit(code=1)
    finally:
        collector.close()

    if json_output:
        typer.echo(json.dumps(report.to_dict(include_all=show_all), indent=2))
        return

    render_report(report, show_all=show_all)


@app.command()
def version():
    """Show version information."""
    from kubegreen import __version__
    console.print(f"kubegreen v{__version__}")
    console.print("Kubernetes Waste Auditor")


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
