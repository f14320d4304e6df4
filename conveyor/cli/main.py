"""CLI entry point for Conveyor."""

import sys
import logging
from typing import Any, Dict, Optional

import click
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn
from rich.table import Table
from rich.panel import Panel

from conveyor import Conveyor, ConveyorConfig, RunResult, StageStatus, __version__
from conveyor.exceptions import ConveyorError

console = Console()

STATUS_STYLES = {
    StageStatus.SUCCEEDED: "[green]succeeded[/green]",
    StageStatus.FAILED: "[red]failed[/red]",
    StageStatus.SKIPPED: "[yellow]skipped[/yellow]",
    StageStatus.NOT_RUN: "[dim]not run[/dim]",
}


def setup_logging(verbose: bool) -> None:
    """Set up logging configuration."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def load_config(config_path: Optional[str], overrides: Dict[str, Any]) -> ConveyorConfig:
    """Merge the optional YAML file with command-line overrides."""
    data: Dict[str, Any] = ConveyorConfig.load_yaml(config_path) if config_path else {}
    data.update({k: v for k, v in overrides.items() if v is not None})
    return ConveyorConfig.from_dict(data)


def render_result(result: RunResult, verbose: bool) -> None:
    """Print the per-stage table and the run outcome."""
    table = Table(title=f"Run {result.run_id}", show_header=True)
    table.add_column("Stage", style="cyan")
    table.add_column("Status")
    table.add_column("Duration", justify="right")

    for stage in result.stages:
        duration = f"{stage.duration:.2f}s" if stage.duration else "-"
        table.add_row(stage.name, STATUS_STYLES[stage.status], duration)

    console.print(table)

    if verbose and result.metrics:
        console.print()
        metrics_table = Table(title="Metrics", show_header=True)
        metrics_table.add_column("Metric", style="cyan")
        metrics_table.add_column("Value", style="green")

        for key, value in result.metrics.items():
            if isinstance(value, float):
                metrics_table.add_row(key, f"{value:.3f}")
            else:
                metrics_table.add_row(key, str(value))

        console.print(metrics_table)

    if result.test_report and not result.test_report.is_empty:
        report = result.test_report
        console.print(
            f"Tests: {report.tests} run, {report.failures} failed, "
            f"{report.errors} errors, {report.skipped} skipped "
            f"(published to {report.published_to})"
        )

    if result.has_warnings:
        console.print()
        for warning in result.warnings:
            console.print(f"[yellow]Warning:[/yellow] {warning}")


@click.command()
@click.argument("source_ref", required=False)
@click.option(
    "-c",
    "--config",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to pipeline configuration YAML file",
)
@click.option("-r", "--repository", help="Git URL or path of the repository")
@click.option("-b", "--branch", help="Branch to clone")
@click.option(
    "-i",
    "--image",
    envvar="CONVEYOR_IMAGE",
    help="Image identifier (or set CONVEYOR_IMAGE env var)",
)
@click.option(
    "--registry",
    envvar="REGISTRY_URL",
    help="Registry host (or set REGISTRY_URL env var)",
)
@click.option(
    "-u",
    "--registry-user",
    envvar="REGISTRY_USERNAME",
    help="Registry username (or set REGISTRY_USERNAME env var)",
)
@click.option(
    "-p",
    "--registry-password",
    envvar="REGISTRY_PASSWORD",
    help="Registry password or token (or set REGISTRY_PASSWORD env var)",
)
@click.option("--host-port", type=click.IntRange(1, 65535), help="Host port to bind")
@click.option(
    "--keep-workspace",
    is_flag=True,
    help="Keep the run's checkout after the run",
)
@click.option(
    "--list-stages",
    is_flag=True,
    help="Print the stages in execution order and exit",
)
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    help="Enable verbose output",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Print the commands each stage would run without running them",
)
@click.version_option(version=__version__)
def cli(
    source_ref: Optional[str],
    config: Optional[str],
    repository: Optional[str],
    branch: Optional[str],
    image: Optional[str],
    registry: Optional[str],
    registry_user: Optional[str],
    registry_password: Optional[str],
    host_port: Optional[int],
    keep_workspace: bool,
    list_stages: bool,
    verbose: bool,
    dry_run: bool,
) -> None:
    """Conveyor: clone, test, build, containerize, publish and run.

    SOURCE_REF: Revision to check out (defaults to the branch head)
    """
    setup_logging(verbose)

    try:
        conveyor_config = load_config(
            config,
            {
                "repository_url": repository,
                "branch": branch,
                "image": image,
                "registry_url": registry,
                "registry_username": registry_user,
                "registry_password": registry_password,
                "host_port": host_port,
                "keep_workspace": keep_workspace or None,
                "verbose": verbose or None,
            },
        )
    except ConveyorError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        sys.exit(1)

    conveyor = Conveyor(config=conveyor_config)

    if list_stages:
        for index, name in enumerate(conveyor.stage_names, start=1):
            console.print(f"{index}. {name}")
        return

    # Display header
    console.print(
        Panel.fit(
            f"[bold blue]Conveyor v{__version__}[/bold blue]\n"
            f"{conveyor_config.repository_url} ({conveyor_config.branch}"
            f"@{source_ref or 'HEAD'}) -> {conveyor_config.image}",
            border_style="blue",
        )
    )
    console.print()

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
        console=console,
    ) as progress:
        task = progress.add_task("[cyan]Starting...", total=100)

        def on_progress(stage: str, pct: float) -> None:
            progress.update(task, completed=int(pct * 100), description=f"[cyan]{stage}")

        try:
            result = conveyor.run(
                source_ref=source_ref,
                progress_callback=on_progress,
                dry_run=dry_run,
            )
        except ConveyorError as e:
            console.print(f"\n[red]Pipeline error:[/red] {e}")
            sys.exit(1)
        except Exception as e:
            console.print(f"\n[red]Unexpected error:[/red] {e}")
            if verbose:
                console.print_exception()
            sys.exit(1)

    console.print()
    render_result(result, verbose)
    console.print()

    if result.success:
        suffix = " (dry run)" if result.dry_run else ""
        console.print(f"[green]✓[/green] Pipeline succeeded{suffix}")
        if result.container_id:
            console.print(
                f"[green]✓[/green] Container {result.container_id[:12]} on port "
                f"{conveyor_config.host_port}"
            )
    else:
        console.print(
            f"[red]✗[/red] Pipeline failed at stage '{result.failed_stage}' "
            f"({result.error_kind})"
        )
        if result.has_errors:
            console.print("[red]Errors:[/red]")
            for error in result.errors:
                console.print(f"  [red]•[/red] {error}")
        sys.exit(1)


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
