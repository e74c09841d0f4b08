"""
Webber CLI.

Command-line interface for building and inspecting click packages.
"""

from __future__ import annotations

import asyncio
import io
import tarfile
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from .core.config import get_config
from .core.exceptions import ArchiveError
from .core.logging import setup_logging

app = typer.Typer(
    name="webber",
    help="Package web sites as installable click applications",
    add_completion=False,
)

console = Console()


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        from . import __version__
        console.print(f"webber v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """Webber: web site to click package builder."""
    pass


@app.command()
def build(
    url: str = typer.Argument(..., help="Address of the web site"),
    name: str = typer.Option(..., "--name", "-n", help="Display name of the app"),
    theme_color: str = typer.Option("#ffffff", "--theme-color", "-c", help="Splash screen color"),
    icon_url: str = typer.Option("", "--icon-url", "-i", help="Icon URL; the bundled icon is used if it has no extension"),
    url_patterns: Optional[str] = typer.Option(
        None,
        "--url-patterns",
        "-p",
        help="URL patterns the app may navigate to (default: the site's host)",
    ),
    staging_root: Optional[Path] = typer.Option(
        None,
        "--staging-root",
        "-o",
        help="Build directory, wiped before the build",
        file_okay=False,
        resolve_path=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose logging"),
) -> None:
    """Build a click package for a web site."""
    from .models.package import PackageRequest
    from .orchestration import build_package
    from .services.metadata import default_url_patterns

    config = get_config()
    if verbose:
        config = config.model_copy(update={"log_level": "DEBUG"})
    setup_logging(config)

    request = PackageRequest(
        url=url,
        name=name,
        theme_color=theme_color,
        icon_url=icon_url,
        url_patterns=url_patterns if url_patterns is not None else default_url_patterns(url),
    )

    console.print(Panel.fit(
        f"[bold blue]webber[/bold blue]\n{request.url} → click package",
        border_style="blue",
    ))

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        task = progress.add_task("Building package...", total=None)
        result = asyncio.run(build_package(request, staging_root=staging_root, config=config))
        progress.update(task, completed=True)

    if not result.success:
        console.print("\n[bold red]✗ Build failed![/bold red]")
        console.print(f"Error: {result.error}")
        if result.failed_stage:
            kind = f" ({result.error_kind.value})" if result.error_kind else ""
            console.print(f"Failed at: {result.failed_stage}{kind}")
        raise typer.Exit(1)

    console.print("\n[bold green]✓ Package built successfully![/bold green]\n")

    table = Table(title="Build Results")
    table.add_column("Stage", style="cyan")
    table.add_column("Duration")
    table.add_column("SHA-256", style="dim")
    for stage in result.stages:
        table.add_row(stage.stage_name, f"{stage.duration_seconds * 1000:.1f}ms", stage.output_hash[:16])
    console.print(table)

    console.print(f"\n[bold]App name:[/bold] {result.appname}")
    console.print(f"[bold]Icon:[/bold] {result.icon_filename}")
    console.print(f"[bold]Package:[/bold] {result.package_path}")


@app.command()
def appname(
    url: str = typer.Argument(..., help="Address of the web site"),
) -> None:
    """Print the appname derived from a URL."""
    from .services.metadata import derive_appname

    console.print(derive_appname(url), highlight=False)


@app.command()
def inspect(
    package: Path = typer.Argument(
        ...,
        help="Path to a .click package",
        exists=True,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
    ),
) -> None:
    """List the members of a click package and the files in its tarballs."""
    from .services.archive import read_container

    try:
        entries = read_container(package)
    except ArchiveError as e:
        console.print(f"[red]Cannot read package: {e.message}[/red]")
        raise typer.Exit(1)

    table = Table(title=package.name)
    table.add_column("#", justify="right")
    table.add_column("Member", style="cyan")
    table.add_column("Size", justify="right")
    for index, entry in enumerate(entries, start=1):
        table.add_row(str(index), entry.name, str(entry.size))
    console.print(table)

    for entry in entries:
        if not entry.name.endswith(".tar.gz"):
            continue
        console.print(f"\n[bold]{entry.name}:[/bold]")
        try:
            with tarfile.open(fileobj=io.BytesIO(entry.data), mode="r:gz") as tar:
                for member in tar.getmembers():
                    suffix = "/" if member.isdir() else ""
                    console.print(f"  • {member.name}{suffix}", highlight=False)
        except tarfile.TarError as e:
            console.print(f"  [red]unreadable tarball: {e}[/red]")


@app.command()
def config() -> None:
    """Show current configuration."""
    cfg = get_config()

    table = Table(title="Current Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    timeout = cfg.network.icon_timeout_seconds
    table.add_row("Log Level", cfg.log_level)
    table.add_row("Staging Root", str(cfg.staging.root))
    table.add_row("Icon Timeout", f"{timeout:g}s" if timeout else "none")
    table.add_row("Follow Redirects", str(cfg.network.follow_redirects))
    table.add_row("User-Agent", cfg.network.user_agent)

    console.print(table)

    console.print("\n[dim]Configure via environment variables:[/dim]")
    console.print("  WEBBER_LOG_LEVEL, WEBBER_STAGING_ROOT, WEBBER_ICON_TIMEOUT")


def run() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    run()
