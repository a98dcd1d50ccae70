"""CLI entry point for buildhooks"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from buildhooks.exceptions import BuildHooksError

app = typer.Typer(
    name="buildhooks",
    help="Run pre-build and post-build scripts around a build with a bounded wait",
    add_completion=False
)
console = Console()


def handle_buildhooks_error(error: BuildHooksError, exit_code: int = 1):
    """Handle buildhooks errors with Rich formatting

    Args:
        error: Exception to handle
        exit_code: Exit code to use
    """
    if error.help_text:
        panel_content = f"{error.message}\n\n[bold cyan]Help:[/bold cyan]\n{error.help_text}"
    else:
        panel_content = error.message

    panel = Panel(
        panel_content,
        title="[bold red]Error[/bold red]",
        border_style="red",
        expand=False
    )

    console.print(panel)
    raise typer.Exit(exit_code)


def handle_unexpected_error(error: Exception, exit_code: int = 1):
    """Handle unexpected errors with Rich formatting"""
    error_text = Text()
    error_text.append("✗ Unexpected Error: ", style="bold red")
    error_text.append(str(error))

    console.print(error_text)
    console.print(f"[dim]Error type: {type(error).__name__}[/dim]")

    raise typer.Exit(exit_code)


def _overrides(
    max_wait: Optional[float],
    poll_interval: Optional[int],
    interpreter: Optional[str]
) -> Dict[str, Any]:
    return {
        "max_wait_seconds": max_wait,
        "poll_interval_ms": poll_interval,
        "interpreter": interpreter,
    }


def _check_solution(solution: Path) -> None:
    if not solution.parent.is_dir():
        console.print(f"[red]Error: solution directory not found: {solution.parent}[/red]")
        raise typer.Exit(1)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show internal diagnostics")
):
    """Build hook runner"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)]
    )


@app.command(context_settings={"allow_extra_args": True, "ignore_unknown_options": True})
def run(
    ctx: typer.Context,
    solution: Path = typer.Argument(..., help="Solution file; scripts are looked up next to it"),
    max_wait: Optional[float] = typer.Option(None, "--max-wait", help="Seconds before a script is stopped"),
    poll_interval: Optional[int] = typer.Option(None, "--poll-interval", help="Milliseconds between completion checks"),
    interpreter: Optional[str] = typer.Option(None, "--interpreter", help="powershell, sh or python")
):
    """Run the build command (after --) between the PreBuild and PostBuild scripts"""
    from buildhooks.config import load_settings
    from buildhooks.host.local import LocalBuildHost
    from buildhooks.log_sink import LogSink
    from buildhooks.package import BuildHooksPackage

    _check_solution(solution)
    command = list(ctx.args)

    try:
        host = LocalBuildHost(solution)
        settings = load_settings(
            host.solution.directory,
            _overrides(max_wait, poll_interval, interpreter)
        )
        package = BuildHooksPackage(host, settings=settings, log_sink=LogSink(console=console))

        if package.initialize() is None:
            console.print("[dim]No build scripts found; running build without hooks[/dim]")

        try:
            exit_code = host.build(command)
        finally:
            package.dispose()

    except BuildHooksError as e:
        handle_buildhooks_error(e)
    except Exception as e:
        handle_unexpected_error(e)

    if exit_code != 0:
        console.print(f"[red]✗[/red] Build command exited with {exit_code}")
    raise typer.Exit(exit_code)


@app.command()
def discover(
    solution: Path = typer.Argument(..., help="Solution file"),
    interpreter: Optional[str] = typer.Option(None, "--interpreter", help="powershell, sh or python")
):
    """Show which build scripts exist for a solution"""
    from buildhooks.config import load_settings
    from buildhooks.engine.interpreters import get_interpreter
    from buildhooks.engine.script_source import ScriptSource

    _check_solution(solution)

    try:
        settings = load_settings(solution.parent, {"interpreter": interpreter})
        profile = get_interpreter(settings.interpreter)
        artifacts = ScriptSource(profile).discover_all(solution.parent, solution.stem)

        table = Table(title=f"Build scripts for {solution.stem}")
        table.add_column("Phase", style="cyan")
        table.add_column("Path", style="yellow")
        table.add_column("Present", style="green")

        for artifact in artifacts:
            table.add_row(
                artifact.label,
                str(artifact.path),
                "yes" if artifact.present else "no"
            )

        console.print(table)

        if any(artifact.present for artifact in artifacts) and profile.resolve_executable() is None:
            console.print(
                f"[yellow]Warning: interpreter '{profile.executable}' not found in PATH[/yellow]"
            )

    except BuildHooksError as e:
        handle_buildhooks_error(e)
    except Exception as e:
        handle_unexpected_error(e)


@app.command(name="exec")
def exec_phase(
    solution: Path = typer.Argument(..., help="Solution file"),
    phase: str = typer.Argument(..., help="pre or post"),
    max_wait: Optional[float] = typer.Option(None, "--max-wait", help="Seconds before the script is stopped"),
    poll_interval: Optional[int] = typer.Option(None, "--poll-interval", help="Milliseconds between completion checks"),
    interpreter: Optional[str] = typer.Option(None, "--interpreter", help="powershell, sh or python")
):
    """Run one phase script on its own and report the outcome"""
    from buildhooks.config import load_settings
    from buildhooks.engine.interpreters import get_interpreter
    from buildhooks.engine.script_executor import BoundedScriptExecutor
    from buildhooks.engine.script_source import ScriptSource
    from buildhooks.log_sink import LogSink
    from buildhooks.models import Phase

    _check_solution(solution)

    phases = {"pre": Phase.PRE, "post": Phase.POST}
    if phase.lower() not in phases:
        console.print(f"[red]Error: phase must be 'pre' or 'post', got '{phase}'[/red]")
        raise typer.Exit(2)

    try:
        settings = load_settings(
            solution.parent,
            _overrides(max_wait, poll_interval, interpreter)
        )
        profile = get_interpreter(settings.interpreter)
        profile.ensure_available()

        artifact = ScriptSource(profile).discover(solution.parent, solution.stem, phases[phase.lower()])
    except BuildHooksError as e:
        handle_buildhooks_error(e)
    except Exception as e:
        handle_unexpected_error(e)

    if not artifact.present:
        console.print(f"[yellow]No {artifact.label} script at {artifact.path}[/yellow]")
        raise typer.Exit(1)

    try:
        channel = LogSink(console=console).create_channel(settings.channel_name)
        executor = BoundedScriptExecutor(
            profile,
            channel=channel,
            max_wait=settings.max_wait_seconds,
            poll_interval=settings.poll_interval_seconds,
            stop_grace=settings.stop_grace_seconds,
            working_dir=solution.parent
        )
        outcome = executor.run(artifact.label, artifact.wrapped_text)
    except Exception as e:
        handle_unexpected_error(e)

    if outcome.succeeded:
        console.print(f"[green]✓[/green] {outcome.label} completed in {outcome.elapsed_seconds:.2f}s")
        return

    reason = "timed out" if not outcome.completed_in_time else "reported errors"
    console.print(f"[red]✗[/red] {outcome.label} {reason}")
    raise typer.Exit(1)


@app.command()
def version():
    """Display CLI version and available interpreters"""
    import importlib.metadata

    from buildhooks.engine.interpreters import INTERPRETERS

    try:
        cli_version = importlib.metadata.version("buildhooks")
    except importlib.metadata.PackageNotFoundError:
        cli_version = "0.1.0-dev"

    console.print(f"buildhooks version: [green]{cli_version}[/green]\n")

    table = Table(title="Script Interpreters")
    table.add_column("Name", style="cyan")
    table.add_column("Extension", style="yellow")
    table.add_column("Executable", style="magenta")

    for name, profile in sorted(INTERPRETERS.items()):
        table.add_row(name, f".{profile.extension}", profile.resolve_executable() or "not found")

    console.print(table)


if __name__ == "__main__":
    app()
