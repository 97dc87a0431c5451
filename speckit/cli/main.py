"""Main CLI entry point using Typer."""

import json
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from speckit import __version__
from speckit.core.config import get_settings
from speckit.core.exceptions import SpeckitError
from speckit.core.logging_config import configure_logging
from speckit.core.state import PHASES, Phase, PhaseStatus, WorkflowStore, make_workflow_id
from speckit.planning import analyze_plan, get_next_wave
from speckit.planning.models import PlanAnalysis
from speckit.planning.renderer import format_time

app = typer.Typer(
    name="speckit",
    help="SpecKit - specification-driven development workflow",
    add_completion=True,
    rich_markup_mode="rich",
)

console = Console()

STATUS_STYLES = {
    PhaseStatus.COMPLETED: ("green", "Complete"),
    PhaseStatus.IN_PROGRESS: ("yellow", "In Progress"),
    PhaseStatus.PENDING: ("dim", "Pending"),
}

NEXT_ACTIONS = {
    Phase.CONSTITUTE: "define project principles",
    Phase.SPECIFY: "create requirements",
    Phase.PLAN: "design architecture",
    Phase.IMPLEMENT: "start building",
}


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]SpecKit[/bold blue] version {__version__}")
        raise typer.Exit()


def _store() -> WorkflowStore:
    settings = get_settings()
    return WorkflowStore(settings.base_dir, settings.state_filename)


def _fail(message: str) -> typer.Exit:
    console.print(f"[bold red]Error:[/bold red] {message}")
    return typer.Exit(code=1)


def _load_plan(plan_file: Path | None) -> PlanAnalysis:
    path = plan_file or get_settings().plan_path
    if not path.is_file():
        raise _fail(f"Plan file not found: {path}")
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise _fail(f"Cannot read plan file {path}: {e}") from e
    return analyze_plan(content)


def _print_errors(analysis: PlanAnalysis) -> None:
    console.print("[bold red]Plan validation failed[/bold red]")
    for error in analysis.report.errors:
        console.print(f"  • {error}", style="red", markup=False)


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """
    SpecKit - Constitute, Specify, Plan, Implement.

    Tracks workflow progress and turns the plan's task list into a
    parallel execution schedule.
    """
    configure_logging(get_settings())


@app.command()
def init(
    name: str = typer.Argument(..., help="Project name"),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Overwrite an existing workflow",
    ),
) -> None:
    """
    Initialize a new workflow in the current directory.
    """
    store = _store()
    workflow_id = make_workflow_id(name)

    try:
        store.init_workflow(workflow_id, name, force=force)
    except SpeckitError as e:
        raise _fail(str(e)) from e

    console.print(f"Initialized workflow [bold]{workflow_id}[/bold] at {store.path}")
    console.print(f"[dim]Next: run [cyan]speckit phase {Phase.CONSTITUTE.value} in_progress[/cyan][/dim]")


@app.command()
def status(
    as_json: bool = typer.Option(False, "--json", help="Print raw state as JSON"),
) -> None:
    """
    Show workflow progress and phase status.
    """
    try:
        state = _store().load()
    except SpeckitError as e:
        raise _fail(str(e)) from e

    if as_json:
        typer.echo(state.model_dump_json(indent=2, by_alias=True))
        return

    progress = state.progress
    filled = progress // 10
    bar = "█" * filled + "░" * (10 - filled)

    console.print(
        Panel(
            f"[bold]Project:[/bold] {state.project_name}\n"
            f"[bold]Workflow ID:[/bold] {state.workflow_id}\n"
            f"[bold]Progress:[/bold] [cyan]{bar}[/cyan] {progress}%",
            title="[bold blue]SpecKit Workflow Status[/bold blue]",
            border_style="blue",
        )
    )

    table = Table(title="Phases")
    table.add_column("Phase", style="bold")
    table.add_column("Status")
    table.add_column("Quality")

    for phase in PHASES:
        entry = state.phase(phase)
        color, label = STATUS_STYLES[entry.status]
        quality = f"{entry.quality}/100" if entry.quality is not None else "-"
        table.add_row(phase.value.capitalize(), f"[{color}]{label}[/{color}]", quality)

    console.print(table)

    implement = state.phase(Phase.IMPLEMENT)
    if implement.task_progress:
        done = sum(1 for s in implement.task_progress.values() if s == PhaseStatus.COMPLETED)
        console.print(f"[bold]Tasks:[/bold] {done}/{len(implement.task_progress)} completed")

    if state.is_complete:
        console.print("[bold green]Workflow complete![/bold green]")
    else:
        current = state.current_phase
        console.print(
            f"[bold]Current Phase:[/bold] [cyan]{current.value}[/cyan] "
            f"- next, {NEXT_ACTIONS[current]}"
        )


@app.command()
def phase(
    name: Phase = typer.Argument(..., help="Phase to update"),
    new_status: PhaseStatus = typer.Argument(..., help="New status"),
    quality: int | None = typer.Option(
        None,
        "--quality",
        "-q",
        min=0,
        max=100,
        help="Quality score (0-100) for a completed phase",
    ),
) -> None:
    """
    Update the status of a workflow phase.
    """
    try:
        state = _store().update_phase(name, new_status, quality)
    except SpeckitError as e:
        raise _fail(str(e)) from e

    console.print(f"[green]Phase {name.value} is now {new_status.value}[/green]")
    console.print(f"[dim]Current phase: {state.current_phase.value} ({state.progress}%)[/dim]")


@app.command()
def reset() -> None:
    """
    Reset every phase to pending.
    """
    try:
        _store().reset()
    except SpeckitError as e:
        raise _fail(str(e)) from e

    console.print("[yellow]Workflow reset to the constitute phase[/yellow]")


@app.command()
def plan(
    plan_file: Path | None = typer.Argument(
        None,
        help="Plan document (defaults to .speckit/PLAN.md)",
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the analysis as JSON"),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the report to a file",
    ),
) -> None:
    """
    Validate a plan and show its parallel execution schedule.

    Exits with code 1 when the plan has missing references or cycles.

    Example:
        speckit plan .speckit/PLAN.md --output schedule.txt
    """
    analysis = _load_plan(plan_file)

    if as_json:
        rendered = json.dumps(analysis.to_dict(), indent=2, ensure_ascii=False)
        typer.echo(rendered)
    elif analysis.valid:
        rendered = analysis.execution_plan or ""
        console.print(rendered, markup=False, highlight=False, emoji=False, soft_wrap=True)
    else:
        rendered = "\n".join(analysis.report.errors)
        _print_errors(analysis)

    if output:
        output.write_text(rendered, encoding="utf-8")
        console.print(f"[green]Saved to {output}[/green]")

    if not analysis.valid:
        raise typer.Exit(code=1)


@app.command("next")
def next_tasks(
    plan_file: Path | None = typer.Argument(
        None,
        help="Plan document (defaults to .speckit/PLAN.md)",
    ),
    done: list[str] | None = typer.Option(
        None,
        "--done",
        "-d",
        help="Task ID to treat as completed (repeatable)",
    ),
) -> None:
    """
    List the tasks that can start now.

    Completed tasks come from the workflow state plus any --done options.
    """
    analysis = _load_plan(plan_file)
    if not analysis.valid:
        _print_errors(analysis)
        raise typer.Exit(code=1)

    store = _store()
    completed = set(done or [])
    if store.exists():
        try:
            completed.update(store.completed_tasks())
        except SpeckitError as e:
            raise _fail(str(e)) from e

    ready = get_next_wave(analysis.graph, completed)
    if not ready:
        console.print("[bold green]All tasks completed[/bold green]")
        return

    table = Table(title="Ready to Start")
    table.add_column("Task", style="cyan")
    table.add_column("Name", style="bold")
    table.add_column("Estimate")

    for task_id in ready:
        task = analysis.graph[task_id]
        estimate = format_time(task.estimated_time) if task.estimated_time is not None else "-"
        table.add_row(task_id, task.name, estimate)

    console.print(table)


@app.command()
def task(
    task_id: str = typer.Argument(..., help="Task ID, e.g. TASK-001"),
    new_status: PhaseStatus = typer.Argument(..., help="New status"),
) -> None:
    """
    Record implement-phase progress for a task.
    """
    try:
        _store().update_task_status(task_id, new_status)
    except SpeckitError as e:
        raise _fail(str(e)) from e

    console.print(f"[green]Task {task_id} is now {new_status.value}[/green]")


if __name__ == "__main__":
    app()
