"""
Study Planner CLI.

A Rich terminal interface over the planning engine.

Commands:
- planner import-plan  - Load a plan document
- planner select       - Choose the plan to study
- planner routine      - Show the weekly routine
- planner generate     - Build or rebuild the calendar
- planner today        - Show today's sessions
- planner calendar     - Show upcoming days (or a whole week)
- planner complete     - Mark a session done and chain its review
- planner restart      - Throw away the calendar of the selected plan
"""
from __future__ import annotations

import sys
from datetime import date, datetime
from pathlib import Path
from typing import Optional

import typer
from loguru import logger
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm
from rich.table import Table

from config import get_settings

from .agenda import entries_on, group_by_date, overdue_entries, summarize_day, visible_entries, week_days
from .models import EntryStatus, PlanningEntry, StudyPlan, UserProfile, UserRoutine
from .reviews import complete_entry
from .scheduler import generate_schedule
from .store import PlannerStore, StoreError

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="planner",
    help="Study Planner: exam study calendar with spaced reviews",
    no_args_is_help=True,
)
console = Console()

WEEKDAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

STATUS_STYLES = {
    EntryStatus.PENDING: "cyan",
    EntryStatus.DELAYED: "bold red",
    EntryStatus.COMPLETED: "green",
}


# =============================================================================
# Helpers
# =============================================================================


def get_store() -> PlannerStore:
    settings = get_settings()
    return PlannerStore(settings.planner_data_dir, UserProfile(settings.default_profile))


def fail(message: str) -> None:
    console.print(f"[bold red]Error:[/bold red] {escape(message)}")
    raise typer.Exit(1)


def selected_plan(store: PlannerStore, routine: UserRoutine) -> StudyPlan:
    if not routine.selected_plan_id:
        fail("No plan selected. Run 'planner select PLAN_ID' first.")
    try:
        return store.load_plan(routine.selected_plan_id)
    except (StoreError, ValidationError) as e:
        fail(str(e))


def load_routine(store: PlannerStore) -> UserRoutine:
    try:
        return store.load_routine()
    except (StoreError, ValidationError) as e:
        fail(f"Cannot load routine: {e}")


def load_entries(store: PlannerStore, plan_id: str) -> list[PlanningEntry]:
    try:
        return store.load_entries(plan_id)
    except (StoreError, ValidationError) as e:
        fail(f"Cannot load planning of {plan_id}: {e}")


def to_day(value: Optional[datetime]) -> date:
    return value.date() if value else date.today()


def describe(plan: StudyPlan, entry: PlanningEntry) -> tuple[str, str]:
    """(discipline name, goal label) of an entry."""
    discipline = plan.discipline(entry.discipline_id)
    goal = plan.find_goal(entry.discipline_id, entry.topic_id, entry.goal_id)
    discipline_name = discipline.name if discipline else entry.discipline_id
    if goal is None:
        return discipline_name, entry.goal_id

    label = f"{goal.title or goal.id} [dim]({goal.type.value})[/dim]"
    if entry.sub_goal_id:
        sub_goal = next((s for s in goal.sub_goals if s.id == entry.sub_goal_id), None)
        if sub_goal:
            label += f" - {sub_goal.title or sub_goal.id}"
    if entry.is_review:
        label = f"[magenta]Review {entry.review_step}[/magenta] {label}"
    return discipline_name, label


def entries_table(plan: StudyPlan, entries: list[PlanningEntry], title: str) -> Table:
    table = Table(title=title)
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Discipline")
    table.add_column("Goal")
    table.add_column("Minutes", justify="right")
    table.add_column("Status")

    for entry in entries:
        discipline_name, label = describe(plan, entry)
        style = STATUS_STYLES[entry.status]
        table.add_row(
            entry.id[:8],
            discipline_name,
            label,
            str(entry.duration_minutes),
            f"[{style}]{entry.status.value}[/{style}]",
        )
    return table


def resolve_entry_id(entries: list[PlanningEntry], prefix: str) -> str:
    matches = [e.id for e in entries if e.id.startswith(prefix)]
    if len(matches) != 1:
        fail(f"'{prefix}' matches {len(matches)} entries")
    return matches[0]


# =============================================================================
# Plan Commands
# =============================================================================


@app.command("import-plan")
def import_plan(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Plan JSON document"),
    select: bool = typer.Option(False, "--select", "-s", help="Also select the plan"),
) -> None:
    """Import a study plan document."""
    store = get_store()
    try:
        plan = store.import_plan(path)
    except (StoreError, ValidationError) as e:
        fail(str(e))

    console.print(f"[green]Imported plan[/green] {plan.name or plan.id} ({plan.id})")
    if select:
        routine = load_routine(store)
        store.save_routine(routine.model_copy(update={"selected_plan_id": plan.id}))
        console.print(f"Selected plan {plan.id}")


@app.command()
def plans() -> None:
    """List imported plans."""
    store = get_store()
    routine = load_routine(store)

    table = Table(title="Plans")
    table.add_column("")
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Disciplines", justify="right")
    table.add_column("Cycles", justify="right")
    table.add_column("System")

    for plan in store.list_plans():
        marker = "[green]*[/green]" if plan.id == routine.selected_plan_id else ""
        table.add_row(
            marker,
            plan.id,
            plan.name,
            str(len(plan.disciplines)),
            str(len(plan.cycles)),
            plan.cycle_system.value,
        )
    console.print(table)


@app.command()
def select(plan_id: str = typer.Argument(..., help="Plan to study")) -> None:
    """Select the plan to study."""
    store = get_store()
    try:
        store.load_plan(plan_id)
    except (StoreError, ValidationError) as e:
        fail(str(e))
    routine = load_routine(store)
    store.save_routine(routine.model_copy(update={"selected_plan_id": plan_id}))
    console.print(f"Selected plan {plan_id}")


# =============================================================================
# Routine Commands
# =============================================================================


@app.command()
def routine() -> None:
    """Show the weekly routine."""
    current = load_routine(get_store())

    table = Table(title="Weekly Routine")
    table.add_column("Day")
    table.add_column("Minutes", justify="right")
    for index, name in enumerate(WEEKDAY_NAMES):
        minutes = current.days.get(index, 0) or 0
        table.add_row(name, f"{minutes:g}" if minutes else "[dim]-[/dim]")

    console.print(table)
    console.print(f"Profile: [bold]{current.profile.value}[/bold]")
    console.print(f"Plan: {current.selected_plan_id or '[dim]none[/dim]'}")
    if current.is_paused:
        console.print("[yellow]Plan is paused[/yellow]")


@app.command("set-day")
def set_day(
    weekday: int = typer.Argument(..., min=0, max=6, help="0=Sunday ... 6=Saturday"),
    minutes: float = typer.Argument(..., min=0, help="Minutes available"),
) -> None:
    """Set the study minutes available on a weekday."""
    store = get_store()
    current = load_routine(store)
    days = dict(current.days)
    days[weekday] = minutes
    store.save_routine(current.model_copy(update={"days": days}))
    console.print(f"{WEEKDAY_NAMES[weekday]}: {minutes:g} min")


@app.command()
def profile(value: UserProfile = typer.Argument(..., help="Proficiency profile")) -> None:
    """Set the proficiency profile."""
    store = get_store()
    current = load_routine(store)
    store.save_routine(current.model_copy(update={"profile": value}))
    console.print(f"Profile set to {value.value}")


@app.command()
def pause() -> None:
    """Pause the plan; sessions are hidden until resumed."""
    store = get_store()
    store.save_routine(load_routine(store).model_copy(update={"is_paused": True}))
    console.print("[yellow]Plan paused[/yellow]")


@app.command()
def resume() -> None:
    """Resume a paused plan."""
    store = get_store()
    store.save_routine(load_routine(store).model_copy(update={"is_paused": False}))
    console.print("[green]Plan resumed[/green]")


# =============================================================================
# Planning Commands
# =============================================================================


@app.command()
def generate(
    start: Optional[datetime] = typer.Option(
        None, "--start", formats=["%Y-%m-%d"], help="First day to schedule (default today)"
    ),
    replan: bool = typer.Option(False, "--replan", help="Rebuild after a routine change"),
) -> None:
    """Generate or rebuild the study calendar."""
    settings = get_settings()
    store = get_store()
    current = load_routine(store)
    plan = selected_plan(store, current)

    existing = load_entries(store, plan.id)
    entries = generate_schedule(
        plan,
        current,
        to_day(start),
        existing,
        "replan" if replan else "new",
        settings=settings,
    )
    store.save_entries(plan.id, entries)

    pending = [e for e in entries if e.status != EntryStatus.COMPLETED]
    last_day = entries[-1].date.isoformat() if entries else "-"
    console.print(
        Panel(
            f"{len(entries)} sessions ({len(pending)} open)\nLast study day: {last_day}",
            title=plan.name or plan.id,
            border_style="cyan",
        )
    )


@app.command()
def today(
    on: Optional[datetime] = typer.Option(None, "--date", formats=["%Y-%m-%d"], help="Day to show"),
) -> None:
    """Show the sessions of a day."""
    store = get_store()
    current = load_routine(store)
    plan = selected_plan(store, current)
    day = to_day(on)

    if current.is_paused:
        console.print("[yellow]Plan is paused. Run 'planner resume' to see sessions.[/yellow]")
        return

    entries = load_entries(store, plan.id)
    day_entries = entries_on(entries, day)
    if not day_entries:
        console.print(f"[dim]No sessions on {day.isoformat()}[/dim]")
    else:
        console.print(entries_table(plan, day_entries, f"Sessions for {day.isoformat()}"))

    summary = summarize_day(entries, day)
    console.print(
        f"Done {summary.completed_sessions}/{summary.total_sessions}  |  "
        f"Planned {summary.planned_minutes} min  |  Studied {summary.minutes_studied:g} min"
    )
    overdue = overdue_entries(entries, day)
    if overdue:
        console.print(f"[red]{len(overdue)} overdue sessions; run 'planner generate --replan'[/red]")


@app.command()
def calendar(
    start: Optional[datetime] = typer.Option(None, "--start", formats=["%Y-%m-%d"]),
    days: int = typer.Option(14, "--days", "-d", min=1, help="Number of days to show"),
    week: bool = typer.Option(False, "--week", "-w", help="Show the Sunday-to-Saturday week of --start"),
) -> None:
    """Show the calendar of upcoming days."""
    store = get_store()
    current = load_routine(store)
    plan = selected_plan(store, current)
    first = to_day(start)
    if week:
        week_range = week_days(first)
        first, last = week_range[0], week_range[-1]
    else:
        last = date.fromordinal(first.toordinal() + days - 1)

    entries = visible_entries(current, load_entries(store, plan.id))
    if current.is_paused:
        console.print("[yellow]Plan is paused[/yellow]")

    grouped = group_by_date(entries, first, last)
    if not grouped:
        console.print("[dim]Nothing scheduled in this range[/dim]")
        return

    for day, day_entries in grouped.items():
        total = sum(e.duration_minutes for e in day_entries)
        title = f"{WEEKDAY_NAMES[(day.weekday() + 1) % 7]} {day.isoformat()}  ({total} min)"
        console.print(entries_table(plan, day_entries, title))


@app.command()
def complete(
    entry_id: str = typer.Argument(..., help="Entry id (or unique prefix)"),
    minutes: float = typer.Option(..., "--minutes", "-m", min=0, help="Minutes actually studied"),
) -> None:
    """Mark a session as completed."""
    store = get_store()
    current = load_routine(store)
    plan = selected_plan(store, current)
    entries = load_entries(store, plan.id)

    full_id = resolve_entry_id(entries, entry_id)
    if any(e.id == full_id and e.is_completed for e in entries):
        console.print(f"[yellow]{full_id[:8]} is already completed[/yellow]")
        return

    updated = complete_entry(entries, full_id, minutes, plan)
    store.save_entries(plan.id, updated)

    console.print(f"[green]Completed[/green] {full_id[:8]} ({minutes:g} min)")
    if len(updated) > len(entries):
        review = updated[-1]
        console.print(f"Review {review.review_step} scheduled for {review.date.isoformat()}")


@app.command()
def restart(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Discard all sessions of the selected plan, history included."""
    store = get_store()
    plan = selected_plan(store, load_routine(store))
    if not yes and not Confirm.ask(f"Delete the whole calendar of {plan.name or plan.id}?"):
        raise typer.Exit(0)
    if store.clear_entries(plan.id):
        console.print("[yellow]Calendar cleared[/yellow]")
    else:
        console.print("[dim]Nothing to clear[/dim]")


# =============================================================================
# Entry Point
# =============================================================================


def configure_logging() -> None:
    settings = get_settings()
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<level>{message}</level>",
    )
    if settings.log_file:
        logger.add(settings.log_file, level=settings.log_level, rotation="1 MB")


def main() -> None:
    """CLI entry point."""
    configure_logging()
    app()


if __name__ == "__main__":
    main()
