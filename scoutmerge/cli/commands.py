"""CLI commands for reviewers: pending submissions, aggregation, conflicts.

Commands:
    scoutmerge review              walk pending submissions, approve / reject
    scoutmerge aggregate MATCH_ID  re-run aggregation and print a summary
    scoutmerge conflicts           list unresolved conflicts
    scoutmerge resolve MATCH_ID    pick a value for each unresolved conflict

Each command runs its async work with asyncio.run() against the store returned
by get_store(), so tests can swap in an InMemoryStore.
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional

import questionary
import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from scoutmerge.aggregation.match import aggregate_match_stats
from scoutmerge.aggregation.resolution import ValueNotRecordedError, resolve_conflict
from scoutmerge.config import settings
from scoutmerge.db.session import dispose_engine, init_models
from scoutmerge.fields.defaults import field_label
from scoutmerge.review import approve_submission, reject_submission
from scoutmerge.schemas import MATCH_STATS_COLLECTION, MatchStats, TeamMatchStats, match_stats_id
from scoutmerge.store.base import StatsStore
from scoutmerge.store.sql import SqlStore

# Module-level console used by all commands
console = Console()

_SKIP = -1


def get_store() -> StatsStore:
    return SqlStore()


def _run(coro_fn) -> Any:
    """Run an async function against the store with engine setup / teardown."""

    async def _main() -> Any:
        store = get_store()
        try:
            if isinstance(store, SqlStore) and settings.create_tables_on_startup:
                await init_models()
            return await coro_fn(store)
        finally:
            if isinstance(store, SqlStore):
                await dispose_engine()

    return asyncio.run(_main())


# ---------------------------------------------------------------------------
# Display helpers
# ---------------------------------------------------------------------------


def _format_value(value: Any) -> str:
    return str(value) if isinstance(value, (int, str)) else repr(value)


def _conflicts_table(team: TeamMatchStats) -> Table:
    table = Table(title=f"Team {team.team_number} ({team.alliance})", show_lines=True)
    table.add_column("#", justify="right")
    table.add_column("Field")
    table.add_column("Reported values")

    for idx, conflict in enumerate(team.conflicts):
        if conflict.resolved:
            continue
        reported = "\n".join(
            f"{_format_value(v.value)}  ×{len(v.submission_ids)}  [dim]{', '.join(v.submitted_by)}[/dim]"
            for v in conflict.values
        )
        table.add_row(str(idx), field_label(conflict.field_path), reported)
    return table


def _summary_panel(stats: MatchStats) -> Panel:
    lines = []
    for team_number, team in stats.team_stats.items():
        open_count = sum(1 for c in team.conflicts if not c.resolved)
        marker = f"[yellow]{open_count} unresolved[/yellow]" if open_count else "[green]consistent[/green]"
        lines.append(f"Team {team_number} ({team.alliance}): {marker}")
    border = "yellow" if stats.has_unresolved_conflicts else "green"
    return Panel("\n".join(lines), title=f"Match {stats.match_id}", border_style=border)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def review(
    reviewer: str = typer.Option(
        ...,
        "--reviewer",
        envvar="SCOUTMERGE_REVIEWER",
        help="Reviewer id recorded as approvedBy.",
    ),
    match_id: Optional[str] = typer.Option(None, "--match-id", help="Only this match."),
) -> None:
    """Walk pending submissions and approve or reject each one."""

    async def _review(store: StatsStore) -> None:
        pending = await store.list_submissions(status="pending", match_id=match_id)
        if not pending:
            console.print(Panel(
                "[green]All caught up! No pending submissions.[/green]",
                title="ScoutMerge",
                border_style="green",
            ))
            return

        approved_count = rejected_count = skipped_count = 0
        for idx, sub in enumerate(pending):
            data = sub.data
            console.print(Panel(
                f"[bold]Match {sub.match_id} · Team {data.team_number} ({data.alliance})[/bold]\n\n"
                f"Auton:  scored {data.auton.fuel_scored}, missed {data.auton.fuel_missed}, "
                f"climb {data.auton.climb_level}\n"
                f"Teleop: scored {data.teleop.fuel_scored}, missed {data.teleop.fuel_missed}, "
                f"climb {data.teleop.climb_level}\n"
                f"Penalties: team {data.team_penalties}, opponent {data.opponent_penalties}\n\n"
                f"[dim]Scout: {sub.created_by_name} · {sub.created_at:%Y-%m-%d %H:%M}[/dim]",
                title=f"Submission {idx + 1}/{len(pending)}",
                border_style="blue",
            ))

            action = await questionary.select(
                "What would you like to do?",
                choices=["Approve", "Reject", "Skip (review later)"],
            ).ask_async()

            if action is None:
                console.print("\n[yellow]Review interrupted.[/yellow]")
                break
            if action == "Approve":
                try:
                    stats = await approve_submission(store, sub.id, approved_by=reviewer)
                except Exception as exc:
                    console.print(
                        f"[red]Approving {sub.id} failed: {exc}[/red]\n"
                        f"Check its status, then run: scoutmerge aggregate {sub.match_id}"
                    )
                    raise typer.Exit(code=1) from exc
                approved_count += 1
                if stats is not None:
                    console.print(_summary_panel(stats))
            elif action == "Reject":
                await reject_submission(store, sub.id)
                rejected_count += 1
                console.print("[red]Rejected.[/red]\n")
            else:
                skipped_count += 1

        console.print(Panel(
            f"Approved: {approved_count}\nRejected: {rejected_count}\nSkipped:  {skipped_count}",
            title="Session Summary",
            border_style="green",
        ))

    _run(_review)


def aggregate(match_id: str = typer.Argument(..., help="Match to aggregate.")) -> None:
    """Re-run aggregation for a match and print a per-team summary."""
    stats = _run(lambda store: aggregate_match_stats(match_id, store))
    if stats is None:
        console.print(f"[dim]Match {match_id} has no approved submissions yet.[/dim]")
        raise typer.Exit(code=1)
    console.print(_summary_panel(stats))


def conflicts(
    match_id: Optional[str] = typer.Option(None, "--match-id", help="Only this match."),
) -> None:
    """List unresolved conflicts with every reported value and its scouts."""

    async def _load(store: StatsStore) -> list[MatchStats]:
        if match_id is not None:
            doc = await store.get(MATCH_STATS_COLLECTION, match_stats_id(match_id))
            docs = [doc] if doc is not None else []
        else:
            docs = await store.list_documents(MATCH_STATS_COLLECTION)
        return [MatchStats.model_validate(d) for d in docs]

    open_stats = [s for s in _run(_load) if s.has_unresolved_conflicts]
    if not open_stats:
        console.print("[green]No conflicts to resolve. All approved submissions are consistent.[/green]")
        return

    for stats in open_stats:
        console.print(f"\n[bold]Match {stats.match_id}[/bold]")
        for team in stats.team_stats.values():
            if team.has_unresolved():
                console.print(_conflicts_table(team))


def resolve(match_id: str = typer.Argument(..., help="Match whose conflicts to resolve.")) -> None:
    """Choose a value for each unresolved conflict in a match."""
    stats_id = match_stats_id(match_id)

    async def _resolve(store: StatsStore) -> int:
        doc = await store.get(MATCH_STATS_COLLECTION, stats_id)
        if doc is None:
            console.print(f"[dim]No statistics yet for match {match_id}.[/dim]")
            return 0

        stats = MatchStats.model_validate(doc)
        resolved_count = 0
        for team_number, team in stats.team_stats.items():
            for idx, conflict in enumerate(team.conflicts):
                if conflict.resolved:
                    continue
                choices = [
                    questionary.Choice(
                        title=f"{_format_value(v.value)} ({', '.join(v.submitted_by)})",
                        value=pos,
                    )
                    for pos, v in enumerate(conflict.values)
                ]
                choices.append(questionary.Choice(title="Skip", value=_SKIP))

                picked = await questionary.select(
                    f"Team {team_number} · {field_label(conflict.field_path)}",
                    choices=choices,
                ).ask_async()

                if picked is None:
                    console.print("\n[yellow]Resolution interrupted.[/yellow]")
                    return resolved_count
                if picked == _SKIP:
                    continue

                try:
                    stats = await resolve_conflict(
                        stats_id,
                        team_number,
                        idx,
                        conflict.values[picked].value,
                        store,
                        recorded_only=True,
                    )
                except (LookupError, ValueNotRecordedError) as exc:
                    # Statistics were re-aggregated while the prompt was open
                    console.print(f"[red]{exc}. Run resolve again.[/red]")
                    raise typer.Exit(code=1) from exc
                resolved_count += 1

        if stats.has_unresolved_conflicts:
            console.print("[yellow]Some conflicts remain unresolved.[/yellow]")
        else:
            console.print("[green]All conflicts resolved.[/green]")
        return resolved_count

    count = _run(_resolve)
    console.print(f"Resolved {count} conflict(s).")
