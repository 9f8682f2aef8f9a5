from collections.abc import Sequence

from rich.console import Console
from rich.table import Table

from champion_draft.domain.draft import DraftSession, IncompleteTeam
from champion_draft.domain.errors import DraftError
from champion_draft.domain.role import ROLES, Role
from champion_draft.domain.team import SavedTeam

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)


def print_error(message: str) -> None:
    err_console.print(f"[red bold]Error:[/red bold] {message}")


def print_sync_errors(errors: Sequence[DraftError]) -> None:
    for error in errors:
        err_console.print(f"[yellow]Pending:[/yellow] {error.message}")


def print_session(session: DraftSession, counts: dict[Role, int], can_lock_in: bool) -> None:
    title = f"Draft {session.session_id}" if session.session_id else "New draft"
    if session.is_complete:
        title += " (all roles drafted)"
    table = Table(title=title, show_edge=False, pad_edge=False)
    table.add_column("Role")
    table.add_column("Champion")
    table.add_column("Available", justify="right")
    for role in ROLES:
        champion = session.selection(role) or "-"
        if session.reroll is not None and session.reroll.role is role:
            champion = f"{session.reroll.original} [yellow]or[/yellow] {session.reroll.rerolled}"
        table.add_row(role.value.upper(), champion, str(counts.get(role, 0)))
    console.print(table)
    reroll_state = "used" if session.has_used_reroll else "available"
    lock_state = "[green]ready[/green]" if can_lock_in else "[yellow]resolve the reroll first[/yellow]"
    console.print(f"  Reroll: {reroll_state}   Lock-in: {lock_state}")


def print_saved_teams(teams: list[SavedTeam]) -> None:
    if not teams:
        console.print("No saved teams.")
        return
    table = Table(show_edge=False, pad_edge=False)
    table.add_column("Timestamp")
    for role in ROLES:
        table.add_column(role.value.upper())
    table.add_column("Admin")
    for team in teams:
        table.add_row(
            team.timestamp,
            *(team.team.get(role) or "-" for role in ROLES),
            "yes" if team.is_admin_created else "",
        )
    console.print(table)


def print_incomplete_teams(snapshots: list[IncompleteTeam], current_id: str | None) -> None:
    if not snapshots:
        console.print("No drafts in progress.")
        return
    table = Table(show_edge=False, pad_edge=False)
    table.add_column("")
    table.add_column("Id")
    table.add_column("Updated")
    table.add_column("Picks")
    for snapshot in snapshots:
        picks = ", ".join(f"{role.value}={c}" for role in ROLES if (c := snapshot.session.selection(role)))
        marker = "*" if snapshot.id == current_id else ""
        table.add_row(marker, snapshot.id, snapshot.timestamp, picks or "-")
    console.print(table)


def print_champion_roles(roles: dict[str, tuple[Role, ...]]) -> None:
    table = Table(show_edge=False, pad_edge=False)
    table.add_column("Champion")
    table.add_column("Roles")
    for champion, lanes in roles.items():
        table.add_row(champion, ", ".join(role.value for role in lanes))
    console.print(table)
