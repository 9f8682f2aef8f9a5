import asyncio
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Annotated, TypeVar

import typer

from champion_draft.cli._logging import configure_logging
from champion_draft.cli._output import (
    console,
    print_champion_roles,
    print_error,
    print_incomplete_teams,
    print_saved_teams,
    print_session,
    print_sync_errors,
)
from champion_draft.cli.factory import DraftContext, build_draft_context
from champion_draft.config import load_draft_config
from champion_draft.domain.errors import SyncError
from champion_draft.domain.events import Ack
from champion_draft.domain.result import Err, Ok, Result
from champion_draft.domain.role import ROLES, Role
from champion_draft.exceptions import DraftConfigError

app = typer.Typer(name="champion-draft", help="Random five-role champion draft with shared availability")


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable DEBUG logging")] = False,
) -> None:
    """Random five-role champion draft with shared availability."""
    configure_logging(verbose=verbose)
    if ctx.invoked_subcommand is None:
        raise typer.Exit()


_ConfigDirOpt = Annotated[Path | None, typer.Option("--config-dir", help="Directory containing draft.toml")]
_RoleArg = Annotated[Role, typer.Argument(help="Role to draft for")]
_YesOpt = Annotated[bool, typer.Option("--yes", help="Skip confirmation")]

T = TypeVar("T")


def _run(config_dir: Path | None, action: Callable[[DraftContext], Awaitable[T]], *, sync_on_open: bool = True) -> T:
    try:
        config = load_draft_config(config_dir)
    except DraftConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    async def runner() -> T:
        async with build_draft_context(config, sync_on_open=sync_on_open) as ctx:
            return await action(ctx)

    return asyncio.run(runner())


def _show_status(ctx: DraftContext) -> None:
    controller = ctx.controller
    counts = {role: controller.available_count(role) for role in ROLES}
    print_session(controller.session, counts, controller.can_lock_in())


def _report(result: Result[Ack, SyncError], success: str) -> None:
    match result:
        case Ok():
            console.print(f"[bold green]{success}[/bold green]")
        case Err(e):
            console.print(f"[yellow]{success} locally;[/yellow] backend update pending: {e.message}")


# --- draft session ---


@app.command()
def status(config_dir: _ConfigDirOpt = None) -> None:
    """Show the current draft and how many champions each role can still draw."""

    async def action(ctx: DraftContext) -> None:
        _show_status(ctx)

    _run(config_dir, action)


@app.command()
def pick(role: _RoleArg, config_dir: _ConfigDirOpt = None) -> None:
    """Draw a random champion for ROLE."""

    async def action(ctx: DraftContext) -> str | None:
        champion = ctx.controller.pick(role)
        if champion is not None:
            console.print(f"[bold]{role.value.upper()}[/bold]: {champion}")
        _show_status(ctx)
        return champion

    if _run(config_dir, action) is None:
        print_error(f"cannot draw for {role.value}: already drafted or nothing available")
        raise typer.Exit(code=1)


@app.command()
def reroll(role: _RoleArg, config_dir: _ConfigDirOpt = None) -> None:
    """Use this draft's one reroll on ROLE; then choose with `resolve`."""

    async def action(ctx: DraftContext) -> bool:
        offer = ctx.controller.reroll(role)
        if offer is not None:
            console.print(f"Keep [bold]{offer.original}[/bold] or take [bold]{offer.rerolled}[/bold]?")
        return offer is not None

    if not _run(config_dir, action):
        print_error(f"cannot reroll {role.value}: reroll used, no pick yet, or no alternative available")
        raise typer.Exit(code=1)


@app.command()
def resolve(
    role: _RoleArg,
    champion: Annotated[str, typer.Argument(help="The original or the rerolled champion")],
    config_dir: _ConfigDirOpt = None,
) -> None:
    """Settle a pending reroll on ROLE by keeping CHAMPION."""

    async def action(ctx: DraftContext) -> bool:
        return ctx.controller.resolve_reroll(role, champion)

    if not _run(config_dir, action, sync_on_open=False):
        print_error(f"{champion} is not one of the reroll choices for {role.value}")
        raise typer.Exit(code=1)


@app.command("lock-in")
def lock_in(config_dir: _ConfigDirOpt = None) -> None:
    """Save the current draft as a team and remove its champions from the pool."""

    async def action(ctx: DraftContext) -> bool:
        controller = ctx.controller
        if not controller.can_lock_in():
            return False
        team = controller.lock_in()
        if team is None:
            console.print("Nothing drafted; started a new draft.")
        else:
            console.print(f"[bold green]Locked in[/bold green] {', '.join(team.champions())}")
        return True

    if not _run(config_dir, action, sync_on_open=False):
        print_error("resolve the pending reroll before locking in")
        raise typer.Exit(code=1)


@app.command()
def discard(config_dir: _ConfigDirOpt = None) -> None:
    """Throw the current draft away; its champions become drawable again."""

    async def action(ctx: DraftContext) -> None:
        ctx.controller.discard()

    _run(config_dir, action, sync_on_open=False)
    console.print("Draft discarded.")


@app.command()
def park(config_dir: _ConfigDirOpt = None) -> None:
    """Keep the current draft for later and start a new one."""

    async def action(ctx: DraftContext) -> str | None:
        parked = ctx.controller.park()
        return None if parked is None else parked.id

    parked_id = _run(config_dir, action, sync_on_open=False)
    console.print(f"Parked draft {parked_id}." if parked_id else "Started a new draft.")


# --- incomplete drafts ---


@app.command()
def drafts(config_dir: _ConfigDirOpt = None) -> None:
    """List drafts in progress on this device."""

    async def action(ctx: DraftContext) -> None:
        print_incomplete_teams(ctx.controller.incomplete_teams(), ctx.controller.session.session_id)

    _run(config_dir, action, sync_on_open=False)


@app.command()
def resume(draft_id: Annotated[str, typer.Argument(help="Draft id from `drafts`")], config_dir: _ConfigDirOpt = None) -> None:
    """Continue a parked draft."""

    async def action(ctx: DraftContext) -> bool:
        if not ctx.controller.resume(draft_id):
            return False
        _show_status(ctx)
        return True

    if not _run(config_dir, action):
        print_error(f"no draft '{draft_id}'")
        raise typer.Exit(code=1)


@app.command("drop-draft")
def drop_draft(draft_id: Annotated[str, typer.Argument(help="Draft id from `drafts`")], config_dir: _ConfigDirOpt = None) -> None:
    """Delete a parked draft."""

    async def action(ctx: DraftContext) -> None:
        ctx.controller.delete_incomplete(draft_id)

    _run(config_dir, action, sync_on_open=False)
    console.print(f"Deleted draft {draft_id}.")


# --- team ledger ---


@app.command()
def teams(config_dir: _ConfigDirOpt = None) -> None:
    """List saved teams, newest first."""

    async def action(ctx: DraftContext) -> None:
        print_saved_teams(ctx.reconciler.saved_teams())

    _run(config_dir, action)


@app.command("show-team")
def show_team(timestamp: Annotated[str, typer.Argument(help="Team timestamp")], config_dir: _ConfigDirOpt = None) -> None:
    """Show one saved team."""

    async def action(ctx: DraftContext) -> bool:
        team = ctx.reconciler.find_team(timestamp)
        if team is None:
            return False
        print_saved_teams([team])
        return True

    if not _run(config_dir, action):
        print_error(f"no saved team '{timestamp}'")
        raise typer.Exit(code=1)


@app.command("delete-team")
def delete_team(
    timestamp: Annotated[str, typer.Argument(help="Team timestamp")],
    yes: _YesOpt = False,
    config_dir: _ConfigDirOpt = None,
) -> None:
    """Delete a saved team and make its champions available again."""
    if not yes:
        typer.confirm(f"Delete team '{timestamp}'?", abort=True)

    async def action(ctx: DraftContext) -> bool:
        if ctx.reconciler.find_team(timestamp) is None:
            return False
        _report(await ctx.reconciler.delete_saved_team(timestamp), "Deleted team")
        return True

    if not _run(config_dir, action):
        print_error(f"no saved team '{timestamp}'")
        raise typer.Exit(code=1)


@app.command("delete-all-teams")
def delete_all_teams(yes: _YesOpt = False, config_dir: _ConfigDirOpt = None) -> None:
    """Delete every saved team and restore all their champions."""
    if not yes:
        typer.confirm("Delete ALL saved teams?", abort=True)

    async def action(ctx: DraftContext) -> None:
        _report(await ctx.reconciler.delete_all_teams(), "Deleted all teams")

    _run(config_dir, action)


# --- availability administration ---


@app.command()
def reset(
    roles: Annotated[list[Role] | None, typer.Argument(help="Roles to reset (default: all)")] = None,
    yes: _YesOpt = False,
    config_dir: _ConfigDirOpt = None,
) -> None:
    """Make every champion of the given roles available again, regardless of saved teams."""
    selected = tuple(roles) if roles else ROLES
    if not yes:
        typer.confirm(f"Reset {', '.join(r.value for r in selected)}?", abort=True)

    async def action(ctx: DraftContext) -> None:
        _report(await ctx.reconciler.reset_by_roles(selected), "Reset")

    _run(config_dir, action)


@app.command()
def ban(champion: Annotated[str, typer.Argument(help="Champion name")], config_dir: _ConfigDirOpt = None) -> None:
    """Mark a champion unavailable in every role."""

    async def action(ctx: DraftContext) -> None:
        _report(await ctx.reconciler.ban_champion(champion), f"Banned {champion}")

    _run(config_dir, action)


@app.command("admin-team")
def admin_team(
    top: Annotated[str | None, typer.Option("--top")] = None,
    jungle: Annotated[str | None, typer.Option("--jungle")] = None,
    mid: Annotated[str | None, typer.Option("--mid")] = None,
    adc: Annotated[str | None, typer.Option("--adc")] = None,
    support: Annotated[str | None, typer.Option("--support")] = None,
    config_dir: _ConfigDirOpt = None,
) -> None:
    """Record a hand-picked team; its champions are removed like a lock-in."""
    mapping = {Role.TOP: top, Role.JUNGLE: jungle, Role.MID: mid, Role.ADC: adc, Role.SUPPORT: support}
    if not any(mapping.values()):
        print_error("give at least one champion, e.g. --mid Ahri")
        raise typer.Exit(code=1)

    async def action(ctx: DraftContext) -> None:
        _report(await ctx.reconciler.create_admin_team(mapping), "Saved admin team")

    _run(config_dir, action)


@app.command()
def roles(config_dir: _ConfigDirOpt = None) -> None:
    """List which roles each champion can be drafted for."""

    async def action(ctx: DraftContext) -> None:
        print_champion_roles(ctx.reconciler.index.champion_roles())

    _run(config_dir, action)


@app.command("set-roles")
def set_roles(
    champion: Annotated[str, typer.Argument(help="Champion name")],
    lanes: Annotated[list[Role], typer.Argument(help="Every role the champion can play")],
    config_dir: _ConfigDirOpt = None,
) -> None:
    """Set the roles a champion can be drafted for."""

    async def action(ctx: DraftContext) -> None:
        updated = ctx.reconciler.index.champion_roles()
        updated[champion] = tuple(role for role in ROLES if role in set(lanes))
        _report(await ctx.reconciler.save_champion_roles(updated), f"Updated {champion}")

    _run(config_dir, action)


# --- synchronisation ---


@app.command()
def sync(config_dir: _ConfigDirOpt = None) -> None:
    """Reload saved teams and availability from the backend."""

    async def action(ctx: DraftContext) -> None:
        print_sync_errors(await ctx.reconciler.sync())
        console.print(f"{len(ctx.reconciler.saved_teams())} saved teams, {ctx.reconciler.played_count()} champions played.")

    _run(config_dir, action, sync_on_open=False)


@app.command()
def watch(config_dir: _ConfigDirOpt = None) -> None:
    """Keep syncing on the configured interval until interrupted."""

    async def action(ctx: DraftContext) -> None:
        await ctx.reconciler.run_periodic(ctx.config.sync_interval_seconds, asyncio.Event())

    try:
        _run(config_dir, action)
    except KeyboardInterrupt:
        console.print("Stopped.")
