from typing import Annotated

import typer

from pitch_counter.cli._logging import configure_logging
from pitch_counter.cli._output import (
    console,
    print_error,
    print_game_info,
    print_game_stats,
    print_pending_selection,
    print_pitch_recorded,
    print_player_added,
    print_player_stats,
    print_players,
    print_practice_pitches,
)
from pitch_counter.cli._server import create_session_app
from pitch_counter.cli.factory import build_session
from pitch_counter.config import AppSettings, ConfigError, create_config, load_settings
from pitch_counter.domain.pitch import FieldPosition, HitType, PitchType, SwingResult
from pitch_counter.domain.player import Player
from pitch_counter.domain.result import Err, Ok
from pitch_counter.services.session import SessionController, StepOutcome

app = typer.Typer(name="pitch-counter", help="Pitch counter: record pitches to opposing batters during a game")
game_app = typer.Typer(help="Game code, name and lifecycle")
sync_app = typer.Typer(help="Remote sync of the current game")
practice_app = typer.Typer(help="Location-tagged practice pitches")
app.add_typer(game_app, name="game")
app.add_typer(sync_app, name="sync")
app.add_typer(practice_app, name="practice")


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable DEBUG logging")] = False,
    db: Annotated[str | None, typer.Option("--db", help="Path to the local game database")] = None,
    sync_url: Annotated[str | None, typer.Option("--sync-url", help="Base URL of the remote game store")] = None,
    config_file: Annotated[str, typer.Option("--config", help="YAML config file")] = "pitch_counter.yaml",
) -> None:
    """Pitch counter: record pitches to opposing batters during a game."""
    configure_logging(verbose=verbose)
    try:
        ctx.obj = load_settings(create_config(yaml_path=config_file, db_path=db, sync_url=sync_url))
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from None
    if ctx.invoked_subcommand is None:
        raise typer.Exit()


_NumberArg = Annotated[int, typer.Argument(help="Player (uniform) number")]
_YesOpt = Annotated[bool, typer.Option("--yes", "-y", help="Skip the confirmation prompt")]


def _settings(ctx: typer.Context) -> AppSettings:
    return ctx.find_root().obj


def _require_player(controller: SessionController, number: int) -> Player:
    player = controller.state.find_by_number(number)
    if player is None:
        print_error(f"Player #{number} not found")
        raise typer.Exit(code=1)
    return player


# -- Players -----------------------------------------------------------------


@app.command()
def players(ctx: typer.Context) -> None:
    """List players, most recently pitched-to first."""
    with build_session(_settings(ctx)) as controller:
        print_players(controller.ordered_players())


@app.command()
def add(ctx: typer.Context, number: Annotated[str, typer.Argument(help="Player number (1-99)")]) -> None:
    """Add a player by number."""
    with build_session(_settings(ctx)) as controller:
        match controller.add_player(number):
            case Ok(player):
                print_player_added(player)
            case Err(e):
                print_error(e.message)
                raise typer.Exit(code=1)


@app.command()
def remove(ctx: typer.Context, number: _NumberArg, yes: _YesOpt = False) -> None:
    """Remove a player and all of their pitches."""
    with build_session(_settings(ctx)) as controller:
        player = _require_player(controller, number)
        if not yes and not typer.confirm(f"Remove player #{number}?"):
            raise typer.Exit()
        controller.delete_player(player.id)
        console.print(f"Removed player #{number}")


@app.command()
def pitch(
    ctx: typer.Context,
    number: _NumberArg,
    pitch_type: Annotated[PitchType, typer.Option("--type", "-t", help="Pitch type")],
    swing: Annotated[bool, typer.Option("--swing/--no-swing", help="Whether the batter swung")],
    result: Annotated[SwingResult | None, typer.Option("--result", "-r", help="Outcome of the swing")] = None,
    placement: Annotated[
        FieldPosition | None, typer.Option("--placement", "-p", case_sensitive=False, help="Where the hit landed")
    ] = None,
    hit_type: Annotated[HitType | None, typer.Option("--hit-type", help="Batted-ball type")] = None,
) -> None:
    """Record one pitch; it is saved as soon as the classification is complete."""
    hit_details = placement is not None or hit_type is not None
    if not swing and (result is not None or hit_details):
        print_error("--result, --placement and --hit-type only apply with --swing")
        raise typer.Exit(code=1)
    if result is SwingResult.MISS and hit_details:
        print_error("--placement and --hit-type only apply to hits")
        raise typer.Exit(code=1)
    with build_session(_settings(ctx)) as controller:
        player = _require_player(controller, number)
        controller.open_session(player.id)
        steps = [
            lambda: controller.choose_type(pitch_type),
            lambda: controller.choose_swing(swing),
        ]
        if result is not None:
            steps.append(lambda: controller.choose_result(result))
        if placement is not None:
            steps.append(lambda: controller.choose_hit_placement(placement))
        if hit_type is not None:
            steps.append(lambda: controller.choose_hit_type(hit_type))

        for step in steps:
            match step():
                case Ok(StepOutcome(committed=committed)) if committed is not None:
                    print_pitch_recorded(player, committed)
                    return
                case Ok(_):
                    continue
                case Err(e):
                    print_error(e.message)
                    raise typer.Exit(code=1)

        print_pending_selection(controller.selection)
        controller.cancel_session()
        raise typer.Exit(code=1)


@app.command()
def stats(
    ctx: typer.Context,
    number: Annotated[int | None, typer.Argument(help="Player number; omit for the whole game")] = None,
) -> None:
    """Show statistics for one player or the whole game."""
    with build_session(_settings(ctx)) as controller:
        if number is None:
            print_game_stats(controller.state, controller.game_stats())
            return
        player = _require_player(controller, number)
        player_stats = controller.player_stats(player.id)
        assert player_stats is not None
        print_player_stats(player, player_stats)


# -- Game --------------------------------------------------------------------


@game_app.command("show")
def game_show(ctx: typer.Context) -> None:
    """Show the game code, name and sync mode."""
    settings = _settings(ctx)
    with build_session(settings) as controller:
        print_game_info(controller.state, sync_enabled=settings.sync_configured)


@game_app.command("name")
def game_name(ctx: typer.Context, name: Annotated[str, typer.Argument(help="Display name for this game")]) -> None:
    """Name the current game."""
    with build_session(_settings(ctx)) as controller:
        if not controller.set_game_name(name):
            print_error("Game name must not be blank")
            raise typer.Exit(code=1)
        console.print(f"Game name set to [bold]{controller.state.game_name}[/bold]")


@game_app.command("new")
def game_new(ctx: typer.Context, yes: _YesOpt = False) -> None:
    """Start a new game under a fresh code, clearing all players."""
    if not yes and not typer.confirm("Create a new game? This clears all current players and data."):
        raise typer.Exit()
    with build_session(_settings(ctx)) as controller:
        code = controller.new_game()
        console.print(f"[bold green]New game created![/bold green] Game code: [bold]{code}[/bold]")


@game_app.command("join")
def game_join(ctx: typer.Context, code: Annotated[str, typer.Argument(help="6-digit game code")]) -> None:
    """Switch to another game code (and load it from the remote store when sync is on)."""
    with build_session(_settings(ctx)) as controller:
        match controller.join_game(code):
            case Ok(joined):
                console.print(f"Connected to game [bold]{joined}[/bold] ({len(controller.state.players)} players)")
            case Err(e):
                print_error(e.message)
                raise typer.Exit(code=1)


# -- Sync --------------------------------------------------------------------


@sync_app.command("push")
def sync_push(ctx: typer.Context) -> None:
    """Push the current game to the remote store now."""
    with build_session(_settings(ctx)) as controller:
        match controller.sync_now():
            case Ok(_):
                console.print("[bold green]Synced successfully![/bold green]")
            case Err(e):
                print_error(e.message)
                raise typer.Exit(code=1)


@sync_app.command("pull")
def sync_pull(ctx: typer.Context) -> None:
    """Replace local data with the remote copy of the current game."""
    with build_session(_settings(ctx)) as controller:
        match controller.pull_remote():
            case Ok(True):
                console.print(f"Loaded {len(controller.state.players)} players from remote")
            case Ok(False):
                console.print("No remote copy of this game yet")
            case Err(e):
                print_error(e.message)
                raise typer.Exit(code=1)


# -- Practice ----------------------------------------------------------------


@practice_app.command("add")
def practice_add(
    ctx: typer.Context,
    pitch_type: Annotated[PitchType, typer.Argument(help="Pitch type")],
    percent_x: Annotated[float, typer.Argument(min=0.0, max=100.0, help="Horizontal position, 0-100")],
    percent_y: Annotated[float, typer.Argument(min=0.0, max=100.0, help="Vertical position, 0-100")],
) -> None:
    """Record a practice pitch at a spot on the strike-zone diagram."""
    with build_session(_settings(ctx)) as controller:
        controller.record_practice_pitch(pitch_type, percent_x, percent_y)
        console.print(f"Recorded practice {pitch_type.display_name} at ({percent_x:.1f}%, {percent_y:.1f}%)")


@practice_app.command("list")
def practice_list(ctx: typer.Context) -> None:
    """List recorded practice pitches."""
    with build_session(_settings(ctx)) as controller:
        print_practice_pitches(controller.practice_pitches())


@practice_app.command("clear")
def practice_clear(ctx: typer.Context, yes: _YesOpt = False) -> None:
    """Delete every practice pitch."""
    if not yes and not typer.confirm("Are you sure you want to clear all practice pitches?"):
        raise typer.Exit()
    with build_session(_settings(ctx)) as controller:
        controller.clear_practice_pitches()
        console.print("Cleared practice pitches")


# -- Server ------------------------------------------------------------------


@app.command()
def serve(
    ctx: typer.Context,
    host: Annotated[str, typer.Option("--host", help="Interface to bind")] = "127.0.0.1",
    port: Annotated[int, typer.Option("--port", help="Port to listen on")] = 8000,
) -> None:
    """Serve the session commands as a JSON API for a browser UI."""
    with build_session(_settings(ctx)) as controller:
        flask_app = create_session_app(controller)
        console.print(f"Serving game [bold]{controller.state.game_code}[/bold] on http://{host}:{port}/")
        flask_app.run(host=host, port=port, threaded=False)
