from rich.console import Console
from rich.table import Table

from pitch_counter.domain.pitch import FieldPosition, PitchRecord, PracticePitch
from pitch_counter.domain.pitch_stats import GameStats, PitchTypeBreakdown, PlayerStats
from pitch_counter.domain.player import GameState, Player
from pitch_counter.domain.selection import PendingSelection
from pitch_counter.services.stats_aggregator import hit_rate, placement_percentage, ranked, recent_pitches

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)


def print_error(message: str) -> None:
    err_console.print(f"[red bold]Error:[/red bold] {message}")


def print_player_added(player: Player) -> None:
    console.print(f"[bold green]Added[/bold green] player [bold]#{player.number}[/bold]")


def print_pitch_recorded(player: Player, pitch: PitchRecord) -> None:
    console.print(f"[bold green]Pitch recorded[/bold green] for #{player.number}: {pitch.describe()}")


def print_pending_selection(selection: PendingSelection) -> None:
    console.print(f"[yellow]Pitch not recorded[/yellow] — selection stopped at [bold]{selection.state}[/bold]")


def print_players(players: list[Player]) -> None:
    if not players:
        console.print("No players yet. Add a player number to start tracking pitches.")
        return
    table = Table(title="Players")
    table.add_column("#", justify="right")
    table.add_column("Pitches", justify="right")
    for slot in range(1, 4):
        table.add_column(f"Last {slot}")
    for player in players:
        recent = [p.describe() for p in recent_pitches(player, 3)]
        recent.extend(["—"] * (3 - len(recent)))
        table.add_row(str(player.number), str(len(player.pitches)), *recent)
    console.print(table)


def _print_breakdown_table(title: str, breakdown: dict[str, PitchTypeBreakdown]) -> None:
    if not breakdown:
        return
    table = Table(title=title)
    table.add_column("Pitch Type")
    table.add_column("Total", justify="right")
    table.add_column("Swings", justify="right")
    table.add_column("Hits", justify="right")
    table.add_column("Misses", justify="right")
    table.add_column("Hit %", justify="right")
    for name, row in breakdown.items():
        table.add_row(
            name,
            str(row.total),
            str(row.swings),
            str(row.hits),
            str(row.misses),
            f"{hit_rate(row.hits, row.swings):.1f}%",
        )
    console.print(table)


def _print_placements(counts: dict[FieldPosition, int], total_hits: int) -> None:
    if total_hits == 0:
        return
    table = Table(title="Hit Placement")
    table.add_column("Position")
    table.add_column("Hits", justify="right")
    table.add_column("Share", justify="right")
    for position in FieldPosition:
        table.add_row(
            f"{position} ({position.display_name})",
            str(counts.get(position, 0)),
            f"{placement_percentage(position, counts, total_hits):.1f}%",
        )
    console.print(table)


def print_player_stats(player: Player, stats: PlayerStats) -> None:
    console.print(f"[bold]Player #{player.number}[/bold]")
    if stats.total == 0:
        console.print("  No pitches recorded yet.")
        return
    console.print(f"  Total pitches: {stats.total}")
    console.print(f"  Swings: {stats.swings}  No swing: {stats.no_swings}")
    console.print(f"  Hits: {stats.hits}  Misses: {stats.misses}  Hit rate: {stats.hit_rate:.1f}%")
    _print_breakdown_table(
        "By Pitch Type",
        {pitch_type.display_name: row for pitch_type, row in stats.per_pitch_type_breakdown.items()},
    )
    _print_placements(stats.hit_placement_counts, stats.hits)


def print_game_stats(state: GameState, stats: GameStats) -> None:
    if stats.total_pitches == 0:
        console.print("No pitches recorded yet. Add players and record pitches to see statistics.")
        return
    title = state.game_name or "Game Statistics"
    console.print(f"[bold]{title}[/bold]")
    console.print(
        f"  Total: {stats.total_pitches}  Swings: {stats.total_swings}  Hits: {stats.total_hits}"
        f"  Misses: {stats.total_misses}  Hit rate: {stats.hit_rate:.1f}%"
    )
    _print_breakdown_table(
        "By Pitch Type",
        {pitch_type.display_name: row for pitch_type, row in sorted(stats.per_pitch_type.items())},
    )
    _print_placements(stats.hit_placement_counts, stats.total_hits)
    if stats.hit_type_counts:
        table = Table(title="Hit Types")
        table.add_column("Hit Type")
        table.add_column("Count", justify="right")
        for hit_type, count in ranked(stats.hit_type_counts):
            table.add_row(hit_type.display_name, str(count))
        console.print(table)


def print_game_info(state: GameState, *, sync_enabled: bool) -> None:
    console.print(f"Game code: [bold]{state.game_code}[/bold]")
    console.print(f"Game name: {state.game_name or '—'}")
    console.print(f"Players: {len(state.players)}")
    if sync_enabled:
        console.print("[green]Syncing across devices[/green]")
    else:
        console.print("[dim]Local mode (sync not configured)[/dim]")


def print_practice_pitches(pitches: tuple[PracticePitch, ...]) -> None:
    if not pitches:
        console.print("No practice pitches recorded.")
        return
    table = Table(title="Practice Pitches")
    table.add_column("Pitch Type")
    table.add_column("X %", justify="right")
    table.add_column("Y %", justify="right")
    table.add_column("Color")
    for pitch in pitches:
        color = pitch.marker_color
        table.add_row(
            pitch.pitch_type.display_name,
            f"{pitch.percent_x:.1f}",
            f"{pitch.percent_y:.1f}",
            f"[{color}]●[/{color}] {color}",
        )
    console.print(table)
