from collections.abc import Callable
from pathlib import Path
from typing import TypeAlias

import pytest
from typer.testing import CliRunner, Result

from pitch_counter.cli.app import app

runner = CliRunner()

Invoke: TypeAlias = Callable[..., Result]


@pytest.fixture
def invoke(tmp_path: Path) -> Invoke:
    db = str(tmp_path / "game.db")
    config_file = str(tmp_path / "missing.yaml")

    def _invoke(*args: str, input: str | None = None) -> Result:
        return runner.invoke(app, ["--db", db, "--config", config_file, *args], input=input)

    return _invoke


class TestPlayers:
    def test_empty_roster(self, invoke: Invoke) -> None:
        result = invoke("players")
        assert result.exit_code == 0
        assert "No players yet" in result.output

    def test_add_and_list(self, invoke: Invoke) -> None:
        assert "Added player #7" in invoke("add", "7").output
        invoke("add", "12")
        result = invoke("players")
        assert result.exit_code == 0
        assert "7" in result.output
        assert "12" in result.output

    def test_add_invalid_number(self, invoke: Invoke) -> None:
        result = invoke("add", "100")
        assert result.exit_code == 1
        assert "valid player number" in result.output

    def test_add_duplicate(self, invoke: Invoke) -> None:
        invoke("add", "7")
        result = invoke("add", "7")
        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_remove_with_confirmation(self, invoke: Invoke) -> None:
        invoke("add", "7")
        declined = invoke("remove", "7", input="n\n")
        assert declined.exit_code == 0
        assert "No players yet" not in invoke("players").output

        result = invoke("remove", "7", "--yes")
        assert result.exit_code == 0
        assert "Removed player #7" in result.output
        assert "No players yet" in invoke("players").output

    def test_remove_unknown(self, invoke: Invoke) -> None:
        result = invoke("remove", "5", "--yes")
        assert result.exit_code == 1
        assert "not found" in result.output


class TestPitch:
    def test_no_swing_is_recorded(self, invoke: Invoke) -> None:
        invoke("add", "7")
        result = invoke("pitch", "7", "--type", "fastball", "--no-swing")
        assert result.exit_code == 0
        assert "Fastball - Didn't Swing" in result.output

    def test_hit_with_details(self, invoke: Invoke) -> None:
        invoke("add", "7")
        result = invoke(
            "pitch", "7", "--type", "slider", "--swing", "--result", "hit", "--placement", "ss", "--hit-type", "line-drive"
        )
        assert result.exit_code == 0
        assert "Slider - Swung - Hit - SS (Line Drive)" in result.output

    def test_incomplete_pitch_is_not_recorded(self, invoke: Invoke) -> None:
        invoke("add", "7")
        result = invoke("pitch", "7", "--type", "slider", "--swing")
        assert result.exit_code == 1
        assert "Pitch not recorded" in result.output
        assert "Total: " not in invoke("stats").output

    def test_no_swing_rejects_swing_details(self, invoke: Invoke) -> None:
        invoke("add", "7")
        result = invoke("pitch", "7", "--type", "fastball", "--no-swing", "--result", "hit", "--placement", "CF")
        assert result.exit_code == 1
        assert "only apply with --swing" in result.output
        assert "No pitches recorded yet" in invoke("stats").output

    def test_miss_rejects_hit_details(self, invoke: Invoke) -> None:
        invoke("add", "7")
        result = invoke("pitch", "7", "--type", "fastball", "--swing", "--result", "miss", "--hit-type", "fly-ball")
        assert result.exit_code == 1
        assert "only apply to hits" in result.output
        assert "No pitches recorded yet" in invoke("stats").output

    def test_unknown_player(self, invoke: Invoke) -> None:
        result = invoke("pitch", "9", "--type", "fastball", "--no-swing")
        assert result.exit_code == 1

    def test_pitches_persist_between_runs(self, invoke: Invoke) -> None:
        invoke("add", "7")
        invoke("pitch", "7", "--type", "fastball", "--swing", "--result", "miss")
        invoke("pitch", "7", "--type", "curveball", "--no-swing")
        result = invoke("stats", "7")
        assert result.exit_code == 0
        assert "Total pitches: 2" in result.output
        assert "Misses: 1" in result.output


class TestStats:
    def test_empty_game(self, invoke: Invoke) -> None:
        assert "No pitches recorded yet" in invoke("stats").output

    def test_game_totals(self, invoke: Invoke) -> None:
        invoke("add", "7")
        invoke("add", "12")
        invoke("pitch", "7", "--type", "cutter", "--swing", "--result", "hit", "--placement", "LF", "--hit-type", "fly-ball")
        invoke("pitch", "12", "--type", "cutter", "--swing", "--result", "miss")
        result = invoke("stats")
        assert result.exit_code == 0
        assert "Total: 2" in result.output
        assert "Hit rate: 50.0%" in result.output
        assert "Fly Ball" in result.output


class TestGame:
    def test_show_local_mode(self, invoke: Invoke) -> None:
        result = invoke("game", "show")
        assert result.exit_code == 0
        assert "Game code:" in result.output
        assert "Local mode" in result.output

    def test_name(self, invoke: Invoke) -> None:
        assert invoke("game", "name", "Home Opener").exit_code == 0
        assert "Home Opener" in invoke("game", "show").output

    def test_blank_name_rejected(self, invoke: Invoke) -> None:
        assert invoke("game", "name", "  ").exit_code == 1

    def test_join(self, invoke: Invoke) -> None:
        result = invoke("game", "join", "987-654")
        assert result.exit_code == 0
        assert "987654" in invoke("game", "show").output

    def test_join_bad_code(self, invoke: Invoke) -> None:
        result = invoke("game", "join", "12345")
        assert result.exit_code == 1
        assert "6-digit" in result.output

    def test_new_game_clears_players(self, invoke: Invoke) -> None:
        invoke("add", "7")
        result = invoke("game", "new", "--yes")
        assert result.exit_code == 0
        assert "New game created!" in result.output
        assert "No players yet" in invoke("players").output


class TestSync:
    def test_push_without_remote_fails(self, invoke: Invoke) -> None:
        result = invoke("sync", "push")
        assert result.exit_code == 1
        assert "not configured" in result.output

    def test_pull_without_remote_fails(self, invoke: Invoke) -> None:
        assert invoke("sync", "pull").exit_code == 1


class TestPractice:
    def test_add_list_clear(self, invoke: Invoke) -> None:
        assert invoke("practice", "add", "splitter", "25", "75").exit_code == 0
        listed = invoke("practice", "list")
        assert "Splitter" in listed.output
        assert "#FF44FF" in listed.output

        assert invoke("practice", "clear", "--yes").exit_code == 0
        assert "No practice pitches recorded" in invoke("practice", "list").output

    def test_out_of_range_rejected(self, invoke: Invoke) -> None:
        result = invoke("practice", "add", "splitter", "120", "50")
        assert result.exit_code != 0


def test_invalid_config_value(invoke: Invoke, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PITCH_COUNTER__SYNC__TIMEOUT", "never")
    result = invoke("players")
    assert result.exit_code == 1
    assert "sync.timeout" in result.output
