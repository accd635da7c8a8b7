import pytest
from flask.testing import FlaskClient

from pitch_counter.cli._server import create_session_app
from pitch_counter.repos.serialization import player_to_dict
from pitch_counter.services.session import SessionController
from tests.helpers import make_hit, make_player


@pytest.fixture
def client(controller: SessionController) -> FlaskClient:
    app = create_session_app(controller)
    app.config["TESTING"] = True
    return app.test_client()


def _add_player(client: FlaskClient, number: int) -> str:
    resp = client.post("/players", json={"number": number})
    assert resp.status_code == 201
    return resp.get_json()["id"]


class TestPlayers:
    def test_add_and_list(self, client: FlaskClient) -> None:
        _add_player(client, 7)
        resp = client.get("/players")
        assert resp.status_code == 200
        assert [p["number"] for p in resp.get_json()] == [7]

    def test_invalid_and_duplicate(self, client: FlaskClient) -> None:
        assert client.post("/players", json={"number": 0}).status_code == 400
        assert client.post("/players", json={"number": "²"}).status_code == 400
        _add_player(client, 7)
        resp = client.post("/players", json={"number": "7"})
        assert resp.status_code == 409
        assert "already exists" in resp.get_json()["error"]

    def test_delete(self, client: FlaskClient) -> None:
        player_id = _add_player(client, 7)
        assert client.delete(f"/players/{player_id}").status_code == 200
        assert client.get("/players").get_json() == []
        assert client.get(f"/players/{player_id}/stats").status_code == 404


class TestRecording:
    def test_hit_flow_auto_commits(self, client: FlaskClient) -> None:
        player_id = _add_player(client, 7)
        assert client.post(f"/session/{player_id}").get_json()["selection"]["state"] == "empty"

        client.post("/session/type", json={"pitchType": "curveball"})
        client.post("/session/swing", json={"swung": True})
        client.post("/session/result", json={"result": "hit"})
        partial = client.post("/session/placement", json={"hitPlacement": "2B"}).get_json()
        assert partial["committed"] is None
        assert partial["selection"]["state"] == "hit_details_partial"

        done = client.post("/session/hit-type", json={"hitType": "ground-ball"}).get_json()
        assert done["committed"]["hitPlacement"] == "2B"
        assert done["selection"]["state"] == "empty"

        stats = client.get(f"/players/{player_id}/stats").get_json()
        assert stats["hits"] == 1
        assert stats["hit_placement_counts"] == {"2B": 1}

    def test_out_of_order_is_conflict(self, client: FlaskClient) -> None:
        player_id = _add_player(client, 7)
        client.post(f"/session/{player_id}")
        assert client.post("/session/swing", json={"swung": False}).status_code == 409

    def test_bad_values_are_rejected(self, client: FlaskClient) -> None:
        player_id = _add_player(client, 7)
        client.post(f"/session/{player_id}")
        assert client.post("/session/type", json={"pitchType": "knuckleball"}).status_code == 400
        assert client.post("/session/swing", json={"swung": "yes"}).status_code == 400

    def test_commit_incomplete(self, client: FlaskClient) -> None:
        player_id = _add_player(client, 7)
        client.post(f"/session/{player_id}")
        client.post("/session/type", json={"pitchType": "fastball"})
        assert client.post("/session/commit").status_code == 409

    def test_open_unknown_player(self, client: FlaskClient) -> None:
        assert client.post("/session/nobody").status_code == 404

    def test_no_session(self, client: FlaskClient) -> None:
        assert client.post("/session/type", json={"pitchType": "fastball"}).status_code == 409


class TestGameAndSync:
    def test_game_info_and_name(self, client: FlaskClient) -> None:
        assert client.get("/game").get_json() == {"gameCode": "123456", "gameName": "", "playerCount": 0}
        assert client.put("/game/name", json={"gameName": "Opener"}).get_json()["gameName"] == "Opener"
        assert client.put("/game/name", json={"gameName": " "}).status_code == 400

    def test_join(self, client: FlaskClient) -> None:
        assert client.post("/game/join", json={"gameCode": "111222"}).get_json()["gameCode"] == "111222"
        assert client.post("/game/join", json={"gameCode": "1"}).status_code == 400

    def test_sync_without_remote(self, client: FlaskClient) -> None:
        assert client.post("/sync").status_code == 503

    def test_inbound_snapshot_replaces_players(self, client: FlaskClient) -> None:
        _add_player(client, 7)
        remote = make_player("r", 22, pitches=(make_hit(),))
        resp = client.post("/sync/snapshot", json={"players": [player_to_dict(remote)], "gameName": "Shared"})
        assert resp.status_code == 200
        assert resp.get_json()["gameName"] == "Shared"
        assert [p["number"] for p in client.get("/players").get_json()] == [22]
        assert client.get("/stats").get_json()["total_hits"] == 1

    def test_malformed_snapshot(self, client: FlaskClient) -> None:
        assert client.post("/sync/snapshot", json={"players": [{"number": 3}]}).status_code == 400
        assert client.post("/sync/snapshot", json=[1]).status_code == 400


class TestPractice:
    def test_add_list_clear(self, client: FlaskClient) -> None:
        resp = client.post("/practice", json={"pitchType": "slider", "percentX": 40, "percentY": 60, "x": 120, "y": 90})
        assert resp.status_code == 201
        assert resp.get_json()["percentX"] == 40.0
        assert len(client.get("/practice").get_json()) == 1
        client.delete("/practice")
        assert client.get("/practice").get_json() == []

    def test_invalid_practice_pitch(self, client: FlaskClient) -> None:
        assert client.post("/practice", json={"pitchType": "slider", "percentX": 140, "percentY": 60}).status_code == 400
        assert client.post("/practice", json={"pitchType": "slider"}).status_code == 400
