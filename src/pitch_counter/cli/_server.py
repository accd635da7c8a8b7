from dataclasses import asdict
from typing import Any, TypeAlias, TypeVar

from flask import Flask, Response, jsonify, request

from pitch_counter.domain.errors import (
    DuplicatePlayerNumber,
    InvalidGameCode,
    InvalidPlayerNumber,
    PitchCounterError,
    PlayerNotFound,
    SyncUnavailable,
)
from pitch_counter.domain.pitch import FieldPosition, HitType, PitchType, SwingResult
from pitch_counter.domain.player import GameSnapshot
from pitch_counter.domain.result import Err, Ok, Result
from pitch_counter.domain.selection import PendingSelection
from pitch_counter.repos.serialization import (
    SnapshotDecodeError,
    pitch_to_dict,
    player_to_dict,
    practice_pitch_to_dict,
    snapshot_from_document,
)
from pitch_counter.services.session import SessionController, StepOutcome

E = TypeVar("E")

JsonResponse: TypeAlias = tuple[Response, int]

_STATUS_BY_ERROR: dict[type[PitchCounterError], int] = {
    InvalidPlayerNumber: 400,
    InvalidGameCode: 400,
    PlayerNotFound: 404,
    DuplicatePlayerNumber: 409,
    SyncUnavailable: 503,
}


def _error(message: str, status: int) -> JsonResponse:
    return jsonify({"error": message}), status


def _domain_error(error: PitchCounterError) -> JsonResponse:
    return _error(error.message, _STATUS_BY_ERROR.get(type(error), 409))


def _selection_to_dict(selection: PendingSelection) -> dict[str, Any]:
    return {
        "state": selection.state.value,
        "pitchType": selection.pitch_type,
        "swung": selection.swung,
        "result": selection.result,
        "hitPlacement": selection.hit_placement,
        "hitType": selection.hit_type,
    }


def _step_response(outcome: Result[StepOutcome, PitchCounterError]) -> JsonResponse:
    if isinstance(outcome, Err):
        return _domain_error(outcome.error)
    step = outcome.value
    committed = pitch_to_dict(step.committed) if step.committed is not None else None
    return jsonify({"selection": _selection_to_dict(step.selection), "committed": committed}), 200


def _body() -> dict[str, Any]:
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def _json_field(enum_type: type[E], field: str) -> E | None:
    try:
        return enum_type(_body().get(field))  # type: ignore[call-arg]
    except ValueError:
        return None


def create_session_app(controller: SessionController) -> Flask:
    """Create a Flask app exposing the session controller as JSON.

    Every route is a thin wrapper around one controller command or query.
    Domain errors come back as ``{"error": message}`` with 400 for invalid
    input, 404 for an unknown player, 409 for a conflicting or out-of-order
    request and 503 when the remote store cannot be reached.
    """
    app = Flask(__name__)

    # -- Players -------------------------------------------------------------

    @app.route("/players", methods=["GET"])
    def list_players() -> JsonResponse:
        return jsonify([player_to_dict(p) for p in controller.ordered_players()]), 200

    @app.route("/players", methods=["POST"])
    def add_player() -> JsonResponse:
        body = _body()
        match controller.add_player(str(body.get("number", ""))):
            case Ok(player):
                return jsonify(player_to_dict(player)), 201
            case Err(e):
                return _domain_error(e)

    @app.route("/players/<player_id>", methods=["DELETE"])
    def delete_player(player_id: str) -> JsonResponse:
        controller.delete_player(player_id)
        return jsonify({}), 200

    @app.route("/players/<player_id>/stats", methods=["GET"])
    def player_stats(player_id: str) -> JsonResponse:
        stats = controller.player_stats(player_id)
        if stats is None:
            return _error(f"Player {player_id} not found", 404)
        return jsonify(asdict(stats)), 200

    # -- Recording session ---------------------------------------------------

    @app.route("/session/<player_id>", methods=["POST"])
    def open_session(player_id: str) -> JsonResponse:
        match controller.open_session(player_id):
            case Ok(_):
                return jsonify({"selection": _selection_to_dict(controller.selection)}), 200
            case Err(e):
                return _domain_error(e)

    @app.route("/session", methods=["DELETE"])
    def cancel_session() -> JsonResponse:
        controller.cancel_session()
        return jsonify({}), 200

    @app.route("/session/type", methods=["POST"])
    def choose_type() -> JsonResponse:
        pitch_type = _json_field(PitchType, "pitchType")
        if pitch_type is None:
            return _error("Unknown pitch type", 400)
        return _step_response(controller.choose_type(pitch_type))

    @app.route("/session/swing", methods=["POST"])
    def choose_swing() -> JsonResponse:
        swung = _body().get("swung")
        if not isinstance(swung, bool):
            return _error("'swung' must be true or false", 400)
        return _step_response(controller.choose_swing(swung))

    @app.route("/session/result", methods=["POST"])
    def choose_result() -> JsonResponse:
        result = _json_field(SwingResult, "result")
        if result is None:
            return _error("Unknown swing result", 400)
        return _step_response(controller.choose_result(result))

    @app.route("/session/placement", methods=["POST"])
    def choose_placement() -> JsonResponse:
        placement = _json_field(FieldPosition, "hitPlacement")
        if placement is None:
            return _error("Unknown field position", 400)
        return _step_response(controller.choose_hit_placement(placement))

    @app.route("/session/hit-type", methods=["POST"])
    def choose_hit_type() -> JsonResponse:
        hit_type = _json_field(HitType, "hitType")
        if hit_type is None:
            return _error("Unknown hit type", 400)
        return _step_response(controller.choose_hit_type(hit_type))

    @app.route("/session/commit", methods=["POST"])
    def commit() -> JsonResponse:
        match controller.commit():
            case Ok(record):
                return jsonify(pitch_to_dict(record)), 201
            case Err(e):
                return _domain_error(e)

    # -- Stats and practice --------------------------------------------------

    @app.route("/stats", methods=["GET"])
    def stats() -> JsonResponse:
        return jsonify(asdict(controller.game_stats())), 200

    @app.route("/practice", methods=["GET"])
    def list_practice() -> JsonResponse:
        return jsonify([practice_pitch_to_dict(p) for p in controller.practice_pitches()]), 200

    @app.route("/practice", methods=["POST"])
    def add_practice() -> JsonResponse:
        body = _body()
        pitch_type = _json_field(PitchType, "pitchType")
        if pitch_type is None:
            return _error("Unknown pitch type", 400)
        try:
            pitch = controller.record_practice_pitch(
                pitch_type,
                float(body["percentX"]),
                float(body["percentY"]),
                x=body.get("x"),
                y=body.get("y"),
            )
        except KeyError as e:
            return _error(f"Missing field {e.args[0]!r}", 400)
        except (TypeError, ValueError) as e:
            return _error(str(e), 400)
        return jsonify(practice_pitch_to_dict(pitch)), 201

    @app.route("/practice", methods=["DELETE"])
    def clear_practice() -> JsonResponse:
        controller.clear_practice_pitches()
        return jsonify({}), 200

    # -- Game and sync -------------------------------------------------------

    def game_info() -> dict[str, Any]:
        state = controller.state
        return {"gameCode": state.game_code, "gameName": state.game_name, "playerCount": len(state.players)}

    @app.route("/game", methods=["GET"])
    def show_game() -> JsonResponse:
        return jsonify(game_info()), 200

    @app.route("/game/name", methods=["PUT"])
    def name_game() -> JsonResponse:
        name = str(_body().get("gameName", ""))
        if not controller.set_game_name(name):
            return _error("Game name must not be blank", 400)
        return jsonify(game_info()), 200

    @app.route("/game/new", methods=["POST"])
    def new_game() -> JsonResponse:
        controller.new_game()
        return jsonify(game_info()), 201

    @app.route("/game/join", methods=["POST"])
    def join_game() -> JsonResponse:
        code = str(_body().get("gameCode", ""))
        match controller.join_game(code):
            case Ok(_):
                return jsonify(game_info()), 200
            case Err(e):
                return _domain_error(e)

    @app.route("/sync", methods=["POST"])
    def sync_now() -> JsonResponse:
        match controller.sync_now():
            case Ok(_):
                return jsonify(game_info()), 200
            case Err(e):
                return _domain_error(e)

    @app.route("/sync/pull", methods=["POST"])
    def sync_pull() -> JsonResponse:
        match controller.pull_remote():
            case Ok(found):
                return jsonify({**game_info(), "found": found}), 200
            case Err(e):
                return _domain_error(e)

    @app.route("/sync/snapshot", methods=["POST"])
    def receive_snapshot() -> JsonResponse:
        document = request.get_json(silent=True)
        if not isinstance(document, dict):
            return _error("Snapshot must be a JSON object", 400)
        try:
            snapshot: GameSnapshot = snapshot_from_document(document)
        except SnapshotDecodeError as e:
            return _error(str(e), 400)
        controller.apply_remote_snapshot(snapshot)
        return jsonify(game_info()), 200

    return app
