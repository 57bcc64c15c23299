# frontend/api.py

import logging

from flask import Blueprint, current_app, request, jsonify

from skillsweeper.game import GameSession
from skillsweeper.relocator import RelocationError
from skillsweeper.solver import SolverInvariantError

logger = logging.getLogger(__name__)

api_blueprint = Blueprint("api", __name__)

# Global session (single local player; no user/session IDs)
game = None


def _config():
    return current_app.config["SKILLSWEEPER"]


def _get_game():
    global game
    if game is None:
        board_cfg = _config()["board"]
        game = GameSession(
            width=board_cfg["width"],
            height=board_cfg["height"],
            num_mines=board_cfg["num_mines"],
            config=_config(),
        )
    return game


def _int_field(data, name, default=None):
    value = data.get(name, default)
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be an integer")


@api_blueprint.errorhandler(SolverInvariantError)
@api_blueprint.errorhandler(RelocationError)
def solver_failure(error):
    logger.error("Solver failure: %s", error)
    return jsonify({"error": str(error)}), 500


@api_blueprint.route("/new_game", methods=["POST"])
def new_game():
    global game
    data = request.get_json(silent=True) or {}
    board_cfg = _config()["board"]
    try:
        width = _int_field(data, "width", board_cfg["width"])
        height = _int_field(data, "height", board_cfg["height"])
        num_mines = _int_field(data, "num_mines", board_cfg["num_mines"])
        seed = _int_field(data, "seed")
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    game = GameSession(width=width, height=height, num_mines=num_mines, seed=seed, config=_config())
    return jsonify(game.get_state())


@api_blueprint.route("/reset", methods=["POST"])
def reset():
    data = request.get_json(silent=True) or {}
    try:
        width = _int_field(data, "width")
        height = _int_field(data, "height")
        num_mines = _int_field(data, "num_mines")
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    session = _get_game()
    session.reset(height=height, width=width, num_mines=num_mines)
    return jsonify(session.get_state())


@api_blueprint.route("/step", methods=["POST"])
def step():
    data = request.get_json(silent=True) or {}
    action = data.get("action")
    try:
        row = _int_field(data, "row")
        col = _int_field(data, "col")
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    if action not in {"reveal", "flag"} or row is None or col is None:
        return jsonify({"error": "Invalid input"}), 400

    result = _get_game().step(action, row, col)
    return jsonify(result)


@api_blueprint.route("/state", methods=["GET"])
def get_state():
    return jsonify(_get_game().get_state())
