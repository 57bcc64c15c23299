# frontend/app.py

import logging

from flask import Flask, jsonify

from frontend.api import api_blueprint
from skillsweeper.config import load_config


def create_app(config_path=None, config=None):
    app = Flask(__name__)
    app.config["SKILLSWEEPER"] = config or load_config(config_path)
    app.register_blueprint(api_blueprint, url_prefix="/api")

    @app.route("/")
    def index():
        return jsonify({
            "name": "skillsweeper",
            "endpoints": ["/api/new_game", "/api/reset", "/api/step", "/api/state"],
        })

    return app


def main():
    import argparse

    parser = argparse.ArgumentParser()
    parser.add_argument("--port", type=int, default=5000, help="Port to run the server on")
    parser.add_argument("--host", type=str, default="127.0.0.1", help="Host IP")
    parser.add_argument("--config", type=str, default=None, help="path to skillsweeper yaml config")
    parser.add_argument("--debug", action="store_true", help="Enable debug mode")
    args = parser.parse_args()

    config = load_config(args.config)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else config["logging"]["level"],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = create_app(config=config)
    print(f"Running on http://{args.host}:{args.port}/")
    app.run(debug=args.debug, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
