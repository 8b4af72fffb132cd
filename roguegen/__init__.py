"""Seeded roguelike level generation.

The generation core (``roguegen.dungeon``, ``roguegen.services``) has no web
dependency. `create_app` wires the read-only preview API on top of it; Flask
is imported only when the factory runs.
"""

import os
from pathlib import Path


def _load_version() -> str:
    version_file = Path(__file__).resolve().parent.parent / "VERSION"
    try:
        return version_file.read_text(encoding="utf-8").strip()
    except OSError:
        return "0.4.0"


__version__ = _load_version()


def create_app(config=None):
    """Build the Flask app serving the level preview API.

    `config` is an optional mapping merged into ``app.config`` after the
    environment defaults (pass ROGUEGEN_DUNGEON_CONFIG to pin a DungeonConfig).
    """
    from dotenv import load_dotenv
    from flask import Flask

    # .env supplies ROGUEGEN_* defaults during development; real env vars win.
    load_dotenv()

    app = Flask(__name__)
    app.config.update(
        ROGUEGEN_DEFAULT_SEED=os.getenv("ROGUEGEN_DEFAULT_SEED", "roguegen"),
        ROGUEGEN_DUNGEON_CONFIG=None,
    )
    # level payloads keep their field order (depth, width, height, ...)
    app.json.sort_keys = False
    if config:
        app.config.update(config)

    from roguegen.routes.level_api import bp_levels

    app.register_blueprint(bp_levels)

    from roguegen.logging_utils import log

    log.debug(event="app_created", default_seed=app.config["ROGUEGEN_DEFAULT_SEED"])
    return app


__all__ = ["create_app", "__version__"]
