"""Level preview API.

Read-only endpoints that generate (or reuse) the full level set for a seed and
serve one depth as JSON or ASCII, plus a per-band summary of guaranteed item
counts. Every route takes the seed as the `seed` query parameter and falls
back to the app's ROGUEGEN_DEFAULT_SEED.
"""

import os
import threading

from flask import Blueprint, Response, current_app, jsonify, request

from roguegen.dungeon.config import DEPTH_BANDS, DungeonConfig
from roguegen.dungeon.pipeline import DungeonService
from roguegen.dungeon.render import level_to_dict, to_ascii
from roguegen.logging_utils import get_logger
from roguegen.random_source import SeededRandom
from roguegen.services.guarantees import GuaranteeConfig, GuaranteeTracker

log = get_logger("roguegen.api")

bp_levels = Blueprint("levels", __name__)

# (seed, config) -> (levels, guarantee report). Generation is deterministic so
# a cached set is always identical to a fresh one.
_level_cache = {}
_level_cache_lock = threading.Lock()
_LEVEL_CACHE_MAX = 8


def _config() -> DungeonConfig:
    cfg = current_app.config.get("ROGUEGEN_DUNGEON_CONFIG")
    return cfg if cfg is not None else DungeonConfig.from_env()


def _seed() -> str:
    seed = (request.args.get("seed") or "").strip()
    return seed or str(current_app.config.get("ROGUEGEN_DEFAULT_SEED", "roguegen"))


def _cache_key(seed: str, config: DungeonConfig):
    return (seed, tuple(sorted(vars(config).items())))


def get_cached_levels(seed: str, config: DungeonConfig):
    """Return (levels, report) for a seed, generating all depths on a miss."""
    key = _cache_key(seed, config)
    if os.environ.get("ROGUEGEN_DISABLE_CACHE") != "1":
        with _level_cache_lock:
            hit = _level_cache.get(key)
        if hit is not None:
            return hit
    service = DungeonService(SeededRandom(seed))
    levels = service.generate_all_levels(config)
    entry = (levels, service.last_guarantee_report)
    with _level_cache_lock:
        _level_cache[key] = entry
        if len(_level_cache) > _LEVEL_CACHE_MAX:
            first_key = next(iter(_level_cache.keys()))
            if first_key != key:
                _level_cache.pop(first_key, None)
    log.debug(event="level_cache_store", seed=seed, size=len(_level_cache))
    return entry


def clear_level_cache():
    with _level_cache_lock:
        _level_cache.clear()


def _level_or_404(depth: int):
    config = _config()
    if not 1 <= depth <= config.max_depth:
        return None, (jsonify({"error": f"depth must be between 1 and {config.max_depth}"}), 404)
    levels, _ = get_cached_levels(_seed(), config)
    return levels[depth - 1], None


@bp_levels.route("/api/levels/<int:depth>")
def level_json(depth: int):
    level, err = _level_or_404(depth)
    if err:
        return err
    include_tiles = request.args.get("tiles", "1") not in ("0", "false", "no")
    payload = level_to_dict(level, include_tiles=include_tiles)
    payload["seed"] = _seed()
    return jsonify(payload)


@bp_levels.route("/api/levels/<int:depth>/ascii")
def level_ascii(depth: int):
    level, err = _level_or_404(depth)
    if err:
        return err
    return Response(to_ascii(level) + "\n", mimetype="text/plain")


@bp_levels.route("/api/levels/summary")
def level_summary():
    """Per-band item counts after repair, and the deficits repaired."""
    seed = _seed()
    levels, report = get_cached_levels(seed, _config())
    tracker = GuaranteeTracker(GuaranteeConfig())
    for level in levels:
        for item in level.items:
            tracker.record_item(level.depth, item)
    bands = {}
    for label, lo, hi in DEPTH_BANDS:
        bands[label] = {
            "depths": [lo, hi],
            "counts": tracker.counts(label),
            "repaired": {d.category: d.count for d in report.get(label, [])},
        }
    return jsonify({"seed": seed, "levels": len(levels), "bands": bands})


__all__ = ["bp_levels", "get_cached_levels", "clear_level_cache"]
