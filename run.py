"""roguegen CLI entry point.

Provides subcommands to preview a generated level in the terminal, dump
levels as JSON, and run the read-only level preview API. Accepts
configuration via flags and ROGUEGEN_* environment variables, with optional
.env loading.

Run `python run.py --help` for details.
"""

import argparse
import json
import os
import sys
from textwrap import dedent

from colorama import Fore, Style
from colorama import init as _color_init
from dotenv import load_dotenv


def _load_version() -> str:
    try:
        with open(os.path.join(os.path.dirname(os.path.abspath(__file__)), "VERSION"), "r", encoding="utf-8") as f:
            return f.read().strip()
    except OSError:
        return "0.4.0"


__version__ = _load_version()

GLYPH_COLORS = {
    "monster": Fore.RED + Style.BRIGHT,
    "item": Fore.CYAN,
    "gold": Fore.YELLOW + Style.BRIGHT,
    "trap": Fore.MAGENTA,
    "stairs": Fore.WHITE + Style.BRIGHT,
    "door": Fore.YELLOW,
}


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    roguegen level generator

    Generate seeded roguelike dungeon levels: rooms joined by a spanning tree
    of corridors plus loops, doors, traps, monsters, items and gold, with
    per-band item guarantees repaired after all depths are generated.
    """

    epilog = dedent(
        """
        Environment variables:
          ROGUEGEN_SEED            Default seed (default: roguegen)
          ROGUEGEN_WIDTH/HEIGHT    Grid size (default: 80x22)
          ROGUEGEN_MAX_DEPTH       Deepest depth (default: 26)
          ROGUEGEN_LOG_LEVEL       debug | info | warn | error (default: info)
          ROGUEGEN_ITEM_DATA       Path to an items.json override
          ROGUEGEN_MONSTER_DATA    Path to a monsters.json override
          ROGUEGEN_GUARANTEES      Path to a guarantees.json override
          HOST / PORT              Bind address for `serve` (default: 127.0.0.1:5000)

        Examples:
          # Print depth 3 for a seed
          python run.py preview --seed demo --depth 3

          # Dump every depth (guarantees applied) to a file
          python run.py generate --seed demo --all --out levels.json

          # Load variables from .env then serve the preview API
          python run.py --env-file .env serve --port 8080
        """
    )

    parser = argparse.ArgumentParser(
        prog="roguegen",
        description=dedent(description),
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )

    parser.add_argument(
        "--env-file",
        dest="env_file",
        help="Path to a .env file to load before processing flags",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"roguegen {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    def add_seed_args(p):
        p.add_argument("--seed", default=None, help="Seed string or integer (default: env ROGUEGEN_SEED or 'roguegen')")
        p.add_argument("--width", type=int, default=None, help="Grid width (default: env ROGUEGEN_WIDTH or 80)")
        p.add_argument("--height", type=int, default=None, help="Grid height (default: env ROGUEGEN_HEIGHT or 22)")

    # preview subcommand
    preview_parser = subparsers.add_parser(
        "preview",
        help="Print one generated level as colored ASCII",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    add_seed_args(preview_parser)
    preview_parser.add_argument("--depth", type=int, default=1, help="Depth to show (default: 1)")
    preview_parser.add_argument("--no-color", action="store_true", help="Disable ANSI colors")
    preview_parser.set_defaults(command="preview")

    # generate subcommand
    gen_parser = subparsers.add_parser(
        "generate",
        help="Dump generated levels as JSON",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Generate one depth, or every depth with guarantees applied, as JSON.",
    )
    add_seed_args(gen_parser)
    gen_parser.add_argument("--depth", type=int, default=1, help="Depth to generate (default: 1)")
    gen_parser.add_argument("--all", dest="all_levels", action="store_true", help="Generate depths 1..max_depth")
    gen_parser.add_argument("--no-tiles", action="store_true", help="Omit tile rows from the output")
    gen_parser.add_argument("--out", default=None, help="Write JSON to this path instead of stdout")
    gen_parser.set_defaults(command="generate")

    # serve subcommand
    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the level preview API",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    serve_parser.add_argument("--host", default=None, help="Host interface to bind (default: env HOST or 127.0.0.1)")
    serve_parser.add_argument("--port", type=int, default=None, help="Port to listen on (default: env PORT or 5000)")
    serve_parser.add_argument("--debug", action="store_true", help="Enable Flask debug mode")
    serve_parser.set_defaults(command="serve")

    # If no subcommand provided, default to preview
    if len(argv) == 0:
        argv = ["preview"]

    return parser.parse_args(argv)


def _dungeon_config(args):
    from roguegen.dungeon.config import DungeonConfig

    return DungeonConfig.from_env(width=getattr(args, "width", None), height=getattr(args, "height", None))


def _service(args):
    from roguegen.dungeon.pipeline import DungeonService
    from roguegen.random_source import SeededRandom

    seed = getattr(args, "seed", None) or os.getenv("ROGUEGEN_SEED", "roguegen")
    return seed, DungeonService(SeededRandom(seed))


def render_colored(level, color: bool) -> str:
    from roguegen.dungeon.render import glyph_grid

    lines = []
    for row in glyph_grid(level):
        if not color:
            lines.append("".join(ch for ch, _ in row))
            continue
        parts = []
        for ch, kind in row:
            tint = GLYPH_COLORS.get(kind)
            parts.append(f"{tint}{ch}{Style.RESET_ALL}" if tint else ch)
        lines.append("".join(parts))
    return "\n".join(lines)


def cmd_preview(args) -> int:
    config = _dungeon_config(args)
    if not 1 <= args.depth <= config.max_depth:
        print(f"[ERROR] depth must be between 1 and {config.max_depth}", file=sys.stderr)
        return 2
    seed, service = _service(args)
    # Depths share one random stream, so earlier depths are generated first.
    level = None
    for depth in range(1, args.depth + 1):
        level = service.generate_level(depth, config)
    color = not args.no_color and sys.stdout.isatty()
    if color:
        _color_init()
    header = f"seed={seed} depth={level.depth} rooms={len(level.rooms)} doors={len(level.doors)} monsters={len(level.monsters)} items={len(level.items)}"
    print(f"{Fore.CYAN}{header}{Style.RESET_ALL}" if color else header)
    print(render_colored(level, color))
    return 0


def cmd_generate(args) -> int:
    from roguegen.dungeon.render import level_to_dict
    from roguegen.logging_utils import set_level

    config = _dungeon_config(args)
    if not args.all_levels and not 1 <= args.depth <= config.max_depth:
        print(f"[ERROR] depth must be between 1 and {config.max_depth}", file=sys.stderr)
        return 2
    if not args.out:
        # stdout carries the JSON document; keep info records out of it
        set_level("warn")
    seed, service = _service(args)
    include_tiles = not args.no_tiles
    if args.all_levels:
        levels = service.generate_all_levels(config)
        payload = {
            "seed": seed,
            "levels": [level_to_dict(lv, include_tiles=include_tiles) for lv in levels],
            "repaired": {
                band: {d.category: d.count for d in deficits} for band, deficits in service.last_guarantee_report.items()
            },
        }
    else:
        level = None
        for depth in range(1, args.depth + 1):
            level = service.generate_level(depth, config)
        payload = {"seed": seed, "levels": [level_to_dict(level, include_tiles=include_tiles)]}
    text = json.dumps(payload, indent=2)
    if args.out:
        with open(args.out, "w", encoding="utf-8") as f:
            f.write(text + "\n")
        print(f"[OK] wrote {len(payload['levels'])} level(s) to {args.out}")
    else:
        print(text)
    return 0


def cmd_serve(args) -> int:
    from roguegen import create_app
    from roguegen.logging_utils import log

    host = args.host or os.getenv("HOST", "127.0.0.1")
    port = int(args.port or os.getenv("PORT", "5000"))
    debug = bool(args.debug or os.getenv("FLASK_DEBUG") == "1")
    app = create_app()
    log.info(event="listen", host=host, port=port, debug=debug)
    app.run(host=host, port=port, debug=debug)
    return 0


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    if getattr(args, "env_file", None):
        load_dotenv(args.env_file)
    else:
        # Load default .env if present (no error if missing)
        load_dotenv()

    mode = (getattr(args, "command", None) or "preview").lower()
    try:
        if mode == "generate":
            return cmd_generate(args)
        if mode == "serve":
            return cmd_serve(args)
        return cmd_preview(args)
    except ValueError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
