# --- roomtools.py ---
import argparse
import json
import logging
import sys

from roomtools_lib import schema
from roomtools_lib.analysis.selection import (
    describe_rooms,
    find_containing_room,
    find_room_by_location,
    pick_best_room,
)
from roomtools_lib.config import ConfigService, OverlaySettings
from roomtools_lib.log_utils import setup_logging
from roomtools_lib.rendering.ascii_renderer import ASCIIRenderer
from roomtools_lib.rendering.highlight import classify_volume
from roomtools_lib.session import OverlaySession


def parse_position(text: str) -> schema.BlockPos:
    """Parses 'X,Y,Z' into a BlockPos."""
    parts = [p.strip() for p in text.split(",")]
    if len(parts) != 3:
        raise argparse.ArgumentTypeError(f"expected X,Y,Z, got '{text}'")
    try:
        return schema.BlockPos(*(int(p) for p in parts))
    except ValueError:
        raise argparse.ArgumentTypeError(f"coordinates must be integers: '{text}'")


def get_cli_args(argv=None):
    """Configures and parses command-line arguments."""
    p = argparse.ArgumentParser(
        description="Computes the room debug overlay for a saved room snapshot."
    )
    p.add_argument("-i", "--input", required=True, help="Path to the room snapshot JSON.")
    p.add_argument("-o", "--output", help="Write the overlay message to this JSON file.")
    g_sel = p.add_mutually_exclusive_group()
    g_sel.add_argument("--room", type=int, help="Index of the room to highlight.")
    g_sel.add_argument(
        "--at",
        type=parse_position,
        metavar="X,Y,Z",
        help="Highlight the best room around this position.",
    )
    g_sel.add_argument("--list", action="store_true", help="List the rooms and exit.")
    g_sel.add_argument("--hide", action="store_true", help="Emit a clear-all message.")
    p.add_argument("--config", metavar="FILE", help="Read settings from a roomtools.cfg file.")
    # Logging arguments
    g_log = p.add_argument_group("Logging & Output")
    g_log.add_argument(
        "-v", "--verbose", action="store_true", help="Enable INFO logging."
    )
    g_log.add_argument(
        "--color-logs", action="store_true", help="Enable colored logging."
    )
    g_log.add_argument(
        "--log-file", metavar="FILE", help="Redirect log output to a file."
    )
    g_log.add_argument(
        "--ascii-debug",
        action="store_true",
        help="Render an ASCII map of the classified room, one grid per layer.",
    )
    g_log.add_argument(
        "-d",
        "--debug",
        nargs="?",
        const="all",
        dest="debug_topics",
        metavar="TOPICS",
        help="Enable DEBUG logging (all,scan,cache,classify,select,render,config).",
    )
    return p.parse_args(argv)


def select_room(args, snapshot: schema.RoomSnapshot, log: logging.Logger):
    """Resolves the room the user asked for, or None with the reason logged."""
    if args.room is not None:
        if not 0 <= args.room < len(snapshot.rooms):
            log.error(
                "Invalid room index. Select between 0 and %d.", len(snapshot.rooms) - 1
            )
            return None
        return snapshot.rooms[args.room]
    if args.at is not None:
        return find_containing_room(
            lambda pos: find_room_by_location(snapshot.rooms, pos),
            args.at,
            snapshot.rooms,
        )
    return pick_best_room(snapshot.rooms)


def write_output(message: dict, output_path: str, log: logging.Logger) -> bool:
    try:
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(message, f, indent=2)
        log.info("Successfully saved overlay to '%s'", output_path)
        return True
    except IOError as e:
        log.error("Could not write overlay file: %s", e)
        return False


def main(argv=None) -> int:
    """Main entry point for the roomtools CLI."""
    args = get_cli_args(argv)
    settings = ConfigService(args.config).load_overlay_settings() if args.config else OverlaySettings()

    log_level = logging.INFO if args.verbose else logging.WARNING
    debug_topics = args.debug_topics or settings.debug_topics
    if debug_topics:
        log_level = logging.DEBUG

    setup_logging(log_level, args.color_logs or settings.color_logs, debug_topics, args.log_file)
    log = logging.getLogger("roomtools.main")
    log.info("--- RoomTools CLI Initialized ---")
    log.debug("Arguments received: %s", vars(args))

    try:
        snapshot = schema.load_json(args.input)
    except FileNotFoundError:
        log.critical("Snapshot file not found: %s", args.input)
        return 1
    except OSError as e:
        log.critical("Could not read snapshot file %s: %s", args.input, e)
        return 1
    except schema.SnapshotError as e:
        log.critical("Failed to load room snapshot: %s", e)
        return 1

    if args.list:
        if not snapshot.rooms:
            print("No rooms found in this chunk.")
            return 0
        print(f"Found {len(snapshot.rooms)} rooms in this chunk:")
        for line in describe_rooms(snapshot.rooms):
            print(line)
        return 0

    session = OverlaySession(settings)
    if args.hide:
        result = session.hide()
    else:
        if not snapshot.rooms:
            print("No rooms found in this chunk.")
            return 0
        room = select_room(args, snapshot, log)
        if room is None:
            print("No valid room found.")
            return 1 if args.room is not None else 0
        result = session.show(room, snapshot.facts_at)

        if args.ascii_debug and room.location is not None:
            categories = classify_volume(
                room.location, room.pos_in_room, room.context, snapshot.facts_at
            )
            renderer = ASCIIRenderer()
            renderer.render(room.location, categories)
            log_render = logging.getLogger("roomtools.render")
            log_render.warning("--- ASCII Debug Output ---")
            log_render.warning("\n%s", renderer.get_output(), extra={"raw": True})
            log_render.warning("--- End ASCII Debug Output ---")

    if args.output:
        if not write_output(session.message_for(result), args.output, log):
            return 1
    print(f"Emitted {len(result)} highlights (clear={result.clear_all}).")
    log.info("--- Processing complete. ---")
    return 0


if __name__ == "__main__":
    sys.exit(main())
