# --- roomtools_lib/analysis/selection.py ---
import logging
from typing import Callable, Iterable, List, Optional

from roomtools_lib.schema import BlockPos, Room

log = logging.getLogger("roomtools.select")

RoomLookup = Callable[[BlockPos], Optional[Room]]

ENCLOSURE_BONUS = 10000
GREENHOUSE_BONUS = 1000
VERTICAL_PROBE_HEIGHT = 5


def is_room_valid(room: Optional[Room]) -> bool:
    """A usable room has a non-empty location that is more than one block."""
    if room is None or room.location is None:
        return False
    return room.location.is_valid and not room.location.is_single_block


def room_score(room: Room) -> int:
    """Prefers enclosed rooms, then greenhouses, then bigger volumes."""
    score = room.location.cell_count
    if room.context.enclosed:
        score += ENCLOSURE_BONUS
    if room.context.is_greenhouse:
        score += GREENHOUSE_BONUS
    return score


def pick_best_room(candidates: Iterable[Optional[Room]]) -> Optional[Room]:
    best, best_score = None, -1
    for room in candidates:
        if not is_room_valid(room):
            continue
        score = room_score(room)
        if score > best_score:
            best, best_score = room, score
    return best


def find_room_by_location(rooms: Iterable[Room], pos: BlockPos) -> Optional[Room]:
    for room in rooms:
        if room.location is not None and room.location.contains(pos):
            return room
    return None


def gather_candidates(
    room_at: RoomLookup, origin: BlockPos, rooms: Iterable[Room] = ()
) -> List[Room]:
    """
    Probes around `origin` for rooms the detector knows about.

    First a straight column from the origin up to VERTICAL_PROBE_HEIGHT blocks,
    then a 3x3 footprint from the origin up two blocks. The footprint probe falls
    back to a bounds lookup in `rooms` when the detector has no answer.
    """
    rooms = list(rooms)
    candidates = []
    for dy in range(VERTICAL_PROBE_HEIGHT + 1):
        room = room_at(origin.offset(0, dy, 0))
        if is_room_valid(room):
            candidates.append(room)

    for dx in (-1, 0, 1):
        for dy in (0, 1, 2):
            for dz in (-1, 0, 1):
                pos = origin.offset(dx, dy, dz)
                room = room_at(pos) or find_room_by_location(rooms, pos)
                if is_room_valid(room):
                    candidates.append(room)

    log.debug("Found %d candidate rooms around %s.", len(candidates), origin)
    return candidates


def find_containing_room(
    room_at: RoomLookup, origin: BlockPos, rooms: Iterable[Room] = ()
) -> Optional[Room]:
    """The best-scoring room around `origin`, or None."""
    best = pick_best_room(gather_candidates(room_at, origin, rooms))
    if best is None:
        log.info("No valid room found at %s.", origin)
    return best


def describe_rooms(rooms: List[Room]) -> List[str]:
    """One summary line per room, in the order given."""
    lines = []
    for i, room in enumerate(rooms):
        loc = room.location
        size = f"{loc.size_x}x{loc.size_y}x{loc.size_z}" if loc else "?"
        kind = "Cellar" if room.context.is_small_room else "Room"
        if room.context.enclosed:
            exits = "enclosed OK"
        else:
            exits = f"open ({room.context.exit_count} exits) X"
        lines.append(f"[{i}] {size} {kind}, {exits}")
    return lines
