# --- roomtools_lib/rendering/highlight.py ---
"""
roomtools_lib/rendering/highlight.py: Walks the occupied cells of a room volume,
classifies each one and collects the overlay updates that differ from what was
last sent.
"""
import logging
from typing import Callable, Dict, Iterator, Optional

import numpy as np

from roomtools_lib.analysis.classifier import CellCategory, classify
from roomtools_lib.schema import (
    BlockPos,
    CellFacts,
    Cuboid,
    HighlightResult,
    Room,
    RoomContext,
)
from .diff_cache import OverlayDiffCache

log = logging.getLogger("roomtools.scan")

FactsLookup = Callable[[BlockPos], Optional[CellFacts]]

PROBLEM_CATEGORIES = (CellCategory.HOLE, CellCategory.PARTIAL)


def occupied_offsets(volume: Cuboid, bitmask: bytes) -> np.ndarray:
    """
    Decodes the room bitmask into local (dx, dy, dz) offsets.

    Bit `dy*sx*sz + dz*sx + dx` marks a room cell, least significant bit first
    within each byte. Rows come back ordered by dx, then dy, then dz. Missing
    trailing bytes count as unset bits.
    """
    if not volume.is_valid:
        return np.empty((0, 3), dtype=np.intp)
    sx, sy, sz = volume.size_x, volume.size_y, volume.size_z
    total = sx * sy * sz
    raw = np.frombuffer(bytes(bitmask), dtype=np.uint8)
    bits = np.unpackbits(raw, bitorder="little")[:total]
    idx = np.flatnonzero(bits)
    dx, dz, dy = idx % sx, (idx // sx) % sz, idx // (sx * sz)
    order = np.lexsort((dz, dy, dx))
    return np.column_stack((dx, dy, dz))[order]


def iter_occupied(volume: Cuboid, bitmask: bytes) -> Iterator[BlockPos]:
    for dx, dy, dz in occupied_offsets(volume, bitmask):
        yield BlockPos(volume.x1 + int(dx), volume.y1 + int(dy), volume.z1 + int(dz))


def compute_highlights(
    volume: Cuboid,
    bitmask: bytes,
    context: RoomContext,
    facts_lookup: FactsLookup,
    cache: OverlayDiffCache,
    *,
    reset: bool,
    log_problems: bool = True,
) -> HighlightResult:
    """
    Classifies every room cell of `volume` and returns the changed highlights.

    Args:
        volume: The room's bounding box. An invalid box yields no cells.
        bitmask: Packed room membership bits for the box.
        context: Exit and skylight facts for the whole room.
        facts_lookup: Returns the cell facts at a position, or None if unknown.
        cache: Diff cache holding the colors sent by earlier scans.
        reset: True for a full rescan (cache cleared first). False only
            re-sends cells whose color changed.
        log_problems: Log holes and partial seals as they are emitted.

    Returns:
        A HighlightResult with (position, color) pairs in volume order.
    """
    if reset:
        cache.reset()

    result = HighlightResult()
    for pos in iter_occupied(volume, bitmask):
        facts = facts_lookup(pos)
        category, color = classify(facts, context)
        if not cache.should_emit(pos, color):
            continue
        result.emissions.append((pos, color))
        if log_problems and category in PROBLEM_CATEGORIES:
            code = facts.default.code if facts and facts.default else None
            log.debug("Problem block at %s - %s?", pos, code)

    log.debug("Scan finished: %s", cache.stats())
    return result


def classify_volume(
    volume: Cuboid, bitmask: bytes, context: RoomContext, facts_lookup: FactsLookup
) -> Dict[BlockPos, CellCategory]:
    """Category of every room cell, without touching any cache."""
    return {
        pos: classify(facts_lookup(pos), context)[0]
        for pos in iter_occupied(volume, bitmask)
    }


def highlight_room(
    room: Room,
    facts_lookup: FactsLookup,
    cache: OverlayDiffCache,
    *,
    reset: bool,
    log_problems: bool = True,
) -> HighlightResult:
    """Runs `compute_highlights` over a room reported by the detection service."""
    if room.location is None:
        log.warning("Room has no location; nothing to highlight.")
        return HighlightResult()
    ctx = room.context
    log.info(
        "Room bounds: %s, exits: %d, skylights: %d, non-skylights: %d",
        room.location,
        ctx.exit_count,
        ctx.skylight_count,
        ctx.non_skylight_count,
    )
    log.info("Greenhouse detected in room: %s", ctx.is_greenhouse)
    result = compute_highlights(
        room.location,
        room.pos_in_room,
        ctx,
        facts_lookup,
        cache,
        reset=reset,
        log_problems=log_problems,
    )
    log.info("Emitting %d highlight updates.", len(result))
    return result


def clear_highlights() -> HighlightResult:
    """The explicit hide result: no emissions, clear everything."""
    return HighlightResult.clear()
