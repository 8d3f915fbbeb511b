# --- roomtools_lib/analysis/classifier.py ---
"""
roomtools_lib/analysis/classifier.py: Maps the facts of a single cell to an
overlay category and color.

Category tests run in priority order (seal, then hole, then partial) and the
first match wins. Enclosed rooms skip that chain entirely: every occupied cell
is painted with the room's character color instead.
"""
import logging
from enum import IntEnum
from typing import Optional, Tuple

from roomtools_lib.schema import (
    MATERIAL_AIR,
    MATERIAL_PLANT,
    BlockFacts,
    CellFacts,
    RoomContext,
    Rgba,
)
from roomtools_lib.rendering import constants

log = logging.getLogger("roomtools.classify")

SEAL_REPLACEABLE_LIMIT = 6000
# Blocks with these codes seal a room even without a solid side.
SEAL_CODE_ALLOWLIST = ("glass", "trapdoor", "bars", "grate")
# Breaches through these are drawn orange rather than red.
SOFT_BREACH_CODES = ("glass", "trapdoor")


class CellCategory(IntEnum):
    """Overlay categories; a lower value is tested first."""

    SEAL = 0
    HOLE = 1
    PARTIAL = 2
    FILL = 3


def is_likely_room_seal(block: Optional[BlockFacts]) -> bool:
    """True when the solid-layer block closes off the room at this cell."""
    if block is None:
        return False
    allowed_by_code = any(token in block.code for token in SEAL_CODE_ALLOWLIST)
    return (
        block.replaceable < SEAL_REPLACEABLE_LIMIT
        and not block.is_liquid
        and block.material != MATERIAL_AIR
        and (any(block.side_solid) or allowed_by_code)
    )


def is_open_cell(block: Optional[BlockFacts]) -> bool:
    """True when the default-layer block lets air through."""
    return (
        block is None
        or not block.has_collision
        or "slab" in block.code
        or block.material == MATERIAL_PLANT
        or block.is_liquid
    )


def classify_cell(facts: Optional[CellFacts]) -> CellCategory:
    """Returns SEAL, HOLE or PARTIAL for one cell. Unknown cells are holes."""
    if facts is None:
        return CellCategory.HOLE
    if is_likely_room_seal(facts.solid):
        return CellCategory.SEAL
    if is_open_cell(facts.default):
        return CellCategory.HOLE
    return CellCategory.PARTIAL


def categorize(facts: Optional[CellFacts], context: RoomContext) -> CellCategory:
    if context.enclosed:
        return CellCategory.FILL
    return classify_cell(facts)


def color_for(
    category: CellCategory, facts: Optional[CellFacts], context: RoomContext
) -> Rgba:
    """Picks the overlay color. Breach state comes first, room character second."""
    if category == CellCategory.FILL:
        if context.is_greenhouse:
            return constants.GREEN
        return constants.BLUE if context.is_small_room else constants.YELLOW
    if category == CellCategory.HOLE:
        code = facts.default.code if facts and facts.default else ""
        if any(token in code for token in SOFT_BREACH_CODES):
            return constants.ORANGE
        return constants.RED
    if category == CellCategory.PARTIAL:
        return constants.GRAY
    return constants.TRANSPARENT


def classify(
    facts: Optional[CellFacts], context: RoomContext
) -> Tuple[CellCategory, Rgba]:
    """Category and color for one occupied cell of a room."""
    category = categorize(facts, context)
    color = color_for(category, facts, context)
    log.debug("Cell classified as %s with color %s.", category.name, color)
    return category, color
