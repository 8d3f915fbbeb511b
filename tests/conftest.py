import pytest

from roomtools_lib.schema import (
    NO_SIDES,
    BlockFacts,
    CellFacts,
    Cuboid,
    Room,
    RoomContext,
)

ALL_SIDES = (True,) * 6

STONE = BlockFacts(code="rock-granite", material="stone", replaceable=100, side_solid=ALL_SIDES)
GLASS = BlockFacts(code="glass-plain", material="glass", replaceable=100, side_solid=NO_SIDES)
AIR = BlockFacts(code="air", material="air", replaceable=9999, has_collision=False)


@pytest.fixture
def cube():
    """A 2x2x2 volume at the origin with every cell in the room."""
    return Cuboid(0, 0, 0, 1, 1, 1), bytes([0xFF])


@pytest.fixture
def stone_cells():
    """Lookup returning a solid stone wall everywhere."""
    facts = CellFacts(default=STONE, solid=STONE)
    return lambda pos: facts


@pytest.fixture
def make_room():
    def _make(location, bits, **context):
        return Room(location=location, pos_in_room=bits, context=RoomContext(**context))

    return _make
