import json

import pytest

from roomtools_lib import schema
from roomtools_lib.schema import (
    BlockFacts,
    BlockPos,
    CellFacts,
    Cuboid,
    HighlightResult,
    Rgba,
    Room,
    RoomContext,
    RoomSnapshot,
    SnapshotError,
)


def test_cuboid_geometry():
    box = Cuboid(-2, 60, 5, 1, 62, 5)
    assert (box.size_x, box.size_y, box.size_z) == (4, 3, 1)
    assert box.cell_count == 12
    assert box.contains(BlockPos(-2, 62, 5))
    assert not box.contains(BlockPos(2, 61, 5))
    assert Cuboid(0, 0, 0, -1, 0, 0).cell_count == 0
    assert Cuboid(4, 4, 4, 4, 4, 4).is_single_block


def test_room_context_flags():
    assert RoomContext().enclosed is True
    assert RoomContext(exit_count=1).enclosed is False
    assert RoomContext(skylight_count=2, non_skylight_count=2).is_greenhouse is False
    assert RoomContext(skylight_count=3, non_skylight_count=2).is_greenhouse is True


def test_snapshot_survives_save_and_load(tmp_path):
    stone = BlockFacts(code="rock-andesite", replaceable=100, side_solid=(True,) * 6)
    snapshot = RoomSnapshot(
        rooms=[
            Room(
                location=Cuboid(0, 0, 0, 1, 1, 1),
                pos_in_room=b"\xff",
                context=RoomContext(exit_count=1, is_small_room=True),
            )
        ],
        cells={BlockPos(0, 0, 0): CellFacts(default=stone, solid=stone)},
    )
    path = tmp_path / "snapshot.json"
    schema.save_json(snapshot, str(path))

    raw = json.loads(path.read_text())
    assert raw["rooms"][0]["pos_in_room"] == "ff"

    loaded = schema.load_json(str(path))
    assert loaded == snapshot
    assert loaded.facts_at(BlockPos(0, 0, 0)).solid.side_solid == (True,) * 6
    assert loaded.facts_at(BlockPos(9, 9, 9)) is None


@pytest.mark.parametrize(
    "payload",
    [
        {"rooms": [{"location": {"x1": 0}}]},
        {"rooms": [{"location": None, "pos_in_room": "zz"}]},
        {"cells": [{"pos": [1, 2]}]},
        {"cells": [{"pos": [1, 2, 3], "solid": {"side_solid": [True]}}]},
        {"cells": [{"pos": [1, 2, 3], "default": {"colour": "red"}}]},
        {"cells": [{"pos": [1, 2, 3], "default": {"replaceable": "x"}}]},
        {"cells": [{"pos": [1, 2, 3], "fluid": {"is_liquid": "yes"}}]},
        {"cells": [{"pos": [1, 2, 3], "solid": {"side_solid": [1, 1, 1, 1, 1, 1]}}]},
        {"cells": [{"pos": ["1", 2, 3]}]},
        {"cells": [{"pos": [1, 2, 3], "default": "stone"}]},
        {"rooms": [{"location": {"x1": "0", "y1": 0, "z1": 0, "x2": 1, "y2": 1, "z2": 1}}]},
        {"rooms": [{"location": None, "context": {"exit_count": True}}]},
        {"rooms": [{"location": None, "pos_in_room": 255}]},
        {"rooms": ["cellar"]},
    ],
)
def test_malformed_snapshots_raise(payload):
    with pytest.raises(SnapshotError):
        schema.snapshot_from_dict(payload)


def test_null_block_code_loads_as_empty():
    loaded = schema.snapshot_from_dict(
        {"cells": [{"pos": [1, 2, 3], "default": {"code": None, "material": "air"}}]}
    )
    assert loaded.facts_at(BlockPos(1, 2, 3)).default.code == ""


def test_load_json_rejects_non_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json")
    with pytest.raises(SnapshotError):
        schema.load_json(str(path))
    path.write_text("[1, 2]")
    with pytest.raises(SnapshotError):
        schema.load_json(str(path))
    path.write_bytes(b"\xff\xfe{}")
    with pytest.raises(SnapshotError):
        schema.load_json(str(path))


def test_highlight_result_message():
    result = HighlightResult(
        emissions=[(BlockPos(1, 2, 3), Rgba(50, 255, 100, 120))]
    )
    assert result.positions == [BlockPos(1, 2, 3)]
    assert result.to_message() == {
        "positions": [[1, 2, 3]],
        "colors": [2019884850],
        "clear": False,
    }


def test_highlight_message_delay_is_optional():
    result = HighlightResult(emissions=[(BlockPos(0, 0, 0), Rgba(0, 0, 0, 0))])
    assert "delay_ms" not in result.to_message()
    assert result.to_message(delay_ms=100)["delay_ms"] == 100
