# --- roomtools_lib/schema.py ---
import json
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Tuple

# Material tags as reported by the host's block registry.
MATERIAL_AIR = "air"
MATERIAL_PLANT = "plant"
MATERIAL_STONE = "stone"

NO_SIDES = (False, False, False, False, False, False)


class SnapshotError(ValueError):
    """Raised when a room snapshot file cannot be interpreted."""


@dataclass(frozen=True)
class BlockPos:
    """An absolute block position in world coordinates."""

    x: int
    y: int
    z: int

    def offset(self, dx: int, dy: int, dz: int) -> "BlockPos":
        return BlockPos(self.x + dx, self.y + dy, self.z + dz)

    def as_list(self) -> List[int]:
        return [self.x, self.y, self.z]

    def __str__(self):
        return f"{self.x}, {self.y}, {self.z}"


@dataclass(frozen=True)
class Cuboid:
    """An axis-aligned block volume with inclusive min/max corners."""

    x1: int
    y1: int
    z1: int
    x2: int
    y2: int
    z2: int

    @property
    def size_x(self) -> int:
        return self.x2 - self.x1 + 1

    @property
    def size_y(self) -> int:
        return self.y2 - self.y1 + 1

    @property
    def size_z(self) -> int:
        return self.z2 - self.z1 + 1

    @property
    def is_valid(self) -> bool:
        """False when any axis has a non-positive extent."""
        return self.size_x > 0 and self.size_y > 0 and self.size_z > 0

    @property
    def is_single_block(self) -> bool:
        return self.size_x == 1 and self.size_y == 1 and self.size_z == 1

    @property
    def cell_count(self) -> int:
        if not self.is_valid:
            return 0
        return self.size_x * self.size_y * self.size_z

    def contains(self, pos: BlockPos) -> bool:
        return (
            self.x1 <= pos.x <= self.x2
            and self.y1 <= pos.y <= self.y2
            and self.z1 <= pos.z <= self.z2
        )

    def __str__(self):
        return f"{self.x1}, {self.y1}, {self.z1} -> {self.x2}, {self.y2}, {self.z2}"


@dataclass(frozen=True)
class Rgba:
    """An overlay color with 8-bit channels."""

    r: int
    g: int
    b: int
    a: int

    @property
    def packed(self) -> int:
        """The host's 32-bit color int (r in the low byte, alpha on top), signed."""
        value = self.r | (self.g << 8) | (self.b << 16) | (self.a << 24)
        return value - (1 << 32) if value & 0x80000000 else value

    @property
    def signature(self) -> int:
        """The value the diff cache compares; an int hashes to itself."""
        return hash(self.packed)


@dataclass(frozen=True)
class BlockFacts:
    """Read-only facts about the block occupying one layer of a cell."""

    code: str = ""
    material: str = MATERIAL_STONE
    replaceable: int = 0
    is_liquid: bool = False
    side_solid: Tuple[bool, ...] = NO_SIDES
    has_collision: bool = True


@dataclass(frozen=True)
class CellFacts:
    """The three block layers of one cell. A missing layer is None."""

    default: Optional[BlockFacts] = None
    fluid: Optional[BlockFacts] = None
    solid: Optional[BlockFacts] = None


@dataclass(frozen=True)
class RoomContext:
    """Room-level facts, constant for a whole classification pass."""

    exit_count: int = 0
    skylight_count: int = 0
    non_skylight_count: int = 0
    is_small_room: bool = False

    @property
    def enclosed(self) -> bool:
        return self.exit_count == 0

    @property
    def is_greenhouse(self) -> bool:
        return self.skylight_count > self.non_skylight_count


@dataclass
class Room:
    """A room as reported by the room-detection service."""

    location: Optional[Cuboid]
    pos_in_room: bytes
    context: RoomContext = field(default_factory=RoomContext)


@dataclass
class HighlightResult:
    """Ordered overlay updates plus the clear-all flag for the hide case."""

    emissions: List[Tuple[BlockPos, Rgba]] = field(default_factory=list)
    clear_all: bool = False

    @classmethod
    def clear(cls) -> "HighlightResult":
        return cls(emissions=[], clear_all=True)

    @property
    def positions(self) -> List[BlockPos]:
        return [pos for pos, _ in self.emissions]

    @property
    def colors(self) -> List[int]:
        return [color.packed for _, color in self.emissions]

    def __len__(self):
        return len(self.emissions)

    def to_message(self, delay_ms: Optional[int] = None) -> Dict[str, Any]:
        """
        The overlay message as sent to the client: parallel position/color lists.

        `delay_ms`, when given, tells the sender how long to wait after the
        clear message before delivering this one.
        """
        message = {
            "positions": [pos.as_list() for pos in self.positions],
            "colors": self.colors,
            "clear": self.clear_all,
        }
        if delay_ms is not None:
            message["delay_ms"] = delay_ms
        return message


@dataclass
class RoomSnapshot:
    """Rooms of one chunk plus the cell facts around them, for offline runs."""

    rooms: List[Room] = field(default_factory=list)
    cells: Dict[BlockPos, CellFacts] = field(default_factory=dict)

    def facts_at(self, pos: BlockPos) -> Optional[CellFacts]:
        return self.cells.get(pos)


def _expect(value: Any, kind: type, what: str) -> Any:
    """Checks a decoded JSON value against the type its field needs."""
    # bool is an int subclass; a flag is never a valid count or coordinate.
    if (kind is int and isinstance(value, bool)) or not isinstance(value, kind):
        raise SnapshotError(f"{what} must be {kind.__name__}, got {value!r}")
    return value


def _checked_fields(data: Any, kinds: Dict[str, type], what: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise SnapshotError(f"{what} must be an object, got {data!r}")
    unknown = set(data) - set(kinds)
    if unknown:
        raise SnapshotError(f"Unknown {what} fields: {', '.join(sorted(unknown))}")
    return {k: _expect(v, kinds[k], f"{what}.{k}") for k, v in data.items()}


_BLOCK_FIELDS = {
    "code": str,
    "material": str,
    "replaceable": int,
    "is_liquid": bool,
    "side_solid": list,
    "has_collision": bool,
}
_CUBOID_FIELDS = {name: int for name in ("x1", "y1", "z1", "x2", "y2", "z2")}
_CONTEXT_FIELDS = {
    "exit_count": int,
    "skylight_count": int,
    "non_skylight_count": int,
    "is_small_room": bool,
}


def _block_from_dict(data: Optional[Dict[str, Any]]) -> Optional[BlockFacts]:
    if data is None:
        return None
    if isinstance(data, dict) and data.get("code", "") is None:
        # The host reports blocks without a code path; treat them as "".
        data = dict(data, code="")
    data = _checked_fields(data, _BLOCK_FIELDS, "block")
    if "side_solid" in data:
        sides = tuple(_expect(s, bool, "block.side_solid[]") for s in data["side_solid"])
        if len(sides) != 6:
            raise SnapshotError(f"side_solid needs 6 entries, got {len(sides)}")
        data["side_solid"] = sides
    return BlockFacts(**data)


def _room_from_dict(data: Dict[str, Any]) -> Room:
    if not isinstance(data, dict):
        raise SnapshotError(f"room must be an object, got {data!r}")
    location = None
    if data.get("location") is not None:
        location = Cuboid(**_checked_fields(data["location"], _CUBOID_FIELDS, "location"))
    context = RoomContext(**_checked_fields(data.get("context", {}), _CONTEXT_FIELDS, "context"))
    return Room(
        location=location,
        pos_in_room=bytes.fromhex(_expect(data.get("pos_in_room", ""), str, "pos_in_room")),
        context=context,
    )


def _room_to_dict(room: Room) -> Dict[str, Any]:
    return {
        "location": asdict(room.location) if room.location else None,
        "pos_in_room": room.pos_in_room.hex(),
        "context": asdict(room.context),
    }


def snapshot_to_dict(snapshot: RoomSnapshot) -> Dict[str, Any]:
    cells = []
    for pos, facts in snapshot.cells.items():
        entry: Dict[str, Any] = {"pos": pos.as_list()}
        for layer in ("default", "fluid", "solid"):
            block = getattr(facts, layer)
            entry[layer] = asdict(block) if block else None
        cells.append(entry)
    return {"rooms": [_room_to_dict(r) for r in snapshot.rooms], "cells": cells}


def snapshot_from_dict(data: Dict[str, Any]) -> RoomSnapshot:
    """Builds a RoomSnapshot from its JSON form, raising SnapshotError on bad input."""
    try:
        rooms = [_room_from_dict(r) for r in data.get("rooms", [])]
        cells = {}
        for cell in data.get("cells", []):
            coords = _expect(cell["pos"], list, "cell.pos")
            pos = BlockPos(*(_expect(c, int, "cell.pos[]") for c in coords))
            cells[pos] = CellFacts(
                default=_block_from_dict(cell.get("default")),
                fluid=_block_from_dict(cell.get("fluid")),
                solid=_block_from_dict(cell.get("solid")),
            )
    except SnapshotError:
        raise
    except (KeyError, TypeError, ValueError) as e:
        raise SnapshotError(f"Malformed room snapshot: {e}") from e
    return RoomSnapshot(rooms=rooms, cells=cells)


def save_json(snapshot: RoomSnapshot, output_path: str) -> None:
    """
    Serializes a RoomSnapshot to a JSON file.

    Args:
        snapshot: The RoomSnapshot to serialize.
        output_path: The path to the output .json file.
    """
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(snapshot_to_dict(snapshot), f, indent=2)


def load_json(input_path: str) -> RoomSnapshot:
    """
    Deserializes a JSON file into a RoomSnapshot.

    Args:
        input_path: The path to the input .json file.

    Returns:
        A RoomSnapshot with the rooms and cell facts of the file.
    """
    with open(input_path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise SnapshotError(f"Invalid JSON in {input_path}: {e}") from e
    if not isinstance(data, dict):
        raise SnapshotError(f"Expected a JSON object in {input_path}")
    return snapshot_from_dict(data)
