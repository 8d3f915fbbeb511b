# --- roomtools_lib/rendering/ascii_renderer.py ---
from typing import Dict, List

from roomtools_lib.analysis.classifier import CellCategory
from roomtools_lib.schema import BlockPos, Cuboid

CATEGORY_CHARS = {
    CellCategory.SEAL: "#",
    CellCategory.HOLE: "O",
    CellCategory.PARTIAL: "~",
    CellCategory.FILL: ".",
}
MIN_LABEL_WIDTH = 3


class ASCIIRenderer:
    """Renders a classified room volume as one text grid per Y layer, for debugging."""

    def __init__(self):
        self.layers: List[List[str]] = []

    def render(self, volume: Cuboid, categories: Dict[BlockPos, CellCategory]):
        self.layers = []
        if not volume.is_valid:
            return
        label_width = max(
            MIN_LABEL_WIDTH, len(str(volume.z1)), len(str(volume.z2))
        )
        for y in range(volume.y1, volume.y2 + 1):
            lines = [f"y = {y}"]
            lines.extend(self._x_rulers(volume, label_width + 1))
            for z in range(volume.z1, volume.z2 + 1):
                row = []
                for x in range(volume.x1, volume.x2 + 1):
                    category = categories.get(BlockPos(x, y, z))
                    row.append(CATEGORY_CHARS.get(category, " "))
                lines.append(f"{z:>{label_width}}|" + "".join(row))
            self.layers.append(lines)

    def _x_rulers(self, volume: Cuboid, indent: int) -> List[str]:
        width = volume.size_x
        s_ruler, h_ruler = [" "] * width, [" "] * width
        d_ruler, u_ruler = [" "] * width, [" "] * width
        for cx, gx in enumerate(range(volume.x1, volume.x2 + 1)):
            s_gx = str(abs(gx))
            if gx < 0:
                s_ruler[cx] = "-"
            if len(s_gx) >= 3:
                h_ruler[cx] = s_gx[-3]
            if len(s_gx) >= 2:
                d_ruler[cx] = s_gx[-2]
            u_ruler[cx] = s_gx[-1]
        prefix = " " * indent
        rulers = [
            prefix + "".join(r)
            for r in (s_ruler, h_ruler, d_ruler)
            if r.count(" ") < width
        ]
        rulers.append(prefix + "".join(u_ruler))
        return rulers

    def get_output(self) -> str:
        if not self.layers:
            return ""
        return "\n\n".join("\n".join(lines) for lines in self.layers)
