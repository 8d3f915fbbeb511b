# --- roomtools_lib/rendering/constants.py ---
# Shared overlay colors, kept apart from the classifier to avoid circular imports.
from roomtools_lib.schema import Rgba

TRANSPARENT = Rgba(0, 0, 0, 0)
ORANGE = Rgba(255, 180, 0, 120)  # breach through glass or a trapdoor
RED = Rgba(255, 0, 0, 180)  # breach
GRAY = Rgba(180, 180, 180, 120)  # partial seal
GREEN = Rgba(50, 255, 100, 120)  # enclosed greenhouse
BLUE = Rgba(0, 180, 255, 120)  # enclosed cellar
YELLOW = Rgba(255, 200, 0, 120)  # enclosed room
