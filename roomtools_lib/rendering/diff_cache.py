# --- roomtools_lib/rendering/diff_cache.py ---
"""
roomtools_lib/rendering/diff_cache.py: Remembers the last color sent for each
block so unchanged cells are not highlighted again.

The cache is a one-shot diff, not an LRU: there is no eviction and no size
limit. Keys are absolute positions, so a reset is required between scans of
unrelated volumes or stale entries will suppress real updates.
"""
import logging
from typing import Dict

from roomtools_lib.schema import BlockPos, Rgba

log = logging.getLogger("roomtools.cache")


class OverlayDiffCache:
    """Position -> last emitted color signature."""

    def __init__(self):
        self._last: Dict[BlockPos, int] = {}
        self.emitted = 0
        self.suppressed = 0

    def __len__(self):
        return len(self._last)

    def reset(self):
        """Drops every entry. Call once before a full rescan, never mid-scan."""
        log.debug("Resetting overlay cache (%d entries).", len(self._last))
        self._last.clear()
        self.emitted = 0
        self.suppressed = 0

    def should_emit(self, pos: BlockPos, color: Rgba) -> bool:
        signature = color.signature
        if self._last.get(pos) == signature:
            self.suppressed += 1
            return False
        self._last[pos] = signature
        self.emitted += 1
        return True

    def stats(self):
        return {
            "entries": len(self._last),
            "emitted": self.emitted,
            "suppressed": self.suppressed,
        }
