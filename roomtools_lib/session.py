# --- roomtools_lib/session.py ---
"""
roomtools_lib/session.py: Per-player overlay state.

A session owns the diff cache for one player, so scans for that player always
run one after another. Show requests start from a clean cache; refreshes only
send what changed since the previous scan.
"""
import logging
from typing import Optional

from roomtools_lib.config import OverlaySettings
from roomtools_lib.rendering.diff_cache import OverlayDiffCache
from roomtools_lib.rendering.highlight import FactsLookup, clear_highlights, highlight_room
from roomtools_lib.schema import BlockPos, HighlightResult, Room

log = logging.getLogger("roomtools.session")


class OverlaySession:
    """Show, refresh and hide the room overlay for a single player."""

    def __init__(self, settings: Optional[OverlaySettings] = None):
        self.settings = settings or OverlaySettings()
        self.cache = OverlayDiffCache()
        self.auto_refresh = AutoRefresh(self.settings.auto_refresh_seconds)

    def message_for(self, result: HighlightResult) -> dict:
        """Client message for a result. Highlights trail the clear by the configured delay."""
        if result.clear_all:
            return result.to_message()
        return result.to_message(delay_ms=self.settings.highlight_delay_ms)

    def tick(self, pos: BlockPos, dt: float) -> bool:
        """True when the player has idled long enough for an automatic show."""
        return self.auto_refresh.tick(pos, dt)

    def show(self, room: Optional[Room], facts_lookup: FactsLookup) -> HighlightResult:
        if room is None:
            log.info("No room to show; clearing overlay.")
            return self.hide()
        if room.context.exit_count > 0:
            log.info("Room has exits - highlighting problem areas.")
        return highlight_room(
            room,
            facts_lookup,
            self.cache,
            reset=True,
            log_problems=self.settings.log_problem_blocks,
        )

    def refresh(self, room: Optional[Room], facts_lookup: FactsLookup) -> HighlightResult:
        """Rescans without a reset, so only changed cells are emitted."""
        if room is None:
            return HighlightResult()
        return highlight_room(
            room,
            facts_lookup,
            self.cache,
            reset=False,
            log_problems=self.settings.log_problem_blocks,
        )

    def hide(self) -> HighlightResult:
        # The client drops every highlight, so nothing cached is on screen anymore.
        self.cache.reset()
        return clear_highlights()


class AutoRefresh:
    """Fires once the player has stood on the same block for a while."""

    def __init__(self, interval_seconds: float = 5.0, enabled: bool = False):
        self.interval_seconds = interval_seconds
        self.enabled = enabled
        self.last_pos: Optional[BlockPos] = None
        self.elapsed = 0.0

    def set_enabled(self, enabled: bool):
        self.enabled = enabled
        self.elapsed = 0.0
        log.info("Room auto-refresh %s.", "enabled" if enabled else "disabled")

    def tick(self, pos: BlockPos, dt: float) -> bool:
        if not self.enabled:
            return False
        if pos != self.last_pos:
            self.last_pos = pos
            self.elapsed = 0.0
            return False
        self.elapsed += dt
        if self.elapsed >= self.interval_seconds:
            self.elapsed = 0.0
            return True
        return False
