from roomtools_lib.rendering import constants
from roomtools_lib.rendering.diff_cache import OverlayDiffCache
from roomtools_lib.schema import BlockPos


def test_first_sighting_emits_and_repeat_is_suppressed():
    cache = OverlayDiffCache()
    pos = BlockPos(10, 64, -3)
    assert cache.should_emit(pos, constants.BLUE) is True
    assert cache.should_emit(pos, constants.BLUE) is False
    assert len(cache) == 1


def test_color_change_emits_again():
    cache = OverlayDiffCache()
    pos = BlockPos(0, 0, 0)
    cache.should_emit(pos, constants.RED)
    assert cache.should_emit(pos, constants.GRAY) is True
    assert cache.should_emit(pos, constants.GRAY) is False


def test_suppression_leaves_entry_untouched():
    cache = OverlayDiffCache()
    pos = BlockPos(1, 2, 3)
    cache.should_emit(pos, constants.YELLOW)
    cache.should_emit(pos, constants.YELLOW)
    assert cache.should_emit(pos, constants.RED) is True
    assert cache.should_emit(pos, constants.YELLOW) is True


def test_reset_forgets_everything():
    cache = OverlayDiffCache()
    positions = [BlockPos(x, 0, 0) for x in range(5)]
    for pos in positions:
        cache.should_emit(pos, constants.GREEN)
    cache.reset()
    assert len(cache) == 0
    assert all(cache.should_emit(pos, constants.GREEN) for pos in positions)


def test_stats_count_emitted_and_suppressed():
    cache = OverlayDiffCache()
    pos = BlockPos(0, 0, 0)
    cache.should_emit(pos, constants.GREEN)
    cache.should_emit(pos, constants.GREEN)
    cache.should_emit(BlockPos(1, 0, 0), constants.GREEN)
    assert cache.stats() == {"entries": 2, "emitted": 2, "suppressed": 1}
