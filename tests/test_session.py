from roomtools_lib.config import OverlaySettings
from roomtools_lib.rendering import constants
from roomtools_lib.schema import BlockPos, Cuboid
from roomtools_lib.session import AutoRefresh, OverlaySession


def test_show_always_repaints(cube, stone_cells, make_room):
    volume, bits = cube
    room = make_room(volume, bits, is_small_room=True)
    session = OverlaySession()
    assert len(session.show(room, stone_cells)) == 8
    assert len(session.show(room, stone_cells)) == 8


def test_refresh_only_sends_changes(cube, stone_cells, make_room):
    volume, bits = cube
    session = OverlaySession()
    session.show(make_room(volume, bits), stone_cells)
    assert len(session.refresh(make_room(volume, bits), stone_cells)) == 0

    greenhouse = make_room(volume, bits, skylight_count=4)
    result = session.refresh(greenhouse, stone_cells)
    assert [c for _, c in result.emissions] == [constants.GREEN] * 8


def test_hide_clears_and_forgets_cached_colors(cube, stone_cells, make_room):
    volume, bits = cube
    room = make_room(volume, bits)
    session = OverlaySession()
    session.show(room, stone_cells)
    hidden = session.hide()
    assert hidden.clear_all is True
    assert len(session.cache) == 0
    assert len(session.refresh(room, stone_cells)) == 8


def test_show_without_room_clears(stone_cells):
    session = OverlaySession()
    result = session.show(None, stone_cells)
    assert result.clear_all is True
    assert len(session.refresh(None, stone_cells)) == 0


def test_message_carries_highlight_delay(cube, stone_cells, make_room):
    volume, bits = cube
    session = OverlaySession(OverlaySettings(highlight_delay_ms=250))
    shown = session.message_for(session.show(make_room(volume, bits), stone_cells))
    assert shown["delay_ms"] == 250
    assert "delay_ms" not in session.message_for(session.hide())


def test_auto_refresh_interval_comes_from_settings():
    session = OverlaySession(OverlaySettings(auto_refresh_seconds=1.0))
    assert session.auto_refresh.interval_seconds == 1.0
    assert not session.tick(BlockPos(0, 0, 0), 5.0)
    session.auto_refresh.set_enabled(True)
    assert not session.tick(BlockPos(0, 0, 0), 0.5)
    assert not session.tick(BlockPos(0, 0, 0), 0.5)
    assert session.tick(BlockPos(0, 0, 0), 0.5)


def test_show_respects_problem_logging_setting(mocker, make_room, stone_cells):
    spy = mocker.patch("roomtools_lib.session.highlight_room")
    session = OverlaySession(OverlaySettings(log_problem_blocks=False))
    room = make_room(Cuboid(0, 0, 0, 1, 1, 1), b"\xff", exit_count=1)
    session.show(room, stone_cells)
    spy.assert_called_once_with(
        room, stone_cells, session.cache, reset=True, log_problems=False
    )


def test_auto_refresh_fires_after_standing_still():
    timer = AutoRefresh(interval_seconds=5.0, enabled=True)
    here = BlockPos(1, 2, 3)
    assert timer.tick(here, 0.1) is False  # first sighting starts the clock
    assert timer.tick(here, 3.0) is False
    assert timer.tick(here, 2.0) is True
    assert timer.tick(here, 1.0) is False


def test_auto_refresh_restarts_when_moving_and_stays_quiet_when_disabled():
    timer = AutoRefresh(interval_seconds=1.0, enabled=True)
    timer.tick(BlockPos(0, 0, 0), 0.1)
    timer.tick(BlockPos(0, 0, 0), 0.9)
    assert timer.tick(BlockPos(1, 0, 0), 5.0) is False
    timer.set_enabled(False)
    assert timer.tick(BlockPos(1, 0, 0), 5.0) is False
