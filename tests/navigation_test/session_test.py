import pytest

from navigation.simulator.models import Coord, DirectionType, SessionStatus, SpeedMode
from navigation.simulator.exceptions import InvalidRoute
from navigation.simulator.nav_config import NavConfig
from navigation.simulator.scheduler import ManualFrameScheduler
from navigation.simulator.session import NavigationSession


def test_initial_state(session):
    assert session.status == SessionStatus.IDLE
    assert session.current_position is None
    assert session.traveled_path == ()
    assert session.overall_progress == 0
    assert session.speed_mode == SpeedMode.NORMAL


def test_start_rejects_single_point_route(session, single_point_route, scheduler):
    with pytest.raises(InvalidRoute) as exc:
        session.start(single_point_route)
    assert exc.value.coordinate_count == 1
    assert session.status == SessionStatus.IDLE
    assert scheduler.pending == 0


def test_start_initialises_state(session, line_route, scheduler):
    session.start(line_route)
    assert session.status == SessionStatus.RUNNING
    assert session.segment_index == 0
    assert session.segment_progress == 0.0
    assert session.overall_progress == 0
    assert session.current_step_index == 0
    assert session.traveled_path == (Coord(0, 0),)
    assert len(session.directions) == 3
    assert scheduler.pending == 1


def test_end_to_end_example(session, line_route):
    session.start(line_route)

    for _ in range(10):
        session.step()
    assert session.segment_index == 1
    assert session.segment_progress == pytest.approx(0.0)
    assert session.current_position.lat == pytest.approx(0.0)
    assert session.current_position.lon == pytest.approx(1.0)
    assert session.overall_progress == 50
    assert session.current_step_index == 1
    assert session.directions[0].completed

    for _ in range(10):
        session.step()
    assert session.status == SessionStatus.COMPLETED
    assert session.current_position == Coord(0, 2)
    assert session.overall_progress == 100
    assert session.directions[session.current_step_index].type == DirectionType.DESTINATION
    assert all(d.completed for d in session.directions)


def test_scheduler_drives_to_completion(session, manhattan_route, scheduler):
    session.start(manhattan_route)
    ticks = scheduler.run_until_idle()
    assert session.status == SessionStatus.COMPLETED
    assert session.current_position == manhattan_route.coordinates[-1]
    assert session.overall_progress == 100
    # 4 segments * 10 frames
    assert ticks == 40
    assert scheduler.pending == 0


def test_progress_never_regresses(session, manhattan_route, scheduler):
    seen = []
    session.add_listener(lambda frame: seen.append(frame.overall_progress))
    session.start(manhattan_route)
    scheduler.run_until_idle()
    assert seen == sorted(seen)
    assert seen[-1] == 100


def test_pause_freezes_progress(session, manhattan_route, scheduler):
    session.start(manhattan_route)
    scheduler.advance(7)
    session.pause()
    frozen = session.overall_progress
    frozen_position = session.current_position

    assert session.status == SessionStatus.PAUSED
    assert scheduler.pending == 0
    for _ in range(25):
        session.step()
        scheduler.advance()
    assert session.overall_progress == frozen
    assert session.current_position == frozen_position

    session.resume()
    assert session.status == SessionStatus.RUNNING
    before = session.overall_progress
    scheduler.advance(5)
    assert session.overall_progress > before


def test_pause_resume_ignored_outside_active_states(session, line_route):
    session.pause()
    session.resume()
    assert session.status == SessionStatus.IDLE

    session.start(line_route)
    session.resume()
    assert session.status == SessionStatus.RUNNING

    for _ in range(20):
        session.step()
    session.pause()
    assert session.status == SessionStatus.COMPLETED


def test_toggle_pause(session, line_route):
    session.start(line_route)
    session.toggle_pause()
    assert session.status == SessionStatus.PAUSED
    session.toggle_pause()
    assert session.status == SessionStatus.RUNNING


@pytest.mark.parametrize("pause_first", [False, True])
def test_stop_resets_everything(session, manhattan_route, scheduler, pause_first):
    session.start(manhattan_route)
    scheduler.advance(15)
    if pause_first:
        session.pause()
    session.stop()

    assert session.status == SessionStatus.STOPPED
    assert session.segment_index == 0
    assert session.segment_progress == 0.0
    assert session.overall_progress == 0
    assert session.traveled_path == ()
    assert session.current_position is None
    assert scheduler.pending == 0


def test_restart_after_stop(session, line_route, scheduler):
    session.start(line_route)
    scheduler.advance(5)
    session.stop()
    session.start(line_route)
    assert session.status == SessionStatus.RUNNING
    assert session.traveled_path == (Coord(0, 0),)
    assert scheduler.pending == 1


def test_stale_frame_after_stop_is_ignored(line_route):
    scheduler = ManualFrameScheduler()
    session = NavigationSession(scheduler, NavConfig())
    session.start(line_route)
    stale_handle = session._handle

    session.stop()
    scheduler.fire(stale_handle)

    assert session.status == SessionStatus.STOPPED
    assert session.traveled_path == ()
    assert session.overall_progress == 0


def test_stale_frame_after_restart_is_ignored(session, line_route, scheduler):
    session.start(line_route)
    stale_handle = session._handle
    session.pause()
    session.resume()

    scheduler.fire(stale_handle)
    assert session.segment_progress == 0.0
    assert scheduler.pending == 1


def test_speed_change_mid_run_keeps_progress(session, line_route, scheduler):
    session.start(line_route)
    scheduler.advance(4)
    progress_before = session.segment_progress

    session.set_speed("fast")
    assert session.speed_mode == SpeedMode.FAST
    assert session.segment_progress == progress_before
    assert scheduler.pending == 1

    scheduler.advance(1)
    assert session.segment_progress == pytest.approx(progress_before + 0.25)


def test_set_speed_rejects_unknown_mode(session):
    with pytest.raises(ValueError):
        session.set_speed("warp")


def test_traveled_path_is_bounded(manhattan_route):
    config = NavConfig(speed_steps={
        SpeedMode.SLOW: 0.001,
        SpeedMode.NORMAL: 0.002,
        SpeedMode.FAST: 0.004,
    })
    scheduler = ManualFrameScheduler()
    session = NavigationSession(scheduler, config)
    lengths = []
    session.add_listener(lambda frame: lengths.append(len(frame.traveled_path)))
    session.start(manhattan_route)
    scheduler.run_until_idle()

    assert session.status == SessionStatus.COMPLETED
    assert max(lengths) == 50
    assert len(session.traveled_path) <= 50
    assert session.traveled_path[-1] == manhattan_route.coordinates[-1]


def test_close_cancels_pending_frame(session, line_route, scheduler):
    calls = []
    session.add_listener(calls.append)
    session.start(line_route)
    session.close()
    assert scheduler.pending == 0
    assert session.status == SessionStatus.STOPPED
    scheduler.run_until_idle()
    assert session.overall_progress == 0


def test_snapshot_exposes_current_and_upcoming(session, manhattan_route):
    session.start(manhattan_route)
    frame = session.snapshot()
    assert frame.current_direction.instruction == "Head straight"
    assert len(frame.upcoming_directions) == len(manhattan_route.coordinates) - 1


def test_progress_rounds_half_percent_up(manhattan_route):
    config = NavConfig(speed_steps={
        SpeedMode.SLOW: 0.0625,
        SpeedMode.NORMAL: 0.125,
        SpeedMode.FAST: 0.25,
    })
    session = NavigationSession(ManualFrameScheduler(), config)
    session.start(manhattan_route)
    for _ in range(4):
        session.step()
    # Half of the first of four segments is 12.5%
    assert session.segment_progress == 0.5
    assert session.overall_progress == 13


def test_delivered_frames_do_not_change_later(session, line_route, scheduler):
    frames = []
    session.add_listener(frames.append)
    session.start(line_route)
    scheduler.run_until_idle()

    first = frames[0]
    assert not any(d.completed for d in first.directions)
    assert first.current_step_index == 0
    assert all(d.completed for d in frames[-1].directions)
    assert all(d.completed for d in session.directions)
