import asyncio
import time

import pytest

from robodraw.execution.engine import CancelToken, ExecutionEngine, RunOutcome, pause, trace
from robodraw.geometry.pose import RobotPose
from conftest import fwd, rep, right


def _run(engine, program, pose, token=None, on_step=None):
    token = token or CancelToken()
    return asyncio.run(engine.run(program, pose, token, on_step=on_step))


def test_end_to_end_stepwise_poses(east_pose):
    program = (fwd(2), rep(2, [right(90), fwd(1)]))
    steps = []
    engine = ExecutionEngine(cell_size=40, step_delay=0.0)
    final = _run(engine, program, east_pose, on_step=lambda pose, sample: steps.append((pose, sample)))

    expected = [(80, 0, 0), (80, 0, 90), (80, 40, 90), (80, 40, 180), (40, 40, 180)]
    assert len(steps) == len(expected)
    for (pose, _), (x, y, angle) in zip(steps, expected):
        assert pose.x == pytest.approx(x, abs=1e-9)
        assert pose.y == pytest.approx(y, abs=1e-9)
        assert pose.angle == angle

    samples = [sample for _, sample in steps]
    assert samples[1] is None and samples[3] is None
    assert all(s is not None for s in (samples[0], samples[2], samples[4]))
    assert final == steps[-1][0]


def test_repeat_of_turns_adds_no_samples(east_pose):
    steps = []
    engine = ExecutionEngine(cell_size=40, step_delay=0.0)
    final = _run(engine, (rep(3, [right(90)]),), east_pose, on_step=lambda p, s: steps.append(s))
    assert final.angle == 270
    assert steps == [None, None, None]


def test_one_callback_per_leaf(nested_program, east_pose):
    calls = []
    engine = ExecutionEngine(cell_size=40, step_delay=0.0)
    _run(engine, nested_program, east_pose, on_step=lambda p, s: calls.append(p))
    # a + 2 * (c + 3 * 4 * f) + g
    assert len(calls) == 1 + 2 * (1 + 12) + 1


def test_trace_matches_engine(nested_program, east_pose):
    calls = []
    engine = ExecutionEngine(cell_size=40, step_delay=0.0)
    _run(engine, nested_program, east_pose, on_step=lambda p, s: calls.append(p))
    assert trace(nested_program, east_pose, cell_size=40) == calls


def test_pre_cancelled_token_runs_nothing(east_pose):
    token = CancelToken()
    token.cancel()
    calls = []
    engine = ExecutionEngine(step_delay=0.0)
    final = _run(engine, (fwd(1), fwd(2)), east_pose, token, lambda p, s: calls.append(p))
    assert final is east_pose
    assert calls == []


@pytest.mark.parametrize("stop_after", [1, 2, 5, 9])
def test_cancel_unwinds_all_nesting_levels(stop_after, east_pose):
    program = (rep(3, [rep(3, [fwd(1), right(30)])]), fwd(5))
    token = CancelToken()
    calls = []

    def on_step(pose, sample):
        calls.append(pose)
        if len(calls) == stop_after:
            token.cancel()

    engine = ExecutionEngine(cell_size=40, step_delay=0.0)
    final = _run(engine, program, east_pose, token, on_step)
    full = trace(program, east_pose, cell_size=40)
    assert calls == full[:stop_after]
    assert final == full[stop_after - 1]


def test_huge_repeat_stays_cancellable(east_pose):
    token = CancelToken()
    calls = []

    def on_step(pose, sample):
        calls.append(pose)
        if len(calls) == 4:
            token.cancel()

    engine = ExecutionEngine(step_delay=0.0)
    final = _run(engine, (rep(10 ** 12, [right(1)]),), east_pose, token, on_step)
    assert final.angle == 4


def test_pause_wakes_early_when_cancelled():
    async def scenario():
        token = CancelToken()
        loop = asyncio.get_running_loop()
        loop.call_later(0.05, token.cancel)
        started = time.monotonic()
        await pause(5.0, token, poll_interval=0.01)
        return time.monotonic() - started

    assert asyncio.run(scenario()) < 1.0


def test_pause_waits_full_duration():
    async def scenario():
        started = time.monotonic()
        await pause(0.1, CancelToken(), poll_interval=0.02)
        return time.monotonic() - started

    assert asyncio.run(scenario()) >= 0.09


def test_cancel_token_reset():
    token = CancelToken()
    assert not token.cancelled
    token.cancel()
    assert token.cancelled
    token.reset()
    assert not token.cancelled


def test_step_waits_before_applying(east_pose):
    async def scenario():
        token = CancelToken()
        engine = ExecutionEngine(cell_size=40, step_delay=0.5, poll_interval=0.01)
        calls = []
        task = asyncio.create_task(engine.run((fwd(1), fwd(1)), east_pose, token, lambda p, s: calls.append(p)))
        await asyncio.sleep(0.1)
        token.cancel()
        final = await task
        return final, calls

    final, calls = asyncio.run(scenario())
    assert calls == []
    assert final == east_pose


def test_empty_program_returns_start_pose(east_pose):
    engine = ExecutionEngine(step_delay=0.0)
    assert _run(engine, (), east_pose) is east_pose


def test_execute_reports_exhausted_program(east_pose):
    engine = ExecutionEngine(cell_size=40, step_delay=0.0)
    outcome = asyncio.run(engine.execute((rep(2, [fwd(1), right(90)]),), east_pose, CancelToken()))
    assert isinstance(outcome, RunOutcome)
    assert outcome.completed
    assert outcome.steps == 4
    assert outcome.pose == trace((rep(2, [fwd(1), right(90)]),), east_pose, cell_size=40)[-1]


def test_execute_reports_cancelled_run(east_pose):
    token = CancelToken()
    calls = []

    def on_step(pose, sample):
        calls.append(pose)
        if len(calls) == 2:
            token.cancel()

    engine = ExecutionEngine(step_delay=0.0)
    outcome = asyncio.run(engine.execute((fwd(1), fwd(1), fwd(1)), east_pose, token, on_step))
    assert not outcome.completed
    assert outcome.steps == 2
    assert outcome.pose == calls[-1]


def test_cancel_on_last_step_still_completes(east_pose):
    token = CancelToken()

    def on_step(pose, sample):
        if pose.x == 80:
            token.cancel()

    engine = ExecutionEngine(cell_size=40, step_delay=0.0)
    outcome = asyncio.run(engine.execute((fwd(1), fwd(1)), east_pose, token, on_step))
    assert outcome.completed
    assert outcome.steps == 2
    assert token.cancelled
