"""
Marble Physics Tests
====================

Wall reflection, spawning and the idle/running state machine.

Usage:
    pytest test_simulation.py
"""

import numpy as np
import pytest

from freesets_board import (
    Marble,
    MarbleSimulator,
    RoundConfig,
    RoundContext,
    SimulationState,
    advance,
    spawn_marbles,
)


CANVAS = (800, 600)


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


def make_context(marble_count=3):
    config = RoundConfig(round_number=1, marble_count=marble_count, required_enclosure_count=2)
    return RoundContext(config=config, started_at=0.0)


def make_simulator(seed=0, clock=None):
    return MarbleSimulator(
        canvas_wh=CANVAS,
        radius=10,
        speed_scale=10,
        random_source=np.random.default_rng(seed),
        clock=clock or FakeClock(),
    )


def test_left_wall_reflection():
    marble = Marble(id=0, x=10, y=300, vx=-3, vy=0, radius=10)
    advance(marble, CANVAS)

    assert marble.vx == 3
    assert marble.x == 10 + 3


def test_right_wall_reflection():
    marble = Marble(id=0, x=788, y=300, vx=4, vy=0, radius=10)
    advance(marble, CANVAS)

    assert marble.vx == -4
    assert marble.x == 784


def test_reflection_per_axis_is_independent():
    marble = Marble(id=0, x=12, y=588, vx=-5, vy=5, radius=10)
    advance(marble, CANVAS)

    assert (marble.vx, marble.vy) == (5, -5)
    assert (marble.x, marble.y) == (17, 583)


def test_free_flight():
    marble = Marble(id=0, x=400, y=300, vx=2.5, vy=-1.5, radius=10)
    advance(marble, CANVAS)

    assert (marble.x, marble.y) == (402.5, 298.5)
    assert (marble.vx, marble.vy) == (2.5, -1.5)


def test_marbles_pass_through_each_other():
    a = Marble(id=0, x=400, y=300, vx=5, vy=0)
    b = Marble(id=1, x=405, y=300, vx=-5, vy=0)
    advance(a, CANVAS)
    advance(b, CANVAS)

    assert (a.x, a.vx) == (405, 5)
    assert (b.x, b.vx) == (400, -5)


def test_spawn_within_canvas_and_speed_bounds():
    marbles = spawn_marbles(200, CANVAS, radius=10, speed_scale=10, random_source=np.random.default_rng(3))

    assert [m.id for m in marbles] == list(range(200))
    for marble in marbles:
        assert 0 <= marble.x < 800
        assert 0 <= marble.y < 600
        assert -10 <= marble.vx <= 10
        assert -10 <= marble.vy <= 10
        assert marble.radius == 10


def test_spawn_is_reproducible_with_seed():
    first = spawn_marbles(5, CANVAS, 10, 10, np.random.default_rng(42))
    second = spawn_marbles(5, CANVAS, 10, 10, np.random.default_rng(42))
    assert first == second


def test_populate_records_start_positions():
    context = make_context(marble_count=4)
    simulator = make_simulator()
    simulator.populate(context)

    assert len(context.marbles) == 4
    assert context.marble_starts == [m.position for m in context.marbles]
    assert context.simulation_state is SimulationState.IDLE


def test_tick_is_noop_while_idle():
    context = make_context()
    simulator = make_simulator()
    simulator.populate(context)
    before = context.positions()

    assert simulator.tick(context) == before


def test_state_machine_round_trip():
    clock = FakeClock(50.0)
    context = make_context()
    simulator = make_simulator(clock=clock)
    simulator.load(context, [Marble(id=0, x=400, y=300, vx=1, vy=1)])

    assert simulator.start(context)
    assert context.simulation_state is SimulationState.RUNNING
    assert context.sim_started_at == 50.0
    assert not simulator.start(context)

    positions = simulator.tick(context)
    assert positions[0].as_tuple() == (401, 301)

    clock.now = 60.0
    frozen = simulator.stop(context)
    assert context.simulation_state is SimulationState.IDLE
    assert context.sim_stopped_at == 60.0
    assert frozen[0].as_tuple() == (401, 301)

    # Frozen after stop
    simulator.tick(context)
    assert context.positions() == frozen
    assert simulator.stop(context) == frozen
    assert context.sim_stopped_at == 60.0


def test_marbles_stay_inside_after_many_ticks():
    context = make_context(marble_count=30)
    simulator = make_simulator(seed=11)
    simulator.populate(context)
    # Start inside the reflective band
    for marble in context.marbles:
        marble.x = min(max(marble.x, 20), 780)
        marble.y = min(max(marble.y, 20), 580)

    simulator.start(context)
    for _ in range(2000):
        simulator.tick(context)

    for marble in context.marbles:
        assert 0 < marble.x < 800
        assert 0 < marble.y < 600


def test_simulator_rejects_empty_canvas():
    with pytest.raises(ValueError):
        MarbleSimulator((0, 600), radius=10, speed_scale=10, random_source=np.random.default_rng())
