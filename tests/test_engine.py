"""
Engine contract: initialize / step / color_at.

Covers seed placement, the fixed border, the flat-field fixed point, determinism across
worker counts, and that reads during a step only ever see the committed generation.
"""

import time

import numpy as np
import pytest

from petri import Color, ReactionDiffusion, ReactionParams
from petri.engine import ReactionDiffusion as EngineClass


@pytest.fixture
def engine():
    eng = ReactionDiffusion()
    eng.initialize(48, 48)
    yield eng
    eng.close()


def _border_mask(h, w):
    m = np.zeros((h, w), dtype=bool)
    m[0, :] = m[-1, :] = True
    m[:, 0] = m[:, -1] = True
    return m


# ---------------------------------------------------------------------------
# initialize
# ---------------------------------------------------------------------------

def test_seed_placement_matches_strict_circle():
    eng = ReactionDiffusion()
    eng.initialize(30, 20, seed_center=(7.5, 11.0), seed_radius=4.2)
    a, b = eng.concentrations()
    for i in range(20):
        for j in range(30):
            inside = (7.5 - i) * (7.5 - i) + (11.0 - j) * (11.0 - j) < 4.2 * 4.2
            assert (a[i, j], b[i, j]) == ((0.0, 1.0) if inside else (1.0, 0.0))


def test_default_seed(engine):
    assert engine.shape == (48, 48)
    assert engine.cell(12, 20) == (0.0, 1.0)
    assert engine.cell(12, 23) == (1.0, 0.0)  # distance 3 is on the circle, not inside
    assert engine.generation == 0


def test_radius_zero_gives_uniform_substrate():
    eng = ReactionDiffusion()
    eng.initialize(16, 16, seed_center=(8, 8), seed_radius=0)
    a, b = eng.concentrations()
    assert np.all(a == 1.0) and np.all(b == 0.0)


def test_buffers_are_not_aliased(engine):
    first, second = engine._buffers
    assert not np.shares_memory(first.a, second.a)
    assert not np.shares_memory(first.b, second.b)
    np.testing.assert_array_equal(first.a, second.a)
    np.testing.assert_array_equal(first.b, second.b)


@pytest.mark.parametrize("w,h", [(0, 10), (10, 0), (-3, 4)])
def test_invalid_dimensions(w, h):
    with pytest.raises(ValueError):
        ReactionDiffusion().initialize(w, h)


def test_negative_radius_rejected():
    with pytest.raises(ValueError):
        ReactionDiffusion().initialize(10, 10, seed_radius=-1)


def test_reinitialize_restarts(engine):
    engine.run(5)
    engine.initialize(20, 10, seed_center=(5, 5), seed_radius=2)
    assert engine.generation == 0
    assert engine.shape == (10, 20)
    assert engine.cell(5, 5) == (0.0, 1.0)


def test_use_before_initialize():
    eng = ReactionDiffusion()
    assert not eng.initialized
    with pytest.raises(RuntimeError):
        eng.step()
    with pytest.raises(RuntimeError):
        eng.color_at(0, 0)


# ---------------------------------------------------------------------------
# step
# ---------------------------------------------------------------------------

def test_first_step_at_seed_center(engine):
    engine.step()
    a, b = engine.cell(12, 20)
    # whole 3x3 neighbourhood is pure B, so only the reaction terms act
    assert a > 0.0 and a == pytest.approx(0.055)
    assert b < 1.0 and b == pytest.approx(0.883)


def test_seed_center_matches_larger_circle_center(engine):
    big = ReactionDiffusion()
    big.initialize(48, 48, seed_center=(24, 24), seed_radius=10)
    engine.step()
    big.step()
    small_a, small_b = engine.cell(12, 20)
    big_a, big_b = big.cell(24, 24)
    assert small_a == pytest.approx(big_a)
    assert small_b == pytest.approx(big_b)


def test_seed_edge_gains_a_by_diffusion(engine):
    engine.step()
    # (12, 22) is seeded and touches substrate cells, so A arrives by diffusion as well as feed
    a, _ = engine.cell(12, 22)
    assert a > 0.055


def test_border_unchanged_after_many_steps(engine):
    a0, b0 = engine.concentrations()
    engine.run(1000)
    a, b = engine.concentrations()
    border = _border_mask(48, 48)
    np.testing.assert_array_equal(a[border], a0[border])
    np.testing.assert_array_equal(b[border], b0[border])
    assert np.all(a[border] == 1.0) and np.all(b[border] == 0.0)
    assert engine.generation == 1000


def test_border_keeps_seed_values():
    eng = ReactionDiffusion()
    eng.initialize(20, 20, seed_center=(0, 0), seed_radius=4)
    eng.run(25)
    assert eng.cell(0, 0) == (0.0, 1.0)
    assert eng.cell(0, 3) == (0.0, 1.0)
    assert eng.cell(3, 0) == (0.0, 1.0)


def test_flat_interior_has_no_diffusion():
    eng = ReactionDiffusion(ReactionParams(feed_rate=0.0, kill_rate=0.0))
    eng.initialize(12, 12, seed_radius=0)
    eng.committed.b[:] = 0.25
    eng._buffers[1 - eng._front].b[:] = 0.25
    eng.step()
    a, b = eng.concentrations()
    rate = 1.0 * 0.25 * 0.25
    assert np.allclose(a[1:-1, 1:-1], 1.0 - rate, atol=1e-12)
    assert np.allclose(b[1:-1, 1:-1], 0.25 + rate, atol=1e-12)


@pytest.mark.parametrize("workers", [2, 3, 8])
def test_deterministic_across_workers(workers):
    serial = ReactionDiffusion(workers=1)
    serial.initialize(40, 33, seed_center=(16, 20), seed_radius=6)
    with ReactionDiffusion(workers=workers) as parallel:
        parallel.initialize(40, 33, seed_center=(16, 20), seed_radius=6)
        serial.run(60)
        parallel.run(60)
        for x, y in zip(serial.concentrations(), parallel.concentrations()):
            np.testing.assert_array_equal(x, y)


def test_two_engines_same_setup_match():
    e1, e2 = ReactionDiffusion(), ReactionDiffusion()
    for e in (e1, e2):
        e.initialize(32, 32, seed_center=(10, 12), seed_radius=5)
        e.run(100)
    np.testing.assert_array_equal(e1.colors(), e2.colors())


def test_reads_during_step_see_committed_generation(engine, monkeypatch):
    engine.run(3)
    before = engine.colors()
    seen = []
    original = EngineClass._update_band

    def spying(self, src, dst, lo, hi):
        seen.append(self.colors())
        original(self, src, dst, lo, hi)
        seen.append(self.colors())

    monkeypatch.setattr(EngineClass, "_update_band", spying)
    engine.step()
    assert seen
    for snapshot in seen:
        np.testing.assert_array_equal(snapshot, before)
    assert not np.array_equal(engine.colors(), before)


def test_reads_during_parallel_step_see_committed_generation(monkeypatch):
    seen = []
    original = EngineClass._update_band

    def spying(self, src, dst, lo, hi):
        original(self, src, dst, lo, hi)
        seen.append(self.colors())

    with ReactionDiffusion(workers=4) as eng:
        eng.initialize(24, 24, seed_center=(12, 12), seed_radius=4)
        before = eng.colors()
        monkeypatch.setattr(EngineClass, "_update_band", spying)
        eng.step()
    assert len(seen) == 4
    for snapshot in seen:
        np.testing.assert_array_equal(snapshot, before)


def test_worker_exception_propagates(monkeypatch):
    def boom(self, src, dst, lo, hi):
        raise FloatingPointError("band failed")

    with ReactionDiffusion(workers=2) as eng:
        eng.initialize(10, 10)
        monkeypatch.setattr(EngineClass, "_update_band", boom)
        with pytest.raises(FloatingPointError):
            eng.step()
        assert eng.generation == 0


def test_failed_band_waits_for_other_bands(monkeypatch):
    finished = []

    def uneven(self, src, dst, lo, hi):
        if lo == 1:
            raise FloatingPointError("band failed")
        time.sleep(0.3)
        finished.append((lo, hi))

    with ReactionDiffusion(workers=2) as eng:
        eng.initialize(10, 10)
        monkeypatch.setattr(EngineClass, "_update_band", uneven)
        with pytest.raises(FloatingPointError):
            eng.step()
        # the slow band completed before step() raised
        assert finished == [(5, 9)]
        assert eng.generation == 0


def test_tiny_grid_has_no_interior():
    eng = ReactionDiffusion()
    eng.initialize(2, 2, seed_center=(0, 0), seed_radius=1)
    before = eng.colors()
    eng.step()
    np.testing.assert_array_equal(eng.colors(), before)
    assert eng.generation == 1


def test_custom_zero_sum_kernel():
    eng = ReactionDiffusion(kernel=[[0, 0.25, 0], [0.25, -1, 0.25], [0, 0.25, 0]])
    eng.initialize(16, 16, seed_center=(8, 8), seed_radius=3)
    eng.run(10)
    assert eng.generation == 10


def test_bad_kernel_rejected():
    with pytest.raises(ValueError):
        ReactionDiffusion(kernel=np.ones((3, 3)))


def test_workers_must_be_positive():
    with pytest.raises(ValueError):
        ReactionDiffusion(workers=0)


# ---------------------------------------------------------------------------
# color_at
# ---------------------------------------------------------------------------

def test_color_at_maps_a_and_b(engine):
    assert engine.color_at(12, 20) == Color(0.0, 0.0, 1.0, 1.0)
    assert engine.color_at(0, 0) == Color(1.0, 0.0, 0.0, 1.0)
    assert engine.color_at(0, 0).a == 1.0


def test_color_at_is_not_clamped(engine):
    engine.committed.a[5, 5], engine.committed.b[5, 5] = 1.5, -0.25
    assert engine.color_at(5, 5) == Color(1.5, 0.0, -0.25, 1.0)


@pytest.mark.parametrize("i,j", [(-1, 0), (0, -1), (48, 0), (0, 48), (100, 100)])
def test_color_at_out_of_range(engine, i, j):
    with pytest.raises(IndexError):
        engine.color_at(i, j)


def test_colors_matches_color_at(engine):
    engine.run(20)
    rgba = engine.colors()
    assert rgba.shape == (48, 48, 4)
    for i, j in [(0, 0), (12, 20), (13, 21), (30, 5)]:
        assert tuple(rgba[i, j]) == tuple(engine.color_at(i, j))


def test_concentrations_are_copies(engine):
    a, _ = engine.concentrations()
    a[:] = -1.0
    assert engine.cell(0, 0) == (1.0, 0.0)
