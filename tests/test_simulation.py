import dataclasses
import math

import numpy as np
import pytest

from field_config import BoundaryPolicy, FieldConfig, PointerForce
from particle import ParticleStore
from simulation import Simulation, apply_boundary

FAR_AWAY = (1e6, 1e6)


def _single(config, x, y, z, velocity=(0.0, 0.0, 0.0), width=640, height=480):
    store = ParticleStore(config, 1, width, height)
    store.positions[0] = (x, y, z)
    store.velocities[0] = velocity
    return store, Simulation(store, config, width, height)


@pytest.mark.parametrize("policy", [BoundaryPolicy.WRAP, BoundaryPolicy.BOUNCE])
def test_depth_stays_in_range_for_any_velocity(config, policy):
    cfg = dataclasses.replace(config, depth_boundary=policy, boundary=policy)
    store = ParticleStore(cfg, 100, 640, 480)
    store.velocities[:] = store.rng.uniform(-1e6, 1e6, size=store.velocities.shape)
    sim = Simulation(store, cfg, 640, 480)

    for _ in range(20):
        sim.step((320.0, 240.0))
        assert np.all(store.positions[:, 2] >= 0.0)
        assert np.all(store.positions[:, 2] <= cfg.z_max)
        assert np.all(store.positions[:, 0] >= -cfg.edge_margin)
        assert np.all(store.positions[:, 0] <= 640 + cfg.edge_margin)
        assert np.all(store.positions[:, 1] >= -cfg.edge_margin)
        assert np.all(store.positions[:, 1] <= 480 + cfg.edge_margin)


def test_count_never_changes(config):
    store = ParticleStore(config, 37, 640, 480)
    sim = Simulation(store, config, 640, 480)
    for _ in range(10):
        sim.step((100.0, 100.0))
    assert len(store) == 37
    assert store.positions.shape == (37, 3)


def test_far_pointer_only_damps_velocity(config):
    store = ParticleStore(config, 50, 640, 480)
    before = store.velocities.copy()
    Simulation(store, config, 640, 480).step(FAR_AWAY)
    np.testing.assert_allclose(store.velocities, before * config.friction)


def test_pointer_repels(still_config):
    cfg = dataclasses.replace(still_config, pointer_force=PointerForce.REPEL)
    store, sim = _single(cfg, 100.0, 100.0, 500.0)
    sim.step((150.0, 100.0))
    # falloff (200 - 50) / 200 = 0.75, times strength 0.3, pointing away.
    assert store.velocities[0, 0] == pytest.approx(-0.225)
    assert store.velocities[0, 1] == pytest.approx(0.0)


def test_pointer_attracts(still_config):
    cfg = dataclasses.replace(still_config, pointer_force=PointerForce.ATTRACT)
    store, sim = _single(cfg, 100.0, 100.0, 500.0)
    sim.step((100.0, 150.0))
    assert store.velocities[0, 1] == pytest.approx(0.225)
    assert store.velocities[0, 0] == pytest.approx(0.0)


def test_pointer_outside_radius_has_no_effect(still_config):
    store, sim = _single(still_config, 100.0, 100.0, 500.0)
    sim.step((100.0 + still_config.pointer_radius + 1.0, 100.0))
    np.testing.assert_array_equal(store.velocities[0], [0.0, 0.0, 0.0])


def test_velocity_integrates_then_damps(still_config):
    cfg = dataclasses.replace(still_config, friction=0.5)
    store, sim = _single(cfg, 100.0, 100.0, 500.0, velocity=(2.0, -4.0, 6.0))
    sim.step(FAR_AWAY)
    np.testing.assert_allclose(store.positions[0], [102.0, 96.0, 506.0])
    np.testing.assert_allclose(store.velocities[0], [1.0, -2.0, 3.0])


def test_wrap_teleports_to_opposite_edge(still_config):
    store, sim = _single(still_config, 638.0, 2.0, 998.0, velocity=(5.0, -5.0, 5.0))
    sim.step(FAR_AWAY)
    np.testing.assert_array_equal(store.positions[0], [0.0, 480.0, 0.0])
    np.testing.assert_array_equal(store.velocities[0], [5.0, -5.0, 5.0])


def test_bounce_reflects_velocity(still_config):
    cfg = dataclasses.replace(
        still_config, boundary=BoundaryPolicy.BOUNCE, depth_boundary=BoundaryPolicy.BOUNCE
    )
    store, sim = _single(cfg, 638.0, 2.0, 2.0, velocity=(5.0, -5.0, -5.0))
    sim.step(FAR_AWAY)
    np.testing.assert_array_equal(store.positions[0], [640.0, 0.0, 0.0])
    np.testing.assert_array_equal(store.velocities[0], [-5.0, 5.0, 5.0])


def test_apply_boundary_leaves_inside_values_alone():
    coords = np.array([-1.0, 5.0, 11.0])
    velocities = np.array([-1.0, 1.0, 1.0])
    apply_boundary(coords, velocities, 0.0, 10.0, BoundaryPolicy.BOUNCE)
    np.testing.assert_array_equal(coords, [0.0, 5.0, 10.0])
    np.testing.assert_array_equal(velocities, [1.0, 1.0, -1.0])


def test_wave_drift_moves_positions_not_velocities(still_config):
    cfg = dataclasses.replace(still_config, wave_amplitude=(0.8, 0.8))
    store, sim = _single(cfg, 100.0, 100.0, 500.0)
    sim.step(FAR_AWAY)
    t = cfg.time_step
    assert store.positions[0, 0] == pytest.approx(100.0 + math.sin(t) * 0.8)
    assert store.positions[0, 1] == pytest.approx(100.0 + math.cos(t) * 0.8)
    np.testing.assert_array_equal(store.velocities[0], [0.0, 0.0, 0.0])


def test_wave_swap_drives_x_with_cosine(still_config):
    cfg = dataclasses.replace(still_config, wave_amplitude=(0.3, 0.5), wave_swap=True)
    store, sim = _single(cfg, 100.0, 100.0, 500.0)
    sim.step(FAR_AWAY)
    t = cfg.time_step
    assert store.positions[0, 0] == pytest.approx(100.0 + math.cos(t) * 0.3)
    assert store.positions[0, 1] == pytest.approx(100.0 + math.sin(t) * 0.5)


def test_wave_phase_differs_per_particle(still_config):
    cfg = dataclasses.replace(still_config, wave_amplitude=(1.0, 1.0))
    store = ParticleStore(cfg, 2, 640, 480)
    store.positions[:] = [[100.0, 100.0, 500.0], [100.0, 100.0, 500.0]]
    store.velocities[:] = 0.0
    Simulation(store, cfg, 640, 480).step(FAR_AWAY)
    assert store.positions[0, 0] != store.positions[1, 0]


def test_rotation_orbits_canvas_center(still_config):
    cfg = dataclasses.replace(still_config, rotation_speed=math.pi / 2)
    store, sim = _single(cfg, 330.0, 240.0, 500.0)
    sim.step(FAR_AWAY)
    assert store.positions[0, 0] == pytest.approx(320.0)
    assert store.positions[0, 1] == pytest.approx(250.0)


def test_time_and_pulse_advance(still_config):
    store, sim = _single(still_config, 100.0, 100.0, 500.0)
    pulse = store.pulses[0]
    sim.step(FAR_AWAY)
    sim.step(FAR_AWAY)
    assert sim.time == pytest.approx(2 * still_config.time_step)
    assert store.pulses[0] == pytest.approx(pulse + 2 * still_config.pulse_step)


def test_resize_moves_boundaries_not_particles(still_config):
    store, sim = _single(still_config, 600.0, 400.0, 500.0)
    sim.resize(320, 240)
    np.testing.assert_array_equal(store.positions[0], [600.0, 400.0, 500.0])
    sim.step(FAR_AWAY)
    # Out of range on both axes now, so it wraps to the low edge.
    np.testing.assert_array_equal(store.positions[0, :2], [0.0, 0.0])


def test_zero_particles_step(config):
    store = ParticleStore(config, 0, 640, 480)
    sim = Simulation(store, config, 640, 480)
    sim.step((10.0, 10.0))
    assert sim.mean_speed() == 0.0
