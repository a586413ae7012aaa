import pygame
import pytest

from constants import (
    LIFE_DECREMENT, MIN_NOISE_SCALE, MAX_NOISE_SCALE, MAX_SIMULATION_SPEED
)
from noise_field import NoiseField
from parameters import InvalidValueError, SimulationConfig, SpawnMode, TypeMismatchError
from random_source import RandomSource
from simulation import (
    DrawCircle, ParticleSystem, fade_ratio, iterations_for_index, radius_for_index
)


@pytest.mark.parametrize("index, count, expected", [
    (0, 1, 5),
    (0, 100, 5),
    (50, 100, 3),
    (99, 100, 1),
    (3, 4, 2),
    (1, 8, 5),
    (3, 8, 4),
])
def test_iterations_interpolate_from_five_to_one(index, count, expected):
    assert iterations_for_index(index, count) == expected


@pytest.mark.parametrize("index, count, expected", [
    (0, 1, 2.0),
    (0, 100, 2.0),
    (50, 100, 4.0),
    (75, 100, 5.0),
])
def test_radius_interpolates_from_two_to_six(index, count, expected):
    assert radius_for_index(index, count) == pytest.approx(expected)


def test_fade_envelope():
    assert fade_ratio(10, 10) == pytest.approx(0.0)
    assert fade_ratio(5, 10) == 1.0
    assert fade_ratio(LIFE_DECREMENT, 10) == pytest.approx(0.0, abs=0.01)
    assert fade_ratio(0, 10) == 0.0


def test_fade_rises_then_falls_as_life_runs_down():
    lives = [10 - i * 0.25 for i in range(41)]
    ratios = [fade_ratio(life, 10) for life in lives]
    peak = ratios.index(max(ratios))
    assert all(a <= b for a, b in zip(ratios[:peak], ratios[1:peak + 1]))
    assert all(a >= b for a, b in zip(ratios[peak:], ratios[peak + 1:]))


def test_fade_is_total_for_odd_inputs():
    assert fade_ratio(-0.01, 10) == 0.0
    assert fade_ratio(0.0, 0.0) == 0.0


def test_identical_configs_give_identical_runs(make_system):
    a = make_system(num_particles=40, mode=SpawnMode.EVERYWHERE, seed=99)
    b = make_system(num_particles=40, mode=SpawnMode.EVERYWHERE, seed=99)
    assert a.snapshot() == b.snapshot()
    for _ in range(100):
        assert a.tick() == b.tick()
        assert a.snapshot() == b.snapshot()


def test_different_seeds_give_different_runs(make_system):
    a = make_system(num_particles=10, seed=1)
    b = make_system(num_particles=10, seed=2)
    assert a.snapshot() != b.snapshot()


@pytest.mark.parametrize("mode", [SpawnMode.TOP, SpawnMode.EVERYWHERE])
def test_particles_stay_in_the_padded_box_between_ticks(make_system, mode):
    system = make_system(width=300, height=200, num_particles=60, mode=mode, max_life=3)
    for _ in range(300):
        system.tick()
        for particle in system.particles:
            assert 30 <= particle.x <= 270
            assert 30 <= particle.y <= 170


def test_life_stays_within_bounds_between_ticks(make_system):
    system = make_system(num_particles=50, min_life=0, max_life=2)
    for _ in range(300):
        system.tick()
        for particle in system.particles:
            assert -LIFE_DECREMENT < particle.life <= 2


def test_lowering_max_life_clamps_living_particles(make_system):
    system = make_system(num_particles=20, min_life=8, max_life=10)
    system.set_parameter('minLife', 0)
    system.set_parameter('maxLife', 2.0)
    assert all(particle.life <= 2.0 for particle in system.particles)
    for _ in range(5):
        system.tick()
        for particle in system.particles:
            assert -LIFE_DECREMENT < particle.life <= 2.0


@pytest.mark.parametrize("name, value", [
    ('noiseScale', 1e308),
    ('noiseScale', 5e-324),
    ('simulationSpeed', 1e308),
    ('simulationSpeed', -1e308),
])
def test_extreme_motion_parameters_are_rejected(make_system, name, value):
    system = make_system(num_particles=5)
    with pytest.raises(InvalidValueError):
        system.set_parameter(name, value)
    system.tick()


@pytest.mark.parametrize("noise_scale, simulation_speed", [
    (MAX_NOISE_SCALE, MAX_SIMULATION_SPEED),
    (MAX_NOISE_SCALE, -MAX_SIMULATION_SPEED),
    (MIN_NOISE_SCALE, MAX_SIMULATION_SPEED),
])
def test_ticks_survive_the_motion_parameter_limits(make_system, noise_scale, simulation_speed):
    system = make_system(
        num_particles=30, mode=SpawnMode.EVERYWHERE,
        noise_scale=noise_scale, simulation_speed=simulation_speed
    )
    for _ in range(20):
        system.tick()
        for particle in system.particles:
            assert 30 <= particle.x <= 170
            assert 30 <= particle.y <= 170


def test_colours_are_read_as_copies(make_system):
    system = make_system(num_particles=1)
    colour = system.get_parameter('colourL')
    colour.r = 1
    assert system.get_parameter('colourL') == pygame.Color(0, 255, 255)
    assert system.config.color_left == pygame.Color(0, 255, 255)


def test_tick_emits_one_circle_per_particle(make_system, recorder):
    system = make_system(num_particles=20, renderer=recorder)
    circles = system.tick()
    assert len(circles) == 20
    assert recorder.circles == circles
    assert all(isinstance(c, DrawCircle) for c in circles)
    assert [c.radius for c in circles] == pytest.approx([2 + 4 * i / 20 for i in range(20)])
    for circle, particle in zip(circles, system.particles):
        assert (circle.x, circle.y) == (particle.x, particle.y)
        assert 0 <= circle.rgba[3] <= 255
        assert circle.rgba[3] == pytest.approx(255 * fade_ratio(particle.life, 10))


def test_tick_without_renderer_still_returns_circles(make_system):
    system = make_system(num_particles=3)
    assert len(system.tick()) == 3
    assert system.frame_count == 1


def test_tick_on_empty_population(make_system):
    system = make_system(num_particles=0)
    assert system.tick() == []


def test_top_mode_starts_on_the_top_row(make_system):
    system = make_system(num_particles=50)
    for particle in system.particles:
        assert 30 <= particle.x <= 170
        assert particle.y == 30


def test_everywhere_mode_initial_height_is_bounded_by_width(make_system):
    system = make_system(width=400, height=200, num_particles=200, mode=SpawnMode.EVERYWHERE)
    ys = [p.y for p in system.particles]
    assert all(30 <= y <= 370 for y in ys)
    assert any(y > 170 for y in ys)


def test_growing_keeps_existing_particles_and_appends_new_ones(make_system):
    system = make_system(num_particles=100)
    for _ in range(5):
        system.tick()
    before = system.snapshot()
    originals = list(system.particles)

    system.set_parameter('numParticles', 150)

    assert len(system.particles) == 150
    assert system.particles[:100] == originals
    assert system.snapshot()[:100] == before
    for particle in system.particles[100:]:
        assert 30 <= particle.x <= 170
        assert particle.y == 30
        assert 0 <= particle.life <= 10


def test_shrinking_drops_the_highest_indices(make_system):
    system = make_system(num_particles=150)
    system.tick()
    before = system.snapshot()
    originals = list(system.particles)

    system.set_parameter('numParticles', 80)

    assert len(system.particles) == 80
    assert system.particles == originals[:80]
    assert system.snapshot() == before[:80]
    assert system.get_parameter('numParticles') == 80


def test_setting_seed_reseeds_noise_and_random_source(make_system):
    system = make_system(num_particles=5, seed=1)
    system.tick()
    system.set_parameter('seed', 5)
    assert (system.noise.table == NoiseField(5).table).all()
    assert system.rng.uniform(0, 1) == RandomSource(5).uniform(0, 1)


def test_injected_capabilities_are_reseeded_with_the_config_seed():
    noise = NoiseField(1)
    rng = RandomSource(1)
    injected = ParticleSystem(SimulationConfig(seed=21, num_particles=10), 200, 200, noise=noise, rng=rng)
    built = ParticleSystem(SimulationConfig(seed=21, num_particles=10), 200, 200)
    assert injected.noise is noise
    assert injected.snapshot() == built.snapshot()


def test_config_is_copied_not_aliased():
    config = SimulationConfig(num_particles=3)
    system = ParticleSystem(config, 200, 200)
    system.set_parameter('maxLife', 20)
    assert config.max_life == 10


@pytest.mark.parametrize("overrides", [
    {"min_life": 5, "max_life": 2},
    {"padding_x": 100},
    {"padding_y": -1},
    {"noise_scale": 0},
    {"noise_scale": 1e308},
    {"simulation_speed": -1e308},
    {"num_particles": -1},
])
def test_construction_rejects_broken_configs(overrides):
    with pytest.raises(InvalidValueError):
        ParticleSystem(SimulationConfig(**overrides), 200, 200)


def test_scenario_single_particle_moves_or_respawns(make_system):
    system = make_system(
        seed=1337, num_particles=1, mode=SpawnMode.TOP, min_life=0, max_life=10,
        noise_scale=200, simulation_speed=0.2, padding_x=30, padding_y=30
    )
    particle = system.particles[0]
    spawn = (particle.x, particle.y)
    assert 30 <= spawn[0] <= 170
    assert spawn[1] == 30

    assert iterations_for_index(0, 1) == 5
    system.tick()

    assert (particle.x, particle.y) != spawn
    assert particle.in_bounds()


class _ResizingRenderer:
    """Changes the population from inside a tick."""
    def __init__(self):
        self.system = None
        self.calls = 0

    def draw_circle(self, circle):
        self.calls += 1
        if self.calls == 1:
            self.system.set_parameter('numParticles', 2)
            assert len(self.system.particles) == 10


def test_changes_during_a_tick_apply_after_it():
    renderer = _ResizingRenderer()
    system = ParticleSystem(SimulationConfig(num_particles=10), 200, 200, renderer=renderer)
    renderer.system = system

    circles = system.tick()

    assert len(circles) == 10
    assert renderer.calls == 10
    assert len(system.particles) == 2


class _ConflictingRenderer:
    def __init__(self):
        self.system = None
        self.errors = []

    def draw_circle(self, circle):
        if self.system.frame_count == 0 and not self.errors and self.system.get_parameter('maxLife') == 10:
            self.system.set_parameter('maxLife', 3.0)
            try:
                self.system.set_parameter('minLife', 4.0)
            except InvalidValueError as e:
                self.errors.append(e)


def test_deferred_changes_are_validated_against_each_other():
    renderer = _ConflictingRenderer()
    system = ParticleSystem(SimulationConfig(num_particles=2), 200, 200, renderer=renderer)
    renderer.system = system

    system.tick()

    assert len(renderer.errors) == 1
    assert system.get_parameter('maxLife') == 3.0
    assert system.get_parameter('minLife') == 0.0


class _BadValueRenderer:
    def __init__(self):
        self.system = None

    def draw_circle(self, circle):
        self.system.set_parameter('seed', 'abc')


def test_invalid_change_during_a_tick_fails_immediately():
    renderer = _BadValueRenderer()
    system = ParticleSystem(SimulationConfig(num_particles=2), 200, 200, renderer=renderer)
    renderer.system = system
    with pytest.raises(TypeMismatchError):
        system.tick()
    assert system.get_parameter('seed') == 1337
