# simulation.py
"""
Handles the per-tick particle simulation and its parameter API.

This module defines the ParticleSystem class, which owns the particle
population, the noise field and the random source, advances every
particle once per tick, derives each particle's draw radius, colour and
opacity, and emits one DrawCircle instruction per particle to an
injected renderer.
"""
import logging
import math
import pygame
from typing import Any, Callable, List, NamedTuple, Optional, Protocol, Tuple

from constants import (
    MAX_ITERATIONS, MIN_ITERATIONS, MIN_RADIUS, MAX_RADIUS, FADE_SHARPNESS
)
from noise_field import NoiseField
from parameters import (
    SimulationConfig, SpawnMode, MissingValueError, ParameterError, ParameterKind,
    check_constraints, coerce_value, lookup
)
from particle import Particle, ColorClass
from random_source import RandomSource
from utils import lerp

# --- Data Contracts ---
#
# class ParticleSystem:
#   - __init__(self, config, width, height, noise=None, rng=None, renderer=None):
#     - Inputs:
#       - config: SimulationConfig. Copied, never aliased.
#       - width, height: canvas size in pixels.
#       - noise, rng: optional NoiseField / RandomSource. Built from
#         config.seed when omitted; reseeded with config.seed either way.
#       - renderer: optional object with draw_circle(DrawCircle).
#     - Raises: InvalidValueError if the config breaks a range rule.
#
#   - tick(self) -> List[DrawCircle]:
#     - Side Effects: Steps and edge-checks every particle in index
#       order and sends each DrawCircle to the renderer.
#     - Invariants: Never raises for any reachable particle state. The
#       population size is fixed for the duration of the tick.
#
#   - set_parameter(self, name: str, value: Any) -> None:
#     - Raises: MissingValueError, UnknownParameterError,
#       TypeMismatchError, InvalidValueError.
#     - Side Effects: "seed" reseeds noise and random source;
#       "numParticles" appends or truncates particles; "maxLife" clamps
#       every remaining particle's life to the new bound. Requests made
#       during a tick are validated at once and applied after it.
#
#   - get_parameter(self, name: str) -> Any:
#     - Raises: UnknownParameterError. Colours are returned as copies.

_MISSING = object()


class DrawCircle(NamedTuple):
    """A filled circle of the given diameter centred on (x, y)."""
    x: float
    y: float
    radius: float
    rgba: Tuple[int, int, int, float]


class Renderer(Protocol):
    def draw_circle(self, circle: DrawCircle) -> None:
        ...


def iterations_for_index(index: int, count: int) -> int:
    """Sub-steps for a particle, from 5 at index 0 down towards 1 at the end."""
    return int(math.floor(lerp(MAX_ITERATIONS, MIN_ITERATIONS, index / count) + 0.5))

def radius_for_index(index: int, count: int) -> float:
    """Draw radius for a particle, from 2 at index 0 up towards 6 at the end."""
    return lerp(MIN_RADIUS, MAX_RADIUS, index / count)

def fade_ratio(life: float, max_life: float) -> float:
    """
    Opacity envelope over a particle's life.

    Rises from 0 at full life, holds at 1 through the middle of the
    life span and falls back to 0 as life runs out.
    """
    if max_life <= 0:
        return 0.0
    ratio = min(
        life * FADE_SHARPNESS / max_life,
        (max_life - life) * FADE_SHARPNESS / max_life,
        1.0
    )
    return max(ratio, 0.0)


class ParticleSystem:
    """
    A container for all particles and the system-of-record for their config.
    """
    def __init__(
        self,
        config: SimulationConfig,
        width: float,
        height: float,
        noise: Optional[NoiseField] = None,
        rng: Optional[RandomSource] = None,
        renderer: Optional[Renderer] = None
    ):
        """
        Initializes the particle system.

        Args:
            config (SimulationConfig): Simulation parameters.
            width (float): The width of the canvas.
            height (float): The height of the canvas.
            noise (NoiseField): Optional noise capability.
            rng (RandomSource): Optional random capability.
            renderer (Renderer): Optional draw target for tick().
        """
        self.config = config.copy()
        self.width = width
        self.height = height
        check_constraints(self.config, width, height)

        self.noise = noise if noise is not None else NoiseField(
            self.config.seed, self.config.noise_octaves, self.config.noise_falloff
        )
        self.rng = rng if rng is not None else RandomSource(self.config.seed)
        self.renderer = renderer
        self.frame_count = 0

        self._ticking = False
        self._pending: List[Callable[[], None]] = []
        # Config as it will be once the deferred requests are applied.
        self._staged: Optional[SimulationConfig] = None

        self._reseed()
        self.particles: List[Particle] = []
        self._grow(self.config.num_particles)

        logging.info(
            f"ParticleSystem initialized with {len(self.particles)} particles "
            f"on a {width}x{height} canvas (seed {self.config.seed}, "
            f"mode {self.config.mode.name})."
        )

    def _reseed(self) -> None:
        self.noise.reseed(self.config.seed)
        self.rng.reseed(self.config.seed)

    def _spawn(self) -> Particle:
        """Creates a particle with the initial placement rule."""
        config = self.config
        particle = Particle(self)
        particle.x = self.rng.uniform(config.padding_x, self.width - config.padding_x)
        if config.mode == SpawnMode.EVERYWHERE:
            # Bounded by the canvas width, unlike respawn, which uses the height.
            particle.y = self.rng.uniform(config.padding_y, self.width - config.padding_y)
        else:
            particle.y = config.padding_y
        return particle

    def _grow(self, count: int) -> None:
        while len(self.particles) < count:
            self.particles.append(self._spawn())

    def _resize(self, count: int) -> None:
        previous = len(self.particles)
        if count > previous:
            self._grow(count)
        else:
            del self.particles[count:]
        logging.info(f"Particle population resized from {previous} to {count}.")

    def tick(self) -> List[DrawCircle]:
        """
        Executes one frame of the simulation.

        Returns:
            List[DrawCircle]: The draw instructions, in particle index order.
        """
        circles: List[DrawCircle] = []
        self._ticking = True
        try:
            count = len(self.particles)
            max_life = self.config.max_life
            for i, particle in enumerate(self.particles):
                # Properties follow the index; spawn positions are random so
                # this spreads them evenly without visible patterns.
                iterations = iterations_for_index(i, count)
                radius = radius_for_index(i, count)

                particle.step(iterations)
                particle.check_edge()

                color = particle.render_color()
                alpha = 255 * fade_ratio(particle.life, max_life)
                circle = DrawCircle(particle.x, particle.y, radius, (color.r, color.g, color.b, alpha))
                if self.renderer is not None:
                    self.renderer.draw_circle(circle)
                circles.append(circle)
        finally:
            self._ticking = False
            self.frame_count += 1
            self._apply_pending()
        return circles

    def _apply_pending(self) -> None:
        pending, self._pending = self._pending, []
        self._staged = None
        for apply in pending:
            apply()

    def set_parameter(self, name: str, value: Any = _MISSING) -> None:
        """
        Sets the value of one of the named parameters and propagates it.

        Args:
            name (str): The public parameter name, e.g. "numParticles".
            value: The new value. Numeric parameters need a number;
                colours accept anything and fall back to white.
        """
        try:
            if value is _MISSING or value is None:
                raise MissingValueError(f"No value given for parameter '{name}'.")
            param = lookup(name)
            coerced = coerce_value(param, value)
            base = self._staged if self._staged is not None else self.config
            candidate = base.copy()
            setattr(candidate, param.attribute, coerced)
            if param.kind is not ParameterKind.COLOR:
                check_constraints(candidate, self.width, self.height)
        except ParameterError as e:
            logging.error(f"Rejected setParameter('{name}'): {e}")
            raise

        def apply() -> None:
            setattr(self.config, param.attribute, coerced)
            logging.debug(f"Parameter '{name}' set to {coerced}.")
            if name == 'seed':
                self._reseed()
                logging.info(f"Noise field and random source reseeded with {coerced}.")
            elif name == 'numParticles':
                self._resize(coerced)
            elif name == 'maxLife':
                for particle in self.particles:
                    particle.life = min(particle.life, coerced)
                logging.debug(f"Particle lives clamped to the new maxLife {coerced}.")

        if self._ticking:
            logging.debug(f"Deferring setParameter('{name}') until the current tick ends.")
            self._pending.append(apply)
            self._staged = candidate
        else:
            apply()

    def get_parameter(self, name: str) -> Any:
        """Returns the current value of the named parameter."""
        try:
            param = lookup(name)
        except ParameterError as e:
            logging.error(f"Rejected getParameter('{name}'): {e}")
            raise
        value = getattr(self.config, param.attribute)
        if param.kind is ParameterKind.COLOR:
            return pygame.Color(value.r, value.g, value.b, value.a)
        return value

    def snapshot(self) -> List[Tuple[float, float, float, ColorClass]]:
        """Per-particle (x, y, life, color_class), in index order."""
        return [(p.x, p.y, p.life, p.color_class) for p in self.particles]
