# particle.py
"""
A single flow-field particle and its colour assignment.

Each particle owns its own motion, edge check and respawn logic. It reads
the configuration, noise field and random source of the ParticleSystem
that owns it, and mutates nothing but its own fields.
"""
import math
import pygame
from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from constants import (
    LIFE_DECREMENT, TRANSITION_LEFT, TRANSITION_RIGHT,
    EVERYWHERE_SPAWN_HEIGHT, DIRECTIONAL_ODDS
)
from parameters import SpawnMode
from utils import map_range

if TYPE_CHECKING:
    from simulation import ParticleSystem

# --- Data Contracts ---
#
# class Particle:
#   - __init__(self, system: ParticleSystem):
#     - Side Effects: Draws life from [minLife, maxLife], then a colour
#       class, from the system's RandomSource. Position is left at the
#       origin for the owning system to place.
#
#   - step(self, iterations: int) -> None:
#     - Side Effects: Decrements life by LIFE_DECREMENT exactly once.
#       If life drops below zero, respawns and does not move this tick.
#       Otherwise moves `iterations` times along the noise field angle.
#
#   - check_edge(self) -> None:
#     - Invariants: On return the position lies inside the padded box.
#
#   - respawn(self) -> None:
#     - Side Effects: life = maxLife, new colour class, new position.
#       Consumes one integer draw and one or two uniform draws.


@dataclass(frozen=True)
class Plain:
    """A single-colour particle."""
    color: pygame.Color

    def color_at(self, ratio: float) -> pygame.Color:
        return pygame.Color(self.color.r, self.color.g, self.color.b)


@dataclass(frozen=True)
class Directional:
    """A particle whose colour blends from color_a to color_b with its heading."""
    color_a: pygame.Color
    color_b: pygame.Color

    def color_at(self, ratio: float) -> pygame.Color:
        return self.color_a.lerp(self.color_b, min(max(ratio, 0.0), 1.0))


ColorClass = Union[Plain, Directional]


class Particle:
    """
    One moving point steered by the noise field.
    """
    def __init__(self, system: "ParticleSystem"):
        self.system = system
        config = system.config
        self.x = 0.0
        self.y = 0.0
        self.vx = 0.0
        self.vy = 0.0
        self.life = system.rng.uniform(config.min_life, config.max_life)
        self.color_class = self._draw_color_class()

    def _draw_color_class(self) -> ColorClass:
        config = self.system.config
        if self.system.rng.uniform_int(DIRECTIONAL_ODDS) == 1:
            return Directional(_copy(config.color_right), _copy(config.color_left))
        return Plain(_copy(config.default_color))

    def step(self, iterations: int) -> None:
        """Advances the particle by one tick of `iterations` sub-steps."""
        self.life -= LIFE_DECREMENT
        if self.life < 0:
            self.respawn()
            return

        system = self.system
        config = system.config
        left = config.padding_x
        right = system.width - config.padding_x
        for _ in range(iterations):
            transition = map_range(self.x, left, right, TRANSITION_LEFT, TRANSITION_RIGHT)
            # noise_scale both lowers the field's spatial frequency and
            # amplifies the resulting angle.
            noise = system.noise.sample(self.x / config.noise_scale, self.y / config.noise_scale)
            angle = noise * transition * 2 * math.pi * config.noise_scale

            self.vx = math.cos(angle) * config.simulation_speed
            self.vy = math.sin(angle) * config.simulation_speed
            self.x += self.vx
            self.y += self.vy

    def in_bounds(self) -> bool:
        """True if the particle is inside the padded box, edges included."""
        config = self.system.config
        return (
            config.padding_x <= self.x <= self.system.width - config.padding_x
            and config.padding_y <= self.y <= self.system.height - config.padding_y
        )

    def check_edge(self) -> None:
        """Respawns the particle if it has left the padded box."""
        if not self.in_bounds():
            self.respawn()

    def respawn(self) -> None:
        system = self.system
        config = system.config
        self.color_class = self._draw_color_class()

        self.x = system.rng.uniform(config.padding_x, system.width - config.padding_x)
        if config.mode == SpawnMode.EVERYWHERE:
            # Weighted towards the top, as particles tend to drift down.
            top = config.padding_y
            bottom = max(system.height * EVERYWHERE_SPAWN_HEIGHT - config.padding_y, top)
            self.y = system.rng.uniform(top, bottom)
        else:
            self.y = config.padding_y
        self.life = config.max_life

    def heading_ratio(self) -> float:
        """|heading| / pi: 0 when moving right, 1 when moving left."""
        return abs(math.atan2(self.vy, self.vx) / math.pi)

    def render_color(self) -> pygame.Color:
        return self.color_class.color_at(self.heading_ratio())


def _copy(color: pygame.Color) -> pygame.Color:
    return pygame.Color(color.r, color.g, color.b)
