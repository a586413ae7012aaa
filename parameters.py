# parameters.py
"""
Simulation configuration and the validation behind the parameter API.

This module defines the SimulationConfig record owned by a
ParticleSystem, the table of externally visible parameter names, and the
errors raised when a get or set request is rejected. The names in the
table are the public contract used by configuration tooling and by the
"simulation_parameters" section of config.json.
"""
import enum
import logging
import math
import numbers
import pygame
from dataclasses import dataclass, field, fields
from typing import Any, Dict

from constants import (
    DEFAULT_COLOR, DEFAULT_COLOR_LEFT, DEFAULT_COLOR_RIGHT,
    NOISE_OCTAVES, NOISE_FALLOFF, MAX_NOISE_FALLOFF,
    MIN_NOISE_SCALE, MAX_NOISE_SCALE, MAX_SIMULATION_SPEED
)
from utils import parse_color

# --- Data Contracts ---
#
# coerce_value(param: ParameterSpec, value: Any) -> Any:
#   - Inputs: a table entry and a caller-supplied value (never missing).
#   - Outputs: the value converted to the field's Python type
#     (int, float, SpawnMode or pygame.Color).
#   - Raises: TypeMismatchError for non-numeric input to a numeric field,
#     InvalidValueError for a numeric value outside the field's own domain.
#     Colours never raise.
#
# check_constraints(config, width, height) -> None:
#   - Raises InvalidValueError if any cross-field rule is broken:
#     0 <= minLife <= maxLife, MIN_NOISE_SCALE <= noiseScale <= MAX_NOISE_SCALE,
#     |simulationSpeed| <= MAX_SIMULATION_SPEED, numParticles >= 0,
#     0 <= padding < half the canvas dimension.
#
# SimulationConfig.from_params(params) -> SimulationConfig:
#   - Also reads the file-only keys noiseOctaves (integer >= 1) and
#     noiseFalloff (0 to MAX_NOISE_FALLOFF), with the same error types.


class ParameterError(Exception):
    """Base class for rejected parameter requests."""


class MissingValueError(ParameterError, ValueError):
    """A set request arrived without a value."""


class TypeMismatchError(ParameterError, TypeError):
    """A numeric parameter was given a non-numeric value."""


class UnknownParameterError(ParameterError, LookupError):
    """The parameter name is not part of the API."""


class InvalidValueError(ParameterError, ValueError):
    """A numeric value is outside the range its parameter allows."""


class SpawnMode(enum.IntEnum):
    TOP = 0
    EVERYWHERE = 1


class ParameterKind(enum.Enum):
    INTEGER = "integer"
    REAL = "real"
    MODE = "mode"
    COLOR = "color"


@dataclass(frozen=True)
class ParameterSpec:
    name: str
    attribute: str
    kind: ParameterKind


PARAMETERS: Dict[str, ParameterSpec] = {
    param.name: param for param in (
        ParameterSpec('seed', 'seed', ParameterKind.INTEGER),
        ParameterSpec('numParticles', 'num_particles', ParameterKind.INTEGER),
        ParameterSpec('mode', 'mode', ParameterKind.MODE),
        ParameterSpec('minLife', 'min_life', ParameterKind.REAL),
        ParameterSpec('maxLife', 'max_life', ParameterKind.REAL),
        ParameterSpec('noiseScale', 'noise_scale', ParameterKind.REAL),
        ParameterSpec('simulationSpeed', 'simulation_speed', ParameterKind.REAL),
        ParameterSpec('paddingY', 'padding_y', ParameterKind.REAL),
        ParameterSpec('paddingX', 'padding_x', ParameterKind.REAL),
        ParameterSpec('defaultColour', 'default_color', ParameterKind.COLOR),
        ParameterSpec('colourL', 'color_left', ParameterKind.COLOR),
        ParameterSpec('colourR', 'color_right', ParameterKind.COLOR),
    )
}


def _default_color():
    return pygame.Color(*DEFAULT_COLOR)

def _default_color_left():
    return pygame.Color(*DEFAULT_COLOR_LEFT)

def _default_color_right():
    return pygame.Color(*DEFAULT_COLOR_RIGHT)


@dataclass
class SimulationConfig:
    """
    The mutable system-of-record for one ParticleSystem.

    Noise detail is configured from file only; it is not part of the
    parameter API.
    """
    seed: int = 1337
    num_particles: int = 100
    mode: SpawnMode = SpawnMode.TOP
    min_life: float = 0.0
    max_life: float = 10.0
    noise_scale: float = 200.0
    simulation_speed: float = 0.2
    padding_y: float = 30.0
    padding_x: float = 30.0
    default_color: pygame.Color = field(default_factory=_default_color)
    color_left: pygame.Color = field(default_factory=_default_color_left)
    color_right: pygame.Color = field(default_factory=_default_color_right)
    noise_octaves: int = NOISE_OCTAVES
    noise_falloff: float = NOISE_FALLOFF

    @classmethod
    def from_params(cls, params: Dict[str, Any]) -> "SimulationConfig":
        """
        Builds a config from the "simulation_parameters" section of config.json.

        Keys use the public parameter names. Unknown keys are rejected so
        that typos in the file do not pass silently.
        """
        config = cls()
        for name, value in params.items():
            if value is None:
                raise MissingValueError(f"Configuration key '{name}' has no value.")
            if name in ('noiseOctaves', 'noiseFalloff'):
                _set_noise_detail(config, name, value)
                continue
            param = lookup(name)
            setattr(config, param.attribute, coerce_value(param, value))
        logging.debug(f"SimulationConfig built from {len(params)} configured values.")
        return config

    def as_parameters(self) -> Dict[str, Any]:
        """Returns every API-visible value keyed by its public name."""
        return {name: getattr(self, param.attribute) for name, param in PARAMETERS.items()}

    def copy(self) -> "SimulationConfig":
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        for param in PARAMETERS.values():
            if param.kind is ParameterKind.COLOR:
                color = values[param.attribute]
                values[param.attribute] = pygame.Color(color.r, color.g, color.b, color.a)
        return SimulationConfig(**values)


def lookup(name: str) -> ParameterSpec:
    """
    Returns the table entry for name.

    Raises:
        UnknownParameterError: If name is not a recognised parameter.
    """
    try:
        return PARAMETERS[name]
    except (KeyError, TypeError):
        raise UnknownParameterError(f"Parameter '{name}' does not exist.") from None

def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)

def _set_noise_detail(config: SimulationConfig, name: str, value: Any) -> None:
    """Validates and stores noiseOctaves (integer >= 1) or noiseFalloff (0 to 0.5)."""
    if not _is_number(value):
        raise TypeMismatchError(
            f"Configuration key '{name}' expects a number but got {type(value).__name__}."
        )
    if not math.isfinite(value):
        raise InvalidValueError(f"Configuration key '{name}' must be finite, got {value}.")
    if name == 'noiseOctaves':
        if value != int(value):
            raise TypeMismatchError(f"noiseOctaves expects an integer but got {value}.")
        if value < 1:
            raise InvalidValueError(f"noiseOctaves must be >= 1, got {value}.")
        config.noise_octaves = int(value)
    else:
        if not 0 <= value <= MAX_NOISE_FALLOFF:
            raise InvalidValueError(
                f"noiseFalloff must be in [0, {MAX_NOISE_FALLOFF}], got {value}."
            )
        config.noise_falloff = float(value)

def coerce_value(param: ParameterSpec, value: Any) -> Any:
    """Converts value to the field type of param, validating its own domain."""
    if param.kind is ParameterKind.COLOR:
        return parse_color(value)

    if not _is_number(value):
        raise TypeMismatchError(
            f"Parameter '{param.name}' expects a number but got {type(value).__name__}."
        )
    if not math.isfinite(value):
        raise InvalidValueError(f"Parameter '{param.name}' must be finite, got {value}.")

    if param.kind is ParameterKind.REAL:
        return float(value)

    if value != int(value):
        raise TypeMismatchError(
            f"Parameter '{param.name}' expects an integer but got {value}."
        )
    value = int(value)
    if param.kind is ParameterKind.MODE:
        try:
            return SpawnMode(value)
        except ValueError:
            raise InvalidValueError(
                f"Parameter 'mode' must be 0 (top) or 1 (everywhere), got {value}."
            ) from None
    return value

def check_constraints(config: SimulationConfig, width: float, height: float) -> None:
    """Validates the cross-field rules of config against the canvas size."""
    if config.num_particles < 0:
        raise InvalidValueError(f"numParticles must be >= 0, got {config.num_particles}.")
    if config.min_life < 0:
        raise InvalidValueError(f"minLife must be >= 0, got {config.min_life}.")
    if config.min_life > config.max_life:
        raise InvalidValueError(
            f"minLife ({config.min_life}) must not exceed maxLife ({config.max_life})."
        )
    if not MIN_NOISE_SCALE <= config.noise_scale <= MAX_NOISE_SCALE:
        raise InvalidValueError(
            f"noiseScale must be in [{MIN_NOISE_SCALE}, {MAX_NOISE_SCALE}], got {config.noise_scale}."
        )
    if abs(config.simulation_speed) > MAX_SIMULATION_SPEED:
        raise InvalidValueError(
            f"simulationSpeed must be within +/-{MAX_SIMULATION_SPEED}, got {config.simulation_speed}."
        )
    if not 0 <= config.padding_x < width / 2:
        raise InvalidValueError(
            f"paddingX must be in [0, {width / 2}) for a canvas {width} wide, got {config.padding_x}."
        )
    if not 0 <= config.padding_y < height / 2:
        raise InvalidValueError(
            f"paddingY must be in [0, {height / 2}) for a canvas {height} high, got {config.padding_y}."
        )
