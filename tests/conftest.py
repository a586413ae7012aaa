import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pytest

from parameters import SimulationConfig
from simulation import ParticleSystem


class RecordingRenderer:
    """Collects every draw instruction it receives."""
    def __init__(self):
        self.circles = []

    def draw_circle(self, circle):
        self.circles.append(circle)


@pytest.fixture
def make_system():
    """Builds a ParticleSystem on a 200x200 canvas unless told otherwise."""
    def _make(width=200, height=200, renderer=None, **overrides):
        return ParticleSystem(SimulationConfig(**overrides), width, height, renderer=renderer)
    return _make


@pytest.fixture
def recorder():
    return RecordingRenderer()
