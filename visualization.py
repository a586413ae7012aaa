# visualization.py
"""
Handles the rendering of the flow field using Pygame.
"""
import logging
import pygame
import pygame.gfxdraw
from typing import Tuple

from constants import BACKGROUND_COLOR, UI_PANEL_WIDTH, UI_BACKGROUND_ALPHA
from parameters import ParameterError, SpawnMode
from simulation import DrawCircle, ParticleSystem

# --- Data Contracts ---
#
# class SurfaceRenderer:
#   - __init__(self, surface: pygame.Surface):
#     - Inputs: any Pygame surface, on screen or off screen.
#
#   - draw_circle(self, circle: DrawCircle) -> None:
#     - Side Effects: Alpha-blends a filled circle onto the surface. The
#       instruction radius is the circle's diameter in pixels. Never
#       clears the surface, so particle trails persist between frames.
#
# class Visualizer:
#   - __init__(self, width: int, height: int):
#     - Side Effects: Initializes Pygame and opens a window holding the
#       canvas plus a parameter panel on its right.
#
#   - draw(self, system: ParticleSystem) -> bool:
#     - Outputs: False if the user has quit, True otherwise.
#     - Side Effects: Shows the canvas and panel, handles Pygame events
#       and applies keyboard changes through system.set_parameter.

PARAM_NAME_MAP = {
    "seed": "Seed",
    "numParticles": "Particles",
    "mode": "Spawn Mode",
    "minLife": "Min Life",
    "maxLife": "Max Life",
    "noiseScale": "Noise Scale",
    "simulationSpeed": "Speed",
    "paddingY": "Padding Y",
    "paddingX": "Padding X",
    "defaultColour": "Colour",
    "colourL": "Colour Left",
    "colourR": "Colour Right"
}

PARTICLE_COUNT_STEP = 10


class SurfaceRenderer:
    """
    Draws simulation instructions onto a Pygame surface.
    """
    def __init__(self, surface: pygame.Surface):
        self.surface = surface

    def draw_circle(self, circle: DrawCircle) -> None:
        r, g, b, alpha = circle.rgba
        alpha = int(round(min(max(alpha, 0), 255)))
        if alpha == 0:
            return
        color = (r, g, b, alpha)
        x = int(round(circle.x))
        y = int(round(circle.y))
        radius = max(1, int(round(circle.radius / 2)))
        pygame.gfxdraw.filled_circle(self.surface, x, y, radius, color)
        pygame.gfxdraw.aacircle(self.surface, x, y, radius, color)


class Visualizer:
    """
    Shows the canvas in a window and lets the user tweak parameters.
    """
    def __init__(self, width: int, height: int):
        """
        Initializes Pygame and the display window.
        """
        pygame.init()
        pygame.font.init()

        self.sim_width = width
        self.sim_height = height
        self.screen = pygame.display.set_mode((width + UI_PANEL_WIDTH, height))
        pygame.display.set_caption("Flow Field")
        self.clock = pygame.time.Clock()

        # The canvas is cleared once here and never again.
        self.canvas = pygame.Surface((width, height))
        self.canvas.fill(BACKGROUND_COLOR)
        self.renderer = SurfaceRenderer(self.canvas)

        self.ui_panel_surface = pygame.Surface((UI_PANEL_WIDTH, height), pygame.SRCALPHA)
        self.ui_panel_surface.fill((40, 40, 40, UI_BACKGROUND_ALPHA))

        try:
            self.font_main = pygame.font.SysFont("Segoe UI", 14)
            self.font_main_bold = pygame.font.SysFont("Segoe UI", 14, bold=True)
        except pygame.error:
            logging.warning("Segoe UI font not found, falling back to default sans-serif.")
            self.font_main = pygame.font.SysFont(None, 18)
            self.font_main_bold = pygame.font.SysFont(None, 18, bold=True)

        self.text_color_key = (200, 200, 200)
        self.text_color_value = (255, 255, 255)
        self.param_box_color = (60, 60, 60, 160)
        self.param_box_spacing = 4

        logging.info(f"Visualizer initialized with Pygame display ({width + UI_PANEL_WIDTH}x{height}).")

    def _format_value(self, value) -> str:
        if isinstance(value, pygame.Color):
            return f"{value.r}, {value.g}, {value.b}"
        if isinstance(value, SpawnMode):
            return value.name.title()
        if isinstance(value, float):
            return f"{value:.2f}"
        return str(value)

    def _draw_simulation_parameters(self, system: ParticleSystem):
        """Renders the live parameters in a column of boxes."""
        box_padding = 6
        line_height = self.font_main.get_linesize()
        panel_x = self.sim_width + 15
        panel_width = UI_PANEL_WIDTH - 30
        current_y = 15

        entries = [(PARAM_NAME_MAP.get(name, name), self._format_value(value))
                   for name, value in system.config.as_parameters().items()]
        entries.append(("Frame", str(system.frame_count)))

        for key, value in entries:
            box_rect = pygame.Rect(panel_x, current_y, panel_width, line_height + box_padding * 2)
            pygame.draw.rect(self.screen, self.param_box_color, box_rect, border_radius=6)

            key_surf = self.font_main_bold.render(key, True, self.text_color_key)
            value_surf = self.font_main.render(value, True, self.text_color_value)
            self.screen.blit(key_surf, (panel_x + box_padding, current_y + box_padding))
            self.screen.blit(value_surf, value_surf.get_rect(topright=(box_rect.right - box_padding, current_y + box_padding)))

            current_y += box_rect.height + self.param_box_spacing

    def _handle_key(self, key: int, system: ParticleSystem) -> None:
        changes: Tuple = ()
        if key == pygame.K_r:
            changes = ("seed", system.get_parameter("seed") + 1)
        elif key == pygame.K_UP:
            changes = ("numParticles", system.get_parameter("numParticles") + PARTICLE_COUNT_STEP)
        elif key == pygame.K_DOWN:
            changes = ("numParticles", max(system.get_parameter("numParticles") - PARTICLE_COUNT_STEP, 0))
        elif key == pygame.K_m:
            mode = system.get_parameter("mode")
            changes = ("mode", int(SpawnMode.EVERYWHERE if mode == SpawnMode.TOP else SpawnMode.TOP))
        if not changes:
            return
        try:
            system.set_parameter(*changes)
            logging.info(f"Parameter '{changes[0]}' changed to {changes[1]} by user.")
        except ParameterError as e:
            logging.warning(f"Keyboard change ignored: {e}")

    def draw(self, system: ParticleSystem) -> bool:
        """
        Shows the canvas and UI, and handles events.

        Returns:
            bool: False if the simulation should exit, True otherwise.
        """
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logging.info("Quit event received. Shutting down visualizer.")
                return False
            if event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    logging.info("ESC key pressed. Shutting down visualizer.")
                    return False
                self._handle_key(event.key, system)

        self.screen.blit(self.canvas, (0, 0))
        self.screen.fill(BACKGROUND_COLOR, pygame.Rect(self.sim_width, 0, UI_PANEL_WIDTH, self.sim_height))
        self.screen.blit(self.ui_panel_surface, (self.sim_width, 0))
        self._draw_simulation_parameters(system)

        pygame.display.flip()
        return True

    def close(self):
        """Shuts down Pygame."""
        pygame.font.quit()
        pygame.quit()
